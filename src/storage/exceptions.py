"""Исключения для загрузки заданий и истории запусков."""


class StorageError(Exception):
    """Base class for job/run loading errors."""
    pass


class JobsFileNotFoundError(StorageError):
    """Raised when the jobs definition file does not exist."""
    pass


class JobsFileFormatError(StorageError):
    """Raised when the jobs file is not valid JSON."""
    pass


class PricingFileError(StorageError):
    """Raised when a pricing override file cannot be read."""
    pass
