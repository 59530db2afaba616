"""Global constants for the application.

Centralizes magic numbers and configuration values.
"""

# =============================================================================
# Time
# =============================================================================

MS_PER_DAY = 86_400_000
MINUTES_PER_DAY = 1440
MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
DAYS_PER_MONTH = 30  # Fixed billing convention, not a calendar month


# =============================================================================
# Pricing ($ per 1M tokens, input+output blend)
# =============================================================================

DEFAULT_MODEL_KEY = "sonnet"  # Mid tier, used when a job has no model
MID_TIER_RATE = 6.0
CHEAPEST_TIER_KEY = "haiku"

MIN_TOKENS_PER_RUN = 5_000  # Every invocation has fixed prompt overhead
TOKENS_PER_SUMMARY_CHAR = 2


# =============================================================================
# Verdict thresholds
# =============================================================================

BASH_SCORE_THRESHOLD = 2  # Bash signals needed for bash-replaceable
MAX_RUNS_PER_DAY = 10  # Above this a job is considered chatty
MIN_COST_PER_RUN = 0.005  # Runs cheaper than this are not worth throttling
MIN_SUGGESTED_RUNS_PER_DAY = 4
FREQUENCY_REDUCTION_FACTOR = 4
FREQUENCY_SAVINGS_RATIO = 0.75


# =============================================================================
# Rounding (display only)
# =============================================================================

MONEY_DECIMALS = 4
MONTHLY_DECIMALS = 2
RATE_DECIMALS = 1


# =============================================================================
# Run history
# =============================================================================

FINISHED_STATUS = "finished"
RUN_FILE_SUFFIX = ".jsonl"
