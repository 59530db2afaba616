"""Model pricing table.

Rates are dollars per 1M tokens (rough input+output blend). Keys are
matched as substrings of the job's model identifier, in table order,
so versioned ids like ``claude-sonnet-4-5`` resolve to a family rate.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from src.constants import CHEAPEST_TIER_KEY, DEFAULT_MODEL_KEY, MID_TIER_RATE


DEFAULT_RATES: tuple[tuple[str, float], ...] = (
    ("claude-opus-4-6", 30.0),
    ("claude-opus-4-5", 30.0),
    ("claude-sonnet-4-5", 6.0),
    ("claude-sonnet-4-0", 6.0),
    ("claude-3-5-sonnet", 6.0),
    ("claude-3-5-haiku", 1.6),
    ("claude-haiku-3-5", 1.6),
    ("haiku", 1.6),
    ("sonnet", 6.0),
    ("opus", 30.0),
)


@dataclass(frozen=True)
class PricingTable:
    """Immutable snapshot of model rates.

    Attributes:
        rates: Ordered (key, rate) pairs; first substring match wins.
        fallback_rate: Rate for models that match no key.
        cheapest_key: Family name of the cheapest tier, used in advice.
    """

    rates: tuple[tuple[str, float], ...] = DEFAULT_RATES
    fallback_rate: float = MID_TIER_RATE
    cheapest_key: str = CHEAPEST_TIER_KEY

    @classmethod
    def from_mapping(
        cls,
        rates: Mapping[str, float],
        fallback_rate: float = MID_TIER_RATE,
        cheapest_key: str = CHEAPEST_TIER_KEY,
    ) -> "PricingTable":
        """Build a table from a ``{key: rate}`` mapping (insertion order kept)."""
        return cls(
            rates=tuple((str(key), float(rate)) for key, rate in rates.items()),
            fallback_rate=float(fallback_rate),
            cheapest_key=cheapest_key,
        )

    def match(self, model: Optional[str]) -> Optional[str]:
        """Return the first key contained in ``model``, if any."""
        model = model or ""
        for key, _ in self.rates:
            if key in model:
                return key
        return None

    def rate_for(self, model: Optional[str]) -> float:
        """Dollar rate per 1M tokens for ``model``."""
        key = self.match(model or DEFAULT_MODEL_KEY)
        if key is None:
            return self.fallback_rate
        return dict(self.rates)[key]

    @property
    def cheapest_rate(self) -> float:
        if not self.rates:
            return self.fallback_rate
        return min(rate for _, rate in self.rates)

    def is_cheapest(self, model: Optional[str]) -> bool:
        """True when ``model`` already runs on the cheapest tier."""
        model = model or ""
        return self.cheapest_key in model or self.rate_for(model) <= self.cheapest_rate

    def to_dict(self) -> dict[str, float]:
        return dict(self.rates)


DEFAULT_PRICING = PricingTable()
