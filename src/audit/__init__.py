"""Классификация заданий и оценка стоимости."""

from .cost import CostEstimator, CostStats
from .engine import AuditEngine
from .pricing import DEFAULT_PRICING, PricingTable
from .resolver import DECISION_TABLE, Rule, VerdictResolver
from .signals import AI_FAMILY, BASH_FAMILY, HAIKU_FAMILY, PatternFamily, SignalScorer, SignalScores

__all__ = [
    "AuditEngine",
    "CostEstimator",
    "CostStats",
    "DEFAULT_PRICING",
    "PricingTable",
    "DECISION_TABLE",
    "Rule",
    "VerdictResolver",
    "AI_FAMILY",
    "BASH_FAMILY",
    "HAIKU_FAMILY",
    "PatternFamily",
    "SignalScorer",
    "SignalScores",
]
