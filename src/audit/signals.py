"""Intent signals: regex families scored against a job's instruction text.

Each family is a flat list of independent patterns. A family's score is
the number of its patterns that match at least once; families never
influence each other here. Conflicts are resolved by the verdict rules.
"""

import re
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class PatternFamily:
    """Named group of intent patterns."""

    name: str
    patterns: tuple[re.Pattern, ...]

    @classmethod
    def compile(cls, name: str, sources: Iterable[str]) -> "PatternFamily":
        return cls(name, tuple(re.compile(source, re.IGNORECASE) for source in sources))

    def matches(self, text: str) -> list[str]:
        """Sources of the patterns found in ``text``."""
        return [pattern.pattern for pattern in self.patterns if pattern.search(text)]

    def score(self, text: str) -> int:
        return sum(1 for pattern in self.patterns if pattern.search(text))


# Tasks a shell script could do without understanding language
BASH_FAMILY = PatternFamily.compile("bash", [
    r"\bgit\s+(push|pull|status|add|commit)\b",
    r"\bpush\w*\s+(?:\w+\s+)?to\s+(?:the\s+)?(?:remote|origin|upstream)\b",
    r"\brm\s+-",
    r"\bfind\s+.*-delete\b",
    r"\bclean(up|ing|ed)?\b.*\b(session|file|log)",
    r"\bdelete\s+(old|stale|expired)",
    r"\bcheck\s+(if|whether|that)\s+.*\b(running|alive|process|port)\b",
    r"\bps\s+aux",
    r"\bdisk\s+(space|usage)",
    r"\bdf\s+-",
    r"\bdu\s+-",
    r"\blog\s+rotat",
    r"\bsync.*push",
    r"\bgit-sync",
    r"\bwatchdog",
    r"\bhealth\s*check",
    r"\bkill\s+",
    r"\bpkill\b",
    r"\bsystemctl\b",
    r"\bcurl\s+.*status",
    r"\brate.limit.*check",
    r"\brun\b.*\.sh\b",
    r"\breply\s+HEARTBEAT_OK\s+if\s+nothing",
    r"\breport\s+(output|result)\s+(only\s+)?if",
])

# Text transformation a small model handles fine
HAIKU_FAMILY = PatternFamily.compile("haiku", [
    r"\bsummar(y|ize|ise)\b",
    r"\bformat\s+(as|into|for)\b",
    r"\blist\s+(all|the)\b",
    r"\bcount\s+(the|how)\b",
    r"\bextract\s+(key|main|important)\b",
    r"\btemplate",
    r"\bsimple\s+report",
])

# Work that needs judgment
AI_FAMILY = PatternFamily.compile("ai", [
    r"\b(write|create|generate|compose|draft)\s+(?:(?:a|an|the)\s+)?(?:\w+\s+)?"
    r"(article|post|story|essay|product|content|code|app|newsletter)",
    r"\b(analyze|analyse|research|investigate|deep.dive)\b",
    r"\b(creative|brainstorm|ideate)\b",
    r"\b(build|implement|develop|architect)\b",
    r"\b(review|audit|evaluate)\s+(code|design|architecture)",
    r"\bcodex\b",
    r"\bweb.*search",
])


@dataclass(frozen=True)
class SignalScores:
    bash_score: int = 0
    haiku_score: int = 0
    ai_score: int = 0


class SignalScorer:
    """Scores intent text against the bash / haiku / ai families."""

    def __init__(
        self,
        bash: PatternFamily = BASH_FAMILY,
        haiku: PatternFamily = HAIKU_FAMILY,
        ai: PatternFamily = AI_FAMILY,
    ):
        self.bash = bash
        self.haiku = haiku
        self.ai = ai

    @property
    def families(self) -> tuple[PatternFamily, ...]:
        return (self.bash, self.haiku, self.ai)

    def score(self, intent_text: str) -> SignalScores:
        text = intent_text or ""
        return SignalScores(
            bash_score=self.bash.score(text),
            haiku_score=self.haiku.score(text),
            ai_score=self.ai.score(text),
        )

    def explain(self, intent_text: str) -> dict[str, list[str]]:
        """Matched pattern sources per family name."""
        text = intent_text or ""
        return {family.name: family.matches(text) for family in self.families}
