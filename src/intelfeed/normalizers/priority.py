"""Priority heuristics expressed as data.

Keyword tables are ordered lists of (pattern, priority) pairs; the first
pattern that matches wins. Numeric tables are ordered cut points from
the highest tier down. Sources can be tuned by editing the tables
without touching the normalization pipeline.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel

from intelfeed.models import ItemContext, Priority, PriorityMapper


class KeywordRule(BaseModel):
    """Assign ``priority`` when ``pattern`` matches the text."""

    pattern: re.Pattern[str]
    priority: Priority


class Threshold(BaseModel):
    """Assign ``priority`` when a value reaches ``minimum``."""

    minimum: float
    priority: Priority
    inclusive: bool = True

    def matches(self, value: float) -> bool:
        return value >= self.minimum if self.inclusive else value > self.minimum


def keyword_rules(*pairs: tuple[str, Priority]) -> list[KeywordRule]:
    """Build a case-insensitive keyword table from (regex, priority) pairs."""
    return [
        KeywordRule(pattern=re.compile(pattern, re.IGNORECASE), priority=priority)
        for pattern, priority in pairs
    ]


def keyword_priority(
    text: str, rules: Iterable[KeywordRule], default: Priority = Priority.LOW
) -> Priority:
    for rule in rules:
        if rule.pattern.search(text or ""):
            return rule.priority
    return default


def threshold_priority(
    value: float | None, thresholds: Iterable[Threshold], default: Priority = Priority.LOW
) -> Priority:
    if value is None:
        return default
    for threshold in thresholds:
        if threshold.matches(value):
            return threshold.priority
    return default


def keyword_mapper(rules: list[KeywordRule], default: Priority = Priority.LOW) -> PriorityMapper:
    """Priority mapper over the title, summary and categories of an item."""

    def mapper(context: ItemContext) -> Priority:
        return keyword_priority(context.text, rules, default)

    return mapper


C, H, M, L = Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

LAUNCH_RULES = keyword_rules(
    (r"\b(scrub\w*|abort\w*|delay\w*|hold|anomal\w*|mishap|explo(?:sion|ded))\b", C),
    (r"\b(launch\w*|lift-?off|ignition|countdown|static fire)\b", H),
    (r"\b(payload|mission|rocket|satellite|orbit\w*)\b", M),
)

SPACE_AGENCY_RULES = keyword_rules(
    (r"\b(emergency|anomal\w*|loss of signal|abort\w*|contingency)\b", C),
    (r"\b(launch\w*|docking|undocking|landing|spacewalk|splashdown)\b", H),
    (r"\b(mission|science|telescope|rover|astronaut\w*|spacecraft)\b", M),
)

DEFENSE_RULES = keyword_rules(
    (r"\b(missile strike|attack\w*|invasion|nuclear|casualt\w*|mobiliz\w*)\b", C),
    (r"\b(deploy\w*|exercise|drill|sanction\w*|hypersonic|drone strike|intercept\w*)\b", H),
    (r"\b(contract\w*|procurement|budget|pentagon|navy|army|air force|nato)\b", M),
)

GEOPOLITICAL_RULES = keyword_rules(
    (r"\b(coup|invasion|war|assassinat\w*|martial law|ceasefire collapse)\b", C),
    (r"\b(sanction\w*|summit|election\w*|protest\w*|border|troops|embargo)\b", H),
    (r"\b(diplomat\w*|treaty|talks|minister|trade|ambassador)\b", M),
)

INVESTIGATIVE_RULES = keyword_rules(
    (r"\b(breaking|whistle-?blower\w*)\b", C),
    (r"\b(exclusive|leak\w*|secret|classified|expos[eé]\w*|reveal\w*|investigation)\b", H),
    (r"\b(documents?|report\w*|analysis|records|data)\b", M),
)

CYBER_RULES = keyword_rules(
    (r"\b(zero[- ]day|0-day|actively exploited|emergency patch|critical vulnerabilit\w*)\b", C),
    (r"\b(ransomware|breach\w*|exploit\w*|vulnerabilit\w*|malware|backdoor|botnet)\b", H),
    (r"\b(patch\w*|update\w*|advisory|phishing|security)\b", M),
)

CLIMATE_RULES = keyword_rules(
    (r"\b(catastroph\w*|record[- ]breaking|state of emergency|evacuat\w*)\b", C),
    (r"\b(heat ?wave|flood\w*|wildfire\w*|hurricane|cyclone|typhoon|drought)\b", H),
    (r"\b(climate|emission\w*|adaptation|resilien\w*|carbon)\b", M),
)

AI_GOVERNANCE_RULES = keyword_rules(
    (r"\b(ban\w*|moratorium|emergency)\b", C),
    (r"\b(regulat\w*|legislation|executive order|lawsuit|enforcement|act passe[sd])\b", H),
    (r"\b(polic(?:y|ies)|guideline\w*|framework|safety|audit\w*|governance)\b", M),
)

PRIVACY_RULES = keyword_rules(
    (r"\b(mass surveillance|data breach\w*|spyware|stalkerware)\b", C),
    (r"\b(surveillance|facial recognition|tracking|subpoena\w*|backdoor|warrant\w*)\b", H),
    (r"\b(privacy|gdpr|data protection|consent|encryption)\b", M),
)

FINANCIAL_TRANSPARENCY_RULES = keyword_rules(
    (r"\b(indict\w*|fraud|money laundering|bribe\w*)\b", C),
    (r"\b(dark money|lobby\w*|campaign financ\w*|offshore|shell compan\w*)\b", H),
    (r"\b(donation\w*|donor\w*|filing\w*|disclosure\w*|spending|super pac|pac)\b", M),
)

LEAK_ARCHIVE_RULES = keyword_rules(
    (r"\b(government|military|intelligence|police|ministry)\b", C),
    (r"\b(emails?|documents?|database|leak\w*|hack\w*)\b", H),
)

NOAA_SEVERITY_RULES = keyword_rules(
    (r"extreme|critical", C),
    (r"severe|major|significant", H),
    (r"moderate|minor", M),
)

ADVISORY_SEVERITY_RULES = keyword_rules(
    (r"^critical$", C),
    (r"^high$", H),
    (r"^low$", L),
)

LAUNCH_STATUS_RULES = keyword_rules(
    (r"\b(hold|failure|in flight)\b", C),
    (r"\b(go|launch in progress)\b", H),
    (r"\b(success\w*|to be confirmed|tbc)\b", M),
)

# ---------------------------------------------------------------------------
# Numeric cut points
# ---------------------------------------------------------------------------

MAGNITUDE_THRESHOLDS = [
    Threshold(minimum=7.0, priority=C),
    Threshold(minimum=6.0, priority=H),
    Threshold(minimum=4.0, priority=M),
]

SOCIAL_SCORE_THRESHOLDS = [
    Threshold(minimum=1000, priority=C, inclusive=False),
    Threshold(minimum=500, priority=H, inclusive=False),
    Threshold(minimum=100, priority=M, inclusive=False),
]

SENTIMENT_THRESHOLDS = [
    Threshold(minimum=0.8, priority=C, inclusive=False),
    Threshold(minimum=0.5, priority=H, inclusive=False),
    Threshold(minimum=0.2, priority=M, inclusive=False),
]

CVSS_THRESHOLDS = [
    Threshold(minimum=9.0, priority=C),
    Threshold(minimum=7.0, priority=H),
    Threshold(minimum=4.0, priority=M),
]

# Bits per second on an active DSN link
DSN_RATE_THRESHOLDS = [
    Threshold(minimum=1_000_000, priority=C),
    Threshold(minimum=100_000, priority=H),
]
