"""Cross-source classification rule chain.

Rules are data: a name, a predicate over one record, a priority floor and
the tags to add. ``apply`` runs them in list order so a later rule sees
the tags and priority left by an earlier one. Priority is only ever
raised to the floor, never lowered.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from intelfeed.config import DEFAULT_CONFIG, IntelFeedConfig
from intelfeed.models import NormalizedDataItem, Priority
from intelfeed.normalizers.base import as_number
from intelfeed.text import merge_tags

logger = logging.getLogger(__name__)

CVE_RE = re.compile(r"\bCVE-\d{4}-\d{4,}\b", re.IGNORECASE)


class RuleOverride(BaseModel):
    """Partial update a rule contributes to one record."""

    priority: Priority | None = None
    tags: list[str] = Field(default_factory=list)


class ClassifierRule(BaseModel):
    """One inspectable classification rule."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str = ""
    predicate: Callable[[NormalizedDataItem], bool]
    priority_floor: Priority | None = None
    tags: list[str] = Field(default_factory=list)
    dynamic_tags: Callable[[NormalizedDataItem], list[str]] | None = None

    def evaluate(self, item: NormalizedDataItem) -> RuleOverride | None:
        if not self.predicate(item):
            return None
        tags = list(self.tags)
        if self.dynamic_tags is not None:
            tags.extend(self.dynamic_tags(item))
        return RuleOverride(priority=self.priority_floor, tags=tags)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def cve_ids(item: NormalizedDataItem) -> list[str]:
    """Lower-cased CVE ids named in the title, summary or ``metadata.cveId``."""
    found = CVE_RE.findall(f"{item.title} {item.summary}")
    metadata_id = item.metadata.get("cveId")
    if isinstance(metadata_id, str) and CVE_RE.fullmatch(metadata_id.strip()):
        found.append(metadata_id.strip())
    return merge_tags(found)


def _has_cve(item: NormalizedDataItem) -> bool:
    return bool(cve_ids(item))


def _is_extreme_weather(item: NormalizedDataItem) -> bool:
    return str(item.metadata.get("severity") or "").strip().lower() == "extreme"


def _magnitude_at_least(minimum: float) -> Callable[[NormalizedDataItem], bool]:
    def predicate(item: NormalizedDataItem) -> bool:
        magnitude = as_number(item.metadata.get("magnitude"))
        return magnitude is not None and magnitude >= minimum

    return predicate


def _score_at_least(minimum: float) -> Callable[[NormalizedDataItem], bool]:
    def predicate(item: NormalizedDataItem) -> bool:
        score = as_number(item.metadata.get("score"))
        return score is not None and score >= minimum

    return predicate


def _is_breaking(item: NormalizedDataItem) -> bool:
    return item.title.lstrip().lower().startswith("breaking")


def default_rules(settings: IntelFeedConfig | None = None) -> list[ClassifierRule]:
    """The standard chain, thresholds and enabled set taken from config."""
    classifier = (settings or DEFAULT_CONFIG).classifier
    rules = [
        ClassifierRule(
            name="cve",
            description="CVE identifier in the text or metadata",
            predicate=_has_cve,
            priority_floor=Priority.HIGH,
            tags=["cve"],
            dynamic_tags=cve_ids,
        ),
        ClassifierRule(
            name="extreme-weather",
            description="Weather alert with extreme severity",
            predicate=_is_extreme_weather,
            priority_floor=Priority.CRITICAL,
            tags=["extreme-weather"],
        ),
        ClassifierRule(
            name="major-quake-critical",
            description=f"Magnitude >= {classifier.seismic_critical:g}",
            predicate=_magnitude_at_least(classifier.seismic_critical),
            priority_floor=Priority.CRITICAL,
            tags=["major-quake"],
        ),
        ClassifierRule(
            name="major-quake-high",
            description=f"Magnitude >= {classifier.seismic_high:g}",
            predicate=_magnitude_at_least(classifier.seismic_high),
            priority_floor=Priority.HIGH,
            tags=["major-quake"],
        ),
        ClassifierRule(
            name="viral-social",
            description=f"Social score >= {classifier.social_viral_score}",
            predicate=_score_at_least(classifier.social_viral_score),
            priority_floor=Priority.HIGH,
            tags=["viral"],
        ),
        ClassifierRule(
            name="breaking",
            description="Title starts with 'breaking'",
            predicate=_is_breaking,
            priority_floor=Priority.HIGH,
            tags=["breaking"],
        ),
    ]
    enabled = set(classifier.enabled_rules)
    return [rule for rule in rules if rule.name in enabled]


def merge_override(item: NormalizedDataItem, override: RuleOverride) -> NormalizedDataItem:
    """Raise priority to the override's floor and union its tags."""
    priority = item.priority
    if override.priority is not None and override.priority > priority:
        priority = override.priority
    tags = merge_tags(item.tags, override.tags)
    if priority == item.priority and tags == item.tags:
        return item
    return item.model_copy(update={"priority": priority, "tags": tags})


def classify_item(item: NormalizedDataItem, rules: list[ClassifierRule]) -> NormalizedDataItem:
    for rule in rules:
        override = rule.evaluate(item)
        if override is None:
            continue
        logger.debug("Rule %s matched %s", rule.name, item.id)
        item = merge_override(item, override)
    return item


def apply(
    items: list[NormalizedDataItem],
    rules: list[ClassifierRule] | None = None,
    *,
    settings: IntelFeedConfig | None = None,
) -> list[NormalizedDataItem]:
    """Run the rule chain over every record; returns new records."""
    chain = default_rules(settings) if rules is None else rules
    return [classify_item(item, chain) for item in items]
