"""RSS-backed sources -- thin configurations over the generic normalizer.

Each source supplies its category, base tags, trust defaults, a keyword
priority table and optional tag/metadata hooks. Tag hooks are tables of
(pattern, tag) pairs so they can be extended like the priority tables.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qs, urlparse

from intelfeed.config import IntelFeedConfig
from intelfeed.models import (
    ItemContext,
    MetadataHook,
    NormalizedDataItem,
    Priority,
    RSSNormalizerConfig,
    TagHook,
    UrlTransform,
    VerificationStatus,
)
from intelfeed.normalizers import priority as p
from intelfeed.normalizers.rss import normalize_rss_feed
from intelfeed.text import humanize_slug, slugify


def pattern_tags(*pairs: tuple[str, str]) -> TagHook:
    """Tag hook adding ``tag`` for every ``pattern`` found in the item text."""
    table = [(re.compile(pattern, re.IGNORECASE), tag) for pattern, tag in pairs]

    def hook(context: ItemContext) -> list[str]:
        text = context.text
        return [tag for pattern, tag in table if pattern.search(text)]

    return hook


def pattern_values(key: str, pattern: str) -> MetadataHook:
    """Metadata hook storing every distinct match of ``pattern`` under ``key``."""
    regex = re.compile(pattern, re.IGNORECASE)

    def hook(context: ItemContext) -> dict[str, Any]:
        found: list[str] = []
        for match in regex.finditer(context.text):
            value = " ".join(match.group(0).split())
            if value not in found:
                found.append(value)
        return {key: found} if found else {}

    return hook


# ---------------------------------------------------------------------------
# Space launches
# ---------------------------------------------------------------------------

LAUNCH_VEHICLE_RE = re.compile(
    r"\b(Falcon 9|Falcon Heavy|Starship|Super Heavy|Atlas V|Vulcan(?: Centaur)?|"
    r"Delta IV Heavy|Electron|Neutron|New Glenn|New Shepard|Ariane [56]|Vega(?:-C)?|"
    r"Soyuz(?:-2\.1[ab])?|Long March \d+\w*|H3|H-IIA|PSLV|GSLV|LVM3|SLS|Antares|"
    r"Minotaur \w+|Firefly Alpha|Kuaizhou-?\d*)\b",
    re.IGNORECASE,
)

LAUNCH_SITE_RE = re.compile(
    r"\b(Cape Canaveral|Kennedy Space Center|Vandenberg|Wallops|Baikonur|Plesetsk|"
    r"Vostochny|Kourou|Mahia|Starbase|Boca Chica|Tanegashima|Jiuquan|Xichang|"
    r"Wenchang|Taiyuan|Sriharikota)\b",
    re.IGNORECASE,
)

_launch_tags = pattern_tags(
    (r"\bT-\s?\d|\bT-minus\b|\bcountdown\b", "countdown"),
    (r"\b(scrub\w*|abort\w*|anomal\w*|mishap|failure|explo(?:sion|ded))\b", "anomaly"),
    (r"\bstarlink\b", "starlink"),
    (r"\b(crew|astronaut\w*)\b", "crewed"),
)


def _launch_additional_tags(context: ItemContext) -> list[str]:
    tags = _launch_tags(context)
    if p.keyword_priority(context.text, p.LAUNCH_RULES) is Priority.CRITICAL:
        tags.append("mission-critical")
    return tags


def _launch_metadata(context: ItemContext) -> dict[str, Any]:
    metadata: dict[str, Any] = {}
    vehicle = LAUNCH_VEHICLE_RE.search(context.text)
    if vehicle:
        metadata["vehicle"] = vehicle.group(1)
    site = LAUNCH_SITE_RE.search(context.text)
    if site:
        metadata["launchSite"] = site.group(1)
    return metadata


SPACE_LAUNCH = RSSNormalizerConfig(
    source_fallback="Spaceflight Launch Schedule",
    category="space-operations",
    id_prefix="launch",
    base_tags=["launch", "space"],
    trust_rating=85,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=88,
    priority_mapper=p.keyword_mapper(p.LAUNCH_RULES),
    additional_tags=_launch_additional_tags,
    metadata_enricher=_launch_metadata,
)

SPACE_AGENCY = RSSNormalizerConfig(
    source_fallback="NASA News",
    category="space",
    id_prefix="space-agency",
    base_tags=["space", "agency"],
    trust_rating=95,
    verification_status=VerificationStatus.OFFICIAL,
    data_quality=95,
    priority_mapper=p.keyword_mapper(p.SPACE_AGENCY_RULES),
    additional_tags=pattern_tags(
        (r"\bartemis\b", "artemis"),
        (r"\b(ISS|international space station)\b", "iss"),
        (r"\b(JWST|webb)\b", "jwst"),
        (r"\b(mars|perseverance|curiosity)\b", "mars"),
        (r"\b(moon|lunar)\b", "lunar"),
    ),
)

# ---------------------------------------------------------------------------
# Security and geopolitics
# ---------------------------------------------------------------------------

DEFENSE_NEWS = RSSNormalizerConfig(
    source_fallback="Defense News",
    category="defense",
    id_prefix="defense",
    base_tags=["defense", "military"],
    trust_rating=82,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=85,
    priority_mapper=p.keyword_mapper(p.DEFENSE_RULES),
    additional_tags=pattern_tags(
        (r"\barmy\b", "army"),
        (r"\bnavy\b|\bnaval\b", "navy"),
        (r"\bair force\b", "air-force"),
        (r"\bspace force\b", "space-force"),
        (r"\bmarines?\b", "marines"),
        (r"\bNATO\b", "nato"),
        (r"\b(missile|hypersonic)\b", "missiles"),
    ),
)

GEOPOLITICAL = RSSNormalizerConfig(
    source_fallback="Geopolitical Monitor",
    category="geopolitics",
    id_prefix="geo",
    base_tags=["geopolitics", "international"],
    trust_rating=78,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=80,
    priority_mapper=p.keyword_mapper(p.GEOPOLITICAL_RULES),
    additional_tags=pattern_tags(
        (r"\bukrain\w*\b", "ukraine"),
        (r"\brussia\w*\b", "russia"),
        (r"\bchin(a|ese)\b", "china"),
        (r"\btaiwan\w*\b", "taiwan"),
        (r"\b(israel\w*|gaza)\b", "middle-east"),
        (r"\biran\w*\b", "iran"),
        (r"\bnorth korea\w*\b", "north-korea"),
        (r"\b(united nations|UN security council)\b", "un"),
    ),
)

CYBER_SECURITY = RSSNormalizerConfig(
    source_fallback="Cyber Security News",
    category="security",
    id_prefix="cyber",
    base_tags=["cybersecurity", "security"],
    trust_rating=80,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=85,
    priority_mapper=p.keyword_mapper(p.CYBER_RULES),
    additional_tags=pattern_tags(
        (r"\bransomware\b", "ransomware"),
        (r"\bzero[- ]day\b|\b0-day\b", "zero-day"),
        (r"\b(data )?breach\w*\b", "data-breach"),
        (r"\bphishing\b", "phishing"),
        (r"\bAPT\s?\d+\b|\bnation[- ]state\b", "apt"),
    ),
    metadata_enricher=pattern_values("cveIds", r"\bCVE-\d{4}-\d{4,}\b"),
)

# ---------------------------------------------------------------------------
# Investigative journalism
# ---------------------------------------------------------------------------

INVESTIGATIVE = RSSNormalizerConfig(
    source_fallback="Investigative Journalism",
    category="investigative",
    id_prefix="investigative",
    base_tags=["investigative", "journalism"],
    trust_rating=85,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=88,
    priority_mapper=p.keyword_mapper(p.INVESTIGATIVE_RULES),
    additional_tags=pattern_tags(
        (
            r"\b(leak\w*|whistle-?blow\w*|classified|secret files|document trove|"
            r"documents? (reveal|expose|show)\w*)\b",
            "whistleblower",
        ),
        (r"\bexclusive\b", "exclusive"),
        (r"\bsurveillance\b", "surveillance"),
        (r"\bcorruption\b", "corruption"),
    ),
)

LEAK_ARCHIVE_BASE_URL = "https://ddosecrets.com/article/"


def _leak_title(title: str, context: ItemContext) -> str:
    if "_" in title or (title.isupper() and len(title) > 3):
        return humanize_slug(title)
    return title


def _leak_url(link: str, context: ItemContext) -> UrlTransform | None:
    """Rewrite magnet links to the dataset's companion web page."""
    if not link.startswith("magnet:"):
        return None

    query = parse_qs(urlparse(link).query)
    display_name = (query.get("dn") or [""])[0]
    info_hash = ""
    for topic in query.get("xt", []):
        if topic.lower().startswith("urn:btih:"):
            info_hash = topic.split(":")[-1].lower()
            break

    companion = ""
    for candidate in (context.raw.get("comments"), context.raw.get("guid"), context.raw.get("id")):
        if isinstance(candidate, str) and candidate.startswith(("http://", "https://")):
            companion = candidate
            break
    if not companion:
        companion = LEAK_ARCHIVE_BASE_URL + (slugify(display_name or context.title) or info_hash)

    metadata: dict[str, Any] = {"magnetUri": link}
    if info_hash:
        metadata["infoHash"] = info_hash
    if display_name:
        metadata["displayName"] = display_name
    return UrlTransform(url=companion, tags=["torrent"], metadata=metadata)


LEAK_ARCHIVE = RSSNormalizerConfig(
    source_fallback="Distributed Denial of Secrets",
    category="leaks",
    id_prefix="leak",
    base_tags=["leak", "transparency"],
    trust_rating=70,
    verification_status=VerificationStatus.UNVERIFIED,
    data_quality=75,
    priority_mapper=p.keyword_mapper(p.LEAK_ARCHIVE_RULES, default=Priority.MEDIUM),
    transform_title=_leak_title,
    transform_url=_leak_url,
)

# ---------------------------------------------------------------------------
# Policy, rights and accountability
# ---------------------------------------------------------------------------

CLIMATE_RESILIENCE = RSSNormalizerConfig(
    source_fallback="Climate Resilience Watch",
    category="climate",
    id_prefix="climate",
    base_tags=["climate", "environment"],
    trust_rating=80,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=82,
    priority_mapper=p.keyword_mapper(p.CLIMATE_RULES),
    additional_tags=pattern_tags(
        (r"\bflood\w*\b", "flooding"),
        (r"\bwildfire\w*\b", "wildfire"),
        (r"\b(heat ?wave|extreme heat)\b", "heat"),
        (r"\b(hurricane|cyclone|typhoon)\b", "tropical-storm"),
        (r"\bdrought\b", "drought"),
    ),
)

AI_GOVERNANCE = RSSNormalizerConfig(
    source_fallback="AI Governance Monitor",
    category="ai-governance",
    id_prefix="ai-gov",
    base_tags=["ai", "governance", "policy"],
    trust_rating=78,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=80,
    priority_mapper=p.keyword_mapper(p.AI_GOVERNANCE_RULES),
    additional_tags=pattern_tags(
        (r"\bAI Act\b", "eu-ai-act"),
        (r"\b(EU|European Union|Brussels)\b", "eu"),
        (r"\b(congress|senate|white house|FTC)\b", "us"),
        (r"\b(UK|Britain|British)\b", "uk"),
        (r"\b(frontier model|foundation model|LLM)s?\b", "frontier-models"),
    ),
)

PRIVACY_ADVOCACY = RSSNormalizerConfig(
    source_fallback="Privacy Advocacy",
    category="privacy",
    id_prefix="privacy",
    base_tags=["privacy", "digital-rights"],
    trust_rating=80,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=82,
    priority_mapper=p.keyword_mapper(p.PRIVACY_RULES),
    additional_tags=pattern_tags(
        (r"\bsurveillance\b", "surveillance"),
        (r"\bencrypt\w*\b", "encryption"),
        (r"\b(facial recognition|biometric\w*)\b", "biometrics"),
        (r"\b(data broker\w*|tracking)\b", "tracking"),
    ),
)

FINANCIAL_TRANSPARENCY = RSSNormalizerConfig(
    source_fallback="OpenSecrets News",
    category="financial-transparency",
    id_prefix="fintrans",
    base_tags=["finance", "transparency", "money-in-politics"],
    trust_rating=85,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=88,
    priority_mapper=p.keyword_mapper(p.FINANCIAL_TRANSPARENCY_RULES),
    additional_tags=pattern_tags(
        (r"\blobby\w*\b", "lobbying"),
        (r"\bdark money\b", "dark-money"),
        (r"\b(campaign financ\w*|super PAC|PAC)\b", "campaign-finance"),
        (r"\boffshore\b", "offshore"),
    ),
    metadata_enricher=pattern_values(
        "amounts", r"\$\s?\d[\d,.]*(?:\s?(?:million|billion|trillion|[MBK])\b)?"
    ),
)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def normalize_space_launch_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, SPACE_LAUNCH, settings=settings)


def normalize_space_agency_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, SPACE_AGENCY, settings=settings)


def normalize_defense_news_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, DEFENSE_NEWS, settings=settings)


def normalize_geopolitical_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, GEOPOLITICAL, settings=settings)


def normalize_cyber_security_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, CYBER_SECURITY, settings=settings)


def normalize_investigative_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, INVESTIGATIVE, settings=settings)


def normalize_leak_archive_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, LEAK_ARCHIVE, settings=settings)


def normalize_climate_resilience_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, CLIMATE_RESILIENCE, settings=settings)


def normalize_ai_governance_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, AI_GOVERNANCE, settings=settings)


def normalize_privacy_advocacy_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, PRIVACY_ADVOCACY, settings=settings)


def normalize_financial_transparency_rss(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_rss_feed(payload, FINANCIAL_TRANSPARENCY, settings=settings)
