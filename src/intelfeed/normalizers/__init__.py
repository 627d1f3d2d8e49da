"""Per-source normalizers turning raw payloads into NormalizedDataItem lists."""

from intelfeed.normalizers.api import (
    normalize_alpha_vantage_news,
    normalize_coingecko,
    normalize_generic,
    normalize_github_advisories,
    normalize_hacker_news,
    normalize_launch_library,
    normalize_nasa_apod,
    normalize_noaa_alerts,
    normalize_reddit_posts,
    normalize_usgs_earthquakes,
)
from intelfeed.normalizers.feeds import (
    normalize_ai_governance_rss,
    normalize_climate_resilience_rss,
    normalize_cyber_security_rss,
    normalize_defense_news_rss,
    normalize_financial_transparency_rss,
    normalize_geopolitical_rss,
    normalize_investigative_rss,
    normalize_leak_archive_rss,
    normalize_privacy_advocacy_rss,
    normalize_space_agency_rss,
    normalize_space_launch_rss,
)
from intelfeed.normalizers.rss import normalize_rss_feed
from intelfeed.normalizers.scraped import (
    normalize_occrp_investigations,
    normalize_tbij_investigations,
)
from intelfeed.normalizers.telemetry import normalize_dsn_status

__all__ = [
    "normalize_ai_governance_rss",
    "normalize_alpha_vantage_news",
    "normalize_climate_resilience_rss",
    "normalize_coingecko",
    "normalize_cyber_security_rss",
    "normalize_defense_news_rss",
    "normalize_dsn_status",
    "normalize_financial_transparency_rss",
    "normalize_generic",
    "normalize_geopolitical_rss",
    "normalize_github_advisories",
    "normalize_hacker_news",
    "normalize_investigative_rss",
    "normalize_launch_library",
    "normalize_leak_archive_rss",
    "normalize_nasa_apod",
    "normalize_noaa_alerts",
    "normalize_occrp_investigations",
    "normalize_privacy_advocacy_rss",
    "normalize_reddit_posts",
    "normalize_rss_feed",
    "normalize_space_agency_rss",
    "normalize_space_launch_rss",
    "normalize_tbij_investigations",
    "normalize_usgs_earthquakes",
]
