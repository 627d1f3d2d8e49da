"""Deep Space Network status normalizer.

The DSN "now" feed lists dishes, each carrying zero or more up/down
signals. One record is produced per signal, not per dish, so a dish
talking to two spacecraft yields two records.
"""

from __future__ import annotations

from typing import Any

from intelfeed.config import IntelFeedConfig
from intelfeed.models import NormalizedDataItem, Priority, VerificationStatus
from intelfeed.normalizers import priority as p
from intelfeed.normalizers.base import IdAllocator, as_dict, as_list, as_number, build_item
from intelfeed.text import first_text, resolve_timestamp, slugify

DSN_SOURCE = "NASA Deep Space Network"
DSN_URL = "https://eyes.nasa.gov/dsn/dsn.html"

SITE_NAMES = {
    "gdscc": "Goldstone",
    "mdscc": "Madrid",
    "cdscc": "Canberra",
}

DIRECTIONS = {
    "down": "downlink",
    "up": "uplink",
}

# Bands that outrank the data-rate table on an active link
CRITICAL_BANDS = {"ka"}
HIGH_BANDS = {"x"}


def _dishes(payload: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    dishes = payload.get("dishes")
    if isinstance(dishes, dict):
        return [(str(key), dish) for key, dish in dishes.items() if isinstance(dish, dict)]
    return [
        (first_text(dish, ("name", "id")) or str(index), dish)
        for index, dish in enumerate(as_list(dishes))
        if isinstance(dish, dict)
    ]


def _signal_active(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _targets(dish: dict[str, Any]) -> list[str]:
    names: list[str] = []
    for target in as_list(dish.get("tgts")):
        name = target if isinstance(target, str) else first_text(target, ("name", "id"))
        if name:
            names.append(name)
    return names


def format_rate(bits_per_second: float) -> str:
    if bits_per_second >= 1_000_000:
        return f"{bits_per_second / 1_000_000:.2f} Mb/s"
    if bits_per_second >= 1_000:
        return f"{bits_per_second / 1_000:g} kb/s"
    return f"{bits_per_second:g} b/s"


def signal_priority(active: bool | None, rate: float | None, band: str) -> Priority:
    """Rank one signal by activity, data rate and frequency band.

    A signal whose activity is unknown is medium; active links use the
    rate table, promoted by the band when the band ranks higher.
    """
    if active is None:
        return Priority.MEDIUM
    by_rate = p.threshold_priority(rate, p.DSN_RATE_THRESHOLDS, default=Priority.MEDIUM)
    band = band.lower()
    if band in CRITICAL_BANDS:
        return Priority.CRITICAL
    if band in HIGH_BANDS:
        return max(by_rate, Priority.HIGH)
    return by_rate


def _summary(
    dish_name: str,
    site: str,
    direction: str,
    target: str,
    band: str,
    rate: float | None,
    dish: dict[str, Any],
) -> str:
    location = f"{dish_name} ({site})" if site else dish_name
    sentence = f"{location} {direction or 'link'}"
    if target:
        sentence += f" with {target}"
    if band:
        sentence += f" on {band} band"
    if rate:
        sentence += f" at {format_rate(rate)}"
    parts = [sentence + "."]

    activity = first_text(dish, ("act",))
    if activity:
        parts.append(f"Activity: {activity}.")
    description = first_text(dish, ("desc",))
    if description:
        parts.append(description.rstrip(".") + ".")

    azimuth = as_number(dish.get("az"))
    elevation = as_number(dish.get("el"))
    if azimuth is not None and elevation is not None:
        parts.append(f"Pointing az {azimuth:g}, el {elevation:g}.")
    wind = as_number(dish.get("ws"))
    if wind is not None:
        parts.append(f"Wind {wind:g} km/h.")
    return " ".join(parts)


def normalize_dsn_status(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """``{"time", "dishes": {id: {name, site, act, desc, az, el, ws, tgts, sigs}}}``.

    Signals flagged ``active: false`` are skipped.
    """
    payload = as_dict(payload)
    dishes = _dishes(payload)
    if not dishes:
        return []

    published_at, confidence = resolve_timestamp(payload.get("time"))
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for dish_key, dish in dishes:
        dish_name = first_text(dish, ("name",)) or f"DSS-{dish_key}"
        site_code = first_text(dish, ("site",))
        site = SITE_NAMES.get(site_code.lower(), site_code)
        targets = _targets(dish)

        for index, signal in enumerate(as_list(dish.get("sigs"))):
            if not isinstance(signal, dict):
                continue
            active = _signal_active(signal.get("active"))
            if active is False:
                continue

            raw_direction = first_text(signal, ("dir",)).lower()
            direction = DIRECTIONS.get(raw_direction, raw_direction)
            band = first_text(signal, ("band",))
            rate = as_number(signal.get("rate"))
            target = first_text(signal, ("tgt", "spacecraft")) or (targets[0] if targets else "")
            uid = first_text(signal, ("uid",))

            title = f"{dish_name} {direction}" if direction else dish_name
            if target:
                title += f": {target}"

            record = build_item(
                id=ids.claim(f"dsn-{slugify(dish_key) or 'dish'}-{uid or index}", index),
                title=title,
                summary=_summary(dish_name, site, direction, target, band, rate, dish),
                url=DSN_URL,
                published_at=published_at,
                timestamp_confidence=confidence,
                source=DSN_SOURCE,
                category="space-operations",
                tags=["dsn", site, direction, band, target],
                priority=signal_priority(active, rate, band),
                trust_rating=95,
                verification_status=VerificationStatus.OFFICIAL,
                data_quality=95,
                metadata={
                    "dishId": dish_key,
                    "dishName": dish_name,
                    "site": site or None,
                    "activity": dish.get("act"),
                    "description": dish.get("desc"),
                    "azimuth": as_number(dish.get("az")),
                    "elevation": as_number(dish.get("el")),
                    "windSpeed": as_number(dish.get("ws")),
                    "targets": targets,
                    "signalId": uid or None,
                    "target": target or None,
                    "direction": direction or None,
                    "band": band or None,
                    "dataRate": rate,
                    "power": as_number(signal.get("pwr")),
                    "active": active,
                    "raw": signal,
                },
                config=settings,
            )
            if record is not None:
                results.append(record)

    return results
