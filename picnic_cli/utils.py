"""Shared formatting helpers for picnic-cli."""

from __future__ import annotations

from datetime import datetime, tzinfo

from rich.text import Text

DAYS = {
    "nl": {0: "ma", 1: "di", 2: "wo", 3: "do", 4: "vr", 5: "za", 6: "zo"},
    "de": {0: "Mo", 1: "Di", 2: "Mi", 3: "Do", 4: "Fr", 5: "Sa", 6: "So"},
}

MONTHS = {
    "nl": ["jan", "feb", "mrt", "apr", "mei", "jun", "jul", "aug", "sep", "okt", "nov", "dec"],
    "de": ["Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dez"],
}

STATUS_STYLES = {
    "CURRENT": "blue",
    "COMPLETED": "green",
    "CANCELLED": "red",
}


def lang_for_country(country_code: str | None) -> str:
    return "de" if (country_code or "").upper() == "DE" else "nl"


def format_price(cents: int | float | None) -> str:
    """Picnic API prices are in cents."""
    if cents is None:
        return "-"
    return f"€{cents / 100:.2f}"


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None


def format_window(start: str | None, end: str | None, lang: str = "nl") -> str:
    """Format a delivery window as e.g. "ma 24 feb 14:00–15:00".

    Times are shown in the offset the API sent them in.
    """
    s, e = _parse_time(start), _parse_time(end)
    if s is None or e is None:
        return "-"
    day = DAYS.get(lang, DAYS["nl"])[s.weekday()]
    month = MONTHS.get(lang, MONTHS["nl"])[s.month - 1]
    return f"{day} {s.day} {month} {s:%H:%M}–{e:%H:%M}"


def format_status(status: str | None) -> Text:
    status = status or "UNKNOWN"
    return Text(status, style=STATUS_STYLES.get(status, "grey50"))


def format_timestamp(ts: int | float | None, tz: tzinfo | None = None, lang: str = "nl") -> str:
    """Millisecond Unix timestamp to e.g. "24 feb 2024 14:00" (local time by default)."""
    if ts is None:
        return "-"
    dt = datetime.fromtimestamp(ts / 1000, tz=tz)
    month = MONTHS.get(lang, MONTHS["nl"])[dt.month - 1]
    return f"{dt.day} {month} {dt.year} {dt:%H:%M}"


def format_address(address: dict | None, ext_separator: str = "") -> str:
    if not address:
        return "-"
    ext = address.get("house_number_ext") or ""
    if ext:
        ext = ext_separator + ext
    return (
        f"{address.get('street', '')} {address.get('house_number', '')}{ext}, "
        f"{address.get('postcode', '')} {address.get('city', '')}"
    )
