# src/plant_care/care/frequency.py

from __future__ import annotations

import re

DEFAULT_INTERVAL_DAYS = 7
MAX_INTERVAL_DAYS = 36_500

_NUMBER_RE = re.compile(r"(\d+)")


def parse_frequency(text: str | None) -> int:
    """
    Convert a free-text care frequency into an interval in days.

    Care text comes from an external plant database with inconsistent
    vocabulary, so this never raises. First match wins:
      "daily" -> 1, "bi" + "weekly" -> 14, "weekly" -> 7,
      "monthly" -> 30, "yearly" -> 365,
      else the first integer in the text ("Every 10 days" -> 10),
      else 7.
    Numbers are capped at MAX_INTERVAL_DAYS (a century).
    """
    normalized = (text or "").lower()

    if "daily" in normalized:
        return 1
    if "weekly" in normalized and "bi" in normalized:
        return 14
    if "weekly" in normalized:
        return 7
    if "monthly" in normalized:
        return 30
    if "yearly" in normalized:
        return 365

    m = _NUMBER_RE.search(normalized)
    if m is None:
        return DEFAULT_INTERVAL_DAYS
    digits = m.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_INTERVAL_DAYS)):
        return MAX_INTERVAL_DAYS
    return min(int(digits), MAX_INTERVAL_DAYS)
