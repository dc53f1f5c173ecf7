"""Application-wide constants for the Courtside booking platform."""

from __future__ import annotations

BRAND_NAME = "Courtside"

# Day-of-week convention used by coach windows and pricing rules (0 = Sunday).
DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MINUTES_PER_DAY = 24 * 60

# Money is kept to two decimal places on every persisted price.
PRICE_QUANTUM = "0.01"
