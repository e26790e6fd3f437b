"""Game rules for miners, lands, lootboxes, progression, equipment, economy and marketplace."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "constants",
    "economy",
    "equipment",
    "errors",
    "lootbox",
    "marketplace",
    "progression",
    "rules",
    "state",
    "tokens",
]