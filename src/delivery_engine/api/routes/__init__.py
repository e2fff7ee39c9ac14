"""Route group exports."""

from . import checkout, health, listings, vendors

__all__ = ["checkout", "health", "listings", "vendors"]
