"""Route group exports."""

from . import health, orders, staff, stores, tracking

__all__ = ["health", "stores", "staff", "orders", "tracking"]
