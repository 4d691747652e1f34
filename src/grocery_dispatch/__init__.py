"""Store availability matching and dispatch service for grocery delivery."""

__version__ = "0.1.0"
