"""Image admission gate for e-commerce uploads."""

__version__ = "0.1.0"
