"""Golden Gate Home Advisors site backend."""

__version__ = "1.0.0"
