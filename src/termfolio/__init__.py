"""termfolio: a portfolio terminal that lives inside a fake desktop."""

__version__ = "0.1.0"
