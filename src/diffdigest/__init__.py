"""diffdigest — bounded-size digests of staged git changes."""

__version__ = "0.1.0"
