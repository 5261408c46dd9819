"""Seoul public restroom finder backend."""

__version__ = "1.0.0"
