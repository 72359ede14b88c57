"""Weekly Coach - adaptive weekly nutrition and training recommendations."""

__version__ = "0.1.0"
