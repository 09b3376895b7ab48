"""reqkey: hierarchical keys for requirements models."""

__version__ = "0.1.0"
