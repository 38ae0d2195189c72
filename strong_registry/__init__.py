"""Named npm registry configurations and switching between them."""

__version__ = "1.0.0"
