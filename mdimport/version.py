"""Version information for mdimport."""

__version__ = "0.3.1"
