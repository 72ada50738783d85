"""Validate markdown documents and generate Contentful import files."""

from mdimport.version import __version__

__all__ = ["__version__"]
