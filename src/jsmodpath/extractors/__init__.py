"""Extractors module initialization."""

from .base import BaseExtractor
from .import_extractor import ImportExtractor, strip_comments

__all__ = ["BaseExtractor", "ImportExtractor", "strip_comments"]
