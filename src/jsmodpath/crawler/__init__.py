"""Crawler module initialization."""

from .file_crawler import FileCrawler, ModuleFile
from .type_detector import TypeDetector, SourceKind

__all__ = ["FileCrawler", "ModuleFile", "TypeDetector", "SourceKind"]
