"""Exporters module initialization."""

from .json_exporter import ManifestExporter

__all__ = ["ManifestExporter"]
