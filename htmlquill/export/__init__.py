"""Serialization of converted documents."""

from .wordml import NSMAP, WordprocessingMLExporter, qn

__all__ = ["NSMAP", "WordprocessingMLExporter", "qn"]
