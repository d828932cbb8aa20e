"""List numbering allocation."""

from .allocator import HEADING_NUMBERING_NAME, ListContext, NumberingAllocator

__all__ = ["HEADING_NUMBERING_NAME", "ListContext", "NumberingAllocator"]
