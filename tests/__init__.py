"""
Test suite for htmlquill.

Tests are grouped per component: core conversion, parser, styles,
numbering, tables, media and export.
"""
