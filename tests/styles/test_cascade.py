"""
Tests for the style cascades and the style catalog.
"""

import pytest

from htmlquill.models import Border, Paragraph, Run, StyleDefinition, TableCell
from htmlquill.parser import tokenize
from htmlquill.styles import ParagraphCascade, RunCascade, StyleCascade, StyleCatalog, TableCascade
from htmlquill.utils.enums import AlignmentType, BorderStyle, CellVerticalAlignment, StyleFamily


def start_token(html):
    return tokenize(html)[0]


class TestStyleCascade:
    """Test frame stacking and resolution."""

    def test_innermost_wins(self):
        cascade = StyleCascade()
        cascade.begin_tag("div", {"color": "FF0000", "bold": True})
        cascade.begin_tag("span", {"color": "0000FF"})

        assert cascade.resolve() == {"color": "0000FF", "bold": True}

    def test_end_restores_outer(self):
        cascade = StyleCascade()
        cascade.begin_tag("div", {"color": "FF0000"})
        cascade.begin_tag("span", {"color": "0000FF"})
        cascade.end_tag("span")

        assert cascade.resolve() == {"color": "FF0000"}

    def test_same_tag_nested(self):
        cascade = StyleCascade()
        cascade.begin_tag("div", {"color": "FF0000"})
        cascade.begin_tag("div", {"italic": True})

        assert cascade.resolve() == {"italic": True}
        cascade.end_tag("div")
        assert cascade.resolve() == {"color": "FF0000"}

    def test_reopened_outer_tag_ordering(self):
        """A later frame wins even when its tag was opened first elsewhere."""
        cascade = StyleCascade()
        cascade.begin_tag("span", {"color": "FF0000"})
        cascade.begin_tag("font", {"color": "00FF00"})
        cascade.begin_tag("span", {"color": "0000FF"})

        assert cascade.resolve()["color"] == "0000FF"

    def test_merge_restores_on_close(self):
        cascade = StyleCascade()
        cascade.merge_tag("span", {"color": "FF0000"})
        cascade.merge_tag("span", {"color": "0000FF", "bold": True})

        assert cascade.resolve() == {"color": "0000FF", "bold": True}
        assert len(cascade) == 1
        cascade.end_tag("span")
        assert cascade.resolve() == {"color": "FF0000"}
        cascade.end_tag("span")
        assert cascade.resolve() == {}

    def test_dictionaries_merge_by_key(self):
        cascade = StyleCascade()
        cascade.begin_tag("div", {"borders": {"top": Border()}})
        cascade.begin_tag("p", {"borders": {"left": Border(BorderStyle.DOTTED)}})

        assert set(cascade.resolve()["borders"]) == {"top", "left"}

    def test_empty_frames_keep_balance(self):
        cascade = StyleCascade()
        cascade.begin_tag("b", {"bold": True})
        cascade.begin_tag("b")
        cascade.end_tag("b")

        assert cascade.resolve() == {"bold": True}

    def test_unbalanced_end_ignored(self):
        cascade = StyleCascade()
        cascade.end_tag("p")
        cascade.begin_tag("p", {"keep_next": True})
        cascade.end_tag("p")
        cascade.end_tag("p")

        assert len(cascade) == 0
        assert cascade.resolve() == {}

    def test_apply_is_idempotent(self):
        cascade = StyleCascade()
        cascade.begin_tag("b", {"bold": True})
        run = Run("x")
        cascade.apply(run)
        cascade.apply(run)

        assert run.bold is True
        assert run.get_formatting() == {"bold": True}


class TestRunCascade:
    """Test character formatting conversion."""

    @pytest.fixture
    def cascade(self, document):
        return RunCascade(StyleCatalog(document))

    def test_common_attributes(self, cascade):
        token = start_token('<span style="color:#00f;background-color:yellow;'
                            'text-decoration:underline line-through;font:italic bold 10pt Arial">')
        fragments = {}
        cascade.process_common_attributes(token, fragments)

        assert fragments == {
            "color": "0000FF",
            "shading": "FFFF00",
            "underline": "single",
            "strike_through": True,
            "italic": True,
            "bold": True,
            "font_name": "Arial",
            "font_size": 20,
        }

    def test_color_attribute(self, cascade):
        fragments = {}
        cascade.process_common_attributes(start_token('<font color="red">'), fragments)

        assert fragments == {"color": "FF0000"}

    def test_character_style_from_class(self, cascade, document):
        document.add_style(StyleDefinition("Strong", "Strong", StyleFamily.CHARACTER))
        cascade.catalog.refresh()
        fragments = {}
        cascade.process_common_attributes(start_token('<span class="other strong">'), fragments)

        assert fragments == {"style_id": "Strong"}

    def test_default_style(self, cascade):
        cascade.default_style = "Plain"
        run = Run("x")
        cascade.apply(run)

        assert run.style_id == "Plain"


class TestParagraphCascade:
    """Test paragraph formatting conversion."""

    @pytest.fixture
    def cascade(self, document):
        catalog = StyleCatalog(document)
        return ParagraphCascade(catalog, RunCascade(catalog))

    def test_common_attributes(self, cascade):
        token = start_token('<p align="right" style="margin:12px 0 24px 1in;text-indent:6px;color:red">')
        run_fragments = {}

        assert cascade.process_common_attributes(token, run_fragments) is False
        paragraph = Paragraph()
        cascade.apply(paragraph)

        assert paragraph.alignment == AlignmentType.RIGHT
        assert paragraph.spacing_before == 180
        assert paragraph.spacing_after == 360
        assert paragraph.left_indent == 1440
        assert paragraph.right_indent == 0
        assert paragraph.first_line_indent == 90
        assert run_fragments == {"color": "FF0000"}

    def test_paragraph_style_class(self, cascade, document):
        document.add_style(StyleDefinition("Note", "Note", StyleFamily.PARAGRAPH))
        cascade.catalog.refresh()

        assert cascade.process_common_attributes(start_token('<div class="NOTE">'), {}) is True
        paragraph = Paragraph()
        cascade.apply(paragraph)
        assert paragraph.style_id == "Note"

    def test_default_style_not_overriding(self, cascade):
        cascade.default_style = "BodyText"
        paragraph = Paragraph("Title")
        cascade.apply(paragraph)

        assert paragraph.style_id == "Title"
        assert Paragraph().style_id is None

    def test_borders(self, cascade):
        cascade.process_common_attributes(start_token('<p style="border-bottom:1px solid red">'), {})
        paragraph = Paragraph()
        cascade.apply(paragraph)

        assert list(paragraph.borders) == ["bottom"]
        assert paragraph.borders["bottom"].color == "FF0000"


class TestTableCascade:
    """Test cell formatting conversion."""

    def test_cell_formatting(self, document):
        catalog = StyleCatalog(document)
        cascade = TableCascade(catalog, RunCascade(catalog))
        cascade.process_common_attributes(start_token('<tr bgcolor="#eee" valign="bottom" align="center">'), {})

        cell = TableCell()
        first = cell.add_paragraph(Paragraph())
        cell.add_paragraph(Paragraph())
        cascade.apply(cell)

        assert cell.shading == "EEEEEE"
        assert cell.vertical_align == CellVerticalAlignment.BOTTOM
        assert first.alignment == AlignmentType.CENTER
        assert first.keep_next
        assert cell.paragraphs[1].alignment is None

        cascade.end_tag("tr")
        assert cascade.resolve() == {}


class TestStyleCatalog:
    """Test style lookups."""

    def test_predefined_added_on_request(self, document):
        catalog = StyleCatalog(document)

        assert document.find_style("Caption") is None
        assert catalog.get_style("Caption") == "Caption"
        assert document.find_style("Caption") is not None

    def test_linked_character_style(self, document):
        catalog = StyleCatalog(document)

        assert catalog.get_style("Quote", StyleFamily.CHARACTER) == "QuoteChar"
        assert document.find_style("QuoteChar").family == StyleFamily.CHARACTER

    def test_family_mismatch(self, document):
        catalog = StyleCatalog(document)

        assert catalog.get_style("Hyperlink", StyleFamily.PARAGRAPH) is None
        assert catalog.get_style("missing") is None
        assert catalog.get_style(None) is None

    def test_case_handling(self, document):
        document.add_style(StyleDefinition("MyStyle", "My Style", StyleFamily.PARAGRAPH))
        catalog = StyleCatalog(document)

        assert catalog.get_style("mystyle") is None
        assert catalog.get_style("mystyle", ignore_case=True) == "MyStyle"
        assert catalog.get_style("My Style") == "MyStyle"

    def test_same_name_in_two_families(self, document):
        document.add_style(StyleDefinition("QuoteTable", "Quote", StyleFamily.TABLE))
        document.add_style(StyleDefinition("Quote", "Quote", StyleFamily.PARAGRAPH))
        catalog = StyleCatalog(document)

        assert catalog.get_style("Quote", StyleFamily.TABLE) == "QuoteTable"
        assert catalog.get_style("Quote", StyleFamily.PARAGRAPH) == "Quote"

    def test_table_borders(self, document):
        catalog = StyleCatalog(document)
        catalog.get_style("TableGrid", StyleFamily.TABLE)

        assert catalog.has_table_borders("TableGrid")
        assert not catalog.has_table_borders(None)

    def test_refresh(self, document):
        catalog = StyleCatalog(document)
        document.add_style(StyleDefinition("Late", "Late", StyleFamily.PARAGRAPH))

        assert catalog.get_style("Late") is None
        catalog.refresh()
        assert catalog.get_style("Late") == "Late"
