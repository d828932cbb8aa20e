"""
Tests for the WordprocessingML exporter.
"""

import pytest
from lxml import etree

from htmlquill.export import NSMAP, WordprocessingMLExporter, qn
from htmlquill.models import Paragraph, Run, SectionProperties, Table, TableCell, TableRow
from htmlquill.utils.enums import PageOrientation

W = "{%s}" % NSMAP['w']


def xpath(node, path):
    return node.xpath(path, namespaces=NSMAP)


@pytest.fixture
def exporter(document):
    return WordprocessingMLExporter(document)


class TestParagraphs:
    """Test paragraph and run serialization."""

    def test_qn(self):
        assert qn("w:p") == W + "p"
        assert set(NSMAP) == {'w', 'r', 'wp', 'a', 'pic'}

    def test_list_paragraph(self, converter, exporter):
        blocks = converter.parse("<ol><li>One</li></ol>")
        root = exporter.document_element(blocks)

        paragraph = xpath(root, "/w:document/w:body/w:p")[0]
        assert xpath(paragraph, "w:pPr/w:pStyle/@w:val") == ["ListParagraph"]
        assert xpath(paragraph, "w:pPr/w:numPr/w:ilvl/@w:val") == ["0"]
        assert xpath(paragraph, "w:pPr/w:numPr/w:numId/@w:val") == [str(blocks[0].numbering['id'])]
        assert xpath(paragraph, "w:r/w:t/text()") == ["One"]

    def test_paragraph_properties_order(self, converter, exporter):
        blocks = converter.parse('<p align="center" style="margin:12px 0 0 0;border-top:1px solid red">x</p>')
        ppr = xpath(exporter.document_element(blocks), "//w:p/w:pPr")[0]

        names = [etree.QName(child).localname for child in ppr]
        assert names == ["pBdr", "spacing", "ind", "jc"]
        assert xpath(ppr, "w:spacing/@w:before") == ["180"]
        assert xpath(ppr, "w:jc/@w:val") == ["center"]
        assert xpath(ppr, "w:pBdr/w:top/@w:color") == ["FF0000"]

    def test_run_properties(self, converter, exporter):
        blocks = converter.parse('<b><i><span style="color:red;font-size:14pt"> x </span></i></b>')
        run = xpath(exporter.document_element(blocks), "//w:r")[0]

        assert xpath(run, "w:rPr/w:b") and xpath(run, "w:rPr/w:i")
        assert xpath(run, "w:rPr/w:color/@w:val") == ["FF0000"]
        assert xpath(run, "w:rPr/w:sz/@w:val") == ["28"]
        text = xpath(run, "w:t")[0]
        assert text.get("{http://www.w3.org/XML/1998/namespace}space") == "preserve"

    def test_line_break(self, converter, exporter):
        root = exporter.document_element(converter.parse("a<br>b"))

        assert len(xpath(root, "//w:br")) == 1
        assert xpath(root, "//w:br/@w:type") == []

    def test_hyperlink(self, converter, exporter):
        blocks = converter.parse('<a href="http://example.com" title="tip">x</a>')
        link = xpath(exporter.document_element(blocks), "//w:hyperlink")[0]

        assert link.get(qn("r:id")) == blocks[0].children[0].relationship_id
        assert link.get(qn("w:tooltip")) == "tip"
        assert xpath(link, "w:r/w:rPr/w:rStyle/@w:val") == ["Hyperlink"]

    def test_drawing(self, converter, exporter):
        blocks = converter.parse('<img src="http://example.com/pixel.png" alt="dot">')
        root = exporter.document_element(blocks)

        extent = xpath(root, "//wp:inline/wp:extent")[0]
        assert (extent.get("cx"), extent.get("cy")) == ("9525", "9525")
        assert xpath(root, "//wp:docPr/@descr") == ["dot"]
        assert xpath(root, "//a:blip/@r:embed") == [blocks[0].runs[0].drawing.rel_id]

    def test_caption_field(self, converter, exporter):
        root = exporter.document_element(converter.parse("<table><caption>T</caption><tr><td>x</td></tr></table>"))

        legend = xpath(root, "/w:document/w:body/w:p")[0]
        assert xpath(legend, "w:r/w:fldChar/@w:fldCharType") == ["begin", "end"]
        assert xpath(legend, "w:r/w:instrText/text()") == [" SEQ TABLE \\* ARABIC "]


class TestTables:
    """Test table serialization."""

    def test_merged_cells(self, converter, exporter):
        html = '<table><tr><td rowspan="2" colspan="2">A</td><td>B</td></tr><tr><td>C</td></tr></table>'
        root = exporter.document_element(converter.parse(html))

        table = xpath(root, "//w:tbl")[0]
        assert xpath(table, "w:tblPr/w:tblStyle/@w:val") == ["TableGrid"]
        assert len(xpath(table, "w:tblGrid/w:gridCol")) == 3
        first, second = xpath(table, "w:tr")
        assert xpath(first, "w:tc[1]/w:tcPr/w:vMerge/@w:val") == ["restart"]
        assert xpath(first, "w:tc[1]/w:tcPr/w:gridSpan/@w:val") == ["2"]
        continued = xpath(second, "w:tc[1]/w:tcPr/w:vMerge")[0]
        assert continued.get(qn("w:val")) is None
        assert xpath(second, "w:tc[1]/w:tcPr/w:gridSpan/@w:val") == ["2"]

    def test_cell_ends_with_paragraph(self, exporter):
        inner = Table()
        cell = TableCell()
        cell.add_table(inner)
        row = TableRow()
        row.add_cell(cell)
        outer = Table()
        outer.add_row(row)

        tc = xpath(exporter.document_element([outer]), "//w:tbl/w:tr/w:tc")[0]
        assert etree.QName(tc[-1]).localname == "p"

    def test_table_properties(self, converter, exporter):
        html = '<table style="width:50%" cellpadding="4" border="0"><tr style="height:20px"><td>x</td></tr></table>'
        tbl = xpath(exporter.document_element(converter.parse(html)), "//w:tbl")[0]

        assert xpath(tbl, "w:tblPr/w:tblW/@w:w") == ["2500"]
        assert xpath(tbl, "w:tblPr/w:tblW/@w:type") == ["pct"]
        assert xpath(tbl, "w:tblPr/w:tblBorders/w:insideV/@w:val") == ["none"]
        assert xpath(tbl, "w:tblPr/w:tblCellMar/w:left/@w:w") == ["60"]
        assert xpath(tbl, "w:tr/w:trPr/w:trHeight/@w:hRule") == ["atLeast"]


class TestParts:
    """Test the numbering, notes and body parts."""

    def test_numbering(self, converter, exporter, document):
        converter.parse("<ol><li>x</li></ol>")
        root = exporter.numbering_element()

        abstracts = xpath(root, "w:abstractNum")
        assert len(abstracts) == len(document.numbering.abstracts)
        instance = document.numbering.instances[0]
        num = xpath(root, f"w:num[@w:numId='{instance.num_id}']")[0]
        assert xpath(num, "w:abstractNumId/@w:val") == [str(instance.abstract_id)]
        assert xpath(num, "w:lvlOverride/w:startOverride/@w:val") == ["1"]
        # definitions come before instances
        names = [etree.QName(child).localname for child in root]
        assert names.index("num") > max(i for i, name in enumerate(names) if name == "abstractNum")

    def test_footnotes(self, converter, exporter):
        converter.parse('<abbr title="Definition">D</abbr>')
        root = exporter.footnotes_element()

        notes = xpath(root, "w:footnote")
        assert [note.get(qn("w:id")) for note in notes] == ["-1", "0", "1"]
        assert [note.get(qn("w:type")) for note in notes] == ["separator", "continuationSeparator", None]
        assert xpath(notes[0], ".//w:separator")
        assert xpath(notes[2], ".//w:footnoteRef")

    def test_endnotes_empty(self, exporter):
        assert len(exporter.endnotes_element()) == 0

    def test_whole_body_with_section(self, converter, exporter, document):
        section = SectionProperties()
        section.set_orientation(PageOrientation.LANDSCAPE)
        document.set_section(section)
        converter.parse_html("<p>x</p>")

        body = xpath(exporter.document_element(), "/w:document/w:body")[0]
        names = [etree.QName(child).localname for child in body]
        assert names == ["p", "sectPr"]
        assert xpath(body, "w:sectPr/w:pgSz/@w:orient") == ["landscape"]

    def test_to_bytes(self, exporter):
        paragraph = Paragraph()
        paragraph.add_run(Run("é"))
        data = exporter.to_bytes(exporter.document_element([paragraph]))

        assert data.startswith(b"<?xml version='1.0' encoding='UTF-8' standalone='yes'?>")
        assert "é".encode("utf-8") in data
        assert etree.fromstring(data).tag == qn("w:document")
