"""
End-to-end tests: text file in, finished document out, checked with
PyMuPDF for PDF and by parsing for SVG and PostScript.
"""

import xml.etree.ElementTree as ET

import fitz
import pytest

from textpaps.config import RunOptions
from textpaps.controller import render_document
from textpaps.output.svg_surface import SVG_NS


@pytest.fixture
def long_text_file(tmp_path):
    """Three form-feed separated sections of 30 lines each."""
    sections = []
    for s in range(3):
        sections.append("".join(f"section {s} line {i}\n" for i in range(30)))
    path = tmp_path / "report.txt"
    path.write_text("\f".join(sections), encoding="utf-8")
    return path


class TestPdfDocuments:

    def test_formfeeds_start_new_pages(self, tmp_path, long_text_file):
        # Arrange
        output = tmp_path / "report.pdf"
        options = RunOptions(input_path=long_text_file, output_path=output, output_format="pdf")

        # Act
        result = render_document(options)

        # Assert
        doc = fitz.open(output)
        assert result.page_count == doc.page_count == 3
        for index, page in enumerate(doc):
            assert f"section {index} line 0" in page.get_text()

    def test_landscape_columns_with_header_and_footer(self, tmp_path, long_text_file):
        # Arrange
        output = tmp_path / "report.pdf"
        options = RunOptions(
            input_path=long_text_file,
            output_path=output,
            output_format="pdf",
            landscape=True,
            columns=2,
            header=True,
            footer=True,
            title="Quarterly",
        )

        # Act
        result = render_document(options)

        # Assert
        doc = fitz.open(output)
        page = doc[0]
        assert page.rect.width == pytest.approx(841.89, abs=0.5)
        assert page.rect.height == pytest.approx(595.28, abs=0.5)
        text = page.get_text()
        assert text.count("Quarterly") == 2
        assert "Page 1" in text
        # Each form feed moves to the next column, so 3 sections need 2 pages
        assert result.page_count == doc.page_count == 2

    def test_rtl_columns_fill_right_column_first(self, tmp_path):
        source = tmp_path / "rtl.txt"
        source.write_text("right\fleft\n", encoding="utf-8")
        output = tmp_path / "rtl.pdf"

        render_document(RunOptions(input_path=source, output_path=output, output_format="pdf",
                                   paper="letter", columns=2, rtl=True))

        words = {w[4]: w for w in fitz.open(output)[0].get_text("words")}
        assert words["right"][0] > 306 > words["left"][2]
        # Right aligned: both words end at their column's right edge
        assert words["right"][2] == pytest.approx(576, abs=1)
        assert words["left"][2] == pytest.approx(286, abs=1)


class TestOtherFormats:

    def test_svg_has_one_group_per_page(self, tmp_path, long_text_file):
        output = tmp_path / "report.svg"

        result = render_document(RunOptions(input_path=long_text_file, output_path=output,
                                            output_format="svg"))

        root = ET.parse(output).getroot()
        assert len(root.findall(f"{{{SVG_NS}}}g")) == result.page_count == 3

    def test_postscript_page_count_in_trailer(self, tmp_path, long_text_file):
        output = tmp_path / "report.ps"

        result = render_document(RunOptions(input_path=long_text_file, output_path=output))

        ps = output.read_bytes()
        assert ps.count(b"%%Page: ") == result.page_count
        assert ps.rstrip().endswith(f"%%Pages: {result.page_count}\n%%EOF".encode())
