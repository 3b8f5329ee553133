"""
Unit tests for font descriptor parsing and ReportLab font resolution.
"""

import pytest

from textpaps.engine import FontSpec, parse_font_desc, resolve_font_name
from textpaps.errors import ConfigurationError


class TestParseFontDesc:

    def test_when_style_words_then_flags_set(self):
        spec = parse_font_desc("Sans Bold Italic 10")

        assert spec == FontSpec(family="Sans", size=10.0, bold=True, italic=True)

    def test_when_no_size_then_default_size_used(self):
        assert parse_font_desc("Monospace").size == 12.0
        assert parse_font_desc("Monospace", default_size=9).size == 9

    def test_when_empty_then_default_family(self):
        assert parse_font_desc("") == FontSpec()

    def test_when_family_has_spaces_then_kept_together(self):
        spec = parse_font_desc("DejaVu Sans Mono Oblique 9")

        assert spec.family == "DejaVu Sans Mono"
        assert spec.italic
        assert spec.size == 9

    def test_when_size_not_positive_then_raises(self):
        with pytest.raises(ConfigurationError):
            parse_font_desc("Courier 0")

    def test_with_size_and_styled_return_copies(self):
        spec = FontSpec("Courier", 12)

        assert spec.with_size(6).size == 6
        assert spec.styled(bold=True).bold
        assert not spec.bold


class TestResolveFontName:

    @pytest.mark.parametrize("desc,expected", [
        ("Monospace 12", "Courier"),
        ("Monospace Bold 12", "Courier-Bold"),
        ("Courier Bold Italic 12", "Courier-BoldOblique"),
        ("Sans 10", "Helvetica"),
        ("Serif Italic 10", "Times-Italic"),
    ])
    def test_when_standard_family_then_maps_to_base14(self, desc, expected):
        assert resolve_font_name(parse_font_desc(desc)) == expected

    def test_when_registered_name_given_then_used_as_is(self):
        assert resolve_font_name(FontSpec("Courier-Bold", 12)) == "Courier-Bold"

    def test_when_family_unknown_then_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown font family"):
            resolve_font_name(FontSpec("NoSuchFamily", 12))

    def test_when_truetype_file_missing_then_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to load font file"):
            resolve_font_name(FontSpec(str(tmp_path / "missing.ttf"), 12))
