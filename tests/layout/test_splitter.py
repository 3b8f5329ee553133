"""
Unit tests for paragraph splitting.

Covers hard-break detection, form-feed handling, CPI truncation and
invalid-character recovery in print-filter mode.
"""

import pytest

from textpaps.engine import Alignment
from textpaps.errors import InvalidCharacterError, MeasurementError
from textpaps.layout import LayoutConfig, split_text_into_paragraphs
from textpaps.layout.splitter import is_invalid_char


@pytest.fixture
def cpi_config():
    """One 72pt column at 10 CPI: a budget of 10 cells."""
    return LayoutConfig(page_width=144, page_height=400, cpi=10)


class TestParagraphBoundaries:

    def test_when_text_has_newline_and_formfeed_then_splits_three_paragraphs(
        self, letter_config, run_context, fake_engine
    ):
        # Act
        paras = split_text_into_paragraphs("a\nb\f\nc", letter_config, run_context, fake_engine)

        # Assert
        assert [(p.start, p.length, p.text, p.formfeed) for p in paras] == [
            (0, 1, "a", False),
            (2, 1, "b", True),
            (5, 1, "c", False),
        ]

    def test_when_input_ends_with_boundary_then_no_empty_paragraph_added(
        self, letter_config, run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("a\nb\n", letter_config, run_context, fake_engine)

        assert [p.text for p in paras] == ["a", "b"]

    def test_when_blank_lines_present_then_empty_paragraphs_kept(
        self, letter_config, run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("a\n\n\nb\n", letter_config, run_context, fake_engine)

        assert [p.text for p in paras] == ["a", "", "", "b"]
        assert all(p.layout.line_count == 1 for p in paras)

    def test_when_formfeed_not_followed_by_newline_then_next_text_starts_after_it(
        self, letter_config, run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("a\fb\n", letter_config, run_context, fake_engine)

        assert [(p.text, p.formfeed) for p in paras] == [("a", True), ("b", False)]
        assert paras[1].start == 2

    def test_when_text_empty_then_no_paragraphs(self, letter_config, run_context, fake_engine):
        assert split_text_into_paragraphs("", letter_config, run_context, fake_engine) == []

    def test_when_wrapping_then_paragraphs_shaped_at_column_width(
        self, letter_config, run_context, fake_engine
    ):
        split_text_into_paragraphs("hello\n", letter_config, run_context, fake_engine)

        call = fake_engine.calls[0]
        assert call["width"] == letter_config.column_width
        assert call["wrap"] is True

    def test_when_wrap_disabled_then_width_unconstrained(self, run_context, fake_engine):
        config = LayoutConfig(page_width=612, page_height=792, do_wordwrap=False)

        paras = split_text_into_paragraphs("x" * 500 + "\n", config, run_context, fake_engine)

        assert fake_engine.calls[0]["width"] is None
        assert paras[0].layout.line_count == 1

    def test_when_rtl_then_layouts_right_aligned(self, run_context, fake_engine):
        config = LayoutConfig(page_width=612, page_height=792, rtl=True)

        paras = split_text_into_paragraphs("abc\n", config, run_context, fake_engine)

        assert paras[0].layout.alignment is Alignment.RIGHT


class TestCpiTruncation:

    def test_when_paragraph_exceeds_budget_then_split_into_budget_sized_pieces(
        self, cpi_config, run_context, fake_engine
    ):
        # Arrange
        text = "x" * 25 + "\n"

        # Act
        paras = split_text_into_paragraphs(text, cpi_config, run_context, fake_engine)

        # Assert
        assert [(p.start, p.length) for p in paras] == [(0, 10), (10, 10), (20, 5)]
        assert not any(p.formfeed for p in paras)

    def test_when_truncated_then_shaped_without_width(self, cpi_config, run_context, fake_engine):
        split_text_into_paragraphs("x" * 25 + "\n", cpi_config, run_context, fake_engine)

        assert all(call["width"] is None for call in fake_engine.calls)

    def test_when_formfeed_paragraph_truncated_then_only_last_piece_keeps_formfeed(
        self, cpi_config, run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("y" * 15 + "\f", cpi_config, run_context, fake_engine)

        assert [(p.length, p.formfeed) for p in paras] == [(10, False), (5, True)]

    def test_when_wide_characters_then_budget_counts_display_cells(
        self, cpi_config, run_context, fake_engine
    ):
        # 12 double-width characters: 5 fill the 10-cell budget, 7 fit untouched
        paras = split_text_into_paragraphs("中" * 12 + "\n", cpi_config, run_context, fake_engine)

        assert [p.length for p in paras] == [5, 7]

    def test_when_paragraph_within_budget_then_left_whole(
        self, cpi_config, run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("short\n", cpi_config, run_context, fake_engine)

        assert [(p.start, p.length) for p in paras] == [(0, 5)]

    def test_when_resplitting_a_piece_then_result_unchanged(
        self, cpi_config, run_context, fake_engine
    ):
        first = split_text_into_paragraphs("z" * 25 + "\n", cpi_config, run_context, fake_engine)

        again = split_text_into_paragraphs(first[0].text, cpi_config, run_context, fake_engine)

        assert [(p.start, p.length) for p in again] == [(0, first[0].length)]

    def test_when_budget_smaller_than_one_character_then_progress_is_made(
        self, run_context, fake_engine
    ):
        config = LayoutConfig(page_width=144, page_height=400, cpi=0.5)
        assert config.cpi_column_budget == 0

        paras = split_text_into_paragraphs("abc\n", config, run_context, fake_engine)

        assert [p.text for p in paras] == ["a", "b", "c"]


class TestInvalidCharacters:

    def test_is_invalid_char_flags_lone_surrogates_only(self):
        assert is_invalid_char("\udc80")
        assert not is_invalid_char("a")
        assert not is_invalid_char("中")

    def test_when_not_filter_mode_then_invalid_character_raises_with_offset(
        self, letter_config, run_context, fake_engine
    ):
        with pytest.raises(InvalidCharacterError) as exc_info:
            split_text_into_paragraphs("ok\na\udc80b\n", letter_config, run_context, fake_engine)

        assert exc_info.value.offset == 4

    def test_when_filter_mode_then_invalid_character_dropped(
        self, letter_config, filter_run_context, fake_engine
    ):
        paras = split_text_into_paragraphs("a\udc80b\n", letter_config, filter_run_context, fake_engine)

        assert paras[0].text == "ab"
        assert paras[0].length == 3

    def test_when_filter_mode_and_measurement_fails_then_paragraph_skipped(
        self, letter_config, filter_run_context, fake_engine_factory
    ):
        # Arrange
        engine = fake_engine_factory(fail_on="BAD")

        # Act
        paras = split_text_into_paragraphs("ok\nBAD\nfine\n", letter_config, filter_run_context, engine)

        # Assert
        assert [p.text for p in paras] == ["ok", "fine"]
        assert len(filter_run_context.warnings) == 1
        assert "offset 3" in filter_run_context.warnings[0]

    def test_when_not_filter_mode_and_measurement_fails_then_error_propagates(
        self, letter_config, run_context, fake_engine_factory
    ):
        engine = fake_engine_factory(fail_on="BAD")

        with pytest.raises(MeasurementError):
            split_text_into_paragraphs("ok\nBAD\n", letter_config, run_context, engine)

    def test_when_markup_mode_then_invalid_character_raises(self, run_context, fake_engine):
        config = LayoutConfig(page_width=612, page_height=792, do_use_markup=True)

        with pytest.raises(InvalidCharacterError):
            split_text_into_paragraphs("<b>a\udc80</b>", config, run_context, fake_engine)


class TestMarkupMode:

    def test_when_markup_then_whole_buffer_is_one_paragraph(self, run_context, fake_engine):
        config = LayoutConfig(page_width=612, page_height=792, do_use_markup=True)
        text = "one\ntwo\f\nthree\n"

        paras = split_text_into_paragraphs(text, config, run_context, fake_engine)

        assert len(paras) == 1
        assert paras[0].length == len(text)
        assert not paras[0].formfeed
        assert fake_engine.calls[0]["markup"] is True
