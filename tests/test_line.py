"""Tests for pi.reader.line.Line."""

from __future__ import annotations

import random
import re

import pytest

from pi.reader.line import Line, LineMode


class TestLineBasics:
    """Construction, text and string conversion."""

    def test_empty_by_default(self) -> None:
        line = Line()
        assert line.prompt == ""
        assert line.text == ""
        assert line.size == 0
        assert str(line) == ""

    def test_prompt_is_display_only(self) -> None:
        line = Line("aaa", prompt=">> ")
        assert line.prompt == ">> "
        assert line.text == "aaa"
        assert line.size == 6
        assert str(line) == ">> aaa"

    def test_cursor_starts_at_end(self) -> None:
        assert Line("abc").cursor == 3

    def test_equality_with_strings_and_lines(self) -> None:
        assert Line("aa", prompt="> ") == "> aa"
        assert Line("aa") == Line("aa")
        assert Line("aa") != Line("ab")


class TestLineCursor:
    """Cursor movement and clamping."""

    def test_move_left_and_right_are_clamped(self) -> None:
        line = Line("aaaaa")
        for _ in range(5):
            line.move_left()
        assert line.cursor == 0
        assert line.at_start

        line.move_left(5)
        assert line.cursor == 0

        line.move_right(20)
        assert line.cursor == 5
        assert line.at_end

    def test_move_to_start_and_end(self) -> None:
        line = Line("abc")
        line.move_to_start()
        assert line.cursor == 0
        line.move_to_end()
        assert line.cursor == 3


class TestLineInsert:
    """Inserting text at and past the cursor."""

    def test_setitem_inserts_and_slice_replaces(self) -> None:
        line = Line("aaaaa")
        line[0] = "test"
        assert line.text == "testaaaaa"

        line[4:7] = ""
        assert line.text == "testaa"

    def test_insert_at_start(self) -> None:
        line = Line("aaaaa")
        line[0] = "b"
        assert line.cursor == 1
        assert line.text == "baaaaa"

        line.insert("b")
        assert line.text == "bbaaaaa"

    def test_insert_before_last_char(self) -> None:
        line = Line("aaaaa")
        line[4] = "b"
        assert line.cursor == 5
        assert line.text == "aaaaba"

    def test_insert_inside(self) -> None:
        line = Line("aaaaa")
        line[2] = "b"
        assert line.cursor == 3
        assert line.text == "aabaaa"

    def test_insert_past_end_pads_with_spaces(self) -> None:
        line = Line("aaaaa")
        line.insert_at(10, "b")
        assert line.cursor == 11
        assert line.text == "aaaaa     b"

    def test_insert_into_empty_line(self) -> None:
        line = Line("")
        line.insert("a")
        assert line.cursor == 1
        line.insert("b")
        assert line.cursor == 2
        assert str(line) == "ab"
        line.insert("cc")
        assert line.cursor == 4
        assert str(line) == "abcc"

    def test_insert_at_cursor(self) -> None:
        line = Line("aaaaa")
        line.move_left(2)
        line.insert(" test ")
        assert line.text == "aaa test aa"
        assert line.cursor == 9
        line.move_right()
        assert line.cursor == 10


class TestLineDelete:
    """Deleting and removing characters."""

    def test_remove_before_cursor(self) -> None:
        line = Line("abcdef")
        line.remove(2)
        assert line.text == "abcd"
        assert line.cursor == 4

        line.move_left()
        line.move_left()
        line.remove()
        assert line.text == "acd"
        assert line.cursor == 1

        line.insert("x")
        assert line.text == "axcd"

    def test_remove_at_start_is_noop(self) -> None:
        line = Line("abc")
        line.move_to_start()
        line.remove()
        assert line.text == "abc"
        assert line.cursor == 0

    def test_delete_under_cursor(self) -> None:
        line = Line("abcdef")
        line.move_left(3)
        line.delete()
        assert line.text == "abcef"

        line.move_right()
        line.delete()
        assert line.text == "abce"

        line.move_left(4)
        line.delete()
        assert line.text == "bce"

    def test_delete_at_end_is_noop(self) -> None:
        line = Line("abc")
        line.delete()
        assert line.text == "abc"

    def test_delete_range_keeps_cursor_in_bounds(self) -> None:
        line = Line("abcdef")
        line.delete_range(2, 10)
        assert line.text == "ab"
        assert line.cursor == 2

    def test_cursor_stays_within_text_for_random_edits(self) -> None:
        rng = random.Random(7)
        line = Line()
        for _ in range(500):
            op = rng.choice(["insert", "insert_at", "delete", "remove", "left", "right"])
            if op == "insert":
                line.insert(rng.choice(["a", "bc", "한"]))
            elif op == "insert_at":
                line.insert_at(rng.randint(0, len(line.text) + 3), "x")
            elif op == "delete":
                line.delete_range(rng.randint(0, len(line.text)), rng.randint(0, 3))
            elif op == "remove":
                line.remove(rng.randint(0, 3))
            elif op == "left":
                line.move_left(rng.randint(0, 3))
            else:
                line.move_right(rng.randint(0, 3))
            assert 0 <= line.cursor <= len(line.text)


class TestLineMode:
    """Edit and replace modes."""

    def test_replace_moves_cursor_to_end_and_switches_mode(self) -> None:
        line = Line("x" * 6)
        assert line.mode is LineMode.EDIT
        assert line.editing

        line.replace("y" * 8)
        assert line.text == "y" * 8
        assert line.cursor == 8
        assert line.replacing

        line.insert("z")
        assert line.text == "y" * 8 + "z"
        assert line.cursor == 9
        assert line.editing


class TestLineWidth:
    """Display width of prompts and text."""

    def test_escape_sequences_do_not_count(self) -> None:
        line = Line("\x1b[31mred\x1b[0m", prompt="\x1b[1m> \x1b[0m")
        assert line.text_size == 3
        assert line.prompt_size == 2
        assert line.size == 5

    def test_wide_characters_take_two_columns(self) -> None:
        line = Line("한글")
        assert line.text_size == 4
        line.move_left()
        assert line.cursor_offset == 2
        assert line.tail_size == 2

    def test_multiline_prompt_counts_full_rows(self) -> None:
        line = Line("", prompt="one\ntwo\nthree", screen_width=50)
        assert line.prompt_size == len("onetwothree") + 2 * 50

    def test_trailing_prompt_newline_adds_no_row(self) -> None:
        line = Line("", prompt="name:\n", screen_width=50)
        assert line.prompt_size == 5


class TestLineWords:
    """Word boundaries around the cursor."""

    def test_empty_line(self) -> None:
        line = Line("")
        assert line.word() == ""
        assert line.word_to_complete() == ""
        assert line.word_start_pos() == 0
        assert line.word_end_pos() == 0

    def test_no_separators(self) -> None:
        line = Line("foo")
        assert line.word() == "foo"
        assert line.word_to_complete() == "foo"
        assert line.word_range() == (0, 2)

    @pytest.mark.parametrize(
        ("offset", "word", "to_complete", "span"),
        [
            (0, "foo", "", (0, 2)),
            (2, "foo", "fo", (0, 2)),
            (6, "bar", "ba", (4, 6)),
            (10, "baz", "ba", (8, 10)),
            (11, "baz", "baz", (8, 10)),
        ],
    )
    def test_word_around_cursor(self, offset: int, word: str, to_complete: str, span: tuple[int, int]) -> None:
        line = Line("foo bar baz")
        line.move_to_start()
        line.move_right(offset)
        assert line.word() == word
        assert line.word_to_complete() == to_complete
        assert line.word_range() == span

    def test_word_before_break_character(self) -> None:
        line = Line("foo bar")
        line.move_to_start()
        line.move_right(3)
        assert line.word_boundary
        assert line.word() == "foo"
        assert line.word_to_complete() == "foo"
        assert line.word_range() == (0, 2)

    def test_word_after_break_character(self) -> None:
        line = Line("foo bar")
        line.move_to_start()
        line.move_right(3)
        assert line.word(before=False) == "bar"
        assert line.word_to_complete(before=False) == ""
        assert line.word_start_pos(before=False) == 4
        assert line.word_end_pos(from_=line.cursor + 1) == 6

    def test_whole_word_after_cursor(self) -> None:
        line = Line("foo bar")
        line.move_to_start()
        line.move_right(4)
        assert line.word() == "bar"
        assert line.word_to_complete() == ""
        assert line.word_range() == (4, 6)

    def test_default_shell_break_characters(self) -> None:
        line = Line("aa\tbb\ncc\"dd\\ee'ff`gg@hh$ii>jj<kk=ll|mm&nn{oo(pp")
        line.move_to_start()
        line.move_right(2)
        assert line.word() == "aa"
        assert line.word_to_complete() == "aa"

        for word in "bb cc dd ee ff gg hh ii jj kk ll mm nn oo pp".split():
            line.move_right(3)
            assert line.word() == word
            assert line.word_to_complete() == word

    @pytest.mark.parametrize("separator", ["_", re.compile("_")])
    def test_custom_separator(self, separator: str | re.Pattern[str]) -> None:
        line = Line("foo_bar", separator=separator)
        line.move_to_start()
        line.move_right(3)
        assert line.word() == "foo"
        assert line.word_to_complete() == "foo"
        assert line.word_range() == (0, 2)
