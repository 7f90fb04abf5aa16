from __future__ import annotations

from parse.scanner import (
    LineIndex,
    find_block_end,
    in_comment_or_string,
    in_string_at,
    is_inside_type_body,
    line_comment_start,
)


def test_line_index_converts_both_ways() -> None:
    lines = LineIndex("ab\ncd")

    position = lines.position(3)

    assert (position.line, position.col) == (2, 1)
    assert lines.offset(2, 2) == 4
    assert lines.line_count == 2


def test_line_index_clamps_out_of_range_input() -> None:
    lines = LineIndex("ab\ncd")

    assert lines.offset(1, 99) == 2
    assert lines.offset(99, 99) == 5
    assert lines.offset(0, 0) == 0
    assert lines.position(-5).offset == 0
    assert lines.position(100).offset == 5


def test_line_text_strips_carriage_return() -> None:
    lines = LineIndex("ab\r\ncd")

    assert lines.line_text(1) == "ab"
    assert lines.line_text(2) == "cd"


def test_find_block_end_ignores_braces_in_strings() -> None:
    text = 'x { "}" { } } tail'

    end = find_block_end(text, 0)

    assert text[:end] == 'x { "}" { } }'


def test_find_block_end_handles_escaped_quote() -> None:
    text = 'x { "a\\"}" } rest'

    end = find_block_end(text, 0)

    assert text[end:] == " rest"


def test_find_block_end_unterminated_returns_text_length() -> None:
    text = "fn a() { {"

    assert find_block_end(text, 0) == len(text)


def test_is_inside_type_body() -> None:
    text = "class A {\n    fn m() {}\n}\nfn f() {}\n"

    assert is_inside_type_body(text, text.index("fn m")) is True
    assert is_inside_type_body(text, text.index("fn f")) is False
    assert is_inside_type_body("fn free() {}", 0) is False


def test_string_and_comment_detection() -> None:
    line = 'let s = "a // b" // note'

    assert in_string_at(line, line.index("a //") + 1) is True
    assert in_string_at(line, 2) is False
    assert line_comment_start(line) == line.rindex("//")
    assert in_comment_or_string(line, line.index("note")) is True
    assert in_comment_or_string(line, 0) is False


def test_other_quote_kind_is_literal_inside_string() -> None:
    line = "x = \"it's\" + y"

    assert in_string_at(line, line.index("y")) is False
