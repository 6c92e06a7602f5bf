import pytest

from splatforge.codewriter import CodeWriter


def test_empty_writer_has_no_text():
    assert CodeWriter().text() == ""


def test_block_is_indented():
    writer = CodeWriter()
    writer.add_lines(["fn a() {", "x", "}"])
    assert writer.text() == "fn a() {\n    x\n}\n"


def test_nested_blocks_indent_by_depth():
    writer = CodeWriter()
    writer.add_lines(["a {", "b {", "c", "}", "}"])
    lines = writer.text().splitlines()
    indents = [len(line) - len(line.lstrip(" ")) for line in lines]
    assert indents == [0, 4, 8, 4, 0]


def test_line_with_both_braces_keeps_depth():
    writer = CodeWriter()
    writer.add_lines(["a {", "} else {", "y", "}"])
    lines = writer.text().splitlines()
    assert lines[1] == "} else {"
    assert lines[2] == _indent(1) + "y"
    assert lines[3] == "}"


def test_every_line_ends_with_newline():
    writer = CodeWriter()
    writer.add_lines(["one", "two {", "three", "}"])
    text = writer.text()
    assert text.endswith("\n")
    assert text.count("\n") == 4


def test_add_line_matches_add_lines():
    lines = ["mod x {", "pub const A: u32 = 1;", "}"]
    single = CodeWriter()
    for line in lines:
        single.add_line(line)
    batch = CodeWriter()
    batch.add_lines(lines)
    assert single.text() == batch.text()


def test_unbalanced_close_raises():
    writer = CodeWriter()
    with pytest.raises(ValueError):
        writer.add_line("}")


def _indent(depth):
    return " " * (4 * depth)