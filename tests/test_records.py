"""Tests for reading record files and writing allocation plans."""

import io

import pytest

from filealloc.algorithms.allocator import allocate_files
from filealloc.core.models import FileItem, Node
from filealloc.runner.records import (
    MAX_SIZE,
    RecordError,
    parse_record,
    read_records,
    write_plan,
)


@pytest.fixture
def write_input(tmp_path):
    def _write(text: str, name: str = "input.txt"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


class TestParseRecord:
    def test_valid_record(self):
        record = parse_record("file01 1024")
        assert record.name == "file01"
        assert record.size == 1024

    @pytest.mark.parametrize("line", ["# a comment", "#file 10", "", "   ", "\t"])
    def test_skipped_lines(self, line):
        assert parse_record(line) is None

    def test_surrounding_whitespace(self):
        record = parse_record("  node7\t  300  ")
        assert (record.name, record.size) == ("node7", 300)

    def test_zero_size(self):
        assert parse_record("empty 0").size == 0

    @pytest.mark.parametrize("line, message", [
        ("a 10 extra", "Too many fields"),
        ("a", "Missing size"),
        ("a -3", "greater than or equal to 0"),
        ("a ten", "not an integer"),
        ("a 1.5", "not an integer"),
        ("a 1_000", "not an integer"),
        ("a \u0661\u0662", "not an integer"),
        ("a 0x10", "not an integer"),
    ])
    def test_faulty_lines(self, line, message):
        with pytest.raises(ValueError, match=message):
            parse_record(line)

    def test_size_limit(self):
        assert parse_record(f"a {MAX_SIZE}").size == MAX_SIZE
        with pytest.raises(ValueError):
            parse_record(f"a {MAX_SIZE + 1}")

    def test_leading_zeros(self):
        assert parse_record("a 007").size == 7


class TestReadRecords:
    def test_reads_files(self, write_input):
        path = write_input("# files\nx 6\n\ny 4\n")
        assert read_records(path, "file") == [FileItem("x", 6), FileItem("y", 4)]

    def test_reads_nodes(self, write_input):
        path = write_input("A 10\nB 5\n")
        nodes = read_records(path, "node")
        assert nodes == [Node("A", 10), Node("B", 5)]
        assert all(n.occupied == 0 for n in nodes)

    def test_empty_file(self, write_input):
        assert read_records(write_input(""), "file") == []

    def test_faulty_line_reports_location(self, write_input):
        path = write_input("x 6\n# ok\ny 4 5\n")
        with pytest.raises(RecordError) as exc_info:
            read_records(path, "file")
        err = exc_info.value
        assert err.line_no == 3
        assert err.line == "y 4 5"
        assert err.path == path
        assert "Too many fields" in str(err)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordError, match="Cannot open input file"):
            read_records(tmp_path / "nope.txt", "node")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"f\xff\xfe 3\n")
        with pytest.raises(RecordError, match="not valid UTF-8"):
            read_records(path, "file")


class TestWritePlan:
    def test_null_for_unassigned(self):
        files = [FileItem("X", 6), FileItem("P", 60), FileItem("Y", 4)]
        result = allocate_files(files, [Node("A", 10), Node("B", 5)])
        out = io.StringIO()
        write_plan(result, out)
        assert out.getvalue() == "X A\nP NULL\nY B\n"

    def test_empty_plan(self):
        out = io.StringIO()
        write_plan(allocate_files([], []), out)
        assert out.getvalue() == ""
