from __future__ import annotations

import io
from pathlib import Path

import pytest

from duty_picks.errors import EmptyRoster, InsufficientRoster, MalformedInput, SourceUnavailable
from duty_picks.roster import Record, check_roster, load_roster, read_roster


def write_csv(tmp_path: Path, content: str, name: str = "students.csv") -> str:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_load_keeps_row_order(tmp_path: Path) -> None:
    path = write_csv(tmp_path, "id,name\n1,Alice\n2,Bob\n3,Charlie\n")
    assert load_roster(path) == [Record("1", "Alice"), Record("2", "Bob"), Record("3", "Charlie")]


def test_header_columns_in_either_order() -> None:
    records = read_roster(io.StringIO("name,id\nAlice,1\nBob,2\n"), "mem")
    assert records == [Record("1", "Alice"), Record("2", "Bob")]


def test_duplicate_ids_are_kept() -> None:
    records = read_roster(io.StringIO("id,name\n1,Alice\n1,Alice\n"), "mem")
    assert len(records) == 2


def test_blank_lines_and_quoted_commas() -> None:
    records = read_roster(io.StringIO('id,name\n\n1,"Smith, John"\n\n2,Bob\n'), "mem")
    assert records == [Record("1", "Smith, John"), Record("2", "Bob")]


def test_bom_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffid,name\n1,Alice\n2,Bob\n".encode("utf-8"))
    assert [r.id for r in load_roster(str(path))] == ["1", "2"]


def test_empty_source_is_not_a_parse_failure() -> None:
    assert read_roster(io.StringIO(""), "mem") == []
    assert read_roster(io.StringIO("id,name\n"), "mem") == []


@pytest.mark.parametrize("content, cause", [
    ("id,name,extra\n1,Alice,x\n2,Bob,y\n", "unknown field `extra`"),
    ("id\n1\n2\n", "missing field `name`"),
    ("id,full_name\n1,Alice\n2,Bob\n", "unknown field `full_name`"),
    ("id,name,id\n1,Alice,1\n", "duplicate field `id`"),
    ("id;name\n1;Alice\n2;Bob\n", "unknown field `id;name`"),
])
def test_header_must_be_exactly_id_and_name(content: str, cause: str) -> None:
    with pytest.raises(MalformedInput) as exc:
        read_roster(io.StringIO(content), "roster.csv")
    assert cause in str(exc.value)
    assert str(exc.value).startswith("Error: Failed to parse CSV file 'roster.csv'")


def test_header_rejected_even_without_rows() -> None:
    with pytest.raises(MalformedInput):
        read_roster(io.StringIO("id,name,extra\n"), "mem")


def test_long_row_rejected() -> None:
    with pytest.raises(MalformedInput) as exc:
        read_roster(io.StringIO("id,name\n1,Alice\n2,Bob,extra\n"), "mem")
    assert "line 3: expected 2 fields, found 3" in str(exc.value)


def test_short_row_rejected() -> None:
    with pytest.raises(MalformedInput) as exc:
        read_roster(io.StringIO("id,name\n1,Alice\n2\n"), "mem")
    assert "expected 2 fields, found 1" in str(exc.value)


def test_invalid_utf8_rejected(tmp_path: Path) -> None:
    path = tmp_path / "latin1.csv"
    path.write_bytes(b"id,name\n1,Jos\xe9\n2,Bob\n")
    with pytest.raises(MalformedInput):
        load_roster(str(path))


def test_check_order_empty_then_insufficient() -> None:
    with pytest.raises(EmptyRoster):
        check_roster([], "mem")
    with pytest.raises(InsufficientRoster) as exc:
        check_roster([Record("1", "Alice")], "mem")
    assert exc.value.found == 1
    assert "Found 1." in str(exc.value)
    check_roster([Record("1", "Alice"), Record("2", "Bob")], "mem")


def test_load_header_only_is_empty_roster(tmp_path: Path) -> None:
    path = write_csv(tmp_path, "id,name\n")
    with pytest.raises(EmptyRoster) as exc:
        load_roster(path)
    assert str(exc.value) == f"Error: The student list in '{path}' is empty."


def test_load_fully_empty_file_is_empty_roster(tmp_path: Path) -> None:
    with pytest.raises(EmptyRoster):
        load_roster(write_csv(tmp_path, ""))


def test_load_one_row_is_insufficient(tmp_path: Path) -> None:
    path = write_csv(tmp_path, "id,name\n1,Alice\n")
    with pytest.raises(InsufficientRoster) as exc:
        load_roster(path)
    assert str(exc.value) == f"Error: Not enough students in '{path}' to select two. Found 1."


def test_missing_file_is_source_unavailable(tmp_path: Path) -> None:
    path = str(tmp_path / "nope.csv")
    with pytest.raises(SourceUnavailable) as exc:
        load_roster(path)
    msg = str(exc.value)
    assert msg.startswith(f"Error: Could not open file '{path}': ")
    assert "No such file" in msg


def test_long_name_is_accepted(tmp_path: Path) -> None:
    long_name = "A" * 200000
    path = write_csv(tmp_path, f"id,name\n1,{long_name}\n2,Bob\n")
    records = load_roster(path)
    assert records[0] == Record("1", long_name)
    assert len(records) == 2


def test_directory_is_source_unavailable(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable) as exc:
        load_roster(str(tmp_path))
    assert str(exc.value).startswith(f"Error: Could not open file '{tmp_path}': ")
