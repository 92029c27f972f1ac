import asyncio

from scumfeed.models.source import Cursor
from scumfeed.parsers.reader import IncrementalReader, complete_lines

from conftest import write_log


def read(cursor, path, encoding="utf-16"):
    return asyncio.run(IncrementalReader(encoding).read(cursor, path))


def test_complete_lines_drops_torn_tail():
    assert complete_lines("a\r\nb\npartial") == ["a", "b"]
    assert complete_lines("a\n") == ["a"]
    assert complete_lines("\ufeffa\n") == ["a"]
    assert complete_lines("") == []


def test_first_activation_tails_from_end(log_dir):
    path = write_log(log_dir / "kill_1.log", ["one", "two", "three"])

    batch = read(Cursor("kills"), path)

    assert batch.lines == []
    assert batch.cursor.current_file == str(path)
    assert batch.cursor.last_line == 3
    assert not batch.cursor.fresh


def test_same_file_returns_only_new_lines(log_dir):
    path = write_log(log_dir / "kill_1.log", ["one", "two"])
    cursor = Cursor("kills").advance(str(path), 2)
    write_log(path, ["three", "four"], append=True)

    batch = read(cursor, path)

    assert [(line.number, line.text) for line in batch.lines] == [(3, "three"), (4, "four")]
    assert batch.cursor.last_line == 4
    assert not batch.rotated


def test_new_file_read_from_start(log_dir):
    old = write_log(log_dir / "kill_1.log", ["one", "two", "three"])
    new = write_log(log_dir / "kill_2.log", ["fresh"])
    cursor = Cursor("kills").advance(str(old), 3)

    batch = read(cursor, new)

    assert [line.text for line in batch.lines] == ["fresh"]
    assert batch.rotated
    assert batch.cursor.current_file == str(new)
    assert batch.cursor.last_line == 1


def test_reset_cursor_reads_new_file_from_start(log_dir):
    path = write_log(log_dir / "kill_2.log", ["a", "b"])
    cursor = Cursor("kills", current_file="/gone/kill_1.log", last_line=10, fresh=False).reset()

    batch = read(cursor, path)

    assert [line.number for line in batch.lines] == [1, 2]


def test_shrunk_file_is_read_again(log_dir):
    path = write_log(log_dir / "kill_1.log", ["new one"])
    cursor = Cursor("kills").advance(str(path), 5)

    batch = read(cursor, path)

    assert [line.text for line in batch.lines] == ["new one"]
    assert batch.rotated
    assert batch.cursor.last_line == 1


def test_torn_line_waits_for_its_newline(log_dir):
    path = write_log(log_dir / "kill_1.log", ["done"])
    cursor = Cursor("kills").advance(str(path), 1)
    write_log(path, ["half"], append=True, terminate=False)

    batch = read(cursor, path)
    assert batch.lines == []
    assert batch.cursor.last_line == 1

    write_log(path, [" written"], append=True)
    batch = read(batch.cursor, path)
    assert [line.text for line in batch.lines] == ["half written"]


def test_odd_byte_count_is_not_an_error(log_dir):
    path = write_log(log_dir / "kill_1.log", ["one"])
    cursor = Cursor("kills").advance(str(path), 1)
    with open(path, "ab") as f:
        f.write("two\n".encode("utf-16-le") + b"\x41")

    batch = read(cursor, path)

    assert [line.text for line in batch.lines] == ["two"]


def test_missing_file_means_no_lines(log_dir):
    assert read(Cursor("kills"), log_dir / "kill_missing.log") is None


def test_undecodable_bytes_mean_no_lines(log_dir):
    path = log_dir / "kill_1.log"
    path.write_bytes(b"\xff\xfe\xfa broken\n")

    assert read(Cursor("kills"), path, encoding="utf-8") is None
