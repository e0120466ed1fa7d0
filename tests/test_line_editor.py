"""Tests for line-oriented file mutations."""

import asyncio
from pathlib import Path

import pytest

from fileops.exceptions import FileOperationError, LineIndexOutOfRangeError, ValidationError
from fileops.services.line_editor import (
    LineDocument,
    LineEditorService,
    delete_line,
    insert_line,
    replace_line,
    replace_substring,
)
from fileops.services.lock import PathLockRegistry
from fileops.services.workspace import WorkspaceService


@pytest.fixture
def abc_file(tmp_path: Path) -> Path:
    path = tmp_path / "abc.txt"
    path.write_text("a\nb\nc")
    return path


def _read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


class TestLineDocument:
    def test_parse_and_render_round_trip(self):
        for text in ("a\nb\nc", "a\nb\n", "single", "x\r\ny\r\n"):
            assert LineDocument.from_text(text).to_text() == text

    def test_empty_text_has_no_lines(self):
        assert LineDocument.from_text("").line_count == 0

    def test_trailing_newline_is_an_empty_last_line(self):
        assert LineDocument.from_text("a\nb\n").lines == ["a", "b", ""]

    def test_crlf_is_detected(self):
        document = LineDocument.from_text("a\r\nb")
        assert document.newline == "\r\n"
        assert document.lines == ["a", "b"]


class TestReplaceLine:
    def test_replace_middle_line(self, abc_file: Path):
        document = replace_line(abc_file, 2, "X")
        assert _read(abc_file) == "a\nX\nc"
        assert document.line_count == 3

    def test_replace_last_line(self, abc_file: Path):
        replace_line(abc_file, 3, "Z")
        assert _read(abc_file) == "a\nb\nZ"

    @pytest.mark.parametrize("index", [0, 4, -1])
    def test_out_of_range(self, abc_file: Path, index: int):
        with pytest.raises(LineIndexOutOfRangeError, match="out of range") as exc_info:
            replace_line(abc_file, index, "X")
        assert exc_info.value.index == index
        assert _read(abc_file) == "a\nb\nc"

    def test_line_count_is_unchanged(self, abc_file: Path):
        assert replace_line(abc_file, 1, "new").line_count == 3


class TestInsertLine:
    def test_insert_at_start(self, abc_file: Path):
        insert_line(abc_file, 1, "X")
        assert _read(abc_file) == "X\na\nb\nc"

    def test_insert_at_end(self, abc_file: Path):
        """Index N+1 appends a new last line."""
        document = insert_line(abc_file, 4, "X")
        assert _read(abc_file) == "a\nb\nc\nX"
        assert document.line_count == 4

    def test_insert_before_middle(self, abc_file: Path):
        insert_line(abc_file, 2, "X")
        assert _read(abc_file) == "a\nX\nb\nc"

    @pytest.mark.parametrize("index", [0, 5])
    def test_out_of_range(self, abc_file: Path, index: int):
        with pytest.raises(LineIndexOutOfRangeError):
            insert_line(abc_file, index, "X")
        assert _read(abc_file) == "a\nb\nc"

    def test_insert_into_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.txt"
        path.write_text("")
        insert_line(path, 1, "first")
        assert _read(path) == "first"


class TestDeleteLine:
    def test_delete_middle(self, abc_file: Path):
        document = delete_line(abc_file, 2)
        assert _read(abc_file) == "a\nc"
        assert document.line_count == 2

    def test_delete_only_line(self, tmp_path: Path):
        path = tmp_path / "one.txt"
        path.write_text("only")
        delete_line(path, 1)
        assert _read(path) == ""

    @pytest.mark.parametrize("index", [0, 4])
    def test_out_of_range(self, abc_file: Path, index: int):
        with pytest.raises(LineIndexOutOfRangeError):
            delete_line(abc_file, index)
        assert _read(abc_file) == "a\nb\nc"

    def test_append_then_delete_last_restores_file(self, abc_file: Path):
        insert_line(abc_file, 4, "tail")
        delete_line(abc_file, 4)
        assert _read(abc_file) == "a\nb\nc"

    def test_insert_then_delete_restores_file(self, abc_file: Path):
        insert_line(abc_file, 2, "temporary")
        delete_line(abc_file, 2)
        assert _read(abc_file) == "a\nb\nc"


class TestNewlinePreservation:
    def test_crlf_file_stays_crlf(self, tmp_path: Path):
        path = tmp_path / "win.txt"
        path.write_bytes(b"one\r\ntwo\r\nthree")

        replace_line(path, 2, "TWO")

        assert path.read_bytes() == b"one\r\nTWO\r\nthree"

    def test_trailing_newline_survives_edit(self, tmp_path: Path):
        path = tmp_path / "trail.txt"
        path.write_text("a\nb\n")

        replace_line(path, 1, "A")

        assert _read(path) == "A\nb\n"

    def test_mixed_endings_round_trip(self):
        text = "a\r\nb\nc\r\n"
        assert LineDocument.from_text(text).to_text() == text

    def test_delete_in_mixed_file_keeps_other_lines(self, tmp_path: Path):
        path = tmp_path / "mixed.txt"
        path.write_bytes(b"a\r\nb\nc")

        delete_line(path, 2)

        assert path.read_bytes() == b"a\r\nc"

    def test_replace_in_mixed_file_keeps_each_terminator(self, tmp_path: Path):
        path = tmp_path / "mixed.txt"
        path.write_bytes(b"a\r\nb\nc")

        replace_line(path, 2, "X")

        assert path.read_bytes() == b"a\r\nX\nc"

    def test_insert_in_mixed_file_only_adds_new_line(self, tmp_path: Path):
        path = tmp_path / "mixed.txt"
        path.write_bytes(b"a\r\nb\nc")

        insert_line(path, 2, "new")

        assert path.read_bytes() == b"a\r\nnew\nb\nc"

    def test_delete_last_line_keeps_trailing_newline_state(self, tmp_path: Path):
        path = tmp_path / "win.txt"
        path.write_bytes(b"one\r\ntwo\r\nthree")

        delete_line(path, 3)

        assert path.read_bytes() == b"one\r\ntwo"


class TestReplaceSubstring:
    def test_replaces_every_occurrence(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("foo bar\nfoo baz foo")

        _, count = replace_substring(path, "foo", "qux")

        assert count == 3
        assert _read(path) == "qux bar\nqux baz qux"

    def test_group_references(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("name=alice")

        replace_substring(path, r"name=(\w+)", r"user=\1")

        assert _read(path) == "user=alice"

    def test_no_match_leaves_file_untouched(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("unchanged")
        before = path.stat().st_mtime_ns

        _, count = replace_substring(path, "absent", "x")

        assert count == 0
        assert path.stat().st_mtime_ns == before

    def test_invalid_pattern(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("text")

        with pytest.raises(ValidationError, match="Invalid search pattern"):
            replace_substring(path, "(", "x")

    def test_invalid_replacement_template(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_text("text")

        with pytest.raises(ValidationError, match="Invalid replacement"):
            replace_substring(path, "text", r"\2")
        assert _read(path) == "text"


class TestMissingFile:
    def test_missing_file_raises_file_operation_error(self, tmp_path: Path):
        with pytest.raises(FileOperationError, match="File not found"):
            replace_line(tmp_path / "missing.txt", 1, "x")


@pytest.mark.asyncio
class TestLineEditorService:
    async def test_replace_line_result(self, abc_file: Path, workspace: WorkspaceService):
        service = LineEditorService(workspace)

        result = await service.replace_line(str(abc_file), 2, "X")

        assert result.operation == "replace_line"
        assert result.line_number == 2
        assert result.line_count == 3
        assert result.path == str(abc_file)

    async def test_insert_and_delete(self, abc_file: Path, workspace: WorkspaceService):
        service = LineEditorService(workspace)

        inserted = await service.insert_line(str(abc_file), 4, "d")
        deleted = await service.delete_line(str(abc_file), 1)

        assert inserted.line_count == 4
        assert deleted.line_count == 3
        assert _read(abc_file) == "b\nc\nd"

    async def test_replace_in_file_counts(self, abc_file: Path, workspace: WorkspaceService):
        service = LineEditorService(workspace)

        result = await service.replace_in_file(str(abc_file), "[ab]", "z")

        assert result.replacements == 2
        assert _read(abc_file) == "z\nz\nc"

    async def test_out_of_range_propagates(self, abc_file: Path, workspace: WorkspaceService):
        service = LineEditorService(workspace)

        with pytest.raises(LineIndexOutOfRangeError):
            await service.delete_line(str(abc_file), 9)

    async def test_concurrent_inserts_are_not_lost(self, tmp_path: Path, workspace: WorkspaceService):
        """Edits of the same file serialize, so every insert survives."""
        path = tmp_path / "shared.txt"
        path.write_text("base")
        service = LineEditorService(workspace, locks=PathLockRegistry())

        await asyncio.gather(*(service.insert_line(str(path), 1, f"line{i}") for i in range(20)))

        lines = _read(path).split("\n")
        assert len(lines) == 21
        assert lines[-1] == "base"
        assert {f"line{i}" for i in range(20)} <= set(lines)

    async def test_workspace_confinement(self, tmp_path: Path):
        root = tmp_path / "ws"
        root.mkdir()
        (tmp_path / "outside.txt").write_text("x")
        service = LineEditorService(WorkspaceService(str(root)))

        with pytest.raises(ValidationError, match="Invalid path"):
            await service.replace_line(str(tmp_path / "outside.txt"), 1, "y")
