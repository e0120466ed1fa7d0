"""Tests for report rendering."""

from fileops.models.search import LineHit, NameMatch, SearchMatch, SearchResult
from fileops.services import reports
from fileops.services.command import CommandResult
from fileops.services.file_manager import DirectoryEntry


def _hit(n: int) -> LineHit:
    return LineHit(line_number=n, content=f"foo {n}", highlighted=f"**foo** {n}")


class TestSearchReport:
    def test_empty_result(self):
        text = reports.render_search_report("foo", "/project", SearchResult())
        assert text == 'No matches for "foo" in any file under /project'

    def test_shows_first_three_hits_and_remainder(self):
        result = SearchResult(
            matches=[
                SearchMatch(
                    file="/project/a.js",
                    relative_path="a.js",
                    matches=[_hit(n) for n in range(1, 6)],
                )
            ]
        )

        text = reports.render_search_report("foo", "/project", result)

        assert "   └─ 5 match(es)" in text
        assert "   └─ Line 3: **foo** 3" in text
        assert "Line 4:" not in text
        assert "   └─ ... and 2 more match(es)" in text

    def test_numbers_files_in_order(self):
        result = SearchResult(
            matches=[
                SearchMatch(file="/p/a.js", relative_path="a.js", matches=[_hit(1)]),
                SearchMatch(file="/p/b.txt", relative_path="b.txt", matches=[_hit(1)]),
            ]
        )

        text = reports.render_search_report("foo", "/p", result)

        assert text.index("1. 📄 a.js") < text.index("2. 📄 b.txt")
        assert "and" not in text.split("2. 📄 b.txt")[1]

    def test_truncation_notice(self):
        result = SearchResult(
            matches=[SearchMatch(file="/p/a", relative_path="a", matches=[])],
            truncated=True,
        )
        assert "Result limit reached" in reports.render_search_report("x", "/p", result)


class TestNameReport:
    def test_empty(self):
        assert reports.render_name_report("*.rs", "/p", []) == 'No files matching pattern "*.rs" in /p'

    def test_lists_relative_paths(self):
        matches = [NameMatch(name="a.js", path="/p/src/a.js", relative_path="src/a.js", directory="/p/src")]

        text = reports.render_name_report("*.js", "/p", matches)

        assert "📊 Found 1 file(s):" in text
        assert "1. 📄 src/a.js" in text


class TestOtherReports:
    def test_directory_listing_marks_directories(self):
        entries = [DirectoryEntry(name="src", is_dir=True), DirectoryEntry(name="a.js", is_dir=False)]

        text = reports.render_directory_listing("/p", entries)

        assert text == "Contents of directory /p:\n\n📁 src\n📄 a.js"

    def test_command_result_sections(self):
        result = CommandResult(command="ls", exit_code=1, stdout="", stderr="nope\n")

        text = reports.render_command_result(result)

        assert text.startswith("$ ls\nExit code: 1")
        assert "stderr:\nnope" in text
        assert "stdout:" not in text
