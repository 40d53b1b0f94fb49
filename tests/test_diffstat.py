"""Tests for diff summarization."""

from starship_jj.diffstat import DiffStats, summarize
from starship_jj.engine import FileDiff


class TestSummarize:
    def test_empty_stream(self):
        stats = summarize([])
        assert stats == DiffStats()
        assert stats.is_empty()

    def test_counts(self):
        stats = summarize(
            [
                FileDiff(path="a.py", lines_added=3, lines_removed=1),
                FileDiff(path="b.py", lines_added=0, lines_removed=4),
            ]
        )
        assert stats == DiffStats(files_changed=2, lines_added=3, lines_removed=5)
        assert not stats.is_empty()

    def test_duplicate_paths_count_once(self):
        stats = summarize(
            [
                FileDiff(path="a.py", lines_added=1, lines_removed=0),
                FileDiff(path="a.py", lines_added=2, lines_removed=0),
            ]
        )
        assert stats.files_changed == 1
        assert stats.lines_added == 3

    def test_pure_rename_is_not_empty(self):
        stats = summarize([FileDiff(path="new.py", lines_added=0, lines_removed=0, source_path="old.py")])
        assert stats == DiffStats(files_changed=1)
        assert not stats.is_empty()
