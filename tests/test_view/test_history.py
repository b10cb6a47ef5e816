"""
Unit tests for the console's query history file.
"""

from gcue.view.history import HistoryLog


class TestHistoryLog:

    def test_missing_file_is_tolerated(self, tmp_path):
        history = HistoryLog(tmp_path / "missing" / "history.txt", use_readline=False)

        history.load()

        assert history.entries == []

    def test_load_append_save(self, tmp_path):
        path = tmp_path / "history.txt"
        path.write_text("MATCH (n) RETURN n\n\nRETURN 1\n", encoding="utf-8")
        history = HistoryLog(path, use_readline=False)

        history.load()
        history.append("RETURN 2")

        assert history.save() is True
        assert path.read_text(encoding="utf-8") == "MATCH (n) RETURN n\nRETURN 1\nRETURN 2\n"

    def test_save_creates_parent_directory(self, tmp_path):
        path = tmp_path / "gcue" / "history.txt"
        history = HistoryLog(path, use_readline=False)
        history.append("RETURN 1")

        assert history.save() is True
        assert path.exists()

    def test_multi_line_queries_are_collapsed(self, tmp_path):
        history = HistoryLog(tmp_path / "history.txt", use_readline=False)

        history.append("MATCH (n)\n  RETURN n\n")
        history.append("   ")

        assert history.entries == ["MATCH (n) RETURN n"]

    def test_save_failure_is_reported_not_raised(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        history = HistoryLog(blocker / "history.txt", use_readline=False)
        history.append("RETURN 1")

        assert history.save() is False

    def test_only_most_recent_entries_are_kept(self, tmp_path):
        path = tmp_path / "history.txt"
        path.write_text("".join(f"RETURN {i}\n" for i in range(5)), encoding="utf-8")
        history = HistoryLog(path, use_readline=False, max_entries=3)

        history.load()
        assert history.entries == ["RETURN 2", "RETURN 3", "RETURN 4"]

        history.append("RETURN 5")
        history.save()

        assert path.read_text(encoding="utf-8") == "RETURN 3\nRETURN 4\nRETURN 5\n"
