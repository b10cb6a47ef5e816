"""
Unit tests for pager selection and invocation.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest

from gcue.service.pager import Pager, get_pager, page_results
from gcue.shared.config import GcueSettings
from gcue.shared.exceptions import ConfigurationError, PagerError


class TestPagerSelection:

    def test_custom_pager_is_shell_split(self):
        pager = Pager.custom("bat --style plain")

        assert pager.command("out.csv") == ["bat", "--style", "plain", "out.csv"]

    def test_empty_custom_pager_is_rejected(self):
        with pytest.raises(ConfigurationError):
            Pager.custom("   ")

    def test_default_pager(self):
        expected = ("more",) if sys.platform == "win32" else ("less",)

        assert Pager.default().argv == expected

    def test_get_pager_prefers_setting(self):
        settings = GcueSettings(_env_file=None, gcue_pager="vd")

        assert get_pager(settings).argv == ("vd",)

    def test_get_pager_falls_back_to_default(self, monkeypatch):
        monkeypatch.delenv("GCUE_PAGER", raising=False)
        settings = GcueSettings(_env_file=None)

        assert get_pager(settings) == Pager.default()


class TestPageResults:

    def test_runs_pager_with_file_as_last_argument(self, tmp_path):
        results_file = tmp_path / "results.csv"
        with patch("gcue.service.pager.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            page_results(results_file, Pager(("less", "-S")))

        mock_run.assert_called_once_with(["less", "-S", str(results_file)], check=False)

    def test_non_zero_exit_raises(self, tmp_path):
        with patch("gcue.service.pager.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=2)

            with pytest.raises(PagerError, match="exit code 2"):
                page_results(tmp_path / "results.csv", Pager(("less",)))

    def test_spawn_failure_raises(self, tmp_path):
        with pytest.raises(PagerError, match="couldn't execute pager command") as exc_info:
            page_results(tmp_path / "results.csv", Pager(("gcue-no-such-pager-binary",)))

        assert isinstance(exc_info.value.__cause__, OSError)
