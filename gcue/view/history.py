"""
Console query history.

A plain newline-delimited file of previously submitted queries. Loading
and saving are best-effort: a missing or unwritable file never stops
the console. When ``readline`` is available, entries are also fed to it
so they can be recalled with the arrow keys.
"""

import logging
from pathlib import Path

try:
    import readline
except ImportError:  # Windows without pyreadline
    readline = None

logger = logging.getLogger("gcue.view.history")

MAX_ENTRIES = 100


class HistoryLog:
    """Ordered list of submitted queries persisted to ``path``.

    Only the most recent ``max_entries`` queries are kept.
    """

    def __init__(self, path: Path, use_readline: bool = True, max_entries: int = MAX_ENTRIES):
        self.path = Path(path)
        self.max_entries = max_entries
        self._entries: list[str] = []
        self._readline = readline if use_readline else None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def load(self) -> None:
        """Read the history file; a missing or unreadable file is ignored."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Couldn't read history from %s: %s", self.path, exc)
            return

        entries = [line for line in text.splitlines() if line.strip()]
        self._entries = entries[-self.max_entries:]
        if self._readline is not None:
            self._readline.clear_history()
            self._readline.set_history_length(self.max_entries)
            for entry in self._entries:
                self._readline.add_history(entry)

    def append(self, query: str) -> None:
        """Record a query.

        Multi-line queries are collapsed onto one line so the file stays
        one entry per line.
        """
        entry = " ".join(query.split())
        if not entry:
            return
        self._entries.append(entry)
        del self._entries[:-self.max_entries]
        if self._readline is not None:
            # input() already added the typed line; only add what it didn't
            length = self._readline.get_current_history_length()
            if length == 0 or self._readline.get_history_item(length) != entry:
                self._readline.add_history(entry)

    def save(self) -> bool:
        """Rewrite the history file. Returns False if it couldn't be written."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            contents = "".join(f"{entry}\n" for entry in self._entries)
            self.path.write_text(contents, encoding="utf-8")
        except OSError as exc:
            logger.warning("Couldn't save history to %s: %s", self.path, exc)
            return False
        return True
