"""Export formats supported by the console and the query command."""

from enum import Enum


class OutputFormat(str, Enum):
    CSV = "csv"
    JSON = "json"

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """Parse a user-supplied format name.

        Raises:
            ValueError: If the name is neither ``csv`` nor ``json``.
        """
        trimmed = text.strip()
        for fmt in cls:
            if fmt.value == trimmed:
                return fmt
        raise ValueError("invalid format provided; allowed values: [csv, json]")
