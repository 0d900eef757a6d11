"""The five-entry high score table and its checksummed storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .options import Settings

TABLE_SIZE = 5
MAX_NAME_LENGTH = 31
EMPTY_SCORE = -999
DEFAULT_VERIFICATION = 7


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def _name_checksum(name: str) -> int:
    return sum(b - 256 if b >= 128 else b for b in name.encode("utf-8"))


@dataclass
class HighScoreEntry:
    name: str = ""
    score: int = EMPTY_SCORE


class HighScoreTable:
    """Five entries, best first."""

    def __init__(self) -> None:
        self.entries: list[HighScoreEntry] = []
        self.clear()

    def clear(self) -> None:
        self.entries = [HighScoreEntry() for _ in range(TABLE_SIZE)]

    def _checksum(self) -> int:
        total = 0
        for entry in self.entries:
            total = _wrap32(total + _name_checksum(entry.name) + entry.score)
        return total

    def read(self, settings: Settings) -> bool:
        """Load the table; a failed checksum leaves it cleared and returns False."""
        self.clear()
        for position, entry in enumerate(self.entries):
            entry.name = settings.get_string(f"{position}.Name", "")[:MAX_NAME_LENGTH]
            entry.score = settings.get_int(f"{position}.Score", entry.score)
        if self._checksum() != settings.get_int("Verification", DEFAULT_VERIFICATION):
            self.clear()
            return False
        return True

    def write(self, settings: Settings) -> None:
        for position, entry in enumerate(self.entries):
            settings.set_string(f"{position}.Name", entry.name)
            settings.set_int(f"{position}.Score", entry.score)
        settings.set_int("Verification", self._checksum())

    def get_score_position(self, score: int) -> Optional[int]:
        """Position a score would take, or None if it does not make the table."""
        if score <= 0:
            return None
        for position, entry in enumerate(self.entries):
            if entry.score < score:
                return position
        return None

    def place_new_score_into(self, score: int, name: str, position: Optional[int]) -> Optional[int]:
        """Insert a score at ``position``, pushing lower entries down.

        A None or negative position leaves the table unchanged.
        """
        if position is None or position < 0:
            return position
        if position >= TABLE_SIZE:
            raise IndexError(f"high score position out of range: {position}")
        self.entries.insert(position, HighScoreEntry(name[:MAX_NAME_LENGTH], score))
        del self.entries[TABLE_SIZE:]
        return position