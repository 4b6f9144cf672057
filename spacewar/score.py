"""Score records kept in a binary file of fixed-size entries."""

from __future__ import annotations

import os
import struct
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import SCORE_FILE

NAME_SIZE = 20
MODE_SIZE = 10
TOP_SCORES_DISPLAY = 10
SCORE_FILE_MODE = 0o644

_RECORD = struct.Struct(f"<{NAME_SIZE}si{MODE_SIZE}s6xq")
RECORD_SIZE = _RECORD.size


@dataclass(frozen=True)
class ScoreEntry:
    """One finished game."""

    name: str
    score: int
    mode: str
    timestamp: int = 0


def _encode_text(text: str, size: int) -> bytes:
    return text.encode("utf-8")[: size - 1]


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="ignore")


def _pack(entry: ScoreEntry) -> bytes:
    return _RECORD.pack(
        _encode_text(entry.name, NAME_SIZE),
        entry.score,
        _encode_text(entry.mode, MODE_SIZE),
        entry.timestamp,
    )


def _unpack(fields) -> ScoreEntry:
    name, score, mode, timestamp = fields
    return ScoreEntry(_decode_text(name), score, _decode_text(mode), timestamp)


def format_score_line(rank: int, entry: ScoreEntry) -> str:
    """Format one scoreboard row."""
    return f" #{rank:<2}  {entry.name:<10}   {entry.score:>6}   {entry.mode:<6}"


class ScoreBoard:
    """The score file on disk."""

    def __init__(self, path=SCORE_FILE):
        self.path = Path(path)

    def load(self) -> list[ScoreEntry]:
        """All complete records in file order; empty when the file is missing."""
        try:
            data = self.path.read_bytes()
        except OSError:
            return []
        whole = len(data) - len(data) % RECORD_SIZE
        return [_unpack(fields) for fields in _RECORD.iter_unpack(data[:whole])]

    def high_score(self) -> int:
        """The best score recorded, or 0."""
        return max([0, *(entry.score for entry in self.load())])

    def save(self, name: str, score: int, mode: str) -> Optional[ScoreEntry]:
        """Append a record stamped with the current time; None if the file cannot be written."""
        entry = ScoreEntry(
            name=_decode_text(_encode_text(name, NAME_SIZE)),
            score=score,
            mode=_decode_text(_encode_text(mode, MODE_SIZE)),
            timestamp=int(time.time()),
        )
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, SCORE_FILE_MODE)
        except OSError:
            return None
        with os.fdopen(fd, "ab") as handle:
            handle.write(_pack(entry))
        return entry

    def top(self, limit: int = TOP_SCORES_DISPLAY) -> list[ScoreEntry]:
        """Best records first; equal scores put the newer one first."""
        ranked = sorted(self.load(), key=lambda e: (-e.score, -e.timestamp))
        return ranked[:limit]