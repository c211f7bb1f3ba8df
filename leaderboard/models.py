"""Score entry value type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int
    timestamp: int  # epoch milliseconds

    @property
    def sort_key(self) -> tuple[int, int]:
        # Ascending order of this key is leaderboard order.
        return (-self.score, -self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "score": self.score, "timestamp": self.timestamp}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ScoreEntry":
        return cls(name=str(row["name"]), score=int(row["score"]), timestamp=int(row["timestamp"]))
