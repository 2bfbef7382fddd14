"""Chunk data models."""
from dataclasses import dataclass
from typing import List

from models.source import SourceItem


@dataclass
class Chunk:
    """An order-preserving batch of source items sent together in one request."""
    items: List[SourceItem]
    token_count: int
    payload: str  # JSON list of {"path", "contents", "token_count"}

    @property
    def paths(self) -> List[str]:
        return [item.path for item in self.items]
