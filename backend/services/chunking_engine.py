"""Chunking engine that packs source files into token-bounded batches."""
import json
import logging
from dataclasses import replace
from typing import Callable, List, Sequence

from models.chunk import Chunk
from models.source import SourceItem

logger = logging.getLogger(__name__)


class SerializationError(Exception):
    """A chunk could not be serialized."""


class ChunkingEngine:
    """Packs files into ordered chunks whose summed token cost stays within a budget."""

    def chunk(
        self,
        items: Sequence[SourceItem],
        cost_fn: Callable[[SourceItem], int],
        budget: int,
    ) -> List[Chunk]:
        """
        Greedy, order-preserving linear packing.

        A chunk is sealed when the next item would push it over the budget. An item that
        exceeds the budget on its own is never split; it ends up alone in its chunk.

        Args:
            items: Files in the order they should be sent
            cost_fn: Token cost of one item
            budget: Maximum summed token cost per chunk

        Returns:
            Ordered list of chunks covering every item exactly once

        Raises:
            SerializationError: If a chunk cannot be encoded as JSON
        """
        chunks: List[Chunk] = []
        current: List[SourceItem] = []
        costs: List[int] = []
        current_tokens = 0

        for item in items:
            cost = cost_fn(item)
            if current and current_tokens + cost > budget:
                chunks.append(self._seal(current, costs, current_tokens))
                current, costs, current_tokens = [], [], 0

            current.append(item)
            costs.append(cost)
            current_tokens += cost

        if current:
            chunks.append(self._seal(current, costs, current_tokens))

        logger.info(f"Packed {len(items)} files into {len(chunks)} chunks (budget: {budget} tokens)")
        return chunks

    def _seal(self, items: List[SourceItem], costs: List[int], token_count: int) -> Chunk:
        entries = [replace(item, token_count=cost).to_dict() for item, cost in zip(items, costs)]
        try:
            payload = json.dumps(entries, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Error serializing chunk of {len(items)} files: {e}")
            raise SerializationError(f"error serializing chunk: {e}") from e
        return Chunk(items=list(items), token_count=token_count, payload=payload)
