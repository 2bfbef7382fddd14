"""Pipeline result models."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class PassResult:
    """Trimmed answers of one pass over all chunks, in chunk order."""
    responses: List[str] = field(default_factory=list)
    usd_cost: float = 0.0
    failed_chunks: int = 0


@dataclass
class RunResult:
    """Final output of a full run."""
    initial_text: str
    fix_text: str
    confidence: int  # 1 to 10, 0 when the confidence pass did not run
    usd_cost: float
    chunk_count: int = 0
    failed_chunks: int = 0  # chunk requests skipped after both models failed, over all passes
