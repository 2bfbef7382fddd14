"""Output evaluator that filters and aggregates per-chunk answers."""
import logging
import re
from typing import Iterable, List, Optional

from config import DEFAULT_CONFIDENCE

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class OutputEvaluator:
    """Decides which model answers are noise and folds confidence answers into one score."""

    # A combined answer starting with "No " and shorter than this many spaces means nothing was found
    NOTHING_FOUND_MAX_SPACES = 5

    FIX_NEGATIVE_SUFFIXES = (" found.", " needed.")

    @staticmethod
    def is_negative_result(response: str) -> bool:
        """True for initial pass answers like "No bugs found."."""
        return response.startswith("No") and response.endswith("found.")

    @classmethod
    def is_negative_fix(cls, response: str) -> bool:
        """True for fix pass answers like "No diff needed." or "No typos found."."""
        return response.startswith("No ") and response.endswith(cls.FIX_NEGATIVE_SUFFIXES)

    @classmethod
    def nothing_found(cls, combined: str) -> bool:
        """True when a combined initial answer is empty or a short negative statement."""
        if not combined:
            return True
        return combined.startswith("No ") and combined.count(" ") < cls.NOTHING_FOUND_MAX_SPACES

    def combine_initial(self, responses: Iterable[str]) -> str:
        """Join initial pass answers, dropping negative results."""
        kept = [r for r in responses if not self.is_negative_result(r)]
        return "\n".join(kept).strip()

    def combine_fixes(self, responses: Iterable[str]) -> str:
        """Join fix pass answers, dropping "No ... found." and "No ... needed." replies."""
        kept = [r for r in responses if not self.is_negative_fix(r)]
        return "\n".join(kept).strip()

    @staticmethod
    def parse_confidence(response: str) -> Optional[int]:
        """Parse a confidence reply as a plain integer, or None."""
        text = response.strip()
        if not _INTEGER.fullmatch(text):
            return None
        return int(text)

    def aggregate_confidence(self, responses: List[str]) -> int:
        """
        Fold numeric answers into one confidence score.

        The first number seeds the running value and every later number is averaged into it,
        (running + next) / 2, so later answers weigh more than earlier ones. Non-numeric answers
        are ignored. Returns DEFAULT_CONFIDENCE when no answer is numeric.
        """
        confidence: Optional[float] = None
        for response in responses:
            value = self.parse_confidence(response)
            if value is None:
                logger.debug(f"Ignoring non-numeric confidence answer: {response[:50]}")
                continue
            if confidence is None:
                confidence = float(value)
            else:
                confidence = (confidence + value) / 2.0

        if confidence is None:
            return DEFAULT_CONFIDENCE
        return int(confidence)
