"""Token counting through the remote count endpoint, with a local tiktoken estimate as fallback."""
import json
import logging
import math
from functools import lru_cache
from typing import Optional

import httpx
import tiktoken

from config import CHARS_PER_TOKEN_ESTIMATE, LOCAL_ENCODING, REQUEST_TIMEOUT
from models.profile import ModelProfile
from services.llm_client import FORBIDDEN_MARKER, post_json

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_encoder():
    """Load the tiktoken encoding once. Returns None if it cannot be loaded."""
    try:
        encoder = tiktoken.get_encoding(LOCAL_ENCODING)
        logger.info(f"Initialized tiktoken encoder ({LOCAL_ENCODING})")
        return encoder
    except Exception as e:
        logger.warning(
            f"Could not load tiktoken encoding {LOCAL_ENCODING}, "
            f"using rough estimate (len/{CHARS_PER_TOKEN_ESTIMATE}): {e}"
        )
        return None


def estimate_tokens(text: str) -> int:
    """Deterministic local token estimate."""
    if not text:
        return 0
    encoder = _get_encoder()
    if encoder is not None:
        return len(encoder.encode(text, disallowed_special=()))
    return math.ceil(len(text) / CHARS_PER_TOKEN_ESTIMATE)


class TokenCounter:
    """Counts prompt tokens. Never raises: remote failures degrade to the local estimate."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, silent: bool = False):
        self.timeout = timeout
        self.silent = silent

    def count(self, text: str, profile: ModelProfile) -> int:
        """
        Return the number of tokens in text for the given model.

        Only structured-family models are counted remotely; all others use the local estimate.
        """
        if not profile.is_structured:
            return estimate_tokens(text)

        remote = self._count_remote(text, profile)
        if remote is None:
            return estimate_tokens(text)
        return remote

    def _count_remote(self, text: str, profile: ModelProfile) -> Optional[int]:
        url = profile.count_url
        payload = {"prompt": text, "model": profile.name}

        if not self.silent:
            logger.info(f"Sending a token count request to {url} using the {profile.name} model...")

        try:
            _, body = post_json(url, payload, self.timeout)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not serialize token count request: {e}")
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Could not send token count request to {url}: {e}")
            return None

        try:
            data = json.loads(body)
        except ValueError:
            data = None

        # Expects a single "tokens" key with an integer value
        if isinstance(data, dict):
            tokens = data.get("tokens")
            if isinstance(tokens, int) and not isinstance(tokens, bool):
                return tokens

        if FORBIDDEN_MARKER in body:
            logger.warning(f'Got "403 Forbidden" when contacting {url}, are the network settings correct?')
            return None

        logger.warning(
            f"Got a string back from {url}, expected JSON with a token count instead: {body.strip()[:200]}"
        )
        return None
