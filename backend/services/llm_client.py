"""LLM client for the remote prompt endpoint."""
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import httpx

from config import REQUEST_TIMEOUT
from models.profile import ModelProfile

logger = logging.getLogger(__name__)

FORBIDDEN_MARKER = "</title>403 Forbidden"

_CODE_FENCE = re.compile(r"^\s*```(?:[a-zA-Z]+)?\n(.*?)\n```$", re.MULTILINE | re.DOTALL)


@dataclass
class LLMError:
    """Structured error from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Base exception for remote call failures, with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class NetworkError(LLMClientError):
    """The request could not be sent or the connection failed."""


class RequestTimeoutError(LLMClientError):
    """The request did not complete within the timeout."""


class ServerError(LLMClientError):
    """The server answered with an error page instead of an answer."""


def strip_code_fences(text: str) -> str:
    """Return the text inside a single ```lang ... ``` block, or the text unchanged if there is none."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1)
    return text


def post_json(url: str, payload: Dict[str, Any], timeout: float) -> Tuple[int, str]:
    """
    POST a JSON body and return the status code and the response text.

    The timeout bounds every transport phase and is also a deadline for the whole
    exchange, so a server trickling its body slowly cannot hold the call open.

    Raises:
        httpx.TimeoutException: A phase timed out or the deadline passed
        httpx.RequestError: The request could not be sent or read
        httpx.InvalidURL: The URL is malformed
    """
    deadline = time.monotonic() + timeout
    with httpx.Client(timeout=timeout) as client:
        with client.stream("POST", url, json=payload, headers={"Content-Type": "application/json"}) as response:
            body = bytearray()
            for part in response.iter_bytes():
                body.extend(part)
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"no complete response from {url} within {timeout}s", request=response.request
                    )
            return response.status_code, body.decode("utf-8", errors="replace")


class LLMClient:
    """Client that posts rendered prompts to a model's query endpoint."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, silent: bool = False):
        """
        Initialize LLM client.

        Args:
            timeout: Request timeout in seconds, applied to connect, read and the whole request
            silent: Suppress informational log lines
        """
        self.timeout = timeout
        self.silent = silent

    @staticmethod
    def build_payload(prompt: str, profile: ModelProfile) -> Dict[str, Any]:
        """Request body for the given model family."""
        if profile.is_structured:
            # Generated documentation should not be creative
            return {"prompt": prompt, "model": profile.name, "temperature": 0}
        return {"prompt": prompt}

    def post(self, prompt: str, profile: ModelProfile, strip_fences: bool = False) -> str:
        """
        Send a prompt to the model's endpoint and return the answer text.

        Args:
            prompt: Rendered prompt
            profile: Model to query
            strip_fences: Remove a surrounding fenced code block from JSON answers

        Returns:
            The "answer" field of a JSON reply, or the raw response body

        Raises:
            RequestTimeoutError: The request exceeded the timeout
            NetworkError: The request could not be sent or read, or the URL is malformed
            ServerError: The server returned a 403 Forbidden page
        """
        start_time = time.time()
        url = profile.post_url

        if not self.silent:
            logger.info(f"Sending a request to {url} using the {profile.name} model...")

        try:
            status_code, body = post_json(url, self.build_payload(prompt, profile), self.timeout)
        except httpx.TimeoutException as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = LLMError(
                code="TIMEOUT_ERROR",
                message=f"Request to {url} timed out after {self.timeout}s",
                details={"model": profile.name, "latency_ms": latency_ms, "original_error": str(e)},
            )
            logger.error(
                f"Timeout error: model={profile.name}, latency={latency_ms}ms, error={e}",
                extra={"error_code": error.code, "error_details": error.details},
            )
            raise RequestTimeoutError(error) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = LLMError(
                code="NETWORK_ERROR",
                message=f"Error sending request to {url}: {e}",
                details={"model": profile.name, "latency_ms": latency_ms, "original_error": str(e)},
            )
            logger.error(
                f"Network error: model={profile.name}, latency={latency_ms}ms, error={e}",
                extra={"error_code": error.code, "error_details": error.details},
            )
            raise NetworkError(error) from e

        if not self.silent:
            logger.info(f"Received {len(body)} characters from the server.")

        try:
            data = json.loads(body)
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("answer"), str):
            answer = data["answer"]
            if strip_fences:
                return strip_code_fences(answer)
            return answer

        if FORBIDDEN_MARKER in body:
            error = LLMError(
                code="FORBIDDEN",
                message=f'Got "403 Forbidden" when contacting {url}, are the network settings correct?',
                details={"model": profile.name, "status_code": status_code},
            )
            logger.error(error.message, extra={"error_code": error.code, "error_details": error.details})
            raise ServerError(error)

        return body
