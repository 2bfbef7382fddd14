"""Approximate USD cost of a prompt/answer exchange."""
from config import LONG_PROMPT_THRESHOLD
from models.profile import ModelProfile


def calculate_cost(sent_tokens: int, received_tokens: int, profile: ModelProfile) -> float:
    """
    Return the approximate cost in USD.

    Prompts above LONG_PROMPT_THRESHOLD sent tokens are priced with the long prompt tier,
    everything else (the threshold included) with the short prompt tier.
    """
    usd_per_input_token = profile.usd_per_million_input_short / 1000000.0
    usd_per_output_token = profile.usd_per_million_output_short / 1000000.0
    if sent_tokens > LONG_PROMPT_THRESHOLD:
        usd_per_input_token = profile.usd_per_million_input_long / 1000000.0
        usd_per_output_token = profile.usd_per_million_output_long / 1000000.0
    return sent_tokens * usd_per_input_token + received_tokens * usd_per_output_token


def calculate_cost_from_strings(counter, input_text: str, output_text: str, profile: ModelProfile) -> float:
    """Count tokens of both texts with the given TokenCounter and return the approximate cost in USD."""
    return calculate_cost(counter.count(input_text, profile), counter.count(output_text, profile), profile)
