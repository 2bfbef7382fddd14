"""Remote model profile."""
from dataclasses import dataclass

# Models whose endpoint understands the model name, temperature and token counting
STRUCTURED_MODEL_PREFIX = "gemini"


@dataclass(frozen=True)
class ModelProfile:
    """
    Settings for one remote model.

    Attributes:
        name: Model name sent to the endpoint
        post_url: Query endpoint URL
        max_tokens: Token budget for a single prompt
        usd_per_million_input_short: Input price for prompts up to the long prompt threshold
        usd_per_million_input_long: Input price for prompts above the threshold
        usd_per_million_output_short: Output price for prompts up to the threshold
        usd_per_million_output_long: Output price for prompts above the threshold
        description: Human readable description
    """
    name: str
    post_url: str
    max_tokens: int
    usd_per_million_input_short: float = 0.0
    usd_per_million_input_long: float = 0.0
    usd_per_million_output_short: float = 0.0
    usd_per_million_output_long: float = 0.0
    description: str = ""

    @property
    def is_structured(self) -> bool:
        return self.name.startswith(STRUCTURED_MODEL_PREFIX)

    @property
    def count_url(self) -> str:
        """Token count endpoint, derived from the query endpoint."""
        return self.post_url.replace("/query", "/counttext", 1)
