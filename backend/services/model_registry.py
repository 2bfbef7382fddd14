"""
Model registry for the codedoc prompt pipeline.

Holds the configured remote models and resolves the primary and fallback
profiles for a run.
"""
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from config import DEFAULT_MODELS, FALLBACK_MODEL_NAME, MODEL_NAME, POST_URL, UNKNOWN_MODEL_MAX_TOKENS
from models.profile import ModelProfile

logger = logging.getLogger(__name__)


class ModelRegistry:
    """The list of models a caller may choose from."""

    def __init__(self, models: Optional[Iterable[ModelProfile]] = None):
        self._models: List[ModelProfile] = list(models or [])

    def set_models(self, models: Iterable[ModelProfile]) -> None:
        self._models = list(models)

    def names(self) -> List[str]:
        return [m.name for m in self._models]

    def descriptions(self) -> Dict[str, str]:
        return {m.name: m.description for m in self._models}

    def get(self, name: str) -> ModelProfile:
        """
        Look up a model by name.

        Raises:
            KeyError: If no model with that name is configured
        """
        for model in self._models:
            if model.name == name:
                return model
        raise KeyError(f"unknown model: {name} (available: {', '.join(self.names())})")

    def resolve(self, name: str, post_url: str) -> ModelProfile:
        """
        Profile for name with the given endpoint. Unknown names get a free profile
        with a conservative token budget, so any endpoint-side model can be used.
        """
        try:
            model = self.get(name)
        except KeyError:
            logger.warning(f"Model {name} is not in the catalogue, prices are unknown and counted as $0")
            return ModelProfile(name=name, post_url=post_url, max_tokens=UNKNOWN_MODEL_MAX_TOKENS)
        return replace(model, post_url=post_url)


def default_registry(post_url: str = POST_URL) -> ModelRegistry:
    """Registry with the built-in model catalogue, all pointing at post_url."""
    return ModelRegistry(
        ModelProfile(post_url=post_url, **settings) for settings in DEFAULT_MODELS
    )


def default_profiles(
    registry: Optional[ModelRegistry] = None,
    model_name: str = MODEL_NAME,
    fallback_name: str = FALLBACK_MODEL_NAME,
    post_url: str = POST_URL,
    max_tokens: Optional[int] = None,
) -> tuple:
    """
    Primary and fallback profiles from the environment configuration.

    The primary model's token budget can be overridden with max_tokens (MAXTOKENS).
    """
    registry = registry or default_registry(post_url)
    primary = registry.resolve(model_name, post_url)
    if max_tokens is not None and max_tokens != primary.max_tokens:
        primary = replace(primary, max_tokens=max_tokens)
    fallback = registry.resolve(fallback_name, post_url)
    return primary, fallback
