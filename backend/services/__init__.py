"""Services for the codedoc prompt pipeline."""
from .chunking_engine import ChunkingEngine, SerializationError
from .cost_model import calculate_cost, calculate_cost_from_strings
from .document_loader import DocumentLoader
from .llm_client import (
    LLMClient,
    LLMError,
    LLMClientError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
    strip_code_fences,
)
from .model_registry import ModelRegistry, default_registry, default_profiles
from .output_evaluator import OutputEvaluator
from .output_writer import OutputWriter
from .pipeline import Pipeline
from .prompt_renderer import TemplateData, TemplateError, render
from .token_counter import TokenCounter, estimate_tokens

__all__ = [
    'ChunkingEngine', 'SerializationError', 'calculate_cost', 'calculate_cost_from_strings',
    'DocumentLoader', 'LLMClient', 'LLMError', 'LLMClientError', 'NetworkError', 'RequestTimeoutError',
    'ServerError', 'strip_code_fences', 'ModelRegistry', 'default_registry', 'default_profiles',
    'OutputEvaluator', 'OutputWriter', 'Pipeline', 'TemplateData', 'TemplateError', 'render',
    'TokenCounter', 'estimate_tokens',
]
