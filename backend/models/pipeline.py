"""Run-wide pipeline configuration."""
from dataclasses import dataclass
from typing import Optional

from config import REQUEST_TIMEOUT
from models.operation import OperationType, OperationSpec, get_operation
from models.profile import ModelProfile


@dataclass
class PipelineConfig:
    """Configuration for one pipeline run. Built once, never mutated by the pipeline."""
    model: ModelProfile
    fallback_model: ModelProfile
    operation: OperationType
    initial_prompt: str
    fix_prompt: str
    confidence_prompt: str
    timeout: float = REQUEST_TIMEOUT
    fix_and_confidence: bool = False
    silent: bool = False
    include_sources: bool = True
    include_conf_and_doc: bool = False
    directory: str = "."
    output_filename: str = "-"
    force: bool = False

    @property
    def operation_spec(self) -> OperationSpec:
        return get_operation(self.operation)

    @classmethod
    def for_operation(
        cls,
        model: ModelProfile,
        fallback_model: ModelProfile,
        operation: OperationType = OperationType.GEN_DOC,
        initial_prompt: Optional[str] = None,
        fix_prompt: Optional[str] = None,
        confidence_prompt: Optional[str] = None,
        output_filename: Optional[str] = None,
        **kwargs,
    ) -> "PipelineConfig":
        """
        Build a configuration with prompts, file selection and output name resolved from the operation.

        Args:
            model: Primary model profile
            fallback_model: Model used for one retry when the primary fails
            operation: Operation kind
            initial_prompt: Custom initial template (defaults to the operation's)
            fix_prompt: Custom fix template (defaults to the operation's)
            confidence_prompt: Custom confidence template (defaults to the operation's)
            output_filename: Destination (defaults to the operation's file name)
            **kwargs: Remaining PipelineConfig fields

        Returns:
            PipelineConfig ready for a run
        """
        spec = get_operation(operation)
        return cls(
            model=model,
            fallback_model=fallback_model,
            operation=operation,
            initial_prompt=initial_prompt or spec.initial_prompt,
            fix_prompt=fix_prompt or spec.fix_prompt,
            confidence_prompt=confidence_prompt or spec.confidence_prompt,
            output_filename=output_filename or spec.default_filename,
            include_sources=not spec.exclude_sources,
            include_conf_and_doc=spec.include_conf_and_doc,
            **kwargs,
        )
