"""Data models for the codedoc prompt pipeline."""
from .source import SourceItem, ProjectInfo
from .chunk import Chunk
from .profile import ModelProfile
from .operation import OperationType, OperationSpec, OPERATIONS, get_operation
from .pipeline import PipelineConfig
from .result import PassResult, RunResult

__all__ = [
    "SourceItem",
    "ProjectInfo",
    "Chunk",
    "ModelProfile",
    "OperationType",
    "OperationSpec",
    "OPERATIONS",
    "get_operation",
    "PipelineConfig",
    "PassResult",
    "RunResult",
]
