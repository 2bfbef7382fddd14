"""
Multi-pass prompt pipeline.

Chunks a project's files to fit the model's token budget, then sweeps all
chunks with the initial prompt and, optionally, with the fix and confidence
prompts. Chunk failures fall back to a second model once and are otherwise
skipped, so a run only fails on template or serialization errors.
"""
import logging
import os
import sys
from typing import List, Optional, TextIO, Tuple

from config import PROMPT_MARGIN
from models.chunk import Chunk
from models.pipeline import PipelineConfig
from models.profile import ModelProfile
from models.result import PassResult, RunResult
from models.source import ProjectInfo, SourceItem
from services.chunking_engine import ChunkingEngine
from services.cost_model import calculate_cost
from services.llm_client import LLMClient, LLMClientError
from services.output_evaluator import OutputEvaluator
from services.prompt_renderer import TemplateData, render
from services.token_counter import TokenCounter

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs the initial, fix and confidence passes over a chunked project."""

    def __init__(
        self,
        config: PipelineConfig,
        llm_client: Optional[LLMClient] = None,
        token_counter: Optional[TokenCounter] = None,
        chunking_engine: Optional[ChunkingEngine] = None,
        output_evaluator: Optional[OutputEvaluator] = None,
        status: Optional[TextIO] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Run configuration
            llm_client: Remote responder (defaults to one using config.timeout)
            token_counter: Token counter (defaults to one using config.timeout)
            chunking_engine: Chunker
            output_evaluator: Answer filters and confidence aggregation
            status: Stream for progress lines (defaults to stderr)
        """
        self.config = config
        self.llm_client = llm_client or LLMClient(timeout=config.timeout, silent=config.silent)
        self.token_counter = token_counter or TokenCounter(timeout=config.timeout, silent=config.silent)
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.output_evaluator = output_evaluator or OutputEvaluator()
        self.status = status or sys.stderr

    def _report(self, message: str, level: int = logging.INFO) -> None:
        """Write a progress line to the status stream and, unless silent, to the log."""
        print(message, file=self.status)
        if not self.config.silent:
            logger.log(level, message)

    def _files(self, project: ProjectInfo) -> List[SourceItem]:
        files: List[SourceItem] = []
        if self.config.include_sources:
            files.extend(project.source_files)
        if self.config.include_conf_and_doc:
            files.extend(project.conf_and_doc_files)
        return files

    def _scrub_directory(self, payload: str) -> str:
        """Remove a long (often temporary) project directory prefix from file paths in a payload."""
        directory = self.config.directory
        if directory.count(os.sep) <= 2:
            return payload
        if not directory.endswith(os.sep):
            directory += os.sep
        return payload.replace(directory, "")

    def _validate_templates(self, documentation: str) -> None:
        """Render every template this run will use, so malformed ones fail before any request."""
        templates = [self.config.initial_prompt]
        if self.config.fix_and_confidence:
            templates += [self.config.fix_prompt, self.config.confidence_prompt]
        for template in templates:
            render(template, TemplateData.wrapped(documentation=documentation))

    def chunk_project(self, project: ProjectInfo) -> List[Chunk]:
        """
        Split the project's files into chunks that leave room for the prompt itself.

        The prompt rendered without source code is counted, padded by PROMPT_MARGIN and
        subtracted from the model's budget before chunking.

        Raises:
            TemplateError: If a prompt template is malformed
            SerializationError: If a chunk cannot be serialized
        """
        model = self.config.model
        documentation = project.file_contents("README.md")
        self._validate_templates(documentation)

        bare_prompt = render(self.config.initial_prompt, TemplateData.wrapped(documentation=documentation))
        overhead = self.token_counter.count(bare_prompt, model)
        budget = model.max_tokens - int(overhead * PROMPT_MARGIN)
        if budget <= 0:
            self._report(
                f"warning: the prompt alone uses about {overhead} tokens, more than the "
                f"{model.max_tokens} token budget of {model.name}; every file is sent on its own",
                logging.WARNING,
            )

        def file_cost(item: SourceItem) -> int:
            return self.token_counter.count(item.contents, model)

        return self.chunking_engine.chunk(self._files(project), file_cost, budget)

    def _post_with_fallback(self, prompt: str) -> Tuple[str, ModelProfile]:
        """Post to the primary model, retrying once with the fallback model on failure."""
        strip_fences = self.config.operation_spec.strip_code_fences
        try:
            return self.llm_client.post(prompt, self.config.model, strip_fences), self.config.model
        except LLMClientError as e:
            fallback = self.config.fallback_model
            self._report(f"Error posting prompt (retrying with {fallback.name}): {e}", logging.WARNING)
            return self.llm_client.post(prompt, fallback, strip_fences), fallback

    def process_chunk(
        self,
        index: int,
        total: int,
        documentation: str,
        payload: str,
        template: str,
        previous_answer: str,
    ) -> Tuple[str, float]:
        """
        Render, send and price one chunk.

        Returns:
            The answer and its approximate cost in USD

        Raises:
            TemplateError: If the template is malformed
            LLMClientError: If both the primary and the fallback model failed
        """
        model = self.config.model
        prompt = render(
            template,
            TemplateData.wrapped(documentation=documentation, source_code=payload, previous_answer=previous_answer),
        )

        sent_tokens = self.token_counter.count(prompt, model)
        if sent_tokens > model.max_tokens:
            self._report(
                f"warning: prompt exceeds approximate token limit: {sent_tokens} tokens (max: {model.max_tokens})",
                logging.WARNING,
            )

        answer, used = self._post_with_fallback(prompt)

        received_tokens = self.token_counter.count(answer, used)
        usd_cost = calculate_cost(sent_tokens, received_tokens, used)

        if total == 1:
            self._report(
                f"Approximate cost: ${usd_cost:.2f} for {sent_tokens} sent and {received_tokens} received tokens."
            )
        else:
            self._report(
                f"[source code chunk {index + 1}/{total}] Approximate cost: ${usd_cost:.2f} "
                f"for {sent_tokens} sent and {received_tokens} received tokens."
            )
        return answer, usd_cost

    def run_pass(
        self,
        chunks: List[Chunk],
        documentation: str,
        template: str,
        previous_answer: str = "",
    ) -> PassResult:
        """Sweep all chunks with one template. Failed chunks are skipped with a warning."""
        result = PassResult()
        total = len(chunks)
        for index, chunk in enumerate(chunks):
            self._report(f"Processing chunk {index + 1} of {total}...")
            payload = self._scrub_directory(chunk.payload)
            try:
                answer, usd_cost = self.process_chunk(
                    index, total, documentation, payload, template, previous_answer
                )
            except LLMClientError as e:
                self._report(f"Warning processing chunk {index + 1}/{total}: {e}", logging.WARNING)
                result.failed_chunks += 1
                continue
            result.usd_cost += usd_cost
            result.responses.append(answer.strip())
        if result.failed_chunks:
            self._report(f"{result.failed_chunks} of {total} chunks failed and were skipped.", logging.WARNING)
        return result

    def run(self, project: ProjectInfo) -> RunResult:
        """
        Process the entire project.

        Returns:
            RunResult with the combined initial answer, combined fixes, confidence and cost

        Raises:
            TemplateError: If a prompt template is malformed
            SerializationError: If a chunk cannot be serialized
        """
        self._report(f"Processing project: {project.name}")
        documentation = project.file_contents("README.md")

        chunks = self.chunk_project(project)
        self._report(f"Project chunked into {len(chunks)} chunks.")

        self._report("Using the initial prompt...")
        initial = self.run_pass(chunks, documentation, self.config.initial_prompt)
        total_usd_cost = initial.usd_cost
        failed_chunks = initial.failed_chunks
        combined_initial = self.output_evaluator.combine_initial(initial.responses)

        combined_fixes = ""
        confidence = 0

        if self.config.fix_and_confidence and not self.output_evaluator.nothing_found(combined_initial):
            self._report("Using the prompt that finds fixes...")
            fixes = self.run_pass(chunks, documentation, self.config.fix_prompt, combined_initial)
            total_usd_cost += fixes.usd_cost
            failed_chunks += fixes.failed_chunks
            combined_fixes = self.output_evaluator.combine_fixes(fixes.responses)

            self._report("Using the prompt that judges confidence...")
            judged = self.run_pass(chunks, documentation, self.config.confidence_prompt, combined_initial)
            total_usd_cost += judged.usd_cost
            failed_chunks += judged.failed_chunks
            confidence = self.output_evaluator.aggregate_confidence(judged.responses)

        if not combined_initial:
            combined_initial = self.config.operation_spec.empty_result

        return RunResult(
            initial_text=combined_initial,
            fix_text=combined_fixes,
            confidence=confidence,
            usd_cost=total_usd_cost,
            chunk_count=len(chunks),
            failed_chunks=failed_chunks,
        )
