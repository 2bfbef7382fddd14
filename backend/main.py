"""
Command line entry point for codedoc.

Generates documentation, API docs, READMEs, Backstage catalog files or
bug/typo reports for a project directory by sending its files to a remote
model in token-bounded chunks.

Usage:
    codedoc [DIRECTORY] [--readme | --apidoc | --catalog | --bug | --typo | --any-file] [-o FILE]
"""
import argparse
import logging
import sys
from typing import List, Optional

from config import FALLBACK_MODEL_NAME, LOG_LEVEL, MAX_TOKENS, MODEL_NAME, POST_URL, REQUEST_TIMEOUT
from logger import setup_logging
from models.operation import OperationType
from models.pipeline import PipelineConfig
from services.chunking_engine import SerializationError
from services.document_loader import DocumentLoader
from services.model_registry import default_profiles, default_registry
from services.output_writer import OutputWriter
from services.pipeline import Pipeline
from services.prompt_renderer import TemplateError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codedoc",
        description="Generate documentation or find bugs and typos in a project with a remote language model",
    )
    parser.add_argument("directory", nargs="?", default=".", help="Project directory (default: .)")
    parser.add_argument("-o", "--output", default="", help="Output file, - for stdout (default depends on the operation)")
    parser.add_argument("-f", "--force", action="store_true", help="Overwrite the output file without asking")
    parser.add_argument("-s", "--silent", action="store_true", help="Only write status lines, no log output")

    ops = parser.add_argument_group("operation (default: general documentation)")
    ops.add_argument("--bug", action="store_true", help="Find bugs")
    ops.add_argument("--typo", action="store_true", help="Find typos in comments")
    ops.add_argument("--readme", action="store_true", help="Generate a README.md")
    ops.add_argument("--catalog", action="store_true", help="Generate a Backstage app-catalog.yaml")
    ops.add_argument("--apidoc", action="store_true", help="Generate API documentation")
    ops.add_argument("--any-file", action="store_true", help="Generate the file described by --prompt")

    parser.add_argument("--fix", action="store_true", help="Also run the fix and confidence passes")
    parser.add_argument("--prompt", default="", help="Custom initial prompt template")
    parser.add_argument("--fix-prompt", default="", help="Custom fix prompt template")
    parser.add_argument("--confidence-prompt", default="", help="Custom confidence prompt template")
    parser.add_argument("--model", default=MODEL_NAME, help=f"Model name (default: {MODEL_NAME})")
    parser.add_argument(
        "--fallback-model", default=FALLBACK_MODEL_NAME, help=f"Model used for one retry (default: {FALLBACK_MODEL_NAME})"
    )
    parser.add_argument("--url", default=POST_URL, help=f"Query endpoint (default: {POST_URL})")
    parser.add_argument("--max-tokens", type=int, default=None, help="Override the model's token budget")
    parser.add_argument(
        "--timeout", type=float, default=REQUEST_TIMEOUT, help=f"Request timeout in seconds (default: {REQUEST_TIMEOUT:g})"
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON lines")
    parser.add_argument("--list-models", action="store_true", help="List the known models and exit")
    return parser


def select_operation(args: argparse.Namespace) -> Optional[OperationType]:
    """Operation chosen by flags, or None when no operation flag was given."""
    if args.bug:
        return OperationType.FIND_BUG
    if args.typo:
        return OperationType.FIND_TYPO
    if args.readme:
        return OperationType.GEN_README
    if args.catalog:
        return OperationType.GEN_CATALOG
    if args.apidoc:
        return OperationType.GEN_API
    if args.any_file:
        return OperationType.GEN_ANY_FILE
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging("WARNING" if args.silent else LOG_LEVEL, json_format=args.json_logs)

    if args.list_models:
        for name, description in default_registry(args.url).descriptions().items():
            print(f"{name}: {description}")
        return 0

    try:
        project = DocumentLoader(args.directory).load_project()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    operation = select_operation(args)
    if operation is None:
        operation = OperationType.GEN_API if project.api_server else OperationType.GEN_DOC

    max_tokens = args.max_tokens or MAX_TOKENS or None
    model, fallback = default_profiles(
        model_name=args.model, fallback_name=args.fallback_model, post_url=args.url, max_tokens=max_tokens
    )

    config = PipelineConfig.for_operation(
        model,
        fallback,
        operation,
        initial_prompt=args.prompt or None,
        fix_prompt=args.fix_prompt or None,
        confidence_prompt=args.confidence_prompt or None,
        output_filename=args.output or None,
        timeout=args.timeout,
        fix_and_confidence=args.fix,
        silent=args.silent,
        directory=args.directory,
        force=args.force,
    )

    try:
        result = Pipeline(config).run(project)
    except (TemplateError, SerializationError) as e:
        logger.error(f"Run failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    writer = OutputWriter(config.output_filename, force=config.force, silent=config.silent)
    try:
        writer.write(result.initial_text)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if config.fix_and_confidence and result.confidence:
        if result.fix_text:
            print(result.fix_text)
        print(f"Confidence: {result.confidence}/10")
    if result.failed_chunks:
        print(f"warning: {result.failed_chunks} chunk requests failed, the output may be incomplete", file=sys.stderr)
    print(f"Total approximate cost: ${result.usd_cost:.2f}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
