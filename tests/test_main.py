"""Tests for the command line entry point."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock, patch
import main
from models.operation import OperationType
from models.result import RunResult
from models.source import ProjectInfo, SourceItem
from services.prompt_renderer import TemplateError


def project(api_server=False):
    return ProjectInfo(
        name="demo",
        source_files=[SourceItem(path="main.go", contents="package main")],
        api_server=api_server,
    )


@pytest.fixture
def cli():
    """Patch the loader, pipeline and logging setup; yield the mocks."""
    with patch.object(main, "DocumentLoader") as loader_class, \
            patch.object(main, "Pipeline") as pipeline_class, \
            patch.object(main, "setup_logging"):
        loader_class.return_value.load_project.return_value = project()
        pipeline_class.return_value.run.return_value = RunResult(
            initial_text="No bugs found.", fix_text="", confidence=0, usd_cost=0.5
        )
        yield loader_class, pipeline_class


def config_of(pipeline_class):
    return pipeline_class.call_args[0][0]


class TestSelectOperation:
    """Tests for operation flags."""

    @pytest.mark.parametrize("flags,expected", [
        ([], None),
        (["--bug"], OperationType.FIND_BUG),
        (["--typo"], OperationType.FIND_TYPO),
        (["--readme"], OperationType.GEN_README),
        (["--catalog"], OperationType.GEN_CATALOG),
        (["--apidoc"], OperationType.GEN_API),
        (["--any-file"], OperationType.GEN_ANY_FILE),
        (["--readme", "--bug"], OperationType.FIND_BUG),
    ])
    def test_flags(self, flags, expected):
        args = main.build_parser().parse_args(flags)
        assert main.select_operation(args) == expected


class TestMain:
    """Tests for a full command line run."""

    def test_bug_run_prints_result_and_cost(self, cli, capsys):
        _, pipeline_class = cli

        assert main.main(["proj", "--bug", "--model", "gemini-1.5-flash"]) == 0

        captured = capsys.readouterr()
        assert "No bugs found." in captured.out
        assert "Total approximate cost: $0.50" in captured.err
        config = config_of(pipeline_class)
        assert config.operation == OperationType.FIND_BUG
        assert config.model.name == "gemini-1.5-flash"
        assert config.directory == "proj"

    def test_api_server_defaults_to_api_docs(self, cli, tmp_path):
        loader_class, pipeline_class = cli
        loader_class.return_value.load_project.return_value = project(api_server=True)

        main.main([str(tmp_path), "-o", str(tmp_path / "out.md")])

        assert config_of(pipeline_class).operation == OperationType.GEN_API

    def test_plain_project_defaults_to_docs(self, cli, tmp_path):
        _, pipeline_class = cli
        main.main([str(tmp_path), "-o", str(tmp_path / "out.md")])
        config = config_of(pipeline_class)
        assert config.operation == OperationType.GEN_DOC
        assert config.output_filename == str(tmp_path / "out.md")

    def test_fix_prints_diff_and_confidence(self, cli, capsys):
        _, pipeline_class = cli
        pipeline_class.return_value.run.return_value = RunResult(
            initial_text="Bug in main.go.", fix_text="--- main.go", confidence=8, usd_cost=0.0
        )

        main.main(["proj", "--bug", "--fix"])

        out = capsys.readouterr().out
        assert "--- main.go" in out
        assert "Confidence: 8/10" in out
        assert config_of(pipeline_class).fix_and_confidence

    def test_failed_chunks_warned(self, cli, capsys):
        _, pipeline_class = cli
        pipeline_class.return_value.run.return_value = RunResult(
            initial_text="Bug in main.go.", fix_text="", confidence=0, usd_cost=0.0, failed_chunks=2
        )

        assert main.main(["proj", "--bug"]) == 0
        assert "warning: 2 chunk requests failed" in capsys.readouterr().err

    def test_max_tokens_override(self, cli):
        _, pipeline_class = cli
        main.main(["proj", "--bug", "--max-tokens", "4096"])
        assert config_of(pipeline_class).model.max_tokens == 4096

    def test_missing_directory(self, cli, capsys):
        loader_class, _ = cli
        loader_class.return_value.load_project.side_effect = ValueError("the given directory x does not exist")

        assert main.main(["x"]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_template_error_fails_run(self, cli, capsys):
        _, pipeline_class = cli
        pipeline_class.return_value.run.side_effect = TemplateError("unexpected end of template")

        assert main.main(["proj", "--bug", "--prompt", "{{ source_code"]) == 1
        assert "unexpected end of template" in capsys.readouterr().err

    def test_list_models(self, cli, capsys):
        loader_class, _ = cli
        assert main.main(["--list-models"]) == 0
        assert "gemini-1.5-pro" in capsys.readouterr().out
        loader_class.assert_not_called()
