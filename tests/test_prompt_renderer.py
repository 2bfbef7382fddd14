"""Unit tests for prompt rendering."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.operation import OPERATIONS
from services.prompt_renderer import TemplateData, TemplateError, render


class TestRender:
    """Tests for template substitution."""

    def test_substitutes_all_fields(self):
        data = TemplateData(documentation="README", source_code="[{}]", previous_answer="before")
        prompt = render("D={{ documentation }} S={{ source_code }} P={{ previous_answer }}", data)
        assert prompt == "D=README S=[{}] P=before"

    def test_literal_substitution_without_escaping(self):
        """Source code with markup characters is inserted verbatim."""
        data = TemplateData(source_code='<a href="x">{{ not a tag }}</a> & more')
        assert render("{{ source_code }}", data) == '<a href="x">{{ not a tag }}</a> & more'

    def test_unused_fields_allowed(self):
        assert render("Just text", TemplateData()) == "Just text"

    def test_wrapped_adds_blank_lines(self):
        data = TemplateData.wrapped(documentation="doc", source_code="code", previous_answer="")
        assert data.documentation == "\n\ndoc\n"
        assert data.source_code == "\n\ncode\n"
        assert data.previous_answer == "\n\n\n"


class TestTemplateErrors:
    """Tests for malformed templates."""

    def test_syntax_error(self):
        with pytest.raises(TemplateError):
            render("Broken {{ source_code", TemplateData())

    def test_unknown_field(self):
        with pytest.raises(TemplateError):
            render("{{ readme_contents }}", TemplateData())


class TestBuiltInTemplates:
    """Every built-in template renders with the three fields."""

    @pytest.mark.parametrize("op_type", list(OPERATIONS))
    def test_all_templates_render(self, op_type):
        spec = OPERATIONS[op_type]
        data = TemplateData.wrapped(documentation="README", source_code="SOURCE", previous_answer="ANSWER")
        for template in (spec.initial_prompt, spec.fix_prompt, spec.confidence_prompt):
            prompt = render(template, data)
            assert "SOURCE" in prompt
            assert "{{" not in prompt

    @pytest.mark.parametrize("op_type", list(OPERATIONS))
    def test_follow_up_templates_use_previous_answer(self, op_type):
        spec = OPERATIONS[op_type]
        data = TemplateData.wrapped(source_code="SOURCE", previous_answer="ANSWER")
        assert "ANSWER" in render(spec.fix_prompt, data)
        assert "ANSWER" in render(spec.confidence_prompt, data)
