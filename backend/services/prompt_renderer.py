"""Prompt rendering from jinja2 templates."""
import logging
from dataclasses import asdict, dataclass

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

logger = logging.getLogger(__name__)

_env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)


class TemplateError(Exception):
    """The prompt template is malformed or references an unknown field."""


@dataclass
class TemplateData:
    """The three fields a prompt template can reference."""
    documentation: str = ""
    source_code: str = ""
    previous_answer: str = ""

    @classmethod
    def wrapped(cls, documentation: str = "", source_code: str = "", previous_answer: str = "") -> "TemplateData":
        """Surround each field with blank lines so the sections stand apart in the prompt."""
        return cls(
            documentation="\n\n" + documentation + "\n",
            source_code="\n\n" + source_code + "\n",
            previous_answer="\n\n" + previous_answer + "\n",
        )


def render(template: str, data: TemplateData) -> str:
    """
    Fill a prompt template with literal substitutions.

    Args:
        template: Template text using {{ documentation }}, {{ source_code }} and {{ previous_answer }}
        data: Values for the three fields

    Returns:
        The rendered prompt

    Raises:
        TemplateError: If the template does not parse or a field cannot be substituted
    """
    try:
        return _env.from_string(template).render(**asdict(data))
    except JinjaTemplateError as e:
        logger.error(f"Failed to render prompt template: {e}")
        raise TemplateError(f"failed to render prompt template: {e}") from e
