"""Operation kinds and their prompts, file names and default answers."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class OperationType(str, Enum):
    """The different artifacts the pipeline can produce."""
    GEN_DOC = "doc"
    GEN_API = "apidoc"
    GEN_README = "readme"
    GEN_CATALOG = "catalog"
    GEN_ANY_FILE = "any-file"
    FIND_BUG = "bug"
    FIND_TYPO = "typo"


@dataclass(frozen=True)
class OperationSpec:
    """Everything that varies by operation kind."""
    default_filename: str
    initial_prompt: str
    fix_prompt: str
    confidence_prompt: str
    empty_result: str
    include_conf_and_doc: bool = False
    exclude_sources: bool = False
    strip_code_fences: bool = False


_FIX_TEMPLATE = (
    'Generate a diff to update or fix the {target} based on this new {target}: {{{{ previous_answer }}}} '
    'and this project source code: {{{{ source_code }}}}. If no changes are needed, respond with '
    '"No diff needed." Ensure all filenames and details are correct.'
)

_FINDINGS_FIX_TEMPLATE = (
    'Generate a diff to fix these {findings}: {{{{ previous_answer }}}} in this project source code: '
    '{{{{ source_code }}}}. If no changes are needed, respond with "No diff needed." '
    'Ensure all filenames and details are correct.'
)

_CONFIDENCE_TEMPLATE = (
    'How confident are you that {subject}: {{{{ previous_answer }}}} {verb} accurate for {scope}: '
    '{{{{ source_code }}}}? Return a number from 1 to 10. Only return the number.'
)


def _confidence(subject: str, verb: str = "is", scope: str = "this project source code") -> str:
    return _CONFIDENCE_TEMPLATE.format(subject=subject, verb=verb, scope=scope)


OPERATIONS: Dict[OperationType, OperationSpec] = {
    OperationType.GEN_DOC: OperationSpec(
        default_filename="DOC.md",
        initial_prompt=(
            "Create comprehensive software documentation in Markdown format. Provide a clear overview of the "
            "architecture, components, and interfaces of the software. Describe each component's "
            "responsibilities and interactions. Include code snippets and configurations to enhance "
            "understanding.\n{{ source_code }}"
        ),
        fix_prompt=_FIX_TEMPLATE.format(target="DOC.md file"),
        confidence_prompt=_confidence("this documentation"),
        empty_result="No documentation generated.",
        include_conf_and_doc=True,
    ),
    OperationType.GEN_API: OperationSpec(
        default_filename="API.md",
        initial_prompt=(
            "Generate detailed and precise API documentation in Markdown format. Focus on the structure, "
            "functionality, and usage of the API server code provided. Assume the reader is technically "
            "proficient but unfamiliar with this project. Provide only factual information and indicate "
            '"TBD" if information is missing. Do not mention being an AI. Ensure accuracy in all details.\n'
            "{{ source_code }}"
        ),
        fix_prompt=_FIX_TEMPLATE.format(target="API.md file"),
        confidence_prompt=_confidence("this API documentation"),
        empty_result="No documentation generated.",
        include_conf_and_doc=True,
    ),
    OperationType.GEN_README: OperationSpec(
        default_filename="README.md",
        initial_prompt=(
            "Create a comprehensive README.md file in Markdown format, serving as the initial contact for "
            "developers and users of this project. Include the following sections:\n"
            "1. Project title and a brief description highlighting its purpose and value.\n"
            "2. Step-by-step installation instructions, including any required software or dependencies.\n"
            "{{ documentation }}\n"
            "3. Usage instructions with examples.\n"
            "4. List of main features and functionalities.\n"
            "5. Contributing guidelines for new developers, covering coding standards, pull requests, and "
            "issue filing.\n"
            "6. License information.\n"
            "7. Contact details or links for further discussion.\n"
            "Assume a basic understanding of software projects but unfamiliarity with this specific project "
            "or technology stack. Be clear, concise, and factually accurate. Omit sections with insufficient "
            "information.\n{{ source_code }}"
        ),
        fix_prompt=_FIX_TEMPLATE.format(target="README.md file"),
        confidence_prompt=_confidence("this README.md file"),
        empty_result="No documentation generated.",
        include_conf_and_doc=True,
    ),
    OperationType.GEN_CATALOG: OperationSpec(
        default_filename="app-catalog.yaml",
        initial_prompt=(
            "Create a catalog-info.yaml file in YAML format for the Backstage software catalog with the "
            "following structure:\n"
            "1. apiVersion: 'backstage.io/v1alpha1' - Ensure compatibility with the Backstage platform.\n"
            "2. kind: Determine based on README.md, API.md, and DOC.md files.\n"
            "3. metadata: Extract the project's name, title, and description from available documentation. "
            "Include repository annotations if the URL is available.\n"
            "4. spec: Categorize the component type, lifecycle status, and ownership information using "
            "existing documentation.\n"
            "Do not make assumptions or introduce inaccuracies.\n{{ source_code }}"
        ),
        fix_prompt=_FIX_TEMPLATE.format(target="app-catalog.yaml file"),
        confidence_prompt=_confidence(
            "this Backstage configuration", scope="a project with this source code"
        ),
        empty_result="No configuration generated.",
        include_conf_and_doc=True,
        exclude_sources=True,
        strip_code_fences=True,
    ),
    OperationType.GEN_ANY_FILE: OperationSpec(
        default_filename="unspecified.filename",
        initial_prompt=(
            "Generate the requested file based on this project. Only return the contents of the file.\n"
            "{{ source_code }}"
        ),
        fix_prompt=_FIX_TEMPLATE.format(target="file"),
        confidence_prompt=_confidence("this file"),
        empty_result="No file generated.",
        include_conf_and_doc=True,
        strip_code_fences=True,
    ),
    OperationType.FIND_BUG: OperationSpec(
        default_filename="-",
        initial_prompt=(
            'Review the following code and identify any bugs. If no bugs are found, respond with "No bugs '
            'found." Be certain of any bug before reporting. Prioritize false positives over false '
            "negatives. Include the file name if a bug is found.\n{{ source_code }}"
        ),
        fix_prompt=_FINDINGS_FIX_TEMPLATE.format(findings="bugs"),
        confidence_prompt=_confidence("these bug findings", verb="are"),
        empty_result="No bugs found.",
    ),
    OperationType.FIND_TYPO: OperationSpec(
        default_filename="-",
        initial_prompt=(
            'Review the following code for typos in comments. If no typos are found, respond with "No typos '
            'found." Be certain of any typo before reporting. Prioritize false positives over false '
            "negatives. Include the file name if a typo is found.\n{{ source_code }}"
        ),
        fix_prompt=_FINDINGS_FIX_TEMPLATE.format(findings="typos"),
        confidence_prompt=_confidence("these typo findings", verb="are"),
        empty_result="No typos found.",
    ),
}


def get_operation(op_type: OperationType) -> OperationSpec:
    return OPERATIONS[op_type]
