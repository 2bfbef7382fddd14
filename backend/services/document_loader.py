"""Document loading service that reads a project's files."""
import logging
import os
from pathlib import Path
from typing import List, Tuple

from models.source import ProjectInfo, SourceItem

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = {
    ".py", ".go", ".js", ".jsx", ".ts", ".tsx", ".java", ".kt", ".scala", ".c", ".h", ".cc",
    ".cpp", ".hpp", ".cs", ".rs", ".rb", ".php", ".swift", ".m", ".sh", ".bash", ".lua",
    ".pl", ".r", ".sql", ".ex", ".exs", ".erl", ".hs", ".clj", ".dart", ".vue", ".zig",
}

CONF_AND_DOC_EXTENSIONS = {
    ".md", ".rst", ".txt", ".adoc", ".yaml", ".yml", ".toml", ".json", ".ini", ".cfg",
    ".conf", ".xml", ".properties", ".mod", ".sum", ".lock",
}

CONF_AND_DOC_NAMES = {
    "Dockerfile", "Makefile", "Procfile", "LICENSE", "COPYING", "Jenkinsfile", "Vagrantfile",
}

SKIP_DIRECTORIES = {
    "__pycache__", "node_modules", "vendor", "venv", "env", "dist", "build", "target",
}

BINARY_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".pdf", ".zip", ".tar", ".gz",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".pyc", ".class", ".o", ".wasm", ".ttf", ".woff",
    ".woff2", ".db", ".sqlite",
}

# Substrings that indicate a project registers HTTP routes
API_SERVER_MARKERS = (
    "http.HandleFunc(", "ListenAndServe(", "@app.route(", "@app.get(", "@app.post(",
    "FastAPI(", "APIRouter(", "express()", "@RestController", "@RequestMapping(",
    "web.Application(", "gin.Default(", "echo.New(", "fiber.New(",
)


def is_binary(path: Path, content: bytes, sample_size: int = 8192) -> bool:
    """Detect binary files by extension, NUL bytes or a high ratio of non-text bytes."""
    if path.suffix.lower() in BINARY_EXTENSIONS:
        return True
    if not content:
        return False
    sample = content[:sample_size]
    if b"\x00" in sample:
        return True
    text_chars = set(range(32, 127)) | {9, 10, 13}
    non_text = sum(1 for byte in sample if byte not in text_chars and byte < 128)
    return (non_text / len(sample)) > 0.30


class DocumentLoader:
    """Loads the text files of a project directory."""

    def __init__(self, directory: str = "."):
        """
        Initialize DocumentLoader.

        Args:
            directory: Project root directory
        """
        self.directory = directory

    def load_project(self) -> ProjectInfo:
        """
        Read all text files below the project directory.

        Returns:
            ProjectInfo with source files and configuration/documentation files in path order

        Raises:
            ValueError: If the directory does not exist or contains no files
        """
        root = Path(self.directory)
        if not root.is_dir():
            raise ValueError(f"the given directory {self.directory} does not exist")

        source_files: List[SourceItem] = []
        conf_and_doc_files: List[SourceItem] = []
        found_any = False

        for full_path, rel_path in self._walk(root):
            found_any = True
            try:
                raw = full_path.read_bytes()
            except OSError as e:
                logger.warning(f"Could not read {rel_path}: {e}")
                continue

            if is_binary(full_path, raw):
                logger.debug(f"Skipping binary file {rel_path}")
                continue

            item = SourceItem(path=str(full_path), contents=raw.decode("utf-8", errors="replace"))
            kind = self._classify(full_path)
            if kind == "source":
                source_files.append(item)
            elif kind == "conf_and_doc":
                conf_and_doc_files.append(item)

        if not found_any:
            raise ValueError(f"the given directory {self.directory} does not contain at least one file")

        api_server = any(
            marker in item.contents for item in source_files for marker in API_SERVER_MARKERS
        )
        name = root.resolve().name

        logger.info(
            f"Loaded project {name}: {len(source_files)} source files, "
            f"{len(conf_and_doc_files)} configuration and documentation files"
        )
        return ProjectInfo(
            name=name,
            source_files=source_files,
            conf_and_doc_files=conf_and_doc_files,
            api_server=api_server,
        )

    def _walk(self, root: Path) -> List[Tuple[Path, Path]]:
        found = []
        for current, dirnames, filenames in os.walk(root):
            # Prune in place so os.walk does not descend into skipped directories
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRECTORIES
            )
            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                full_path = Path(current) / filename
                found.append((full_path, full_path.relative_to(root)))
        return found

    @staticmethod
    def _classify(path: Path) -> str:
        if path.name in CONF_AND_DOC_NAMES:
            return "conf_and_doc"
        suffix = path.suffix.lower()
        if suffix in SOURCE_EXTENSIONS:
            return "source"
        if suffix in CONF_AND_DOC_EXTENSIONS:
            return "conf_and_doc"
        return "other"
