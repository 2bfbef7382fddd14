"""Source file data models."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class SourceItem:
    """A single project file handed to the chunker."""
    path: str
    contents: str
    token_count: int = 0

    def to_dict(self) -> dict:
        return {"path": self.path, "contents": self.contents, "token_count": self.token_count}


@dataclass
class ProjectInfo:
    """Files of a project, split into source code and configuration/documentation."""
    name: str
    source_files: List[SourceItem] = field(default_factory=list)
    conf_and_doc_files: List[SourceItem] = field(default_factory=list)
    api_server: bool = False

    def file_contents(self, filename: str) -> str:
        """Return the contents of the conf/doc file with the given base name, or an empty string."""
        for item in self.conf_and_doc_files:
            if Path(item.path).name == filename:
                return item.contents
        return ""
