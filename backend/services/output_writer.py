"""Writes the final result to a file or standard output."""
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)


def ask_yes_no(question: str) -> bool:
    """Ask a yes/no question on the terminal. Anything but y/yes is a no."""
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


class OutputWriter:
    """Writes a result to a destination, confirming before an existing file is overwritten."""

    def __init__(
        self,
        filename: str = "-",
        force: bool = False,
        silent: bool = False,
        confirm: Callable[[str], bool] = ask_yes_no,
        stdout: Optional[TextIO] = None,
    ):
        self.filename = filename
        self.force = force
        self.silent = silent
        self.confirm = confirm
        self.stdout = stdout or sys.stdout

    def write(self, text: str) -> bool:
        """
        Write text to the destination.

        Returns:
            True if the text was written, False if the user declined to overwrite

        Raises:
            OSError: If the file cannot be written
        """
        if self.filename in ("-", ""):
            print(text, file=self.stdout)
            return True

        path = Path(self.filename)
        if not self.force and path.exists() and not self.confirm(f"{self.filename} already exists. Overwrite it?"):
            print("Did nothing.", file=self.stdout)
            return False

        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write to output file {self.filename}: {e}")
            raise OSError(f"failed to write to output file {self.filename}: {e}") from e

        if not self.silent:
            print(f"Output written successfully to {self.filename}", file=self.stdout)
        return True
