"""
Response file support for code-bundler.

`create-rsp` turns a set of already-answered questions into a `bundle` command line, and
`@file` arguments are expanded back into tokens before the CLI parses them.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import parse_languages, parse_sort_mode, split_language_tokens

DEFAULT_RESPONSE_FILE = "command.rsp"

_YES = {"yes", "y"}
_NO = {"no", "n"}


@dataclass(frozen=True)
class RspAnswers:
    """Raw answers collected by the `create-rsp` prompts.

    Attributes:
        languages: Languages to include (e.g. "csharp, python" or "all").
        output: Output path; blank keeps the default.
        note: yes/no for including each file's full path; blank means no.
        sort: 'name' or 'type'; blank keeps the default.
        remove_empty_lines: yes/no for dropping blank lines; blank means no.
        author: Author name; blank for none.
    """

    languages: str
    output: str = ""
    note: str = ""
    sort: str = ""
    remove_empty_lines: str = ""
    author: str = ""


def parse_yes_no(answer: str | None, default: bool = False) -> bool:
    """Interpret a yes/no answer; blank or unrecognized answers take the default."""
    value = (answer or "").strip().lower()
    if value in _YES:
        return True
    if value in _NO:
        return False
    return default


def build_rsp_command(answers: RspAnswers) -> str:
    """Build the `bundle` command line equivalent to a set of answers.

    Args:
        answers: Answers from the interactive prompts.

    Returns:
        A single-line command string; every value is shell-quoted.

    Raises:
        InvalidConfigError: If the languages or sort option are invalid.
    """
    parse_languages([answers.languages])
    sort_mode = parse_sort_mode(answers.sort)

    languages = ",".join(split_language_tokens([answers.languages]))
    parts = ["bundle", "-l", shlex.quote(languages)]

    if answers.output.strip():
        parts.extend(["-o", shlex.quote(answers.output.strip())])
    if answers.author.strip():
        parts.extend(["-a", shlex.quote(answers.author.strip())])
    if parse_yes_no(answers.note):
        parts.append("-n")
    if parse_yes_no(answers.remove_empty_lines):
        parts.append("-r")

    parts.extend(["-s", sort_mode.value])
    return " ".join(parts)


def write_response_file(command: str, path: Path | None = None) -> Path:
    """Write a command line to a response file and return its path."""
    target = path if path is not None else Path(DEFAULT_RESPONSE_FILE)
    target.write_text(command, encoding="utf-8")
    return target


def expand_response_files(args: Sequence[str], cwd: Path | None = None) -> list[str]:
    """Replace each `@path` argument with the tokens stored in that file.

    Args:
        args: Command-line arguments, without the program name.
        cwd: Base directory for relative response file paths.

    Returns:
        The expanded argument list; other arguments are passed through unchanged.

    Raises:
        OSError: If a referenced response file cannot be read.
    """
    base = cwd if cwd is not None else Path.cwd()
    expanded: list[str] = []
    for arg in args:
        if arg.startswith("@") and len(arg) > 1:
            rsp_path = Path(arg[1:])
            if not rsp_path.is_absolute():
                rsp_path = base / rsp_path
            expanded.extend(shlex.split(rsp_path.read_text(encoding="utf-8")))
        else:
            expanded.append(arg)
    return expanded
