"""Shared fixtures for the code-bundler tests."""

import tempfile
from pathlib import Path

import pytest

from code_bundler.selector import excluded_directory_match

_ATTEMPTS = 5


@pytest.fixture
def project_dir():
    """A fresh directory whose absolute path holds no excluded directory name.

    Exclusion matches anywhere in a file's directory path, so a temp base like
    /tmp/pytest-of-robin would exclude every file created under it.
    """
    for _ in range(_ATTEMPTS):
        with tempfile.TemporaryDirectory(prefix="fib-") as tmpdir:
            root = Path(tmpdir).resolve()
            if excluded_directory_match(root / "main.py") is None:
                yield root
                return
    pytest.fail(
        f"Temporary directory base {tempfile.gettempdir()} contains an excluded "
        "directory name; set TMPDIR to another location"
    )
