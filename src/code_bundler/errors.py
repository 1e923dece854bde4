"""
Exception types for code-bundler.

Configuration problems are raised before any file is touched; bundling problems are
raised mid-run and abort the remaining work.
"""

from __future__ import annotations

from pathlib import Path


class CodeBundlerError(Exception):
    """Base class for all code-bundler errors."""

    pass


class InvalidConfigError(CodeBundlerError):
    """A language token, sort mode, or output path failed validation."""

    pass


class ConfigFileError(CodeBundlerError):
    """A project config file exists but could not be parsed."""

    pass


class OverwriteDeclinedError(CodeBundlerError):
    """The output file exists and the operator declined to overwrite it."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Output file already exists and was not overwritten: {path}")


class BundleError(CodeBundlerError):
    """Error raised while reading sources or writing the bundle.

    Attributes:
        path: The path being read or written when the error occurred, if known.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class DirectoryNotFoundError(BundleError):
    """The working directory or a referenced path vanished during the run."""

    pass


class AccessDeniedError(BundleError):
    """Read or write permission was refused for a path."""

    pass


class UnexpectedBundleError(BundleError):
    """Any other I/O or runtime fault during bundling."""

    pass


def translate_os_error(error: BaseException, path: Path | None = None) -> BundleError:
    """Map a low-level exception onto the bundling error taxonomy.

    Args:
        error: The exception raised by the filesystem call.
        path: The path involved, used in the message.

    Returns:
        The matching `BundleError` subclass instance (not raised).
    """
    if isinstance(error, (FileNotFoundError, NotADirectoryError)):
        return DirectoryNotFoundError(f"File path invalid: {path or error}", path)
    if isinstance(error, PermissionError):
        return AccessDeniedError(f"Access denied to the specified path: {path or error}", path)
    return UnexpectedBundleError(f"An unexpected error occurred: {error}", path)
