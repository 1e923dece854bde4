"""
File selector module for code-bundler.

Lists the files of a single directory, filters them by excluded directory and language,
and orders them deterministically for bundling.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape

from .config import (
    EXCLUDED_DIRECTORIES,
    BundleConfig,
    SelectionStats,
    SortMode,
    get_extension,
    get_language,
)
from .errors import translate_os_error
from .utils import normalize_path


def list_directory(directory: Path, skip: Optional[Iterable[Path]] = None) -> list[Path]:
    """
    List the regular files directly inside a directory.

    Subdirectories and symlinks are not followed.

    Args:
        directory: Directory to list
        skip: Paths to leave out of the listing (e.g. the bundle being written)

    Returns:
        Absolute file paths sorted by name

    Raises:
        DirectoryNotFoundError: If the directory does not exist
        AccessDeniedError: If the directory cannot be read
    """
    directory = directory.resolve()
    skipped = {Path(p).resolve() for p in skip or ()}
    files = []

    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_symlink() or not entry.is_file():
                    continue
                entry_path = Path(entry.path)
                if entry_path in skipped:
                    continue
                files.append(entry_path)
    except OSError as e:
        raise translate_os_error(e, directory) from e

    return sorted(files, key=lambda p: p.name)


def excluded_directory_match(file_path: Path) -> Optional[str]:
    """
    Check a file's containing directory against the excluded directory names.

    Returns the matching fragment or None.
    """
    directory = normalize_path(str(file_path.parent)).lower()
    for excluded in EXCLUDED_DIRECTORIES:
        if excluded in directory:
            return excluded
    return None


def sort_paths(paths: Iterable[Path], sort_mode: SortMode | str) -> list[Path]:
    """
    Order paths by name, or by extension then name.

    Ties fall through to the full path so the order is total. Unknown sort modes fall
    back to name ordering.
    """
    if sort_mode == SortMode.TYPE:
        return sorted(paths, key=lambda p: (get_extension(p), p.name, str(p)))
    return sorted(paths, key=lambda p: (p.name, str(p)))


class FileSelector:
    """
    Selects the files of a directory listing that belong in a bundle.

    Handles the excluded-directory rule, language filtering, and ordering.
    """

    def __init__(
        self,
        config: BundleConfig,
        console: Optional[Console] = None,
    ):
        """
        Initialize the selector.

        Args:
            config: Validated bundle configuration
            console: Console for per-file trace lines; None keeps selection silent
        """
        self.config = config
        self.console = console
        self.stats = SelectionStats()

    def _trace(self, message: str) -> None:
        if self.console is not None:
            self.console.print(f"[dim]{escape(message)}[/dim]", highlight=False)

    def _should_include(self, file_path: Path) -> bool:
        """Apply the directory rule, then the language rule, to one path."""
        if excluded_directory_match(file_path):
            self._trace(f"Excluding file: {file_path} (from excluded directory)")
            self.stats.files_skipped_directory += 1
            return False

        if self.config.includes_all:
            return True

        extension = get_extension(file_path).lower()
        self._trace(f"Checking file: {file_path} with extension {extension}")

        language = get_language(extension)
        if language is None or language not in self.config.languages:
            self.stats.files_skipped_extension += 1
            return False
        return True

    def select(self, listing: Iterable[Path]) -> list[Path]:
        """
        Filter and order a directory listing.

        Args:
            listing: Candidate file paths from one directory level

        Returns:
            The included paths in bundle order
        """
        selected = []
        for candidate in listing:
            file_path = Path(candidate)
            self.stats.files_scanned += 1

            if not self._should_include(file_path):
                continue

            language = get_language(get_extension(file_path)) or "other"
            self.stats.languages_detected[language] = (
                self.stats.languages_detected.get(language, 0) + 1
            )
            self.stats.files_included += 1
            selected.append(file_path)

        return sort_paths(selected, self.config.sort_mode)


def select_files(
    listing: Iterable[Path],
    config: BundleConfig,
    console: Optional[Console] = None,
) -> tuple[list[Path], SelectionStats]:
    """
    Convenience function to select files from a listing.

    Returns:
        Tuple of (ordered list of paths, SelectionStats)
    """
    selector = FileSelector(config, console=console)
    files = selector.select(listing)
    return files, selector.stats
