"""
Code-Bundler: Concatenate a directory's source files into a single bundle.

This tool produces one plain-text file from the source files in the current directory:
- Files are selected by programming language and sorted deterministically
- Each file is preceded by a comment header, optionally with its full path and author
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
