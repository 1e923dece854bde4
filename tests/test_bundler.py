"""Tests for the bundler module."""

from pathlib import Path

import pytest

from code_bundler import bundler as bundler_module
from code_bundler.bundler import (
    bundle_files,
    prepare_output,
    remove_empty_lines,
    render_header,
    resolve_output_path,
)
from code_bundler.config import BundleConfig
from code_bundler.errors import (
    AccessDeniedError,
    DirectoryNotFoundError,
    OverwriteDeclinedError,
    UnexpectedBundleError,
)
from code_bundler.selector import list_directory, select_files


def make_config(**kwargs):
    kwargs.setdefault("languages", frozenset({"python"}))
    return BundleConfig(**kwargs)


@pytest.fixture
def sources(tmp_path):
    """Create two small source files."""
    (tmp_path / "a.py").write_text("import os\n\nprint(os.name)\n")
    (tmp_path / "b.py").write_text("x = 1\n   \ny = 2\n")
    return tmp_path


class TestRemoveEmptyLines:
    """Tests for blank line filtering."""

    def test_drops_empty_and_whitespace_lines(self):
        """Test that empty and whitespace-only lines are removed in order."""
        assert remove_empty_lines(["a", "", "  ", "b"]) == ["a", "b"]

    def test_keeps_indentation(self):
        """Test that surviving lines are not trimmed."""
        assert remove_empty_lines(["  a", "\t", "b  "]) == ["  a", "b  "]


class TestRenderHeader:
    """Tests for per-file headers."""

    def test_plain_header(self):
        """Test the header without note or author."""
        assert render_header(Path("/src/a.py"), make_config()) == ["// File: a.py"]

    def test_header_with_path_note(self):
        """Test that the note adds the full path."""
        header = render_header(Path("/src/a.py"), make_config(include_path_note=True))

        assert header == [f"// File: a.py - Path: {Path('/src/a.py')}"]

    def test_header_with_author(self):
        """Test that the author line and a blank line precede the file header."""
        header = render_header(Path("/src/a.py"), make_config(author="Jane"))

        assert header == ["// Author: Jane", "", "// File: a.py"]

    def test_blank_author_is_ignored(self):
        """Test that a whitespace-only author writes no author block."""
        assert render_header(Path("a.py"), make_config(author="   ")) == ["// File: a.py"]


class TestBundleFiles:
    """Tests for writing bundles."""

    def test_writes_files_in_order(self, sources):
        """Test the exact output for two files."""
        output = sources / "out.txt"

        summary = bundle_files(
            [sources / "b.py", sources / "a.py"], make_config(), output_path=output
        )

        assert output.read_text() == (
            "// File: b.py\n"
            "x = 1\n"
            "   \n"
            "y = 2\n"
            "\n"
            "// File: a.py\n"
            "import os\n"
            "\n"
            "print(os.name)\n"
            "\n"
        )
        assert summary.output_path == output
        assert summary.files_written == 2
        assert summary.lines_written == 6

    def test_remove_empty_lines(self, tmp_path):
        """Test that blank lines are dropped only when requested."""
        (tmp_path / "m.py").write_text("a\n\n  \nb\n")
        output = tmp_path / "out.txt"

        bundle_files([tmp_path / "m.py"], make_config(remove_empty_lines=True), output)
        assert output.read_text() == "// File: m.py\na\nb\n\n"

        bundle_files([tmp_path / "m.py"], make_config(), output)
        assert output.read_text() == "// File: m.py\na\n\n  \nb\n\n"

    def test_author_repeats_for_every_file(self, sources):
        """Test that the author block precedes each file, not just the first."""
        output = sources / "out.txt"

        bundle_files(
            [sources / "a.py", sources / "b.py"],
            make_config(author="Jane", remove_empty_lines=True),
            output,
        )

        text = output.read_text()
        assert text.count("// Author: Jane\n\n") == 2
        assert text == (
            "// Author: Jane\n"
            "\n"
            "// File: a.py\n"
            "import os\n"
            "print(os.name)\n"
            "\n"
            "// Author: Jane\n"
            "\n"
            "// File: b.py\n"
            "x = 1\n"
            "y = 2\n"
            "\n"
        )

    def test_mixed_line_endings(self, tmp_path):
        """Test that CRLF and CR endings split lines like LF."""
        (tmp_path / "w.cs").write_bytes(b"class A\r\n{\r}\n")
        output = tmp_path / "out.txt"

        bundle_files([tmp_path / "w.cs"], make_config(), output)

        assert output.read_text() == "// File: w.cs\nclass A\n{\n}\n\n"

    def test_empty_file(self, tmp_path):
        """Test that an empty source still gets a header and separators."""
        (tmp_path / "empty.py").write_text("")
        output = tmp_path / "out.txt"

        summary = bundle_files([tmp_path / "empty.py"], make_config(), output)

        assert output.read_text() == "// File: empty.py\n\n\n"
        assert summary.lines_written == 0

    def test_no_files_creates_empty_bundle(self, tmp_path):
        """Test that an empty selection produces an empty output file."""
        output = tmp_path / "out.txt"

        summary = bundle_files([], make_config(), output)

        assert output.read_text() == ""
        assert summary.files_written == 0

    def test_truncates_existing_output(self, sources):
        """Test that the output file is overwritten, not appended to."""
        output = sources / "out.txt"
        output.write_text("stale content\n" * 10)

        bundle_files([sources / "a.py"], make_config(), output)

        assert "stale content" not in output.read_text()

    def test_decodes_non_utf8_source(self, tmp_path):
        """Test that Latin-1 sources are decoded instead of failing."""
        text = "# café crème brûlée, déjà vu à la française, garçon élève\n" * 5
        (tmp_path / "l.py").write_bytes(text.encode("latin-1"))
        output = tmp_path / "out.txt"

        bundle_files([tmp_path / "l.py"], make_config(), output)

        text = output.read_text(encoding="utf-8")
        assert text.startswith("// File: l.py\n# caf")
        assert "�" not in text

    def test_utf8_bom_is_stripped(self, tmp_path):
        """Test that a UTF-8 byte order mark does not leak into the bundle."""
        (tmp_path / "bom.cs").write_bytes(b"\xef\xbb\xbfusing System;\n")
        output = tmp_path / "out.txt"

        bundle_files([tmp_path / "bom.cs"], make_config(), output)

        assert output.read_text(encoding="utf-8") == "// File: bom.cs\nusing System;\n\n"


class TestBundleErrors:
    """Tests for error mapping during bundling."""

    def test_missing_source(self, sources):
        """Test that a vanished source raises DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError) as exc_info:
            bundle_files([sources / "gone.py"], make_config(), sources / "out.txt")

        assert exc_info.value.path == sources / "gone.py"

    def test_missing_output_directory(self, sources):
        """Test that an output path in a missing directory raises DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError):
            bundle_files([sources / "a.py"], make_config(), sources / "nope" / "out.txt")

    def test_permission_error(self, sources, monkeypatch):
        """Test that permission failures raise AccessDeniedError."""

        def deny(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(bundler_module, "read_text_lines", deny)

        with pytest.raises(AccessDeniedError):
            bundle_files([sources / "a.py"], make_config(), sources / "out.txt")

    def test_unexpected_error(self, sources, monkeypatch):
        """Test that other failures raise UnexpectedBundleError with the message."""

        def explode(path):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(bundler_module, "read_text_lines", explode)

        with pytest.raises(UnexpectedBundleError) as exc_info:
            bundle_files([sources / "a.py"], make_config(), sources / "out.txt")

        assert "disk on fire" in str(exc_info.value)

    def test_failure_keeps_written_prefix(self, sources):
        """Test that files written before a failure remain in the output."""
        output = sources / "out.txt"

        with pytest.raises(DirectoryNotFoundError):
            bundle_files([sources / "a.py", sources / "gone.py"], make_config(), output)

        assert output.read_text().startswith("// File: a.py\nimport os\n")


class TestOutputPath:
    """Tests for output path resolution and overwrite protection."""

    def test_default_output_name(self, tmp_path):
        """Test that the default bundle lives in the given directory."""
        path = resolve_output_path(make_config(), cwd=tmp_path)

        assert path == (tmp_path / "bundle_output.txt").resolve()

    def test_relative_output_is_resolved(self, tmp_path):
        """Test that relative output paths are resolved against the directory."""
        config = make_config(output_path=Path("out/all.txt"))

        assert resolve_output_path(config, cwd=tmp_path) == (tmp_path / "out" / "all.txt").resolve()

    def test_new_file_needs_no_confirmation(self, tmp_path):
        """Test that confirm is not called when the output does not exist."""
        calls = []

        prepare_output(make_config(), confirm=lambda p: calls.append(p) or False, cwd=tmp_path)

        assert calls == []

    def test_declined_overwrite(self, tmp_path):
        """Test that declining raises OverwriteDeclinedError."""
        (tmp_path / "bundle_output.txt").write_text("keep me")

        with pytest.raises(OverwriteDeclinedError):
            prepare_output(make_config(), confirm=lambda p: False, cwd=tmp_path)

        assert (tmp_path / "bundle_output.txt").read_text() == "keep me"

    def test_accepted_overwrite(self, tmp_path):
        """Test that accepting returns the resolved path."""
        (tmp_path / "bundle_output.txt").write_text("old")

        path = prepare_output(make_config(), confirm=lambda p: True, cwd=tmp_path)

        assert path == (tmp_path / "bundle_output.txt").resolve()


class TestEndToEnd:
    """Selection and bundling together."""

    def test_python_only_bundle(self, project_dir):
        """Test selection of a.py from a mixed directory and the resulting bundle."""
        (project_dir / "a.py").write_text("print('a')\n")
        (project_dir / "b.cs").write_text("class B {}\n")
        (project_dir / "c.txt").write_text("notes\n")
        (project_dir / "bin").mkdir()
        (project_dir / "bin" / "d.py").write_text("print('d')\n")

        config = make_config()
        listing = list_directory(project_dir) + [project_dir / "bin" / "d.py"]
        files, stats = select_files(listing, config)

        assert files == [(project_dir / "a.py").resolve()]
        assert stats.files_skipped_directory == 1

        output = project_dir / "bundle_output.txt"
        bundle_files(files, config, output)

        assert output.read_text() == "// File: a.py\nprint('a')\n\n"
