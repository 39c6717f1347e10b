"""
Shared fixtures for pdfiron tests.

All tests use real filesystem operations with temporary directories and real
processes. The external tools are replaced by small fake executables put on
PATH: each one records its arguments and writes the files the real tool
would write.
"""

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest

from pdfiron.infra.config.runtime import build_config


FAKE_TOOL = '''#!__PYTHON__
import json
import sys
from pathlib import Path

TOOL = __TOOL__
LOG = __LOG__
PAGES = __PAGES__
FAIL_ON = __FAIL_ON__

args = sys.argv[1:]
with open(LOG, "a") as f:
    f.write(json.dumps({"tool": TOOL, "args": args}) + "\\n")

if FAIL_ON is not None and (FAIL_ON == "" or any(FAIL_ON in arg for arg in args)):
    sys.stdout.write("partial output\\n")
    sys.stderr.write(TOOL + ": simulated failure\\n")
    sys.exit(1)


def touch(path):
    Path(path).write_text(TOOL + " " + " ".join(args))


if TOOL == "pdfinfo":
    print("Title:          scan")
    print("Pages:          " + str(PAGES))
    print("Encrypted:      no")
elif TOOL == "convert":
    touch(args[-1].replace("%03d", "000"))
elif TOOL == "unpaper":
    count = int(args[args.index("--output-pages") + 1]) if "--output-pages" in args else 1
    for output in args[-count:]:
        touch(output)
elif TOOL == "tesseract":
    touch(args[-2] + ".pdf")
elif TOOL == "pdfunite":
    Path(args[-1]).write_text("".join(Path(p).read_text() + "\\n" for p in args[:-1]))
'''

TOOLS = ("pdfinfo", "convert", "unpaper", "tesseract", "pdfunite")


class FakeTools:
    """Installs fake tool executables into a bin directory on PATH."""

    def __init__(self, bin_dir: Path):
        self.bin_dir = bin_dir
        self.log_file = bin_dir / "calls.jsonl"

    def install(
        self,
        tool: str,
        name: Optional[str] = None,
        pages: int = 3,
        fail_on: Optional[str] = None
    ) -> Path:
        """
        Install a fake for tool under name (default: the tool's own name).

        fail_on: "" fails every call, any other string fails calls having an
        argument that contains it.
        """
        script = (
            FAKE_TOOL
            .replace("__PYTHON__", sys.executable)
            .replace("__TOOL__", repr(tool))
            .replace("__LOG__", repr(str(self.log_file)))
            .replace("__PAGES__", repr(pages))
            .replace("__FAIL_ON__", repr(fail_on))
        )
        path = self.bin_dir / (name or tool)
        path.write_text(script)
        path.chmod(0o755)
        return path

    def remove(self, name: str) -> None:
        (self.bin_dir / name).unlink()

    def calls(self, tool: Optional[str] = None) -> List[List[str]]:
        if not self.log_file.exists():
            return []
        entries = [json.loads(line) for line in self.log_file.read_text().splitlines() if line]
        return [e["args"] for e in entries if tool is None or e["tool"] == tool]


@pytest.fixture
def fake_tools(tmp_path, monkeypatch):
    """All five tools installed as fakes; PATH contains only the fake bin dir."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))

    tools = FakeTools(bin_dir)
    for tool in TOOLS:
        tools.install(tool)
    return tools


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Temp dirs under tmp_path and no PDFIRON_* variables leaking in."""
    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))

    for var in list(os.environ):
        if var.startswith("PDFIRON_"):
            monkeypatch.delenv(var)
    return temp_root


@pytest.fixture
def temp_root(isolated_environment):
    """Directory workspaces are created in."""
    return isolated_environment


@pytest.fixture
def source_pdf(tmp_path):
    """A stand-in scanned document (the fake tools never parse it)."""
    docs = tmp_path / "docs"
    docs.mkdir()
    pdf = docs / "scan.pdf"
    pdf.write_bytes(b"%PDF-1.4\n% fake scan\n")
    return pdf


@pytest.fixture
def make_config():
    """Build a PipelineConfig with test-friendly defaults."""
    def _make(**values):
        values.setdefault("workers", 2)
        values.setdefault("show_progress", False)
        return build_config(values)
    return _make
