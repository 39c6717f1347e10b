"""
Tests for infra/commands.py

Real subprocesses against fake executables on PATH.
"""

import json

import pytest

from pdfiron.infra.commands import run_command
from pdfiron.infra.config.schemas import BinaryName
from pdfiron.infra.errors import ExecutableNotFound, ExternalToolFailed, SpawnFailed
from pdfiron.infra.pipeline.logger import PipelineLogger


def write_script(path, body):
    path.write_text(body)
    path.chmod(0o755)
    return path


class TestRunCommandSuccess:

    def test_returns_captured_stdout(self, fake_tools):
        result = run_command("pdfinfo", ["whatever.pdf"])

        assert result.returncode == 0
        assert "Pages:" in result.stdout
        assert result.args == ["whatever.pdf"]
        assert fake_tools.calls("pdfinfo") == [["whatever.pdf"]]

    def test_paths_are_passed_as_strings(self, fake_tools, tmp_path):
        run_command("pdfinfo", [tmp_path / "doc.pdf"])

        assert fake_tools.calls("pdfinfo") == [[str(tmp_path / "doc.pdf")]]

    def test_undecodable_output_is_replaced(self, fake_tools):
        write_script(
            fake_tools.bin_dir / "binary-noise",
            "#!/bin/sh\nprintf 'ok \\377\\376 done'\n"
        )

        result = run_command("binary-noise", [])

        assert result.stdout.startswith("ok ")
        assert "�" in result.stdout
        assert result.stdout.endswith(" done")

    def test_stdout_is_logged_at_debug(self, fake_tools, tmp_path):
        log_dir = tmp_path / "logs"
        logger = PipelineLogger("run", "test", log_dir=log_dir, console_output=False, level="DEBUG")

        run_command("pdfinfo", ["x.pdf"], logger=logger)
        logger.close()

        content = (log_dir / "test.jsonl").read_text()
        assert "Pages:" in content
        assert '"binary": "pdfinfo"' in content

    def test_command_line_not_logged_at_info(self, fake_tools, tmp_path):
        log_dir = tmp_path / "logs"
        logger = PipelineLogger("run", "test", log_dir=log_dir, console_output=False)

        run_command("pdfinfo", ["x.pdf"], logger=logger)
        logger.info("done")
        logger.close()

        entries = [json.loads(line) for line in (log_dir / "test.jsonl").read_text().splitlines()]
        assert [e["message"] for e in entries] == ["done"]


class TestRunCommandFailures:

    def test_nonzero_exit_raises_external_tool_failed(self, fake_tools):
        fake_tools.install("convert", fail_on="")

        with pytest.raises(ExternalToolFailed) as exc_info:
            run_command("convert", ["in.pdf[0]", "out.pbm"])

        error = exc_info.value
        assert error.binary == "convert"
        assert error.returncode == 1
        assert "partial output" in error.stdout
        assert "simulated failure" in error.stderr
        assert "Execution of convert failed" in str(error)

    def test_missing_binary_raises_executable_not_found(self, fake_tools):
        with pytest.raises(ExecutableNotFound) as exc_info:
            run_command("definitely-not-installed", [])

        assert exc_info.value.binary == "definitely-not-installed"

    def test_not_executable_raises_spawn_failed(self, fake_tools):
        script = fake_tools.bin_dir / "not-executable"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(0o644)

        with pytest.raises(SpawnFailed) as exc_info:
            run_command(str(script), [])

        assert exc_info.value.binary == str(script)
        assert isinstance(exc_info.value.cause, PermissionError)


class TestExecutableNotFoundMessages:

    def test_default_name_suggests_override(self, fake_tools):
        fake_tools.remove("unpaper")

        with pytest.raises(ExecutableNotFound) as exc_info:
            run_command(BinaryName(tool="unpaper", name="unpaper"), [])

        message = str(exc_info.value)
        assert "please make sure unpaper is installed" in message
        assert "--unpaper-binary" in message
        assert "PDFIRON_UNPAPER_BINARY" in message

    def test_argument_override_names_the_argument(self, fake_tools):
        binary = BinaryName(tool="convert", name="magick", source="argument")

        with pytest.raises(ExecutableNotFound) as exc_info:
            run_command(binary, [])

        message = str(exc_info.value)
        assert "under the name magick" in message
        assert "--convert-binary argument" in message

    def test_env_override_names_the_variable(self, fake_tools):
        binary = BinaryName(tool="tesseract", name="tess5", source="env")

        with pytest.raises(ExecutableNotFound) as exc_info:
            run_command(binary, [])

        assert "PDFIRON_TESSERACT_BINARY environment variable" in str(exc_info.value)

    def test_config_override_names_the_file(self, fake_tools):
        binary = BinaryName(tool="pdfunite", name="pdfjoin", source="config")

        with pytest.raises(ExecutableNotFound) as exc_info:
            run_command(binary, [])

        assert "config file" in str(exc_info.value)
