"""Tests for the xquerydoc pipeline process runner."""
import logging
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from xqdoc.process.runner import (
    ProcessInterruptedError,
    ProcessLaunchError,
    ProcessResult,
    build_command,
    run_process,
)


def test_build_command_shape(tmp_path: Path):
    impl = tmp_path / "impl"
    report = tmp_path / "out" / "xquerydoc" / "XQuery_documentation.html"
    sources = tmp_path / "src" / "main" / "xquery"

    argv = build_command(
        implementation_folder=impl,
        report_file=report,
        xquery_dir_entry=sources,
        basedir=tmp_path,
    )

    assert argv == [
        "java",
        "-Xmx1024m",
        "-jar",
        str(impl / "deps" / "xmlcalabash" / "calabash.jar"),
        f"-oresult={report}",
        str(impl / "xquerydoc.xpl"),
        f"xquery={sources}",
        f"output={report.parent}",
        f"currentdir={tmp_path}",
        "format=html",
    ]


def test_build_command_uses_absolute_paths(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    argv = build_command(
        implementation_folder=Path("impl"),
        report_file=Path("out/report.html"),
        xquery_dir_entry=Path("src"),
        basedir=Path("."),
        java_executable="/opt/jdk/bin/java",
    )

    assert argv[0] == "/opt/jdk/bin/java"
    assert argv[3] == str(tmp_path / "impl" / "deps" / "xmlcalabash" / "calabash.jar")
    assert argv[8] == f"currentdir={tmp_path}"


def test_forwards_stdout_and_stderr_lines(caplog):
    caplog.set_level(logging.INFO, logger="xqdoc")
    script = "import sys; print('out one'); print('err one', file=sys.stderr); print('out two')"

    result = run_process([sys.executable, "-c", script])

    assert result == ProcessResult(argv=(sys.executable, "-c", script), returncode=0)
    assert result.ok
    messages = [r.getMessage() for r in caplog.records if r.name == "xqdoc.process.runner"]
    assert "out one" in messages
    assert "out two" in messages
    assert "err one" in messages
    assert messages.index("out one") < messages.index("out two")


def test_nonzero_exit_is_returned_not_raised():
    result = run_process([sys.executable, "-c", "import sys; sys.exit(3)"])

    assert result.returncode == 3
    assert not result.ok


def test_large_stderr_does_not_deadlock():
    # Far beyond a pipe buffer on both streams
    script = (
        "import sys\n"
        "for i in range(20000):\n"
        "    sys.stderr.write('e' * 64 + '\\n')\n"
        "    sys.stdout.write('o' * 64 + '\\n')\n"
    )
    log = logging.getLogger("xqdoc.test.flood")

    result = run_process([sys.executable, "-c", script], log=log)

    assert result.returncode == 0


def test_custom_log_sink(caplog):
    caplog.set_level(logging.INFO, logger="xqdoc.test.sink")
    log = logging.getLogger("xqdoc.test.sink")

    run_process([sys.executable, "-c", "print('hello sink')"], log=log)

    assert [r.getMessage() for r in caplog.records if r.name == "xqdoc.test.sink"] == ["hello sink"]


def test_runs_in_cwd(tmp_path: Path, caplog):
    caplog.set_level(logging.INFO, logger="xqdoc")

    run_process([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)

    assert str(tmp_path.resolve()) in [r.getMessage() for r in caplog.records]


def test_missing_executable_raises_launch_error(tmp_path: Path):
    with pytest.raises(ProcessLaunchError, match="Unable to start"):
        run_process([str(tmp_path / "no-such-java"), "-version"])


def test_interrupt_kills_child():
    process = MagicMock()
    process.stdout = iter(())
    process.stderr = iter(())
    process.wait.side_effect = [KeyboardInterrupt(), 0]

    with patch.object(subprocess, "Popen", return_value=process), patch(
        "xqdoc.process.runner._drain"
    ):
        with pytest.raises(ProcessInterruptedError):
            run_process(["java", "-jar", "calabash.jar"])

    process.kill.assert_called_once()
