"""Run the real server process and watch it shut itself down."""

import os
import signal
import subprocess
import sys
import threading
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="relies on POSIX signals")


class ServerProcess:
    def __init__(self, tmp_path: Path, **env_overrides: str) -> None:
        home = tmp_path / "home"
        home.mkdir()
        env = dict(os.environ)
        env.update(
            {
                "HOME": str(home),
                "ASAP_NOTES_HOST": "127.0.0.1",
                "ASAP_NOTES_PORT": "0",
                "ASAP_NOTES_CONFIG": str(tmp_path / "config.json"),
                "ASAP_NOTES_OPEN_BROWSER": "false",
                "LOG_LEVEL": "info",
                "PYTHONPATH": os.pathsep.join(
                    filter(None, [str(REPO_ROOT / "src"), os.environ.get("PYTHONPATH")])
                ),
            }
        )
        env.update(env_overrides)
        self.lines: list[str] = []
        self.started = threading.Event()
        self.proc = subprocess.Popen(
            [sys.executable, "-m", "asap_notes.server"],
            cwd=tmp_path,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        self._reader = threading.Thread(target=self._read, daemon=True)
        self._reader.start()

    def _read(self) -> None:
        assert self.proc.stdout is not None
        for line in self.proc.stdout:
            self.lines.append(line)
            if "Application startup complete" in line:
                self.started.set()

    def wait(self, timeout: float) -> int:
        try:
            code = self.proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.proc.kill()
            self.proc.wait()
            raise
        self._reader.join(timeout=5)
        return code

    @property
    def output(self) -> str:
        return "".join(self.lines)


def test_process_exits_after_heartbeat_silence(tmp_path):
    server = ServerProcess(
        tmp_path,
        ASAP_NOTES_HEARTBEAT_TIMEOUT="0.5",
        ASAP_NOTES_CHECK_INTERVAL="0.1",
    )

    server.wait(timeout=30)

    assert server.started.is_set(), server.output
    assert "No heartbeat for" in server.output
    assert "Shutting down server..." in server.output


def test_sigterm_shuts_down_gracefully(tmp_path):
    server = ServerProcess(tmp_path)
    if not server.started.wait(30):
        server.proc.kill()
        pytest.fail(server.output)

    server.proc.send_signal(signal.SIGTERM)
    server.wait(timeout=30)

    assert "Shutting down server..." in server.output
    assert "Lifecycle terminated" in server.output
