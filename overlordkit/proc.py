"""Child process that can be cancelled."""

from __future__ import annotations

import subprocess

from overlordkit import log


class Proc:
    """A command that is started, waited on, and may be killed by ``stop``."""

    def __init__(self, name: str, *args: str) -> None:
        self.name = name
        self.args = list(args)
        self._process: subprocess.Popen[bytes] | None = None
        self._cancelled = False

    @property
    def command(self) -> list[str]:
        return [self.name, *self.args]

    def start(self) -> None:
        """Launch the process."""
        if self._cancelled:
            raise RuntimeError("context canceled")
        if self._process is not None:
            raise RuntimeError("exec: already started")
        log.infof("start service %s %s", self.name, self.command)
        self._process = subprocess.Popen(self.command)

    def stop(self) -> None:
        """Cancel the process, killing it if it is running."""
        self._cancelled = True
        if self._process is not None and self._process.poll() is None:
            self._process.kill()

    def wait(self) -> int:
        """Wait for exit; return 0 or raise CalledProcessError on failure."""
        if self._process is None:
            raise RuntimeError("exec: not started")
        code = self._process.wait()
        if code != 0:
            raise subprocess.CalledProcessError(code, self.command)
        return code