"""Run a small set of allowed systemctl actions."""

from __future__ import annotations

import subprocess
from enum import Enum


class NotSupportedActionError(ValueError):
    """Raised for a systemctl action outside the allowed set."""

    def __init__(self, message: str = "action not supported") -> None:
        super().__init__(message)


class ActionType(str, Enum):
    """Allowed systemctl actions."""

    START = "start"
    RESTART = "restart"
    STOP = "stop"
    DAEMON_RELOAD = "daemon-reload"

    def __str__(self) -> str:
        return self.value


def run(service_name: str, action: ActionType | str) -> None:
    """Run ``systemctl <action> <service_name>``; raise on failure."""
    try:
        checked = ActionType(action)
    except ValueError:
        raise NotSupportedActionError() from None
    subprocess.run(["systemctl", checked.value, service_name], check=True)


def start(service_name: str) -> None:
    run(service_name, ActionType.START)


def stop(service_name: str) -> None:
    run(service_name, ActionType.STOP)


def restart(service_name: str) -> None:
    run(service_name, ActionType.RESTART)


def daemon_reload() -> None:
    """Run ``systemctl daemon-reload``."""
    subprocess.run(["systemctl", ActionType.DAEMON_RELOAD.value], check=True)