from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .errors import LaunchError

log = logging.getLogger(__name__)

# detached children outlive the picker; held here so Popen is not collected while running
_detached: list[subprocess.Popen] = []


def launch(command: Sequence[str], *, wait: bool = True) -> int | None:
    """Run ``command[0]`` with ``command[1:]`` as arguments.

    Standard streams are attached to the null device so the child never
    touches the terminal. With ``wait`` the exit status is returned and a
    non-zero status raises :class:`LaunchError`; without it the child is
    started in its own session and ``None`` is returned.
    """
    argv = list(command)
    if not argv:
        raise LaunchError("Nothing to launch: empty command.")

    log.debug("launching %s (wait=%s)", argv, wait)
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            start_new_session=not wait,
        )
    except OSError as exc:
        raise LaunchError(f"Failed to start {argv[0]}: {exc}") from exc

    if not wait:
        _detached.append(proc)
        log.debug("detached %s as pid %s", argv[0], proc.pid)
        return None

    code = proc.wait()
    log.debug("%s exited with %s", argv[0], code)
    if code != 0:
        raise LaunchError(f"{' '.join(argv)} exited with code {code}", returncode=code)
    return code
