import logging
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from scanworker.core.config import settings
from scanworker.domain.errors import ProcessExecutionError

logger = logging.getLogger(__name__)

# Upper bound on tool processes running at once across all scans
_process_slots = threading.BoundedSemaphore(max(1, settings.MAX_CONCURRENT_PROCESSES))

CLEANUP_TIMEOUT_SEC = 60


@dataclass
class CmdResult:
    exit_code: int
    stdout: str
    stderr: str


def run_cmd(
    cmd: Sequence[str],
    cwd: Path | None = None,
    timeout_sec: int = 60,
    on_timeout: Sequence[str] | None = None,
) -> CmdResult:
    """Run ``cmd`` holding one process slot.

    ``on_timeout`` is run before the slot is released when ``cmd`` times out,
    e.g. ``docker rm -f <name>``: killing the ``docker run`` client does not
    stop its container.
    """
    args = list(cmd)
    with _process_slots:
        try:
            p = subprocess.run(
                args,
                cwd=str(cwd) if cwd else None,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout_sec,
            )
        except subprocess.TimeoutExpired as e:
            if on_timeout:
                _cleanup(list(on_timeout))
            raise ProcessExecutionError(f"{args[0]} timed out after {timeout_sec}s") from e
        except OSError as e:
            raise ProcessExecutionError(f"failed to launch {args[0]}: {e}") from e
    return CmdResult(p.returncode, p.stdout or "", p.stderr or "")


def _cleanup(args: list[str]) -> None:
    try:
        p = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=CLEANUP_TIMEOUT_SEC,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.error("Cleanup command %s failed: %s", " ".join(args), e)
        return
    if p.returncode != 0:
        logger.error("Cleanup command %s exited with code %d: %s", " ".join(args), p.returncode, (p.stderr or "").strip())
