"""Tmux command execution - the only place that spawns tmux processes"""

import subprocess
import logging
from typing import List, Optional
from dataclasses import dataclass, field

from .errors import CommandTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


@dataclass
class CommandResult:
    """Result of one tmux invocation

    Attributes:
        args: Full argv, including the leading "tmux"
        returncode: Exit status
        stdout: Captured stdout, split into lines
        stderr: Captured stderr, split into lines
    """
    args: List[str]
    returncode: int
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class TmuxController:
    """Tmux controller

    Runs tmux synchronously and returns stdout/stderr as lines. Every call is
    bounded by `timeout`; a hung tmux raises CommandTimeoutError instead of
    blocking the caller forever.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(self, *args, cwd: Optional[str] = None) -> CommandResult:
        """Execute a tmux command

        Args:
            *args: tmux sub-command and its arguments
            cwd: Working directory for the tmux client process

        Returns:
            CommandResult (a missing tmux binary is reported as exit status 1)

        Raises:
            CommandTimeoutError: tmux did not finish within the timeout
        """
        cmd = ['tmux'] + [str(a) for a in args]
        logger.debug(f"[tmux] {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, cwd=cwd, timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.error(f"[tmux] timed out after {self.timeout}s: {' '.join(cmd)}")
            raise CommandTimeoutError(
                f"tmux {args[0] if args else ''} timed out after {self.timeout}s"
            )
        except FileNotFoundError:
            return CommandResult(cmd, 1, [], ['tmux not found'])

        result = CommandResult(
            cmd,
            proc.returncode,
            proc.stdout.splitlines(),
            proc.stderr.splitlines(),
        )
        if not result.ok:
            logger.debug(f"[tmux] exit={result.returncode} stderr={result.stderr}")
        return result


def check_tmux() -> tuple[bool, str]:
    """Check whether tmux is usable"""
    try:
        result = subprocess.run(
            ['tmux', '-V'], capture_output=True, text=True, timeout=DEFAULT_TIMEOUT
        )
        if result.returncode == 0:
            return True, result.stdout.strip()
        return False, "tmux -V failed"
    except FileNotFoundError:
        return False, "tmux not found, install it with: sudo apt install tmux"
    except subprocess.TimeoutExpired:
        return False, f"tmux -V timed out after {DEFAULT_TIMEOUT}s"
