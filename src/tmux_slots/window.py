"""Window handles - one object per tmux pane

A WindowHandle mediates every interaction with a single pane: existence
check, focus, send-keys and kill. create_window() spawns a new tmux window
and returns the handle for its pane.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from .errors import (
    ActivationError,
    CreationError,
    ParseError,
    TeardownError,
    TransmissionError,
    UnresolvedTargetError,
)
from .models import TmuxOptions
from .tmux_control import TmuxController

logger = logging.getLogger(__name__)

PANE_PREFIX = "%"
CREATE_FORMAT = "#{pane_id}:#{window_id}"
TARGET_FORMAT = "#{session_name}:#{window_id}.#{pane_id}"
SLOT_OPTION = "@tmux_slots"


@dataclass(eq=False)
class WindowHandle:
    """Handle for one tmux pane

    Attributes:
        window_id: tmux pane id, e.g. "%3"
        tmux: Controller used to run tmux
        options: Creation/kill options of the owning session
    """
    window_id: str
    tmux: TmuxController = field(repr=False)
    options: TmuxOptions = field(default_factory=TmuxOptions, repr=False)

    def exists(self) -> bool:
        """Check whether the pane is still alive"""
        return self.tmux.run('has-session', '-t', self.window_id, cwd=os.getcwd()).ok

    def target_info(self) -> Optional[str]:
        """Resolve the pane id to a session:window.pane target

        Returns:
            Target string, or None if no pane matches
        """
        result = self.tmux.run(
            'list-panes',
            '-s',
            '-f', f"#{{==:#{{pane_id}},{self.window_id}}}",
            '-F', TARGET_FORMAT,
            cwd=os.getcwd(),
        )
        locations = [line for line in result.stdout if line.strip()]
        if not locations:
            return None
        return locations[0]

    def activate(self) -> None:
        """Switch the attached client to this pane

        Raises:
            UnresolvedTargetError: The pane id does not resolve to a target
            ActivationError: switch-client failed
        """
        target = self.target_info()
        if target is None:
            raise UnresolvedTargetError(f"Cannot locate terminal {self.window_id}")

        result = self.tmux.run('switch-client', '-t', target)
        if not result.ok:
            raise ActivationError(f"Failed to go to terminal {self.window_id}", result.stderr)

    def send_keys(self, text: str, *format_args) -> None:
        """Send text to the pane

        `text` is used as a %-style template when format_args are given,
        positional placeholders only (e.g. "make %s").

        Raises:
            TransmissionError: send-keys failed
        """
        if format_args:
            text = text % format_args

        result = self.tmux.run('send-keys', '-t', self.window_id, text)
        if not result.ok:
            raise TransmissionError(
                f"Error sending command to terminal at {self.window_id}", result.stderr
            )

    def kill(self, command: Optional[str] = None) -> None:
        """Destroy the pane

        A failed kill on a pane that is already gone counts as success.

        Args:
            command: tmux command to use, defaults to options.kill_command

        Raises:
            TeardownError: The kill failed and the pane still exists
        """
        command = command or self.options.kill_command
        result = self.tmux.run(command, '-t', self.window_id, cwd=os.getcwd())
        if result.ok:
            return
        if self.exists():
            raise TeardownError(
                f"Failed to kill running window {self.window_id}", result.stderr
            )
        logger.debug(f"[window] {self.window_id} already gone, ignoring {command} failure")


def parse_creation_output(line: str) -> tuple[str, str]:
    """Parse the `%<pane>:@<window>` line printed by new-window

    Returns:
        (bare pane id, window id), e.g. ("3", "@7") for "%3:@7"

    Raises:
        ParseError: The line is not exactly two colon-separated parts with a
            %-prefixed pane id
    """
    parts = line.strip().split(':')
    if len(parts) != 2 or not parts[0].startswith(PANE_PREFIX) or len(parts[0]) < 2 or not parts[1]:
        raise ParseError(f"Unexpected new-window output: {line!r}")
    return parts[0][len(PANE_PREFIX):], parts[1]


def create_window(
    tmux: TmuxController,
    options: TmuxOptions,
    slot=None,
    cwd: Optional[str] = None,
) -> WindowHandle:
    """Create a new tmux window and return the handle of its pane

    Args:
        tmux: Controller used to run tmux
        options: Naming policy and kill command
        slot: Slot the window is created for, passed to a naming callable
        cwd: Working directory, defaults to the current one

    Raises:
        CreationError: new-window exited non-zero
        ParseError: new-window printed something unexpected
    """
    args = ['new-window', '-P', '-F', CREATE_FORMAT]
    name_func = None
    if options.window_name:
        if isinstance(options.window_name, str):
            args.extend(['-n', options.window_name])
        elif callable(options.window_name):
            name_func = options.window_name
        else:
            logger.warning(
                f"[window] ignoring window_name {options.window_name!r}: not a string or callable"
            )

    cwd = cwd or os.getcwd()
    result = tmux.run(*args, cwd=cwd)
    if not result.ok:
        raise CreationError("Failed to create tmux window", result.stderr)
    if not result.stdout:
        raise ParseError("new-window printed nothing")

    pane_id, real_window_id = parse_creation_output(result.stdout[0])

    if name_func is not None:
        _rename_window(tmux, name_func, slot, pane_id, real_window_id, cwd)

    handle = WindowHandle(window_id=PANE_PREFIX + pane_id, tmux=tmux, options=options)
    logger.info(f"[window] created {handle.window_id} ({real_window_id}) for slot {slot}")
    return handle


def _rename_window(tmux, name_func, slot, pane_id: str, real_window_id: str, cwd: str) -> None:
    """Best-effort rename; the window is usable whatever its name"""
    try:
        name = name_func(slot, pane_id, real_window_id)
    except Exception as e:
        logger.warning(f"[window] window name function failed for slot {slot}: {e}")
        return

    result = tmux.run('rename-window', '-t', real_window_id, str(name), cwd=cwd)
    if not result.ok:
        logger.warning(f"[window] rename-window {real_window_id} failed: {result.stderr}")


def tag_window(handle: WindowHandle, tag: str) -> None:
    """Best-effort: store `tag` in the pane's SLOT_OPTION user option"""
    result = handle.tmux.run(
        'set-option', '-p', '-t', handle.window_id, SLOT_OPTION, tag, cwd=os.getcwd()
    )
    if not result.ok:
        logger.warning(f"[window] tagging {handle.window_id} as {tag} failed: {result.stderr}")


def find_tagged_window(
    tmux: TmuxController,
    options: TmuxOptions,
    tag: str,
) -> Optional[WindowHandle]:
    """Find a live pane, in any session, whose SLOT_OPTION equals `tag`

    Returns:
        Handle of the first matching pane, or None
    """
    result = tmux.run(
        'list-panes',
        '-a',
        '-f', f"#{{==:#{{{SLOT_OPTION}}},{tag}}}",
        '-F', '#{pane_id}',
        cwd=os.getcwd(),
    )
    for line in result.stdout:
        pane_id = line.strip()
        if pane_id.startswith(PANE_PREFIX) and len(pane_id) > 1:
            return WindowHandle(window_id=pane_id, tmux=tmux, options=options)
    return None
