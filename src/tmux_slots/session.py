"""Terminal session - public entry point

A TerminalSession ties together the command table, the window registry and
the options fixed at setup time:

    session = setup(TmuxOptions(window_name=lambda slot, pane, win: f"term-{slot}"))
    session.add_command("make test")
    session.send_command(1, 1)       # run stored command 1 in slot 1's window
    session.goto_terminal(1)
"""

import atexit
import logging
from typing import Optional

from .commands import CommandSlots
from .config import GlobalSettings
from .errors import TeardownError
from .models import TmuxOptions
from .registry import WindowRegistry
from .tmux_control import TmuxController

logger = logging.getLogger(__name__)


class TerminalSession:
    """Slot dispatcher

    Resolves slots to windows (creating them on demand) and stored command
    indexes to command strings.
    """

    def __init__(
        self,
        commands: Optional[CommandSlots] = None,
        options: Optional[TmuxOptions] = None,
        settings: Optional[GlobalSettings] = None,
        tmux: Optional[TmuxController] = None,
        tag_namespace: Optional[str] = None,
    ):
        self.settings = settings or GlobalSettings()
        self.options = options or TmuxOptions()
        self.tmux = tmux or TmuxController()
        self.commands = commands or CommandSlots(save_on_change=self.settings.save_on_change)
        self.registry = WindowRegistry(self.tmux, self.options, tag_namespace=tag_namespace)

    # ========== Windows ==========

    def goto_terminal(self, slot) -> None:
        """Focus the window of a slot, creating it if needed"""
        logger.debug(f"[session] goto terminal {slot}")
        handle = self.registry.resolve(slot)
        handle.activate()

    def send_command(self, slot, cmd, *format_args) -> None:
        """Send a command to the window of a slot

        Args:
            slot: Target slot (or a literal pane id)
            cmd: Command text, or the index of a stored command
            *format_args: Positional %-substitutions applied to the command

        A stored index with no command sends nothing.
        """
        logger.debug(f"[session] send command to {slot}")
        handle = self.registry.resolve(slot)

        if isinstance(cmd, int) and not isinstance(cmd, bool):
            cmd = self.commands.get_command(cmd)

        if not cmd:
            logger.debug(f"[session] nothing to send to {slot}")
            return

        if self.settings.enter_on_sendcmd:
            cmd = cmd + "\n"

        logger.debug(f"[session] sendCommand: {cmd!r}")
        handle.send_keys(cmd, *format_args)

    def clear_all(self) -> None:
        """Kill every window created by this session"""
        logger.debug("[session] clearing all tmux windows")
        self.registry.clear_all()

    # ========== Commands ==========

    def get_length(self) -> int:
        return self.commands.get_length()

    def is_valid_index(self, idx) -> bool:
        return self.commands.is_valid_index(idx)

    def add_command(self, cmd: str) -> int:
        return self.commands.add_command(cmd)

    def remove_command(self, idx) -> None:
        self.commands.remove_command(idx)

    def replace_command_list(self, new_list) -> None:
        self.commands.replace_command_list(new_list)


# Process-wide session
_session: Optional[TerminalSession] = None


def setup(
    options: Optional[TmuxOptions] = None,
    settings: Optional[GlobalSettings] = None,
    commands: Optional[CommandSlots] = None,
    tmux: Optional[TmuxController] = None,
    tag_namespace: Optional[str] = None,
) -> TerminalSession:
    """Create the process-wide session

    Options are fixed by the first call; later calls return the existing
    session unchanged. When settings.tmux_autoclose_windows is set, every
    window is killed at interpreter exit. A tag_namespace makes the windows
    findable by later processes using the same namespace.
    """
    global _session
    if _session is not None:
        logger.warning("[session] setup() called again, keeping the existing session")
        return _session

    _session = TerminalSession(
        commands=commands,
        options=options,
        settings=settings,
        tmux=tmux,
        tag_namespace=tag_namespace,
    )
    if _session.settings.tmux_autoclose_windows:
        atexit.register(teardown)
    logger.info(f"[session] ready: {_session.options}")
    return _session


def get_session() -> TerminalSession:
    """Get the process-wide session, creating it with defaults if needed"""
    if _session is None:
        return setup()
    return _session


def teardown() -> None:
    """Kill every window of the process-wide session (exit hook)"""
    if _session is None:
        return
    try:
        _session.clear_all()
    except TeardownError as e:
        for error in e.errors:
            logger.error(f"[session] teardown: {error}")
