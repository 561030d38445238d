"""Shared fixtures: an in-memory tmux"""

import re

import pytest

from tmux_slots.commands import CommandSlots
from tmux_slots.config import GlobalSettings
from tmux_slots.models import TermConfig, TmuxOptions
from tmux_slots.session import TerminalSession
from tmux_slots.tmux_control import CommandResult

FILTER_RE = re.compile(r"^#\{==:#\{pane_id\},(.+)\}$")
OPTION_FILTER_RE = re.compile(r"^#\{==:#\{(@[\w-]+)\},(.+)\}$")


class FakeTmux:
    """Simulates the tmux commands used by window handles

    Panes live in one session called "main". `fail()` queues a result that
    replaces the next invocation of a sub-command; `before(subcommand, func)`
    calls func just before the next invocation is handled.
    """

    def __init__(self):
        self.calls = []
        self.panes = {}          # pane id -> window id
        self.window_names = {}   # window id -> name
        self.sent = []           # (pane id, text)
        self.focused = None
        self.pane_options = {}   # pane id -> {option: value}
        self._next_pane = 1
        self._next_window = 1
        self._failures = {}
        self._before = {}

    def fail(self, subcommand, returncode=1, stderr=("boom",), stdout=()):
        self._failures.setdefault(subcommand, []).append(
            CommandResult(['tmux', subcommand], returncode, list(stdout), list(stderr))
        )

    def before(self, subcommand, func):
        self._before.setdefault(subcommand, []).append(func)

    def vanish(self, pane_id):
        """Close a pane behind the registry's back"""
        self.panes.pop(pane_id, None)

    def count(self, subcommand):
        return sum(1 for call in self.calls if call[0] == subcommand)

    def run(self, *args, cwd=None):
        args = [str(a) for a in args]
        self.calls.append(args)
        subcommand = args[0]

        hooks = self._before.get(subcommand)
        if hooks:
            hooks.pop(0)()

        queued = self._failures.get(subcommand)
        if queued:
            return queued.pop(0)

        handler = getattr(self, '_' + subcommand.replace('-', '_'), None)
        if handler is None:
            return CommandResult(['tmux'] + args, 1, [], [f"unknown command: {subcommand}"])
        return handler(args)

    def _ok(self, args, stdout=()):
        return CommandResult(['tmux'] + args, 0, list(stdout), [])

    def _missing(self, args, target):
        return CommandResult(['tmux'] + args, 1, [], [f"can't find pane: {target}"])

    def _target(self, args):
        return args[args.index('-t') + 1]

    def _new_window(self, args):
        pane_id = f"%{self._next_pane}"
        window_id = f"@{self._next_window}"
        self._next_pane += 1
        self._next_window += 1
        self.panes[pane_id] = window_id
        if '-n' in args:
            self.window_names[window_id] = args[args.index('-n') + 1]
        return self._ok(args, [f"{pane_id}:{window_id}"])

    def _rename_window(self, args):
        self.window_names[self._target(args)] = args[-1]
        return self._ok(args)

    def _has_session(self, args):
        target = self._target(args)
        if target in self.panes:
            return self._ok(args)
        return self._missing(args, target)

    def _set_option(self, args):
        target = self._target(args)
        if target not in self.panes:
            return self._missing(args, target)
        self.pane_options.setdefault(target, {})[args[-2]] = args[-1]
        return self._ok(args)

    def _list_panes(self, args):
        if '-a' in args:
            match = OPTION_FILTER_RE.match(args[args.index('-f') + 1])
            name, value = match.groups()
            return self._ok(args, [
                pane_id for pane_id in self.panes
                if self.pane_options.get(pane_id, {}).get(name) == value
            ])
        match = FILTER_RE.match(args[args.index('-f') + 1])
        pane_id = match.group(1) if match else None
        if pane_id in self.panes:
            return self._ok(args, [f"main:{self.panes[pane_id]}.{pane_id}"])
        return self._ok(args)

    def _switch_client(self, args):
        self.focused = self._target(args)
        return self._ok(args)

    def _send_keys(self, args):
        target = self._target(args)
        if target not in self.panes:
            return self._missing(args, target)
        self.sent.append((target, args[-1]))
        return self._ok(args)

    def _kill_pane(self, args):
        target = self._target(args)
        if target not in self.panes:
            return self._missing(args, target)
        del self.panes[target]
        return self._ok(args)

    _kill_window = _kill_pane


@pytest.fixture
def tmux():
    return FakeTmux()


@pytest.fixture
def make_session(tmux):
    """Build a TerminalSession on the fake tmux"""

    def _make(cmds=None, options=None, on_change=None, **settings):
        commands = CommandSlots(
            TermConfig(cmds=dict(cmds or {})),
            on_change=on_change,
            save_on_change=settings.get('save_on_change', True),
        )
        return TerminalSession(
            commands=commands,
            options=options or TmuxOptions(),
            settings=GlobalSettings(**settings),
            tmux=tmux,
        )

    return _make
