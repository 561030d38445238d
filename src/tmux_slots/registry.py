"""Slot -> window registry

Windows are created lazily: the first lookup of a slot spawns a tmux
window, later lookups reuse it for as long as the pane is alive.
"""

import logging
import threading
from typing import Iterator, Optional

from .errors import TeardownError, TmuxSlotsError
from .models import TmuxOptions
from .tmux_control import TmuxController
from .window import WindowHandle, create_window, find_tagged_window, tag_window

logger = logging.getLogger(__name__)


def _check_slot(slot) -> None:
    if isinstance(slot, bool) or not isinstance(slot, int):
        raise TypeError(f"slot must be an int, got {type(slot).__name__}")
    if slot <= 0:
        raise ValueError(f"slot must be positive, got {slot}")


class WindowRegistry:
    """Registry of window handles keyed by slot

    At most one live handle per slot: creation for a slot is serialized by a
    per-slot lock, so two concurrent lookups of a fresh slot create a single
    window.

    With a tag_namespace, every created pane is tagged with "<namespace>-<slot>"
    and a slot with no live handle first adopts a pane carrying its tag. This
    lets short-lived processes (one CLI call each) share the same windows.
    """

    def __init__(
        self,
        tmux: TmuxController,
        options: Optional[TmuxOptions] = None,
        tag_namespace: Optional[str] = None,
    ):
        self.tmux = tmux
        self.options = options or TmuxOptions()
        self.tag_namespace = tag_namespace
        self._windows: dict[int, WindowHandle] = {}
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, slot) -> bool:
        return slot in self._windows

    def items(self) -> Iterator[tuple[int, WindowHandle]]:
        return iter(list(self._windows.items()))

    def _slot_lock(self, slot: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(slot)
            if lock is None:
                lock = self._locks[slot] = threading.Lock()
            return lock

    def _tag(self, slot: int) -> str:
        return f"{self.tag_namespace}-{slot}"

    def lookup(self, slot: int) -> Optional[WindowHandle]:
        """Return the handle stored for a slot without creating or checking it"""
        return self._windows.get(slot)

    def get_or_create(self, slot: int) -> WindowHandle:
        """Return the live handle for a slot, creating a window if needed

        A stored handle whose pane no longer exists is replaced by a new one.

        Raises:
            CreationError, ParseError: Window creation failed; the registry
                is left unchanged
        """
        _check_slot(slot)
        logger.debug(f"[registry] find terminal for slot {slot}")

        with self._slot_lock(slot):
            handle = self._windows.get(slot)
            if handle is not None and handle.exists():
                return handle

            if handle is not None:
                logger.info(f"[registry] slot {slot}: {handle.window_id} is gone")

            if self.tag_namespace:
                tagged = find_tagged_window(self.tmux, self.options, self._tag(slot))
                if tagged is not None:
                    logger.info(f"[registry] slot {slot}: adopted {tagged.window_id}")
                    self._windows[slot] = tagged
                    return tagged

            handle = create_window(self.tmux, self.options, slot=slot)
            if self.tag_namespace:
                tag_window(handle, self._tag(slot))
            self._windows[slot] = handle
            return handle

    def resolve(self, key) -> WindowHandle:
        """Resolve a slot or a literal pane id to a handle

        Int keys go through get_or_create(). A non-empty string is taken as a
        pane id and wrapped in a handle that is not registered.
        """
        if isinstance(key, str):
            if not key:
                raise ValueError("pane id must not be empty")
            return WindowHandle(window_id=key, tmux=self.tmux, options=self.options)
        return self.get_or_create(key)

    def clear_all(self) -> None:
        """Kill every registered window and empty the registry

        Each entry is removed under its slot lock before the kill is
        attempted, so a concurrent get_or_create either sees the old handle
        or registers a new window that survives the clear. Every handle is
        attempted even if some fail.

        Raises:
            TeardownError: One or more windows could not be killed; `errors`
                lists each failure
        """
        slots = sorted(self._windows)
        logger.debug(f"[registry] clearing {len(slots)} tmux windows")
        failures = []
        for slot in slots:
            with self._slot_lock(slot):
                handle = self._windows.pop(slot, None)
            if handle is None:
                continue
            try:
                handle.kill()
            except TmuxSlotsError as e:
                logger.warning(f"[registry] slot {slot}: {e}")
                failures.append(e)

        if failures:
            raise TeardownError(
                f"Failed to kill {len(failures)} tmux window(s)",
                failures[0].stderr,
                errors=failures,
            )
