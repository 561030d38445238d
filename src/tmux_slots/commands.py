"""Command slot management

Operates in place on the `cmds` table of a TermConfig. The table is owned by
the persistence layer; changes are reported through `on_change` when
save_on_change is enabled.
"""

import logging
from collections.abc import Mapping
from typing import Callable, Optional

from .models import TermConfig

logger = logging.getLogger(__name__)


class CommandSlots:
    """Slot -> command table operations

    The table may be sparse, so its length is the highest slot present
    rather than the number of entries.
    """

    def __init__(
        self,
        term_config: Optional[TermConfig] = None,
        on_change: Optional[Callable[[], None]] = None,
        save_on_change: bool = True,
    ):
        self.term_config = term_config if term_config is not None else TermConfig()
        self.on_change = on_change
        self.save_on_change = save_on_change

    @property
    def cmds(self) -> dict[int, str]:
        return self.term_config.cmds

    def get_length(self) -> int:
        """Highest slot present, 0 for an empty table"""
        return max(self.cmds, default=0)

    def is_valid_index(self, idx) -> bool:
        if idx is None or isinstance(idx, bool) or not isinstance(idx, int):
            return False
        return 0 < idx <= self.get_length()

    def first_empty_slot(self) -> int:
        """Lowest slot holding an empty command, else one past the end"""
        for idx in sorted(self.cmds):
            if self.cmds[idx] == "":
                return idx
        return self.get_length() + 1

    def get_command(self, idx: int) -> Optional[str]:
        return self.cmds.get(idx)

    def emit_changed(self) -> None:
        logger.debug("[cmds] emit changed")
        if self.save_on_change and self.on_change is not None:
            self.on_change()

    def add_command(self, cmd: str) -> int:
        """Store a command in the first free slot

        Returns:
            The slot the command was written to
        """
        idx = self.first_empty_slot()
        self.cmds[idx] = cmd
        logger.info(f"[cmds] add slot {idx}: {cmd}")
        self.emit_changed()
        return idx

    def remove_command(self, idx) -> None:
        """Remove a command and shift every later slot down by one"""
        if not self.is_valid_index(idx):
            logger.debug(f"[cmds] remove: no cmd exists for index {idx}")
            return

        shifted = {}
        for key, value in self.cmds.items():
            if key < idx:
                shifted[key] = value
            elif key > idx:
                shifted[key - 1] = value
        self.cmds.clear()
        self.cmds.update(shifted)
        logger.info(f"[cmds] removed slot {idx}")
        self.emit_changed()

    def replace_command_list(self, new_list) -> None:
        """Replace the whole table

        Args:
            new_list: Mapping of slot -> command, or a sequence whose first
                item goes to slot 1
        """
        if isinstance(new_list, Mapping):
            entries = {int(k): v for k, v in new_list.items()}
        else:
            entries = {i: v for i, v in enumerate(new_list, start=1)}

        logger.debug(f"[cmds] set cmd list: {entries}")
        self.cmds.clear()
        self.cmds.update(entries)
        self.emit_changed()
