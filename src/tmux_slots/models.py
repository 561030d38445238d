"""Data models"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

# (slot, bare pane id, window id) -> window name
WindowNameFunc = Callable[[object, str, str], str]


@dataclass
class TermConfig:
    """Per-project terminal configuration

    `cmds` maps slot -> shell command. The mapping may be sparse; an empty
    string marks a free slot.
    """
    cmds: dict[int, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'cmds': {str(k): v for k, v in sorted(self.cmds.items())},
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TermConfig':
        cmds = {}
        for key, value in (data.get('cmds') or {}).items():
            # JSON object keys are always strings
            cmds[int(key)] = value
        return cls(cmds=cmds)


@dataclass(frozen=True)
class TmuxOptions:
    """Window creation options, fixed for the lifetime of a session

    Attributes:
        window_name: Static name passed to new-window -n, or a callable
            (slot, pane_id, window_id) -> name applied with rename-window
        kill_command: tmux command used to destroy a window
    """
    window_name: Optional[Union[str, WindowNameFunc]] = None
    kill_command: str = "kill-pane"
