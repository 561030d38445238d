"""Configuration management"""

import yaml
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .models import TmuxOptions
from .tmux_control import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# Default config file path
DEFAULT_CONFIG_PATH = Path.home() / '.config' / 'tmux-slots' / 'config.yaml'


@dataclass
class GlobalSettings:
    """Global behaviour switches"""
    save_on_change: bool = True            # persist the command table on every change
    enter_on_sendcmd: bool = False         # append a newline to sent commands
    tmux_autoclose_windows: bool = False   # kill all windows when the process exits


@dataclass
class TmuxConfig:
    """tmux settings

    Attributes:
        window_name: Static name for new windows (None keeps tmux's default)
        kill_command: kill-pane or kill-window
        timeout: Seconds to wait for any tmux command
    """
    window_name: Optional[str] = None
    kill_command: str = "kill-pane"
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class Config:
    """Main config"""
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    tmux: TmuxConfig = field(default_factory=TmuxConfig)

    def tmux_options(self) -> TmuxOptions:
        return TmuxOptions(
            window_name=self.tmux.window_name,
            kill_command=self.tmux.kill_command,
        )


def load_config(config_path: Path = None) -> Config:
    """Load the config file

    Args:
        config_path: Config file path, defaults to ~/.config/tmux-slots/config.yaml

    Returns:
        Config object; defaults are used for anything missing or unreadable
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = Config()

    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            if 'global_settings' in data:
                settings_data = data['global_settings'] or {}
                config.global_settings = GlobalSettings(
                    save_on_change=settings_data.get('save_on_change', True),
                    enter_on_sendcmd=settings_data.get('enter_on_sendcmd', False),
                    tmux_autoclose_windows=settings_data.get('tmux_autoclose_windows', False),
                )

            if 'tmux' in data:
                tmux_data = data['tmux'] or {}
                window_name = tmux_data.get('window_name')
                config.tmux = TmuxConfig(
                    window_name=None if window_name is None else str(window_name),
                    kill_command=tmux_data.get('kill_command', 'kill-pane'),
                    timeout=float(tmux_data.get('timeout', DEFAULT_TIMEOUT)),
                )

            logger.info(f"[config] loaded: {path}")
        except Exception as e:
            logger.warning(f"[config] failed to load, using defaults: {e}")
            config = Config()
    else:
        logger.info(f"[config] no config file, using defaults: {path}")

    return config


def save_default_config(config_path: Path = None) -> None:
    """Write an example config file

    Args:
        config_path: Config file path
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    default_yaml = """# tmux-slots config

global_settings:
  save_on_change: true            # save the command table after each change
  enter_on_sendcmd: false         # append a newline to every sent command
  tmux_autoclose_windows: false   # kill created windows when the process exits

tmux:
  window_name: null               # static name for new windows
  kill_command: kill-pane         # or kill-window
  timeout: 5.0                    # seconds to wait for a tmux command
"""

    with open(path, 'w', encoding='utf-8') as f:
        f.write(default_yaml)

    logger.info(f"[config] wrote default config: {path}")


# Global config instance
_config: Config = None


def get_config() -> Config:
    """Get the global config (lazy)"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload the config"""
    global _config
    _config = load_config()
    return _config
