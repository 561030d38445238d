"""Data storage"""

import json
import logging
from pathlib import Path
from typing import Optional

from .models import TermConfig

logger = logging.getLogger(__name__)


class DataStore:
    """Per-project command table storage

    Stores every project's TermConfig in one JSON file keyed by project
    directory.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize the store

        Args:
            data_dir: Data directory, defaults to ~/.local/share/tmux-slots/data
        """
        if data_dir is None:
            data_dir = Path.home() / '.local' / 'share' / 'tmux-slots' / 'data'

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.projects_file = self.data_dir / 'projects.json'

    def _load(self) -> dict:
        if not self.projects_file.exists():
            return {}

        try:
            with open(self.projects_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            logger.warning(f"[store] unreadable {self.projects_file}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        with open(self.projects_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    # ==================== Projects ====================

    def list_projects(self) -> list[str]:
        """List every project with a stored config"""
        return sorted(self._load())

    def load_term_config(self, project: str) -> TermConfig:
        """Load a project's command table (empty if none is stored)"""
        project_data = self._load().get(project) or {}
        try:
            return TermConfig.from_dict(project_data.get('term') or {})
        except (ValueError, AttributeError) as e:
            logger.warning(f"[store] bad term config for {project}: {e}")
            return TermConfig()

    def save_term_config(self, project: str, term_config: TermConfig) -> None:
        """Save a project's command table"""
        data = self._load()
        data.setdefault(project, {})['term'] = term_config.to_dict()
        self._save(data)
        logger.debug(f"[store] saved {len(term_config.cmds)} cmds for {project}")

    def delete_project(self, project: str) -> bool:
        """Delete a project's stored config"""
        data = self._load()
        if project not in data:
            return False
        del data[project]
        self._save(data)
        return True
