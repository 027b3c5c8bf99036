"""Per-document viewer settings.

Settings are keyed by the absolute path of the document and stored as JSON
in the user's config directory, so a reopened document comes back at the
same scroll position and width.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import RendererConstants

logger = logging.getLogger(__name__)


class SettingsPersistence:
    """Reads and writes the per-document settings file."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else Path(platformdirs.user_config_dir("markgrid"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load the whole settings file; {} if missing or unreadable."""
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._settings_cache = {}
            return self._settings_cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Write the settings file via temp file + rename."""
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix('.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._settings_cache = settings
        return True

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Settings for one document, with invalid values dropped.

        Returns an empty dict when document_path is None or nothing is stored.
        """
        if document_path is None:
            return {}

        abs_path = os.path.abspath(document_path)
        doc_settings = self._load_all_settings().get(abs_path, {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {abs_path} are not a dict, ignoring")
            return {}

        valid = {}
        for key, value in doc_settings.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r} for {abs_path}")
        return valid

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Replace the stored settings for one document.

        Returns True if the file was written.
        """
        if document_path is None:
            return False

        abs_path = os.path.abspath(document_path)
        all_settings = dict(self._load_all_settings())
        all_settings[abs_path] = settings
        return self._save_all_settings(all_settings)

    def update_settings(self, document_path: Optional[str], **changes: Any) -> bool:
        """Merge changes into the stored settings for one document."""
        if document_path is None:
            return False
        settings = self.load_settings(document_path)
        settings.update(changes)
        return self.save_settings(document_path, settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        if value is None:
            return True  # Not set

        if key == 'read_only':
            return isinstance(value, bool)

        # bool is an int subclass; reject it for the integer settings
        if key == 'scroll_offset':
            return isinstance(value, int) and not isinstance(value, bool) and value >= 0

        if key == 'width':
            if not isinstance(value, int) or isinstance(value, bool):
                return False
            return RendererConstants.MIN_WIDTH <= value <= RendererConstants.MAX_WIDTH

        # Unknown settings are kept for forward compatibility
        return True

    def clear_cache(self) -> None:
        self._settings_cache = None

