# asf_core/config.py
# -*- coding: utf-8 -*-
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class AppConfig:
    def __init__(self, settings_path=None):
        self.settings_path = Path(settings_path) if settings_path else None
        self.defaults = {
            # --- Sampling ---
            'frame_rate': 30.0,
            'frame_workers': 4,

            # --- Input ---
            'default_encoding': '',  # empty = auto-detect

            # --- Logging ---
            'log_level': 'INFO',
            'log_file': '',
        }
        self.settings = {}
        self.load()

    def load(self):
        if self.settings_path is None:
            self.settings = self.defaults.copy()
            return

        changed = False
        if self.settings_path.exists():
            try:
                with open(self.settings_path, 'r', encoding='utf-8') as f:
                    loaded_settings = json.load(f)
                if not isinstance(loaded_settings, dict):
                    raise ValueError("settings root must be an object")

                for key, default_value in self.defaults.items():
                    if key not in loaded_settings:
                        loaded_settings[key] = default_value
                        changed = True
                self.settings = loaded_settings
            except (json.JSONDecodeError, ValueError, IOError) as e:
                logger.warning("Ignoring unreadable settings %s: %s", self.settings_path, e)
                self.settings = self.defaults.copy()
                changed = True
        else:
            self.settings = self.defaults.copy()
            changed = True

        if changed:
            self.save()

    def save(self):
        if self.settings_path is None:
            return
        try:
            keys_to_save = self.defaults.keys()
            settings_to_save = {k: self.settings.get(k) for k in keys_to_save if k in self.settings}
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(settings_to_save, f, indent=4)
        except IOError as e:
            logger.error("Error saving settings: %s", e)

    def get(self, key: str, default: any = None) -> any:
        return self.settings.get(key, default)

    def set(self, key: str, value: any):
        self.settings[key] = value

    @property
    def frame_rate(self) -> float:
        try:
            rate = float(self.get('frame_rate', 30.0))
        except (TypeError, ValueError):
            return 30.0
        return rate if rate > 0 else 30.0

    @property
    def frame_workers(self) -> int:
        try:
            return max(1, int(self.get('frame_workers', 4)))
        except (TypeError, ValueError):
            return 4
