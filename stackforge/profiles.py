"""Persistent profile store.

Layout under the stackforge home directory::

    config.json            {"defaultProfile": "<name>", ...free-form keys}
    profiles/<name>.json   partial ProjectOptions, one file per profile

A profile is any subset of the :class:`~stackforge.scaffolder.options.ProjectOptions`
fields.  Keys written by older releases (``packageManager``, ``git``,
``installDeps``, ``readme``, ...) are translated on read.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from stackforge.config import AppSettings
from stackforge.utils import load_json, save_json

logger = logging.getLogger(__name__)

PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
DEFAULT_PROFILE_KEY = "defaultProfile"

LEGACY_KEYS: dict[str, str] = {
    "packageManager": "package_manager",
    "git": "init_vcs",
    "installDeps": "install_dependencies",
    "readme": "readme_style",
    "gitignore": "include_ignore_file",
    "gitHooks": "setup_vcs_hooks",
    "createRepo": "create_remote_repo",
    "openInVSCode": "open_editor",
}


class ProfileError(Exception):
    """Raised for invalid profile names or unreadable profile data."""


class ProfileNotFoundError(ProfileError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Profile "{name}" not found')


def normalize_profile(data: dict[str, Any]) -> dict[str, Any]:
    """Translate legacy camelCase keys to option field names."""
    return {LEGACY_KEYS.get(key, key): value for key, value in data.items()}


def validate_profile_name(name: str) -> str:
    if not name or not PROFILE_NAME_PATTERN.match(name):
        raise ProfileError(
            "Profile name can only contain letters, numbers, hyphens, and underscores"
        )
    return name


class ProfileStore:
    """Reads and writes profiles and the global ``config.json``."""

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings

    @property
    def profiles_dir(self) -> Path:
        return self.settings.profiles_dir

    def _profile_path(self, name: str) -> Path:
        return self.profiles_dir / f"{validate_profile_name(name)}.json"

    # -- Global config -----------------------------------------------------

    def get_config(self) -> dict[str, Any]:
        path = self.settings.config_path
        if not path.exists():
            return {}
        try:
            return load_json(path)
        except json.JSONDecodeError as exc:
            raise ProfileError(f"{path} is not valid JSON: {exc}") from exc

    def save_config(self, config: dict[str, Any]) -> None:
        save_json(config, self.settings.config_path)

    def get_value(self, key: str) -> Any:
        """Return a ``config.json`` value, or ``None`` if the key is absent."""
        return self.get_config().get(key)

    def set_value(self, key: str, value: Any) -> None:
        config = self.get_config()
        config[key] = value
        self.save_config(config)

    def get_default_profile(self) -> str | None:
        return self.get_config().get(DEFAULT_PROFILE_KEY)

    def set_default_profile(self, name: str) -> None:
        """Point ``defaultProfile`` at an existing profile."""
        if not self.exists(name):
            raise ProfileNotFoundError(name)
        self.set_value(DEFAULT_PROFILE_KEY, name)

    def clear_default_profile(self) -> None:
        config = self.get_config()
        if config.pop(DEFAULT_PROFILE_KEY, None) is not None:
            self.save_config(config)

    # -- Profiles ----------------------------------------------------------

    def list_names(self) -> list[str]:
        if not self.profiles_dir.is_dir():
            return []
        return sorted(p.stem for p in self.profiles_dir.glob("*.json"))

    def exists(self, name: str) -> bool:
        return self._profile_path(name).is_file()

    def load(self, name: str) -> dict[str, Any]:
        path = self._profile_path(name)
        if not path.is_file():
            raise ProfileNotFoundError(name)
        try:
            data = load_json(path)
        except json.JSONDecodeError as exc:
            raise ProfileError(f'Profile "{name}" is not valid JSON: {exc}') from exc
        return normalize_profile(data)

    def save(self, name: str, data: dict[str, Any]) -> Path:
        path = self._profile_path(name)
        logger.debug("Saving profile %s to %s", name, path)
        return save_json(normalize_profile(data), path)

    def delete(self, name: str) -> None:
        """Remove a profile, clearing ``defaultProfile`` if it pointed here."""
        path = self._profile_path(name)
        if not path.is_file():
            raise ProfileNotFoundError(name)
        path.unlink()
        if self.get_default_profile() == name:
            self.clear_default_profile()

    def export(self, name: str) -> str:
        """Return the profile as pretty-printed JSON text."""
        return json.dumps(self.load(name), indent=2)

    def import_(self, name: str, text: str) -> Path:
        """Store *text* (a JSON object) as profile *name*."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProfileError("Invalid JSON format") from exc
        if not isinstance(data, dict):
            raise ProfileError("Profile JSON must be an object")
        return self.save(name, data)
