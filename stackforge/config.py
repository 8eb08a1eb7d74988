"""stackforge configuration.

Typed, environment-aware settings for the CLI.  Settings use a Pydantic v2
model so they are validated at construction time.  Values come from, in
increasing priority: the model defaults, the ``editor`` and ``author`` keys
of ``<home>/config.json`` (written by ``stackforge config set``), and the
``STACKFORGE_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from stackforge.utils import load_json

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".stackforge"

# config.json key -> AppSettings field
CONFIG_KEYS = {
    "editor": "editor_command",
    "author": "git_author",
}

# environment variable -> AppSettings field
ENV_VARS = {
    "STACKFORGE_EDITOR": "editor_command",
    "STACKFORGE_GIT_AUTHOR": "git_author",
}


class AppSettings(BaseModel):
    """Global stackforge settings.

    Instances are created once by the CLI entry point (normally through
    :meth:`from_env`) and passed to every command.
    """

    home: Path = Field(default=DEFAULT_HOME, description="Directory holding config.json and profiles/")
    editor_command: str = Field(default="code", description="Executable used to open new projects")
    git_author: str = Field(default="", description="Copyright holder written into LICENSE files")
    verbose: bool = False

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def config_path(self) -> Path:
        """Path to the persisted ``config.json`` (default profile + free-form keys)."""
        return self.home / "config.json"

    @property
    def profiles_dir(self) -> Path:
        """Directory that stores one ``<name>.json`` file per profile."""
        return self.home / "profiles"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build ``AppSettings`` from ``config.json`` and environment variables.

        Recognised variables (all optional):
            STACKFORGE_HOME, STACKFORGE_EDITOR, STACKFORGE_GIT_AUTHOR.

        An unreadable ``config.json`` is logged and ignored here; the
        ``config`` command reports it properly.
        """
        home = DEFAULT_HOME
        if os.environ.get("STACKFORGE_HOME"):
            home = Path(os.environ["STACKFORGE_HOME"]).expanduser()
        kwargs: dict[str, object] = {"home": home}

        config_path = home / "config.json"
        if config_path.exists():
            try:
                stored = load_json(config_path)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Ignoring unreadable %s: %s", config_path, exc)
                stored = {}
            for key, field in CONFIG_KEYS.items():
                if isinstance(stored.get(key), str) and stored[key]:
                    kwargs[field] = stored[key]

        for var, field in ENV_VARS.items():
            if os.environ.get(var):
                kwargs[field] = os.environ[var]
        return cls(**kwargs)
