"""The resolved option set that drives one scaffolding run."""

from __future__ import annotations

import logging
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stackforge import catalog

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

ReadmeStyle = Literal["standard", "minimal", "expanded"]


def sanitize_package_name(name: str) -> str:
    """Lowercase *name* and replace anything outside ``[a-z0-9-]`` with hyphens.

    This is the identifier embedded in generated manifests (``package.json``
    name, ``go.mod`` module, ``Cargo.toml`` package); the project directory
    keeps the user's original casing.

    Examples::

        sanitize_package_name("My_App") -> "my-app"
        sanitize_package_name("api2") -> "api2"
    """
    return re.sub(r"[^a-z0-9-]", "-", name.lower())


class ProjectOptions(BaseModel):
    """Pydantic model describing the project to scaffold.

    Instances are immutable once validated.  Every generator receives a fully
    resolved ``ProjectOptions`` and never consults profiles or settings on its
    own.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Project (and directory) name")
    language: str = Field(default="typescript")
    framework: str = Field(default="none")
    license: str = Field(default="mit")
    package_manager: str | None = Field(
        default=None,
        description="Defaults to the first package manager registered for the language",
    )
    readme_style: ReadmeStyle = Field(default="standard")
    description: str = Field(default="")
    include_ignore_file: bool = True
    linters: tuple[str, ...] = ()
    setup_vcs_hooks: bool = False
    init_vcs: bool = True
    create_remote_repo: bool = False
    install_dependencies: bool = False
    open_editor: bool = False

    # -- Field validators --------------------------------------------------

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not NAME_PATTERN.match(value):
            raise ValueError(
                "Project name can only contain letters, numbers, hyphens, and underscores"
            )
        return value

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        if catalog.get_language(value) is None:
            raise ValueError(
                f"Unsupported language '{value}'. Choose one of: "
                + ", ".join(catalog.language_ids())
            )
        return value

    @field_validator("license")
    @classmethod
    def _check_license(cls, value: str) -> str:
        if catalog.get_license(value) is None:
            raise ValueError(
                f"Unknown license '{value}'. Choose one of: "
                + ", ".join(catalog.license_ids())
            )
        return value

    @field_validator("readme_style", mode="before")
    @classmethod
    def _normalize_readme_style(cls, value: Any) -> Any:
        # Profiles written by older releases store the expanded style as "ai".
        if value == "ai":
            return "expanded"
        return value

    @field_validator("linters", mode="before")
    @classmethod
    def _normalize_linters(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        unknown = [linter for linter in value if linter not in catalog.LINTERS]
        if unknown:
            raise ValueError(f"Unknown linter(s): {', '.join(unknown)}")
        # Preserve catalog order and drop duplicates.
        return tuple(linter for linter in catalog.LINTERS if linter in value)

    # -- Cross-field invariants --------------------------------------------

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        language = data.get("language") or "typescript"
        if not data.get("package_manager"):
            data["package_manager"] = catalog.default_package_manager(language)
        linters = data.get("linters")
        if linters and language not in catalog.NODE_LANGUAGES:
            logger.debug("Dropping linters %s: not applicable to %s", linters, language)
            data["linters"] = ()
        if not data.get("framework"):
            data["framework"] = "none"
        return data

    @model_validator(mode="after")
    def _check_combinations(self) -> "ProjectOptions":
        valid_frameworks = catalog.framework_ids_for(self.language)
        if self.framework not in valid_frameworks:
            raise ValueError(
                f"Framework '{self.framework}' is not available for {self.language}. "
                f"Choose one of: {', '.join(valid_frameworks)}"
            )
        valid_managers = [pm.id for pm in catalog.package_managers_for(self.language)]
        if self.package_manager is not None and self.package_manager not in valid_managers:
            raise ValueError(
                f"Package manager '{self.package_manager}' is not available for "
                f"{self.language}. Choose one of: {', '.join(valid_managers) or 'none'}"
            )
        if self.create_remote_repo and not self.init_vcs:
            raise ValueError("Creating a remote repository requires initializing git")
        return self

    # -- Derived values ----------------------------------------------------

    @property
    def sanitized_name(self) -> str:
        """Manifest-safe project identifier (see :func:`sanitize_package_name`)."""
        return sanitize_package_name(self.name)

    @property
    def is_node(self) -> bool:
        return self.language in catalog.NODE_LANGUAGES

    @property
    def has_framework(self) -> bool:
        return self.framework != "none"
