"""Main scaffolding orchestrator.

Takes a resolved ``ProjectOptions`` and lays out a new project directory:
skeleton directories, ignore file, LICENSE, README, dependency manifest,
entry point, toolchain configs, linter configs and VCS hook configs.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from stackforge.utils import write_text_atomic

from .configs import hook_configs, linter_configs, toolchain_configs
from .entrypoints import synthesize_entry_point
from .ignore import render_ignore_file
from .licenses import render_license
from .manifest import get_rule, synthesize_manifest
from .options import ProjectOptions
from .readme import render_readme
from .templates import TemplateRenderer, get_renderer

logger = logging.getLogger(__name__)

BASE_DIRECTORIES = ("src", "tests", "docs")
LANGUAGE_DIRECTORIES: dict[str, tuple[str, ...]] = {
    "python": ("src/utils", "requirements"),
}


class GenerationError(Exception):
    """Raised when a project file or directory cannot be written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ProjectGenerator:
    """Build and write the Artifact Set for one ``ProjectOptions``.

    :meth:`build_artifacts` is pure and returns ``{relative_path: content}``
    in write order; :meth:`generate` creates the directories and writes every
    file atomically.  Steps run sequentially and the first failure aborts
    the run; files written before it stay on disk.
    """

    def __init__(
        self,
        options: ProjectOptions,
        renderer: TemplateRenderer | None = None,
        *,
        license_holder: str | None = None,
    ) -> None:
        self.options = options
        self.renderer = renderer or get_renderer()
        self.license_holder = license_holder

    # -- Public API --------------------------------------------------------

    def directories(self) -> list[str]:
        """Return the directories to create, base layout first."""
        opts = self.options
        dirs = list(BASE_DIRECTORIES)
        dirs += get_rule(opts.language, opts.framework).directories
        dirs += LANGUAGE_DIRECTORIES.get(opts.language, ())
        # de-duplicate, keep order
        return list(dict.fromkeys(dirs))

    def build_artifacts(self) -> dict[str, str]:
        opts = self.options
        files: dict[str, str] = {}

        if opts.include_ignore_file:
            files[".gitignore"] = render_ignore_file(opts.language)

        if opts.license != "none":
            files["LICENSE"] = render_license(
                opts.license, holder=self.license_holder, renderer=self.renderer
            )

        files["README.md"] = render_readme(opts, self.renderer)

        manifest = synthesize_manifest(
            opts.language,
            opts.framework,
            opts.linters,
            opts.name,
            description=opts.description,
            license_id=opts.license,
            package_manager=opts.package_manager,
        )
        files.update(manifest.render(self.renderer))

        entry = synthesize_entry_point(opts.language, opts.framework, opts.name, self.renderer)
        if entry is None:
            logger.warning(
                "No entry-point template for %s/%s; skipping entry file",
                opts.language,
                opts.framework,
            )
        else:
            files[entry.path] = entry.content

        files.update(toolchain_configs(opts, self.renderer))
        files.update(linter_configs(opts))
        files.update(hook_configs(opts))
        return files

    async def generate(self, target_dir: str | Path) -> Path:
        """Write the project into *target_dir* (created if missing).

        Returns:
            The project root path.

        Raises:
            GenerationError: if any directory or file cannot be written.
        """
        root = Path(target_dir)
        artifacts = self.build_artifacts()

        for rel in self.directories():
            path = root / rel
            try:
                await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            except OSError as exc:
                raise GenerationError(f"Could not create directory {path}: {exc}", path) from exc

        for rel, content in artifacts.items():
            path = root / rel
            logger.debug("Writing %s", path)
            try:
                await asyncio.to_thread(write_text_atomic, path, content)
            except OSError as exc:
                raise GenerationError(f"Could not write {path}: {exc}", path) from exc

        logger.info("Generated %d files in %s", len(artifacts), root)
        return root
