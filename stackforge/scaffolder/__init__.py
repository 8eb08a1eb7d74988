"""stackforge scaffolder -- synthesizes the files of a new project.

Each synthesizer is a pure function of the resolved options; the
``ProjectGenerator`` orders their output into an Artifact Set and writes it.

Quick usage::

    from stackforge.scaffolder import ProjectGenerator, ProjectOptions

    options = ProjectOptions(name="my-api", language="python", framework="fastapi")
    generator = ProjectGenerator(options)
    project_path = await generator.generate("/tmp/my-api")
"""

from stackforge.scaffolder.entrypoints import EntryPoint, synthesize_entry_point
from stackforge.scaffolder.generator import GenerationError, ProjectGenerator
from stackforge.scaffolder.ignore import ignore_patterns, render_ignore_file
from stackforge.scaffolder.licenses import render_license
from stackforge.scaffolder.manifest import FrameworkRule, Manifest, synthesize_manifest
from stackforge.scaffolder.options import ProjectOptions
from stackforge.scaffolder.readme import render_readme
from stackforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "EntryPoint",
    "FrameworkRule",
    "GenerationError",
    "Manifest",
    "ProjectGenerator",
    "ProjectOptions",
    "TemplateRenderer",
    "ignore_patterns",
    "render_ignore_file",
    "render_license",
    "render_readme",
    "synthesize_entry_point",
    "synthesize_manifest",
]
