"""README synthesis.

Three styles share one context: ``minimal`` (title, one-line description,
quick start), ``standard`` (badges, install/usage/testing sections, project
tree) and ``expanded`` (standard plus prerequisites and architecture notes).
Every lookup below has a default, so unknown languages or package managers
degrade to generic text instead of failing.
"""

from __future__ import annotations

from typing import Any

from stackforge import catalog

from .manifest import TEST_PLACEHOLDER, resolve_entry_path, synthesize_manifest
from .options import ProjectOptions
from .templates import TemplateRenderer, get_renderer

SHIELDS_URL = "https://img.shields.io/badge"

LANGUAGE_COLORS: dict[str, str] = {
    "javascript": "F7DF1E",
    "typescript": "3178C6",
    "python": "3776AB",
    "go": "00ADD8",
    "rust": "000000",
    "ruby": "CC342D",
    "php": "777BB4",
    "csharp": "239120",
}

PREREQUISITES: dict[str, str] = {
    "javascript": "Node.js (v16 or higher)",
    "typescript": "Node.js (v16 or higher)",
    "python": "Python 3.8+",
    "go": "Go 1.19+",
    "rust": "Rust 1.70+",
    "ruby": "Ruby 3.0+",
    "php": "PHP 8.0+",
    "csharp": ".NET 6.0+",
}

CONFIG_FILES: dict[str, str] = {
    "javascript": "package.json",
    "typescript": "package.json",
    "python": "pyproject.toml",
    "go": "go.mod",
    "rust": "Cargo.toml",
    "ruby": "Gemfile",
    "php": "composer.json",
}

_NODE_INSTALL = {"npm": "npm install", "yarn": "yarn", "pnpm": "pnpm install"}
_INSTALL = {
    "pip": "pip install -r requirements.txt",
    "poetry": "poetry install",
    "go": "go mod download",
    "cargo": "cargo build",
    "bundler": "bundle install",
    "composer": "composer install",
    "nuget": "dotnet restore",
}


def badges(options: ProjectOptions) -> list[str]:
    """Shield badges for language, framework (when set), license and build status."""
    style = "style=for-the-badge"
    language = options.language
    color = LANGUAGE_COLORS.get(language, "000000")
    result = [
        f"![{language}]({SHIELDS_URL}/{language}-{color}?{style}&logo={language}&logoColor=white)"
    ]
    if options.has_framework:
        fw = options.framework
        result.append(f"![{fw}]({SHIELDS_URL}/{fw}-000000?{style}&logo={fw}&logoColor=white)")
    result.append(f"![License]({SHIELDS_URL}/license-{options.license}-blue?{style})")
    result.append(f"![Build Status]({SHIELDS_URL}/build-passing-brightgreen?{style})")
    return result


def install_command(language: str, package_manager: str | None) -> str:
    if language in catalog.NODE_LANGUAGES:
        return _NODE_INSTALL.get(package_manager or "npm", "npm install")
    return _INSTALL.get(package_manager or "", "# See documentation for installation instructions")


def run_commands(options: ProjectOptions) -> list[tuple[str, str]]:
    """Return ``(label, command)`` pairs for the usage section."""
    scripts = synthesize_manifest(options.language, options.framework, options.linters, options.name).scripts
    if options.is_node:
        pm = options.package_manager or "npm"
        runner = "npm run" if pm == "npm" else pm
        labels = (("dev", "Development mode"), ("build", "Production build"), ("start", "Start the application"))
        return [(label, f"{runner} {script}") for script, label in labels if script in scripts]
    labels = (("start", "Run the application"), ("dev", "Development mode"), ("build", "Build"))
    pairs = [(label, scripts[script]) for script, label in labels if script in scripts]
    return pairs or [("Run the application", "# See documentation for usage instructions")]


def test_command(options: ProjectOptions) -> str:
    if options.is_node:
        pm = options.package_manager or "npm"
        return f"{pm} test"
    scripts = synthesize_manifest(options.language, options.framework, (), options.name).scripts
    command = scripts.get("test")
    if not command or command == TEST_PLACEHOLDER:
        return "# Run tests"
    return command


def config_file(language: str) -> str:
    return CONFIG_FILES.get(language, "config")


def prerequisites(language: str) -> str:
    return PREREQUISITES.get(language, "Required runtime")


def structure_tree(options: ProjectOptions) -> str:
    """Render the ``Project Structure`` block as a plain-text tree."""
    lines = [f"{options.name}/"]
    entry = resolve_entry_path(options.language, options.framework)
    if entry and entry.startswith("src/"):
        lines.append("├── src/              # Source code")
        lines.append(f"│   ├── {entry[len('src/'):]:<14}# Entry point")
        lines.append("│   └── ...")
    else:
        lines.append("├── src/              # Source code")
        if entry:
            lines.append(f"├── {entry:<18}# Entry point")
    lines.append("├── tests/            # Test files")
    lines.append("├── docs/             # Documentation")
    lines.append("├── README.md         # Project documentation")
    if options.license != "none":
        lines.append(f"├── LICENSE           # {options.license.upper()} license")
    lines.append(f"└── {config_file(options.language)}")
    return "\n".join(lines)


def build_context(options: ProjectOptions) -> dict[str, Any]:
    subject = options.framework if options.has_framework else options.language
    lic = catalog.get_license(options.license)
    return {
        "name": options.name,
        "description": options.description or f"A {subject} project scaffolded with stackforge.",
        "subject": subject,
        "language": options.language,
        "language_name": catalog.display_name(options.language),
        "framework_name": catalog.framework_display_name(options.framework) if options.has_framework else "",
        "badges": " ".join(badges(options)),
        "install_command": install_command(options.language, options.package_manager),
        "is_python": options.language == "python",
        "run_commands": run_commands(options),
        "test_command": test_command(options),
        "config_file": config_file(options.language),
        "prerequisites": prerequisites(options.language),
        "structure": structure_tree(options),
        "has_license": options.license != "none",
        "license_name": lic.name if lic else options.license,
        "quick_install": "npm install" if options.is_node else "# See documentation",
        "quick_run": "npm start" if options.is_node else "# See documentation",
    }


def render_readme(options: ProjectOptions, renderer: TemplateRenderer | None = None) -> str:
    renderer = renderer or get_renderer()
    return renderer.render(f"readme/{options.readme_style}.md.j2", build_context(options))
