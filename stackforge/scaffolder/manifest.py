"""Dependency/build manifest synthesis.

A manifest is assembled in layers, each one able to override the scripts of
the layer before it:

1. the language skeleton (entry point reference, default run scripts),
2. the framework rule selected by exact ``(language, framework)`` match,
3. the linter rules (eslint, prettier), additive and independent,
4. language-global additions (TypeScript toolchain, nodemon, test script).

Framework rules are plain data records.  Unknown frameworks resolve to an
empty rule, which is exactly the ``"none"`` behaviour.  Versions are looked
up through a :class:`~stackforge.scaffolder.versions.VersionSource` so the
output never depends on the network and is byte-identical across runs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from stackforge import catalog

from .options import sanitize_package_name
from .templates import TemplateRenderer, get_renderer
from .versions import DEFAULT_VERSION_SOURCE, Ecosystem, VersionSource

TEST_PLACEHOLDER = 'echo "Error: no test specified" && exit 1'
GO_VERSION = "1.21"
PYTHON_VERSION = "3.9"


# ---------------------------------------------------------------------------
# Rule records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguageSkeleton:
    """Defaults every project in a language starts from."""

    ecosystem: Ecosystem | None
    extension: str
    entry_path: str | None
    main: str | None = None
    scripts: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FrameworkRule:
    """One framework's contribution to the manifest and entry file.

    ``entry_path`` may contain ``{ext}`` which is replaced with the language
    extension (``js`` / ``ts``), so ``"src/main.{ext}x"`` yields ``main.jsx``
    for JavaScript and ``main.tsx`` for TypeScript.
    """

    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()
    typescript_dev_dependencies: tuple[str, ...] = ()
    scripts: dict[str, str] = field(default_factory=dict)
    typescript_scripts: dict[str, str] = field(default_factory=dict)
    main: str | None = None
    module_type: str | None = None
    crate_features: dict[str, tuple[str, ...]] = field(default_factory=dict)
    directories: tuple[str, ...] = ()
    entry_path: str | None = None


EMPTY_RULE = FrameworkRule()

WEB_APP_DIRECTORIES = ("src/components", "src/pages", "src/styles", "public")
API_DIRECTORIES = ("src/routes", "src/controllers", "src/models", "src/middleware")

SKELETONS: dict[str, LanguageSkeleton] = {
    "javascript": LanguageSkeleton(
        ecosystem="npm",
        extension="js",
        entry_path="src/index.js",
        main="src/index.js",
        scripts={"start": "node src/index.js", "dev": "nodemon src/index.js"},
    ),
    "typescript": LanguageSkeleton(
        ecosystem="npm",
        extension="ts",
        entry_path="src/index.ts",
        main="dist/index.js",
        scripts={
            "build": "tsc",
            "dev": "ts-node src/index.ts",
            "start": "node dist/index.js",
            "watch": "tsc -w",
        },
    ),
    "python": LanguageSkeleton(
        ecosystem="pypi",
        extension="py",
        entry_path="src/main.py",
        scripts={"start": "python src/main.py", "test": "pytest"},
    ),
    "go": LanguageSkeleton(
        ecosystem="go",
        extension="go",
        entry_path="main.go",
        scripts={"start": "go run main.go", "build": "go build", "test": "go test ./..."},
    ),
    "rust": LanguageSkeleton(
        ecosystem="crates",
        extension="rs",
        entry_path="src/main.rs",
        scripts={"start": "cargo run", "build": "cargo build --release", "test": "cargo test"},
    ),
    "ruby": LanguageSkeleton(
        ecosystem=None, extension="rb", entry_path="main.rb",
        scripts={"start": "ruby main.rb"},
    ),
    "php": LanguageSkeleton(
        ecosystem=None, extension="php", entry_path="index.php",
        scripts={"start": "php -S localhost:8000 index.php"},
    ),
    "csharp": LanguageSkeleton(
        ecosystem=None, extension="cs", entry_path=None,
        scripts={"start": "dotnet run", "test": "dotnet test"},
    ),
    "java": LanguageSkeleton(
        ecosystem=None, extension="java", entry_path=None,
        scripts={"start": "java src/Main.java"},
    ),
    "kotlin": LanguageSkeleton(
        ecosystem=None, extension="kt", entry_path=None,
        scripts={"start": "kotlinc src/Main.kt -include-runtime -d build/app.jar && java -jar build/app.jar"},
    ),
    "swift": LanguageSkeleton(
        ecosystem=None, extension="swift", entry_path=None,
        scripts={"start": "swift run", "test": "swift test"},
    ),
    "cpp": LanguageSkeleton(
        ecosystem=None, extension="cpp", entry_path=None,
        scripts={"start": "make run"},
    ),
}

_NODE_SERVER_DEV = {"dev": "nodemon src/index.js"}
_NODE_SERVER_DEV_TS = {"dev": "ts-node-dev src/index.ts"}
_VITE_SCRIPTS = {"dev": "vite", "build": "vite build", "preview": "vite preview"}

_NODE_RULES: dict[str, FrameworkRule] = {
    "express": FrameworkRule(
        dependencies=("express", "cors", "dotenv"),
        typescript_dev_dependencies=("@types/express", "@types/cors", "ts-node-dev"),
        scripts=_NODE_SERVER_DEV,
        typescript_scripts=_NODE_SERVER_DEV_TS,
        directories=API_DIRECTORIES,
    ),
    "nestjs": FrameworkRule(
        dependencies=(
            "@nestjs/common", "@nestjs/core", "@nestjs/platform-express",
            "reflect-metadata", "rxjs",
        ),
        dev_dependencies=("@nestjs/cli",),
        scripts={"start": "nest start", "dev": "nest start --watch", "build": "nest build"},
        main="dist/main.js",
        directories=("src/modules",),
        entry_path="src/main.{ext}",
    ),
    "react": FrameworkRule(
        dependencies=("react", "react-dom"),
        dev_dependencies=("vite", "@vitejs/plugin-react"),
        typescript_dev_dependencies=("@types/react", "@types/react-dom"),
        scripts=_VITE_SCRIPTS,
        module_type="module",
        directories=WEB_APP_DIRECTORIES,
        entry_path="src/main.{ext}x",
    ),
    "next": FrameworkRule(
        dependencies=("next", "react", "react-dom"),
        typescript_dev_dependencies=("@types/react", "@types/react-dom"),
        scripts={"dev": "next dev", "build": "next build", "start": "next start", "lint": "next lint"},
        directories=WEB_APP_DIRECTORIES,
        entry_path="src/pages/index.{ext}x",
    ),
    "vue": FrameworkRule(
        dependencies=("vue",),
        dev_dependencies=("vite", "@vitejs/plugin-vue"),
        scripts=_VITE_SCRIPTS,
        module_type="module",
        directories=WEB_APP_DIRECTORIES,
        entry_path="src/main.{ext}",
    ),
    "nuxt": FrameworkRule(
        dev_dependencies=("nuxt",),
        scripts={
            "dev": "nuxt dev", "build": "nuxt build",
            "preview": "nuxt preview", "generate": "nuxt generate",
        },
    ),
    "svelte": FrameworkRule(
        dev_dependencies=("svelte", "vite", "@sveltejs/vite-plugin-svelte"),
        scripts=_VITE_SCRIPTS,
        module_type="module",
    ),
    "sveltekit": FrameworkRule(
        dev_dependencies=(
            "@sveltejs/adapter-auto", "@sveltejs/kit", "@sveltejs/vite-plugin-svelte",
            "svelte", "vite",
        ),
        scripts={"dev": "vite dev", "build": "vite build", "preview": "vite preview"},
        module_type="module",
    ),
    "angular": FrameworkRule(
        dependencies=(
            "@angular/animations", "@angular/common", "@angular/compiler",
            "@angular/core", "@angular/forms", "@angular/platform-browser",
            "@angular/platform-browser-dynamic", "@angular/router",
            "rxjs", "tslib", "zone.js",
        ),
        dev_dependencies=(
            "@angular-devkit/build-angular", "@angular/cli", "@angular/compiler-cli",
        ),
        scripts={"ng": "ng", "start": "ng serve", "dev": "ng serve", "build": "ng build", "test": "ng test"},
    ),
    "fastify": FrameworkRule(
        dependencies=("fastify", "@fastify/cors", "@fastify/helmet"),
        typescript_dev_dependencies=("ts-node-dev",),
        scripts=_NODE_SERVER_DEV,
        typescript_scripts=_NODE_SERVER_DEV_TS,
        directories=API_DIRECTORIES,
    ),
    "koa": FrameworkRule(
        dependencies=("koa", "koa-router", "koa-bodyparser"),
        typescript_dev_dependencies=(
            "@types/koa", "@types/koa-router", "@types/koa-bodyparser", "ts-node-dev",
        ),
        scripts=_NODE_SERVER_DEV,
        typescript_scripts=_NODE_SERVER_DEV_TS,
        directories=API_DIRECTORIES,
    ),
    "remix": FrameworkRule(
        dependencies=(
            "@remix-run/node", "@remix-run/react", "@remix-run/serve", "react", "react-dom",
        ),
        dev_dependencies=("@remix-run/dev",),
        typescript_dev_dependencies=("@types/react", "@types/react-dom"),
        scripts={"dev": "remix dev", "build": "remix build", "start": "remix-serve build"},
    ),
    "astro": FrameworkRule(
        dependencies=("astro",),
        scripts={"dev": "astro dev", "build": "astro build", "preview": "astro preview"},
        module_type="module",
    ),
    "vite": FrameworkRule(
        dev_dependencies=("vite",),
        scripts=_VITE_SCRIPTS,
        module_type="module",
    ),
}

FRAMEWORK_RULES: dict[tuple[str, str], FrameworkRule] = {
    **{("javascript", fw): rule for fw, rule in _NODE_RULES.items()},
    **{("typescript", fw): rule for fw, rule in _NODE_RULES.items()},
    ("python", "flask"): FrameworkRule(
        dependencies=("Flask", "python-dotenv"),
        scripts={"dev": "flask --app src/main run --debug"},
        directories=API_DIRECTORIES,
    ),
    ("python", "django"): FrameworkRule(
        dependencies=("Django",),
        scripts={"start": "python src/main.py runserver", "dev": "python src/main.py runserver"},
    ),
    ("python", "fastapi"): FrameworkRule(
        dependencies=("fastapi", "uvicorn"),
        scripts={"start": "uvicorn src.main:app", "dev": "uvicorn src.main:app --reload"},
        directories=API_DIRECTORIES,
    ),
    ("python", "pyramid"): FrameworkRule(
        dependencies=("pyramid", "waitress"),
    ),
    ("go", "gin"): FrameworkRule(dependencies=("github.com/gin-gonic/gin",)),
    ("go", "echo"): FrameworkRule(dependencies=("github.com/labstack/echo/v4",)),
    ("go", "fiber"): FrameworkRule(dependencies=("github.com/gofiber/fiber/v2",)),
    ("rust", "actix"): FrameworkRule(
        dependencies=("actix-web", "serde", "serde_json"),
        crate_features={"serde": ("derive",)},
    ),
    ("rust", "rocket"): FrameworkRule(dependencies=("rocket",)),
    ("rust", "axum"): FrameworkRule(
        dependencies=("axum", "tokio"),
        crate_features={"tokio": ("full",)},
    ),
    ("ruby", "rails"): FrameworkRule(scripts={"start": "bin/rails server", "test": "bin/rails test"}),
    ("php", "laravel"): FrameworkRule(scripts={"start": "php artisan serve", "test": "php artisan test"}),
    ("php", "symfony"): FrameworkRule(scripts={"start": "symfony server:start"}),
    ("csharp", "aspnet"): FrameworkRule(scripts={"dev": "dotnet watch run"}),
    ("csharp", "blazor"): FrameworkRule(scripts={"dev": "dotnet watch run"}),
}

PYTHON_DEV_DEPENDENCIES = ("pytest", "black", "flake8")
TYPESCRIPT_TOOLCHAIN = ("typescript", "@types/node", "ts-node")

_REACT_FAMILY = frozenset({"react", "next", "remix"})
_VUE_FAMILY = frozenset({"vue", "nuxt"})


def get_skeleton(language: str) -> LanguageSkeleton | None:
    return SKELETONS.get(language)


def get_rule(language: str, framework: str) -> FrameworkRule:
    """Return the framework rule for the pair, or the empty ``"none"`` rule."""
    return FRAMEWORK_RULES.get((language, framework), EMPTY_RULE)


def resolve_entry_path(language: str, framework: str) -> str | None:
    """Relative path of the entry file for the pair (``None`` if the language has none)."""
    skeleton = get_skeleton(language)
    if skeleton is None or skeleton.entry_path is None:
        return None
    rule = get_rule(language, framework)
    if rule.entry_path:
        return rule.entry_path.format(ext=skeleton.extension)
    return skeleton.entry_path


# ---------------------------------------------------------------------------
# Manifest model
# ---------------------------------------------------------------------------


class Manifest(BaseModel):
    """Structured, language-agnostic manifest produced by the synthesizer."""

    language: str
    framework: str = "none"
    name: str
    description: str = ""
    version: str = "1.0.0"
    main: str | None = None
    keywords: list[str] = Field(default_factory=list)
    license_spdx: str = "MIT"
    package_manager: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    scripts: dict[str, str] = Field(default_factory=dict)
    module_type: str | None = None
    crate_features: dict[str, list[str]] = Field(default_factory=dict)

    # -- Serialisation ----------------------------------------------------

    def to_package_json(self) -> dict[str, Any]:
        """Return the ``package.json`` document in its canonical key order."""
        doc: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "description": self.description,
        }
        if self.main:
            doc["main"] = self.main
        doc["scripts"] = dict(self.scripts)
        doc["keywords"] = list(self.keywords)
        doc["author"] = ""
        doc["license"] = self.license_spdx
        if self.dependencies:
            doc["dependencies"] = dict(self.dependencies)
        if self.dev_dependencies:
            doc["devDependencies"] = dict(self.dev_dependencies)
        if self.module_type:
            doc["type"] = self.module_type
        return doc

    def requirements_txt(self) -> str:
        lines = [f"{pkg}=={ver}" if ver else pkg for pkg, ver in self.dependencies.items()]
        return "\n".join(lines) + "\n" if lines else ""

    def render(self, renderer: TemplateRenderer | None = None) -> dict[str, str]:
        """Serialise the manifest into ``{relative_path: content}``.

        Languages without a manifest format return an empty mapping.
        """
        renderer = renderer or get_renderer()
        if self.language in catalog.NODE_LANGUAGES:
            return {"package.json": json.dumps(self.to_package_json(), indent=2) + "\n"}
        context = {"manifest": self, "python_version": PYTHON_VERSION, "go_version": GO_VERSION}
        if self.language == "python":
            template = (
                "manifests/pyproject.poetry.toml.j2"
                if self.package_manager == "poetry"
                else "manifests/pyproject.toml.j2"
            )
            return {
                "requirements.txt": self.requirements_txt(),
                "pyproject.toml": renderer.render(template, context),
            }
        if self.language == "go":
            return {"go.mod": renderer.render("manifests/go.mod.j2", context)}
        if self.language == "rust":
            return {"Cargo.toml": renderer.render("manifests/Cargo.toml.j2", context)}
        return {}


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------


def synthesize_manifest(
    language: str,
    framework: str,
    linters: tuple[str, ...] | list[str] = (),
    name: str = "my-project",
    *,
    description: str = "",
    license_id: str = "mit",
    package_manager: str | None = None,
    versions: VersionSource = DEFAULT_VERSION_SOURCE,
) -> Manifest:
    """Build the manifest for a ``(language, framework, linters)`` choice.

    *name* is sanitized before it is embedded.  The function is pure: the
    same arguments always produce an equal manifest.
    """
    skeleton = get_skeleton(language) or LanguageSkeleton(ecosystem=None, extension="txt", entry_path=None)
    rule = get_rule(language, framework)
    is_typescript = language == "typescript"
    ecosystem = skeleton.ecosystem

    def _versions(packages: tuple[str, ...]) -> dict[str, str]:
        if ecosystem is None:
            return {}
        return {pkg: versions.resolve(ecosystem, pkg) for pkg in packages}

    lic = catalog.get_license(license_id)
    subject = framework if framework != "none" else language
    manifest = Manifest(
        language=language,
        framework=framework,
        name=sanitize_package_name(name),
        description=description or f"A {subject} project created with stackforge",
        version="1.0.0" if ecosystem == "npm" else "0.1.0",
        main=rule.main or skeleton.main,
        keywords=[kw for kw in (framework, language, "stackforge") if kw != "none"],
        license_spdx=lic.spdx if lic else "UNLICENSED",
        package_manager=package_manager,
        scripts=dict(skeleton.scripts),
    )

    # Layer 2: framework rule
    manifest.dependencies.update(_versions(rule.dependencies))
    manifest.dev_dependencies.update(_versions(rule.dev_dependencies))
    if is_typescript:
        manifest.dev_dependencies.update(_versions(rule.typescript_dev_dependencies))
    manifest.scripts.update(rule.scripts)
    if is_typescript:
        manifest.scripts.update(rule.typescript_scripts)
    manifest.module_type = rule.module_type
    manifest.crate_features = {crate: list(feats) for crate, feats in rule.crate_features.items()}

    # Layer 3: linters (JS/TS only)
    if language in catalog.NODE_LANGUAGES:
        _apply_linters(manifest, language, framework, tuple(linters), _versions)

    # Layer 4: language-global additions
    if is_typescript:
        manifest.dev_dependencies.update(_versions(TYPESCRIPT_TOOLCHAIN))
    elif language == "javascript" and any("nodemon" in cmd for cmd in manifest.scripts.values()):
        manifest.dev_dependencies.update(_versions(("nodemon",)))
    elif language == "python":
        manifest.dev_dependencies.update(_versions(PYTHON_DEV_DEPENDENCIES))
    manifest.scripts.setdefault("test", TEST_PLACEHOLDER)

    return manifest


def _apply_linters(manifest: Manifest, language: str, framework: str, linters: tuple[str, ...], resolve) -> None:
    if "eslint" in linters:
        packages = ["eslint"]
        if language == "typescript":
            packages += ["@typescript-eslint/eslint-plugin", "@typescript-eslint/parser"]
        if framework in _REACT_FAMILY:
            packages += ["eslint-plugin-react", "eslint-plugin-react-hooks"]
        if framework in _VUE_FAMILY:
            packages.append("eslint-plugin-vue")
        manifest.dev_dependencies.update(resolve(tuple(packages)))
        manifest.scripts["lint"] = "eslint ."

    if "prettier" in linters:
        packages = ["prettier"]
        if "eslint" in linters:
            packages += ["eslint-config-prettier", "eslint-plugin-prettier"]
        manifest.dev_dependencies.update(resolve(tuple(packages)))
        manifest.scripts["format"] = "prettier --write ."
