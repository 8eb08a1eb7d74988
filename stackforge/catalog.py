"""Supported languages, frameworks, licenses and package managers.

The catalog is the closed set of choices every other module validates
against.  Entries are frozen pydantic records so they can be shared freely
between the option model, the CLI listing and the synthesizers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Language(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    extensions: tuple[str, ...] = ()


class Framework(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    languages: tuple[str, ...]
    description: str = ""


class License(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    spdx: str = Field(default="UNLICENSED", description="SPDX identifier for manifests")
    url: str = ""


class PackageManager(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    languages: tuple[str, ...]
    lock_file: str
    install_command: tuple[str, ...] = ()


NODE_LANGUAGES: frozenset[str] = frozenset({"javascript", "typescript"})

LANGUAGES: tuple[Language, ...] = (
    Language(id="javascript", name="JavaScript", extensions=(".js", ".jsx")),
    Language(id="typescript", name="TypeScript", extensions=(".ts", ".tsx")),
    Language(id="python", name="Python", extensions=(".py",)),
    Language(id="go", name="Go", extensions=(".go",)),
    Language(id="rust", name="Rust", extensions=(".rs",)),
    Language(id="ruby", name="Ruby", extensions=(".rb",)),
    Language(id="csharp", name="C#", extensions=(".cs",)),
    Language(id="php", name="PHP", extensions=(".php",)),
    Language(id="java", name="Java", extensions=(".java",)),
    Language(id="kotlin", name="Kotlin", extensions=(".kt",)),
    Language(id="swift", name="Swift", extensions=(".swift",)),
    Language(id="cpp", name="C++", extensions=(".cpp", ".cc", ".h")),
)

_JS_TS = ("javascript", "typescript")

FRAMEWORKS: tuple[Framework, ...] = (
    Framework(id="react", name="React", languages=_JS_TS, description="A JavaScript library for building user interfaces"),
    Framework(id="next", name="Next.js", languages=_JS_TS, description="The React framework for production"),
    Framework(id="vue", name="Vue.js", languages=_JS_TS, description="The progressive JavaScript framework"),
    Framework(id="nuxt", name="Nuxt.js", languages=_JS_TS, description="The intuitive Vue framework"),
    Framework(id="svelte", name="Svelte", languages=_JS_TS, description="Cybernetically enhanced web apps"),
    Framework(id="sveltekit", name="SvelteKit", languages=_JS_TS, description="The fastest way to build Svelte apps"),
    Framework(id="angular", name="Angular", languages=("typescript",), description="Platform for building mobile and desktop web applications"),
    Framework(id="express", name="Express", languages=_JS_TS, description="Fast, unopinionated, minimalist web framework"),
    Framework(id="nestjs", name="NestJS", languages=("typescript",), description="A progressive Node.js framework"),
    Framework(id="fastify", name="Fastify", languages=_JS_TS, description="Fast and low overhead web framework"),
    Framework(id="koa", name="Koa", languages=_JS_TS, description="Next generation web framework for Node.js"),
    Framework(id="remix", name="Remix", languages=_JS_TS, description="Full stack web framework"),
    Framework(id="astro", name="Astro", languages=_JS_TS, description="Build faster websites with less client-side JavaScript"),
    Framework(id="vite", name="Vite", languages=_JS_TS, description="Next generation frontend tooling"),
    Framework(id="flask", name="Flask", languages=("python",), description="Lightweight WSGI web application framework"),
    Framework(id="django", name="Django", languages=("python",), description="High-level Python web framework"),
    Framework(id="fastapi", name="FastAPI", languages=("python",), description="Modern, fast web framework for building APIs"),
    Framework(id="pyramid", name="Pyramid", languages=("python",), description="Python web framework"),
    Framework(id="gin", name="Gin", languages=("go",), description="HTTP web framework written in Go"),
    Framework(id="echo", name="Echo", languages=("go",), description="High performance, minimalist Go web framework"),
    Framework(id="fiber", name="Fiber", languages=("go",), description="Express-inspired web framework written in Go"),
    Framework(id="actix", name="Actix", languages=("rust",), description="Powerful, pragmatic, and extremely fast web framework"),
    Framework(id="rocket", name="Rocket", languages=("rust",), description="Web framework for Rust"),
    Framework(id="axum", name="Axum", languages=("rust",), description="Ergonomic and modular web framework"),
    Framework(id="rails", name="Ruby on Rails", languages=("ruby",), description="Full-stack web application framework"),
    Framework(id="sinatra", name="Sinatra", languages=("ruby",), description="DSL for quickly creating web applications"),
    Framework(id="laravel", name="Laravel", languages=("php",), description="The PHP framework for web artisans"),
    Framework(id="symfony", name="Symfony", languages=("php",), description="High performance PHP framework"),
    Framework(id="slim", name="Slim", languages=("php",), description="PHP micro framework"),
    Framework(id="aspnet", name="ASP.NET Core", languages=("csharp",), description="Cross-platform framework for building modern apps"),
    Framework(id="blazor", name="Blazor", languages=("csharp",), description="Build interactive web UIs using C#"),
)

LICENSES: tuple[License, ...] = (
    License(id="mit", name="MIT License", spdx="MIT", url="https://opensource.org/licenses/MIT"),
    License(id="apache2", name="Apache 2.0", spdx="Apache-2.0", url="https://www.apache.org/licenses/LICENSE-2.0"),
    License(id="gpl3", name="GPLv3", spdx="GPL-3.0-or-later", url="https://www.gnu.org/licenses/gpl-3.0.html"),
    License(id="bsd3", name="BSD 3-Clause", spdx="BSD-3-Clause", url="https://opensource.org/licenses/BSD-3-Clause"),
    License(id="mpl2", name="MPL 2.0", spdx="MPL-2.0", url="https://www.mozilla.org/MPL/2.0/"),
    License(id="unlicense", name="Unlicense", spdx="Unlicense", url="https://unlicense.org/"),
    License(id="proprietary", name="Proprietary", spdx="UNLICENSED"),
    License(id="none", name="No License", spdx="UNLICENSED"),
)

PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    PackageManager(id="npm", name="npm", languages=_JS_TS, lock_file="package-lock.json", install_command=("npm", "install")),
    PackageManager(id="yarn", name="Yarn", languages=_JS_TS, lock_file="yarn.lock", install_command=("yarn",)),
    PackageManager(id="pnpm", name="pnpm", languages=_JS_TS, lock_file="pnpm-lock.yaml", install_command=("pnpm", "install")),
    PackageManager(id="pip", name="pip", languages=("python",), lock_file="requirements.txt", install_command=("pip", "install", "-r", "requirements.txt")),
    PackageManager(id="poetry", name="Poetry", languages=("python",), lock_file="poetry.lock", install_command=("poetry", "install")),
    PackageManager(id="cargo", name="Cargo", languages=("rust",), lock_file="Cargo.lock", install_command=("cargo", "fetch")),
    PackageManager(id="go", name="Go Modules", languages=("go",), lock_file="go.sum", install_command=("go", "mod", "tidy")),
    PackageManager(id="bundler", name="Bundler", languages=("ruby",), lock_file="Gemfile.lock", install_command=("bundle", "install")),
    PackageManager(id="composer", name="Composer", languages=("php",), lock_file="composer.lock", install_command=("composer", "install")),
    PackageManager(id="nuget", name="NuGet", languages=("csharp",), lock_file="packages.lock.json", install_command=("dotnet", "restore")),
)

README_STYLES: tuple[str, ...] = ("standard", "minimal", "expanded")
LINTERS: tuple[str, ...] = ("eslint", "prettier")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

_LANGUAGES_BY_ID = {lang.id: lang for lang in LANGUAGES}
_FRAMEWORKS_BY_ID = {fw.id: fw for fw in FRAMEWORKS}
_LICENSES_BY_ID = {lic.id: lic for lic in LICENSES}
_PACKAGE_MANAGERS_BY_ID = {pm.id: pm for pm in PACKAGE_MANAGERS}


def get_language(language_id: str) -> Language | None:
    return _LANGUAGES_BY_ID.get(language_id)


def get_framework(framework_id: str) -> Framework | None:
    return _FRAMEWORKS_BY_ID.get(framework_id)


def get_license(license_id: str) -> License | None:
    return _LICENSES_BY_ID.get(license_id)


def get_package_manager(pm_id: str) -> PackageManager | None:
    return _PACKAGE_MANAGERS_BY_ID.get(pm_id)


def frameworks_for(language: str) -> list[Framework]:
    """Return the frameworks that declare support for *language*, in catalog order."""
    return [fw for fw in FRAMEWORKS if language in fw.languages]


def framework_ids_for(language: str) -> list[str]:
    """Return ``"none"`` followed by every framework id valid for *language*."""
    return ["none", *(fw.id for fw in frameworks_for(language))]


def package_managers_for(language: str) -> list[PackageManager]:
    return [pm for pm in PACKAGE_MANAGERS if language in pm.languages]


def default_package_manager(language: str) -> str | None:
    """Return the first package manager registered for *language*, if any."""
    managers = package_managers_for(language)
    return managers[0].id if managers else None


def language_ids() -> list[str]:
    return [lang.id for lang in LANGUAGES]


def license_ids() -> list[str]:
    return [lic.id for lic in LICENSES]


def display_name(language: str) -> str:
    """Human-readable language name, falling back to the raw id."""
    lang = get_language(language)
    return lang.name if lang else language


def framework_display_name(framework: str) -> str:
    fw = get_framework(framework)
    return fw.name if fw else framework
