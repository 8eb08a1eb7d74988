"""Secondary tool configuration files.

Each function returns ``{relative_path: content}`` for one group of files so
the generator can lay them out in a fixed order: toolchain configs, linter
configs, then VCS hook configs.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from .manifest import resolve_entry_path
from .options import ProjectOptions
from .templates import TemplateRenderer, get_renderer

VITE_FRAMEWORKS = ("vite", "vue", "react", "svelte")

# framework -> (import line, plugin call)
_VITE_PLUGINS: dict[str, tuple[str, str]] = {
    "react": ("import react from '@vitejs/plugin-react';", "react()"),
    "vue": ("import vue from '@vitejs/plugin-vue';", "vue()"),
    "svelte": ("import { svelte } from '@sveltejs/vite-plugin-svelte';", "svelte()"),
}

PRETTIER_CONFIG: dict[str, Any] = {
    "semi": True,
    "trailingComma": "es5",
    "singleQuote": True,
    "printWidth": 100,
    "tabWidth": 2,
}

PRE_COMMIT_REPOS: list[dict[str, Any]] = [
    {"repo": "https://github.com/psf/black", "rev": "23.3.0", "hooks": [{"id": "black"}]},
    {"repo": "https://github.com/pycqa/flake8", "rev": "6.0.0", "hooks": [{"id": "flake8"}]},
]

_REACT_FAMILY = ("react", "next", "remix")
_VUE_FAMILY = ("vue", "nuxt")


def _json(doc: dict[str, Any]) -> str:
    return json.dumps(doc, indent=2) + "\n"


def tsconfig(framework: str = "none") -> dict[str, Any]:
    compiler: dict[str, Any] = {
        "target": "ES2020",
        "module": "commonjs",
        "lib": ["ES2020"],
        "outDir": "./dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "resolveJsonModule": True,
        "moduleResolution": "node",
    }
    if framework in _REACT_FAMILY:
        compiler["lib"] = ["ES2020", "DOM", "DOM.Iterable"]
        compiler["jsx"] = "preserve" if framework == "next" else "react-jsx"
    if framework == "nestjs":
        compiler["experimentalDecorators"] = True
        compiler["emitDecoratorMetadata"] = True
    return {
        "compilerOptions": compiler,
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist"],
    }


def eslint_config(options: ProjectOptions) -> dict[str, Any]:
    config: dict[str, Any] = {
        "env": {"browser": True, "es2021": True, "node": True},
        "extends": ["eslint:recommended"],
        "parserOptions": {"ecmaVersion": "latest", "sourceType": "module"},
        "rules": {},
    }
    if options.language == "typescript":
        config["extends"].append("plugin:@typescript-eslint/recommended")
        config["parser"] = "@typescript-eslint/parser"
        config["plugins"] = ["@typescript-eslint"]
    if options.framework in _REACT_FAMILY:
        config["extends"] += ["plugin:react/recommended", "plugin:react-hooks/recommended"]
        config["parserOptions"]["ecmaFeatures"] = {"jsx": True}
        config["settings"] = {"react": {"version": "detect"}}
    if options.framework in _VUE_FAMILY:
        config["extends"].append("plugin:vue/vue3-recommended")
    if "prettier" in options.linters:
        config["extends"].append("plugin:prettier/recommended")
    return config


def husky_config(options: ProjectOptions) -> dict[str, Any]:
    pm = options.package_manager or "npm"
    runner = "npm run" if pm == "npm" else pm
    hooks: dict[str, str] = {}
    if "eslint" in options.linters:
        hooks["pre-commit"] = f"{runner} lint"
    elif "prettier" in options.linters:
        hooks["pre-commit"] = f"{runner} format"
    hooks["pre-push"] = f"{pm} test"
    return {"hooks": hooks}


def toolchain_configs(options: ProjectOptions, renderer: TemplateRenderer | None = None) -> dict[str, str]:
    """``tsconfig.json`` and framework build configs."""
    renderer = renderer or get_renderer()
    files: dict[str, str] = {}
    if options.language == "typescript":
        files["tsconfig.json"] = _json(tsconfig(options.framework))
    if not options.is_node:
        return files

    if options.framework == "next":
        files["next.config.js"] = renderer.render("configs/next.config.js.j2", {})
    elif options.framework in VITE_FRAMEWORKS:
        plugin_import, plugin_call = _VITE_PLUGINS.get(options.framework, ("", ""))
        files["vite.config.js"] = renderer.render(
            "configs/vite.config.js.j2",
            {"plugin_import": plugin_import, "plugin_call": plugin_call},
        )
        files["index.html"] = renderer.render(
            "configs/index.html.j2",
            {
                "name": options.name,
                "mount_id": "root" if options.framework == "react" else "app",
                "entry_path": resolve_entry_path(options.language, options.framework),
            },
        )
    elif options.framework == "nestjs":
        files["nest-cli.json"] = _json(
            {
                "$schema": "https://json.schemastore.org/nest-cli",
                "collection": "@nestjs/schematics",
                "sourceRoot": "src",
            }
        )
    return files


def linter_configs(options: ProjectOptions) -> dict[str, str]:
    files: dict[str, str] = {}
    if not options.is_node:
        return files
    if "eslint" in options.linters:
        files[".eslintrc.json"] = _json(eslint_config(options))
    if "prettier" in options.linters:
        files[".prettierrc"] = _json(PRETTIER_CONFIG)
    return files


def hook_configs(options: ProjectOptions) -> dict[str, str]:
    if not options.setup_vcs_hooks:
        return {}
    if options.is_node:
        return {".huskyrc.json": _json(husky_config(options))}
    if options.language == "python":
        doc = {"repos": PRE_COMMIT_REPOS}
        return {".pre-commit-config.yaml": yaml.safe_dump(doc, sort_keys=False)}
    return {}
