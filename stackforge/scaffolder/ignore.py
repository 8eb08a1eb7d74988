"""VCS ignore-file synthesis."""

from __future__ import annotations

_EDITOR_NOISE = [".DS_Store", ".idea/", ".vscode/", "*.swp", "*.swo"]

_NODE_LOGS = [
    ".env",
    ".env.local",
    ".env.*.local",
    "npm-debug.log*",
    "yarn-debug.log*",
    "yarn-error.log*",
    ".DS_Store",
    "*.log",
    ".vscode/",
    ".idea/",
    "*.swp",
    "*.swo",
    "coverage/",
    ".nyc_output/",
]

IGNORE_TEMPLATES: dict[str, list[str]] = {
    "javascript": ["node_modules/", "dist/", "build/", *_NODE_LOGS],
    "typescript": [
        "node_modules/",
        "dist/",
        "build/",
        "*.js",
        # tool configs (vite.config.js, next.config.js) are hand-written JS
        "!*.config.js",
        "*.js.map",
        "*.d.ts",
        *_NODE_LOGS,
    ],
    "python": [
        "__pycache__/",
        "*.py[cod]",
        "*$py.class",
        "*.so",
        ".Python",
        "build/",
        "develop-eggs/",
        "dist/",
        "downloads/",
        "eggs/",
        ".eggs/",
        "lib/",
        "lib64/",
        "parts/",
        "sdist/",
        "var/",
        "wheels/",
        "*.egg-info/",
        ".installed.cfg",
        "*.egg",
        "MANIFEST",
        ".env",
        ".venv",
        "env/",
        "venv/",
        "ENV/",
        ".DS_Store",
        ".vscode/",
        ".idea/",
        "*.swp",
        "*.swo",
    ],
    "go": [
        "*.exe",
        "*.exe~",
        "*.dll",
        "*.so",
        "*.dylib",
        "*.test",
        "*.out",
        "vendor/",
        *_EDITOR_NOISE,
    ],
    "rust": ["target/", "Cargo.lock", "**/*.rs.bk", *_EDITOR_NOISE],
    "ruby": [
        "*.gem",
        "*.rbc",
        "/.config",
        "/coverage/",
        "/InstalledFiles",
        "/pkg/",
        "/spec/reports/",
        "/spec/examples.txt",
        "/test/tmp/",
        "/test/version_tmp/",
        "/tmp/",
        *_EDITOR_NOISE,
    ],
    "php": ["/vendor/", "composer.lock", ".env", *_EDITOR_NOISE],
    "csharp": ["bin/", "obj/", ".vs/", "*.user", "*.suo", *_EDITOR_NOISE],
}


def ignore_patterns(language: str) -> list[str]:
    """Return the ignore patterns for *language* (JavaScript's list if unknown)."""
    return list(IGNORE_TEMPLATES.get(language, IGNORE_TEMPLATES["javascript"]))


def render_ignore_file(language: str) -> str:
    return "\n".join(ignore_patterns(language)) + "\n"
