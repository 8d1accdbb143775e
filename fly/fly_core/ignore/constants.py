"""
Central configuration for ignore file processing
"""

# Single source of truth for ignore filename (global copy lives in the
# config dir, per-root copies live at the top of each root)
IGNORE_FILENAME = ".flyIgnore"

# Ignore files above this size are skipped rather than parsed
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB

# Patterns written by `flyctl --init`, grouped for the generated file
DEFAULT_EXCLUSIONS = {
    "Version control": [
        ".git/",
        ".hg/",
        ".svn/",
    ],
    "Python": [
        "__pycache__/",
        ".venv/",
        "venv/",
        ".mypy_cache/",
        ".pytest_cache/",
        ".tox/",
        "*.egg-info/",
    ],
    "JavaScript/TypeScript/Node.js": [
        "node_modules/",
        ".next/",
        ".nuxt/",
        ".parcel-cache/",
    ],
    "Build output": [
        "build/",
        "dist/",
        "target/",
        "out/",
    ],
    "IDE and editors": [
        ".idea/",
        ".vscode/",
    ],
    "Caches": [
        ".cache/",
        ".gradle/",
    ],
}
