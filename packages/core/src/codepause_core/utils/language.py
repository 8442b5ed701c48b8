"""Map file paths to editor language ids.

Trackers normally report the editor's language id with each event. When an
export lacks it, the file extension is the next best signal. Ids follow the
VS Code convention so they line up with the review-time multipliers.
"""

from __future__ import annotations

from pathlib import PurePosixPath

EXTENSION_LANGUAGES = {
    ".rs": "rust",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".hh": "cpp",
    ".c": "c",
    ".h": "c",
    ".scala": "scala",
    ".sc": "scala",
    ".java": "java",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescriptreact",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".cs": "csharp",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".py": "python",
    ".pyi": "python",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".sh": "shellscript",
    ".sql": "sql",
    ".md": "markdown",
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".html": "html",
    ".css": "css",
}


def language_for_path(file_path: str | None) -> str | None:
    """Return the language id for ``file_path`` or None when the extension is unknown."""
    if not file_path:
        return None
    suffix = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
    return EXTENSION_LANGUAGES.get(suffix)
