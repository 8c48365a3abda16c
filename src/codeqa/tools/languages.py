"""File classification tables shared by the exploration tools."""

from pathlib import PurePath

# Directory names pruned from every walk
EXCLUDED_DIRS: frozenset[str] = frozenset({
    "node_modules", "bin", "obj", "packages", ".git", ".svn", ".hg",
    ".vs", ".vscode", ".idea", "dist", "build", "out", "target",
    "__pycache__", ".pytest_cache", ".mypy_cache", ".ruff_cache",
    "venv", ".venv", "env", "vendor", "bower_components", ".nuget",
})

# Files shown by list_directory and the project overview
SOURCE_AND_CONFIG_EXTENSIONS: frozenset[str] = frozenset({
    ".cs", ".csx", ".vb", ".fs", ".fsx",
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs",
    ".py", ".pyw", ".pyi",
    ".java", ".kt", ".kts", ".scala",
    ".go", ".rs", ".c", ".cpp", ".h", ".hpp",
    ".rb", ".php", ".swift", ".m", ".mm",
    ".sql", ".graphql", ".gql",
    ".json", ".xml", ".yaml", ".yml", ".toml",
    ".css", ".scss", ".sass", ".less",
    ".html", ".htm", ".cshtml", ".razor",
    ".sh", ".bash", ".ps1", ".psm1", ".bat", ".cmd",
    ".csproj", ".sln", ".props", ".targets",
})

# Files scanned by the in-process grep and find_definition strategies
SEARCHABLE_EXTENSIONS: frozenset[str] = frozenset({
    ".cs", ".js", ".ts", ".tsx", ".jsx", ".mjs", ".cjs", ".py", ".java",
    ".kt", ".scala", ".go", ".rs", ".c", ".cpp", ".h", ".hpp", ".rb",
    ".php", ".sql", ".json", ".xml", ".yaml", ".yml", ".css", ".html",
    ".cshtml", ".razor", ".sh", ".ps1",
})

# Files considered when looking for dependents
DEPENDENT_EXTENSIONS: frozenset[str] = frozenset({
    ".cjs", ".cs", ".go", ".java", ".js", ".jsx", ".kt", ".mjs",
    ".php", ".py", ".rb", ".rs", ".scala", ".ts", ".tsx",
})

DOCUMENTATION_EXTENSIONS: frozenset[str] = frozenset({
    ".md", ".txt", ".rst", ".doc", ".docx", ".pdf", ".rtf",
})

BINARY_EXTENSIONS: frozenset[str] = frozenset({
    ".7z", ".avi", ".bin", ".bmp", ".dll", ".doc", ".docx", ".eot", ".exe",
    ".flac", ".gif", ".gz", ".ico", ".jpeg", ".jpg", ".mov", ".mp3", ".mp4",
    ".obj", ".otf", ".pdb", ".pdf", ".png", ".ppt", ".pptx", ".rar", ".svg",
    ".tar", ".ttf", ".wav", ".webp", ".woff", ".woff2", ".xls", ".xlsx", ".zip",
})

# Language tag per extension for the outline, definition and import tables
LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".cs": "cs", ".csx": "cs",
    ".ts": "ts", ".tsx": "ts", ".js": "ts", ".jsx": "ts", ".mjs": "ts", ".cjs": "ts",
    ".py": "py", ".pyw": "py", ".pyi": "py",
    ".java": "java", ".kt": "java", ".scala": "java",
    ".go": "go",
}


def extension_of(path: str | PurePath) -> str:
    """Lower-cased file suffix, including the leading dot."""
    return PurePath(path).suffix.lower()


def language_for(path: str | PurePath) -> str | None:
    """Return the language tag for a file, or None when no table covers it."""
    return LANGUAGE_BY_EXTENSION.get(extension_of(path))


def language_for_include(include: str | None) -> str | None:
    """Map an include filter such as ``*.cs`` or ``.ts`` to a language tag."""
    if not include:
        return None
    extension = "." + include.lstrip("*").lstrip(".")
    return LANGUAGE_BY_EXTENSION.get(extension.lower())
