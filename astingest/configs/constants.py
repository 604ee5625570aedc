"""
astingest Constants

Static values that rarely change: manifest naming, directories that are
never ingested, and the cache directory layout.
"""

# --- Manifest ---

MANIFEST_FILENAME = "project.json"
README_FILENAME = "README.md"

# Project type whose sources live in the conventional src/ directory
PACKAGE_PROJECT_TYPE = "package"
PACKAGE_SOURCE_DIRECTORY = "src"
TEST_DIRECTORY = "tests"

# --- Excluded Directories ---

# Tool cache directory kept inside the reviewed project
TOOL_DIRECTORY = ".astingest"

# Directories that are pruned whatever the configuration says
ALWAYS_IGNORED_DIRS = frozenset(
    {
        TOOL_DIRECTORY,  # our own dependency/file cache
        "node_modules",  # package manager directory
    }
)

# Extra directory names pruned unless the configuration overrides them
DEFAULT_IGNORE_DIRS = (
    ".git",
    ".svn",
    ".hg",
    ".venv",
    "venv",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
)

# --- Cache Layout ---

FILE_CACHE_DIRNAME = "file-cache"
DEFAULT_NAMESPACE = "cli"

# --- Concurrency ---

DEFAULT_IO_WORKERS = 8
POOL_KINDS = ("process", "thread")
