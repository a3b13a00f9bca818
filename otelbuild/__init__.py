"""Build tools for Go module repositories: changelogs, API checks and component file checks."""

__version__ = "0.1.0"