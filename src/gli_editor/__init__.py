"""gli-editor: terminal viewer and line editor for .gitleaksignore files."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gli-editor")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
