"""AI commit message generator for uncommitted git changes."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("wtfcommit")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
