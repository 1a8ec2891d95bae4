"""synergos — autonomic cognitive control engine."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("synergos")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
