"""Version information for openapi-tool."""

from importlib.metadata import PackageNotFoundError, version

PACKAGE_NAME = "openapi-tool"

try:
    __version__ = version(PACKAGE_NAME)
except PackageNotFoundError:
    # Running from a source checkout without installing.
    __version__ = "0.0.0"
