"""SerialTerm version information."""

__version__ = "1.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

APP_NAME = "SerialTerm"
AUTHOR = "SerialTerm contributors"
DESCRIPTION = "Serial-line terminal with text and hex views"
LICENSE = "Apache-2.0"
