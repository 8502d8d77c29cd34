"""Version information for artifact-scanner."""

__version__ = "0.2.0"
__version_info__ = tuple(int(i) for i in __version__.split("."))

__title__ = "artifact-scanner"
__description__ = "Endpoint and secret extraction from captured script traffic"
__author__ = "CyberSec Team"
__license__ = "MIT"
