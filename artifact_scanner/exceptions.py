"""
Custom exceptions for the artifact-scanner library.
"""


class ArtifactScannerError(Exception):
    """Base exception for all library errors."""
    pass


class ScannerError(ArtifactScannerError):
    """Raised when a scan cannot be started or completed."""
    pass


class ConfigurationError(ArtifactScannerError):
    """Raised when configuration is invalid."""
    pass


class PatternError(ConfigurationError):
    """Raised when an extraction pattern is malformed at library construction."""
    pass


class ValidationError(ArtifactScannerError):
    """Raised when input validation fails."""
    pass


class ResourceError(ArtifactScannerError):
    """Raised when a capture file or resource descriptor cannot be read."""
    pass
