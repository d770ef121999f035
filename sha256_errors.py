# Error types shared by the hash, MAC and attack modules

class Sha256Error(Exception):
    pass

class ParseError(Sha256Error, ValueError):
    """A digest string is not 64 hex characters."""

class ConfigurationError(Sha256Error):
    """A required option or value is missing or empty."""
