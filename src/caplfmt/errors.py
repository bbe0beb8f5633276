class CaplFmtError(Exception):
    """Base class for errors that abort a caplfmt run before any file is touched."""


class ConfigError(CaplFmtError):
    """The config file could not be read or does not describe valid settings."""


class PatternError(CaplFmtError):
    """The input pattern is not a valid glob."""
