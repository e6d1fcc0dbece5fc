"""Exception types raised at the boundaries of hookdash."""
from __future__ import annotations


class InvalidLogFilename(ValueError):
    """A requested log filename is not a hook-events log or escapes the log dir."""

    def __init__(self, filename: str):
        super().__init__(f"Invalid filename: {filename!r}")
        self.filename = filename


class SettingsFileError(ValueError):
    """A settings or hooks-config file could not be parsed as JSON."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid JSON in {path}: {reason}")
        self.path = path


class UnknownToolError(KeyError):
    """No query tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"
