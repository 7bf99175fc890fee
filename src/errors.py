"""Error types shared by the storage layer and the CLI."""


class TodoError(Exception):
    """Base class for failures the CLI reports to the user."""


class StorageError(TodoError):
    """Connectivity or query failure against the task store."""


class ConfigError(TodoError):
    """A configured value is missing or malformed."""
