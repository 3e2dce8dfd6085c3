"""Error types shared by the shell, the executor and the data pipeline."""


class NflShellError(Exception):
    """Base class for every error the shell reports to the user."""


class ConfigError(NflShellError):
    """Config file missing, unreadable, or missing a required key."""


class StoreConnectionError(NflShellError):
    """The database could not be opened, or the connection was lost."""


class QueryError(NflShellError):
    """The store rejected a statement (bad SQL, constraint failure, ...)."""


class ValidationError(NflShellError):
    """User input did not have the expected shape."""


class InputClosedError(NflShellError):
    """The interactive input source ran out while a value was needed."""
