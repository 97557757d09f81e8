class TokiTyperError(Exception):
    """Base error for toki-typer."""


class DatasetError(TokiTyperError):
    """The word dataset could not be read or parsed."""


class ConfigError(TokiTyperError):
    """A setting has a value the exercise cannot use."""
