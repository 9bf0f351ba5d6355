# errors.py


class DoneoError(Exception):
    pass


class NotFoundError(DoneoError, LookupError):
    """A mutation named a project, task, subtask or message that does not exist."""


class PreconditionFailed(DoneoError, ValueError):
    """The caller broke a precondition (wrong project, missing permission, empty input)."""
