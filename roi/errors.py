"""Errors raised by the metrics core."""


class MalformedRowError(ValueError):
    """A fetched report row is missing a required field or holds an unusable value."""

    def __init__(self, message: str, row=None):
        super().__init__(message)
        self.row = row
