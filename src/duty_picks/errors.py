from __future__ import annotations


class RosterError(Exception):
    """Base for every failure that aborts a draw. str(err) is the user-facing message."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(self.message())

    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message()


class SourceUnavailable(RosterError):
    def __init__(self, source: str, cause: str):
        self.cause = cause
        super().__init__(source)

    def message(self) -> str:
        return f"Error: Could not open file '{self.source}': {self.cause}"


class MalformedInput(RosterError):
    def __init__(self, source: str, cause: str):
        self.cause = cause
        super().__init__(source)

    def message(self) -> str:
        return f"Error: Failed to parse CSV file '{self.source}': {self.cause}"


class EmptyRoster(RosterError):
    def message(self) -> str:
        return f"Error: The student list in '{self.source}' is empty."


class InsufficientRoster(RosterError):
    def __init__(self, source: str, found: int):
        self.found = found
        super().__init__(source)

    def message(self) -> str:
        return f"Error: Not enough students in '{self.source}' to select two. Found {self.found}."
