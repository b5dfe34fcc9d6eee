"""Custom exception hierarchy for the NumberLink solver."""


class NumberLinkError(Exception):
    """Base exception for solver failures."""


class PuzzleDefinitionError(NumberLinkError):
    """Raised when a puzzle definition violates its input contract."""


class PuzzleParseError(PuzzleDefinitionError):
    """Raised when a puzzle file cannot be parsed."""

    def __init__(self, message: str, source: str = "<string>", line: int = 0) -> None:
        self.source = source
        self.line = line
        location = f"{source}({line})" if line else source
        super().__init__(f"{location} : {message}")


class BoardStateError(NumberLinkError):
    """Raised when a board mutation breaks the cell state machine."""


class ValidationError(NumberLinkError):
    """Raised when a solved board fails the integrity checks."""
