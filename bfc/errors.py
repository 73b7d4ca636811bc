"""
Compiler Errors

Every failure the compiler reports derives from BFCError so the driver can
catch a single type and exit non-zero.
"""

from typing import Optional


class BFCError(Exception):
    """Base class for all compiler errors."""


class LexError(BFCError):
    """A malformed program detected while lexing."""

    def __init__(self, message: str, offset: int, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.offset = offset
        self.line = line
        self.column = column


class UnmatchedLoopEnd(LexError):
    """A ']' with no open loop to close."""

    def __init__(self, offset: int, line: int, column: int):
        super().__init__("Unmatched loop end", offset, line, column)


class UnmatchedLoopStart(LexError):
    """Source ended while one or more loops were still open.

    The reported position is the innermost open loop; `open_positions`
    lists (offset, line, column) for every open loop, outermost first.
    """

    def __init__(self, open_positions: list[tuple[int, int, int]]):
        offset, line, column = open_positions[-1]
        super().__init__("Unmatched loop start", offset, line, column)
        self.open_positions = open_positions


class ProfileError(BFCError):
    """Profile data is missing or malformed."""


class ProfileNotFound(ProfileError):
    """No profile with the requested name."""

    def __init__(self, name: str, known: Optional[list[str]] = None):
        self.name = name
        self.known = list(known or [])
        available = ", ".join(self.known) if self.known else "(none)"
        super().__init__(f"No profile named '{name}' (available: {available})")


class ToolchainError(BFCError):
    """The assembler or linker could not be run or failed."""

    def __init__(self, message: str, command: Optional[list[str]] = None,
                 stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
