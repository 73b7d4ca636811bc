"""
Lexer

Turns source text into unit-magnitude IR. Loop boundaries are resolved to
matched id pairs with an explicit stack; any character outside the eight
commands is a comment and is skipped.
"""

from .errors import UnmatchedLoopEnd, UnmatchedLoopStart
from .ir import (
    Operation, OUTPUT, INPUT,
    ptr_advance, ptr_retreat, increment, decrement, loop_start, loop_end,
)


# Commands that map to a fixed operation
_SIMPLE_OPS = {
    ">": ptr_advance(1),
    "<": ptr_retreat(1),
    "+": increment(1),
    "-": decrement(1),
    ".": OUTPUT,
    ",": INPUT,
}


def lex(source: str) -> list[Operation]:
    """Lex source text into a list of operations.

    Loop ids are assigned in order of each '[' and never reused.

    Raises:
        UnmatchedLoopEnd: a ']' appears with no open loop.
        UnmatchedLoopStart: the source ends inside an open loop.
    """
    ops: list[Operation] = []

    next_loop_id = 0
    # (loop id, offset, line, column) for each open loop
    open_loops: list[tuple[int, int, int, int]] = []

    line = 1
    column = 0
    for offset, char in enumerate(source):
        if char == "\n":
            line += 1
            column = 0
            continue
        column += 1

        op = _SIMPLE_OPS.get(char)
        if op is not None:
            ops.append(op)
        elif char == "[":
            ops.append(loop_start(next_loop_id))
            open_loops.append((next_loop_id, offset, line, column))
            next_loop_id += 1
        elif char == "]":
            if not open_loops:
                raise UnmatchedLoopEnd(offset, line, column)
            loop_id = open_loops.pop()[0]
            ops.append(loop_end(loop_id))

    if open_loops:
        raise UnmatchedLoopStart([pos[1:] for pos in open_loops])

    return ops
