"""
IR - Run-Length Operations

The intermediate representation is a flat list of operations. Counted
operations carry a magnitude so runs of identical source characters can be
fused into one instruction; loop operations carry the id that pairs a loop
start with its end.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class OpKind(Enum):
    """Operation kinds. Values are the template keys used by profiles."""
    POINTER_ADVANCE = "ptradd"
    POINTER_RETREAT = "ptrsub"
    INCREMENT = "add"
    DECREMENT = "sub"
    LOOP_START = "loopstart"
    LOOP_END = "loopend"
    OUTPUT = "putchar"
    INPUT = "getchar"


# Kinds whose argument is a magnitude that fusion may sum
COUNTED_KINDS = frozenset({
    OpKind.POINTER_ADVANCE,
    OpKind.POINTER_RETREAT,
    OpKind.INCREMENT,
    OpKind.DECREMENT,
})

LOOP_KINDS = frozenset({OpKind.LOOP_START, OpKind.LOOP_END})

IO_KINDS = frozenset({OpKind.OUTPUT, OpKind.INPUT})

# Kinds that no rewrite may look across
BOUNDARY_KINDS = LOOP_KINDS | IO_KINDS

INVERSE_KINDS = {
    OpKind.POINTER_ADVANCE: OpKind.POINTER_RETREAT,
    OpKind.POINTER_RETREAT: OpKind.POINTER_ADVANCE,
    OpKind.INCREMENT: OpKind.DECREMENT,
    OpKind.DECREMENT: OpKind.INCREMENT,
}

# Source character for each kind, used when rendering IR back to source
_SOURCE_CHARS = {
    OpKind.POINTER_ADVANCE: ">",
    OpKind.POINTER_RETREAT: "<",
    OpKind.INCREMENT: "+",
    OpKind.DECREMENT: "-",
    OpKind.LOOP_START: "[",
    OpKind.LOOP_END: "]",
    OpKind.OUTPUT: ".",
    OpKind.INPUT: ",",
}


@dataclass(frozen=True)
class Operation:
    """A single IR operation.

    arg is the magnitude for counted kinds (>= 1), the loop id for loop
    kinds (>= 0) and None for OUTPUT/INPUT.
    """
    kind: OpKind
    arg: Optional[int] = None

    def __post_init__(self):
        if self.kind in COUNTED_KINDS:
            if not isinstance(self.arg, int) or self.arg < 1:
                raise ValueError(f"{self.kind.name} needs a magnitude >= 1, got {self.arg!r}")
        elif self.kind in LOOP_KINDS:
            if not isinstance(self.arg, int) or self.arg < 0:
                raise ValueError(f"{self.kind.name} needs a loop id >= 0, got {self.arg!r}")
        elif self.arg is not None:
            raise ValueError(f"{self.kind.name} takes no argument, got {self.arg!r}")

    @property
    def is_counted(self) -> bool:
        return self.kind in COUNTED_KINDS

    @property
    def is_boundary(self) -> bool:
        return self.kind in BOUNDARY_KINDS

    def with_arg(self, arg: int) -> "Operation":
        """Same kind, new argument."""
        return Operation(self.kind, arg)

    def __repr__(self):
        if self.arg is None:
            return self.kind.value
        return f"{self.kind.value}({self.arg})"


def ptr_advance(n: int = 1) -> Operation:
    return Operation(OpKind.POINTER_ADVANCE, n)


def ptr_retreat(n: int = 1) -> Operation:
    return Operation(OpKind.POINTER_RETREAT, n)


def increment(n: int = 1) -> Operation:
    return Operation(OpKind.INCREMENT, n)


def decrement(n: int = 1) -> Operation:
    return Operation(OpKind.DECREMENT, n)


def loop_start(loop_id: int) -> Operation:
    return Operation(OpKind.LOOP_START, loop_id)


def loop_end(loop_id: int) -> Operation:
    return Operation(OpKind.LOOP_END, loop_id)


OUTPUT = Operation(OpKind.OUTPUT)
INPUT = Operation(OpKind.INPUT)


def render_source(ops: Iterable[Operation]) -> str:
    """Render IR back to equivalent source text (loop ids are dropped)."""
    parts = []
    for op in ops:
        char = _SOURCE_CHARS[op.kind]
        parts.append(char * op.arg if op.is_counted else char)
    return "".join(parts)
