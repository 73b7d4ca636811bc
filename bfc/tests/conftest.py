"""Shared fixtures and helpers for bfc tests."""

import os
import sys

# Add parent directories to path for imports
_this_dir = os.path.dirname(os.path.abspath(__file__))
_repo_root = os.path.dirname(os.path.dirname(_this_dir))
sys.path.insert(0, _repo_root)

from types import MappingProxyType

from bfc import (
    OpKind,
    Operation,
    Profile,
    lex,
    optimise,
)
from bfc.pass_manager import PassConfig


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)

# cat: echo input until a zero byte
CAT = ",[.,]"


def _cfg(name, **opts):
    """Helper to create PassConfig."""
    return PassConfig(name=name, enabled=True, options=opts)


def make_profile(name="test", setup=("S",), teardown=("T",), **templates):
    """Profile whose templates default to '<kind> {}' for every kind."""
    table = {kind: (f"{kind.value} {{}}",) for kind in OpKind}
    for key, lines in templates.items():
        table[OpKind(key)] = tuple(lines) if not isinstance(lines, str) else (lines,)
    return Profile(
        name=name,
        setup=tuple(setup),
        teardown=tuple(teardown),
        templates=MappingProxyType(table),
        nasm_args=("-f", "elf"),
        linker="ld",
        linker_args=("-m", "elf_i386"),
    )


def profile_dict(name="test", **overrides):
    """JSON-shaped profile data, as stored in profile files."""
    data = {
        "name": name,
        "setup": ["S"],
        "teardown": ["T"],
        "nasm_args": ["-f", "elf"],
        "linker": "ld",
        "linker_args": [],
    }
    for kind in OpKind:
        data[kind.value] = [f"{kind.value} {{}}"]
    data.update(overrides)
    return data


def run_ir(ops: list[Operation], stdin: bytes = b"", max_steps: int = 1_000_000) -> bytes:
    """Reference interpreter for IR with 8-bit wrapping cells.

    Reading past the end of stdin stores 0. Used to check that rewrites
    preserve program behaviour.
    """
    targets = {}
    open_at = {}
    for i, op in enumerate(ops):
        if op.kind == OpKind.LOOP_START:
            open_at[op.arg] = i
        elif op.kind == OpKind.LOOP_END:
            start = open_at.pop(op.arg)
            targets[start] = i
            targets[i] = start

    tape: dict[int, int] = {}
    ptr = 0
    pc = 0
    out = bytearray()
    inp = iter(stdin)
    steps = 0
    while pc < len(ops):
        steps += 1
        if steps > max_steps:
            raise RuntimeError("step limit exceeded")
        op = ops[pc]
        kind = op.kind
        if kind == OpKind.POINTER_ADVANCE:
            ptr += op.arg
        elif kind == OpKind.POINTER_RETREAT:
            ptr -= op.arg
        elif kind == OpKind.INCREMENT:
            tape[ptr] = (tape.get(ptr, 0) + op.arg) % 256
        elif kind == OpKind.DECREMENT:
            tape[ptr] = (tape.get(ptr, 0) - op.arg) % 256
        elif kind == OpKind.OUTPUT:
            out.append(tape.get(ptr, 0))
        elif kind == OpKind.INPUT:
            tape[ptr] = next(inp, 0)
        elif kind == OpKind.LOOP_START:
            if tape.get(ptr, 0) == 0:
                pc = targets[pc]
        elif kind == OpKind.LOOP_END:
            if tape.get(ptr, 0) != 0:
                pc = targets[pc]
        pc += 1
    return bytes(out)


def run_source(source: str, stdin: bytes = b"", optimised: bool = True) -> bytes:
    ops = lex(source)
    if optimised:
        ops = optimise(ops)
    return run_ir(ops, stdin)
