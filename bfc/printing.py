"""
IR Printing Utilities

Pretty-printing functions for IR and generated assembly.
"""

from .ir import Operation, OpKind, render_source


def format_ir(ops: list[Operation]) -> list[str]:
    """One line per operation, indented by loop depth."""
    lines = []
    depth = 0
    for i, op in enumerate(ops):
        if op.kind == OpKind.LOOP_END:
            depth = max(depth - 1, 0)
        lines.append(f"[{i:4d}] {'  ' * depth}{op!r}")
        if op.kind == OpKind.LOOP_START:
            depth += 1
    return lines


def print_ir(ops: list[Operation]):
    """Pretty-print an IR sequence."""
    print(f"=== IR ({len(ops)} ops) ===")
    for line in format_ir(ops):
        print(line)
    print(f"source: {render_source(ops)}")
    print()


def print_asm(blocks: list[str]):
    """Pretty-print generated assembly blocks."""
    print(f"=== ASM ({len(blocks)} blocks) ===")
    for block in blocks:
        print(block)
    print()
