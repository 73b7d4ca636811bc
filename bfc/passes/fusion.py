"""
Fusion Rewrite

Merges each maximal run of adjacent same-kind counted operations into one
operation whose magnitude is the sum of the run.
"""

from ..ir import Operation


def fuse(ops: list[Operation]) -> list[Operation]:
    """Contract runs like '+++' into a single add(3).

    Loop and I/O operations end a run and pass through unchanged.
    E.g. '>>>+++.+' becomes ptradd(3) add(3) putchar add(1).
    """
    fused: list[Operation] = []

    for op in ops:
        if fused and op.is_counted and fused[-1].kind == op.kind:
            fused[-1] = op.with_arg(fused[-1].arg + op.arg)
        else:
            fused.append(op)

    return fused
