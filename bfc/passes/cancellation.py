"""
Cancellation Rewrite

Combines adjacent inverse operations on the same axis (ptradd/ptrsub,
add/sub) by subtracting magnitudes.
"""

from typing import Optional

from ..ir import Operation, INVERSE_KINDS


def _combine(pending: Operation, op: Operation) -> Optional[Operation]:
    """Net effect of two inverse operations, None when they cancel exactly."""
    diff = pending.arg - op.arg
    if diff > 0:
        return pending.with_arg(diff)
    if diff < 0:
        return op.with_arg(-diff)
    return None


def cancel(ops: list[Operation]) -> list[Operation]:
    """Cancel out adjacent inverse operations.

    At most one operation is pending at a time. An inverse of the pending
    operation is folded into it: the larger magnitude wins, reduced by the
    smaller, and equal magnitudes remove both. Anything else flushes the
    pending operation and becomes pending itself, so loop and I/O
    operations are emitted in place.

    E.g. '>>><' becomes ptradd(2) and '><' disappears entirely.
    """
    cancelled: list[Operation] = []
    pending: Optional[Operation] = None

    for op in ops:
        if pending is not None and INVERSE_KINDS.get(op.kind) == pending.kind:
            pending = _combine(pending, op)
            continue
        if pending is not None:
            cancelled.append(pending)
        pending = op

    if pending is not None:
        cancelled.append(pending)

    return cancelled
