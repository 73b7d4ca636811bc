"""
Optimizer

Runs the peephole rewrites to a fixpoint. A single round of fusion then
cancellation is not enough: cancelling can leave same-kind neighbours that
fusion would merge, and fusing can line up new inverse pairs.
"""

from typing import Callable, Iterable, Sequence

from .ir import Operation
from .passes.fusion import fuse
from .passes.cancellation import cancel


Rewrite = Callable[[list[Operation]], list[Operation]]

# Rewrites selectable by name from the pass config
REWRITES: dict[str, Rewrite] = {
    "fusion": fuse,
    "cancellation": cancel,
}

DEFAULT_REWRITES = ("fusion", "cancellation")


def run_to_fixpoint(ops: Iterable[Operation],
                    rewrites: Sequence[Rewrite]) -> tuple[list[Operation], int]:
    """Apply rewrites in order, round after round, until nothing changes.

    Returns the stable sequence and the number of rounds run, including the
    final round that made no change. Every rewrite either shrinks the
    sequence or leaves it equal, so this terminates.
    """
    current = list(ops)
    rounds = 0
    while True:
        rounds += 1
        result = current
        for rewrite in rewrites:
            result = rewrite(result)
        if result == current:
            return result, rounds
        current = result


def optimise(ops: Iterable[Operation]) -> list[Operation]:
    """Optimise IR to the fixpoint of fusion and cancellation."""
    result, _ = run_to_fixpoint(ops, (fuse, cancel))
    return result
