"""
Optimize Pass

Wraps the fixpoint optimizer as a pass for the CompilerPipeline.
"""

from ..pass_manager import IRPass, PassConfig
from ..ir import Operation
from ..optimizer import REWRITES, DEFAULT_REWRITES, run_to_fixpoint


class OptimizePass(IRPass):
    """
    Pass that rewrites IR to a smaller, equivalent fixpoint.

    Options:
    - rewrites: ordered list of rewrite names applied each round
      (default: ["fusion", "cancellation"])
    """

    @property
    def name(self) -> str:
        return "optimise"

    def run(self, ops: list[Operation], config: PassConfig) -> list[Operation]:
        self._init_metrics()

        names = config.options.get("rewrites", list(DEFAULT_REWRITES))
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ValueError(
                f"Option 'rewrites' for pass '{self.name}' must be a list of "
                f"rewrite names, got {names!r}"
            )
        unknown = [n for n in names if n not in REWRITES]
        if unknown:
            raise ValueError(
                f"Unknown rewrite(s) {unknown} for pass '{self.name}'; "
                f"expected any of {sorted(REWRITES)}"
            )

        result, rounds = run_to_fixpoint(ops, [REWRITES[n] for n in names])

        if self._metrics:
            self._metrics.ir_size_before = len(ops)
            self._metrics.ir_size_after = len(result)
            self._metrics.custom = {
                "rewrites": list(names),
                "rounds": rounds,
                "ops_removed": len(ops) - len(result),
            }

        return result
