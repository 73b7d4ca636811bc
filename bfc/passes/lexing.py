"""
Lexing Pass

Wraps the lexer as the first pass of the CompilerPipeline.
"""

from ..pass_manager import FrontendPass, PassConfig
from ..ir import Operation, OpKind
from ..lexer import lex


class LexPass(FrontendPass):
    """Pass that lexes source text into unit-magnitude IR."""

    @property
    def name(self) -> str:
        return "lex"

    def run(self, source: str, config: PassConfig) -> list[Operation]:
        self._init_metrics()

        ops = lex(source)

        if self._metrics:
            self._metrics.ir_size_after = len(ops)
            self._metrics.custom = {
                "loops": sum(1 for op in ops if op.kind == OpKind.LOOP_START),
                "comment_chars": len(source) - len(ops),
            }

        return ops
