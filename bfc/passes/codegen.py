"""
IR to Assembly Codegen Pass

Wraps the template-driven generator as the final pass of the
CompilerPipeline.
"""

from ..pass_manager import CodegenPass, PassConfig
from ..ir import Operation
from ..codegen import generate
from ..profile import Profile


class IRToAsmPass(CodegenPass):
    """
    Pass that emits assembly text blocks for a target profile.

    The profile is fixed when the pass is built; the pass itself has no
    options.
    """

    def __init__(self, profile: Profile):
        super().__init__()
        self.profile = profile

    @property
    def name(self) -> str:
        return "codegen"

    def run(self, ops: list[Operation], config: PassConfig) -> list[str]:
        self._init_metrics()

        blocks = generate(self.profile, ops)

        if self._metrics:
            self._metrics.ir_size_before = len(ops)
            self._metrics.custom = {
                "profile": self.profile.name,
                "lines": sum(block.count("\n") + 1 for block in blocks),
            }

        return blocks
