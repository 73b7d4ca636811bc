"""
Main Compilation Entry Point

Provides the compile_source function that orchestrates the full compilation
pipeline from source text to assembly blocks using the CompilerPipeline.
"""

import logging
import os
from typing import Optional

from .pass_manager import CompilerPipeline
from .passes import LexPass, OptimizePass, IRToAsmPass
from .profile import Profile

LOGGER = logging.getLogger("bfc.compile")

DEFAULT_PASS_CONFIG = os.path.join(os.path.dirname(__file__), "pass_config.json")


def compile_source(
    source: str,
    profile: Profile,
    pass_config: Optional[str] = None,
    print_after_all: bool = False,
    print_metrics: bool = False
) -> list[str]:
    """
    Full compilation from source text to assembly with optional debug printing.

    Args:
        source: Program source text
        profile: Target profile supplying the instruction templates
        pass_config: Path to a pass config JSON file (default: bundled config)
        print_after_all: If True, print IR after each compilation pass
        print_metrics: If True, print pass metrics and diagnostics

    Returns:
        List of assembly text blocks
    """
    pipeline = CompilerPipeline(
        print_after_all=print_after_all,
        print_metrics=print_metrics
    )
    pipeline.load_config(pass_config or DEFAULT_PASS_CONFIG)

    lex_pass = LexPass()
    optimize_pass = OptimizePass()
    pipeline.add_pass(lex_pass)                 # source -> IR
    pipeline.add_pass(optimize_pass)            # IR -> IR (fusion + cancellation to fixpoint)
    pipeline.add_pass(IRToAsmPass(profile))     # IR -> asm

    blocks = pipeline.run(source)

    lexed = lex_pass.get_metrics()
    if lexed:
        LOGGER.debug("Lexed to %d symbols", lexed.ir_size_after)
    optimised = optimize_pass.get_metrics()
    if optimised:
        LOGGER.debug("Optimised to %d symbols", optimised.ir_size_after)
    LOGGER.debug("Generated %d blocks of assembly", len(blocks))

    return blocks
