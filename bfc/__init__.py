"""
bfc - Brainfuck to Assembly Compiler

Three-stage pipeline:
- Lexing: source text -> IR of run-length-countable operations
- Optimization: fusion and cancellation rewrites run to a fixpoint
- Codegen: IR -> assembly text using a target profile's templates

The generated text is handed to nasm and a linker by the toolchain module.
"""

# IR types
from .ir import (
    OpKind,
    Operation,
    COUNTED_KINDS,
    BOUNDARY_KINDS,
    INVERSE_KINDS,
    OUTPUT,
    INPUT,
    ptr_advance,
    ptr_retreat,
    increment,
    decrement,
    loop_start,
    loop_end,
    render_source,
)

# Errors
from .errors import (
    BFCError,
    LexError,
    UnmatchedLoopEnd,
    UnmatchedLoopStart,
    ProfileError,
    ProfileNotFound,
    ToolchainError,
)

# Lexer
from .lexer import lex

# Pass infrastructure
from .pass_manager import (
    PassConfig,
    PassMetrics,
    CompilerPass,
    FrontendPass,
    IRPass,
    CodegenPass,
    CompilerPipeline,
)

# Passes (must precede the optimizer, which imports the rewrites)
from .passes import fuse, cancel, LexPass, OptimizePass, IRToAsmPass

# Optimizer
from .optimizer import optimise, run_to_fixpoint

# Profiles and codegen
from .profile import Profile, ProfileRegistry, default_profile_name
from .codegen import generate, render_asm

# Main entry point
from .compile import compile_source

# Printing utilities
from .printing import print_ir, print_asm


__all__ = [
    # IR
    'OpKind', 'Operation', 'COUNTED_KINDS', 'BOUNDARY_KINDS', 'INVERSE_KINDS',
    'OUTPUT', 'INPUT', 'ptr_advance', 'ptr_retreat', 'increment', 'decrement',
    'loop_start', 'loop_end', 'render_source',
    # Errors
    'BFCError', 'LexError', 'UnmatchedLoopEnd', 'UnmatchedLoopStart',
    'ProfileError', 'ProfileNotFound', 'ToolchainError',
    # Stages
    'lex', 'fuse', 'cancel', 'optimise', 'run_to_fixpoint', 'generate', 'render_asm',
    # Pass infrastructure
    'PassConfig', 'PassMetrics', 'CompilerPass', 'FrontendPass', 'IRPass',
    'CodegenPass', 'CompilerPipeline', 'LexPass', 'OptimizePass', 'IRToAsmPass',
    # Profiles
    'Profile', 'ProfileRegistry', 'default_profile_name',
    # Compilation
    'compile_source',
    # Printing
    'print_ir', 'print_asm',
]
