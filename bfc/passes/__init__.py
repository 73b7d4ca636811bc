"""
Compiler Passes

This module contains the passes and rewrites of the compilation pipeline:
- Lexing pass (source -> IR)
- Fusion and cancellation rewrites, driven to a fixpoint by the optimize pass
- Codegen pass (IR -> assembly)
"""

from .fusion import fuse
from .cancellation import cancel
from .lexing import LexPass
from .optimize import OptimizePass
from .codegen import IRToAsmPass

__all__ = [
    'fuse',
    'cancel',
    'LexPass',
    'OptimizePass',
    'IRToAsmPass',
]
