"""
Code Generation

Maps IR to assembly text using a profile's templates. Generation is a pure
function of (profile, IR); writing files and running the assembler live in
toolchain.py.
"""

from typing import Iterable, Optional

from .ir import Operation
from .profile import Profile

# Substitution placeholder inside templates
PLACEHOLDER = "{}"


def expand_template(lines: Iterable[str], arg: Optional[int]) -> str:
    """Join template lines and substitute arg for every placeholder.

    Only the literal '{}' is replaced, so templates may contain other
    braces. With arg None the block is used verbatim.
    """
    block = "\n".join(lines)
    if arg is None:
        return block
    return block.replace(PLACEHOLDER, str(arg))


def generate_op(profile: Profile, op: Operation) -> str:
    """Assembly block for one operation.

    Counted kinds receive their magnitude, loop kinds their loop id, so a
    matched LOOP_START/LOOP_END pair sees the same value.
    """
    return expand_template(profile.template(op.kind), op.arg)


def generate(profile: Profile, ops: Iterable[Operation]) -> list[str]:
    """Generate assembly blocks: setup, one block per operation, teardown."""
    blocks = [expand_template(profile.setup, None)]
    blocks.extend(generate_op(profile, op) for op in ops)
    blocks.append(expand_template(profile.teardown, None))
    return blocks


def render_asm(blocks: Iterable[str]) -> str:
    """The assembly file contents for a list of blocks."""
    return "\n".join(blocks)
