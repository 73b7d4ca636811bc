"""Tests for IR and assembly printing."""

import io
import unittest
from contextlib import redirect_stdout

from bfc.lexer import lex
from bfc.optimizer import optimise
from bfc.printing import format_ir, print_ir, print_asm


class TestPrinting(unittest.TestCase):
    def test_format_ir_indents_loop_bodies(self):
        lines = format_ir(optimise(lex("+[[-]>]")))
        self.assertEqual(lines, [
            "[   0] add(1)",
            "[   1] loopstart(0)",
            "[   2]   loopstart(1)",
            "[   3]     sub(1)",
            "[   4]   loopend(1)",
            "[   5]   ptradd(1)",
            "[   6] loopend(0)",
        ])

    def test_print_ir_includes_source(self):
        out = io.StringIO()
        with redirect_stdout(out):
            print_ir(optimise(lex("+++[-]")))
        text = out.getvalue()
        self.assertIn("=== IR (4 ops) ===", text)
        self.assertIn("source: +++[-]", text)

    def test_print_asm(self):
        out = io.StringIO()
        with redirect_stdout(out):
            print_asm(["S", "T"])
        self.assertEqual(out.getvalue(), "=== ASM (2 blocks) ===\nS\nT\n\n")


if __name__ == "__main__":
    unittest.main()
