"""Tests for the pass framework and compile_source."""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from bfc.tests.conftest import HELLO_WORLD, make_profile, _cfg
from bfc.compile import compile_source, DEFAULT_PASS_CONFIG
from bfc.errors import UnmatchedLoopEnd
from bfc.ir import increment, decrement
from bfc.lexer import lex
from bfc.pass_manager import CompilerPipeline, PassConfig, parse_pass_configs
from bfc.passes import LexPass, OptimizePass, IRToAsmPass


class TestPassConfig(unittest.TestCase):
    def test_parse_pass_configs(self):
        configs = parse_pass_configs({
            "passes": {
                "optimise": {"enabled": False, "options": {"rewrites": ["fusion"]}},
                "lex": {},
            }
        })
        self.assertEqual(configs["optimise"], PassConfig("optimise", False, {"rewrites": ["fusion"]}))
        self.assertEqual(configs["lex"], PassConfig("lex"))

    def test_default_config_enables_all_passes(self):
        with open(DEFAULT_PASS_CONFIG) as f:
            configs = parse_pass_configs(json.load(f))
        self.assertEqual(set(configs), {"lex", "optimise", "codegen"})
        self.assertTrue(all(cfg.enabled for cfg in configs.values()))


class TestOptimizePass(unittest.TestCase):
    def test_records_metrics(self):
        p = OptimizePass()
        result = p.run(lex("++-+"), _cfg("optimise"))
        self.assertEqual(result, [increment(2)])
        metrics = p.get_metrics()
        self.assertEqual(metrics.ir_size_before, 4)
        self.assertEqual(metrics.ir_size_after, 1)
        self.assertEqual(metrics.custom["rounds"], 3)
        self.assertEqual(metrics.custom["ops_removed"], 3)

    def test_rewrite_selection(self):
        result = OptimizePass().run(lex("++-"), _cfg("optimise", rewrites=["fusion"]))
        self.assertEqual(result, [increment(2), decrement(1)])

    def test_unknown_rewrite(self):
        with self.assertRaises(ValueError):
            OptimizePass().run(lex("+"), _cfg("optimise", rewrites=["inline"]))

    def test_rewrites_must_be_a_list(self):
        with self.assertRaises(ValueError) as ctx:
            OptimizePass().run(lex("+"), _cfg("optimise", rewrites="fusion"))
        self.assertIn("must be a list", str(ctx.exception))
        self.assertNotIn("'f'", str(ctx.exception))


class TestCompilerPipeline(unittest.TestCase):
    def _pipeline(self, profile=None, **kwargs):
        pipeline = CompilerPipeline(**kwargs)
        pipeline.add_pass(LexPass())
        pipeline.add_pass(OptimizePass())
        pipeline.add_pass(IRToAsmPass(profile or make_profile()))
        return pipeline

    def test_runs_all_stages(self):
        profile = make_profile(add="ADD {}")
        self.assertEqual(self._pipeline(profile).run("+++++"), ["S", "ADD 5", "T"])

    def test_empty_program(self):
        self.assertEqual(self._pipeline().run(""), ["S", "T"])

    def test_disabled_optimise_keeps_unit_ops(self):
        pipeline = self._pipeline(make_profile(add="ADD {}"))
        pipeline.set_config({"passes": {"optimise": {"enabled": False}}})
        self.assertEqual(pipeline.run("++"), ["S", "ADD 1", "ADD 1", "T"])

    def test_type_mismatch(self):
        pipeline = CompilerPipeline()
        pipeline.add_pass(OptimizePass())
        with self.assertRaises(TypeError):
            pipeline.run("+")

    def test_must_end_in_asm(self):
        pipeline = CompilerPipeline()
        pipeline.add_pass(LexPass())
        with self.assertRaises(RuntimeError):
            pipeline.run("+")

    def test_lex_errors_propagate(self):
        with self.assertRaises(UnmatchedLoopEnd):
            self._pipeline().run("+]")

    def test_print_metrics(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self._pipeline(print_metrics=True).run("++-+")
        text = out.getvalue()
        self.assertIn("=== Pass: lex (SOURCE → IR) ===", text)
        self.assertIn("=== Pass: optimise (IR → IR) ===", text)
        self.assertIn("IR size: 4 -> 1 ops (-75%)", text)
        self.assertIn("=== Pass: codegen (IR → ASM) ===", text)

    def test_print_metrics_reports_skipped_pass(self):
        pipeline = self._pipeline(print_metrics=True)
        pipeline.set_config({"passes": {"optimise": {"enabled": False}}})
        out = io.StringIO()
        with redirect_stdout(out):
            pipeline.run("+")
        self.assertIn("=== Pass: optimise === (SKIPPED - disabled)", out.getvalue())

    def test_print_after_all(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self._pipeline(print_after_all=True).run("+[-]")
        text = out.getvalue()
        self.assertIn("COMPILATION START", text)
        self.assertIn("After optimise:", text)
        self.assertIn("loopstart(0)", text)
        self.assertIn("=== ASM", text)
        self.assertIn("COMPILATION END", text)


class TestCompileSource(unittest.TestCase):
    def test_default_config(self):
        profile = make_profile(add="ADD {}", sub="SUB {}")
        self.assertEqual(compile_source("+++--", profile), ["S", "ADD 1", "T"])

    def test_custom_pass_config_file(self):
        profile = make_profile(add="ADD {}")
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "passes.json")
            with open(path, "w") as f:
                json.dump({"passes": {"optimise": {"enabled": False}}}, f)
            blocks = compile_source("++", profile, pass_config=path)
        self.assertEqual(blocks, ["S", "ADD 1", "ADD 1", "T"])

    def test_hello_world_compiles(self):
        blocks = compile_source(HELLO_WORLD, make_profile())
        self.assertEqual(blocks[0], "S")
        self.assertEqual(blocks[-1], "T")
        self.assertEqual(sum(1 for b in blocks if b.startswith("putchar")), 13)

    def test_logs_stage_sizes(self):
        with self.assertLogs("bfc.compile", level="DEBUG") as logs:
            compile_source("+++", make_profile())
        messages = [r.getMessage() for r in logs.records]
        self.assertIn("Lexed to 3 symbols", messages)
        self.assertIn("Optimised to 1 symbols", messages)
        self.assertIn("Generated 3 blocks of assembly", messages)


if __name__ == "__main__":
    unittest.main()
