"""
Pass Manager Infrastructure

Provides the framework for running compilation passes. CompilerPipeline
drives the full source -> IR -> assembly compilation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Any
import json

from .ir import Operation


@dataclass
class PassConfig:
    """Configuration for a single pass."""
    name: str
    enabled: bool = True
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class PassMetrics:
    """Metrics collected by a pass during execution."""
    ir_size_before: int = 0
    ir_size_after: int = 0
    custom: dict[str, Any] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)


def parse_pass_configs(data: dict) -> dict[str, PassConfig]:
    """Build PassConfigs from the {"passes": {name: {...}}} JSON layout."""
    configs = {}
    for pass_name, opts in data.get("passes", {}).items():
        configs[pass_name] = PassConfig(
            name=pass_name,
            enabled=opts.get("enabled", True),
            options=opts.get("options", {})
        )
    return configs


class CompilerPass(ABC):
    """Base class for all compiler passes."""

    def __init__(self):
        self._metrics: Optional[PassMetrics] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the pass name for config matching."""
        pass

    @property
    @abstractmethod
    def input_type(self) -> str:
        """Return the input type: 'source', 'ir' or 'asm'."""
        pass

    @property
    @abstractmethod
    def output_type(self) -> str:
        """Return the output type: 'source', 'ir' or 'asm'."""
        pass

    @abstractmethod
    def run(self, data: Any, config: PassConfig) -> Any:
        pass

    def get_metrics(self) -> Optional[PassMetrics]:
        """Return metrics from the last run, if collected."""
        return self._metrics

    def _init_metrics(self):
        """Initialize metrics for a new run."""
        self._metrics = PassMetrics()

    def _add_metric_message(self, msg: str):
        """Add a diagnostic message to metrics."""
        if self._metrics:
            self._metrics.messages.append(msg)


class FrontendPass(CompilerPass):
    """Base class for passes that turn source text into IR."""

    @property
    def input_type(self) -> str:
        return "source"

    @property
    def output_type(self) -> str:
        return "ir"

    @abstractmethod
    def run(self, source: str, config: PassConfig) -> list[Operation]:
        """Lex source text into IR."""
        pass


class IRPass(CompilerPass):
    """Base class for IR -> IR transformation passes."""

    @property
    def input_type(self) -> str:
        return "ir"

    @property
    def output_type(self) -> str:
        return "ir"

    @abstractmethod
    def run(self, ops: list[Operation], config: PassConfig) -> list[Operation]:
        """Transform IR and return a new operation list."""
        pass


class CodegenPass(CompilerPass):
    """Base class for passes that turn IR into assembly text blocks."""

    @property
    def input_type(self) -> str:
        return "ir"

    @property
    def output_type(self) -> str:
        return "asm"

    @abstractmethod
    def run(self, ops: list[Operation], config: PassConfig) -> list[str]:
        """Generate assembly text blocks from IR."""
        pass


_SIZE_UNITS = {"source": "chars", "ir": "ops", "asm": "blocks"}


@dataclass
class CompilerPipeline:
    """
    Manages the full compilation pipeline from source to assembly.

    Validates type compatibility between adjacent passes and skips passes
    disabled in the config.
    """
    passes: list[CompilerPass] = field(default_factory=list)
    config: dict[str, PassConfig] = field(default_factory=dict)
    print_after_all: bool = False
    print_metrics: bool = False

    def add_pass(self, p: CompilerPass) -> None:
        """Register a pass in the pipeline."""
        self.passes.append(p)

    def load_config(self, config_path: str) -> None:
        """Load pass configs from JSON file."""
        with open(config_path) as f:
            data = json.load(f)
        self.set_config(data)

    def set_config(self, data: dict) -> None:
        """Load pass configs from an already-parsed JSON object."""
        self.config.update(parse_pass_configs(data))

    def _print_pass_metrics(self, p: CompilerPass, cfg: PassConfig,
                            before_size: int, result: Any):
        """Print metrics for a pass execution."""
        after_size = len(result)
        before_unit = _SIZE_UNITS[p.input_type]
        after_unit = _SIZE_UNITS[p.output_type]

        print(f"\n=== Pass: {p.name} ({p.input_type.upper()} → {p.output_type.upper()}) ===")
        print(f"Config: {', '.join(f'{k}={v}' for k, v in cfg.options.items()) or '(default)'}")

        if p.input_type == p.output_type and before_size > 0:
            pct = ((after_size - before_size) / before_size) * 100
            print(f"IR size: {before_size} -> {after_size} {after_unit} ({pct:+.0f}%)")
        else:
            print(f"Size: {before_size} {before_unit} -> {after_size} {after_unit}")

        metrics = p.get_metrics()
        if metrics:
            if metrics.custom:
                print(f"Custom metrics: {metrics.custom}")
            if metrics.messages:
                print("Diagnostics:")
                for msg in metrics.messages:
                    print(f"  - {msg}")

    def run(self, source: str) -> list[str]:
        """
        Run the full compilation pipeline.

        Args:
            source: Program source text

        Returns:
            List of assembly text blocks
        """
        from .printing import print_ir, print_asm

        if self.print_after_all:
            print("\n" + "=" * 60)
            print("COMPILATION START")
            print("=" * 60)

        state: dict[str, Any] = {"type": "source", "ir": source}

        for p in self.passes:
            cfg = self.config.get(p.name, PassConfig(name=p.name))

            if not cfg.enabled:
                if self.print_metrics:
                    print(f"\n=== Pass: {p.name} === (SKIPPED - disabled)")
                continue

            if p.input_type != state["type"]:
                raise TypeError(
                    f"Pass '{p.name}' expects input type '{p.input_type}' "
                    f"but current state is '{state['type']}'"
                )

            before_size = len(state["ir"])

            result = p.run(state["ir"], cfg)

            if self.print_metrics:
                self._print_pass_metrics(p, cfg, before_size, result)

            if self.print_after_all:
                print("-" * 60)
                print(f"After {p.name}:")
                print("-" * 60)
                if p.output_type == "ir":
                    print_ir(result)
                elif p.output_type == "asm":
                    print_asm(result)

            state = {"type": p.output_type, "ir": result}

        if self.print_after_all:
            print("=" * 60)
            print("COMPILATION END")
            print("=" * 60 + "\n")

        if state["type"] != "asm":
            raise RuntimeError(
                f"Pipeline did not produce assembly output, got '{state['type']}' instead"
            )

        return state["ir"]
