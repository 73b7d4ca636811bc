"""bfc command-line driver."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .compile import compile_source
from .errors import BFCError
from .profile import ProfileRegistry, install_default_profiles, user_config_dir
from .toolchain import build_binary, write_asm

LOG = logging.getLogger("bfc.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfc",
        description="Compile a brainfuck program to assembly or a native executable",
    )
    parser.add_argument("infile", nargs="?", help="Filename of the brainfuck program")
    parser.add_argument("-o", "--out", dest="outfile", help="Name of the output file")
    parser.add_argument("-a", "--asm", dest="output_assembly", action="store_true",
                        help="Output an assembly file instead of an executable")
    parser.add_argument("-p", "--profile",
                        help="Target profile name (default depends on the host OS)")
    parser.add_argument("--profile-dir", type=Path, default=None,
                        help="Directory of profile JSON files (default: user config dir)")
    parser.add_argument("--list-profiles", action="store_true",
                        help="List available profiles and exit")
    parser.add_argument("--pass-config", type=str, default=None,
                        help="Path to JSON config file for pass options")
    parser.add_argument("--print-after-all", action="store_true",
                        help="Print IR after each compilation pass")
    parser.add_argument("--print-metrics", action="store_true",
                        help="Print pass metrics and diagnostics")
    parser.add_argument("--log-level", default=os.environ.get("BFC_LOG", "WARNING"),
                        help="Logging level (default WARNING, or $BFC_LOG)")
    return parser


def output_path(infile: str, outfile: Optional[str], output_assembly: bool) -> Path:
    """Where to write the result: <base>.asm for -a, <base> otherwise."""
    if outfile:
        return Path(outfile)
    base = Path(infile).with_suffix("")
    if output_assembly:
        return base.with_suffix(".asm")
    if base == Path(infile):
        # infile has no suffix; never overwrite the source
        return base.with_name(base.name + ".out")
    return base


def load_profiles(profile_dir: Optional[Path]) -> ProfileRegistry:
    """Load profiles from profile_dir, or the user config dir by default.

    The default directory is seeded with the bundled profiles; if the
    chosen directory yields no profiles the bundled ones are used.
    """
    if profile_dir is None:
        profile_dir = user_config_dir()
        try:
            install_default_profiles(profile_dir)
        except OSError as exc:
            LOG.warning("Could not install default profiles into %s: %s", profile_dir, exc)

    registry = ProfileRegistry.load(profile_dir)
    if not registry.profiles:
        LOG.warning("No profiles found in %s, using bundled profiles", profile_dir)
        registry = ProfileRegistry.bundled()
    return registry


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    LOG.info("Read args: %s", args)

    registry = load_profiles(args.profile_dir)

    if args.list_profiles:
        for name in registry.names():
            marker = " (default)" if name == registry.default_name else ""
            print(f"{name}{marker}")
        return 0

    if not args.infile:
        parser.error("the following arguments are required: infile")

    try:
        profile = registry.get(args.profile)
        LOG.info("Using profile '%s'", profile.name)

        try:
            source = Path(args.infile).read_text()
        except OSError as exc:
            LOG.error("Could not read %s: %s", args.infile, exc)
            return 1
        LOG.debug("Read file: %s (%d chars)", args.infile, len(source))

        blocks = compile_source(
            source,
            profile,
            pass_config=args.pass_config,
            print_after_all=args.print_after_all,
            print_metrics=args.print_metrics,
        )

        target = output_path(args.infile, args.outfile, args.output_assembly)
        if args.output_assembly:
            write_asm(blocks, target)
        else:
            build_binary(profile, blocks, target)
    except BFCError as exc:
        LOG.error("%s", exc)
        return 1
    except (OSError, ValueError) as exc:
        LOG.error("%s", exc)
        return 1
    except (TypeError, RuntimeError) as exc:
        # pipeline left incomplete by the pass config
        LOG.error("Invalid pass configuration: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
