"""
Toolchain Invocation

Writes generated assembly to disk and drives nasm and the profile's linker
to produce an executable.
"""

import hashlib
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, Optional

from .codegen import render_asm
from .errors import ToolchainError
from .profile import Profile, user_cache_dir

LOGGER = logging.getLogger("bfc.toolchain")

ASSEMBLER = "nasm"


def write_asm(blocks: Iterable[str], path: Path) -> Path:
    """Write assembly blocks to a file."""
    path = Path(path)
    path.write_text(render_asm(blocks))
    LOGGER.debug("Wrote assembly to %s", path)
    return path


def run_tool(cmd: list[str]) -> subprocess.CompletedProcess:
    """Run an external tool, raising ToolchainError on any failure."""
    cmd_str = " ".join(cmd)
    if shutil.which(cmd[0]) is None:
        raise ToolchainError(f"Tool not found: {cmd[0]}", command=cmd)

    LOGGER.info("Running: %s", cmd_str)
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as exc:
        raise ToolchainError(
            f"Command failed with status {exc.returncode}: {cmd_str}\n{exc.stderr or ''}".rstrip(),
            command=cmd,
            stderr=exc.stderr or "",
        ) from exc
    except OSError as exc:
        raise ToolchainError(f"Could not run {cmd[0]}: {exc}", command=cmd) from exc

    if result.stderr:
        LOGGER.warning("%s: %s", cmd[0], result.stderr.strip())
    return result


def assemble_command(profile: Profile, asm_path: Path, obj_path: Path) -> list[str]:
    return [ASSEMBLER, *profile.nasm_args, "-o", str(obj_path), str(asm_path)]


def link_command(profile: Profile, obj_path: Path, outfile: Path) -> list[str]:
    return [profile.linker, *profile.linker_args, "-o", str(outfile), str(obj_path)]


def intermediate_paths(outfile: Path, cache_dir: Path) -> tuple[Path, Path]:
    """The .s and .o paths used while building outfile.

    Names carry a digest of the absolute output path so builds of
    same-named outputs in different directories do not share files.
    """
    outfile = Path(outfile)
    digest = hashlib.sha1(str(outfile.resolve()).encode()).hexdigest()[:8]
    stem = f"{outfile.name}-{digest}"
    return Path(cache_dir) / f"{stem}.s", Path(cache_dir) / f"{stem}.o"


def build_binary(profile: Profile, blocks: Iterable[str], outfile: Path,
                 cache_dir: Optional[Path] = None) -> Path:
    """Assemble and link blocks into an executable at outfile.

    Intermediate .s and .o files are placed in cache_dir (the per-user
    cache directory by default) and removed afterwards, also on failure.
    """
    outfile = Path(outfile)
    cache_dir = Path(cache_dir) if cache_dir is not None else user_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)

    asm_path, obj_path = intermediate_paths(outfile, cache_dir)

    try:
        write_asm(blocks, asm_path)
        run_tool(assemble_command(profile, asm_path, obj_path))
        run_tool(link_command(profile, obj_path, outfile))
    finally:
        for path in (asm_path, obj_path):
            path.unlink(missing_ok=True)

    LOGGER.info("Built %s with profile '%s'", outfile, profile.name)
    return outfile
