"""
Target Profiles

A profile is a named table of instruction templates, one template list per
operation kind, plus setup/teardown text and the assembler/linker arguments
for its target. Profiles are JSON files kept in a per-user config directory;
a ProfileRegistry is loaded once at startup and passed to whatever needs it.
"""

import json
import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import ProfileError, ProfileNotFound
from .ir import OpKind

LOGGER = logging.getLogger("bfc.profile")

APP_NAME = "bfc"

# Profiles shipped inside the package
BUNDLED_PROFILE_DIR = Path(__file__).parent / "profiles"


@dataclass(frozen=True)
class Profile:
    """Instruction templates and toolchain parameters for one target."""
    name: str
    setup: tuple[str, ...]
    teardown: tuple[str, ...]
    templates: Mapping[OpKind, tuple[str, ...]]
    nasm_args: tuple[str, ...] = ()
    linker: str = "ld"
    linker_args: tuple[str, ...] = ()

    def template(self, kind: OpKind) -> tuple[str, ...]:
        """Template lines for an operation kind."""
        return self.templates[kind]

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        """Build a profile from its JSON object form.

        Every key is required; template keys are the OpKind values
        ("ptradd", "add", "loopstart", ...).
        """
        if not isinstance(data, dict):
            raise ProfileError(f"Profile must be a JSON object, got {type(data).__name__}")

        name = _require_str(data, "name", None)
        templates = {
            kind: _require_lines(data, kind.value, name) for kind in OpKind
        }
        return cls(
            name=name,
            setup=_require_lines(data, "setup", name),
            teardown=_require_lines(data, "teardown", name),
            templates=MappingProxyType(templates),
            nasm_args=_require_lines(data, "nasm_args", name),
            linker=_require_str(data, "linker", name),
            linker_args=_require_lines(data, "linker_args", name),
        )

    @classmethod
    def from_file(cls, path: Path) -> "Profile":
        """Read a profile from a JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except UnicodeDecodeError as exc:
            raise ProfileError(f"{path}: not UTF-8 text: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ProfileError(f"{path}: invalid JSON: {exc}") from exc
        try:
            return cls.from_dict(data)
        except ProfileError as exc:
            raise ProfileError(f"{path}: {exc}") from exc


def _where(name: Optional[str]) -> str:
    return f" in profile '{name}'" if name else ""


def _require_str(data: dict, key: str, name: Optional[str]) -> str:
    if key not in data:
        raise ProfileError(f"Missing key '{key}'{_where(name)}")
    value = data[key]
    if not isinstance(value, str):
        raise ProfileError(f"Key '{key}'{_where(name)} must be a string")
    return value


def _require_lines(data: dict, key: str, name: Optional[str]) -> tuple[str, ...]:
    if key not in data:
        raise ProfileError(f"Missing key '{key}'{_where(name)}")
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ProfileError(f"Key '{key}'{_where(name)} must be a list of strings")
    return tuple(value)


def default_profile_name(system: Optional[str] = None) -> str:
    """Default profile for a host OS (platform.system() naming)."""
    if system is None:
        system = platform.system()
    if system == "Darwin":
        return "macos_64"
    return "elf_32"


def _user_dir(env_var: str, windows_var: str, fallback: str) -> Path:
    if os.name == "nt":
        base = os.environ.get(windows_var)
        if base:
            return Path(base) / APP_NAME
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / fallback / APP_NAME


def user_config_dir() -> Path:
    """Per-user directory holding profile JSON files."""
    return _user_dir("XDG_CONFIG_HOME", "APPDATA", ".config")


def user_cache_dir() -> Path:
    """Per-user directory for temporary build files."""
    return _user_dir("XDG_CACHE_HOME", "LOCALAPPDATA", ".cache")


def install_default_profiles(config_dir: Path) -> list[Path]:
    """Copy bundled profiles into config_dir, keeping any existing files.

    Returns the paths that were newly written.
    """
    config_dir = Path(config_dir)
    config_dir.mkdir(parents=True, exist_ok=True)

    installed = []
    for src in sorted(BUNDLED_PROFILE_DIR.glob("*.json")):
        target = config_dir / src.name
        if target.exists():
            continue
        shutil.copyfile(src, target)
        LOGGER.info("Installed profile %s", target)
        installed.append(target)
    return installed


@dataclass
class ProfileRegistry:
    """Loaded profiles, keyed by name, with a default selection."""
    profiles: dict[str, Profile] = field(default_factory=dict)
    default_name: str = field(default_factory=default_profile_name)

    @classmethod
    def load(cls, directory: Path, default_name: Optional[str] = None) -> "ProfileRegistry":
        """Load every *.json profile in a directory.

        Files that are not valid profiles are logged and skipped.
        """
        registry = cls(default_name=default_name or default_profile_name())
        directory = Path(directory)
        if not directory.is_dir():
            LOGGER.warning("Profile directory %s does not exist", directory)
            return registry

        for path in sorted(directory.glob("*.json")):
            if not path.is_file():
                continue
            try:
                profile = Profile.from_file(path)
            except (ProfileError, OSError) as exc:
                LOGGER.warning("Skipping profile file: %s", exc)
                continue
            if profile.name in registry.profiles:
                LOGGER.warning("Duplicate profile '%s' in %s ignored", profile.name, path)
                continue
            registry.profiles[profile.name] = profile
            LOGGER.debug("Loaded profile '%s' from %s", profile.name, path)

        return registry

    @classmethod
    def bundled(cls, default_name: Optional[str] = None) -> "ProfileRegistry":
        """Registry of the profiles shipped with the package."""
        return cls.load(BUNDLED_PROFILE_DIR, default_name)

    def add(self, profile: Profile) -> None:
        self.profiles[profile.name] = profile

    def names(self) -> list[str]:
        return sorted(self.profiles)

    def get(self, name: Optional[str] = None) -> Profile:
        """Profile by name, or the default profile when name is None."""
        if name is None:
            name = self.default_name
        try:
            return self.profiles[name]
        except KeyError:
            raise ProfileNotFound(name, self.names()) from None

    def __len__(self):
        return len(self.profiles)
