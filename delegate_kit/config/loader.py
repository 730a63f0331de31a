from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

import yaml
from dotenv import load_dotenv

from delegate_kit.errors import ConfigError


_ENV_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

PROFILES: dict[str, tuple[str, ...]] = {
    "app": ("app.yaml",),
    "dev": ("app.yaml", "dev.yaml"),
}


@dataclass(frozen=True, slots=True)
class _Unresolved:
    var_name: str
    key_path: str
    reason: str  # "missing" | "empty"


def _merge(base: MutableMapping[str, Any], overlay: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Recursive merge: nested mappings merge, everything else is replaced."""

    for key, value in overlay.items():
        current = base.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            base[key] = _merge(dict(current), value)
        else:
            base[key] = value
    return base


def _read_yaml(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e}", path=str(path)) from e

    try:
        data = yaml.safe_load(text) if text.strip() else {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError("top-level YAML must be a mapping", path=str(path))
    return data


def _expand(obj: Any, *, key_path: str, unresolved: list[_Unresolved]) -> Any:
    if isinstance(obj, str):
        def repl(match: re.Match[str]) -> str:
            name = match.group(1)
            value = os.getenv(name)
            if value is None or value == "":
                unresolved.append(
                    _Unresolved(var_name=name, key_path=key_path, reason="missing" if value is None else "empty")
                )
                return match.group(0)
            return value

        return _ENV_RE.sub(repl, obj)

    if isinstance(obj, Mapping):
        return {
            str(k): _expand(v, key_path=f"{key_path}.{k}" if key_path else str(k), unresolved=unresolved)
            for k, v in obj.items()
        }

    if isinstance(obj, list):
        return [_expand(v, key_path=f"{key_path}[{i}]", unresolved=unresolved) for i, v in enumerate(obj)]

    return obj


def load_config(
    paths: Path | Sequence[Path],
    *,
    load_dotenv_file: bool = True,
    dotenv_path: Path | None = None,
) -> dict[str, Any]:
    """Load and merge YAML config files, then expand ``${ENV_VAR}`` strictly.

    Later files override earlier ones. A ``.env`` file (``dotenv_path`` or the
    one in the working directory) is loaded first without overriding variables
    that are already set.

    Raises:
        ConfigError: unreadable or invalid YAML, or any unresolved variable.
    """

    files = [paths] if isinstance(paths, Path) else list(paths)
    if not files:
        raise ConfigError("no config files given")

    if load_dotenv_file:
        load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)

    merged: dict[str, Any] = {}
    for path in files:
        merged = dict(_merge(merged, _read_yaml(path)))

    unresolved: list[_Unresolved] = []
    expanded = _expand(merged, key_path="", unresolved=unresolved)

    if unresolved:
        where = ", ".join(str(p) for p in files)
        lines = [f"unresolved environment variables in {where}:"]
        lines.extend(f"- {u.var_name} ({u.reason}) at {u.key_path or '<root>'}" for u in unresolved)
        raise ConfigError("\n".join(lines))

    return expanded


def resolve_profile_configs(*, profile: str, configs_dir: Path) -> list[Path]:
    names = PROFILES.get(profile)
    if names is None:
        raise ConfigError(f"unknown profile {profile!r}; expected one of {sorted(PROFILES)}")
    return [configs_dir / name for name in names]
