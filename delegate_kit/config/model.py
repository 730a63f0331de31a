from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from delegate_kit.errors import ConfigError
from delegate_kit.host import HostMessages
from delegate_kit.samples import CONFORMERS


def _get(d: Mapping[str, Any], path: str, default: Any) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _bool(d: Mapping[str, Any], path: str, default: bool) -> bool:
    value = _get(d, path, default)
    # ${ENV_VAR} expansion always yields strings.
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    if not isinstance(value, bool):
        raise ConfigError("must be true or false", path=path)
    return value


def _str(d: Mapping[str, Any], path: str, default: str) -> str:
    value = _get(d, path, default)
    if not isinstance(value, str):
        raise ConfigError("must be a string", path=path)
    return value


def _non_negative_int(d: Mapping[str, Any], path: str, default: int) -> int:
    value = _get(d, path, default)
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError("must be an integer >= 0", path=path)
    return value


@dataclass(frozen=True)
class HostConfig:
    restrict_delegate: bool = True
    messages: HostMessages = field(default_factory=HostMessages)


@dataclass(frozen=True)
class ScenarioConfig:
    conformer: str | None = "echo"
    label: str = "demo"
    limit: int = 1
    triggers: int = 1


@dataclass(frozen=True)
class AppConfig:
    host: HostConfig = field(default_factory=HostConfig)
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AppConfig":
        defaults = HostMessages()
        host = HostConfig(
            restrict_delegate=_bool(raw, "host.restrict_delegate", HostConfig.restrict_delegate),
            messages=HostMessages(
                fallback=_str(raw, "host.messages.fallback", defaults.fallback),
                handled=_str(raw, "host.messages.handled", defaults.handled),
                declined=_str(raw, "host.messages.declined", defaults.declined),
            ),
        )

        conformer = _get(raw, "scenario.conformer", ScenarioConfig.conformer)
        if conformer is None or conformer == "none":
            conformer = None
        elif not isinstance(conformer, str) or conformer not in CONFORMERS:
            raise ConfigError(
                f"unknown conformer {conformer!r}; expected one of {sorted(CONFORMERS)} or 'none'",
                path="scenario.conformer",
            )

        scenario = ScenarioConfig(
            conformer=conformer,
            label=_str(raw, "scenario.label", ScenarioConfig.label),
            limit=_non_negative_int(raw, "scenario.limit", ScenarioConfig.limit),
            triggers=_non_negative_int(raw, "scenario.triggers", ScenarioConfig.triggers),
        )

        return cls(host=host, scenario=scenario)
