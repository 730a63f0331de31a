from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from delegate_kit.config.loader import load_config, resolve_profile_configs
from delegate_kit.config.model import AppConfig
from delegate_kit.contracts.introspect import contract_spec
from delegate_kit.errors import ConfigError
from delegate_kit.host import DelegatingHost, TriggerOutcome
from delegate_kit.observability.logging import configure_logging
from delegate_kit.output import OutputSink, StreamSink
from delegate_kit.samples import Handler, Labeled, LabeledHandler, Tallied, build_conformer


logger = logging.getLogger(__name__)

_COMMANDS = ("run", "print-config", "contracts")
_SAMPLE_CONTRACTS = (Handler, Labeled, Tallied, LabeledHandler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delegate-kit",
        description="Capability contracts and a delegating host",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--config",
        type=Path,
        help="Path to a YAML config file (skips profile resolution)",
    )
    group.add_argument(
        "--profile",
        choices=["app", "dev"],
        default="app",
        help="Config profile under ./configs (dev overlays dev.yaml on app.yaml)",
    )

    sub = parser.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="Run the delegation scenario")
    run_p.add_argument(
        "--conformer",
        help="Override scenario.conformer (echo, counting, refusing or none)",
    )
    run_p.add_argument("--triggers", type=int, help="Override scenario.triggers")
    run_p.set_defaults(command="run")

    print_p = sub.add_parser("print-config", help="Load and print the expanded config")
    print_p.set_defaults(command="print-config")

    contracts_p = sub.add_parser("contracts", help="Describe the sample contracts")
    contracts_p.set_defaults(command="contracts")

    return parser


def run_scenario(cfg: AppConfig, *, sink: OutputSink | None = None) -> list[TriggerOutcome]:
    """Build a host, hire the configured conformer (if any) and trigger it."""

    out = sink if sink is not None else StreamSink()
    host: DelegatingHost[LabeledHandler] = DelegatingHost(
        LabeledHandler,
        "handle",
        sink=out,
        messages=cfg.host.messages,
        restrict=cfg.host.restrict_delegate,
    )

    scenario = cfg.scenario
    if scenario.conformer is not None:
        host.acquire(build_conformer(scenario.conformer, label=scenario.label, sink=out, limit=scenario.limit))

    outcomes = [host.trigger() for _ in range(scenario.triggers)]
    logger.info(
        "scenario_finished",
        extra={
            "conformer": scenario.conformer,
            "outcomes": [o.value for o in outcomes],
        },
    )
    return outcomes


def _load(ns: argparse.Namespace) -> tuple[dict, AppConfig]:
    if ns.config is not None:
        config_paths = [ns.config]
    else:
        config_paths = resolve_profile_configs(profile=ns.profile, configs_dir=Path.cwd() / "configs")

    raw = load_config(config_paths)
    logger.info("config_loaded", extra={"config_files": [str(p) for p in config_paths]})
    return raw, AppConfig.from_mapping(raw)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint referenced by pyproject.toml."""

    argv_list = list(argv) if argv is not None else sys.argv[1:]

    # Default to `run` when no subcommand is given.
    if not any(a in _COMMANDS for a in argv_list) and "-h" not in argv_list and "--help" not in argv_list:
        argv_list = [*argv_list, "run"]

    parser = _build_parser()
    try:
        ns = parser.parse_args(argv_list)
    except SystemExit as e:
        code = e.code
        return int(code) if isinstance(code, int) else 1

    configure_logging(level=ns.log_level)

    if ns.command == "contracts":
        specs = [contract_spec(c).as_dict() for c in _SAMPLE_CONTRACTS]
        sys.stdout.write(json.dumps(specs, ensure_ascii=False, indent=2))
        sys.stdout.write("\n")
        return 0

    try:
        raw, cfg = _load(ns)

        if ns.command == "print-config":
            sys.stdout.write(json.dumps(raw, ensure_ascii=False, indent=2))
            sys.stdout.write("\n")
            return 0

        overrides: dict = {}
        if ns.conformer is not None:
            overrides["conformer"] = None if ns.conformer == "none" else ns.conformer
        if ns.triggers is not None:
            if ns.triggers < 0:
                raise ConfigError("must be an integer >= 0", path="--triggers")
            overrides["triggers"] = ns.triggers
        if overrides:
            cfg = replace(cfg, scenario=replace(cfg.scenario, **overrides))

        run_scenario(cfg)
        return 0

    except ConfigError as e:
        logger.error("config_error", extra={"error": str(e)})
        sys.stderr.write(f"ConfigError: {e}\n")
        return 2
    except Exception as e:  # noqa: BLE001
        logger.exception("fatal_error")
        sys.stderr.write(f"Fatal error: {e}\n")
        return 1
