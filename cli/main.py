"""Command line entry point for nanonet training runs."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

from nanonet.training import pipelines


def _format_result(result) -> str:
    return json.dumps(asdict(result), sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="parity3",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--seed", type=int, help="Seed for parameter initialisation")
    parser.add_argument("--max-epochs", type=int, help="Stop after this many epochs")
    parser.add_argument("--report-every", type=int, help="Epochs between metric reports")
    parser.add_argument("--run-dir", help="Directory for metrics and manifest files")
    parser.add_argument(
        "--hidden-activation", help="Activation for the hidden layer (sigmoid, relu, tanh)"
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a training curve image"
    )
    parser.add_argument(
        "--show-rows",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Print expected and actual labels for every row at each report",
    )
    parser.add_argument(
        "--print-network",
        action="store_true",
        help="Print the weights and biases at each report",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)

    if args.config:
        override = pipelines.read_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    train_cfg = config.setdefault("train", {})
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.max_epochs is not None:
        train_cfg["max_epochs"] = int(args.max_epochs)
    if args.report_every is not None:
        train_cfg["report_every"] = int(args.report_every)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    train_cfg["show_rows"] = bool(args.show_rows)
    if args.print_network:
        train_cfg["print_network"] = True
    if args.hidden_activation:
        config.setdefault("model", {})["hidden_activation"] = args.hidden_activation

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
