#!/usr/bin/env python3
"""CLI entry point for the client code generator."""

import argparse
import sys
from pathlib import Path

import yaml

from .builder import BuildOptions, build
from .config import TargetConfig, load_definitions, load_target_configs, parse_apis, validate_url
from .emitters import EMITTERS
from .errors import GeneratorError, MissingFieldError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="typed-client-gen",
        description="Generate typed API client code from exported route definitions.",
    )
    parser.add_argument("input", nargs="?", type=Path, help="Route definitions file (JSON or YAML)")
    parser.add_argument("-c", "--config", type=Path, help="YAML file listing one or more builds under 'targets'")
    parser.add_argument("-t", "--target", choices=sorted(EMITTERS), default="ts", help="Output format")
    parser.add_argument("-b", "--base", default="", help="Base URL written into the generated code")
    parser.add_argument("-o", "--output", type=Path, help="Write the code here instead of stdout")
    parser.add_argument("--apis", help="Comma-separated beans or routes to keep")
    parser.add_argument("--no-head", action="store_true", help="Omit the generated-file banner")
    parser.add_argument("--runtime-package", help="Package or header the stubs import their runtime from")
    return parser.parse_args(argv)


def targets_from_args(args: argparse.Namespace) -> list[TargetConfig]:
    """Turn command line arguments into build configurations."""
    if args.config is not None:
        return load_target_configs(args.config)
    if args.input is None:
        raise MissingFieldError("input", "Either an input file or --config is required")
    return [
        TargetConfig(
            target=args.target,
            url=validate_url(args.base) if args.base else "",
            input=args.input,
            output=args.output,
            apis=parse_apis(args.apis),
            no_head=args.no_head,
            runtime_pkg_name=args.runtime_package,
        )
    ]


def run_target(config: TargetConfig) -> None:
    """Run one build and write its result."""
    print(f"Loading definitions from {config.input}...", file=sys.stderr)
    raw = load_definitions(config.input)
    options = BuildOptions(no_head=config.no_head, runtime_pkg_name=config.runtime_pkg_name, apis=config.apis)
    result = build(config.target, config.url, raw, options)

    if config.output is None:
        sys.stdout.write(result.code)
        sys.stdout.write("\n")
        return

    config.output.parent.mkdir(parents=True, exist_ok=True)
    with open(config.output, "w", encoding="utf-8") as f:
        f.write(result.code)
    print(f"  -> Generated {config.output}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the generator."""
    args = parse_args(argv)
    try:
        for config in targets_from_args(args):
            run_target(config)
    except (GeneratorError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
