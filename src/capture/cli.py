"""
Command line interface.

    capture expand "move x, ref y in move || x + *y"
    capture rewrite src/main.rs -o build/main.rs
    capture parse "clone z in z" --format json
    capture report "ref mut a, ref a in a"
    capture --config capture.yaml config

Exit status: 0 on success, 1 on malformed input, 2 on usage or
configuration errors.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from capture.analyzer import AliasPolicy, analyze_capture_list
from capture.config import RENDER_MODES, TARGETS, ConfigurationError, load_config
from capture.expander import expand
from capture.parser import CaptureSyntaxError, parse_capture_list
from capture.serialization import capture_list_to_json, capture_list_to_yaml
from capture.sites import expand_file

EXIT_OK = 0
EXIT_MALFORMED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capture",
        description="Expand explicit closure capture clauses into nested scoped rebindings",
    )
    parser.add_argument("--config", help="Path to a capture.yaml / capture.json file")
    parser.add_argument(
        "--alias-policy",
        choices=[p.value for p in AliasPolicy],
        help="Reject (strict) or allow (shadow) clauses aliasing a mutable reference",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p_expand = sub.add_parser("expand", help="Expand one capture list")
    p_expand.add_argument("text", help='Capture list, e.g. "move x, ref y in x + *y"')
    p_expand.add_argument("--target", choices=TARGETS)
    p_expand.add_argument("--pretty", action="store_true", help="One binding per line (rust target)")

    p_rewrite = sub.add_parser("rewrite", help="Expand every invocation site in a file")
    p_rewrite.add_argument("file")
    p_rewrite.add_argument("-o", "--output", help="Write the result here instead of stdout")
    p_rewrite.add_argument("--target", choices=TARGETS)
    p_rewrite.add_argument("--render-mode", choices=RENDER_MODES)
    p_rewrite.add_argument("--macro-name", help="Invocation name to look for (default: capture)")

    p_parse = sub.add_parser("parse", help="Print the parsed capture list")
    p_parse.add_argument("text")
    p_parse.add_argument("--format", choices=["yaml", "json"], default="yaml")

    p_report = sub.add_parser("report", help="Print an analysis report for a capture list")
    p_report.add_argument("text")

    sub.add_parser("config", help="Show the effective configuration")

    return parser


def _print_report(report) -> None:
    print(f"Clauses:      {report.total_clauses}")
    for mode, count in report.mode_counts.items():
        print(f"  {mode:<10} {count}")
    print(f"Identifiers:  {', '.join(report.identifiers) or '(none)'}")
    if report.methods:
        print(f"Methods:      {', '.join(report.methods)}")
    if report.shadowed_identifiers:
        print(f"Shadowed:     {', '.join(report.shadowed_identifiers)}")
    if report.warnings:
        print("Warnings:")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {
        "alias_policy": args.alias_policy,
        "target": getattr(args, "target", None),
        "render_mode": getattr(args, "render_mode", None),
        "macro_name": getattr(args, "macro_name", None),
    }
    if getattr(args, "pretty", False):
        overrides["render_mode"] = "pretty"

    try:
        config = load_config(args.config, overrides=overrides)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        if args.command == "expand":
            print(expand(args.text, config=config))

        elif args.command == "rewrite":
            result = expand_file(args.file, config=config)
            for error in result.errors:
                print(f"{args.file}:{error.line}: {error.message}", file=sys.stderr)
            if args.output:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write(result.source)
            else:
                sys.stdout.write(result.source)
            return EXIT_OK if result.ok else EXIT_MALFORMED

        elif args.command == "parse":
            capture_list = parse_capture_list(args.text)
            if args.format == "json":
                print(capture_list_to_json(capture_list))
            else:
                sys.stdout.write(capture_list_to_yaml(capture_list))

        elif args.command == "report":
            _print_report(analyze_capture_list(parse_capture_list(args.text)))

        elif args.command == "config":
            sys.stdout.write(yaml.safe_dump(config.to_dict(), sort_keys=False))

    except CaptureSyntaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MALFORMED
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except UnicodeDecodeError as e:
        print(f"error: {args.file} is not UTF-8 text: {e}", file=sys.stderr)
        return EXIT_USAGE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
