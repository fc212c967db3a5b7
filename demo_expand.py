#!/usr/bin/env python3
"""
Demo: Expand the closure example for both targets.

Shows the Rust block expression (inline and pretty), the analyzer report,
and the Python expansion evaluated to 6.
"""

from capture.analyzer import analyze_capture_list
from capture.backends import RenderMode, render_rust
from capture.config import CaptureConfig
from capture.examples import CLOSURE_EXAMPLE_PYTHON_TEXT, CLOSURE_EXAMPLE_TEXT, Cloneable
from capture.expander import expand, expand_capture_list
from capture.parser import parse_capture_list
from capture.runtime import MutRef, SharedRef
from capture.serialization import capture_list_to_yaml


def run_python(text, namespace):
    """Expand `text` for the Python target and evaluate it against `namespace`."""
    config = CaptureConfig()
    source = expand(text, target="python", config=config)
    scope = dict(namespace, **{config.ref_type: SharedRef, config.ref_mut_type: MutRef})
    return source, eval(compile(source, "<capture>", "eval"), scope)


def main():
    capture_list = parse_capture_list(CLOSURE_EXAMPLE_TEXT)

    print("=" * 80)
    print("CAPTURE EXPANSION DEMO")
    print("=" * 80)
    print(f"\nInput: capture!({CLOSURE_EXAMPLE_TEXT})")

    print("\nPARSED:")
    print("-" * 80)
    print(capture_list_to_yaml(capture_list))

    node = expand_capture_list(capture_list)
    for mode in (RenderMode.INLINE, RenderMode.PRETTY):
        print(f"\n{mode.value.upper()} RUST:")
        print("-" * 80)
        print(render_rust(node, mode=mode))

    report = analyze_capture_list(capture_list)
    print("\nREPORT:")
    print("-" * 80)
    print(f"  Clauses:     {report.total_clauses}")
    print(f"  Identifiers: {', '.join(report.identifiers)}")
    print(f"  Warnings:    {len(report.warnings)}")

    print("\nPYTHON TARGET:")
    print("-" * 80)
    source, g = run_python(CLOSURE_EXAMPLE_PYTHON_TEXT, {"x": 1, "y": 2, "z": Cloneable(3)})
    print(f"  {source}")
    print(f"  capture!({CLOSURE_EXAMPLE_PYTHON_TEXT})() == {g()}")
    print("=" * 80)


if __name__ == "__main__":
    main()
