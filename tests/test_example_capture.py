"""
Test the closure example: x by move, y by reference, z by clone.

Given x=1, y=2, z=3, the expanded closure returns 6.
"""

from capture.examples import (
    CLOSURE_EXAMPLE_PYTHON_TEXT,
    CLOSURE_EXAMPLE_TEXT,
    Cloneable,
    build_closure_example,
)
from capture.parser import parse_capture_list


def test_example_text_matches_builder():
    assert parse_capture_list(CLOSURE_EXAMPLE_TEXT) == build_closure_example()


def test_example_returns_six(evaluate):
    g = evaluate(CLOSURE_EXAMPLE_PYTHON_TEXT, {"x": 1, "y": 2, "z": Cloneable(3)})
    assert g() == 6


def test_clone_is_a_new_object(evaluate):
    z = Cloneable(3)
    captured = evaluate("clone z in z", {"z": z})
    assert captured == z
    assert captured is not z
