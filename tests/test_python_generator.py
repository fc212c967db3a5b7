"""
Tests for the Python target.

Unlike the Rust text, Python output can be run here, so besides the
generated text these tests check behaviour: evaluation order, what each
binding refers to, and the closure example returning 6.
"""

import pytest
from capture.analyzer import AliasConflictError
from capture.backends.python_generator import render_python, render_value
from capture.clauses import CaptureMode
from capture.config import CaptureConfig
from capture.examples import CLOSURE_EXAMPLE_PYTHON_TEXT, Cloneable
from capture.parser import CaptureSyntaxError
from capture.runtime import MutRef, SharedRef
from capture.scopes import Binding, BodyExpression, Scope


class TestRenderPython:
    """Generated text."""

    def test_bare_body(self):
        assert render_python(BodyExpression("a + b")) == "a + b"

    def test_nesting(self):
        node = Scope(Binding("x", CaptureMode.MOVE), Scope(Binding("y", CaptureMode.REF), BodyExpression("x")))
        assert render_python(node) == "(lambda x: (lambda y: (x))(SharedRef(y)))(x)"

    @pytest.mark.parametrize("binding,expected", [
        (Binding("x", CaptureMode.MOVE), "x"),
        (Binding("x", CaptureMode.REF), "SharedRef(x)"),
        (Binding("x", CaptureMode.REF_MUT), "MutRef(x)"),
        (Binding("x", CaptureMode.METHOD, method="copy"), "x.copy()"),
    ])
    def test_values(self, binding, expected):
        assert render_value(binding) == expected

    def test_trailing_comment_kept_off_closing_paren(self):
        node = Scope(Binding("x", CaptureMode.MOVE), BodyExpression("x  # note"))
        assert render_python(node) == "(lambda x: (x  # note\n))(x)"

    def test_custom_reference_types(self):
        assert render_value(Binding("x", CaptureMode.REF), ref_type="Ref") == "Ref(x)"
        assert render_value(Binding("x", CaptureMode.REF_MUT), ref_mut_type="Cell") == "Cell(x)"

    @pytest.mark.parametrize("binding", [
        Binding("lambda", CaptureMode.MOVE),
        Binding("r#type", CaptureMode.MOVE),
        Binding("x", CaptureMode.METHOD, method="import"),
    ])
    def test_rejects_non_python_names(self, binding):
        with pytest.raises(CaptureSyntaxError):
            render_value(binding)


class TestEvaluate:
    """Running expansions."""

    def test_closure_example_returns_six(self, evaluate):
        namespace = {"x": 1, "y": 2, "z": Cloneable(3)}
        g = evaluate(CLOSURE_EXAMPLE_PYTHON_TEXT, namespace)
        assert g() == 6

    def test_move_is_identity(self, evaluate):
        marker = object()
        assert evaluate("move x in x", {"x": marker}) is marker

    def test_empty_clause_list(self, evaluate):
        assert evaluate("in a * 2", {"a": 21}) == 42

    def test_ref_points_at_original(self, evaluate):
        data = [1, 2, 3]
        ref = evaluate("ref y in y", {"y": data})
        assert isinstance(ref, SharedRef)
        assert ref.value is data

    def test_ref_mut_mutation_visible_to_caller(self, evaluate):
        data = []
        evaluate("ref mut y in y.value.append(1)", {"y": data})
        assert data == [1]

    def test_ref_mut_is_mut_ref(self, evaluate):
        assert isinstance(evaluate("ref mut y in y", {"y": 0}), MutRef)

    def test_method_called_before_body(self, evaluate):
        calls = []

        class Tracked:
            def snapshot(self):
                calls.append("snapshot")
                return "copy"

        result = evaluate("snapshot t in (calls.append('body'), t)[1]", {"t": Tracked(), "calls": calls})
        assert result == "copy"
        assert calls == ["snapshot", "body"]

    def test_order_sensitivity(self, evaluate):
        """`move x, ref x`: the reference is to the moved binding."""
        value = object()
        ref = evaluate("move x, ref x in x", {"x": value})
        assert isinstance(ref, SharedRef)
        assert ref.value is value

    def test_later_clause_sees_earlier_rebinding(self, evaluate):
        result = evaluate("upper s, lower s in s", {"s": "MiXeD"})
        assert result == "mixed"

    def test_body_with_trailing_comment(self, evaluate):
        assert evaluate("move x in x + 1  # note", {"x": 2}) == 3

    def test_namespace_not_modified(self, evaluate):
        namespace = {"x": 1}
        evaluate("ref x in x", namespace)
        assert namespace == {"x": 1}

    def test_custom_reference_names(self, evaluate):
        config = CaptureConfig(ref_type="Shared")
        ref = evaluate("ref x in x", {"x": 5}, config=config)
        assert isinstance(ref, SharedRef)
        assert ref.value == 5

    def test_alias_conflict(self, evaluate):
        with pytest.raises(AliasConflictError):
            evaluate("ref mut x, ref x in x", {"x": 1})
