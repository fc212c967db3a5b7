"""
Python expression generator for expanded capture lists.

Python has no block expressions, so each scope becomes an immediately
invoked lambda whose parameter shadows the captured name:

    (lambda x: (lambda y: (BODY))(SharedRef(y)))(x)

The argument of each call is evaluated before the lambda body runs, in the
enclosing scope, which gives the same left-to-right shadowing chain as the
Rust block form.
"""

import keyword

from capture.clauses import CaptureMode
from capture.parser import CaptureSyntaxError
from capture.scopes import Binding, BodyExpression, Node


def _check_name(name: str) -> None:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise CaptureSyntaxError(f"'{name}' is not a valid Python identifier")


def _close_body(text: str) -> str:
    """Body text followed by a line break when its last line holds a `#` comment."""
    return text + "\n" if "#" in text.rsplit("\n", 1)[-1] else text


def render_value(binding: Binding, ref_type: str = "SharedRef", ref_mut_type: str = "MutRef") -> str:
    """Render the expression that produces the new value of a binding."""
    name = binding.name
    _check_name(name)
    if binding.mode == CaptureMode.MOVE:
        return name
    if binding.mode == CaptureMode.REF:
        return f"{ref_type}({name})"
    if binding.mode == CaptureMode.REF_MUT:
        return f"{ref_mut_type}({name})"
    if binding.mode == CaptureMode.METHOD:
        _check_name(binding.method)
        return f"{name}.{binding.method}()"
    raise TypeError(f"Unsupported capture mode: {binding.mode}")


def render_python(node: Node, ref_type: str = "SharedRef", ref_mut_type: str = "MutRef") -> str:
    """
    Generate a Python expression for a scope chain.

    Args:
        node: Outermost scope (or a bare body when there were no clauses)
        ref_type: Name the generated code uses for shared references
        ref_mut_type: Name the generated code uses for mutable references

    Returns:
        Expression text; the body alone when there are no scopes

    Raises:
        CaptureSyntaxError: If a captured or method name is not usable in Python
    """
    if isinstance(node, BodyExpression):
        return _close_body(node.text)

    # Wrap from the innermost binding outwards
    bindings = []
    while not isinstance(node, BodyExpression):
        bindings.append(node.binding)
        node = node.inner

    text = f"({_close_body(node.text)})"
    for binding in reversed(bindings):
        value = render_value(binding, ref_type, ref_mut_type)
        text = f"(lambda {binding.name}: {text})({value})"
    return text


__all__ = ["render_python", "render_value"]
