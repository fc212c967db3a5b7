"""
Rust block-expression generator for expanded capture lists.

Converts a scope chain into the nested block expression the host compiler
sees, one `let` per scope:

    { let x = x; { let y = &y; { let z = z.clone(); BODY } } }

Supports two layouts:
    - INLINE: everything on one line
    - PRETTY: one binding per line, four-space indentation

A body whose last line holds a `//` comment is closed on the next line.
"""

from enum import Enum
from typing import List

from capture.clauses import CaptureMode
from capture.scopes import Binding, BodyExpression, Node


class RenderMode(Enum):
    """Layout of the generated block expression."""
    INLINE = "inline"
    PRETTY = "pretty"


INDENT = "    "


def render_binding(binding: Binding) -> str:
    """Render one rebinding as a `let` statement."""
    name = binding.name
    if binding.mode == CaptureMode.MOVE:
        value = name
    elif binding.mode == CaptureMode.REF:
        value = f"&{name}"
    elif binding.mode == CaptureMode.REF_MUT:
        value = f"&mut {name}"
    elif binding.mode == CaptureMode.METHOD:
        value = f"{name}.{binding.method}()"
    else:
        raise TypeError(f"Unsupported capture mode: {binding.mode}")
    return f"let {name} = {value};"


def _ends_in_line_comment(text: str) -> bool:
    return "//" in text.rsplit("\n", 1)[-1]


def _close_body(text: str) -> str:
    """Body text followed by a line break when its last line holds a `//` comment."""
    return text + "\n" if _ends_in_line_comment(text) else text


def _render_inline(node: Node) -> str:
    if isinstance(node, BodyExpression):
        return node.text
    inner = _render_inline(node.inner)
    if _ends_in_line_comment(inner):
        # Keep the closing brace out of the comment
        return f"{{ {render_binding(node.binding)} {inner}\n}}"
    return f"{{ {render_binding(node.binding)} {inner} }}"


def _render_pretty(node: Node, level: int, lines: List[str]) -> None:
    pad = INDENT * level

    if isinstance(node, BodyExpression):
        # Only the first line is indented; the body is otherwise verbatim
        lines.append(pad + node.text)
        return

    lines.append(pad + "{")
    lines.append(pad + INDENT + render_binding(node.binding))
    _render_pretty(node.inner, level + 1, lines)
    lines.append(pad + "}")


def render_rust(node: Node, mode: RenderMode = RenderMode.INLINE) -> str:
    """
    Generate the Rust expression for a scope chain.

    Args:
        node: Outermost scope (or a bare body when there were no clauses)
        mode: Layout (INLINE or PRETTY)

    Returns:
        Expression text; the body alone when there are no scopes. A body
        ending in a `//` comment is followed by a line break, so nothing
        after the expression is commented out.
    """
    if isinstance(node, BodyExpression):
        return _close_body(node.text)

    if mode == RenderMode.INLINE:
        return _render_inline(node)

    lines: List[str] = []
    _render_pretty(node, 0, lines)
    return "\n".join(lines)


__all__ = ["RenderMode", "render_binding", "render_rust"]
