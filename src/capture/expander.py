"""
Capture Expander: folds a CaptureList into a shadowing chain.

Pipeline for one invocation site:

    text --parse--> CaptureList --check_aliasing--> CaptureList
         --expand_capture_list--> Scope chain --backend--> expression text

Each clause becomes one Scope; the first clause is the outermost scope, so
bindings are established left to right and every later clause (and the
body) sees only the rebindings of strictly earlier clauses.
"""

import logging
from typing import Optional

from capture.analyzer import check_aliasing
from capture.backends.python_generator import render_python
from capture.backends.rust_generator import RenderMode, render_rust
from capture.clauses import CaptureList, Clause, MethodClause
from capture.config import TARGETS, CaptureConfig, ConfigurationError
from capture.parser import parse_capture_list
from capture.scopes import Binding, BodyExpression, Node, Scope

logger = logging.getLogger(__name__)


def clause_to_binding(clause: Clause) -> Binding:
    """Translate a clause into the rebinding it introduces."""
    method = clause.method_name if isinstance(clause, MethodClause) else None
    return Binding(name=clause.identifier, mode=clause.mode, method=method)


def expand_capture_list(capture_list: CaptureList) -> Node:
    """
    Fold clauses right-to-left around the body.

    Returns:
        The outermost Scope, or the BodyExpression itself when the
        capture list has no clauses
    """
    node: Node = BodyExpression(capture_list.body.text)
    for clause in reversed(capture_list.clauses):
        node = Scope(binding=clause_to_binding(clause), inner=node)
    return node


def render(node: Node, target: str, config: CaptureConfig) -> str:
    """Render a scope chain with the backend for `target`."""
    if target == "rust":
        return render_rust(node, mode=RenderMode(config.render_mode))
    if target == "python":
        return render_python(node, ref_type=config.ref_type, ref_mut_type=config.ref_mut_type)
    raise ConfigurationError(f"Unknown target: {target!r} (expected one of {list(TARGETS)})")


def expand(text: str, target: Optional[str] = None, config: Optional[CaptureConfig] = None) -> str:
    """
    Expand the argument text of one invocation site.

    Args:
        text: e.g. "move x, ref y, clone z in move || x + *y + z"
        target: Backend name; defaults to config.target
        config: Expansion settings; defaults to CaptureConfig()

    Returns:
        The rewritten expression text

    Raises:
        CaptureSyntaxError: If the text is malformed (including alias conflicts
            under the strict policy); nothing is produced in that case
    """
    config = config or CaptureConfig()
    target = target or config.target

    capture_list = parse_capture_list(text)
    check_aliasing(capture_list, config.alias_policy)
    node = expand_capture_list(capture_list)

    logger.debug(
        "Expanding %d clause(s) for target %s", len(capture_list.clauses), target
    )
    return render(node, target, config)


__all__ = ["clause_to_binding", "expand", "expand_capture_list", "render"]
