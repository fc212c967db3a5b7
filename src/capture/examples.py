"""
Example capture lists for demos and tests.

The closure example captures three integers in three different ways:
x by move, y by shared reference, z by clone. Called with no arguments,
the resulting closure returns x + y + z.
"""
from capture.clauses import Body, CaptureList, MethodClause, MoveClause, RefClause


CLOSURE_EXAMPLE_TEXT = "move x, ref y, clone z in move || x + *y + z"

# Same capture list with a Python body, for the python target
CLOSURE_EXAMPLE_PYTHON_TEXT = "move x, ref y, clone z in lambda: x + y.value + z"


def build_closure_example(body: str = "move || x + *y + z") -> CaptureList:
    return CaptureList(
        clauses=(
            MoveClause("x"),
            RefClause("y"),
            MethodClause("clone", "z"),
        ),
        body=Body(body),
    )


class Cloneable(int):
    """An int with a `clone()` method, so `clone z` works on the python target."""

    def clone(self):
        return Cloneable(int(self))
