"""
Capture Clause Transformer

Rewrites a list of explicit capture clauses plus a body expression into
the body wrapped in a chain of scoped rebindings:

    capture!(move x, ref y, clone z in move || x + *y + z)

becomes

    { let x = x; { let y = &y; { let z = z.clone(); move || x + *y + z } } }

ARCHITECTURAL GUARANTEE:
------------------------
All of this happens before the host program runs. This package never
looks inside the body, never infers capture modes, and never evaluates
anything on the host's behalf.

Layers:
    parser    -> text to CaptureList
    analyzer  -> aliasing validation and reports
    expander  -> CaptureList to scope chain
    backends  -> scope chain to Rust or Python text
    sites     -> rewriting invocation sites in source files
"""

__version__ = "0.1.0"
