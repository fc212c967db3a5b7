"""Backends for capture expansion output (Rust block expressions, Python lambdas)."""

from .python_generator import render_python
from .rust_generator import RenderMode, render_rust

__all__ = ["RenderMode", "render_python", "render_rust"]
