"""
Shared fixtures.

`evaluate` expands a capture list for the Python target and runs the
generated expression, so tests can check behaviour and not only text.
"""

import pytest
from capture.config import CaptureConfig
from capture.expander import expand
from capture.runtime import MutRef, SharedRef


def _evaluate(text, namespace, config=None):
    config = config or CaptureConfig()
    source = expand(text, target="python", config=config)

    scope = dict(namespace)
    scope.setdefault(config.ref_type, SharedRef)
    scope.setdefault(config.ref_mut_type, MutRef)
    return eval(compile(source, "<capture>", "eval"), scope)


@pytest.fixture
def evaluate():
    return _evaluate
