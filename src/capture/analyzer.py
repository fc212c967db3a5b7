"""
Capture Analyzer: aliasing validation and inventory of capture lists.

This module provides:
    - The explicit aliasing check (mutable references must not coexist
      with any other live reference to the same name in one chain)
    - A lightweight report: clause counts per mode, shadowed names,
      conflicts and warnings

IMPORTANT: This is the analysis layer. It does NOT modify the capture list.
It either raises (strict policy) or produces read-only reports.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from capture.clauses import CaptureList, CaptureMode, Clause
from capture.parser import CaptureSyntaxError

logger = logging.getLogger(__name__)


class AliasPolicy(Enum):
    """What to do when a clause would alias a mutable reference."""
    STRICT = "strict"   # reject as malformed input
    SHADOW = "shadow"   # accept, each clause just shadows the last binding


class BorrowState(Enum):
    """What a name is bound to at a given point of the chain."""
    OWNED = "owned"
    SHARED = "shared"
    MUTABLE = "mutable"


class AliasConflictError(CaptureSyntaxError):
    """Raised when a clause sequence aliases a mutable reference."""

    def __init__(self, conflict: AliasConflict):
        self.conflict = conflict
        super().__init__(conflict.describe(), conflict.clause.offset)


@dataclass
class AliasConflict:
    """One clause that would create a second live reference next to a mutable one."""
    identifier: str
    clause: Clause
    clause_index: int
    previous_state: BorrowState

    def describe(self) -> str:
        return (
            f"Clause {self.clause_index + 1} ('{self.clause.mode.value} {self.identifier}') "
            f"aliases '{self.identifier}', which is already bound to a "
            f"{self.previous_state.value} reference"
        )


def _next_state(state: BorrowState, mode: CaptureMode) -> Optional[BorrowState]:
    """
    Borrow state after applying `mode`, or None if the clause conflicts.

    move keeps whatever the name is bound to; a method call produces a
    fresh owned value.
    """
    if mode == CaptureMode.MOVE:
        return state
    if mode == CaptureMode.METHOD:
        return BorrowState.OWNED
    if mode == CaptureMode.REF:
        if state == BorrowState.MUTABLE:
            return None
        return BorrowState.SHARED
    if mode == CaptureMode.REF_MUT:
        if state in (BorrowState.SHARED, BorrowState.MUTABLE):
            return None
        return BorrowState.MUTABLE
    raise ValueError(f"Unsupported capture mode: {mode}")


def find_alias_conflicts(capture_list: CaptureList) -> List[AliasConflict]:
    """Walk the chain in order and collect every aliasing conflict."""
    states: Dict[str, BorrowState] = defaultdict(lambda: BorrowState.OWNED)
    conflicts: List[AliasConflict] = []

    for index, clause in enumerate(capture_list.clauses):
        previous = states[clause.identifier]
        new_state = _next_state(previous, clause.mode)
        if new_state is None:
            conflicts.append(AliasConflict(
                identifier=clause.identifier,
                clause=clause,
                clause_index=index,
                previous_state=previous,
            ))
            # Under shadowing, the later clause still wins
            new_state = (BorrowState.MUTABLE if clause.mode == CaptureMode.REF_MUT
                         else BorrowState.SHARED)
        states[clause.identifier] = new_state

    return conflicts


def check_aliasing(capture_list: CaptureList, policy: AliasPolicy = AliasPolicy.STRICT) -> None:
    """
    Validate the aliasing discipline of a capture list.

    Raises:
        AliasConflictError: On the first conflict, under AliasPolicy.STRICT
    """
    conflicts = find_alias_conflicts(capture_list)
    if not conflicts:
        return

    if policy == AliasPolicy.STRICT:
        raise AliasConflictError(conflicts[0])

    for conflict in conflicts:
        logger.warning("Shadowing past a mutable alias: %s", conflict.describe())


@dataclass
class CaptureReport:
    """Inventory of a single capture list."""

    total_clauses: int = 0
    mode_counts: Dict[str, int] = field(default_factory=dict)
    identifiers: List[str] = field(default_factory=list)
    shadowed_identifiers: List[str] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)
    conflicts: List[AliasConflict] = field(default_factory=list)
    body_length: int = 0

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_capture_list(capture_list: CaptureList) -> CaptureReport:
    """
    Inventory a capture list.

    Checks for:
    - Clause counts per capture mode
    - Names captured more than once (shadowed)
    - Mutable aliasing conflicts
    - Capture lists with no clauses

    Returns a CaptureReport with metrics and warnings.
    """
    report = CaptureReport(total_clauses=len(capture_list.clauses))
    report.mode_counts = {mode.value: 0 for mode in CaptureMode}

    for clause in capture_list.clauses:
        report.mode_counts[clause.mode.value] += 1
        if clause.mode == CaptureMode.METHOD and clause.method_name not in report.methods:
            report.methods.append(clause.method_name)

    report.identifiers = list(dict.fromkeys(capture_list.identifiers()))
    report.shadowed_identifiers = [
        name for name in report.identifiers if len(capture_list.clauses_for(name)) > 1
    ]
    report.conflicts = find_alias_conflicts(capture_list)
    report.body_length = len(capture_list.body.text)

    if report.total_clauses == 0:
        report.add_warning("No capture clauses: expansion is the body unchanged")

    if report.shadowed_identifiers:
        report.add_warning(
            f"Captured more than once: {', '.join(report.shadowed_identifiers)}"
        )

    for conflict in report.conflicts:
        report.add_warning(f"Alias conflict: {conflict.describe()}")

    return report


__all__ = [
    "AliasPolicy",
    "AliasConflict",
    "AliasConflictError",
    "BorrowState",
    "CaptureReport",
    "analyze_capture_list",
    "check_aliasing",
    "find_alias_conflicts",
]
