"""
Tests for the Capture Analyzer.

Tests verify that the analyzer correctly:
    - Accepts ordinary shadowing (move then ref, method after anything)
    - Detects mutable references aliased with other references
    - Applies the strict and shadow policies
    - Reports clause inventory and warnings
"""

import logging

import pytest
from capture.analyzer import (
    AliasConflictError,
    AliasPolicy,
    BorrowState,
    analyze_capture_list,
    check_aliasing,
    find_alias_conflicts,
)
from capture.parser import CaptureSyntaxError, parse_capture_list


class TestAliasConflicts:
    """Which clause sequences alias a mutable reference."""

    @pytest.mark.parametrize("text", [
        "move x, ref x in x",
        "ref x, ref x in x",
        "ref mut x, move x in x",
        "ref mut x, clone x, ref x in x",
        "ref x, clone x, ref mut x in x",
        "ref mut a, ref mut b in (a, b)",
        "ref mut x, to_owned x, ref mut x in x",
    ])
    def test_allowed(self, text):
        assert find_alias_conflicts(parse_capture_list(text)) == []

    @pytest.mark.parametrize("text,state", [
        ("ref mut x, ref x in x", BorrowState.MUTABLE),
        ("ref mut x, ref mut x in x", BorrowState.MUTABLE),
        ("ref x, ref mut x in x", BorrowState.SHARED),
        ("ref mut x, move x, ref x in x", BorrowState.MUTABLE),
    ])
    def test_conflicting(self, text, state):
        conflicts = find_alias_conflicts(parse_capture_list(text))
        assert len(conflicts) == 1
        assert conflicts[0].identifier == "x"
        assert conflicts[0].previous_state == state

    def test_conflict_points_at_clause(self):
        capture_list = parse_capture_list("move a, ref mut x, ref x in x")
        conflict = find_alias_conflicts(capture_list)[0]
        assert conflict.clause_index == 2
        assert conflict.clause is capture_list.clauses[2]

    def test_every_conflict_collected(self):
        capture_list = parse_capture_list("ref mut x, ref x, ref mut x in x")
        assert len(find_alias_conflicts(capture_list)) == 2


class TestPolicies:
    """Strict rejects, shadow warns."""

    def test_strict_raises(self):
        capture_list = parse_capture_list("ref mut y, ref y in *y")
        with pytest.raises(AliasConflictError) as excinfo:
            check_aliasing(capture_list, AliasPolicy.STRICT)
        assert excinfo.value.conflict.identifier == "y"

    def test_conflict_is_malformed_input(self):
        """Alias conflicts are the same error category as syntax errors."""
        capture_list = parse_capture_list("ref y, ref mut y in *y")
        with pytest.raises(CaptureSyntaxError):
            check_aliasing(capture_list)

    def test_strict_is_default(self):
        capture_list = parse_capture_list("ref mut y, ref y in *y")
        with pytest.raises(AliasConflictError):
            check_aliasing(capture_list)

    def test_shadow_logs_warning(self, caplog):
        capture_list = parse_capture_list("ref mut y, ref y in *y")
        with caplog.at_level(logging.WARNING, logger="capture.analyzer"):
            check_aliasing(capture_list, AliasPolicy.SHADOW)
        assert "aliases 'y'" in caplog.text

    def test_clean_list_passes_both(self):
        capture_list = parse_capture_list("move x, ref y, clone z in x")
        check_aliasing(capture_list, AliasPolicy.STRICT)
        check_aliasing(capture_list, AliasPolicy.SHADOW)


class TestReport:
    """Inventory reports."""

    def test_counts(self):
        report = analyze_capture_list(parse_capture_list("move x, ref y, clone z in move || x + *y + z"))
        assert report.total_clauses == 3
        assert report.mode_counts == {"move": 1, "ref": 1, "ref mut": 0, "method": 1}
        assert report.identifiers == ["x", "y", "z"]
        assert report.methods == ["clone"]
        assert report.shadowed_identifiers == []
        assert report.warnings == []

    def test_empty_clause_list_warns(self):
        report = analyze_capture_list(parse_capture_list("in 42"))
        assert report.total_clauses == 0
        assert report.body_length == 2
        assert any("No capture clauses" in w for w in report.warnings)

    def test_shadowed_identifier(self):
        report = analyze_capture_list(parse_capture_list("move x, ref x in x"))
        assert report.identifiers == ["x"]
        assert report.shadowed_identifiers == ["x"]
        assert any("more than once" in w for w in report.warnings)

    def test_conflicts_in_report(self):
        report = analyze_capture_list(parse_capture_list("ref mut x, ref x in x"))
        assert len(report.conflicts) == 1
        assert any("Alias conflict" in w for w in report.warnings)

    def test_warnings_not_duplicated(self):
        report = analyze_capture_list(parse_capture_list("in x"))
        report.add_warning(report.warnings[0])
        assert len(report.warnings) == 1
