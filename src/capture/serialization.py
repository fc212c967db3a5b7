"""
Serialization helpers for capture lists (CaptureList, Clause, Body).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit.
Source offsets are not serialized.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from capture.clauses import (
    Body,
    CaptureList,
    CaptureMode,
    Clause,
    MethodClause,
    MoveClause,
    RefClause,
    RefMutClause,
)


def clause_to_dict(clause: Clause) -> Dict[str, Any]:
    if isinstance(clause, MethodClause):
        return {"mode": clause.mode.value, "method": clause.method_name, "identifier": clause.identifier}
    if isinstance(clause, (MoveClause, RefClause, RefMutClause)):
        return {"mode": clause.mode.value, "identifier": clause.identifier}
    raise TypeError(f"Unsupported Clause type: {type(clause)}")


def clause_from_dict(d: Dict[str, Any]) -> Clause:
    mode = CaptureMode(d.get("mode"))
    if mode == CaptureMode.MOVE:
        return MoveClause(d["identifier"])
    if mode == CaptureMode.REF:
        return RefClause(d["identifier"])
    if mode == CaptureMode.REF_MUT:
        return RefMutClause(d["identifier"])
    return MethodClause(d["method"], d["identifier"])


def capture_list_to_dict(c: CaptureList) -> Dict[str, Any]:
    return {
        "clauses": [clause_to_dict(clause) for clause in c.clauses],
        "body": c.body.text,
    }


def capture_list_from_dict(d: Dict[str, Any]) -> CaptureList:
    return CaptureList(
        clauses=tuple(clause_from_dict(clause) for clause in d.get("clauses", [])),
        body=Body(d["body"]),
    )


def capture_list_to_json(c: CaptureList) -> str:
    return json.dumps(capture_list_to_dict(c), sort_keys=True)


def capture_list_from_json(s: str) -> CaptureList:
    d = json.loads(s)
    return capture_list_from_dict(d)


def capture_list_to_yaml(c: CaptureList) -> str:
    return yaml.safe_dump(capture_list_to_dict(c), sort_keys=False)


def capture_list_from_yaml(s: str) -> CaptureList:
    d = yaml.safe_load(s)
    return capture_list_from_dict(d)
