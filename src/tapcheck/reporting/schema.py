"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "tapcheck report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "cases", "errors"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errors", "skipped", "ok", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errors": {"type": "integer"},
                "skipped": {"type": "integer"},
                "ok": {"type": "boolean"},
                "duration_s": {"type": "number"},
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["unit", "mode", "status", "assertions"],
                "properties": {
                    "unit": {"type": "string"},
                    "mode": {"type": "string", "enum": ["normal", "only", "skip"]},
                    "status": {"type": "string", "enum": ["passed", "failed", "error", "skipped"]},
                    "assertions": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["seq", "given", "should", "pass"],
                            "properties": {
                                "seq": {"type": "integer", "minimum": 1},
                                "given": {"type": "string"},
                                "should": {"type": "string"},
                                "pass": {"type": "boolean"},
                                "actual": {},
                                "expected": {},
                            },
                        },
                    },
                },
            },
        },
        "errors": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["unit", "kind", "message"],
                "properties": {
                    "unit": {"type": "string"},
                    "kind": {"type": "string", "enum": ["authoring", "uncaught", "incomplete"]},
                    "message": {"type": "string"},
                },
            },
        },
    },
}
