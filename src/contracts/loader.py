"""Schema loading utilities for puzzle tables."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import jsonschema

SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
_CATALOG_PATH = SCHEMA_ROOT / "catalog.json"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Catalog entry for one puzzle table kind."""

    table_kind: str
    version: str
    schema_id: str
    schema_path: str


_catalog_cache: Dict[str, SchemaDescriptor] | None = None
_schema_cache: Dict[str, Dict[str, Any]] = {}
_compiled_cache: Dict[str, jsonschema.Draft202012Validator] = {}


def load_catalog() -> Dict[str, SchemaDescriptor]:
    """Load and cache the schema catalog."""

    global _catalog_cache
    if _catalog_cache is not None:
        return _catalog_cache

    raw_catalog = json.loads(_CATALOG_PATH.read_text("utf-8"))
    catalog: Dict[str, SchemaDescriptor] = {}
    for table_kind, payload in raw_catalog.items():
        catalog[table_kind] = SchemaDescriptor(
            table_kind=table_kind,
            version=payload["version"],
            schema_id=payload["schema_id"],
            schema_path=payload["schema_path"],
        )
    _catalog_cache = catalog
    return catalog


def get_descriptor(table_kind: str) -> SchemaDescriptor:
    catalog = load_catalog()
    if table_kind not in catalog:
        raise KeyError(f"Unknown puzzle table kind: {table_kind}")
    return catalog[table_kind]


def load_schema(descriptor: SchemaDescriptor) -> Dict[str, Any]:
    """Return a copy of the schema described by ``descriptor``."""

    if "://" in descriptor.schema_path:
        raise ValueError("Remote schema paths are not permitted")

    resolved = (SCHEMA_ROOT / descriptor.schema_path).resolve()
    if not resolved.is_relative_to(SCHEMA_ROOT):
        raise ValueError("Schema path escapes the schemas directory")

    if descriptor.schema_id not in _schema_cache:
        schema = json.loads(resolved.read_text("utf-8"))
        if schema.get("$id", descriptor.schema_id) != descriptor.schema_id:
            raise ValueError(
                f"Schema id mismatch: catalog has {descriptor.schema_id!r}, schema has {schema['$id']!r}"
            )
        _schema_cache[descriptor.schema_id] = schema
    return copy.deepcopy(_schema_cache[descriptor.schema_id])


def compiled_validator(table_kind: str) -> jsonschema.Draft202012Validator:
    """Return a cached Draft 2020-12 validator for ``table_kind``."""

    descriptor = get_descriptor(table_kind)
    if descriptor.schema_id not in _compiled_cache:
        schema = load_schema(descriptor)
        jsonschema.Draft202012Validator.check_schema(schema)
        _compiled_cache[descriptor.schema_id] = jsonschema.Draft202012Validator(schema)
    return _compiled_cache[descriptor.schema_id]


__all__ = [
    "SCHEMA_ROOT",
    "SchemaDescriptor",
    "compiled_validator",
    "get_descriptor",
    "load_catalog",
    "load_schema",
]
