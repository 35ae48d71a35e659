"""JSON Schema validation for the media manifest document.

This module loads the formal JSON Schema. Whole documents are checked by
the ``validate`` command; writes only check the entries they add.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError

from .types import ManifestDocument, ManifestEntry

# Shipped with the package: media_inventory/schemas/manifest.schema.json
SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "manifest.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> dict[str, Any]:
    """Load the JSON schema from disk.

    Returns:
        Dictionary containing the JSON Schema.

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema is invalid JSON
    """
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def validate_manifest(manifest: ManifestDocument) -> None:
    """Validate a manifest against the JSON Schema.

    Besides the schema, entry ids must be unique within the document.

    Args:
        manifest: The manifest dictionary to validate

    Raises:
        ValidationError: If the manifest doesn't conform to the schema
        FileNotFoundError: If schema file is missing
        json.JSONDecodeError: If schema is invalid
    """
    schema = load_schema()
    jsonschema.validate(instance=manifest, schema=schema)

    seen: set[str] = set()
    for index, entry in enumerate(manifest["items"]):
        entry_id = entry["id"]
        if entry_id in seen:
            raise ValidationError(
                f"Duplicate manifest id: {entry_id!r}",
                path=["items", index, "id"],
                instance=entry_id,
            )
        seen.add(entry_id)


def validate_entries(manifest: ManifestDocument, entries: list[ManifestEntry]) -> None:
    """Validate only the given entries of a manifest about to be written.

    Entries already on disk are left alone so one hand-edited record does
    not block every later write. Each given entry must match the entry
    schema and its id must occur exactly once in the document.

    Args:
        manifest: The full document the entries belong to
        entries: Entries added or changed by the current write

    Raises:
        ValidationError: If an entry doesn't conform or its id is duplicated
    """
    schema = load_schema()
    entry_schema = {"$ref": "#/definitions/entry", "definitions": schema["definitions"]}
    for entry in entries:
        jsonschema.validate(instance=entry, schema=entry_schema)

        entry_id = entry["id"]
        count = sum(1 for item in manifest["items"] if isinstance(item, dict) and item.get("id") == entry_id)
        if count != 1:
            raise ValidationError(
                f"Duplicate manifest id: {entry_id!r}",
                path=["items", "id"],
                instance=entry_id,
            )


def validate_manifest_with_error_details(manifest: ManifestDocument) -> tuple[bool, str | None]:
    """Validate a manifest and return detailed error information.

    This is a convenience wrapper that catches validation errors and
    returns user-friendly error messages.

    Args:
        manifest: The manifest dictionary to validate

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    try:
        validate_manifest(manifest)
        return True, None
    except ValidationError as e:
        # Build a detailed error message
        error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
        error_msg = f"Validation error at {error_path}: {e.message}"

        if e.instance:
            error_msg += f"\nInvalid value: {e.instance}"

        return False, error_msg
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return False, f"Schema error: {e}"
