import json
from pathlib import Path
from typing import Any

from datavalidator.logging.logger import Log
from datavalidator.terms.exceptions import TermDictionaryError
from datavalidator.terms.models import RowTypeDefinition, TermDefinition, TermDictionary

_DEFAULT_DEFINITIONS_DIR = Path(__file__).parent / "definitions"


def load_term_dictionary(path: Path | None = None) -> TermDictionary:
    """Load every ``*.json`` row type definition in a directory.

    Args:
        path: Directory holding the definitions.
              Defaults to the bundled definitions directory.

    Raises:
        TermDictionaryError: if the directory or a definition cannot be read,
            or two definitions declare the same row type.
    """
    if path is None:
        path = _DEFAULT_DEFINITIONS_DIR
    if not path.is_dir():
        raise TermDictionaryError(f"Term definitions directory not found: {path}")

    definitions: dict[str, RowTypeDefinition] = {}
    for definition_file in sorted(path.glob("*.json")):
        definition = _load_definition(definition_file)
        if definition.row_type in definitions:
            raise TermDictionaryError(
                f"Row type {definition.row_type} defined twice ({definition_file.name})"
            )
        definitions[definition.row_type] = definition
    if not definitions:
        raise TermDictionaryError(f"No term definitions found in {path}")

    Log.info(f"Loaded {len(definitions)} row type definitions from {path}")
    return TermDictionary(row_types=definitions)


def _load_definition(path: Path) -> RowTypeDefinition:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise TermDictionaryError(f"Failed to load {path.name}: {exc}") from exc
    return _build_definition(raw, path.name)


def _build_definition(raw: Any, source: str) -> RowTypeDefinition:
    if not isinstance(raw, dict):
        raise TermDictionaryError(f"{source}: definition must be an object")
    row_type = raw.get("rowType")
    if not row_type or not isinstance(row_type, str):
        raise TermDictionaryError(f"{source}: 'rowType' must be a non-empty string")
    terms_raw = raw.get("terms")
    if not isinstance(terms_raw, list):
        raise TermDictionaryError(f"{source}: 'terms' must be a list")

    terms: list[TermDefinition] = []
    for i, item in enumerate(terms_raw):
        if not isinstance(item, dict) or not isinstance(item.get("qualName"), str):
            raise TermDictionaryError(f"{source}: term at index {i} needs a 'qualName'")
        terms.append(
            TermDefinition(
                qualified_name=item["qualName"],
                required=bool(item.get("required", False)),
            )
        )
    return RowTypeDefinition(
        row_type=row_type,
        name=str(raw.get("name") or row_type),
        identifier_term=raw.get("identifierTerm"),
        terms=tuple(terms),
    )
