from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Tuple

from symserv.config.env import MAIN_BASE
from symserv.index.table import SymbolEntry
from symserv.catalog.records import (
    CatalogError, CatalogRecord, U64_MAX,
    parse_method, parse_string, parse_metadata, parse_metadata_method,
)

logger = logging.getLogger(__name__)

# Category key -> record parser, in insertion order
CATEGORIES: Tuple[Tuple[str, Callable[[Any, str], CatalogRecord]], ...] = (
    ("ScriptMethod", parse_method),
    ("ScriptString", parse_string),
    ("ScriptMetadata", parse_metadata),
    ("ScriptMetadataMethod", parse_metadata_method),
)


def _check_addresses(doc: Dict[str, Any]) -> None:
    # Raw address list is produced alongside the catalog but not used for lookups
    if "Addresses" not in doc:
        raise CatalogError("missing field `Addresses`")
    addrs = doc["Addresses"]
    if not isinstance(addrs, list):
        raise CatalogError("Addresses: expected an array")
    for i, a in enumerate(addrs):
        if isinstance(a, bool) or not isinstance(a, int) or not 0 <= a <= U64_MAX:
            raise CatalogError(f"Addresses[{i}]: expected an unsigned 64-bit integer, got {a!r}")


def parse_catalog(doc: Any) -> List[CatalogRecord]:
    """Validate a decoded catalog document and return its records.

    Order is Method, String, Metadata, Metadata-Method, each in file order.
    """
    if not isinstance(doc, dict):
        raise CatalogError(f"catalog root must be an object, got {type(doc).__name__}")
    records: List[CatalogRecord] = []
    for key, parse in CATEGORIES:
        if key not in doc:
            raise CatalogError(f"missing field `{key}`")
        items = doc[key]
        if not isinstance(items, list):
            raise CatalogError(f"{key}: expected an array")
        for i, raw in enumerate(items):
            records.append(parse(raw, f"{key}[{i}]"))
    _check_addresses(doc)
    return records


def normalize(records: Iterable[CatalogRecord], base: int = MAIN_BASE) -> List[SymbolEntry]:
    return [r.to_entry(base) for r in records]


def load_catalog(path: str | Path, base: int = MAIN_BASE) -> List[SymbolEntry]:
    """Read a catalog JSON file and flatten it into unsorted symbol entries.

    Raises CatalogError for unreadable files, invalid JSON and shape errors.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"cannot read {p}: {e}") from e
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"invalid JSON in {p}: {e}") from e
    records = parse_catalog(doc)
    counts = {key: len(doc[key]) for key, _ in CATEGORIES}
    logger.info("loaded %d symbols from %s (%s)", len(records), p,
                ", ".join(f"{k}={v}" for k, v in counts.items()))
    return normalize(records, base)
