from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from symserv.config.env import MAIN_BASE
from symserv.index.table import SymbolEntry, format_hex

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U64_MAX = (1 << 64) - 1


class CatalogError(ValueError):
    """Raised when the symbol catalog cannot be read or has the wrong shape."""


@dataclass(frozen=True)
class MethodRecord:
    address: int
    name: str
    signature: str
    type_signature: str

    def to_entry(self, base: int = MAIN_BASE) -> SymbolEntry:
        return SymbolEntry(self.address, self.signature)


@dataclass(frozen=True)
class StringRecord:
    address: int
    value: str

    def to_entry(self, base: int = MAIN_BASE) -> SymbolEntry:
        return SymbolEntry(self.address, self.value)


@dataclass(frozen=True)
class MetadataRecord:
    address: int
    name: str
    signature: Optional[str] = None

    def to_entry(self, base: int = MAIN_BASE) -> SymbolEntry:
        return SymbolEntry(self.address, f"({self.signature or ''}) {self.name}")


@dataclass(frozen=True)
class MetadataMethodRecord:
    address: int
    name: str
    method_address: int

    def to_entry(self, base: int = MAIN_BASE) -> SymbolEntry:
        return SymbolEntry(self.address, f"{self.name} @ {format_hex(base + self.method_address)}")


CatalogRecord = Union[MethodRecord, StringRecord, MetadataRecord, MetadataMethodRecord]


def _field(raw: Dict[str, Any], key: str, where: str) -> Any:
    if key not in raw:
        raise CatalogError(f"{where}: missing field `{key}`")
    return raw[key]


def _int(raw: Dict[str, Any], key: str, where: str, lo: int = I64_MIN, hi: int = I64_MAX) -> int:
    v = _field(raw, key, where)
    # bool is an int subclass; JSON true/false is not an address
    if isinstance(v, bool) or not isinstance(v, int):
        raise CatalogError(f"{where}: field `{key}` must be an integer, got {v!r}")
    if not lo <= v <= hi:
        raise CatalogError(f"{where}: field `{key}` out of range: {v}")
    return v


def _str(raw: Dict[str, Any], key: str, where: str) -> str:
    v = _field(raw, key, where)
    if not isinstance(v, str):
        raise CatalogError(f"{where}: field `{key}` must be a string, got {v!r}")
    try:
        v.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogate escapes such as "\ud800" decode but are not text
        raise CatalogError(f"{where}: field `{key}` is not valid UTF-8 text")
    return v


def _opt_str(raw: Dict[str, Any], key: str, where: str) -> Optional[str]:
    if raw.get(key) is None:
        return None
    return _str(raw, key, where)


def _obj(raw: Any, where: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where}: expected an object, got {type(raw).__name__}")
    return raw


def parse_method(raw: Any, where: str = "ScriptMethod") -> MethodRecord:
    r = _obj(raw, where)
    return MethodRecord(
        address=_int(r, "Address", where),
        name=_str(r, "Name", where),
        signature=_str(r, "Signature", where),
        type_signature=_str(r, "TypeSignature", where),
    )


def parse_string(raw: Any, where: str = "ScriptString") -> StringRecord:
    r = _obj(raw, where)
    return StringRecord(address=_int(r, "Address", where), value=_str(r, "Value", where))


def parse_metadata(raw: Any, where: str = "ScriptMetadata") -> MetadataRecord:
    r = _obj(raw, where)
    return MetadataRecord(
        address=_int(r, "Address", where),
        name=_str(r, "Name", where),
        signature=_opt_str(r, "Signature", where),
    )


def parse_metadata_method(raw: Any, where: str = "ScriptMetadataMethod") -> MetadataMethodRecord:
    r = _obj(raw, where)
    return MetadataMethodRecord(
        address=_int(r, "Address", where),
        name=_str(r, "Name", where),
        method_address=_int(r, "MethodAddress", where),
    )
