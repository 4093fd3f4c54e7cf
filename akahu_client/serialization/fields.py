"""
Codec primitives and the per-field table machinery.

Every entity is described by an explicit table of `Field` rows: Python
attribute, wire key, codec and whether the key is required. `ObjectCodec`
walks that table in both directions, so renames such as `_id` -> `id` are
declared once per field instead of being derived by a naming rule.

Absence policy:
- required field absent or null -> DecodeError naming the field path
- optional field absent or null -> None, and stays absent when re-encoded
- optional list present but empty -> (), re-encoded as []
- keys that are not in the table -> ignored
"""

import json
import re
from dataclasses import dataclass, fields as dataclass_fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, Protocol, Sequence, TypeVar

from akahu_client.domain.currencies import is_currency_code
from akahu_client.domain.exceptions import DecodeError
from akahu_client.utils.date_utils import format_timestamp, parse_timestamp

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

ROOT = "$"


def join_path(path: str, key: str) -> str:
    return key if path == ROOT else f"{path}.{key}"


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


_JSON_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")


def load_json(body: bytes) -> Any:
    """Parse a response body; JSON numbers with a fraction become Decimal, never float"""
    try:
        return json.loads(body, parse_float=Decimal)
    except ValueError as e:
        raise DecodeError(ROOT, f"invalid JSON: {e}", body=body) from e


def dump_json(value: Any) -> bytes:
    """
    Serialize encoder output. Decimals are written as JSON numbers digit for
    digit, so amounts never pass through float on the way out either.
    """
    return _dump(value).encode()


def _dump(value: Any) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, Mapping):
        members = (f"{json.dumps(str(key))}: {_dump(item)}" for key, item in value.items())
        return "{" + ", ".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_dump(item) for item in value) + "]"
    return json.dumps(value)


class Codec(Protocol[T]):
    def decode(self, value: Any, path: str) -> T: ...

    def encode(self, value: T) -> Any: ...


class StringCodec:
    def decode(self, value: Any, path: str) -> str:
        if not isinstance(value, str):
            raise DecodeError(path, f"expected a string, got {type(value).__name__}")
        return value

    def encode(self, value: str) -> str:
        return value


class BoolCodec:
    def decode(self, value: Any, path: str) -> bool:
        if not isinstance(value, bool):
            raise DecodeError(path, f"expected a boolean, got {type(value).__name__}")
        return value

    def encode(self, value: bool) -> bool:
        return value


class DecimalCodec:
    """
    Arbitrary-precision amounts from JSON numbers or numeric strings.

    Floats are refused outright: a float has already been rounded to binary.
    Strings must be spelled as JSON numbers (no underscores, no "Infinity").
    Encodes to the Decimal itself; `dump_json` writes it as a JSON number.
    """

    def decode(self, value: Any, path: str) -> Decimal:
        if isinstance(value, bool):
            raise DecodeError(path, "expected a decimal amount, got bool")
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, int):
            amount = Decimal(value)
        elif isinstance(value, str):
            if not _JSON_NUMBER.fullmatch(value):
                raise DecodeError(path, f"not a decimal amount: {value!r}")
            amount = Decimal(value)
        elif isinstance(value, float):
            raise DecodeError(path, "floating-point amount would lose precision")
        else:
            raise DecodeError(path, f"expected a decimal amount, got {type(value).__name__}")
        if not amount.is_finite():
            raise DecodeError(path, f"amount must be finite, got {value!r}")
        return amount

    def encode(self, value: Decimal) -> Decimal:
        return value


class TimestampCodec:
    """ISO 8601 timestamps, normalised to UTC"""

    def decode(self, value: Any, path: str) -> datetime:
        if not isinstance(value, str):
            raise DecodeError(path, f"expected an ISO 8601 timestamp, got {type(value).__name__}")
        try:
            return parse_timestamp(value)
        except ValueError as e:
            raise DecodeError(path, str(e)) from e

    def encode(self, value: datetime) -> str:
        if value.microsecond % 1000:
            return value.isoformat().replace("+00:00", "Z")
        return format_timestamp(value)


class CurrencyCodec:
    """ISO 4217 code; an unknown code is an error, not a default"""

    def decode(self, value: Any, path: str) -> str:
        if not is_currency_code(value):
            raise DecodeError(path, f"unknown ISO 4217 currency code {value!r}")
        return value

    def encode(self, value: str) -> str:
        return value


class EnumCodec(Generic[E]):
    """Closed enumeration; values outside it are decode errors"""

    def __init__(self, enum_cls: type[E]):
        self.enum_cls = enum_cls

    def decode(self, value: Any, path: str) -> E:
        try:
            return self.enum_cls(value)
        except ValueError:
            raise DecodeError(path, f"unknown {self.enum_cls.__name__} value {value!r}") from None

    def encode(self, value: E) -> Any:
        return value.value


class ListCodec(Generic[T]):
    def __init__(self, item: Codec[T]):
        self.item = item

    def decode(self, value: Any, path: str) -> tuple[T, ...]:
        if not isinstance(value, list):
            raise DecodeError(path, f"expected an array, got {type(value).__name__}")
        return tuple(self.item.decode(entry, index_path(path, i)) for i, entry in enumerate(value))

    def encode(self, value: Sequence[T]) -> list[Any]:
        return [self.item.encode(entry) for entry in value]


def freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class RawCodec:
    """Passes integration-specific JSON through as read-only mappings/tuples"""

    def decode(self, value: Any, path: str) -> Any:
        return freeze(value)

    def encode(self, value: Any) -> Any:
        return thaw(value)


@dataclass(frozen=True)
class Field:
    """One row of an entity's codec table"""

    attr: str
    wire: str
    codec: Codec[Any]
    required: bool = True


def required(attr: str, wire: str, codec: Codec[Any]) -> Field:
    return Field(attr, wire, codec, required=True)


def optional(attr: str, wire: str, codec: Codec[Any]) -> Field:
    return Field(attr, wire, codec, required=False)


def optional_list(attr: str, wire: str, codec: Codec[Any]) -> Field:
    return Field(attr, wire, ListCodec(codec), required=False)


class ObjectCodec(Generic[T]):
    """
    Decode/encode a JSON object through a field table.

    By default rows map 1:1 onto the dataclass attributes of `cls`.
    `assemble` / `disassemble` replace that mapping for entities whose shape
    differs from the wire (e.g. an amount and a currency key that become one
    Money value). Invariant violations raised by the entity constructor
    (ValueError) are reported as DecodeError at the object's path.
    """

    def __init__(
        self,
        cls: type[T],
        table: Sequence[Field],
        assemble: Callable[[dict[str, Any]], T] | None = None,
        disassemble: Callable[[T], dict[str, Any]] | None = None,
    ):
        self.cls = cls
        self.table = tuple(table)
        self._assemble = assemble or (lambda attrs: cls(**attrs))
        self._disassemble = disassemble or self._attributes

    def _attributes(self, obj: T) -> dict[str, Any]:
        names = {f.name for f in dataclass_fields(obj)}
        return {row.attr: getattr(obj, row.attr) for row in self.table if row.attr in names}

    def decode(self, value: Any, path: str) -> T:
        if not isinstance(value, Mapping):
            raise DecodeError(path, f"expected an object, got {type(value).__name__}")
        attrs: dict[str, Any] = {}
        for row in self.table:
            row_path = join_path(path, row.wire)
            raw = value.get(row.wire)
            if raw is None:
                if row.required:
                    reason = "required field is missing" if row.wire not in value else "required field is null"
                    raise DecodeError(row_path, reason)
                attrs[row.attr] = None
            else:
                attrs[row.attr] = row.codec.decode(raw, row_path)
        try:
            return self._assemble(attrs)
        except ValueError as e:
            raise DecodeError(path, str(e)) from e

    def encode(self, value: T) -> dict[str, Any]:
        attrs = self._disassemble(value)
        out: dict[str, Any] = {}
        for row in self.table:
            item = attrs.get(row.attr)
            if item is None:
                continue
            out[row.wire] = row.codec.encode(item)
        return out


STRING = StringCodec()
BOOL = BoolCodec()
DECIMAL = DecimalCodec()
TIMESTAMP = TimestampCodec()
CURRENCY = CurrencyCodec()
RAW = RawCodec()
