"""
Tagged documents and the canonical value normalizer.

Neptune answers openCypher requests with a JSON document whose numbers
are decoded into one of three subkinds (non-negative integer, negative
integer, float) instead of a single generic number. The rest of gcue
works on canonical values: plain ``None``/``bool``/``int``/``float``/
``str``/``list``/``dict`` trees. ``normalize`` bridges the two.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

# Canonical value tree shared by every consumer regardless of backend.
CanonicalValue = Union[None, bool, int, float, str, list, dict]

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)


class NumberKind(str, Enum):
    POS_INT = "pos_int"
    NEG_INT = "neg_int"
    FLOAT = "float"


@dataclass(frozen=True)
class Number:
    """A numeric document value tagged with its wire subkind."""

    kind: NumberKind
    value: int | float

    @classmethod
    def pos_int(cls, value: int) -> "Number":
        if not 0 <= value <= U64_MAX:
            raise ValueError(f"{value} is outside the unsigned 64-bit range")
        return cls(NumberKind.POS_INT, value)

    @classmethod
    def neg_int(cls, value: int) -> "Number":
        if not I64_MIN <= value < 0:
            raise ValueError(f"{value} is outside the negative signed 64-bit range")
        return cls(NumberKind.NEG_INT, value)

    @classmethod
    def floating(cls, value: float) -> "Number":
        return cls(NumberKind.FLOAT, float(value))


@dataclass(frozen=True)
class DocNull:
    pass


@dataclass(frozen=True)
class DocBool:
    value: bool


@dataclass(frozen=True)
class DocString:
    value: str


@dataclass(frozen=True)
class DocNumber:
    number: Number


@dataclass(frozen=True)
class DocArray:
    items: list["Document"] = field(default_factory=list)


@dataclass(frozen=True)
class DocObject:
    members: dict[str, "Document"] = field(default_factory=dict)


Document = Union[DocNull, DocBool, DocString, DocNumber, DocArray, DocObject]


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        # past the float range; carried as infinity and normalized to null
        return math.copysign(math.inf, value)


def _tag(value: Any) -> Document:
    """Tag a freshly decoded JSON value with its document kind."""
    if value is None:
        return DocNull()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return DocBool(value)
    if isinstance(value, int):
        if value >= 0:
            if value > U64_MAX:
                return DocNumber(Number.floating(_int_to_float(value)))
            return DocNumber(Number.pos_int(value))
        if value < I64_MIN:
            return DocNumber(Number.floating(_int_to_float(value)))
        return DocNumber(Number.neg_int(value))
    if isinstance(value, float):
        return DocNumber(Number.floating(value))
    if isinstance(value, str):
        return DocString(value)
    if isinstance(value, list):
        return DocArray([_tag(item) for item in value])
    if isinstance(value, dict):
        return DocObject({key: _tag(member) for key, member in value.items()})
    raise TypeError(f"cannot represent {type(value).__name__} as a document")


def decode_document(payload: str | bytes) -> Document:
    """Decode a JSON wire payload into a tagged document.

    Integers beyond the 64-bit ranges are carried as floats, the way
    the backend's own SDKs decode them; past the float range they
    become infinite and normalize to null. ``NaN`` and ``Infinity``
    literals are accepted.

    Raises:
        ValueError: If the payload is not valid JSON.
    """
    return _tag(json.loads(payload))


def number_to_value(number: Number) -> int | float | None:
    """Convert a tagged number; non-finite floats have no canonical form."""
    if number.kind is NumberKind.FLOAT:
        if math.isnan(number.value) or math.isinf(number.value):
            return None
        return float(number.value)
    return int(number.value)


def normalize(doc: Document) -> CanonicalValue:
    """Convert a tagged document into a canonical value tree.

    Total over every document shape; never raises.
    """
    if isinstance(doc, DocObject):
        return {key: normalize(value) for key, value in doc.members.items()}
    if isinstance(doc, DocArray):
        return [normalize(item) for item in doc.items]
    if isinstance(doc, DocString):
        return doc.value
    if isinstance(doc, DocBool):
        return doc.value
    if isinstance(doc, DocNumber):
        return number_to_value(doc.number)
    return None
