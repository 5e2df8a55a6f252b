# xiuchart/core/descriptors.py
"""
Mansion-relative boundary descriptors such as "斗宿11度".

Grammar: <mansion name> 宿 <degrees> [度], whitespace tolerated around each
part. Parsing is pure and memoised; resolution needs a year's longitude table.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Mapping, Union

from xiuchart.core.constants import wrap_deg
from xiuchart.core.errors import MalformedDescriptor, UnknownMansion
from xiuchart.core.mansions import MansionLongitude

__all__ = [
    "SEPARATOR",
    "UNIT",
    "MansionDescriptor",
    "parse_descriptor",
    "resolve_descriptor",
]

SEPARATOR = "宿"
UNIT = "度"


@dataclass(frozen=True)
class MansionDescriptor:
    mansion: str
    offset_deg: float
    text: str


def parse_descriptor(text: str) -> MansionDescriptor:
    if not isinstance(text, str):
        raise MalformedDescriptor(f"descriptor must be a string, got {type(text).__name__}")
    return _parse_text(text)


@lru_cache(maxsize=256)
def _parse_text(text: str) -> MansionDescriptor:
    parts = text.split(SEPARATOR)
    if len(parts) != 2:
        raise MalformedDescriptor(f"expected '<name>{SEPARATOR}<degrees>{UNIT}', got {text!r}")

    name = parts[0].strip()
    if not name:
        raise MalformedDescriptor(f"missing mansion name in {text!r}")

    number = parts[1].strip()
    if number.endswith(UNIT):
        number = number[: -len(UNIT)].rstrip()
    try:
        offset = float(number)
    except ValueError:
        raise MalformedDescriptor(f"bad degree value {number!r} in {text!r}") from None
    if not math.isfinite(offset):
        raise MalformedDescriptor(f"degree value must be finite in {text!r}")

    return MansionDescriptor(mansion=name, offset_deg=offset, text=text)


def _lookup(name: str, mansions: Union[Mapping[str, MansionLongitude], Iterable[MansionLongitude]]) -> MansionLongitude:
    if isinstance(mansions, Mapping):
        row = mansions.get(name)
        if row is None:
            raise UnknownMansion(name)
        return row
    for row in mansions:
        if row.name == name:
            return row
    raise UnknownMansion(name)


def resolve_descriptor(
    descriptor: Union[MansionDescriptor, str],
    mansions: Union[Mapping[str, MansionLongitude], Iterable[MansionLongitude]],
) -> float:
    """Absolute longitude in [0, 360): start of the named mansion plus the offset."""
    if isinstance(descriptor, str):
        descriptor = parse_descriptor(descriptor)
    row = _lookup(descriptor.mansion, mansions)
    return wrap_deg(row.start_longitude + descriptor.offset_deg)
