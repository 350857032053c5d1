from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union


class TruncationStrategy(str, Enum):
    NONE = "none"
    TRUNCATE = "truncate"
    ELLIPSIS = "ellipsis"
    ERROR = "error"


class PadDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


@dataclass(frozen=True)
class Field:
    position: int
    value: str
    # Always wrap in the enclosure on output (DATEV text columns).
    quoted: bool = False

    def __post_init__(self):
        if self.position < 0:
            raise ValueError(f"Field position must be >= 0, got {self.position}")
        if not isinstance(self.value, str):
            raise TypeError(f"Field value must be str, got {type(self.value).__name__}")


def renumber(fields: Iterable[Field]) -> tuple[Field, ...]:
    return tuple(
        f if f.position == idx else replace(f, position=idx) for idx, f in enumerate(fields)
    )


@dataclass(frozen=True)
class Line:
    fields: tuple[Field, ...] = ()

    def __post_init__(self):
        fields = tuple(self.fields)
        for idx, f in enumerate(fields):
            if f.position != idx:
                raise ValueError(f"Field at index {idx} has position {f.position}")
        object.__setattr__(self, "fields", fields)

    @classmethod
    def from_values(
        cls,
        values: Iterable[str],
        *,
        quoted: Union[bool, Sequence[bool]] = False,
        **kwargs,
    ):
        values = list(values)
        flags = [quoted] * len(values) if isinstance(quoted, bool) else list(quoted)
        if len(flags) != len(values):
            raise ValueError("quoted flags must match the number of values")
        fields = tuple(Field(idx, v, q) for idx, (v, q) in enumerate(zip(values, flags)))
        return cls(fields, **kwargs)

    def values(self) -> List[str]:
        return [f.value for f in self.fields]

    def field_at(self, index: int) -> Optional[Field]:
        if 0 <= index < len(self.fields):
            return self.fields[index]
        return None

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class HeaderLine(Line):
    def names(self) -> List[str]:
        return self.values()

    def index_of(self, name: str) -> int:
        # First occurrence wins for duplicated names.
        for f in self.fields:
            if f.value == name:
                return f.position
        return -1


@dataclass(frozen=True)
class DataLine(Line):
    # Lookup only; never part of equality.
    header: Optional[HeaderLine] = field(default=None, compare=False, repr=False)

    def with_header(self, header: Optional[HeaderLine]) -> "DataLine":
        return replace(self, header=header)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        if self.header is None:
            return default
        f = self.field_at(self.header.index_of(name))
        return f.value if f is not None else default
