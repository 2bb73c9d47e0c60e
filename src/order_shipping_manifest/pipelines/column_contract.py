# src/order_shipping_manifest/pipelines/column_contract.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

# One manifest line: exactly one string per profile column
ExportRow = tuple[str, ...]


@dataclass(frozen=True)
class RowContext:
    """Caller-supplied values shared by every row of one export run."""
    shipment_type: str = "0"
    today: dt.date = field(default_factory=dt.date.today)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class ColumnSpec:
    """
    A single manifest column. Exactly one source is used:
      - kind="constant": `value`
      - kind="field":    dotted attribute path on the order (`path`)
      - kind="param":    attribute of the RowContext (`path`)
      - kind="derived":  `fn(order, ctx)`
    A missing source value renders as "" so the row keeps its shape.
    """
    kind: str
    header: str = ""
    value: str = ""
    path: str = ""
    fn: Optional[Callable[[Any, RowContext], Any]] = None

    @classmethod
    def constant(cls, value: str, header: str = "") -> "ColumnSpec":
        return cls("constant", header=header, value=value)

    @classmethod
    def blank(cls, header: str = "") -> "ColumnSpec":
        return cls("constant", header=header, value="")

    @classmethod
    def field(cls, path: str, header: str = "") -> "ColumnSpec":
        return cls("field", header=header, path=path)

    @classmethod
    def param(cls, name: str, header: str = "") -> "ColumnSpec":
        return cls("param", header=header, path=name)

    @classmethod
    def derived(cls, fn: Callable[[Any, RowContext], Any], header: str = "") -> "ColumnSpec":
        return cls("derived", header=header, fn=fn)

    def render(self, order: Any, ctx: RowContext) -> str:
        if self.kind == "constant":
            return self.value
        if self.kind == "field":
            try:
                return _cell(attrgetter(self.path)(order))
            except AttributeError:
                return ""
        if self.kind == "param":
            return _cell(getattr(ctx, self.path, ""))
        if self.kind == "derived" and self.fn is not None:
            return _cell(self.fn(order, ctx))
        raise ValueError(f"Unknown column kind: {self.kind!r}")


def layout(
    count: int,
    populated: Mapping[int, ColumnSpec],
    headers: Optional[Sequence[str]] = None,
) -> list[ColumnSpec]:
    """
    Expand a sparse {1-based position: spec} mapping into `count` ordered
    columns; every position not listed is a blank column. Header names (when
    given) are attached by position.
    """
    bad = [p for p in populated if not 1 <= p <= count]
    if bad:
        raise ValueError(f"Column positions out of range 1..{count}: {sorted(bad)}")

    cols: list[ColumnSpec] = []
    for pos in range(1, count + 1):
        spec = populated.get(pos, ColumnSpec.blank())
        if headers is not None:
            spec = ColumnSpec(spec.kind, header=headers[pos - 1], value=spec.value, path=spec.path, fn=spec.fn)
        cols.append(spec)
    return cols


class CarrierProfile:
    """
    Fixed ordered column schema of one carrier's manifest portal.

    The column count is checked once, here, so every serialized row is known
    to have `column_count` cells.
    """

    def __init__(
        self,
        name: str,
        columns: Iterable[ColumnSpec],
        *,
        column_count: int,
        filename: str,
        container: str = "csv",
        with_header: bool = True,
    ) -> None:
        self.name = name
        self.columns: tuple[ColumnSpec, ...] = tuple(columns)
        self.column_count = int(column_count)
        self.filename = filename
        self.container = container
        self.with_header = with_header

        if len(self.columns) != self.column_count:
            raise ValueError(
                f"{name}: expected {self.column_count} columns, got {len(self.columns)}")
        if with_header and any(not c.header for c in self.columns):
            raise ValueError(f"{name}: header row requested but some columns are unnamed")

    @property
    def header(self) -> Optional[ExportRow]:
        if not self.with_header:
            return None
        return tuple(c.header for c in self.columns)

    def serialize(self, order: Any, ctx: Optional[RowContext] = None) -> ExportRow:
        ctx = ctx or RowContext()
        return tuple(c.render(order, ctx) for c in self.columns)

    def serialize_all(self, orders: Iterable[Any], ctx: Optional[RowContext] = None) -> list[ExportRow]:
        ctx = ctx or RowContext()
        return [self.serialize(o, ctx) for o in orders]

    def __repr__(self) -> str:
        return f"CarrierProfile({self.name!r}, columns={self.column_count})"
