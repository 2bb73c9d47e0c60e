# src/order_shipping_manifest/models/tags.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Iterator, Union


class TagSet:
    """
    Immutable set of tag strings.

    Uniqueness is enforced; insertion order is kept for display only, so two
    TagSets (or a TagSet and a plain set/frozenset) compare equal whenever they
    hold the same tags.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()) -> None:
        if isinstance(tags, str):
            tags = (tags,)
        # dict keeps first-seen order while dropping duplicates
        self._tags: tuple[str, ...] = tuple(dict.fromkeys(str(t) for t in tags))

    @classmethod
    def parse(cls, value: Any) -> "TagSet":
        """Accept the backend's list form or its comma-separated string form."""
        if value is None:
            return cls()
        if isinstance(value, TagSet):
            return value
        if isinstance(value, str):
            return cls(t.strip() for t in value.split(",") if t.strip())
        return cls(str(t) for t in value)

    def union(self, other: Iterable[str]) -> "TagSet":
        return TagSet((*self._tags, *other))

    def difference(self, other: Iterable[str]) -> "TagSet":
        drop = set(other)
        return TagSet(t for t in self._tags if t not in drop)

    def to_list(self) -> list[str]:
        return list(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return set(self._tags) == set(other._tags)
        if isinstance(other, (set, frozenset)):
            return set(self._tags) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._tags))

    def __repr__(self) -> str:
        return f"TagSet({list(self._tags)!r})"


@dataclass(frozen=True)
class Add:
    tag: str


@dataclass(frozen=True)
class Remove:
    tag: str


@dataclass(frozen=True)
class Replace:
    old_tags: FrozenSet[str]
    new_tag: str

    def __post_init__(self) -> None:
        old = self.old_tags
        if isinstance(old, str):
            old = (old,)
        object.__setattr__(self, "old_tags", frozenset(old))


TagOperation = Union[Add, Remove, Replace]

RECORD_KINDS = ("customer", "order")


@dataclass(frozen=True)
class TagUpdate:
    """One mutation request: write `tags` as the full tag collection of `record_id`."""
    record_id: str
    tags: TagSet
    kind: str = "customer"

    def to_variables(self) -> dict[str, Any]:
        return {"input": {"id": self.record_id, "tags": self.tags.to_list()}}


@dataclass(frozen=True)
class TagUpdateResult:
    update: TagUpdate
    ok: bool
    error: str | None = None
    response: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def record_id(self) -> str:
        return self.update.record_id
