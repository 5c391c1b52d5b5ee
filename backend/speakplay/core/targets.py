"""
Which on-screen item a voice prompt acts on.

A prompt either names a fixed item ("open the red box") or an ordinal
("open the first box"). Ordinals are resolved against the live order, which
the child may have rearranged by dragging.
"""

from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

TARGET_KINDS = frozenset({"item", "first", "last"})


@dataclass(frozen=True)
class TargetSpec:
    """A fixed item id, or the first/last item in the current order."""

    kind: str
    item_id: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in TARGET_KINDS:
            raise ValueError(f"Invalid target kind: {self.kind!r}")
        if self.kind == "item" and not self.item_id:
            raise ValueError("Item targets need an item_id")

    @classmethod
    def by_id(cls, item_id: str) -> "TargetSpec":
        return cls(kind="item", item_id=item_id)

    @classmethod
    def first(cls) -> "TargetSpec":
        return cls(kind="first")

    @classmethod
    def last(cls) -> "TargetSpec":
        return cls(kind="last")


def resolve_target(spec: TargetSpec, current_order: Sequence[str]) -> str | None:
    """
    Map a target to a concrete item id, or None if there is nothing to act on.

    Fixed ids are returned as-is; callers decide whether the id still exists.
    """
    if spec.kind == "item":
        return spec.item_id
    if not current_order:
        return None
    if spec.kind == "first":
        return current_order[0]
    return current_order[-1]


def reorder_list(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of items with the element at from_index moved to to_index."""
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved
