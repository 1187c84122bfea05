"""Bounded depth-first traversal over nested property descriptor trees."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from nodeconfig.constants import MAX_DESCRIPTOR_DEPTH
from nodeconfig.domain.models import PropertyDescriptor


@dataclass(frozen=True, slots=True)
class TreeEntry:
    descriptor: PropertyDescriptor
    path: str
    depth: int


def walk(
    descriptors: Iterable[PropertyDescriptor],
    *,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
) -> Iterator[TreeEntry]:
    """Yield every descriptor in pre-order, including collection members.

    Members of a ``fixedCollection`` get the option group name inserted into
    their dot-path. Entries nested deeper than ``max_depth`` are not visited.
    """

    stack: list[TreeEntry] = [
        TreeEntry(descriptor=item, path=item.name, depth=0)
        for item in reversed(tuple(descriptors))
    ]
    while stack:
        entry = stack.pop()
        yield entry
        if entry.depth >= max_depth:
            continue
        nested: list[TreeEntry] = []
        for group_name, child in entry.descriptor.nested():
            prefix = f"{entry.path}.{group_name}" if group_name else entry.path
            nested.append(
                TreeEntry(descriptor=child, path=f"{prefix}.{child.name}", depth=entry.depth + 1)
            )
        stack.extend(reversed(nested))


def find_property_by_name(
    descriptors: Iterable[PropertyDescriptor],
    name: str,
    *,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
) -> PropertyDescriptor | None:
    """Return the first descriptor named ``name`` in traversal order."""

    for entry in walk(descriptors, max_depth=max_depth):
        if entry.descriptor.name == name:
            return entry.descriptor
    return None


__all__ = ["TreeEntry", "find_property_by_name", "walk"]
