"""Keyed-diff reconciliation between a rendered set and a new sequence of items."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, List, Sequence, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")
M = TypeVar("M")


@dataclass
class KeyedDiff(Generic[K]):
    """Keys to create, keep and remove, in a stable order."""

    entered: List[K] = field(default_factory=list)
    retained: List[K] = field(default_factory=list)
    exited: List[K] = field(default_factory=list)


def diff_keys(old_keys: Sequence[K], new_keys: Sequence[K]) -> KeyedDiff[K]:
    """
    Compare two key sequences.

    ``entered`` and ``retained`` follow the order of ``new_keys``; ``exited``
    follows ``old_keys``. Duplicate new keys are only counted once.
    """
    old = set(old_keys)
    new = set()
    diff: KeyedDiff[K] = KeyedDiff()
    for key in new_keys:
        if key in new:
            continue
        new.add(key)
        if key in old:
            diff.retained.append(key)
        else:
            diff.entered.append(key)
    diff.exited = [key for key in old_keys if key not in new]
    return diff


def reconcile(
    rendered: Dict[K, M],
    items: Sequence[T],
    key: Callable[[T], K],
    on_enter: Callable[[T], M],
    on_update: Callable[[M, T], M],
    on_exit: Callable[[M], None] = lambda mark: None,
) -> KeyedDiff[K]:
    """
    Bring ``rendered`` (key -> mark) in line with ``items``.

    Marks for vanished keys are passed to ``on_exit`` and dropped, new items
    get a mark from ``on_enter``, retained marks are refreshed by
    ``on_update``. ``rendered`` is rebuilt in the order of ``items``.
    """
    by_key: Dict[K, T] = {}
    for item in items:
        by_key.setdefault(key(item), item)

    diff = diff_keys(list(rendered), list(by_key))

    for k in diff.exited:
        on_exit(rendered.pop(k))

    marks: Dict[K, M] = {}
    for k, item in by_key.items():
        if k in rendered:
            marks[k] = on_update(rendered[k], item)
        else:
            marks[k] = on_enter(item)

    rendered.clear()
    rendered.update(marks)
    return diff
