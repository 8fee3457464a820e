from dataclasses import dataclass
from typing import Hashable, Iterable, Tuple


@dataclass(frozen=True)
class JoinResult:
    """Keyed diff between the elements on screen and the next data.

    ``entered`` and ``updated`` follow the new order, ``exited`` the old one.
    The three groups are disjoint.
    """
    entered: Tuple[Hashable, ...] = ()
    updated: Tuple[Hashable, ...] = ()
    exited: Tuple[Hashable, ...] = ()

    @property
    def changed(self) -> int:
        return len(self.entered) + len(self.exited)

    def __str__(self):
        return f"{len(self.entered)} entered, {len(self.updated)} updated, {len(self.exited)} exited"


def reconcile(old_keys: Iterable[Hashable], new_keys: Iterable[Hashable]) -> JoinResult:
    old = list(dict.fromkeys(old_keys))
    new = list(dict.fromkeys(new_keys))
    old_set = set(old)
    new_set = set(new)
    return JoinResult(
        entered=tuple(k for k in new if k not in old_set),
        updated=tuple(k for k in new if k in old_set),
        exited=tuple(k for k in old if k not in new_set),
    )
