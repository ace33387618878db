import dataclasses
from enum import Enum, auto
from typing import Iterator, List, Optional, Set


class LookupStatus(Enum):
    found = auto()
    failed = auto()


class Route:
    """
    Names of the visited nodes in first-visit order, each one recorded once.
    """

    def __init__(self) -> None:
        self._names: List[str] = []
        self._seen: Set[str] = set()

    def visit(self, name: str) -> bool:
        if name in self._seen:
            return False
        self._seen.add(name)
        self._names.append(name)
        return True

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


@dataclasses.dataclass
class LookupResponse:
    key_index: int
    route: List[str]
    node_id: Optional[int] = None
    node_name: Optional[str] = None
    status: LookupStatus = LookupStatus.found
    hops: int = 0

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.found

    def __str__(self) -> str:
        target = f"{self.node_name} (id={self.node_id})" if self.found else "<failed>"
        return f"{self.key_index} -> {target} (route: {' -> '.join(self.route)})"
