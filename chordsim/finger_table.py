import dataclasses
from typing import Iterator, List, Tuple


@dataclasses.dataclass
class FingerEntry:
    start: int
    end: int
    successor: int  # arena index of the node responsible for [start, end]

    @property
    def interval(self) -> Tuple[int, int]:
        return self.start, self.end


class FingerTable:
    def __init__(self, node_id: int, size: int) -> None:
        self.node_id: int = node_id
        self.size: int = size
        self.MAX: int = 2 ** size

        # FingerTable[i] is the i-th finger, i in 1..size
        self.ft: List[FingerEntry] = []

    def start_index(self, i: int) -> int:
        return (self.node_id + 2 ** (i - 1)) % self.MAX

    def end_index(self, i: int) -> int:
        # the last finger wraps back to just before the first one
        next_start = self.start_index(i + 1 if i < self.size else 1)
        return (next_start - 1) % self.MAX

    def add(self, entry: FingerEntry):
        if len(self.ft) == self.size:
            raise IndexError(f"finger table of {self.node_id} is already full")
        self.ft.append(entry)

    def is_empty(self) -> bool:
        return not self.ft

    def _position(self, i: int) -> int:
        if not 1 <= i <= len(self.ft):
            raise IndexError(f"finger index {i} out of range 1..{len(self.ft)}")
        return i - 1

    def __getitem__(self, i: int) -> FingerEntry:
        return self.ft[self._position(i)]

    def __setitem__(self, i: int, successor: int) -> None:
        self.ft[self._position(i)].successor = successor

    def __iter__(self) -> Iterator[FingerEntry]:
        yield from self.ft

    def __reversed__(self) -> Iterator[FingerEntry]:
        yield from reversed(self.ft)

    def __len__(self) -> int:
        return len(self.ft)

    def __str__(self) -> str:
        return f"Finger Table of {self.node_id}\n" + "\n".join(str(x) for x in self.ft)
