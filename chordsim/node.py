from collections import OrderedDict
from typing import Dict, Iterable, Iterator, List, Optional

from .finger_table import FingerTable


class Node:
    """
    A simulated peer. Peers refer to each other through their index in the
    owning `Network`, never through object references.
    """

    def __init__(self, name: str, index: int) -> None:
        self._name = name
        self._index = index
        self._id: Optional[int] = None
        self._neighbors: "OrderedDict[str, int]" = OrderedDict()
        self._routing_table: Optional[FingerTable] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> int:
        return self._index

    @property
    def id(self) -> Optional[int]:
        return self._id

    def set_id(self, value: int):
        self._id = value

    #####################
    # Neighbors Section #
    #####################
    @property
    def neighbors(self) -> Dict[str, int]:
        return dict(self._neighbors)

    def add_neighbor(self, name: str, index: int):
        # re-registering moves the name to the end, so it becomes the successor
        self._neighbors.pop(name, None)
        self._neighbors[name] = index

    def clear_neighbors(self):
        self._neighbors.clear()

    @property
    def successor_index(self) -> Optional[int]:
        """Arena index of the ring successor, the last registered neighbor"""
        if not self._neighbors:
            return None
        return next(reversed(self._neighbors.values()))

    #######
    # End #
    #######

    @property
    def routing_table(self) -> Optional[FingerTable]:
        return self._routing_table

    def set_routing_table(self, table: Optional[FingerTable]):
        self._routing_table = table

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, id={self.id})"


class Network:
    """
    Index addressed arena holding every node of a simulation run.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._indices: Dict[str, int] = {}

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Network":
        network = cls()
        for name in names:
            network.add_node(name)
        return network

    def add_node(self, name: str) -> Node:
        if name in self._indices:
            raise ValueError(f"node {name!r} already exists")

        node = Node(name, len(self._nodes))
        self._indices[name] = node.index
        self._nodes.append(node)
        return node

    def get_node(self, index: int) -> Node:
        return self._nodes[index]

    def index_of(self, name: str) -> int:
        return self._indices[name]

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)

    @property
    def topology(self) -> Dict[str, Node]:
        return {node.name: node for node in self._nodes}

    def successor(self, node: Node) -> Optional[Node]:
        index = node.successor_index
        return None if index is None else self._nodes[index]

    def sorted_indices(self) -> List[int]:
        """Node indices in ascending id order. Every id must be assigned."""
        return sorted(range(len(self._nodes)), key=lambda i: self._nodes[i].id)

    def __contains__(self, name: str) -> bool:
        return name in self._indices

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)
