import random
from typing import Dict, Iterable, List, Optional, Tuple

from .chord_protocol import ChordProtocol
from .hashing import ConsistentHashing
from .lookup import LookupResponse
from .node import Network, Node


def default_node_names(count: int) -> List[str]:
    return [f"Node {i}" for i in range(1, count + 1)]


def default_key_names(count: int) -> List[str]:
    return [f"Key {i}" for i in range(1, count + 1)]


class Simulator:
    """
    Seeds a network with named nodes and keys, then drives the protocol:
    ring first, finger tables second, lookups after both.
    """

    def __init__(
        self,
        m: int,
        node_names: Iterable[str],
        key_names: Iterable[str] = (),
        start: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.m = m
        self.start = start
        self.hashing = ConsistentHashing(m)
        self.network = Network.from_names(node_names)
        self.protocol = ChordProtocol(
            m, self.network, self.hashing, rng=random.Random(seed)
        )
        self.protocol.set_keys({name: self.hashing.hash(name) for name in key_names})
        self.built = False

    def build(self):
        self.protocol.build_overlay_network()
        self.protocol.build_finger_table()
        self.built = True

    def _ensure_built(self):
        if not self.built:
            self.build()

    def look_up(self, key_index: int) -> LookupResponse:
        self._ensure_built()
        return self.protocol.look_up(key_index, self.start)

    def run(self) -> Dict[str, LookupResponse]:
        """Look up every seeded key"""
        self._ensure_built()
        return self.protocol.look_up_keys(self.start)

    def verify(self) -> List[Tuple[int, LookupResponse, Node]]:
        """
        Look up every identifier of the space and return the ones that do not
        resolve to the node owning them.
        """
        self._ensure_built()
        mismatches = []
        for key_index in range(2 ** self.m):
            response = self.look_up(key_index)
            expected = self.protocol.find_responsible(key_index)
            if not response.found or response.node_name != expected.name:
                mismatches.append((key_index, response, expected))
        return mismatches

    def ring(self) -> List[Node]:
        """Nodes in ring order, following successor links from the smallest id"""
        self._ensure_built()
        current = min(self.network, key=lambda node: node.id)
        nodes = []
        for _ in range(len(self.network)):
            nodes.append(current)
            current = self.network.successor(current)
        return nodes
