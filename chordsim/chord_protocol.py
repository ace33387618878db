import bisect
import random
from typing import Callable, Dict, Optional

from .errors import (
    EmptyRoutingTable,
    EmptyTopology,
    IdentifierCollision,
    MissingSuccessor,
    NotInitialized,
    RoutingTableNotReady,
)
from .finger_table import FingerEntry, FingerTable
from .hashing import ConsistentHashing
from .lookup import LookupResponse, LookupStatus, Route
from .monitoring import echo_warning, monitor
from .node import Network, Node

USE_MONITOR = False


def in_interval(key: int, start: int, end: int) -> bool:
    """
    Closed cyclic interval test: key in [start, end] walking clockwise from start.
    """
    if start <= end:
        return start <= key <= end
    return key >= start or key <= end


class ChordProtocol:
    """
    Static Chord overlay over a simulated network.

    `build_overlay_network` has to run before `build_finger_table`, and both
    before any `look_up`. Builders mutate the nodes in place; lookups only read.
    """

    def __init__(
        self,
        m: int,
        network: Optional[Network] = None,
        hash_function: Optional[Callable[[str], int]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.m = m
        self.MAX = 2 ** m
        self._network = network
        self.key_indexes: Dict[str, int] = {}
        self.rng = rng if rng is not None else random.Random()
        self.set_hash_function(hash_function)

    def set_hash_function(self, hash_function: Optional[Callable[[str], int]] = None):
        self.hash = hash_function if hash_function is not None else ConsistentHashing(self.m)

    @property
    def network(self) -> Optional[Network]:
        return self._network

    def set_network(self, network: Network):
        self._network = network

    @property
    def keys(self) -> Dict[str, int]:
        return dict(self.key_indexes)

    def set_keys(self, key_indexes: Dict[str, int]):
        """Key name -> key index pairs used to exercise `look_up`"""
        self.key_indexes = dict(key_indexes)

    def _require_network(self) -> Network:
        if self._network is None:
            raise NotInitialized("no network has been set")
        if not len(self._network):
            raise EmptyTopology("the network has no nodes")
        return self._network

    def _require_ids(self, network: Network):
        missing = [node.name for node in network if node.id is None]
        if missing:
            raise RoutingTableNotReady(
                f"ids unset for {', '.join(missing)}; build the overlay network first"
            )

    ################
    # Ring Section #
    ################
    @monitor(active=USE_MONITOR)
    def build_overlay_network(self):
        network = self._require_network()

        owners: Dict[int, Node] = {}
        for node in network:
            node_id = self.hash(node.name) % self.MAX
            if node_id in owners:
                raise IdentifierCollision(
                    f"{owners[node_id]} and {node} both hash to {node_id}"
                )
            owners[node_id] = node

        for node_id, node in owners.items():
            node.set_id(node_id)
            # any previous finger table belongs to a previous ring
            node.set_routing_table(None)

        ring = network.sorted_indices()
        for position, index in enumerate(ring):
            node = network.get_node(index)
            successor = network.get_node(ring[(position + 1) % len(ring)])
            node.clear_neighbors()
            node.add_neighbor(successor.name, successor.index)

    #######
    # End #
    #######

    ########################
    # Finger Table Section #
    ########################
    @monitor(active=USE_MONITOR)
    def build_finger_table(self):
        network = self._require_network()
        self._require_ids(network)

        ring = network.sorted_indices()
        ids = [network.get_node(index).id for index in ring]

        for node in network:
            table = FingerTable(node.id, self.m)
            for i in range(1, self.m + 1):
                start = table.start_index(i)
                # first id >= start, wrapping to the smallest one
                position = bisect.bisect_left(ids, start) % len(ids)
                table.add(FingerEntry(start, table.end_index(i), ring[position]))
            node.set_routing_table(table)

    #######
    # End #
    #######

    ##################
    # Lookup Section #
    ##################
    def _starting_node(self, network: Network, start: Optional[str]) -> Node:
        if start is None:
            return network.get_node(self.rng.randrange(len(network)))
        if start not in network:
            raise ValueError(f"unknown starting node {start!r}")
        return network.get_node(network.index_of(start))

    @monitor(active=USE_MONITOR)
    def look_up(self, key_index: int, start: Optional[str] = None) -> LookupResponse:
        network = self._network
        if network is None or not len(network):
            raise NotInitialized("look up requires a network with at least one node")

        key_index %= self.MAX
        current = self._starting_node(network, start)
        route = Route()
        route.visit(current.name)
        hops = 0

        while True:
            if key_index == current.id:
                return self._found(key_index, route, current, hops)

            successor = network.successor(current)
            if successor is None:
                raise MissingSuccessor(f"{current} has no successor in the ring")

            # the only node of the ring owns the whole identifier space
            alone = successor is current and len(network) == 1
            if alone or in_interval(key_index, current.id, successor.id):
                route.visit(successor.name)
                hops = hops if successor is current else hops + 1
                return self._found(key_index, route, successor, hops)

            table = current.routing_table
            if table is None or table.is_empty():
                raise EmptyRoutingTable(f"{current} has no finger table")

            next_node = successor
            for entry in reversed(table):
                candidate = network.get_node(entry.successor)
                if candidate is current:
                    continue
                if in_interval(candidate.id, current.id, key_index):
                    next_node = candidate
                    break

            current = next_node
            route.visit(current.name)
            hops += 1

            # distinct visits are bounded by the topology size, so bound the moves
            if hops > len(network) + 2:
                echo_warning(
                    f"look up of {key_index} abandoned after {hops} hops, "
                    f"the ring may be misconfigured"
                )
                return LookupResponse(
                    key_index, route.names, status=LookupStatus.failed, hops=hops
                )

    @staticmethod
    def _found(key_index: int, route: Route, node: Node, hops: int) -> LookupResponse:
        return LookupResponse(key_index, route.names, node.id, node.name, hops=hops)

    def look_up_keys(self, start: Optional[str] = None) -> Dict[str, LookupResponse]:
        return {
            name: self.look_up(index, start)
            for name, index in sorted(self.key_indexes.items())
        }

    def find_responsible(self, key_index: int) -> Node:
        """
        Linear scan for the node owning `key_index`: the first id >= key, or
        the smallest id when the key is past every node.
        """
        network = self._require_network()
        self._require_ids(network)

        key_index %= self.MAX
        nodes = sorted(network, key=lambda node: node.id)
        for node in nodes:
            if node.id >= key_index:
                return node
        return nodes[0]

    #######
    # End #
    #######

    def __str__(self) -> str:
        return f"ChordProtocol(m={self.m})"
