import random

import pytest

from chordsim.chord_protocol import ChordProtocol
from chordsim.errors import (
    EmptyRoutingTable,
    ErrorKind,
    MissingSuccessor,
    NotInitialized,
)
from chordsim.lookup import LookupStatus, Route
from chordsim.node import Network


def owner_of(key, ids):
    """Brute force: the node with the smallest id >= key, wrapping around."""
    ordered = sorted(ids.items(), key=lambda item: item[1])
    for name, node_id in ordered:
        if node_id >= key:
            return name
    return ordered[0][0]


def test_route_keeps_first_visit_order():
    route = Route()
    assert route.visit("C")
    assert route.visit("A")
    assert not route.visit("C")
    assert route.visit("B")
    assert route.names == ["C", "A", "B"]
    assert len(route) == 3
    assert "A" in route
    assert list(route) == ["C", "A", "B"]


@pytest.mark.parametrize(
    "start, route",
    [
        ("A", ["A", "C", "D"]),
        ("B", ["B", "C", "D"]),
        ("C", ["C", "D"]),
        # D is visited first, so coming back to it leaves the route unchanged
        ("D", ["D", "A", "C"]),
    ],
)
def test_lookup_scenario(four_nodes, start, route):
    response = four_nodes.look_up(4, start)
    assert response.found
    assert response.node_id == 5
    assert response.node_name == "D"
    assert response.route == route

    wrapped = four_nodes.look_up(6, start)
    assert wrapped.node_id == 1
    assert wrapped.node_name == "A"

    exact = four_nodes.look_up(3, start)
    assert exact.node_id == 3
    assert exact.node_name == "C"


def test_lookup_route_from_smallest_node(four_nodes):
    response = four_nodes.look_up(4, "A")
    # A jumps to C through its second finger, C's successor owns the key
    assert response.route == ["A", "C", "D"]
    assert response.hops == 2
    assert str(response) == "4 -> D (id=5) (route: A -> C -> D)"


def test_lookup_exact_match_on_start_node(four_nodes):
    response = four_nodes.look_up(2, "B")
    assert response.route == ["B"]
    assert response.hops == 0
    assert response.node_name == "B"


def test_lookup_single_node(make_protocol):
    protocol = make_protocol({"A": 5}, 3)
    for key in range(8):
        response = protocol.look_up(key)
        assert response.found
        assert response.node_name == "A"
        assert len(response.route) <= 2


def test_lookup_reduces_keys_into_the_identifier_space(four_nodes):
    assert four_nodes.look_up(12, "A").node_name == "D"
    assert four_nodes.look_up(12, "A").key_index == 4


def test_lookup_from_random_start(four_nodes):
    names = set()
    for _ in range(20):
        response = four_nodes.look_up(4)
        names.add(response.route[0])
        assert response.node_name == "D"
    assert len(names) > 1


@pytest.mark.parametrize(
    "m, count, seed",
    [(3, 2, 0), (3, 4, 1), (3, 8, 2), (5, 6, 3), (6, 17, 4), (8, 25, 5)],
)
def test_lookup_matches_brute_force_owner(make_protocol, m, count, seed):
    rng = random.Random(seed)
    ids = {f"n{i}": node_id for i, node_id in enumerate(rng.sample(range(2 ** m), count))}
    protocol = make_protocol(ids, m)

    for key in range(2 ** m):
        expected = owner_of(key, ids)
        for start in ids:
            response = protocol.look_up(key, start)
            assert response.found
            assert response.node_name == expected, (key, start, response.route)
            assert response.node_name == protocol.find_responsible(key).name
            assert len(response.route) <= count + 2
            assert response.hops <= count + 2


def test_lookup_finger_pointing_back_at_current_node(make_protocol):
    # node 1's upper fingers wrap back to itself, only its first finger moves forward
    protocol = make_protocol({"A": 1, "B": 2}, 3)
    response = protocol.look_up(6, "A")
    assert response.route == ["A", "B"]
    assert response.node_name == "A"


def test_lookup_node_pointing_at_itself_uses_fingers(four_nodes):
    network = four_nodes.network
    b = network.get_node(network.index_of("B"))
    b.add_neighbor("B", b.index)

    response = four_nodes.look_up(4, "B")
    assert response.found
    assert response.node_name == "D"
    assert response.route == ["B", "C", "D"]


def test_lookup_iteration_cap(four_nodes, capsys):
    # B loops back to itself through its successor and every finger
    network = four_nodes.network
    b = network.get_node(network.index_of("B"))
    b.add_neighbor("B", b.index)
    for i in range(1, len(b.routing_table) + 1):
        b.routing_table[i] = b.index

    response = four_nodes.look_up(4, "B")
    assert response.status is LookupStatus.failed
    assert not response.found
    assert response.node_id is None
    assert response.node_name is None
    assert response.hops == len(four_nodes.network) + 3
    assert response.route == ["B"]
    assert "misconfigured" in capsys.readouterr().out


def test_lookup_keys(four_nodes):
    four_nodes.set_keys({"beta": 6, "alpha": 4})
    responses = four_nodes.look_up_keys("B")
    assert list(responses) == ["alpha", "beta"]
    assert responses["alpha"].node_name == "D"
    assert responses["beta"].node_name == "A"
    assert four_nodes.keys == {"beta": 6, "alpha": 4}


def test_lookup_unknown_start(four_nodes):
    with pytest.raises(ValueError):
        four_nodes.look_up(4, "Z")


def test_lookup_requires_network():
    with pytest.raises(NotInitialized):
        ChordProtocol(3).look_up(1)

    with pytest.raises(NotInitialized) as info:
        ChordProtocol(3, Network()).look_up(1)
    assert info.value.kind is ErrorKind.not_initialized


def test_lookup_before_ring_is_built(make_protocol):
    protocol = make_protocol({"A": 1, "B": 2}, 3, build=False)
    with pytest.raises(MissingSuccessor):
        protocol.look_up(4, "A")


def test_lookup_with_broken_successor(four_nodes):
    four_nodes.network.get_node(0).clear_neighbors()
    with pytest.raises(MissingSuccessor) as info:
        four_nodes.look_up(4, "A")
    assert info.value.kind is ErrorKind.missing_successor


def test_lookup_before_finger_tables(make_protocol):
    protocol = make_protocol({"A": 1, "B": 2, "C": 3, "D": 5}, 3, build=False)
    protocol.build_overlay_network()

    # the successor of the start node owns the key, no finger is needed
    assert protocol.look_up(2, "A").node_name == "B"

    with pytest.raises(EmptyRoutingTable):
        protocol.look_up(4, "A")
