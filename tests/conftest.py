import random

import pytest

from chordsim.chord_protocol import ChordProtocol
from chordsim.node import Network


@pytest.fixture
def make_protocol():
    """
    Build a protocol whose node ids are pinned by name instead of hashed.
    """

    def factory(ids, m, build=True, seed=0):
        network = Network.from_names(ids)
        protocol = ChordProtocol(m, network, ids.__getitem__, rng=random.Random(seed))
        if build:
            protocol.build_overlay_network()
            protocol.build_finger_table()
        return protocol

    return factory


@pytest.fixture
def four_nodes(make_protocol):
    # ids {1, 2, 3, 5} on a 2^3 ring
    return make_protocol({"A": 1, "B": 2, "C": 3, "D": 5}, 3)
