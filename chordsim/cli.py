from typing import List, Optional

import typer

from chordsim.errors import ChordError
from chordsim.monitoring import echo, echo_error, echo_warning, set_monitoring
from chordsim.node import Node
from chordsim.simulator import Simulator, default_key_names, default_node_names

app = typer.Typer()

M = 10
NODE_COUNT = 10
KEY_COUNT = 10

M_OPTION = typer.Option(M, "--m", "-m", help="Identifier length in bits.")
NODES_OPTION = typer.Option(
    NODE_COUNT, "--nodes", "-n", help="Number of generated nodes (Node 1, Node 2, ...)."
)
NAMES_OPTION = typer.Option(
    None, "--name", help="Explicit node name. Repeat it to seed several nodes."
)
SEED_OPTION = typer.Option(None, help="Seed used to pick the starting node of a look up.")
MONITOR_OPTION = typer.Option(False, "--monitor/--no-monitor", help="Trace protocol calls.")


def create_simulator(
    m: int,
    nodes: int,
    names: Optional[List[str]],
    keys: int = 0,
    start: Optional[str] = None,
    seed: Optional[int] = None,
    monitor: bool = False,
) -> Simulator:
    set_monitoring(monitor)
    node_names = names if names else default_node_names(nodes)
    try:
        simulator = Simulator(m, node_names, default_key_names(keys), start=start, seed=seed)
    except ValueError as e:
        echo_error(str(e))
        raise typer.Exit(code=1)

    try:
        simulator.build()
    except ChordError as e:
        echo_error(str(e))
        raise typer.Exit(code=2)
    return simulator


def echo_finger_table(node: Node, simulator: Simulator):
    echo(f"{node} (id={node.id}) finger table =>")
    for i, entry in enumerate(node.routing_table, start=1):
        successor = simulator.network.get_node(entry.successor)
        echo(f"\t{i}: [{entry.start}, {entry.end}] => {successor.name} (id={successor.id})")
    echo()


@app.command()
def ring(
    m: int = M_OPTION,
    nodes: int = NODES_OPTION,
    name: Optional[List[str]] = NAMES_OPTION,
    monitor: bool = MONITOR_OPTION,
):
    simulator = create_simulator(m, nodes, name, monitor=monitor)
    for node in simulator.ring():
        successor = simulator.network.successor(node)
        echo(f"{node} (id={node.id}) => {successor} (id={successor.id})")


@app.command()
def finger_table(
    node_name: str = typer.Argument(
        None,
        help="Name of the node whose finger table is printed. If no node is provided then all finger tables will be printed.",
    ),
    m: int = M_OPTION,
    nodes: int = NODES_OPTION,
    name: Optional[List[str]] = NAMES_OPTION,
    monitor: bool = MONITOR_OPTION,
):
    simulator = create_simulator(m, nodes, name, monitor=monitor)

    if node_name is None:
        for node in simulator.ring():
            echo_finger_table(node, simulator)
    elif node_name not in simulator.network:
        echo_error(f"Unknown node {node_name}")
        raise typer.Exit(code=1)
    else:
        node = simulator.network.get_node(simulator.network.index_of(node_name))
        echo_finger_table(node, simulator)


@app.command()
def lookup(
    key_index: int = typer.Argument(..., help="Identifier to resolve."),
    start: str = typer.Option(None, help="Name of the node the look up starts from."),
    m: int = M_OPTION,
    nodes: int = NODES_OPTION,
    name: Optional[List[str]] = NAMES_OPTION,
    seed: Optional[int] = SEED_OPTION,
    monitor: bool = MONITOR_OPTION,
):
    simulator = create_simulator(m, nodes, name, start=start, seed=seed, monitor=monitor)
    try:
        response = simulator.look_up(key_index)
    except ChordError as e:
        echo_error(str(e))
        raise typer.Exit(code=2)
    except ValueError as e:
        echo_error(str(e))
        raise typer.Exit(code=1)

    if not response.found:
        echo_warning(str(response))
        raise typer.Exit(code=1)
    echo(str(response))
    echo(f"hops => {response.hops}")


@app.command()
def simulate(
    m: int = M_OPTION,
    nodes: int = NODES_OPTION,
    keys: int = typer.Option(KEY_COUNT, "--keys", "-k", help="Number of generated keys (Key 1, Key 2, ...)."),
    name: Optional[List[str]] = NAMES_OPTION,
    seed: Optional[int] = SEED_OPTION,
    monitor: bool = MONITOR_OPTION,
):
    simulator = create_simulator(m, nodes, name, keys=keys, seed=seed, monitor=monitor)
    try:
        responses = simulator.run()
    except ChordError as e:
        echo_error(str(e))
        raise typer.Exit(code=2)

    for key_name, response in responses.items():
        if response.found:
            echo(f"{key_name}: {response}")
        else:
            echo_warning(f"{key_name}: {response}")


@app.command()
def verify(
    m: int = M_OPTION,
    nodes: int = NODES_OPTION,
    name: Optional[List[str]] = NAMES_OPTION,
    seed: Optional[int] = SEED_OPTION,
):
    simulator = create_simulator(m, nodes, name, seed=seed)
    try:
        mismatches = simulator.verify()
    except ChordError as e:
        echo_error(str(e))
        raise typer.Exit(code=2)

    for key_index, response, expected in mismatches:
        echo_error(f"{key_index}: got {response.node_name}, expected {expected.name}")
    if mismatches:
        raise typer.Exit(code=1)
    echo(f"All {2 ** m} identifiers resolved to their owner", bold=True)


if __name__ == "__main__":
    app()
