from enum import Enum, auto


class ErrorKind(Enum):
    not_initialized = auto()
    missing_successor = auto()
    empty_routing_table = auto()
    empty_topology = auto()
    routing_table_not_ready = auto()
    identifier_collision = auto()


class ChordError(Exception):
    kind: ErrorKind

    def __str__(self) -> str:
        message = super().__str__()
        return f"[{self.kind.name}] {message}" if message else f"[{self.kind.name}]"


class ConfigurationError(ChordError):
    """
    The ring is not in a state where the requested operation can run.
    Nothing is retried; the caller has to rebuild and try again.
    """


class NotInitialized(ConfigurationError):
    kind = ErrorKind.not_initialized


class MissingSuccessor(ConfigurationError):
    kind = ErrorKind.missing_successor


class EmptyRoutingTable(ConfigurationError):
    kind = ErrorKind.empty_routing_table


class EmptyTopology(ConfigurationError):
    kind = ErrorKind.empty_topology


class RoutingTableNotReady(ConfigurationError):
    kind = ErrorKind.routing_table_not_ready


class IdentifierCollision(ConfigurationError):
    kind = ErrorKind.identifier_collision
