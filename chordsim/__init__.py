from .chord_protocol import ChordProtocol, in_interval
from .errors import ChordError, ConfigurationError, ErrorKind
from .finger_table import FingerEntry, FingerTable
from .hashing import ConsistentHashing
from .lookup import LookupResponse, LookupStatus, Route
from .node import Network, Node
from .simulator import Simulator
