"""txnadmin - admin tooling for transaction coordinators and bundle ownership."""

from .client import AdminClient, HttpTransactionsClient
from .commands import COMMANDS, CommandDispatcher
from .ownership import OwnershipPauseGate, PauseState
from .types import NamespaceBundle, Position, TopicName, TransactionId

__version__ = "1.0.0"

__all__ = [
    "AdminClient",
    "HttpTransactionsClient",
    "COMMANDS",
    "CommandDispatcher",
    "OwnershipPauseGate",
    "PauseState",
    "NamespaceBundle",
    "Position",
    "TopicName",
    "TransactionId",
    "__version__",
]
