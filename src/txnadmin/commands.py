"""Table-driven registry of the ``transactions`` admin commands.

Each :class:`Command` declares its flag schema and a single operation against an
:class:`~txnadmin.client.AdminClient`. :class:`CommandDispatcher` validates every
flag before running that operation, so a bad invocation never reaches the
network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from . import params
from .client import AdminClient
from .exceptions import MissingFlagError, UnknownCommandError
from .logging_config import StructuredLogger

logger = StructuredLogger("commands")


@dataclass(frozen=True)
class Flag:
    name: str
    short: str
    long: str
    help: str
    required: bool = False
    default: Any = None
    parse: Optional[Callable[[Any, str], Any]] = None

    @property
    def label(self) -> str:
        return f"{self.short}/{self.long}"


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    run: Callable[[AdminClient, dict[str, Any]], Any]
    flags: tuple[Flag, ...] = field(default_factory=tuple)
    prints_result: bool = True


def _int32(value: Any, label: str) -> int:
    return params.parse_int(value, label, bits=32)


def _int64(value: Any, label: str) -> int:
    return params.parse_int(value, label, bits=64)


def _batch_index(value: Any, label: str) -> Optional[int]:
    if value is None:
        return None
    return params.parse_int(value, label, bits=32, minimum=0)


def _topic_flag(help_text: str = "The topic name") -> Flag:
    return Flag("topic", "-t", "--topic", help_text, required=True, parse=params.parse_topic)


def _txn_flags() -> tuple[Flag, Flag]:
    return (
        Flag("most_sig_bits", "-m", "--most-sig-bits", "The most sig bits", required=True, parse=_int32),
        Flag("least_sig_bits", "-l", "--least-sig-bits", "The least sig bits", required=True, parse=_int64),
    )


def _txn_id(values: Mapping[str, Any]):
    return params.parse_transaction_id(values["most_sig_bits"], values["least_sig_bits"])


SUB_NAME = Flag("subscription", "-s", "--sub-name", "The subscription name", required=True,
                parse=params.parse_subscription)
SUBSCRIPTION_NAME = Flag("subscription", "-s", "--subscription-name", "Subscription name", required=True,
                         parse=params.parse_subscription)
OPTIONAL_COORDINATOR = Flag("coordinator_id", "-c", "--coordinator-id", "The coordinator id",
                            parse=params.parse_coordinator_id)
METADATA = Flag("metadata", "-m", "--metadata", "Flag to include ledger metadata", default=False,
                parse=params.parse_flag)


def _coordinator_stats(client: AdminClient, values: dict[str, Any]) -> Any:
    coordinator_id = values["coordinator_id"]
    if coordinator_id is not None:
        return client.get_coordinator_stats_by_id(coordinator_id)
    return client.get_coordinator_stats()


def _slow_transactions(client: AdminClient, values: dict[str, Any]) -> Any:
    coordinator_id = values["coordinator_id"]
    if coordinator_id is not None:
        return client.get_slow_transactions_by_coordinator_id(coordinator_id, values["timeout_ms"])
    return client.get_slow_transactions(values["timeout_ms"])


def _scale_coordinators(client: AdminClient, values: dict[str, Any]) -> int:
    # the broker replies with no body, so report the count that was sent
    client.scale_transaction_coordinators(values["replicas"])
    return values["replicas"]


def _position_stats(client: AdminClient, values: dict[str, Any]) -> Any:
    position = params.parse_position(values["ledger_id"], values["entry_id"], values["batch_index"])
    return client.get_position_stats_in_pending_ack(values["topic"], values["subscription"], position)


COMMANDS: tuple[Command, ...] = (
    Command(
        "coordinator-stats",
        "Get transaction coordinator stats",
        _coordinator_stats,
        (OPTIONAL_COORDINATOR,),
    ),
    Command(
        "transaction-buffer-stats",
        "Get transaction buffer stats",
        lambda client, v: client.get_transaction_buffer_stats(v["topic"], v["low_water_marks"]),
        (
            _topic_flag("The topic"),
            Flag("low_water_marks", "-l", "--low-water-mark",
                 "Whether to get information about lowWaterMarks stored in transaction buffer.",
                 default=False, parse=params.parse_flag),
        ),
    ),
    Command(
        "pending-ack-stats",
        "Get transaction pending ack stats",
        lambda client, v: client.get_pending_ack_stats(v["topic"], v["subscription"], v["low_water_marks"]),
        (
            _topic_flag(),
            SUB_NAME,
            Flag("low_water_marks", "-l", "--low-water-mark",
                 "Whether to get information about lowWaterMarks stored in transaction pending ack.",
                 default=False, parse=params.parse_flag),
        ),
    ),
    Command(
        "transaction-in-pending-ack-stats",
        "Get transaction in pending ack stats",
        lambda client, v: client.get_transaction_in_pending_ack_stats(_txn_id(v), v["topic"], v["subscription"]),
        (*_txn_flags(), _topic_flag(), SUB_NAME),
    ),
    Command(
        "transaction-in-buffer-stats",
        "Get transaction in buffer stats",
        lambda client, v: client.get_transaction_in_buffer_stats(_txn_id(v), v["topic"]),
        (*_txn_flags(), _topic_flag()),
    ),
    Command(
        "transaction-metadata",
        "Get transaction metadata",
        lambda client, v: client.get_transaction_metadata(_txn_id(v)),
        _txn_flags(),
    ),
    Command(
        "slow-transactions",
        "Get slow transactions.",
        _slow_transactions,
        (
            OPTIONAL_COORDINATOR,
            Flag("timeout_ms", "-t", "--time", "The transaction timeout time. (eg: 1s, 10s, 1m, 5h, 3d)",
                 required=True, default="1s", parse=params.parse_relative_time_ms),
        ),
    ),
    Command(
        "coordinator-internal-stats",
        "Get transaction coordinator internal stats",
        lambda client, v: client.get_coordinator_internal_stats(v["coordinator_id"], v["metadata"]),
        (
            Flag("coordinator_id", "-c", "--coordinator-id", "The coordinator id", required=True,
                 parse=params.parse_coordinator_id),
            METADATA,
        ),
    ),
    Command(
        "pending-ack-internal-stats",
        "Get pending ack internal stats",
        lambda client, v: client.get_pending_ack_internal_stats(v["topic"], v["subscription"], v["metadata"]),
        (_topic_flag("Topic name"), SUBSCRIPTION_NAME, METADATA),
    ),
    Command(
        "scale-transactionCoordinators",
        "Update the scale of transaction coordinators",
        _scale_coordinators,
        (
            Flag("replicas", "-r", "--replicas", "The scale of the transaction coordinators", required=True,
                 parse=params.parse_replicas),
        ),
        prints_result=False,
    ),
    Command(
        "position-stats-in-pending-ack",
        "Get the position stats in transaction pending ack",
        _position_stats,
        (
            _topic_flag(),
            SUBSCRIPTION_NAME,
            Flag("ledger_id", "-l", "--ledger-id", "Ledger ID of the position", required=True, parse=_int64),
            Flag("entry_id", "-e", "--entry-id", "Entry ID of the position", required=True, parse=_int64),
            Flag("batch_index", "-b", "--batch-index", "Batch index of the position", parse=_batch_index),
        ),
    ),
)


class CommandDispatcher:
    def __init__(self, client: AdminClient, commands: tuple[Command, ...] = COMMANDS):
        self.client = client
        self._commands = {command.name: command for command in commands}

    def names(self) -> list[str]:
        return list(self._commands)

    def get(self, name: str) -> Command:
        command = self._commands.get(name)
        if command is None:
            raise UnknownCommandError(name)
        return command

    def materialize(self, command: Command, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Check required flags and convert every raw value. Raises ValidationError."""
        supplied = {}
        for flag in command.flags:
            value = raw.get(flag.name)
            if value is None:
                value = flag.default
            if value is None and flag.required:
                raise MissingFlagError(flag.label)
            supplied[flag.name] = value

        values: dict[str, Any] = {}
        for flag in command.flags:
            value = supplied[flag.name]
            values[flag.name] = flag.parse(value, flag.label) if flag.parse else value
        return values

    def dispatch(self, name: str, raw: Optional[Mapping[str, Any]] = None) -> Any:
        command = self.get(name)
        values = self.materialize(command, raw or {})
        logger.debug("Dispatching admin command", command=name)
        return command.run(self.client, values)
