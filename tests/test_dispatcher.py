import unittest

from _fakes import RecordingClient

from txnadmin.commands import COMMANDS, CommandDispatcher
from txnadmin.exceptions import (
    MissingFlagError,
    ParameterError,
    TransportError,
    UnknownCommandError,
    ValidationError,
)
from txnadmin.types import Position, TopicName, TransactionId

TOPIC = "persistent://acme/orders/created"

VALID_FLAGS = {
    "coordinator-stats": {},
    "transaction-buffer-stats": {"topic": TOPIC},
    "pending-ack-stats": {"topic": TOPIC, "subscription": "sub"},
    "transaction-in-pending-ack-stats": {
        "most_sig_bits": "1", "least_sig_bits": "2", "topic": TOPIC, "subscription": "sub",
    },
    "transaction-in-buffer-stats": {"most_sig_bits": "1", "least_sig_bits": "2", "topic": TOPIC},
    "transaction-metadata": {"most_sig_bits": "1", "least_sig_bits": "2"},
    "slow-transactions": {},
    "coordinator-internal-stats": {"coordinator_id": "0"},
    "pending-ack-internal-stats": {"topic": TOPIC, "subscription": "sub"},
    "scale-transactionCoordinators": {"replicas": "4"},
    "position-stats-in-pending-ack": {"topic": TOPIC, "subscription": "sub", "ledger_id": "5", "entry_id": "6"},
}


class DispatcherTests(unittest.TestCase):
    def setUp(self):
        self.client = RecordingClient()
        self.dispatcher = CommandDispatcher(self.client)

    def test_catalog_has_every_command(self):
        self.assertEqual(sorted(self.dispatcher.names()), sorted(VALID_FLAGS))
        self.assertEqual(len(COMMANDS), 11)

    def test_each_command_makes_exactly_one_call(self):
        for name, flags in VALID_FLAGS.items():
            with self.subTest(command=name):
                self.client.calls.clear()
                self.dispatcher.dispatch(name, flags)
                self.assertEqual(len(self.client.calls), 1)

    def test_coordinator_stats_by_id(self):
        result = self.dispatcher.dispatch("coordinator-stats", {"coordinator_id": "3"})
        self.assertEqual(self.client.calls, [("get_coordinator_stats_by_id", (3,))])
        self.assertEqual(result, {"method": "get_coordinator_stats_by_id"})

    def test_coordinator_stats_for_all(self):
        self.dispatcher.dispatch("coordinator-stats", {})
        self.assertEqual(self.client.calls, [("get_coordinator_stats", ())])

    def test_coordinator_zero_is_a_single_coordinator(self):
        self.dispatcher.dispatch("coordinator-stats", {"coordinator_id": "0"})
        self.assertEqual(self.client.calls, [("get_coordinator_stats_by_id", (0,))])

    def test_slow_transactions_defaults_to_one_second(self):
        self.dispatcher.dispatch("slow-transactions", {"coordinator_id": None, "timeout_ms": None})
        self.assertEqual(self.client.calls, [("get_slow_transactions", (1000,))])

    def test_slow_transactions_scoped_to_coordinator(self):
        self.dispatcher.dispatch("slow-transactions", {"coordinator_id": "2", "timeout_ms": "1m"})
        self.assertEqual(self.client.calls, [("get_slow_transactions_by_coordinator_id", (2, 60_000))])

    def test_bad_duration_never_reaches_client(self):
        with self.assertRaises(ParameterError) as ctx:
            self.dispatcher.dispatch("slow-transactions", {"timeout_ms": "5x"})
        self.assertIn("Invalid time unit", str(ctx.exception))
        self.assertEqual(self.client.calls, [])

    def test_oversized_duration_never_reaches_client(self):
        with self.assertRaises(ParameterError):
            self.dispatcher.dispatch("slow-transactions", {"timeout_ms": "99999999999999999999d"})
        self.assertEqual(self.client.calls, [])

    def test_missing_required_flag_names_the_flag(self):
        with self.assertRaises(MissingFlagError) as ctx:
            self.dispatcher.dispatch("pending-ack-stats", {"subscription": "sub"})
        self.assertEqual(ctx.exception.flag, "-t/--topic")
        self.assertIn("-t/--topic", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ValidationError)
        self.assertNotIsInstance(ctx.exception, TransportError)
        self.assertEqual(self.client.calls, [])

    def test_missing_subscription_uses_command_specific_name(self):
        with self.assertRaises(MissingFlagError) as ctx:
            self.dispatcher.dispatch("pending-ack-internal-stats", {"topic": TOPIC})
        self.assertEqual(ctx.exception.flag, "-s/--subscription-name")

    def test_unknown_command(self):
        with self.assertRaises(UnknownCommandError) as ctx:
            self.dispatcher.dispatch("drop-everything", {})
        self.assertEqual(str(ctx.exception), "unknown command: drop-everything")

    def test_transaction_metadata_builds_transaction_id(self):
        self.dispatcher.dispatch("transaction-metadata", {"most_sig_bits": "1", "least_sig_bits": "42"})
        self.assertEqual(self.client.calls, [("get_transaction_metadata", (TransactionId(1, 42),))])

    def test_transaction_id_requires_both_halves(self):
        with self.assertRaises(MissingFlagError) as ctx:
            self.dispatcher.dispatch("transaction-metadata", {"most_sig_bits": "1"})
        self.assertEqual(ctx.exception.flag, "-l/--least-sig-bits")

    def test_buffer_stats_passes_low_water_mark(self):
        self.dispatcher.dispatch("transaction-buffer-stats", {"topic": TOPIC, "low_water_marks": True})
        method, args = self.client.calls[0]
        self.assertEqual(method, "get_transaction_buffer_stats")
        self.assertEqual(args, (TopicName.parse(TOPIC), True))

    def test_internal_stats_metadata_defaults_to_false(self):
        self.dispatcher.dispatch("coordinator-internal-stats", {"coordinator_id": "1"})
        self.assertEqual(self.client.calls, [("get_coordinator_internal_stats", (1, False))])

    def test_internal_stats_requires_coordinator(self):
        with self.assertRaises(MissingFlagError):
            self.dispatcher.dispatch("coordinator-internal-stats", {"metadata": True})

    def test_scale_requires_positive_replicas(self):
        with self.assertRaises(ParameterError):
            self.dispatcher.dispatch("scale-transactionCoordinators", {"replicas": "0"})
        with self.assertRaises(MissingFlagError):
            self.dispatcher.dispatch("scale-transactionCoordinators", {})
        self.assertEqual(self.client.calls, [])

    def test_scale_returns_the_count_sent(self):
        self.assertEqual(self.dispatcher.dispatch("scale-transactionCoordinators", {"replicas": "03"}), 3)
        self.assertEqual(self.client.calls, [("scale_transaction_coordinators", (3,))])

    def test_position_without_batch_index_targets_whole_entry(self):
        flags = dict(VALID_FLAGS["position-stats-in-pending-ack"])
        self.dispatcher.dispatch("position-stats-in-pending-ack", flags)
        _, args = self.client.calls[0]
        self.assertEqual(args[2], Position(5, 6, None))

    def test_position_with_batch_index(self):
        flags = dict(VALID_FLAGS["position-stats-in-pending-ack"], batch_index="2")
        self.dispatcher.dispatch("position-stats-in-pending-ack", flags)
        _, args = self.client.calls[0]
        self.assertEqual(args[2], Position(5, 6, 2))

    def test_negative_batch_index_fails_validation(self):
        flags = dict(VALID_FLAGS["position-stats-in-pending-ack"], batch_index="-1")
        with self.assertRaises(ParameterError):
            self.dispatcher.dispatch("position-stats-in-pending-ack", flags)
        self.assertEqual(self.client.calls, [])


if __name__ == "__main__":
    unittest.main()
