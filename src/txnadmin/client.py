"""Admin client boundary for the transactions API, plus its HTTP implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
from typing import Any, Optional
from urllib.parse import quote

import httpx

from .exceptions import AdminServerError, TransportError
from .logging_config import StructuredLogger
from .types import Position, TopicName, TransactionId

logger = StructuredLogger("client")

BASE_PATH = "/admin/v3/transactions"


class AdminClient(ABC):
    """One method per ``transactions`` subcommand. Results are opaque and printable."""

    def close(self) -> None:
        pass

    def __enter__(self) -> "AdminClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @abstractmethod
    def get_coordinator_stats(self) -> Any: ...

    @abstractmethod
    def get_coordinator_stats_by_id(self, coordinator_id: int) -> Any: ...

    @abstractmethod
    def get_transaction_buffer_stats(self, topic: TopicName, low_water_marks: bool) -> Any: ...

    @abstractmethod
    def get_pending_ack_stats(self, topic: TopicName, subscription: str, low_water_marks: bool) -> Any: ...

    @abstractmethod
    def get_transaction_in_pending_ack_stats(self, txn_id: TransactionId, topic: TopicName, subscription: str) -> Any: ...

    @abstractmethod
    def get_transaction_in_buffer_stats(self, txn_id: TransactionId, topic: TopicName) -> Any: ...

    @abstractmethod
    def get_transaction_metadata(self, txn_id: TransactionId) -> Any: ...

    @abstractmethod
    def get_slow_transactions(self, timeout_ms: int) -> Any: ...

    @abstractmethod
    def get_slow_transactions_by_coordinator_id(self, coordinator_id: int, timeout_ms: int) -> Any: ...

    @abstractmethod
    def get_coordinator_internal_stats(self, coordinator_id: int, metadata: bool) -> Any: ...

    @abstractmethod
    def get_pending_ack_internal_stats(self, topic: TopicName, subscription: str, metadata: bool) -> Any: ...

    @abstractmethod
    def scale_transaction_coordinators(self, replicas: int) -> None: ...

    @abstractmethod
    def get_position_stats_in_pending_ack(self, topic: TopicName, subscription: str, position: Position) -> Any: ...


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _reason(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    text = " ".join((response.text or "").split())
    return text[:220] or response.reason_phrase or "request failed"


class HttpTransactionsClient(AdminClient):
    """Talks to a broker's ``/admin/v3/transactions`` REST endpoints.

    Each method issues exactly one request. Nothing is retried or cached; a
    failure surfaces as :class:`TransportError` (or :class:`AdminServerError`
    when the broker answered with a non-2xx status).
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self.base_url = base_url.rstrip("/") + BASE_PATH
        self._log = logger.bind(base_url=self.base_url)
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout_seconds,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, params: Optional[dict] = None, body: Any = None) -> Any:
        self._log.debug("Admin request", method=method, path=path, params=params)
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                content=None if body is None else json.dumps(body),
                headers={"Content-Type": "application/json"} if body is not None else None,
            )
        except httpx.HTTPError as exc:
            self._log.debug("Admin request failed", method=method, path=path, error=str(exc))
            raise TransportError(f"Failed to reach admin service: {exc}") from exc

        self._log.debug("Admin response", method=method, path=path, status=response.status_code)
        if not response.is_success:
            raise AdminServerError(response.status_code, _reason(response))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Admin service returned a non-JSON body for {path}") from exc

    def get_coordinator_stats(self) -> Any:
        return self._request("GET", "/coordinatorStats")

    def get_coordinator_stats_by_id(self, coordinator_id: int) -> Any:
        return self._request("GET", "/coordinatorStats", params={"coordinatorId": coordinator_id})

    def get_transaction_buffer_stats(self, topic: TopicName, low_water_marks: bool) -> Any:
        return self._request(
            "GET",
            f"/transactionBufferStats/{topic.rest_path}",
            params={"lowWaterMarks": _flag(low_water_marks)},
        )

    def get_pending_ack_stats(self, topic: TopicName, subscription: str, low_water_marks: bool) -> Any:
        return self._request(
            "GET",
            f"/pendingAckStats/{topic.rest_path}/{quote(subscription, safe='')}",
            params={"lowWaterMarks": _flag(low_water_marks)},
        )

    def get_transaction_in_pending_ack_stats(self, txn_id: TransactionId, topic: TopicName, subscription: str) -> Any:
        return self._request(
            "GET",
            f"/transactionInPendingAckStats/{topic.rest_path}/{quote(subscription, safe='')}"
            f"/{txn_id.most_sig_bits}/{txn_id.least_sig_bits}",
        )

    def get_transaction_in_buffer_stats(self, txn_id: TransactionId, topic: TopicName) -> Any:
        return self._request(
            "GET",
            f"/transactionInBufferStats/{topic.rest_path}/{txn_id.most_sig_bits}/{txn_id.least_sig_bits}",
        )

    def get_transaction_metadata(self, txn_id: TransactionId) -> Any:
        return self._request("GET", f"/transactionMetadata/{txn_id.most_sig_bits}/{txn_id.least_sig_bits}")

    def get_slow_transactions(self, timeout_ms: int) -> Any:
        return self._request("GET", f"/slowTransactions/{timeout_ms}")

    def get_slow_transactions_by_coordinator_id(self, coordinator_id: int, timeout_ms: int) -> Any:
        return self._request("GET", f"/slowTransactions/{timeout_ms}", params={"coordinatorId": coordinator_id})

    def get_coordinator_internal_stats(self, coordinator_id: int, metadata: bool) -> Any:
        return self._request(
            "GET",
            f"/coordinatorInternalStats/{coordinator_id}",
            params={"metadata": _flag(metadata)},
        )

    def get_pending_ack_internal_stats(self, topic: TopicName, subscription: str, metadata: bool) -> Any:
        return self._request(
            "GET",
            f"/pendingAckInternalStats/{topic.rest_path}/{quote(subscription, safe='')}",
            params={"metadata": _flag(metadata)},
        )

    def scale_transaction_coordinators(self, replicas: int) -> None:
        self._request("POST", "/transactionCoordinators/replicas", body=replicas)

    def get_position_stats_in_pending_ack(self, topic: TopicName, subscription: str, position: Position) -> Any:
        params = None
        if position.batch_index is not None:
            params = {"batchIndex": position.batch_index}
        return self._request(
            "GET",
            f"/positionStatsInPendingAck/{topic.rest_path}/{quote(subscription, safe='')}"
            f"/{position.ledger_id}/{position.entry_id}",
            params=params,
        )
