"""Value types shared by the command surface and the ownership gate."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Optional
from urllib.parse import quote


INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

_BUNDLE_RE = re.compile(r"^(?P<ns>[^/\s]+/[^/\s]+)/0x(?P<lower>[0-9a-fA-F]{8})_0x(?P<upper>[0-9a-fA-F]{8})$")


@dataclass(frozen=True)
class TransactionId:
    most_sig_bits: int
    least_sig_bits: int

    def __post_init__(self):
        if not INT32_MIN <= self.most_sig_bits <= INT32_MAX:
            raise ValueError(f"most_sig_bits out of 32-bit range: {self.most_sig_bits}")
        if not INT64_MIN <= self.least_sig_bits <= INT64_MAX:
            raise ValueError(f"least_sig_bits out of 64-bit range: {self.least_sig_bits}")

    @property
    def coordinator_id(self) -> int:
        return self.most_sig_bits

    def to_dict(self) -> dict[str, Any]:
        return {"mostSigBits": self.most_sig_bits, "leastSigBits": self.least_sig_bits}

    def __str__(self) -> str:
        return f"({self.most_sig_bits},{self.least_sig_bits})"


@dataclass(frozen=True)
class Position:
    ledger_id: int
    entry_id: int
    batch_index: Optional[int] = None

    def __post_init__(self):
        for label, value in (("ledger_id", self.ledger_id), ("entry_id", self.entry_id)):
            if not INT64_MIN <= value <= INT64_MAX:
                raise ValueError(f"{label} out of 64-bit range: {value}")
        if self.batch_index is not None and not 0 <= self.batch_index <= INT32_MAX:
            raise ValueError(f"batch_index must be a non-negative 32-bit integer: {self.batch_index}")

    @property
    def whole_entry(self) -> bool:
        return self.batch_index is None

    def __str__(self) -> str:
        base = f"{self.ledger_id}:{self.entry_id}"
        return base if self.batch_index is None else f"{base}:{self.batch_index}"


@dataclass(frozen=True)
class TopicName:
    """A fully-qualified topic name, e.g. ``persistent://public/default/orders``."""

    domain: str
    tenant: str
    namespace: str
    local_name: str

    @classmethod
    def parse(cls, text: str) -> "TopicName":
        raw = str(text or "").strip()
        if not raw:
            raise ValueError("Topic name cannot be empty")

        domain = "persistent"
        rest = raw
        if "://" in raw:
            domain, rest = raw.split("://", 1)
            if domain not in ("persistent", "non-persistent"):
                raise ValueError(f"Invalid topic domain '{domain}' in '{raw}'")
        elif "/" not in raw:
            return cls(domain, "public", "default", raw)

        parts = rest.split("/", 2)
        if len(parts) != 3 or not all(parts):
            raise ValueError(f"Invalid topic name '{raw}', expected <tenant>/<namespace>/<topic>")
        return cls(domain, parts[0], parts[1], parts[2])

    @property
    def persistent(self) -> bool:
        return self.domain == "persistent"

    @property
    def rest_path(self) -> str:
        return f"{self.tenant}/{self.namespace}/{quote(self.local_name, safe='')}"

    def __str__(self) -> str:
        return f"{self.domain}://{self.tenant}/{self.namespace}/{self.local_name}"


@dataclass(frozen=True)
class NamespaceBundle:
    """A hash range of a namespace, owned by exactly one broker at a time."""

    namespace: str
    lower: int
    upper: int

    def __post_init__(self):
        if not 0 <= self.lower < self.upper <= 0xFFFFFFFF:
            raise ValueError(f"Invalid bundle range 0x{self.lower:08x}_0x{self.upper:08x}")

    @classmethod
    def parse(cls, text: str) -> "NamespaceBundle":
        match = _BUNDLE_RE.match(str(text or "").strip())
        if not match:
            raise ValueError(f"Invalid namespace bundle '{text}'")
        return cls(match["ns"], int(match["lower"], 16), int(match["upper"], 16))

    @property
    def bundle_range(self) -> str:
        return f"0x{self.lower:08x}_0x{self.upper:08x}"

    def __str__(self) -> str:
        return f"{self.namespace}/{self.bundle_range}"
