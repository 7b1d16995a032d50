"""
Idempotency registry for Settlement IDs.

Rejects a second submission of the same remittance tuple. In-memory only:
the Settlement ID is derived data, used here as a cache key, never as a
source of truth.
"""

import threading
from typing import Dict, Optional

from settleid.core.exceptions import DuplicateSettlementError
from settleid.core.models import RemittanceFingerprintInput, SettlementId
from settleid.verification.service import _WARN_STACKLEVEL, SettlementIdService


class SettlementRegistry:
    """
    Thread-safe set of seen Settlement IDs.

    register() computes outside the lock (the pipeline is pure) and only
    serializes the check-and-insert.
    """

    def __init__(self, service: Optional[SettlementIdService] = None):
        self.service = service or SettlementIdService()
        self._seen: Dict[SettlementId, int] = {}
        self._lock = threading.Lock()

    def register(self, fingerprint_input: RemittanceFingerprintInput) -> SettlementId:
        """
        Compute and record the ID for a remittance.

        Raises:
            DuplicateSettlementError — this ID was already registered
            InvalidInput             — the input failed validation
        """
        settlement_id = self.service._compute(fingerprint_input, _WARN_STACKLEVEL)
        with self._lock:
            if settlement_id in self._seen:
                raise DuplicateSettlementError(
                    "duplicate settlement",
                    {
                        "settlement_id":          settlement_id.hex(),
                        "first_remittance_id":    self._seen[settlement_id],
                        "duplicate_remittance_id": fingerprint_input.remittance_id,
                    },
                )
            self._seen[settlement_id] = fingerprint_input.remittance_id
        return settlement_id

    def contains(self, settlement_id) -> bool:
        """Accepts a SettlementId, 32 raw bytes, or 64 hex characters."""
        key = SettlementId.coerce(settlement_id)
        with self._lock:
            return key in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
