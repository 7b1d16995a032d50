"""
settleid/verification/service.py

Settlement ID computation and verification.

    compute:  config rules → codec → canonical encoder → digest
    verify:   recompute, then exact byte equality against the candidate

Stateless per call. The service holds only its immutable config.
"""

from typing import Optional, Union

from settleid.core.address import AddressLike
from settleid.core.canonical import encode_with_layout
from settleid.core.config import SettlementConfig, standard_config
from settleid.core.digest import compute_digest
from settleid.core.exceptions import SchemaVersionMismatch
from settleid.core.models import RemittanceFingerprintInput, SettlementId
from settleid.core.schema import get_layout


CandidateId = Union[SettlementId, bytes, str]

# warnings stacklevel that lands on the caller of a public entry point:
# config.check → _compute → entry point → caller.
_WARN_STACKLEVEL = 4


class SettlementIdService:
    """
    Computes and verifies Settlement IDs under one configuration.

    The config decides which caller-side business rules run before
    encoding and which schema version flat-argument calls use. It never
    changes the bytes produced for an accepted input.
    """

    def __init__(self, config: Optional[SettlementConfig] = None):
        self.config = config or standard_config()

    def compute(self, fingerprint_input: RemittanceFingerprintInput) -> SettlementId:
        """
        Compute the Settlement ID for a fingerprint input.

        Raises:
            InvalidInput          — a config business rule rejected the input
            EncodingError         — a field is not representable (subclass of InvalidInput)
            SchemaVersionMismatch — input.schema_version is not registered
        """
        return self._compute(fingerprint_input, _WARN_STACKLEVEL)

    def verify(
        self,
        fingerprint_input: RemittanceFingerprintInput,
        candidate:         CandidateId,
        schema_version:    Optional[int] = None,
    ) -> bool:
        """
        Recompute and compare against candidate by exact byte equality.

        schema_version, when given, is the version the candidate claims to
        have been produced under. It must be implemented here and must match
        the input's own version; otherwise SchemaVersionMismatch is raised
        (fail closed: "cannot verify" is never reported as a mismatch or a
        match).

        A malformed candidate raises InvalidInput.
        """
        return self._verify(fingerprint_input, candidate, schema_version, _WARN_STACKLEVEL + 1)

    def _compute(
        self,
        fingerprint_input: RemittanceFingerprintInput,
        stacklevel:        int,
    ) -> SettlementId:
        layout = get_layout(fingerprint_input.schema_version)
        self.config.check(fingerprint_input, stacklevel)
        buffer = encode_with_layout(layout, fingerprint_input)
        return SettlementId(compute_digest(buffer, layout.hash_algorithm))

    def _verify(
        self,
        fingerprint_input: RemittanceFingerprintInput,
        candidate:         CandidateId,
        schema_version:    Optional[int],
        stacklevel:        int,
    ) -> bool:
        expected = SettlementId.coerce(candidate)
        if schema_version is not None:
            get_layout(schema_version)
            if schema_version != fingerprint_input.schema_version:
                raise SchemaVersionMismatch(
                    "candidate schema_version differs from input schema_version",
                    {
                        "candidate": schema_version,
                        "input":     fingerprint_input.schema_version,
                    },
                )
        return self._compute(fingerprint_input, stacklevel) == expected

    def build_input(
        self,
        remittance_id: int,
        sender:        AddressLike,
        agent:         AddressLike,
        amount:        int,
        fee:           int,
        expiry:        Optional[int] = None,
    ) -> RemittanceFingerprintInput:
        return RemittanceFingerprintInput(
            remittance_id=  remittance_id,
            sender=         sender,
            agent=          agent,
            amount=         amount,
            fee=            fee,
            expiry=         expiry,
            schema_version= self.config.schema_version,
        )


# ── Module-level surface ──────────────────────────────────────

_default_service = SettlementIdService()


def _service(config: Optional[SettlementConfig]) -> SettlementIdService:
    return _default_service if config is None else SettlementIdService(config)


def compute_settlement_id(
    fingerprint_input: RemittanceFingerprintInput,
    config:            Optional[SettlementConfig] = None,
) -> SettlementId:
    return _service(config)._compute(fingerprint_input, _WARN_STACKLEVEL)


def verify_settlement_id(
    fingerprint_input: RemittanceFingerprintInput,
    candidate:         CandidateId,
    schema_version:    Optional[int] = None,
    config:            Optional[SettlementConfig] = None,
) -> bool:
    return _service(config)._verify(fingerprint_input, candidate, schema_version, _WARN_STACKLEVEL + 1)


def compute_settlement_id_from_fields(
    remittance_id: int,
    sender:        AddressLike,
    agent:         AddressLike,
    amount:        int,
    fee:           int,
    expiry:        Optional[int] = None,
    config:        Optional[SettlementConfig] = None,
) -> SettlementId:
    """Flat-argument form: (remittance_id, sender, agent, amount, fee, expiry) → ID."""
    service = _service(config)
    return service._compute(
        service.build_input(remittance_id, sender, agent, amount, fee, expiry),
        _WARN_STACKLEVEL,
    )


def verify_settlement_id_from_fields(
    expected:      CandidateId,
    remittance_id: int,
    sender:        AddressLike,
    agent:         AddressLike,
    amount:        int,
    fee:           int,
    expiry:        Optional[int] = None,
    config:        Optional[SettlementConfig] = None,
) -> bool:
    service = _service(config)
    return service._verify(
        service.build_input(remittance_id, sender, agent, amount, fee, expiry),
        expected,
        None,
        _WARN_STACKLEVEL + 1,
    )
