"""
settleid/__init__.py

settleid: Deterministic Settlement IDs for remittance records

A Settlement ID is SHA-256 over a fixed, versioned byte layout of
(schema_version, remittance_id, sender, agent, amount, fee, expiry).
Any implementation reproducing the layout in settleid/core/schema.py
produces byte-identical IDs; cross_lang_proof/settlement_id_v1.json is
the shared conformance gate.
"""

__version__ = "0.3.0"

from settleid.core.address import AccountAddress, canonicalize_address
from settleid.core.canonical import canonical_encode, field_offsets
from settleid.core.config import (
    SettlementConfig,
    SettlementMode,
    config_from_env,
    standard_config,
    strict_config,
)
from settleid.core.digest import compute_digest
from settleid.core.exceptions import (
    DuplicateSettlementError,
    EncodingError,
    InvalidInput,
    SchemaVersionMismatch,
    SettleIdError,
    ZeroExpiryWarning,
)
from settleid.core.models import RemittanceFingerprintInput, SettlementId
from settleid.core.schema import CURRENT_SCHEMA_VERSION, SCHEMA_LAYOUTS, get_layout
from settleid.settlement.registry import SettlementRegistry
from settleid.verification.service import (
    SettlementIdService,
    compute_settlement_id,
    compute_settlement_id_from_fields,
    verify_settlement_id,
    verify_settlement_id_from_fields,
)

__all__ = [
    # Core types
    "AccountAddress",
    "RemittanceFingerprintInput",
    "SettlementId",
    "SettlementIdService",
    "SettlementRegistry",
    # Pipeline
    "canonical_encode",
    "canonicalize_address",
    "compute_digest",
    "field_offsets",
    "get_layout",
    # Operations
    "compute_settlement_id",
    "compute_settlement_id_from_fields",
    "verify_settlement_id",
    "verify_settlement_id_from_fields",
    # Config
    "SettlementConfig",
    "SettlementMode",
    "config_from_env",
    "standard_config",
    "strict_config",
    # Errors
    "SettleIdError",
    "InvalidInput",
    "EncodingError",
    "SchemaVersionMismatch",
    "DuplicateSettlementError",
    "ZeroExpiryWarning",
    # Constants
    "CURRENT_SCHEMA_VERSION",
    "SCHEMA_LAYOUTS",
]
