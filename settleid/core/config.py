"""
settleid: Standard and Strict Modes.

Standard: the pipeline as-is. Any representable value is accepted.
          expiry=0 is accepted with a ZeroExpiryWarning.
Strict:   business rules on top. Negative amount/fee and an explicit
          expiry of 0 are rejected with InvalidInput before encoding.

Neither mode changes the bytes produced for an accepted input.
"""

import os
import warnings
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

import yaml

from settleid.core.exceptions import InvalidInput, ZeroExpiryWarning
from settleid.core.models import RemittanceFingerprintInput
from settleid.core.schema import CURRENT_SCHEMA_VERSION, get_layout


class SettlementMode(Enum):
    STANDARD = "standard"
    STRICT   = "strict"


@dataclass(frozen=True)
class SettlementConfig:
    mode:                 SettlementMode
    schema_version:       int
    require_non_negative: bool
    warn_on_zero_expiry:  bool
    reject_zero_expiry:   bool

    def __post_init__(self) -> None:
        # Fail at construction, not on the first compute call.
        get_layout(self.schema_version)

    # ── Loading ───────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, data: dict) -> "SettlementConfig":
        """
        Build from a plain mapping. Keys other than mode and schema_version
        override the chosen mode's defaults.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidInput(
                "settlement config must be a mapping",
                {"got": type(data).__name__},
            )
        base = _mode_defaults(data.get("mode", SettlementMode.STANDARD.value))

        overrides = {}
        if "schema_version" in data:
            overrides["schema_version"] = data["schema_version"]
        for key in ("require_non_negative", "warn_on_zero_expiry", "reject_zero_expiry"):
            if key in data:
                if not isinstance(data[key], bool):
                    raise InvalidInput(f"config key '{key}' must be a boolean")
                overrides[key] = data[key]
        return replace(base, **overrides)

    @classmethod
    def from_yaml(cls, path: Path) -> "SettlementConfig":
        """Load config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_mapping(yaml.safe_load(f))

    # ── Business rules ────────────────────────────────────────

    def check(self, fingerprint_input: RemittanceFingerprintInput, stacklevel: int = 2) -> None:
        """
        Apply the caller-side rules this mode enforces.
        Runs before the codec; never alters the input.

        stacklevel is passed to warnings.warn so a ZeroExpiryWarning points
        at the caller's line, however many frames sit in between.
        """
        if self.require_non_negative:
            for name in ("amount", "fee"):
                value = getattr(fingerprint_input, name)
                if isinstance(value, int) and value < 0:
                    raise InvalidInput(
                        f"{name} must be non-negative",
                        {name: value},
                    )

        if fingerprint_input.expiry == 0 and not isinstance(fingerprint_input.expiry, bool):
            msg = (
                f"remittance {fingerprint_input.remittance_id}: expiry=0 encodes "
                "identically to no expiry"
            )
            if self.reject_zero_expiry:
                raise InvalidInput(msg, {"expiry": 0})
            if self.warn_on_zero_expiry:
                warnings.warn(msg, ZeroExpiryWarning, stacklevel=stacklevel)


def _mode_defaults(mode) -> SettlementConfig:
    if isinstance(mode, SettlementMode):
        mode = mode.value
    if not isinstance(mode, str) or mode.lower() not in ("standard", "strict"):
        raise InvalidInput(
            f"unknown settlement mode {mode!r}",
            {"valid": "standard, strict"},
        )
    return strict_config() if mode.lower() == "strict" else standard_config()


# ─────────────────────────────────────────────────────────────
# Factory Functions
# ─────────────────────────────────────────────────────────────

def standard_config(schema_version: int = CURRENT_SCHEMA_VERSION) -> SettlementConfig:
    return SettlementConfig(
        mode=SettlementMode.STANDARD,
        schema_version=schema_version,
        require_non_negative=False,
        warn_on_zero_expiry=True,
        reject_zero_expiry=False,
    )


def strict_config(schema_version: int = CURRENT_SCHEMA_VERSION) -> SettlementConfig:
    return SettlementConfig(
        mode=SettlementMode.STRICT,
        schema_version=schema_version,
        require_non_negative=True,
        warn_on_zero_expiry=True,
        reject_zero_expiry=True,
    )


def config_from_env() -> SettlementConfig:
    """Read SETTLEID_MODE and SETTLEID_SCHEMA_VERSION. Defaults to standard, v1."""
    data = {"mode": os.environ.get("SETTLEID_MODE", "standard")}
    raw_version = os.environ.get("SETTLEID_SCHEMA_VERSION")
    if raw_version:
        try:
            data["schema_version"] = int(raw_version)
        except ValueError:
            raise InvalidInput(
                "SETTLEID_SCHEMA_VERSION must be an integer",
                {"got": raw_version},
            ) from None
    return SettlementConfig.from_mapping(data)
