"""
settleid: Basic Usage Example

Demonstrates:
- Deriving account addresses from ed25519 keys
- Computing a Settlement ID from a remittance record
- Verifying a candidate ID
- Rejecting a duplicate submission
"""

from settleid import (
    AccountAddress,
    DuplicateSettlementError,
    RemittanceFingerprintInput,
    SettlementIdService,
    SettlementRegistry,
    canonical_encode,
    compute_settlement_id,
    strict_config,
    verify_settlement_id,
)


def main():
    """Basic settleid usage."""

    print("=" * 60)
    print("settleid: Basic Usage Example")
    print("=" * 60)
    print()

    # 1️⃣ Addresses
    print("1️⃣ Deriving sender and agent addresses...")
    sender = AccountAddress.from_seed(bytes.fromhex("deadbeef" * 4 + "cafebabe" * 4))
    agent  = AccountAddress.from_seed(bytes.fromhex("cafebabe" * 4 + "deadbeef" * 4))
    print(f"  sender: {sender.strkey}")
    print(f"  agent:  {agent.strkey}")
    print()

    # 2️⃣ Compute
    print("2️⃣ Computing Settlement ID...")
    record = RemittanceFingerprintInput(
        remittance_id=42,
        sender=sender,
        agent=agent,
        amount=1_000_000_000,
        fee=30_000_000,
    )
    buffer        = canonical_encode(record)
    settlement_id = compute_settlement_id(record)
    print(f"  canonical buffer: {len(buffer)} bytes")
    print(f"  settlement id:    {settlement_id.hex()}")
    print()

    # 3️⃣ Verify
    print("3️⃣ Verifying...")
    print(f"  stored id matches:   {verify_settlement_id(record, settlement_id.hex())}")
    print(f"  tampered id matches: {verify_settlement_id(record, '00' * 32)}")
    print()

    # 4️⃣ Duplicate detection
    print("4️⃣ Registering under strict mode...")
    registry = SettlementRegistry(SettlementIdService(strict_config()))
    registry.register(record)
    try:
        registry.register(record)
    except DuplicateSettlementError as e:
        print(f"  ✅ second submission rejected: {e}")
    print()

    print("=" * 60)
    print("✅ Example complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
