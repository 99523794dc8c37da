"""
Versioned load of the stored ledger payload.

Version 1 is the legacy format: a bare JSON array of records with
numeric amounts, written before the `time` field existed. Version 2
wraps the records in {"version": 2, "transactions": [...]} and stores
amounts as decimal strings.

Migration runs exactly once, when the store is initialised; reads and
queries never see unmigrated records.
"""

from typing import Any

from cashbook.models.transaction import DEFAULT_TIME, TransactionType
from cashbook.services.storage.interface import CorruptDataError
from cashbook.validation.validator import parse_decimal


LEGACY_VERSION = 1
SCHEMA_VERSION = 2


def unpack_payload(payload: Any) -> tuple[int, list[dict[str, Any]]]:
    """
    Split a decoded payload into (version, records).

    Raises:
        CorruptDataError: If the payload has an unknown shape or version
    """
    if isinstance(payload, list):
        version, records = LEGACY_VERSION, payload
    elif isinstance(payload, dict):
        version = payload.get("version")
        records = payload.get("transactions")
        if version not in (LEGACY_VERSION, SCHEMA_VERSION):
            raise CorruptDataError(f"Unsupported ledger version: {version!r}")
        if not isinstance(records, list):
            raise CorruptDataError("Ledger payload has no transaction list")
    else:
        raise CorruptDataError(f"Unexpected ledger payload type: {type(payload).__name__}")

    if not all(isinstance(record, dict) for record in records):
        raise CorruptDataError("Ledger contains a record that is not an object")

    return version, records


def migrate_v1(records: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], int]:
    """
    Bring legacy records up to the current schema.

    - a missing or empty `time` becomes "00:00"
    - numeric amounts become Decimals (via their shortest repr)
    - numeric ids become strings
    - a missing `type` is derived from the amount's sign

    Returns:
        (migrated_records, number_of_times_backfilled)
    """
    migrated = []
    backfilled = 0

    for record in records:
        record = dict(record)

        if not record.get("time"):
            record["time"] = DEFAULT_TIME
            backfilled += 1

        if isinstance(record.get("id"), (int, float)) and not isinstance(record.get("id"), bool):
            record["id"] = str(record["id"])

        amount = parse_decimal(record.get("amount"))
        if amount is not None:
            record["amount"] = amount
            if not record.get("type") and amount != 0:
                record["type"] = TransactionType.for_amount(amount).value

        migrated.append(record)

    return migrated, backfilled


def load_records(payload: Any) -> tuple[list[dict[str, Any]], int, int]:
    """
    Decode any supported payload into current-schema record dicts.

    Returns:
        (records, source_version, number_of_times_backfilled)
    """
    version, records = unpack_payload(payload)

    if version == LEGACY_VERSION:
        records, backfilled = migrate_v1(records)
        return records, version, backfilled

    return [dict(record) for record in records], version, 0
