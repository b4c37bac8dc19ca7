"""
receipts.py - Receipt Foundation Module

Canonical emit_receipt() for the gamma simulator. ALL modules import from here.
Single source of truth for receipt emission and ledger hashing.

Never single hash. Always dual_hash (SHA256:BLAKE3).
"""

import hashlib
import json
import math
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Union

import blake3
import numpy as np

__all__ = [
    "dual_hash",
    "emit_receipt",
    "encode_value",
    "to_json_safe",
    "dumps_json",
    "write_receipt_jsonl",
    "StopRule",
    "merkle",
    "ledger_root",
    "RECEIPT_FIELDS",
]

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TENANT = "gamma"

RECEIPT_FIELDS = {
    "receipt_type": "str",
    "ts": "ISO8601",
    "tenant_id": "str",
    "payload_hash": "str (SHA256:BLAKE3)",
}


# =============================================================================
# CORE FUNCTION 1: dual_hash
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256:BLAKE3 - ALWAYS use this, never single hash.

    Args:
        data: Bytes or string to hash

    Returns:
        str: "sha256_hex:blake3_hex" format
    """
    if isinstance(data, str):
        data = data.encode()
    sha = hashlib.sha256(data).hexdigest()
    b3 = blake3.blake3(data).hexdigest()
    return f"{sha}:{b3}"


# =============================================================================
# CORE FUNCTION 2: encode_value
# =============================================================================

def encode_value(value: Any) -> Any:
    """
    JSON hook for simulator payloads.

    Complex numbers become [real, imag] pairs, numpy scalars become Python
    numbers, numpy arrays become lists.
    """
    if isinstance(value, (complex, np.complexfloating)):
        return [float(value.real), float(value.imag)]
    if isinstance(value, np.ndarray):
        return [encode_value(v) for v in value.tolist()]
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not receipt serializable")


def _finite_or_name(value: float) -> Union[float, str]:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


def to_json_safe(value: Any) -> Any:
    """
    Recursively convert a payload into strict-JSON types.

    Complex and numpy values go through encode_value. Non-finite floats
    become the strings "NaN", "Infinity" and "-Infinity", because bare
    NaN/Infinity tokens are not valid JSON.
    """
    if isinstance(value, dict):
        return {key: to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, deque)):
        return [to_json_safe(item) for item in value]
    if isinstance(value, (float, np.floating)):
        return _finite_or_name(float(value))
    if isinstance(value, (complex, np.complexfloating, np.ndarray, np.integer)):
        return to_json_safe(encode_value(value))
    return value


def dumps_json(data: Any, **kwargs) -> str:
    """json.dumps that never emits NaN or Infinity tokens."""
    return json.dumps(to_json_safe(data), allow_nan=False, **kwargs)


# =============================================================================
# CORE FUNCTION 3: emit_receipt
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Every state change calls this.

    Args:
        receipt_type: Type identifier for this receipt
        data: Receipt payload (tenant_id defaults to 'gamma')

    Returns:
        dict: Complete receipt with ts, tenant_id, payload_hash, and data fields
    """
    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": data.get("tenant_id", DEFAULT_TENANT),
        "payload_hash": dual_hash(dumps_json(data, sort_keys=True)),
        **data
    }
    return receipt


# =============================================================================
# CORE FUNCTION 4: write_receipt_jsonl
# =============================================================================

def write_receipt_jsonl(receipt: Dict[str, Any], fh) -> None:
    """
    Append receipt as single JSON line to file handle.

    Args:
        receipt: Receipt dict to write
        fh: File handle (must be open for writing)
    """
    line = dumps_json(receipt, separators=(",", ":"))
    fh.write(line + "\n")


# =============================================================================
# CORE FUNCTION 5: merkle
# =============================================================================

def merkle(items: List[Any]) -> str:
    """
    Compute Merkle root of items.

    Args:
        items: List of items to merkle (will be JSON serialized)

    Returns:
        str: Merkle root hash in dual_hash format
    """
    if not items:
        return dual_hash(b"empty")
    hashes = [dual_hash(dumps_json(i, sort_keys=True)) for i in items]
    while len(hashes) > 1:
        if len(hashes) % 2:
            hashes.append(hashes[-1])
        hashes = [dual_hash(hashes[i] + hashes[i + 1])
                  for i in range(0, len(hashes), 2)]
    return hashes[0]


def ledger_root(ledger: Iterable[Dict[str, Any]]) -> str:
    """
    Merkle root of a receipt ledger with wall-clock stamps removed.

    Two runs with the same inputs produce the same root; ts is the only
    field that differs between them.
    """
    return merkle([{k: v for k, v in receipt.items() if k != "ts"} for receipt in ledger])


# =============================================================================
# STOPRULE EXCEPTION
# =============================================================================

class StopRule(Exception):
    """Raised when a simulator invariant breaks. Never catch silently."""
    pass
