"""Stored index-set document: JSON payload, gzip-compressed and base64-encoded."""

import base64
import gzip
import json
from typing import Any

from app.services.index_sets.models import IndexSet
from app.services.index_sets.naming import prune_index_set

PAYLOAD_FIELD = "index_set_request"


def encode_payload(payload: dict[str, Any]) -> str:
    raw = json.dumps(payload, sort_keys=True).encode("utf-8")
    return base64.b64encode(gzip.compress(raw)).decode("ascii")


def decode_payload(encoded: str) -> dict[str, Any]:
    raw = gzip.decompress(base64.b64decode(encoded))
    return json.loads(raw.decode("utf-8"))


def document_id(index_set_id: Any) -> str:
    """Store key for an index set. Path params and body ids both resolve to the same key."""
    return str(index_set_id)


def build_stored_document(index_set: IndexSet) -> dict[str, Any]:
    """
    Full definition augmented with the pruned `concepts` name map, encoded into the payload.
    The concept groups stay in the payload so later updates (rebalancing, delete) can rebuild the plan.
    """
    payload = index_set.to_wire()
    payload["concepts"] = prune_index_set(index_set)["concepts"]
    return {
        "index_set_id": index_set.id,
        "index_set_name": index_set.name,
        PAYLOAD_FIELD: encode_payload(payload),
    }


def read_stored_document(document: dict[str, Any]) -> dict[str, Any]:
    """Decoded payload of a stored document."""
    return decode_payload(document[PAYLOAD_FIELD])
