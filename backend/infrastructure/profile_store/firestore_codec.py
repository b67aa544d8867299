"""Plain JSON values <-> Firestore REST `Value` objects.

Firestore's REST surface wraps every value in a one-key type tag, e.g.
`{"stringValue": "x"}`, `{"integerValue": "550"}` (int64 as string),
`{"arrayValue": {"values": [...]}}`, `{"mapValue": {"fields": {...}}}`.
"""

from __future__ import annotations

from typing import Any, Mapping


def encode_value(value: Any) -> dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k): encode_value(v) for k, v in data.items()}


def decode_value(value: Mapping[str, Any]) -> Any:
    if not isinstance(value, Mapping) or not value:
        return None
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return str(value["stringValue"])
    if "timestampValue" in value:
        return str(value["timestampValue"])
    if "referenceValue" in value:
        return str(value["referenceValue"])
    if "bytesValue" in value:
        return str(value["bytesValue"])
    if "geoPointValue" in value:
        return dict(value["geoPointValue"] or {})
    if "mapValue" in value:
        return decode_fields((value["mapValue"] or {}).get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(v) for v in (value["arrayValue"] or {}).get("values") or []]
    return None


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k): decode_value(v) for k, v in (fields or {}).items()}
