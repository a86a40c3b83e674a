"""
Data models and schemas shared by the bundle assembly code.
"""

from dataclasses import dataclass

from .constants import BARCODES_FORMAT, PASS_STYLES, STRUCTURE_FIELDS, TRANSIT


@dataclass(frozen=True)
class BundleMember:
    """One file of the output bundle, ``path`` relative to the bundle root."""

    path: str
    data: bytes


_FIELD_SCHEMA = {
    "type": "object",
    "required": ["key", "value"],
    "properties": {
        "key": {"type": "string", "minLength": 1},
        "label": {"type": "string"},
        "value": {"type": ["string", "number"]},
        "changeMessage": {"type": "string"},
        "dateStyle": {"type": "string"},
        "timeStyle": {"type": "string"},
        "ignoresTimeZone": {"type": "boolean"},
        "isRelative": {"type": "boolean"},
    },
}

_STRUCTURE_SCHEMA = {
    "type": "object",
    "properties": {
        **{name: {"type": "array", "items": _FIELD_SCHEMA} for name in STRUCTURE_FIELDS},
        "transitType": {"type": "string", "enum": sorted(TRANSIT.values())},
        "nfc": {"type": "object"},
    },
}

# JSON Schema for template pass.json validation. Only the shape is checked
# here, value rules are enforced by the pass model setters.
PASS_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "formatVersion": {"type": "integer", "enum": [1]},
        "description": {"type": "string"},
        "organizationName": {"type": "string"},
        "passTypeIdentifier": {"type": "string"},
        "serialNumber": {"type": "string"},
        "teamIdentifier": {"type": "string"},
        "groupingIdentifier": {"type": "string"},
        "logoText": {"type": "string"},
        "sharingProhibited": {"type": "boolean"},
        "voided": {"type": "boolean"},
        "suppressStripShine": {"type": "boolean"},
        "expirationDate": {"type": "string"},
        "relevantDate": {"type": "string"},
        "associatedStoreIdentifiers": {"type": "array", "items": {"type": "integer"}},
        "webServiceURL": {"type": "string"},
        "authenticationToken": {"type": "string", "minLength": 16},
        "backgroundColor": {"type": "string"},
        "foregroundColor": {"type": "string"},
        "labelColor": {"type": "string"},
        "stripColor": {"type": "string"},
        "maxDistance": {"type": "integer", "minimum": 0},
        "beacons": {
            "type": "array",
            "items": {"type": "object", "required": ["proximityUUID"]},
        },
        "locations": {"type": "array", "items": {"type": "object"}},
        "barcodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["format", "message", "messageEncoding"],
                "properties": {
                    "format": {"type": "string", "enum": sorted(BARCODES_FORMAT)},
                    "message": {"type": "string"},
                    "messageEncoding": {"type": "string"},
                    "altText": {"type": "string"},
                },
            },
        },
        **{style: _STRUCTURE_SCHEMA for style in PASS_STYLES},
    },
}
