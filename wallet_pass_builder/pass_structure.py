"""
Style-exclusive structure of a pass.

A pass has exactly one style (boardingPass, coupon, eventTicket, storeCard
or generic). The style owns the five structure field collections and the
style-specific extras: ``transitType`` for boarding passes and the NFC
payload for store cards. Switching style drops everything the previous
style owned.

See https://developer.apple.com/library/archive/documentation/UserExperience/Reference/PassKit_Bundle/Chapters/LowerLevel.html
"""

import logging
from typing import Any, Dict, Optional

from .constants import PASS_STYLES, STRUCTURE_FIELDS, TRANSIT
from .exceptions import PassStyleError
from .fields_map import FieldsMap
from .nfc_fields import NFCField

logger = logging.getLogger(__name__)

TRANSIT_TYPES = frozenset(TRANSIT.values())


class PassStructure:
    """Holds the active style and the structures it owns."""

    def __init__(self, fields: Optional[Dict[str, Any]] = None):
        self._style: Optional[str] = None
        self._structure: Dict[str, FieldsMap] = {}
        self._transit_type: Optional[str] = None
        self._nfc: Optional[NFCField] = None

        fields = fields or {}
        present = [style for style in PASS_STYLES if style in fields]
        if not present:
            return
        if len(present) > 1:
            logger.warning(f"Descriptor has several styles {present}, using {present[0]}")

        self.style = present[0]
        structure = fields[self._style] or {}
        if self._style == "boardingPass" and structure.get("transitType"):
            self.transit_type = structure["transitType"]
        elif self._style == "storeCard":
            nfc = structure.get("nfc") or fields.get("nfc")
            if nfc:
                self._nfc = NFCField(nfc)

        for name in STRUCTURE_FIELDS:
            current = structure.get(name)
            if isinstance(current, FieldsMap):
                self._structure[name] = current.copy()
            elif isinstance(current, (list, tuple)):
                collection = self.get_fields(name)
                for field in current:
                    collection.add(field)

    @property
    def style(self) -> Optional[str]:
        """Pass style, e.g. boardingPass, coupon, etc."""
        return self._style

    @style.setter
    def style(self, value: Optional[str]):
        if value and value not in PASS_STYLES:
            raise TypeError(
                f'Invalid pass style "{value}", must be one of: {", ".join(PASS_STYLES)}'
            )
        if value == self._style:
            return
        # Everything owned by the previous style goes away
        self._structure = {}
        self._transit_type = None
        self._nfc = None
        self._style = value or None
        if self._style == "storeCard":
            self._nfc = NFCField()

    @property
    def transit_type(self) -> Optional[str]:
        """
        Type of transit, required for boarding passes and not allowed otherwise.

        Setting it on a pass without a style makes the pass a boarding pass.
        """
        if self._style != "boardingPass":
            raise PassStyleError(
                f"transitType field only allowed in boarding passes, current pass is {self._style}"
            )
        return self._transit_type

    @transit_type.setter
    def transit_type(self, value: Optional[str]):
        if not self._style:
            # clearing transitType on a pass without style does nothing
            if not value:
                return
            self.style = "boardingPass"
        if self._style != "boardingPass":
            raise PassStyleError(
                f"transitType field is only allowed in boarding passes, current pass is {self._style}"
            )
        if not value:
            self._transit_type = None
        elif value in TRANSIT_TYPES:
            self._transit_type = value
        else:
            raise TypeError(
                f'Unknown transit type "{value}", must be one of: {", ".join(TRANSIT.values())}'
            )

    @property
    def nfc(self) -> NFCField:
        """NFC payload, only available for store cards."""
        if self._style != "storeCard":
            raise PassStyleError(
                f"NFC fields only available for storeCard passes, current is {self._style}"
            )
        return self._nfc

    @nfc.setter
    def nfc(self, value):
        if self._style != "storeCard":
            raise PassStyleError(
                f"NFC fields only available for storeCard passes, current is {self._style}"
            )
        self._nfc = NFCField(value)

    def get_fields(self, name: str) -> FieldsMap:
        """
        Returns the named structure collection of the active style, creating
        it on first use.

        Args:
            name: one of headerFields, primaryFields, secondaryFields,
                auxiliaryFields, backFields

        Raises:
            PassStyleError: no style is set yet
        """
        if name not in STRUCTURE_FIELDS:
            raise TypeError(f'Unknown structure field "{name}", must be one of: {", ".join(STRUCTURE_FIELDS)}')
        if not self._style:
            raise PassStyleError(
                "Pass style is undefined, set the pass style before accessing pass structure fields"
            )
        if name not in self._structure:
            self._structure[name] = FieldsMap()
        return self._structure[name]

    @property
    def header_fields(self) -> FieldsMap:
        return self.get_fields("headerFields")

    @property
    def primary_fields(self) -> FieldsMap:
        return self.get_fields("primaryFields")

    @property
    def secondary_fields(self) -> FieldsMap:
        return self.get_fields("secondaryFields")

    @property
    def auxiliary_fields(self) -> FieldsMap:
        return self.get_fields("auxiliaryFields")

    @property
    def back_fields(self) -> FieldsMap:
        return self.get_fields("backFields")

    def structure_to_dict(self) -> Dict[str, Any]:
        """Returns ``{style: {...}}`` for the active style, or an empty dict."""
        if not self._style:
            return {}
        structure: Dict[str, Any] = {}
        for name in STRUCTURE_FIELDS:
            collection = self._structure.get(name)
            serialized = collection.to_list() if collection is not None else None
            if serialized is not None:
                structure[name] = serialized
        if self._style == "boardingPass" and self._transit_type:
            structure["transitType"] = self._transit_type
        if self._style == "storeCard" and self._nfc:
            structure["nfc"] = self._nfc.to_dict()
        return {self._style: structure}
