"""
Top-level pass attributes with their coercion and validation rules.

Every setter follows the same contract: a falsy value removes the key from
the descriptor, anything else is validated and then stored.

See https://developer.apple.com/library/archive/documentation/UserExperience/Reference/PassKit_Bundle/Chapters/TopLevel.html
"""

import copy
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from .constants import (
    BARCODES_FORMAT,
    FORMAT_VERSION,
    MIN_AUTHENTICATION_TOKEN_LENGTH,
    PASS_STYLES,
)
from .geo_point import get_geo_point
from .images import PassImages
from .localizations import Localizations
from .pass_color import PassColor
from .pass_structure import PassStructure
from .w3cdate import get_date_from_w3c_string, get_w3c_date_string, is_valid_w3c_date, to_datetime

logger = logging.getLogger(__name__)

# Descriptor key -> Python attribute, used to replay a plain descriptor
# through the setters
TOP_LEVEL_ATTRIBUTES = {
    "description": "description",
    "organizationName": "organization_name",
    "passTypeIdentifier": "pass_type_identifier",
    "serialNumber": "serial_number",
    "teamIdentifier": "team_identifier",
    "groupingIdentifier": "grouping_identifier",
    "logoText": "logo_text",
    "appLaunchURL": "app_launch_url",
    "sharingProhibited": "sharing_prohibited",
    "voided": "voided",
    "suppressStripShine": "suppress_strip_shine",
    "expirationDate": "expiration_date",
    "relevantDate": "relevant_date",
    "associatedStoreIdentifiers": "associated_store_identifiers",
    "webServiceURL": "web_service_url",
    "authenticationToken": "authentication_token",
    "backgroundColor": "background_color",
    "foregroundColor": "foreground_color",
    "labelColor": "label_color",
    "stripColor": "strip_color",
    "maxDistance": "max_distance",
    "beacons": "beacons",
    "barcodes": "barcodes",
    "barcode": "barcode",
    "locations": "locations",
}


def _string_field(key: str, doc: str) -> property:
    def getter(self) -> Optional[str]:
        return self._fields.get(key)

    def setter(self, value: Optional[str]):
        if not value:
            self._fields.pop(key, None)
            return
        if not isinstance(value, str):
            raise TypeError(f"{key} must be a string, received {type(value).__name__}")
        self._fields[key] = value

    return property(getter, setter, doc=doc)


def _flag_field(key: str, doc: str) -> property:
    # presence of the key is the "true" value
    def getter(self) -> bool:
        return bool(self._fields.get(key))

    def setter(self, value):
        if value:
            self._fields[key] = True
        else:
            self._fields.pop(key, None)

    return property(getter, setter, doc=doc)


def _date_field(key: str, doc: str) -> property:
    def getter(self) -> Optional[datetime]:
        value = self._fields.get(key)
        if isinstance(value, str):
            return get_date_from_w3c_string(value)
        return value

    def setter(self, value):
        if not value:
            self._fields.pop(key, None)
            return
        if isinstance(value, str) and is_valid_w3c_date(value):
            # grammar alone lets through dates like February 31st
            get_date_from_w3c_string(value)
            self._fields[key] = value
            return
        if not isinstance(value, (str, datetime)):
            raise TypeError(f"Value for {key} must be a valid datetime, received {value!r}")
        try:
            self._fields[key] = to_datetime(value)
        except TypeError:
            raise TypeError(f"Value for {key} must be a valid datetime, received {value!r}") from None

    return property(getter, setter, doc=doc)


def _color_field(key: str, doc: str) -> property:
    def getter(self) -> Optional[PassColor]:
        return self._fields.get(key)

    def setter(self, value):
        if not value:
            self._fields.pop(key, None)
            return
        self._fields[key] = PassColor.parse(value)

    return property(getter, setter, doc=doc)


def _validate_barcode(barcode) -> Dict[str, Any]:
    if not isinstance(barcode, dict):
        raise TypeError(f"Barcode must be a dict, received {type(barcode).__name__}")
    if barcode.get("format") not in BARCODES_FORMAT:
        raise TypeError(f"Barcode format value {barcode.get('format')!r} is invalid!")
    if not isinstance(barcode.get("message"), str):
        raise TypeError("Barcode message string is required")
    if not isinstance(barcode.get("messageEncoding"), str):
        raise TypeError("Barcode messageEncoding is required")
    return dict(barcode)


def _make_location(point, relevant_text: Optional[str] = None) -> Dict[str, Any]:
    location: Dict[str, Any] = get_geo_point(point)
    if isinstance(relevant_text, str):
        location["relevantText"] = relevant_text
    return location


class PassBase(PassStructure):
    """
    Pass model: structure, top-level attributes, images and localizations.

    Args:
        fields: plain descriptor (camelCase keys) to hydrate from
        images: PassImages to copy
        localizations: Localizations to copy
        allow_http: accept a plain HTTP webServiceURL (development devices only)
    """

    def __init__(
        self,
        fields: Optional[Dict[str, Any]] = None,
        images: Optional[PassImages] = None,
        localizations: Optional[Localizations] = None,
        allow_http: bool = False,
    ):
        super().__init__(fields)
        self.allow_http = allow_http
        self._fields: Dict[str, Any] = {}

        # restore via setters
        for key, value in (fields or {}).items():
            attribute = TOP_LEVEL_ATTRIBUTES.get(key)
            if attribute:
                setattr(self, attribute, value)
            elif key not in PASS_STYLES and key not in ("formatVersion", "nfc"):
                logger.debug(f"Ignoring unknown pass field {key}")

        self.images = PassImages(images)
        self.localization = Localizations(localizations)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the pass.json descriptor as a plain dict."""
        result: Dict[str, Any] = {"formatVersion": FORMAT_VERSION}
        for key, value in self._fields.items():
            if isinstance(value, datetime):
                result[key] = get_w3c_date_string(value)
            elif isinstance(value, PassColor):
                result[key] = str(value)
            else:
                result[key] = copy.deepcopy(value)
        result.update(self.structure_to_dict())
        return result

    def has_field(self, key: str) -> bool:
        """Checks whether a descriptor key is currently set."""
        return key in self._fields

    # Standard keys
    description = _string_field(
        "description",
        "Brief description of the pass, used by accessibility technologies.",
    )
    organization_name = _string_field(
        "organizationName",
        "Display name of the organization that originated and signed the pass.",
    )
    pass_type_identifier = _string_field("passTypeIdentifier", "Pass type identifier.")
    serial_number = _string_field(
        "serialNumber",
        "Serial number that uniquely identifies the pass within its pass type.",
    )
    team_identifier = _string_field("teamIdentifier", "Team identifier of the signing organization.")
    grouping_identifier = _string_field(
        "groupingIdentifier",
        "Identifier used to group related event tickets or boarding passes.",
    )
    logo_text = _string_field("logoText", "Text displayed next to the logo on the pass.")
    app_launch_url = _string_field("appLaunchURL", "URL passed to the associated app when launching it.")

    sharing_prohibited = _flag_field("sharingProhibited", "Whether sharing of the pass is prohibited.")
    voided = _flag_field(
        "voided",
        "Whether the pass is void, e.g. a one time use coupon that has been redeemed.",
    )
    suppress_strip_shine = _flag_field(
        "suppressStripShine",
        "Whether the strip image is displayed without a shine effect.",
    )

    # Expiration and relevance keys
    expiration_date = _date_field("expirationDate", "Date and time when the pass expires.")
    relevant_date = _date_field(
        "relevantDate",
        "Date and time when the pass becomes relevant, e.g. the start time of a movie.",
    )

    # Visual appearance keys
    background_color = _color_field("backgroundColor", "Background color of the pass.")
    foreground_color = _color_field("foregroundColor", "Foreground color of the pass.")
    label_color = _color_field("labelColor", "Color of the label text.")
    strip_color = _color_field("stripColor", "Color of the strip text.")

    @property
    def associated_store_identifiers(self) -> Optional[List[int]]:
        """
        App Store item identifiers of the associated apps. Non-integer
        entries are dropped.
        """
        return self._fields.get("associatedStoreIdentifiers")

    @associated_store_identifiers.setter
    def associated_store_identifiers(self, value):
        if not value:
            self._fields.pop("associatedStoreIdentifiers", None)
            return
        identifiers = [n for n in value if isinstance(n, int) and not isinstance(n, bool)]
        if identifiers:
            self._fields["associatedStoreIdentifiers"] = identifiers
        else:
            self._fields.pop("associatedStoreIdentifiers", None)

    @property
    def web_service_url(self) -> Optional[str]:
        """
        URL of the web service used to update the pass. Must be HTTPS unless
        the pass was created with ``allow_http=True``.
        """
        return self._fields.get("webServiceURL")

    @web_service_url.setter
    def web_service_url(self, value: Optional[str]):
        if not value:
            self._fields.pop("webServiceURL", None)
            return
        if not isinstance(value, str):
            raise TypeError(f"webServiceURL must be a string, received {type(value).__name__}")
        if any(char.isspace() for char in value):
            raise TypeError(f"Invalid webServiceURL {value!r}: contains whitespace")
        try:
            url = urlsplit(value)
            # port is parsed lazily, out of range values raise here
            url.port
        except ValueError as e:
            raise TypeError(f"Invalid webServiceURL {value!r}: {e}") from None
        if url.scheme not in ("http", "https") or not url.hostname:
            raise TypeError(f"Invalid webServiceURL {value!r}")
        if url.scheme != "https" and not self.allow_http:
            raise TypeError("webServiceURL must be on HTTPS!")
        self._fields["webServiceURL"] = value

    @property
    def authentication_token(self) -> Optional[str]:
        """Token used with the web service, 16 characters or longer."""
        return self._fields.get("authenticationToken")

    @authentication_token.setter
    def authentication_token(self, value: Optional[str]):
        if not value:
            self._fields.pop("authenticationToken", None)
            return
        if not isinstance(value, str):
            raise TypeError(f"authenticationToken must be a string, received {type(value).__name__}")
        if len(value) < MIN_AUTHENTICATION_TOKEN_LENGTH:
            raise TypeError(
                f"authenticationToken must be {MIN_AUTHENTICATION_TOKEN_LENGTH} characters or longer"
            )
        self._fields["authenticationToken"] = value

    @property
    def max_distance(self) -> Optional[int]:
        """Maximum distance in meters from a location at which the pass is relevant."""
        return self._fields.get("maxDistance")

    @max_distance.setter
    def max_distance(self, value: Optional[int]):
        if not value:
            self._fields.pop("maxDistance", None)
            return
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise TypeError("maxDistance must be a positive integer distance in meters!")
        self._fields["maxDistance"] = value

    @property
    def beacons(self) -> Optional[List[Dict[str, Any]]]:
        """Beacons marking locations where the pass is relevant."""
        return self._fields.get("beacons")

    @beacons.setter
    def beacons(self, value):
        if not value:
            self._fields.pop("beacons", None)
            return
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"beacons must be a list, received {type(value).__name__}")
        for beacon in value:
            if not isinstance(beacon, dict) or not beacon.get("proximityUUID"):
                raise TypeError("each beacon must contain proximityUUID")
        self._fields["beacons"] = [dict(beacon) for beacon in value]

    @property
    def barcodes(self) -> Optional[List[Dict[str, Any]]]:
        """
        Barcodes of the pass. The first one the device supports is shown,
        the rest are fallbacks.
        """
        return self._fields.get("barcodes")

    @barcodes.setter
    def barcodes(self, value):
        if not value:
            self._fields.pop("barcodes", None)
            self._fields.pop("barcode", None)
            return
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"barcodes must be a list, received {type(value).__name__}")
        # validate everything before replacing the current value
        self._fields["barcodes"] = [_validate_barcode(barcode) for barcode in value]

    @property
    def barcode(self) -> Optional[Dict[str, Any]]:
        """Legacy single barcode dictionary, kept for older devices."""
        return self._fields.get("barcode")

    @barcode.setter
    def barcode(self, value):
        if not value:
            self._fields.pop("barcode", None)
            return
        self._fields["barcode"] = _validate_barcode(value)

    def add_location(self, point, relevant_text: Optional[str] = None) -> "PassBase":
        """
        Adds a location where the pass is relevant.

        Args:
            point: [longitude, latitude, altitude?], {lat, lng, alt?} or
                {latitude, longitude, altitude?}
            relevant_text: text shown on the lock screen near this location
        """
        self._fields.setdefault("locations", []).append(_make_location(point, relevant_text))
        return self

    @property
    def locations(self) -> Optional[List[Dict[str, Any]]]:
        """Locations where the pass is relevant."""
        return self._fields.get("locations")

    @locations.setter
    def locations(self, value):
        if not value:
            self._fields.pop("locations", None)
            return
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"locations must be a list, received {type(value).__name__}")
        self._fields["locations"] = [
            _make_location(location, location.get("relevantText") if isinstance(location, dict) else None)
            for location in value
        ]
