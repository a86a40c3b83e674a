"""
Constants for field names and values of the pass bundle format.

See https://developer.apple.com/library/archive/documentation/UserExperience/Reference/PassKit_Bundle/Chapters/LowerLevel.html
"""

PASS_MIME_TYPE = "application/vnd.apple.pkpass"
PASS_FILE_EXTENSION = "pkpass"

TRANSIT = {
    "AIR": "PKTransitTypeAir",
    "BOAT": "PKTransitTypeBoat",
    "BUS": "PKTransitTypeBus",
    "TRAIN": "PKTransitTypeTrain",
    "GENERIC": "PKTransitTypeGeneric",
}

TEXT_ALIGNMENT = {
    "LEFT": "PKTextAlignmentLeft",
    "CENTER": "PKTextAlignmentCenter",
    "RIGHT": "PKTextAlignmentRight",
    "NATURAL": "PKTextAlignmentNatural",
}

BARCODE_FORMAT = {
    "QR": "PKBarcodeFormatQR",
    "PDF417": "PKBarcodeFormatPDF417",
    "AZTEC": "PKBarcodeFormatAztec",
    "CODE128": "PKBarcodeFormatCode128",
}

DATE_STYLE = {
    "NONE": "PKDateStyleNone",
    "SHORT": "PKDateStyleShort",
    "MEDIUM": "PKDateStyleMedium",
    "LONG": "PKDateStyleLong",
    "FULL": "PKDateStyleFull",
}

DATA_DETECTOR = {
    "PHONE": "PKDataDetectorTypePhoneNumber",
    "LINK": "PKDataDetectorTypeLink",
    "ADDRESS": "PKDataDetectorTypeAddress",
    "CALENDAR": "PKDataDetectorTypeCalendarEvent",
}

NUMBER_STYLE = {
    "DECIMAL": "PKNumberStyleDecimal",
    "PERCENT": "PKNumberStylePercent",
    "SCIENTIFIC": "PKNumberStyleScientific",
    "SPELL_OUT": "PKNumberStyleSpellOut",
}

# Baseline sizes in points (1x pixels). Icon is a lower bound, the rest are
# upper bounds. All of them scale with density.
IMAGES = {
    "icon": {"width": 29, "height": 29, "required": True},
    "logo": {"width": 160, "height": 50, "required": True},
    "background": {"width": 180, "height": 220},
    "footer": {"width": 295, "height": 15},
    "strip": {"width": 375, "height": 123},
    "thumbnail": {"width": 90, "height": 90},
}

MINIMUM_SIZE_IMAGES = frozenset(["icon"])

REQUIRED_IMAGES = ("icon", "logo")

DENSITIES = ("1x", "2x", "3x")

# Order matters: it is the order used to detect the style of a descriptor
PASS_STYLES = ("boardingPass", "coupon", "eventTicket", "storeCard", "generic")

STRUCTURE_FIELDS = (
    "headerFields",
    "primaryFields",
    "secondaryFields",
    "auxiliaryFields",
    "backFields",
)

REQUIRED_FIELDS = (
    "description",
    "organizationName",
    "passTypeIdentifier",
    "serialNumber",
    "teamIdentifier",
)

BARCODES_FORMAT = frozenset(BARCODE_FORMAT.values())

MIN_AUTHENTICATION_TOKEN_LENGTH = 16

FORMAT_VERSION = 1
