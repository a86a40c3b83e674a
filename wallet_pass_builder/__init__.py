"""
Wallet pass bundle builder

Builds signed .pkpass bundles: a pass.json descriptor, images, localized
strings, a SHA-1 manifest and its detached signature, zipped together.
"""

__version__ = "1.0.0"

from .base_pass import PassBase
from .config import WalletSettings
from .constants import (
    BARCODE_FORMAT,
    DATA_DETECTOR,
    DATE_STYLE,
    NUMBER_STYLE,
    PASS_MIME_TYPE,
    PASS_STYLES,
    TEXT_ALIGNMENT,
    TRANSIT,
)
from .exceptions import (
    InconsistentFieldsError,
    PassSigningError,
    PassStyleError,
    PassValidationError,
    WalletPassError,
)
from .fields_map import FieldsMap
from .images import PassImages
from .localizations import Localizations
from .models import BundleMember
from .nfc_fields import NFCField
from .pass_color import PassColor
from .pass_structure import PassStructure
from .pkpass import Pass
from .signing import sign_manifest
from .template import Template
from .w3cdate import get_date_from_w3c_string, get_w3c_date_string, is_valid_w3c_date

__all__ = [
    "BARCODE_FORMAT",
    "DATA_DETECTOR",
    "DATE_STYLE",
    "NUMBER_STYLE",
    "PASS_MIME_TYPE",
    "PASS_STYLES",
    "TEXT_ALIGNMENT",
    "TRANSIT",
    "BundleMember",
    "FieldsMap",
    "InconsistentFieldsError",
    "Localizations",
    "NFCField",
    "Pass",
    "PassBase",
    "PassColor",
    "PassImages",
    "PassSigningError",
    "PassStructure",
    "PassStyleError",
    "PassValidationError",
    "WalletPassError",
    "WalletSettings",
    "Template",
    "get_date_from_w3c_string",
    "get_w3c_date_string",
    "is_valid_w3c_date",
    "sign_manifest",
]
