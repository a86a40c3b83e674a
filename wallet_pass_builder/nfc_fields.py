"""
NFC payload of store cards.

NFC-enabled pass keys are only honored for passes signed with an
Enhanced Passbook/NFC certificate.
"""

import base64
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

MAX_MESSAGE_BYTES = 64


class NFCField:
    """
    The ``nfc`` dictionary: message, encryption public key and
    authentication requirement. Serializes to None while no message is set.
    """

    def __init__(self, nfc: Optional[Dict[str, Any]] = None):
        self._message: Optional[str] = None
        self._encryption_public_key: Optional[str] = None
        self.requires_authentication = False
        if isinstance(nfc, NFCField):
            nfc = nfc.to_dict()
        if nfc:
            self.message = nfc.get("message")
            self.encryption_public_key = nfc.get("encryptionPublicKey")
            self.requires_authentication = bool(nfc.get("requiresAuthentication"))

    @property
    def message(self) -> Optional[str]:
        """Payload transmitted to the terminal, at most 64 bytes."""
        return self._message

    @message.setter
    def message(self, value: Optional[str]):
        if not value:
            self._message = None
            return
        if not isinstance(value, str):
            raise TypeError(f"NFC message must be a string, received {type(value).__name__}")
        if len(value.encode("utf-8")) > MAX_MESSAGE_BYTES:
            raise TypeError(f"NFC message must be no longer than {MAX_MESSAGE_BYTES} bytes")
        self._message = value

    @property
    def encryption_public_key(self) -> Optional[str]:
        """Base64 encoded X.509 SubjectPublicKeyInfo of a P-256 key."""
        return self._encryption_public_key

    @encryption_public_key.setter
    def encryption_public_key(self, value):
        if not value:
            self._encryption_public_key = None
            return
        if isinstance(value, ec.EllipticCurvePublicKey):
            if not isinstance(value.curve, ec.SECP256R1):
                raise TypeError(f"NFC encryption key must be on P-256 curve, received {value.curve.name}")
            der = value.public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            self._encryption_public_key = base64.b64encode(der).decode("ascii")
        elif isinstance(value, str):
            try:
                base64.b64decode(value, validate=True)
            except ValueError:
                raise TypeError("NFC encryption public key must be base64 encoded") from None
            self._encryption_public_key = value
        else:
            raise TypeError(
                f"NFC encryption public key must be a string or EC public key, received {type(value).__name__}"
            )

    def __bool__(self) -> bool:
        return self._message is not None

    def copy(self) -> "NFCField":
        return NFCField(self.to_dict())

    def to_dict(self) -> Optional[Dict[str, Any]]:
        if self._message is None:
            return None
        result: Dict[str, Any] = {"message": self._message}
        if self._encryption_public_key:
            result["encryptionPublicKey"] = self._encryption_public_key
        if self.requires_authentication:
            result["requiresAuthentication"] = True
        return result
