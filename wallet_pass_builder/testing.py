"""
Helpers for tests: in-memory PNG images, minimal passes and throwaway
signing credentials.
"""

import io
import json
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from PIL import Image

from .localizations import format_strings

MINIMAL_FIELDS = {
    "description": "Test pass",
    "organizationName": "Test Organization",
    "passTypeIdentifier": "pass.com.testorg.generic",
    "serialNumber": "TICKET_0001",
    "teamIdentifier": "TEST123456",
}


def make_png(width: int, height: int, color=(0, 0, 0, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_self_signed(common_name: str = "Pass Type ID: pass.com.testorg.generic") -> Tuple[x509.Certificate, rsa.RSAPrivateKey]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return certificate, key


TEMPLATE_JSON = dict(
    MINIMAL_FIELDS,
    formatVersion=1,
    backgroundColor="rgb(60, 65, 76)",
    eventTicket={
        "headerFields": [{"key": "date", "label": "DATE", "value": "Jan 1"}],
        "backFields": [{"key": "terms", "label": "TERMS", "value": "No refunds"}],
    },
)


def write_template(folder: str, descriptor: Optional[Dict[str, Any]] = None):
    """Writes a loadable pass folder: pass.json, icon, logo and Spanish strings."""
    with open(os.path.join(folder, "pass.json"), "w", encoding="utf-8") as f:
        json.dump(descriptor or TEMPLATE_JSON, f)
    with open(os.path.join(folder, "icon.png"), "wb") as f:
        f.write(make_png(29, 29))
    with open(os.path.join(folder, "logo.png"), "wb") as f:
        f.write(make_png(160, 50))
    os.mkdir(os.path.join(folder, "es.lproj"))
    with open(os.path.join(folder, "es.lproj", "pass.strings"), "wb") as f:
        f.write(format_strings({"TERMS": "Sin reembolsos"}))
