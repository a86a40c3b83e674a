"""
Pass assembly: validation, pass.json serialization, manifest hashing,
signing and packaging into a .pkpass archive.
"""

import io
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from .base_pass import PassBase
from .constants import MIN_AUTHENTICATION_TOKEN_LENGTH, REQUIRED_FIELDS
from .exceptions import PassSigningError, PassValidationError
from .images import PassImages
from .localizations import Localizations
from .models import BundleMember
from .signing import sign_manifest
from .utils import DEFAULT_IO_WORKERS, fan_out, get_buffer_hash

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"
SIGNATURE_FILENAME = "signature"
PASS_JSON_FILENAME = "pass.json"

# Fixed entry timestamp so equal inputs give equal archives
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)

Signer = Callable[[Any, Any, bytes], bytes]


def build_manifest(members: List[BundleMember], max_workers: int = DEFAULT_IO_WORKERS) -> Dict[str, str]:
    """Maps every member path to the SHA-1 hex digest of its data."""
    digests = fan_out(lambda member: get_buffer_hash(member.data), members, max_workers)
    return {member.path: digest for member, digest in zip(members, digests)}


def zip_pkpass(members: List[BundleMember]) -> bytes:
    """Packs bundle members into a ZIP archive, in the given order."""
    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as zf:
        for member in members:
            info = ZipInfo(filename=member.path, date_time=ZIP_DATE_TIME)
            info.compress_type = ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, member.data)
    return buffer.getvalue()


class Pass(PassBase):
    """
    A pass ready to be validated and turned into signed bundle bytes.

    Args:
        template: object holding ``certificate``, ``key`` and optional
            ``extra_certs`` used for signing (normally a Template)
        fields: plain descriptor to hydrate the pass from
        images: images to copy into the pass
        localizations: string tables to copy into the pass
        allow_http: accept a plain HTTP webServiceURL
    """

    def __init__(
        self,
        template=None,
        fields: Optional[Dict[str, Any]] = None,
        images: Optional[PassImages] = None,
        localizations: Optional[Localizations] = None,
        allow_http: bool = False,
        max_workers: int = DEFAULT_IO_WORKERS,
    ):
        super().__init__(fields, images, localizations, allow_http=allow_http)
        self.template = template
        self.max_workers = max_workers

    def validate(self):
        """
        Checks the pass has every required top-level field and image.

        Raises:
            PassValidationError: describing the first problem found
        """
        for required in REQUIRED_FIELDS:
            if not self.has_field(required):
                raise PassValidationError(f"{required} is required in a Pass")

        # webServiceURL and authenticationToken go together
        if self.has_field("webServiceURL"):
            token = self.authentication_token
            if not isinstance(token, str):
                raise PassValidationError("While webServiceURL is present, authenticationToken also required!")
            if len(token) < MIN_AUTHENTICATION_TOKEN_LENGTH:
                raise PassValidationError(
                    f"authenticationToken must be at least {MIN_AUTHENTICATION_TOKEN_LENGTH} characters long!"
                )
        elif self.has_field("authenticationToken"):
            raise PassValidationError(
                "authenticationToken is presented in Pass data while webServiceURL is missing!"
            )

        self.images.validate()

    def to_json(self) -> bytes:
        """Returns pass.json content."""
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")

    def as_bytes(self, signer: Optional[Signer] = None) -> bytes:
        """
        Builds the signed .pkpass archive.

        Args:
            signer: ``signer(certificate, key, manifest_bytes) -> signature``,
                defaults to a PKCS#7 detached signature

        Returns:
            the archive bytes; nothing is produced when any step fails

        Raises:
            PassValidationError: missing fields or images
            PassSigningError: certificate or key not set on the template
        """
        self.validate()

        certificate = getattr(self.template, "certificate", None)
        key = getattr(self.template, "key", None)
        if certificate is None:
            raise PassSigningError("Set pass certificate in template before producing pass buffers")
        if key is None:
            raise PassSigningError("Set private key in pass template before producing pass buffers")
        if signer is None:
            extra_certs = getattr(self.template, "extra_certs", None)

            def signer(cert, private_key, manifest):
                return sign_manifest(cert, private_key, manifest, extra_certs)

        members = [BundleMember(PASS_JSON_FILENAME, self.to_json())]
        members.extend(self.localization.to_bundle_members())
        members.extend(self.images.to_bundle_members(self.max_workers))

        digests = build_manifest(members, self.max_workers)
        manifest = json.dumps(digests, separators=(",", ":")).encode("utf-8")
        members.append(BundleMember(MANIFEST_FILENAME, manifest))

        signature = signer(certificate, key, manifest)
        members.append(BundleMember(SIGNATURE_FILENAME, signature))

        data = zip_pkpass(members)
        logger.info(f"Assembled pass {self.serial_number} with {len(members)} files ({len(data)} bytes)")
        return data

    def write(self, path: Union[str, Path], signer: Optional[Signer] = None) -> Path:
        """Writes the archive to ``path``; the file only appears once complete."""
        data = self.as_bytes(signer)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.info(f"PKPass written: {path}")
        return path
