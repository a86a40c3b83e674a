"""
Manifest signing: a detached PKCS#7 signature over manifest.json made with
the pass type certificate, chained with the WWDR intermediate certificate.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs7, pkcs12

logger = logging.getLogger(__name__)


def _read(path_or_data: Union[str, Path, bytes]) -> bytes:
    if isinstance(path_or_data, (bytes, bytearray)):
        return bytes(path_or_data)
    with open(path_or_data, "rb") as f:
        return f.read()


def _password(password: Optional[Union[str, bytes]]) -> Optional[bytes]:
    if not password:
        return None
    return password.encode("utf-8") if isinstance(password, str) else password


def load_pem_certificate(path_or_data: Union[str, Path, bytes]) -> x509.Certificate:
    """Loads a certificate from PEM (or DER) file or bytes."""
    data = _read(path_or_data)
    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError:
        return x509.load_der_x509_certificate(data)


def load_pem_private_key(path_or_data: Union[str, Path, bytes], password: Optional[Union[str, bytes]] = None):
    """Loads a private key from PEM file or bytes, optionally encrypted."""
    return serialization.load_pem_private_key(_read(path_or_data), password=_password(password))


def load_p12(
    path_or_data: Union[str, Path, bytes], password: Optional[Union[str, bytes]] = None
) -> Tuple[x509.Certificate, object, List[x509.Certificate]]:
    """
    Loads certificate, private key and additional certificates from a P12 file.

    Raises:
        ValueError: the file holds no certificate or no key
    """
    key, certificate, additional = pkcs12.load_key_and_certificates(
        _read(path_or_data), _password(password)
    )
    if certificate is None or key is None:
        raise ValueError("P12 file must contain both a certificate and a private key")
    logger.debug(f"Loaded P12 certificate {certificate.subject.rfc4514_string()}")
    return certificate, key, list(additional or [])


def sign_manifest(
    certificate: x509.Certificate,
    key,
    manifest: bytes,
    extra_certs: Optional[Sequence[x509.Certificate]] = None,
) -> bytes:
    """
    Signs manifest bytes, returning the DER encoded detached signature.

    Args:
        certificate: pass type certificate
        key: private key of the certificate
        manifest: exact bytes of manifest.json as written to the bundle
        extra_certs: intermediate certificates to embed (Apple WWDR)
    """
    builder = (
        pkcs7.PKCS7SignatureBuilder()
        .set_data(manifest)
        .add_signer(certificate, key, hashes.SHA256())
    )
    for extra in extra_certs or ():
        builder = builder.add_certificate(extra)
    signature = builder.sign(
        serialization.Encoding.DER,
        [pkcs7.PKCS7Options.DetachedSignature, pkcs7.PKCS7Options.Binary],
    )
    logger.debug(f"Signed manifest ({len(manifest)} bytes), signature is {len(signature)} bytes")
    return signature
