"""
Signing and build settings read from the environment (and a .env file).

Environment Variables:
    - PKPASS_CERTIFICATE_PATH: pass type certificate, P12 or PEM
    - PKPASS_CERTIFICATE_PASSWORD: password of the P12 file
    - PKPASS_KEY_PATH: PEM private key, when the certificate is PEM
    - PKPASS_KEY_PASSWORD: password of the PEM private key
    - APPLE_WWDR_CERT_PATH: Apple WWDR intermediate certificate (PEM)
    - WALLET_ALLOW_HTTP: allow http:// webServiceURL (development devices)
    - WALLET_IMAGE_WORKERS: threads used to read images
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .utils import DEFAULT_IO_WORKERS

logger = logging.getLogger(__name__)

P12_SUFFIXES = (".p12", ".pfx")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WalletSettings:
    """Where to find signing credentials and how to build passes."""

    certificate_path: Optional[str] = None
    certificate_password: Optional[str] = None
    key_path: Optional[str] = None
    key_password: Optional[str] = None
    wwdr_cert_path: Optional[str] = None
    allow_http: bool = False
    image_workers: int = DEFAULT_IO_WORKERS

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "WalletSettings":
        """Builds settings from environment variables, loading ``env_file`` (or ./.env) first."""
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()
        workers = os.getenv("WALLET_IMAGE_WORKERS")
        try:
            image_workers = int(workers) if workers else DEFAULT_IO_WORKERS
        except ValueError:
            raise ValueError(f"WALLET_IMAGE_WORKERS must be an integer, received {workers!r}") from None
        return cls(
            certificate_path=os.getenv("PKPASS_CERTIFICATE_PATH"),
            certificate_password=os.getenv("PKPASS_CERTIFICATE_PASSWORD"),
            key_path=os.getenv("PKPASS_KEY_PATH"),
            key_password=os.getenv("PKPASS_KEY_PASSWORD"),
            wwdr_cert_path=os.getenv("APPLE_WWDR_CERT_PATH"),
            allow_http=_env_flag("WALLET_ALLOW_HTTP"),
            image_workers=image_workers,
        )

    @property
    def uses_p12(self) -> bool:
        return bool(self.certificate_path) and self.certificate_path.lower().endswith(P12_SUFFIXES)

    def validate(self) -> bool:
        """
        Checks that the credential files are configured and exist.

        Raises:
            ValueError: listing every problem found
        """
        problems = []
        if not self.certificate_path:
            problems.append("PKPASS_CERTIFICATE_PATH environment variable not set")
        elif not Path(self.certificate_path).is_file():
            problems.append(f"Certificate file not found: {self.certificate_path}")
        if self.certificate_path and not self.uses_p12:
            if not self.key_path:
                problems.append("PKPASS_KEY_PATH environment variable not set (required for PEM certificates)")
            elif not Path(self.key_path).is_file():
                problems.append(f"Private key file not found: {self.key_path}")
        if self.wwdr_cert_path and not Path(self.wwdr_cert_path).is_file():
            problems.append(f"WWDR certificate file not found: {self.wwdr_cert_path}")
        if self.image_workers < 1:
            problems.append("WALLET_IMAGE_WORKERS must be at least 1")
        if problems:
            raise ValueError(f"Wallet configuration errors: {'; '.join(problems)}")
        return True
