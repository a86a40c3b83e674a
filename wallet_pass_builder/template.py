"""
Pass templates: shared fields, images, localizations and signing
credentials from which individual passes are created.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import jsonschema

from .config import WalletSettings
from .constants import PASS_STYLES
from .exceptions import PassValidationError
from .images import PassImages
from .localizations import Localizations
from .models import PASS_JSON_SCHEMA
from .pkpass import PASS_JSON_FILENAME, Pass
from .signing import load_p12, load_pem_certificate, load_pem_private_key
from .utils import DEFAULT_IO_WORKERS

logger = logging.getLogger(__name__)


class Template:
    """
    Defaults shared by a family of passes.

    Args:
        style: pass style of created passes
        fields: default descriptor fields (camelCase keys)
        images: images copied into every pass
        localizations: string tables copied into every pass
        allow_http: created passes accept a plain HTTP webServiceURL
    """

    def __init__(
        self,
        style: Optional[str] = None,
        fields: Optional[Dict[str, Any]] = None,
        images: Optional[PassImages] = None,
        localizations: Optional[Localizations] = None,
        allow_http: bool = False,
        max_workers: int = DEFAULT_IO_WORKERS,
    ):
        if style and style not in PASS_STYLES:
            raise TypeError(f'Invalid pass style "{style}", must be one of: {", ".join(PASS_STYLES)}')
        self.style = style
        self.fields: Dict[str, Any] = copy.deepcopy(fields or {})
        self.images = PassImages(images)
        self.localization = Localizations(localizations)
        self.allow_http = allow_http
        self.max_workers = max_workers
        self.certificate = None
        self.key = None
        self.extra_certs: list = []

    @classmethod
    def load(
        cls,
        folder: Union[str, Path],
        allow_http: bool = False,
        max_workers: int = DEFAULT_IO_WORKERS,
    ) -> "Template":
        """
        Loads a template from a pass folder: pass.json, images and
        ``*.lproj/pass.strings``.

        Raises:
            PassValidationError: pass.json is not valid JSON or has the wrong shape
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise FileNotFoundError(f"Template folder not found: {folder}")

        fields: Dict[str, Any] = {}
        pass_json = folder / PASS_JSON_FILENAME
        if pass_json.is_file():
            try:
                fields = json.loads(pass_json.read_text(encoding="utf-8-sig"))
            except ValueError as e:
                raise PassValidationError(f"Invalid {PASS_JSON_FILENAME} in {folder}: {e}") from None
            try:
                jsonschema.validate(fields, PASS_JSON_SCHEMA)
            except jsonschema.ValidationError as e:
                location = "/".join(str(part) for part in e.absolute_path) or "<root>"
                raise PassValidationError(f"Invalid {PASS_JSON_FILENAME} at {location}: {e.message}") from None

        style = next((s for s in PASS_STYLES if s in fields), None)
        template = cls(style=style, fields=fields, allow_http=allow_http, max_workers=max_workers)
        template.images.load(folder, max_workers)
        template.localization.load(folder)
        logger.info(
            f"Loaded template from {folder}: style={style}, {len(template.images)} images, "
            f"{len(template.localization)} localizations"
        )
        return template

    def set_certificate(self, certificate, extra_certs: Optional[Sequence] = None) -> "Template":
        """Sets the signing certificate, given as object, PEM bytes or path."""
        if isinstance(certificate, (str, Path, bytes)):
            certificate = load_pem_certificate(certificate)
        self.certificate = certificate
        if extra_certs is not None:
            self.extra_certs = [
                load_pem_certificate(c) if isinstance(c, (str, Path, bytes)) else c for c in extra_certs
            ]
        return self

    def set_private_key(self, key, password: Optional[str] = None) -> "Template":
        """Sets the signing key, given as object, PEM bytes or path."""
        if isinstance(key, (str, Path, bytes)):
            key = load_pem_private_key(key, password)
        self.key = key
        return self

    def load_credentials(self, settings: WalletSettings) -> "Template":
        """Loads certificate, key and WWDR certificate as configured in settings."""
        settings.validate()
        extra_certs = []
        if settings.uses_p12:
            certificate, key, additional = load_p12(settings.certificate_path, settings.certificate_password)
            extra_certs.extend(additional)
        else:
            certificate = load_pem_certificate(settings.certificate_path)
            key = load_pem_private_key(settings.key_path, settings.key_password)
        if settings.wwdr_cert_path:
            extra_certs.append(load_pem_certificate(settings.wwdr_cert_path))
        self.certificate = certificate
        self.key = key
        self.extra_certs = extra_certs
        logger.info(f"Loaded signing credentials from {os.path.basename(settings.certificate_path)}")
        return self

    def create_pass(self, fields: Optional[Dict[str, Any]] = None, **attributes) -> Pass:
        """
        Creates a pass from the template defaults, overridden by ``fields``
        (descriptor keys) and ``attributes`` (Python attribute names).
        """
        merged = copy.deepcopy(self.fields)
        fields = fields or {}
        if any(style in fields for style in PASS_STYLES):
            for style in PASS_STYLES:
                merged.pop(style, None)
        elif self.style and self.style not in merged:
            merged[self.style] = {}
        merged.update(copy.deepcopy(fields))

        created = Pass(
            self,
            merged,
            self.images,
            self.localization,
            allow_http=self.allow_http,
            max_workers=self.max_workers,
        )
        for name, value in attributes.items():
            if not hasattr(Pass, name):
                raise TypeError(f"Unknown pass attribute {name}")
            setattr(created, name, value)
        return created
