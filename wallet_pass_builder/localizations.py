"""
Localized string tables of a pass, written as ``<lang>.lproj/pass.strings``.
"""

import codecs
import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .models import BundleMember
from .utils import normalize_locale

logger = logging.getLogger(__name__)

STRINGS_FILENAME = "pass.strings"

_STRINGS_LINE_REGEX = re.compile(r'^\s*"(?P<key>(?:[^"\\]|\\.)*)"\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*;')
_LOCALE_FOLDER_REGEX = re.compile(r"^(?P<lang>[-A-Z_a-z]+)\.lproj$")

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}


def escape_string(value: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_string(value: str) -> str:
    return re.sub(r"\\(.)", lambda m: _UNESCAPES.get(m.group(1), m.group(1)), value)


def parse_strings(data: bytes) -> Dict[str, str]:
    """Parses a .strings file, UTF-16 (with BOM) or UTF-8."""
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        text = data.decode("utf-16")
    else:
        text = data.decode("utf-8-sig")
    # block comments may span lines
    text = re.sub(r"/\*.*?\*/", "", text, flags=re.S)
    result = {}
    for line in text.splitlines():
        match = _STRINGS_LINE_REGEX.match(line)
        if match:
            result[unescape_string(match.group("key"))] = unescape_string(match.group("value"))
    return result


def format_strings(values: Dict[str, str]) -> bytes:
    """Serializes a string table as UTF-16 with BOM, one ``"key" = "value";`` per line."""
    lines = [f'"{escape_string(key)}" = "{escape_string(value)}";' for key, value in values.items()]
    return codecs.BOM_UTF16_LE + "\n".join(lines).encode("utf-16-le")


class Localizations:
    """String tables keyed by normalized locale."""

    def __init__(self, localizations: Optional["Localizations"] = None):
        self._tables: Dict[str, Dict[str, str]] = {}
        if isinstance(localizations, Localizations):
            for lang, values in localizations._tables.items():
                self._tables[lang] = dict(values)

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __contains__(self, lang) -> bool:
        try:
            return normalize_locale(lang) in self._tables
        except TypeError:
            return False

    def get(self, lang: str) -> Optional[Dict[str, str]]:
        values = self._tables.get(normalize_locale(lang))
        return dict(values) if values is not None else None

    def add(self, lang: str, values: Dict[str, str]) -> "Localizations":
        """Adds (or merges into) the string table of a locale."""
        if not isinstance(values, dict):
            raise TypeError(f"Localization values must be a dict, received {type(values).__name__}")
        for key, value in values.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(f"Localization keys and values must be strings, received {key!r}: {value!r}")
        self._tables.setdefault(normalize_locale(lang), {}).update(values)
        return self

    def remove(self, lang: str) -> "Localizations":
        self._tables.pop(normalize_locale(lang), None)
        return self

    def load(self, directory: Union[str, Path]) -> "Localizations":
        """Reads ``<lang>.lproj/pass.strings`` files from a pass folder."""
        with os.scandir(directory) as entries:
            for entry in entries:
                match = _LOCALE_FOLDER_REGEX.match(entry.name)
                if not entry.is_dir() or not match:
                    continue
                try:
                    lang = normalize_locale(match.group("lang"))
                except TypeError:
                    continue
                strings_path = os.path.join(entry.path, STRINGS_FILENAME)
                if not os.path.isfile(strings_path):
                    continue
                with open(strings_path, "rb") as f:
                    values = parse_strings(f.read())
                if values:
                    self.add(lang, values)
                    logger.debug(f"Loaded {len(values)} strings for {lang}")
        return self

    def to_bundle_members(self) -> List[BundleMember]:
        return [
            BundleMember(f"{lang}.lproj/{STRINGS_FILENAME}", format_strings(values))
            for lang, values in self._tables.items()
            if values
        ]
