"""
Small helpers shared by the bundle building modules.
"""

import hashlib
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")

LOCALE_REGEX = re.compile(
    r"^(?P<lang>[A-Za-z]{2,4})([-_](?P<variant>[A-Za-z]{4}|\d{3}))?([-_](?P<country>[A-Za-z]{2}|\d{3}))?$"
)

DEFAULT_IO_WORKERS = 8


def normalize_locale(locale: str) -> str:
    """
    Normalizes a locale string: ``EN_us`` -> ``en-US``, ``zh_hant_tw`` -> ``zh-Hant-TW``.

    Raises:
        TypeError: when the string is not a locale
    """
    match = LOCALE_REGEX.match(locale) if isinstance(locale, str) else None
    if not match:
        raise TypeError(f"Invalid locale string: {locale!r}")
    result = match.group("lang").lower()
    if match.group("variant"):
        variant = match.group("variant")
        result += f"-{variant[0].upper()}{variant[1:].lower()}"
    if match.group("country"):
        result += f"-{match.group('country').upper()}"
    return result


def get_buffer_hash(data: bytes) -> str:
    """SHA-1 hex digest, the hash the manifest format expects."""
    return hashlib.sha1(data).hexdigest()


def read_all(path_or_bytes: Union[str, Path, bytes]) -> bytes:
    """Returns bytes as is, or the whole content of the file at the given path."""
    if isinstance(path_or_bytes, (bytes, bytearray)):
        return bytes(path_or_bytes)
    with open(path_or_bytes, "rb") as f:
        return f.read()


def read_header(path: Union[str, Path], max_bytes: int) -> bytes:
    """Reads at most ``max_bytes`` from the start of a file."""
    with open(path, "rb") as f:
        return f.read(max_bytes)


def fan_out(func: Callable[[T], R], items: Iterable[T], max_workers: int = DEFAULT_IO_WORKERS) -> List[R]:
    """
    Maps ``func`` over ``items`` on a bounded thread pool.

    Results keep the input order and the first exception is re-raised.
    """
    items = list(items)
    if len(items) <= 1 or max_workers <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        return list(executor.map(func, items))
