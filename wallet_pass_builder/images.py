"""
Image assets of a pass: icon, logo, background, footer, strip and thumbnail
at 1x/2x/3x density, optionally per locale.

Bundle filenames are always generated from (type, density, locale), so the
catalog holds at most one image per triple.
"""

import io
import logging
import os
import re
import struct
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from PIL import Image

from .constants import DENSITIES, IMAGES, MINIMUM_SIZE_IMAGES, REQUIRED_IMAGES
from .exceptions import PassValidationError
from .models import BundleMember
from .utils import DEFAULT_IO_WORKERS, fan_out, normalize_locale, read_all, read_header

logger = logging.getLogger(__name__)

ImageSource = Union[str, bytes]

IMAGE_FILENAME_REGEX = re.compile(
    r"(^|/)((?P<lang>[-A-Z_a-z]+)\.lproj/)?"
    rf"(?P<image_type>{'|'.join(IMAGES)})"
    r"(@(?P<density>[23]x))?\.png$"
)
LOCALE_FOLDER_REGEX = re.compile(r"^(?P<lang>[-A-Z_a-z]+)\.lproj$")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
# signature + IHDR length, type, width, height, depth, color, compression, filter, interlace, crc
PNG_HEADER_SIZE = 33


class ImageSize(NamedTuple):
    format: str
    width: int
    height: int


def sniff_image_size(header: bytes) -> Optional[ImageSize]:
    """Reads PNG dimensions from the IHDR chunk. Returns None for non-PNG data."""
    if len(header) < 24 or not header.startswith(PNG_SIGNATURE) or header[12:16] != b"IHDR":
        return None
    width, height = struct.unpack(">II", header[16:24])
    return ImageSize("png", width, height)


def parse_filename(filename: str) -> Optional[Dict[str, str]]:
    """
    Splits a bundle image filename into image_type, density and lang.
    Returns None when the name is not an image of the bundle format.
    """
    match = IMAGE_FILENAME_REGEX.search(filename)
    if not match:
        return None
    result = {"image_type": match.group("image_type")}
    if match.group("density"):
        result["density"] = match.group("density")
    if match.group("lang"):
        result["lang"] = normalize_locale(match.group("lang"))
    return result


def get_image_filename(image_type: str, density: Optional[str] = None, lang: Optional[str] = None) -> str:
    """Builds ``[<lang>.lproj/]<type>[@<density>].png``; 1x has no suffix."""
    prefix = f"{normalize_locale(lang)}.lproj/" if lang else ""
    suffix = f"@{density}" if density in ("2x", "3x") else ""
    return f"{prefix}{image_type}{suffix}.png"


def check_image(image_type: str, size: Optional[ImageSize], density: Optional[str] = None):
    """
    Checks the format and the dimensions of an image for its type and density.

    Raises:
        TypeError: not a PNG, or dimensions outside of the allowed bounds
    """
    if size is None or size.format != "png":
        raise TypeError(f'Image for "{image_type}" is not a PNG file!')
    multiplier = int(density[0]) if density else 1
    width, height = size.width, size.height
    if width <= 0:
        raise TypeError(f"Image {image_type} has invalid width: {width}")
    if height <= 0:
        raise TypeError(f"Image {image_type} has invalid height: {height}")

    bounds = IMAGES[image_type]
    bound_width = bounds["width"] * multiplier
    bound_height = bounds["height"] * multiplier
    if image_type in MINIMUM_SIZE_IMAGES:
        if width < bound_width:
            raise TypeError(
                f"{image_type} image must be at least {bound_width}px wide for "
                f"{multiplier}x density, received {width}px"
            )
        if height < bound_height:
            raise TypeError(
                f"{image_type} image must be at least {bound_height}px high for "
                f"{multiplier}x density, received {height}px"
            )
    else:
        if width > bound_width:
            raise TypeError(
                f"{image_type} image must be no wider than {bound_width}px for "
                f"{multiplier}x density, received {width}px"
            )
        if height > bound_height:
            raise TypeError(
                f"{image_type} image must be no higher than {bound_height}px for "
                f"{multiplier}x density, received {height}px"
            )


class PassImages:
    """
    Catalog of pass images keyed by bundle filename.

    Sources are file paths or in-memory PNG bytes; files are only read in
    full when the bundle is assembled.
    """

    def __init__(self, images: Optional["PassImages"] = None):
        self._images: Dict[str, ImageSource] = {}
        if isinstance(images, PassImages):
            self._images.update(images._images)

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[str]:
        return iter(self._images)

    def __contains__(self, filename) -> bool:
        return filename in self._images

    def keys(self) -> List[str]:
        return list(self._images)

    def items(self) -> Iterator[Tuple[str, ImageSource]]:
        return iter(list(self._images.items()))

    def get(self, filename: str) -> Optional[ImageSource]:
        return self._images.get(filename)

    def remove(self, image_type: str, density: Optional[str] = None, lang: Optional[str] = None) -> "PassImages":
        self._images.pop(get_image_filename(image_type, density, lang), None)
        return self

    def copy(self) -> "PassImages":
        return PassImages(self)

    def add(
        self,
        image_type: str,
        source: Union[str, Path, bytes, Image.Image],
        density: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> str:
        """
        Adds an image, replacing the one with the same type, density and locale.

        Args:
            image_type: icon, logo, background, footer, strip or thumbnail
            source: path to a PNG file, PNG bytes or a Pillow image
            density: 1x (default), 2x or 3x
            lang: locale for a localized image

        Returns:
            the bundle filename of the image

        Raises:
            TypeError: unknown type or density, not a PNG, or dimensions out of bounds
        """
        filename, stored = self._prepare(image_type, source, density, lang)
        self._images[filename] = stored
        logger.debug(f"Added image {filename}")
        return filename

    def _prepare(self, image_type, source, density, lang) -> Tuple[str, ImageSource]:
        if image_type not in IMAGES:
            raise TypeError(f'Unknown image type "{image_type}", must be one of: {", ".join(IMAGES)}')
        if density and density not in DENSITIES:
            raise TypeError(f"Invalid density {density} for {image_type}, must be one of: {', '.join(DENSITIES)}")

        if isinstance(source, Image.Image):
            buffer = io.BytesIO()
            source.save(buffer, format="PNG")
            source = buffer.getvalue()

        if isinstance(source, (str, Path)):
            stored: ImageSource = os.fspath(source)
            # PNG size lives in the first bytes, no need to read the whole file
            size = sniff_image_size(read_header(stored, PNG_HEADER_SIZE))
        elif isinstance(source, (bytes, bytearray)):
            stored = bytes(source)
            size = sniff_image_size(stored[:PNG_HEADER_SIZE])
            if size is None:
                raise TypeError(f"Supplied buffer doesn't contain valid PNG image for {image_type}")
        else:
            raise TypeError(f"Image data for {image_type} must be either file path, bytes or PIL image")

        check_image(image_type, size, density)
        return get_image_filename(image_type, density, lang), stored

    def load(self, directory: Union[str, Path], max_workers: int = DEFAULT_IO_WORKERS) -> "PassImages":
        """
        Loads all images from a directory and its ``<lang>.lproj`` sub-directories.

        Files that are not named like bundle images are ignored.
        """
        candidates = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir():
                    match = LOCALE_FOLDER_REGEX.match(entry.name)
                    if not match:
                        continue
                    try:
                        lang = normalize_locale(match.group("lang"))
                    except TypeError:
                        logger.debug(f"Skipping folder {entry.name}, not a locale")
                        continue
                    with os.scandir(entry.path) as localized:
                        for item in localized:
                            image = parse_filename(item.name) if item.is_file() else None
                            if image:
                                candidates.append((image["image_type"], item.path, image.get("density"), lang))
                elif entry.is_file():
                    image = parse_filename(entry.name)
                    if image:
                        candidates.append((image["image_type"], entry.path, image.get("density"), None))

        prepared = fan_out(lambda candidate: self._prepare(*candidate), candidates, max_workers)
        # filenames encode type/density/locale, so merge order doesn't matter
        for filename, stored in sorted(prepared, key=lambda item: item[0]):
            self._images[filename] = stored
        logger.info(f"Loaded {len(prepared)} images from {directory}")
        return self

    def validate(self):
        """Checks that the required images (icon and logo) are present."""
        for required in REQUIRED_IMAGES:
            if not any(filename.endswith(f"{required}.png") for filename in self._images):
                raise PassValidationError(f"Missing required image {required}.png")

    def to_bundle_members(self, max_workers: int = DEFAULT_IO_WORKERS) -> List[BundleMember]:
        """Reads every image into a bundle member."""
        items = list(self._images.items())
        return fan_out(lambda item: BundleMember(item[0], read_all(item[1])), items, max_workers)
