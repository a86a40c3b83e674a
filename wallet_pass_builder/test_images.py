import os
import tempfile
import unittest
from unittest import mock

from PIL import Image

from . import images as images_module
from .exceptions import PassValidationError
from .images import (
    PNG_HEADER_SIZE,
    PassImages,
    check_image,
    get_image_filename,
    parse_filename,
    sniff_image_size,
)
from .testing import make_png


class TestImageChecks(unittest.TestCase):
    def test_sniffs_png_size(self):
        size = sniff_image_size(make_png(31, 17))
        self.assertEqual((size.format, size.width, size.height), ("png", 31, 17))
        self.assertIsNone(sniff_image_size(b"GIF89a" + b"\x00" * 30))

    def test_icon_minimum_size(self):
        with self.assertRaises(TypeError) as ctx:
            check_image("icon", sniff_image_size(make_png(28, 28)))
        self.assertIn("at least 29px", str(ctx.exception))
        check_image("icon", sniff_image_size(make_png(29, 29)))
        check_image("icon", sniff_image_size(make_png(58, 58)), "2x")
        with self.assertRaises(TypeError):
            check_image("icon", sniff_image_size(make_png(57, 58)), "2x")

    def test_logo_maximum_size(self):
        with self.assertRaises(TypeError) as ctx:
            check_image("logo", sniff_image_size(make_png(161, 50)))
        self.assertEqual(
            str(ctx.exception),
            "logo image must be no wider than 160px for 1x density, received 161px",
        )
        check_image("logo", sniff_image_size(make_png(480, 150)), "3x")

    def test_thumbnail_bounds(self):
        check_image("thumbnail", sniff_image_size(make_png(90, 90)))
        with self.assertRaises(TypeError):
            check_image("thumbnail", sniff_image_size(make_png(91, 90)))

    def test_rejects_non_png(self):
        with self.assertRaises(TypeError):
            check_image("logo", None)


class TestImageFilenames(unittest.TestCase):
    def test_get_image_filename(self):
        self.assertEqual(get_image_filename("logo"), "logo.png")
        self.assertEqual(get_image_filename("logo", "1x"), "logo.png")
        self.assertEqual(get_image_filename("strip", "3x"), "strip@3x.png")
        self.assertEqual(get_image_filename("logo", "2x", "EN_us"), "en-US.lproj/logo@2x.png")

    def test_parse_filename(self):
        self.assertEqual(
            parse_filename("fr.lproj/thumbnail@2x.png"),
            {"image_type": "thumbnail", "density": "2x", "lang": "fr"},
        )
        self.assertEqual(parse_filename("icon.png"), {"image_type": "icon"})
        self.assertIsNone(parse_filename("icon@4x.png"))
        self.assertIsNone(parse_filename("cover.png"))


class TestPassImages(unittest.TestCase):
    def setUp(self):
        self.images = PassImages()

    def test_add_bytes(self):
        filename = self.images.add("icon", make_png(29, 29))
        self.assertEqual(filename, "icon.png")
        self.assertIn("icon.png", self.images)

    def test_add_path_reads_only_png_header(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "icon.png")
            with open(path, "wb") as f:
                # valid signature and IHDR, then bytes no decoder would accept
                f.write(make_png(29, 29)[:PNG_HEADER_SIZE] + b"\xffjunk" * 4096)
            header_spy = mock.patch.object(images_module, "read_header", wraps=images_module.read_header)
            with header_spy as read_header, mock.patch.object(images_module, "read_all") as read_all:
                filename = self.images.add("icon", path)
            read_header.assert_called_once_with(path, PNG_HEADER_SIZE)
            read_all.assert_not_called()
            self.assertEqual(filename, "icon.png")
            self.assertEqual(self.images.get("icon.png"), path)

    def test_add_pil_image(self):
        filename = self.images.add("thumbnail", Image.new("RGB", (180, 180)), "2x", "de")
        self.assertEqual(filename, "de.lproj/thumbnail@2x.png")
        self.assertTrue(self.images.get(filename).startswith(b"\x89PNG"))

    def test_add_replaces_same_slot(self):
        self.images.add("logo", make_png(100, 40))
        self.images.add("logo", make_png(160, 50))
        self.assertEqual(len(self.images), 1)

    def test_add_rejects_bad_input(self):
        with self.assertRaises(TypeError):
            self.images.add("cover", make_png(10, 10))
        with self.assertRaises(TypeError):
            self.images.add("logo", make_png(10, 10), "4x")
        with self.assertRaises(TypeError):
            self.images.add("logo", b"definitely not a png")
        with self.assertRaises(TypeError):
            self.images.add("logo", 42)
        self.assertEqual(len(self.images), 0)

    def test_validate_requires_icon_and_logo(self):
        self.images.add("icon", make_png(29, 29))
        with self.assertRaises(PassValidationError) as ctx:
            self.images.validate()
        self.assertIn("logo.png", str(ctx.exception))
        self.images.add("logo", make_png(160, 50), lang="fr")
        self.images.validate()

    def test_copy_is_independent(self):
        self.images.add("icon", make_png(29, 29))
        copied = self.images.copy()
        copied.add("logo", make_png(160, 50))
        self.assertEqual(self.images.keys(), ["icon.png"])

    def test_load_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "icon.png"), "wb") as f:
                f.write(make_png(29, 29))
            with open(os.path.join(tmp, "logo@2x.png"), "wb") as f:
                f.write(make_png(320, 100))
            with open(os.path.join(tmp, "notes.txt"), "w") as f:
                f.write("ignored")
            os.mkdir(os.path.join(tmp, "pt_BR.lproj"))
            with open(os.path.join(tmp, "pt_BR.lproj", "logo.png"), "wb") as f:
                f.write(make_png(160, 50))
            os.mkdir(os.path.join(tmp, "assets"))
            with open(os.path.join(tmp, "assets", "strip.png"), "wb") as f:
                f.write(make_png(375, 123))

            self.images.load(tmp, max_workers=4)
            self.assertEqual(
                sorted(self.images.keys()),
                ["icon.png", "logo@2x.png", "pt-BR.lproj/logo.png"],
            )
            members = {m.path: m.data for m in self.images.to_bundle_members(max_workers=4)}
            self.assertEqual(members["icon.png"], make_png(29, 29))

    def test_load_rejects_oversized_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "footer.png"), "wb") as f:
                f.write(make_png(296, 15))
            with self.assertRaises(TypeError):
                self.images.load(tmp)


if __name__ == "__main__":
    unittest.main()
