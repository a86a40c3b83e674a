import json
import os
import tempfile
import unittest

from cryptography.hazmat.primitives import serialization

from .config import WalletSettings
from .exceptions import PassValidationError
from .pkpass import Pass
from .template import Template
from .testing import MINIMAL_FIELDS, TEMPLATE_JSON, make_self_signed, write_template


class TestTemplate(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = self._tmp.name
        write_template(self.folder)

    def tearDown(self):
        self._tmp.cleanup()

    def test_load_folder(self):
        template = Template.load(self.folder)
        self.assertEqual(template.style, "eventTicket")
        self.assertEqual(sorted(template.images.keys()), ["icon.png", "logo.png"])
        self.assertEqual(template.localization.get("es"), {"TERMS": "Sin reembolsos"})

    def test_load_missing_folder(self):
        with self.assertRaises(FileNotFoundError):
            Template.load(os.path.join(self.folder, "missing"))

    def test_load_rejects_malformed_pass_json(self):
        with open(os.path.join(self.folder, "pass.json"), "w") as f:
            f.write("{not json")
        with self.assertRaises(PassValidationError):
            Template.load(self.folder)

    def test_load_rejects_wrong_shape(self):
        with open(os.path.join(self.folder, "pass.json"), "w") as f:
            json.dump(dict(TEMPLATE_JSON, voided="yes"), f)
        with self.assertRaises(PassValidationError) as ctx:
            Template.load(self.folder)
        self.assertIn("voided", str(ctx.exception))

    def test_create_pass_merges_fields(self):
        template = Template.load(self.folder)
        pass_obj = template.create_pass({"serialNumber": "E-42"}, logo_text="Live")
        self.assertIsInstance(pass_obj, Pass)
        self.assertEqual(pass_obj.serial_number, "E-42")
        self.assertEqual(pass_obj.logo_text, "Live")
        self.assertEqual(pass_obj.style, "eventTicket")
        self.assertEqual(pass_obj.header_fields.keys(), ["date"])
        self.assertEqual(str(pass_obj.background_color), "rgb(60, 65, 76)")
        pass_obj.validate()

    def test_created_passes_are_independent(self):
        template = Template.load(self.folder)
        first = template.create_pass()
        first.back_fields.set_value("terms", "All sales final")
        first.images.remove("logo")
        second = template.create_pass()
        self.assertEqual(second.back_fields.get("terms")["value"], "No refunds")
        self.assertIn("logo.png", second.images)

    def test_create_pass_style_override(self):
        template = Template.load(self.folder)
        pass_obj = template.create_pass({"coupon": {"primaryFields": [{"key": "off", "value": "20%"}]}})
        self.assertEqual(pass_obj.style, "coupon")
        self.assertEqual(list(pass_obj.structure_to_dict()), ["coupon"])

    def test_create_pass_unknown_attribute(self):
        template = Template(style="generic", fields=MINIMAL_FIELDS)
        with self.assertRaises(TypeError):
            template.create_pass(colour="red")

    def test_invalid_style(self):
        with self.assertRaises(TypeError):
            Template(style="ticket")

    def test_load_pem_credentials(self):
        certificate, key = make_self_signed()
        cert_path = os.path.join(self.folder, "pass.pem")
        key_path = os.path.join(self.folder, "pass.key")
        with open(cert_path, "wb") as f:
            f.write(certificate.public_bytes(serialization.Encoding.PEM))
        with open(key_path, "wb") as f:
            f.write(
                key.private_bytes(
                    serialization.Encoding.PEM,
                    serialization.PrivateFormat.PKCS8,
                    serialization.BestAvailableEncryption(b"secret"),
                )
            )
        template = Template.load(self.folder)
        template.load_credentials(
            WalletSettings(certificate_path=cert_path, key_path=key_path, key_password="secret")
        )
        self.assertEqual(template.certificate, certificate)
        self.assertEqual(template.extra_certs, [])
        data = template.create_pass().as_bytes()
        self.assertTrue(data.startswith(b"PK"))

    def test_set_certificate_from_pem_bytes(self):
        certificate, key = make_self_signed()
        template = Template(style="generic")
        template.set_certificate(certificate.public_bytes(serialization.Encoding.PEM))
        template.set_private_key(
            key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.TraditionalOpenSSL,
                serialization.NoEncryption(),
            )
        )
        self.assertEqual(template.certificate, certificate)
        self.assertEqual(template.key.private_numbers(), key.private_numbers())


if __name__ == "__main__":
    unittest.main()
