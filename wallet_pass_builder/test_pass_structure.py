import unittest

from .constants import PASS_STYLES
from .exceptions import PassStyleError
from .fields_map import FieldsMap
from .nfc_fields import NFCField
from .pass_structure import PassStructure


class TestPassStructure(unittest.TestCase):
    def test_only_one_style_at_a_time(self):
        structure = PassStructure()
        for style in PASS_STYLES:
            structure.style = style
            structure.primary_fields.add({"key": "k", "value": style})
            self.assertEqual(list(structure.structure_to_dict()), [style])

    def test_no_style_serializes_to_empty_dict(self):
        self.assertEqual(PassStructure().structure_to_dict(), {})

    def test_invalid_style_leaves_model_unchanged(self):
        structure = PassStructure()
        structure.style = "coupon"
        structure.header_fields.add({"key": "offer", "value": "50%"})
        with self.assertRaises(TypeError) as ctx:
            structure.style = "loyaltyCard"
        self.assertIn("storeCard", str(ctx.exception))
        self.assertEqual(structure.style, "coupon")
        self.assertIn("offer", structure.header_fields)

    def test_switching_style_drops_previous_structure(self):
        structure = PassStructure()
        structure.style = "eventTicket"
        structure.back_fields.add({"key": "terms", "value": "No refunds"})
        structure.style = "generic"
        self.assertEqual(len(structure.back_fields), 0)
        self.assertEqual(structure.structure_to_dict(), {"generic": {}})

    def test_setting_same_style_keeps_structure(self):
        structure = PassStructure()
        structure.style = "eventTicket"
        structure.back_fields.add({"key": "terms", "value": "No refunds"})
        structure.style = "eventTicket"
        self.assertIn("terms", structure.back_fields)

    def test_fields_require_a_style(self):
        structure = PassStructure()
        with self.assertRaises(PassStyleError):
            structure.primary_fields
        with self.assertRaises(TypeError):
            structure.get_fields("middleFields")

    def test_fields_accessor_returns_the_same_collection(self):
        structure = PassStructure()
        structure.style = "generic"
        self.assertIs(structure.primary_fields, structure.primary_fields)
        self.assertIs(structure.get_fields("primaryFields"), structure.primary_fields)

    def test_transit_type_makes_pass_a_boarding_pass(self):
        structure = PassStructure()
        structure.transit_type = "PKTransitTypeTrain"
        self.assertEqual(structure.style, "boardingPass")
        self.assertEqual(
            structure.structure_to_dict(),
            {"boardingPass": {"transitType": "PKTransitTypeTrain"}},
        )

    def test_clearing_transit_type_without_style_does_nothing(self):
        structure = PassStructure()
        structure.transit_type = None
        self.assertIsNone(structure.style)

    def test_transit_type_outside_boarding_pass(self):
        structure = PassStructure()
        structure.style = "coupon"
        with self.assertRaises(PassStyleError):
            structure.transit_type
        with self.assertRaises(ReferenceError):
            structure.transit_type = "PKTransitTypeAir"
        self.assertEqual(structure.style, "coupon")

    def test_invalid_transit_type(self):
        structure = PassStructure()
        structure.style = "boardingPass"
        structure.transit_type = "PKTransitTypeAir"
        with self.assertRaises(TypeError):
            structure.transit_type = "PKTransitTypeRocket"
        self.assertEqual(structure.transit_type, "PKTransitTypeAir")

    def test_nfc_only_for_store_cards(self):
        structure = PassStructure()
        structure.style = "generic"
        with self.assertRaises(PassStyleError):
            structure.nfc
        with self.assertRaises(PassStyleError):
            structure.nfc = {"message": "hello"}

    def test_store_card_nfc(self):
        structure = PassStructure()
        structure.style = "storeCard"
        self.assertIsInstance(structure.nfc, NFCField)
        # empty payload is not serialized
        self.assertEqual(structure.structure_to_dict(), {"storeCard": {}})
        structure.nfc.message = "loyalty-1234"
        self.assertEqual(
            structure.structure_to_dict(),
            {"storeCard": {"nfc": {"message": "loyalty-1234"}}},
        )

    def test_nfc_message_limit(self):
        nfc = NFCField()
        with self.assertRaises(TypeError):
            nfc.message = "x" * 65
        nfc.message = "x" * 64
        self.assertTrue(nfc)

    def test_hydrates_from_descriptor(self):
        structure = PassStructure(
            {
                "boardingPass": {
                    "transitType": "PKTransitTypeAir",
                    "headerFields": [{"key": "gate", "label": "GATE", "value": "23"}],
                    "primaryFields": [
                        {"key": "from", "value": "SFO"},
                        {"key": "to", "value": "JFK"},
                    ],
                }
            }
        )
        self.assertEqual(structure.style, "boardingPass")
        self.assertEqual(structure.transit_type, "PKTransitTypeAir")
        self.assertEqual(structure.primary_fields.keys(), ["from", "to"])

    def test_hydration_rejects_invalid_transit_type(self):
        with self.assertRaises(TypeError):
            PassStructure({"boardingPass": {"transitType": "PKTransitTypeRocket"}})

    def test_hydration_copies_fields_maps(self):
        primary = FieldsMap([{"key": "balance", "value": "21.75"}])
        structure = PassStructure({"storeCard": {"primaryFields": primary}, "nfc": {"message": "m"}})
        primary.set_value("balance", "0")
        self.assertEqual(structure.primary_fields.get("balance"), {"value": "21.75"})
        self.assertEqual(structure.nfc.message, "m")


if __name__ == "__main__":
    unittest.main()
