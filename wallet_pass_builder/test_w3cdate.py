import unittest
from datetime import datetime, timedelta, timezone

from .w3cdate import (
    get_date_from_w3c_string,
    get_w3c_date_string,
    is_valid_w3c_date,
    to_datetime,
)

PLUS_TWO = timezone(timedelta(hours=2))
MINUS_FIVE_THIRTY = timezone(-timedelta(hours=5, minutes=30))


class TestW3CDate(unittest.TestCase):
    def test_encodes_aware_datetime_with_offset(self):
        date = datetime(2024, 3, 5, 9, 7, 45, tzinfo=PLUS_TWO)
        self.assertEqual(get_w3c_date_string(date), "2024-03-05T09:07+02:00")

    def test_encodes_negative_offset(self):
        date = datetime(2024, 12, 31, 23, 59, tzinfo=MINUS_FIVE_THIRTY)
        self.assertEqual(get_w3c_date_string(date), "2024-12-31T23:59-05:30")

    def test_valid_strings_are_returned_unchanged(self):
        for value in ("2024-03-05T09:07+02:00", "2024-03-05T09:07:30Z", "2030-01-01T00:00-08:00"):
            self.assertEqual(get_w3c_date_string(value), value)

    def test_other_date_strings_are_converted(self):
        self.assertEqual(
            get_w3c_date_string("2024-03-05 09:07:00+02:00"),
            "2024-03-05T09:07+02:00",
        )

    def test_quarter_hour_offset(self):
        kathmandu = timezone(timedelta(hours=5, minutes=45))
        date = datetime(2024, 3, 5, 9, 7, tzinfo=kathmandu)
        self.assertEqual(get_w3c_date_string(date), "2024-03-05T09:07+05:45")
        self.assertEqual(
            get_date_from_w3c_string("2024-03-05T09:07+05:45"),
            datetime(2024, 3, 5, 3, 22, tzinfo=timezone.utc),
        )

    def test_decode_applies_offset(self):
        self.assertEqual(
            get_date_from_w3c_string("2024-03-05T09:07+02:00"),
            datetime(2024, 3, 5, 7, 7, tzinfo=timezone.utc),
        )
        self.assertEqual(
            get_date_from_w3c_string("2024-03-05T09:07-05:30"),
            datetime(2024, 3, 5, 14, 37, tzinfo=timezone.utc),
        )
        self.assertEqual(
            get_date_from_w3c_string("2024-03-05T09:07:59Z"),
            datetime(2024, 3, 5, 9, 7, tzinfo=timezone.utc),
        )

    def test_round_trip_keeps_instant_to_the_minute(self):
        date = datetime(2025, 7, 14, 18, 42, 31, 500, tzinfo=MINUS_FIVE_THIRTY)
        decoded = get_date_from_w3c_string(get_w3c_date_string(date))
        self.assertEqual(decoded, date.replace(second=0, microsecond=0))

    def test_naive_datetime_is_local_time(self):
        date = datetime(2025, 1, 20, 10, 15)
        decoded = get_date_from_w3c_string(get_w3c_date_string(date))
        self.assertEqual(decoded, date.astimezone())

    def test_rejects_other_types(self):
        with self.assertRaises(TypeError):
            get_w3c_date_string(1700000000)
        with self.assertRaises(TypeError):
            get_w3c_date_string(None)

    def test_rejects_unparseable_strings(self):
        with self.assertRaises(TypeError):
            get_w3c_date_string("next tuesday")
        with self.assertRaises(TypeError):
            get_date_from_w3c_string("2024-03-05")

    def test_rejects_impossible_calendar_dates(self):
        with self.assertRaises(TypeError):
            get_date_from_w3c_string("2024-02-30T10:00+00:00")

    def test_is_valid_is_grammar_only(self):
        self.assertTrue(is_valid_w3c_date("2024-03-05T09:07+02:00"))
        self.assertTrue(is_valid_w3c_date("2024-03-05T09:07+05:45"))
        self.assertFalse(is_valid_w3c_date("2024-03-05T09:07"))
        self.assertFalse(is_valid_w3c_date("2024-03-05"))
        self.assertFalse(is_valid_w3c_date(20240305))

    def test_to_datetime_accepts_strings_and_datetimes(self):
        date = datetime(2024, 3, 5, 9, 7, tzinfo=PLUS_TWO)
        self.assertIs(to_datetime(date), date)
        self.assertEqual(to_datetime("2024-03-05T09:07+02:00"), date)
        with self.assertRaises(TypeError):
            to_datetime(3.14)


if __name__ == "__main__":
    unittest.main()
