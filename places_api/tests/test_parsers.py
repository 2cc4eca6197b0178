"""
Tests for the places CSV stream decoder.
"""

from django.test import SimpleTestCase

from places.services.exceptions import DecodeError
from places.services.parsers import HeaderEvent, RowEvent, decode_csv
from places.services.schemas import EXPECTED_COLUMNS
from tests.factories import build_csv, place_row


class TestDecodeCSV(SimpleTestCase):
    """Test decoding of uploaded payloads into events."""

    def test_header_event_comes_first(self):
        """Test that exactly one header event precedes the row events."""
        payload = build_csv([place_row("P001"), place_row("P002")])

        events = list(decode_csv(payload))

        self.assertIsInstance(events[0], HeaderEvent)
        self.assertEqual(events[0].columns, list(EXPECTED_COLUMNS))
        self.assertEqual(len(events), 3)
        self.assertTrue(all(isinstance(event, RowEvent) for event in events[1:]))
        self.assertEqual(events[1].values["CODE"], "P001")
        self.assertEqual(events[2].values["Name"], "Place P002")

    def test_byte_order_mark_is_kept_on_header(self):
        """Test that the decoder leaves BOM cleanup to the validators."""
        payload = build_csv([place_row("P001")], bom=True)

        header = next(decode_csv(payload))

        self.assertEqual(header.columns[0], "\ufeffCODE")

    def test_semicolon_separator(self):
        """Test that commas inside cells are not treated as separators."""
        payload = b"CODE;Coordinates\nP001;48.85,2.29\n"

        events = list(decode_csv(payload))

        self.assertEqual(events[1].values, {"CODE": "P001", "Coordinates": "48.85,2.29"})

    def test_empty_lines_are_skipped(self):
        """Test that blank lines do not produce row events."""
        payload = b"CODE;Name\n\nP001;Tower\n\n"

        rows = [event for event in decode_csv(payload) if isinstance(event, RowEvent)]

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].line_number, 3)

    def test_short_row_fills_missing_cells_with_none(self):
        """Test rows with fewer cells than the header."""
        payload = b"CODE;Name;Web\nP001;Tower\n"

        row = list(decode_csv(payload))[1]

        self.assertEqual(row.values, {"CODE": "P001", "Name": "Tower", "Web": None})

    def test_long_row_drops_surplus_cells(self):
        """Test rows with more cells than the header."""
        payload = b"CODE;Name\nP001;Tower;extra;cells\n"

        row = list(decode_csv(payload))[1]

        self.assertEqual(row.values, {"CODE": "P001", "Name": "Tower"})

    def test_empty_payload_yields_empty_header(self):
        """Test that an empty upload still produces a header event."""
        events = list(decode_csv(b""))

        self.assertEqual(events, [HeaderEvent(columns=[])])

    def test_long_cell_is_not_rejected(self):
        """Test a text cell far larger than the stdlib csv default field limit."""
        long_text = "x" * 200_000
        payload = f"CODE;English Text\nP001;{long_text}\n".encode("utf-8")

        row = list(decode_csv(payload))[1]

        self.assertEqual(row.values["English Text"], long_text)

    def test_invalid_utf8_raises_decode_error(self):
        """Test that malformed encoding is fatal."""
        payload = b"CODE;Name\nP001;\xff\xfe\xfa broken\n"

        with self.assertRaises(DecodeError):
            list(decode_csv(payload))

    def test_decoder_is_lazy(self):
        """Test that a bad byte far into the payload surfaces only when reached."""
        payload = b"CODE;Name\nP001;" + b"x" * 20000 + b"\nP002;\xff broken\n"

        events = decode_csv(payload)
        header = next(events)

        self.assertEqual(header.columns, ["CODE", "Name"])
        with self.assertRaises(DecodeError):
            list(events)
