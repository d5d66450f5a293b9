"""Tests for picnic_cli/utils.py: price, time and status formatting."""

from datetime import datetime, timezone

from picnic_cli.utils import (
    format_address,
    format_price,
    format_status,
    format_timestamp,
    format_window,
    lang_for_country,
)


class TestFormatPrice:
    def test_cents_to_euros(self):
        assert format_price(1234) == "€12.34"

    def test_zero(self):
        assert format_price(0) == "€0.00"

    def test_rounds_to_two_decimals(self):
        assert format_price(5) == "€0.05"

    def test_none(self):
        assert format_price(None) == "-"


class TestFormatWindow:
    def test_dutch(self):
        # 2024-02-24 is a Saturday
        result = format_window("2024-02-24T14:00:00.000+01:00", "2024-02-24T15:00:00.000+01:00")
        assert result == "za 24 feb 14:00–15:00"

    def test_german(self):
        result = format_window("2024-03-04T08:00:00+01:00", "2024-03-04T09:30:00+01:00", lang="de")
        assert result == "Mo 4 Mär 08:00–09:30"

    def test_keeps_offset_of_input(self):
        result = format_window("2024-02-26T20:00:00Z", "2024-02-26T21:00:00Z")
        assert result.endswith("20:00–21:00")

    def test_missing_or_invalid(self):
        assert format_window(None, "2024-02-24T15:00:00+01:00") == "-"
        assert format_window("yesterday", "today") == "-"


class TestFormatStatus:
    def test_known_styles(self):
        assert format_status("CURRENT").style == "blue"
        assert format_status("COMPLETED").style == "green"
        assert format_status("CANCELLED").style == "red"

    def test_unknown_status_is_grey(self):
        text = format_status("PENDING")
        assert text.plain == "PENDING"
        assert text.style == "grey50"

    def test_none(self):
        assert format_status(None).plain == "UNKNOWN"


class TestFormatTimestamp:
    def test_milliseconds(self):
        ts = int(datetime(2024, 2, 24, 14, 5, tzinfo=timezone.utc).timestamp() * 1000)
        assert format_timestamp(ts, tz=timezone.utc) == "24 feb 2024 14:05"

    def test_german_month(self):
        ts = int(datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc).timestamp() * 1000)
        assert format_timestamp(ts, tz=timezone.utc, lang="de") == "1 Mai 2024 09:00"

    def test_none(self):
        assert format_timestamp(None) == "-"


class TestFormatAddress:
    def test_full_address(self):
        address = {"street": "Kerkstraat", "house_number": 12, "house_number_ext": "A",
                   "postcode": "1017 GB", "city": "Amsterdam"}
        assert format_address(address) == "Kerkstraat 12A, 1017 GB Amsterdam"

    def test_extension_separator(self):
        address = {"street": "Kerkstraat", "house_number": 12, "house_number_ext": "A",
                   "postcode": "1017 GB", "city": "Amsterdam"}
        assert format_address(address, " ") == "Kerkstraat 12 A, 1017 GB Amsterdam"

    def test_no_extension(self):
        address = {"street": "Dorpsweg", "house_number": 3, "house_number_ext": None,
                   "postcode": "1234 AB", "city": "Utrecht"}
        assert format_address(address, " ") == "Dorpsweg 3, 1234 AB Utrecht"

    def test_missing(self):
        assert format_address(None) == "-"


class TestLangForCountry:
    def test_mapping(self):
        assert lang_for_country("DE") == "de"
        assert lang_for_country("de") == "de"
        assert lang_for_country("NL") == "nl"
        assert lang_for_country(None) == "nl"
