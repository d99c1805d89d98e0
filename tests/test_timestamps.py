"""
Test capture-date validation and exiftool tag selection.
"""

import json
import subprocess
from pathlib import Path

import pytest

from sortphotos import timestamps
from sortphotos.timestamps import CaptureDate, canonical_exif_date, parse_capture_date


class TestParseCaptureDate:
    """Test the YYYY?MM?DD?hh?mm?ss grammar."""

    def test_exif_format(self):
        date = parse_capture_date("2013:05:02 10:11:12")
        assert date == CaptureDate(2013, 5, 2, 10, 11, 12)
        assert date.path_parts() == ("2013", "05", "02")

    @pytest.mark.parametrize("raw", [
        "2013-05-02 10:11:12",
        "2013-05-02-10-11-12",
        "2013 05 02 10 11 12",
        "2013:05-02 10-11:12",
    ])
    def test_mixed_separators(self, raw):
        assert parse_capture_date(raw) == CaptureDate(2013, 5, 2, 10, 11, 12)

    def test_trailing_subseconds_and_offset_ignored(self):
        date = parse_capture_date("2021:12:31 23:59:58.745-04:00")
        assert date == CaptureDate(2021, 12, 31, 23, 59, 58)

    def test_leading_whitespace_ignored(self):
        assert parse_capture_date("  2013:05:02 10:11:12") is not None

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_date_unsupported(self, raw):
        assert parse_capture_date(raw) is None

    @pytest.mark.parametrize("raw", [
        "0000:00:00 00:00:00",
        "2013:00:02 10:11:12",
        "2013:05:00 10:11:12",
        "0000:05:02 10:11:12",
    ])
    def test_zero_components_unsupported(self, raw):
        assert parse_capture_date(raw) is None

    @pytest.mark.parametrize("raw", [
        "2013/05/02 10:11:12",   # Unknown separator
        "2013:5:02 10:11:12",    # Short month
        "13:05:02 10:11:12",     # Two-digit year
        "2013:05:02",            # No time
        "2013:05:02 10:11",      # Missing seconds
        "2013:05:02T10:11:12",   # T is not a separator
        "not a date",
    ])
    def test_malformed_unsupported(self, raw):
        assert parse_capture_date(raw) is None

    def test_time_of_day_not_range_checked(self):
        # Only year/month/day have to be positive
        date = parse_capture_date("2013:05:02 00:00:00")
        assert date.hour == 0 and date.minute == 0 and date.second == 0

    def test_str_round_trips_to_exif_form(self):
        assert str(CaptureDate(2009, 1, 3, 4, 5, 6)) == "2009:01:03 04:05:06"


class TestCanonicalExifDate:
    """Test preference of the original capture tag over the creation tag."""

    def test_prefers_original(self):
        tags = {"CreateDate": "2010:01:01 00:00:00", "DateTimeOriginal": "2009:02:03 04:05:06"}
        assert canonical_exif_date(tags) == "2009:02:03 04:05:06"

    def test_falls_back_to_create_date(self):
        assert canonical_exif_date({"CreateDate": "2010:01:01 00:00:00"}) == "2010:01:01 00:00:00"

    def test_blank_original_falls_back(self):
        tags = {"DateTimeOriginal": "  ", "CreateDate": "2010:01:01 00:00:00"}
        assert canonical_exif_date(tags) == "2010:01:01 00:00:00"

    def test_zero_original_falls_back(self):
        tags = {"DateTimeOriginal": "0000:00:00 00:00:00", "CreateDate": "2013:05:02 10:11:12"}
        assert canonical_exif_date(tags) == "2013:05:02 10:11:12"

    def test_only_placeholder_dates(self):
        tags = {"DateTimeOriginal": "0000:00:00 00:00:00", "CreateDate": "    :  :     :  :  "}
        assert canonical_exif_date(tags) is None

    def test_no_tags(self):
        assert canonical_exif_date({"SourceFile": "x.jpg"}) is None


class TestReadCaptureTime:
    """Test the exiftool collaborator with the subprocess mocked out."""

    def test_returns_none_without_exiftool(self, monkeypatch):
        monkeypatch.setattr(timestamps, "exiftool_available", lambda: False)
        assert timestamps.read_capture_time(Path("photo.jpg")) is None

    def test_parses_exiftool_json(self, monkeypatch):
        monkeypatch.setattr(timestamps, "exiftool_available", lambda: True)
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            output = json.dumps([{"SourceFile": "photo.jpg",
                                  "DateTimeOriginal": "2013:05:02 10:11:12"}])
            return subprocess.CompletedProcess(cmd, 0, stdout=output, stderr="")

        monkeypatch.setattr(timestamps.subprocess, "run", fake_run)

        assert timestamps.read_capture_time(Path("photo.jpg")) == "2013:05:02 10:11:12"
        assert calls[0][0] == "exiftool"
        assert "-DateTimeOriginal" in calls[0] and "-CreateDate" in calls[0]

    def test_exiftool_failure_is_no_date(self, monkeypatch):
        monkeypatch.setattr(timestamps, "exiftool_available", lambda: True)

        def failing_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd)

        monkeypatch.setattr(timestamps.subprocess, "run", failing_run)
        assert timestamps.read_capture_time(Path("notes.txt")) is None

    def test_empty_exiftool_output_is_no_date(self, monkeypatch):
        monkeypatch.setattr(timestamps, "exiftool_available", lambda: True)
        monkeypatch.setattr(
            timestamps.subprocess, "run",
            lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout="", stderr=""))
        assert timestamps.read_capture_time(Path("photo.jpg")) is None
