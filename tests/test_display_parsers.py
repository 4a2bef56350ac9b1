"""Tests for display strategy parsers.

Testy parserów wyjścia xrandr, system_profiler, WMI i screeninfo.
"""

import json
from types import SimpleNamespace

import pytest

from sysinfo_mcp.displays.records import UNKNOWN, DetectionMethod, DisplayRecord, fallback_record
from sysinfo_mcp.displays.strategies import (
    parse_resolution,
    parse_system_profiler_output,
    parse_wmi_output,
    parse_xrandr_output,
    records_from_screeninfo,
)

XRANDR_OUTPUT = """\
Screen 0: minimum 8 x 8, current 3840 x 1080, maximum 32767 x 32767
HDMI-1 connected primary 1920x1080+0+0 (normal left inverted right x axis y axis) 527mm x 296mm
   1920x1080     60.00*+  50.00    59.94
   1280x720      60.00    50.00
HDMI-2 disconnected (normal left inverted right x axis y axis)
DP-1 connected 1920x1080+1920+0 (normal left inverted right x axis y axis) 531mm x 299mm
   1920x1080     60.00*+
DP-2 connected (normal left inverted right x axis y axis)
"""


class TestParseXrandr:
    """Tests for xrandr --query parsing."""

    def test_primary_line(self):
        records = parse_xrandr_output("HDMI-1 connected primary 1920x1080+0+0 (normal) 527mm x 296mm")
        assert len(records) == 1
        record = records[0].to_dict()
        assert record["name"] == "HDMI-1"
        assert record["width"] == "1920"
        assert record["height"] == "1080"
        assert record["is_primary"] is True
        assert record["detection_method"] == "xrandr"

    def test_disconnected_line_yields_nothing(self):
        assert parse_xrandr_output("HDMI-2 disconnected") == []

    def test_full_output(self):
        records = parse_xrandr_output(XRANDR_OUTPUT)
        assert [r.name for r in records] == ["HDMI-1", "DP-1"]
        assert [r.id for r in records] == [1, 2]
        assert records[0].is_primary is True
        assert records[1].is_primary is False

    def test_connected_without_mode_is_skipped(self):
        """A connected output with no current mode does not consume an id."""
        output = "DP-2 connected (normal left inverted right x axis y axis)\nDP-3 connected 2560x1440+0+0\n"
        records = parse_xrandr_output(output)
        assert len(records) == 1
        assert records[0].name == "DP-3"
        assert records[0].id == 1

    def test_empty_output(self):
        assert parse_xrandr_output("") == []


class TestParseResolution:
    """Tests for "<w> x <h> ..." parsing."""

    def test_with_refresh_rate(self):
        assert parse_resolution("1920 x 1080 @ 60Hz") == ("1920", "1080")

    def test_retina_suffix(self):
        assert parse_resolution("2880 x 1800 Retina") == ("2880", "1800")

    @pytest.mark.parametrize("text", ["", "1920x1080", "Unknown", "abc x def"])
    def test_unparsable_is_unknown(self, text):
        assert parse_resolution(text) == (UNKNOWN, UNKNOWN)


class TestParseSystemProfiler:
    """Tests for system_profiler SPDisplaysDataType -json parsing."""

    def _output(self, adapters):
        return json.dumps({"SPDisplaysDataType": adapters})

    def test_nested_adapters_and_monitors(self):
        output = self._output(
            [
                {
                    "_name": "Apple M2",
                    "spdisplays_ndrvs": [
                        {"_name": "Built-in Retina Display", "_spdisplays_resolution": "2880 x 1800 Retina"},
                        {"_name": "DELL U2720Q", "_spdisplays_resolution": "3840 x 2160 @ 60.00Hz"},
                    ],
                },
                {"_name": "eGPU without monitors"},
            ]
        )
        records = parse_system_profiler_output(output)
        assert [r.id for r in records] == [1, 2]
        assert records[0].retina is True
        assert (records[0].width, records[0].height) == ("2880", "1800")
        assert records[1].retina is False
        assert (records[1].width, records[1].height) == ("3840", "2160")
        assert all(r.detection_method is DetectionMethod.SYSTEM_PROFILER for r in records)

    def test_missing_name_and_resolution(self):
        output = self._output([{"spdisplays_ndrvs": [{}]}])
        records = parse_system_profiler_output(output)
        assert records[0].name == "Monitor 1"
        assert records[0].width == UNKNOWN
        assert records[0].height == UNKNOWN

    def test_no_displays_key(self):
        assert parse_system_profiler_output("{}") == []

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_system_profiler_output("not json")


class TestParseWmi:
    """Tests for WmiMonitorBasicDisplayParams JSON parsing."""

    def test_single_object(self):
        output = json.dumps(
            {"InstanceName": "DISPLAY\\DEL4123\\1_0", "MaxHorizontalImageSize": 60, "MaxVerticalImageSize": 34}
        )
        records = parse_wmi_output(output)
        assert len(records) == 1
        data = records[0].to_dict()
        assert data["name"] == "Monitor 1"
        assert data["width"] == UNKNOWN
        assert data["physical_width_cm"] == 60
        assert data["physical_height_cm"] == 34
        assert data["instance"] == "DISPLAY\\DEL4123\\1_0"
        assert data["detection_method"] == "wmi"

    def test_array(self):
        output = json.dumps([{"InstanceName": "A"}, {"InstanceName": None}])
        records = parse_wmi_output(output)
        assert [r.name for r in records] == ["Monitor 1", "Monitor 2"]
        assert records[1].instance == UNKNOWN

    def test_blank_output(self):
        assert parse_wmi_output("  \r\n") == []

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_wmi_output("Get-CimInstance : Access denied")


class TestScreenInfoRecords:
    """Tests for screeninfo monitor conversion."""

    def test_monitor_fields(self):
        monitors = [
            SimpleNamespace(name="eDP-1", width=2560, height=1600, is_primary=True),
            SimpleNamespace(name=None, width=1920, height=1080, is_primary=False),
        ]
        records = records_from_screeninfo(monitors)
        first, second = [r.to_dict() for r in records]
        assert first["name"] == "eDP-1"
        assert first["width"] == 2560
        assert first["main"] is True
        assert first["builtin"] is True
        assert first["vendor"] == UNKNOWN
        assert first["detection_method"] == "systeminfo"
        assert second["name"] == "Display 2"
        assert second["builtin"] is False

    def test_windows_device_name(self):
        records = records_from_screeninfo([SimpleNamespace(name="\\\\.\\DISPLAY1", width=1920, height=1080)])
        assert records[0].builtin is False
        assert records[0].main is False


class TestDisplayRecord:
    """Tests for record serialization."""

    def test_to_dict_omits_unset_fields(self):
        record = DisplayRecord(id=1, name="HDMI-1", detection_method=DetectionMethod.XRANDR, width="1920", height="1080")
        assert record.to_dict() == {
            "id": 1,
            "name": "HDMI-1",
            "width": "1920",
            "height": "1080",
            "detection_method": "xrandr",
        }

    def test_fallback_record(self):
        assert fallback_record().to_dict() == {
            "id": 1,
            "name": "Unknown Monitor",
            "width": "Unknown",
            "height": "Unknown",
            "detection_method": "fallback",
            "note": "Unable to detect monitor details",
        }
