"""
Unit tests for output.exporter.

Test Coverage:
- slice_name(): prefix and zero padding
- SliceExport: page skipping, numbering, laziness, restartability
- write_slices_dir() / write_slices_zip() sinks
"""
import zipfile

import pytest

from strip_slicer.geometry import build_strip
from strip_slicer.layout import PinSet
from strip_slicer.output import (
    iter_slices,
    slice_name,
    write_slices_dir,
    write_slices_zip,
)


@pytest.fixture
def strip(solid_image):
    """Strip of height 10: rows 0-4 red, 5-9 blue."""
    return build_strip([solid_image(8, 5, "red"), solid_image(8, 5, "blue")])


class TestSliceName:
    def test_default_prefix_and_padding(self):
        assert slice_name(1) == "page_01.png"
        assert slice_name(12) == "page_12.png"

    def test_three_digit_numbers_are_not_truncated(self):
        assert slice_name(100, "x") == "x100.png"

    def test_empty_prefix_falls_back(self):
        assert slice_name(3, "") == "page_03.png"


class TestSliceExport:
    def test_pages_from_two_pins(self, strip):
        slices = list(iter_slices(strip, PinSet.from_offsets([4, 7], strip.height)))

        assert [s.name for s in slices] == ["page_01.png", "page_02.png", "page_03.png"]
        assert [s.height for s in slices] == [4, 3, 3]
        assert [(s.top, s.bottom) for s in slices] == [(0, 4), (4, 7), (7, 10)]

    def test_zero_height_page_is_skipped_and_not_numbered(self, strip):
        slices = list(iter_slices(strip, [0, 7]))

        assert [s.name for s in slices] == ["page_01.png", "page_02.png"]
        assert [s.height for s in slices] == [7, 3]

    def test_pin_at_strip_end_is_skipped(self, strip):
        export = iter_slices(strip, [10])

        assert len(export) == 1
        assert [p.height for p in export.pages] == [10]

    def test_custom_prefix(self, strip):
        names = [s.name for s in iter_slices(strip, [5], prefix="ch1_")]
        assert names == ["ch1_01.png", "ch1_02.png"]

    def test_export_is_lazy_and_restartable(self, strip, monkeypatch):
        import strip_slicer.output.exporter as exporter

        calls = []
        real_render = exporter.render_slice

        def counting_render(s, y1, y2):
            calls.append((y1, y2))
            return real_render(s, y1, y2)

        monkeypatch.setattr(exporter, "render_slice", counting_render)

        export = iter_slices(strip, [5])
        assert calls == []

        first = next(iter(export))
        assert first.name == "page_01.png"
        assert calls == [(0, 5)]

        assert [s.name for s in export] == [s.name for s in export]
        assert len(calls) == 5

    def test_data_is_png(self, strip):
        assert all(s.data.startswith(b"\x89PNG") for s in iter_slices(strip, [5]))


class TestSinks:
    def test_write_slices_dir(self, strip, tmp_path):
        out = tmp_path / "pages"

        written = write_slices_dir(iter_slices(strip, [3, 6]), out)

        assert [p.name for p in written] == ["page_01.png", "page_02.png", "page_03.png"]
        assert all(p.exists() for p in written)

    def test_write_slices_zip_appends_suffix_and_stores(self, strip, tmp_path):
        path = write_slices_zip(iter_slices(strip, [5]), tmp_path / "out" / "compiled")

        assert path.suffix == ".zip"
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["page_01.png", "page_02.png"]
            assert all(info.compress_type == zipfile.ZIP_STORED for info in zf.infolist())

    def test_progress_reports_each_slice(self, strip, tmp_path):
        seen = []

        write_slices_zip(
            iter_slices(strip, [2, 4, 6]),
            tmp_path / "compiled.zip",
            progress=lambda done, total: seen.append((done, total)),
        )

        assert seen == [(1, 4), (2, 4), (3, 4), (4, 4)]
