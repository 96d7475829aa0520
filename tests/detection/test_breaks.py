"""
Unit tests for detection.breaks.

Test Coverage:
- Solid strips report only y = 0 (first row seeded as complex)
- Complexity flips and colour seams
- Scaled images report strip coordinates
- Alpha channel is ignored
- Output is deterministic and strictly ascending
"""
from PIL import Image, ImageDraw

from strip_slicer.core.models import SourceImage
from strip_slicer.detection import classify_rows, detect_breaks
from strip_slicer.geometry import build_strip


class TestSolidStrips:
    def test_solid_white_strip_has_single_break_at_top(self, solid_image):
        strip = build_strip([solid_image(20, 50, "white")])
        assert detect_breaks(strip) == (0,)

    def test_solid_black_strip_has_single_break_at_top(self, solid_image):
        # Black matches the seed colour, but the seed row is complex
        strip = build_strip([solid_image(20, 50, "black")])
        assert detect_breaks(strip) == (0,)

    def test_same_colour_across_images_has_no_seam(self, solid_image):
        strip = build_strip([solid_image(20, 50, "white"), solid_image(20, 30, "white")])
        assert detect_breaks(strip) == (0,)

    def test_colour_change_between_images_is_a_break(self, solid_image):
        strip = build_strip([solid_image(20, 50, "white"), solid_image(20, 30, "red")])
        assert detect_breaks(strip) == (0, 50)


class TestComplexity:
    def test_complex_band_is_bounded_by_breaks(self):
        img = Image.new("RGB", (20, 30), "white")
        ImageDraw.Draw(img).line([(5, 10), (5, 19)], fill="black")
        strip = build_strip([SourceImage(img)])

        assert detect_breaks(strip) == (0, 10, 20)

    def test_strip_starting_with_artwork_has_no_break_at_top(self):
        img = Image.new("RGB", (20, 30), "white")
        ImageDraw.Draw(img).line([(5, 0), (5, 9)], fill="black")
        strip = build_strip([SourceImage(img)])

        assert detect_breaks(strip) == (10,)

    def test_state_carries_across_images(self, busy_image, solid_image):
        strip = build_strip([busy_image(20, 10), busy_image(20, 10), solid_image(20, 15)])
        assert detect_breaks(strip) == (20,)

    def test_alpha_is_ignored(self):
        img = Image.new("RGBA", (20, 10), (255, 0, 0, 255))
        img.putpixel((5, 0), (255, 0, 0, 0))
        strip = build_strip([SourceImage(img)])

        assert detect_breaks(strip) == (0,)


class TestScaling:
    def test_downscaled_rows_map_to_strip_coordinates(self, busy_image):
        tall = Image.new("RGB", (40, 100), "white")
        ImageDraw.Draw(tall).rectangle([(0, 50), (39, 99)], fill="blue")
        strip = build_strip([busy_image(20, 10), busy_image(20, 10), SourceImage(tall)])

        # Third image is scaled by 0.5 and starts at y=20
        assert strip.images[2].height == 50
        assert detect_breaks(strip) == (20, 45)

    def test_collapsed_rows_reported_once(self, busy_image):
        stripes = Image.new("RGB", (40, 4), "white")
        stripes.paste((255, 0, 0), (0, 1, 40, 2))
        stripes.paste((255, 0, 0), (0, 3, 40, 4))
        strip = build_strip([busy_image(20, 2), busy_image(20, 2), SourceImage(stripes)])

        breaks = detect_breaks(strip)

        assert breaks == (4, 5, 6)
        assert list(breaks) == sorted(set(breaks))
        assert all(0 <= y <= strip.height for y in breaks)


def test_detection_is_deterministic(busy_image, solid_image):
    strip = build_strip([solid_image(20, 40, "white"), busy_image(20, 25), solid_image(20, 30, "green")])

    assert detect_breaks(strip) == detect_breaks(strip)


def test_classify_rows_only_compares_strip_width(solid_image):
    img = Image.new("RGB", (40, 3), "white")
    img.putpixel((30, 1), (0, 0, 0))
    strip = build_strip([solid_image(20, 5), solid_image(20, 5), SourceImage(img)])

    scan = classify_rows(strip.images[2], strip.width)

    assert scan.row_count == 3
    assert not scan.complex.any()
    assert tuple(scan.colors[0]) == (255, 255, 255)
