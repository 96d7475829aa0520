"""
Tests for SlicerSession: load → plan → edit → export, and the reset
policy on failures.
"""
import gc
import logging

import pytest

from strip_slicer.config import SlicerConfig
from strip_slicer.errors import DecodeError, EmptyInputError
from strip_slicer.layout import SnapDirection
from strip_slicer.session import SlicerSession


@pytest.fixture
def config():
    return SlicerConfig(page_size=100, warn_difference=20, smart_breaks=False)


@pytest.fixture
def session(config):
    session = SlicerSession(config)
    yield session
    session.close()


@pytest.fixture
def three_images(solid_image):
    return [solid_image(10, 100, "red"), solid_image(10, 100, "green"), solid_image(10, 100, "blue")]


class TestLoad:
    def test_load_builds_strip_breaks_and_pins(self, session, three_images):
        session.load(three_images)

        assert session.is_loaded
        assert (session.strip_width, session.strip_height) == (10, 300)
        assert session.breaks == (0, 100, 200)
        # 100, 200, 300 planned; the empty tail page merges away
        assert session.pins.offsets == (100, 200)

    def test_load_empty_is_empty_state(self, session):
        session.load([])

        assert not session.is_loaded
        assert session.breaks == ()
        assert len(session.pins) == 0
        assert session.page_sizes() == []

    def test_decode_error_resets_previous_strip(self, session, sample_image_file, tmp_path):
        session.load_files([sample_image_file("a.png")])
        assert session.is_loaded

        bad = tmp_path / "bad.png"
        bad.write_bytes(b"garbage")
        with pytest.raises(DecodeError):
            session.load_files([sample_image_file("b.png"), bad])

        assert not session.is_loaded
        assert len(session.pins) == 0

    def test_detection_failure_resets_and_propagates(self, session, three_images, monkeypatch):
        import strip_slicer.session as session_module

        def boom(strip):
            raise RuntimeError("scan failed")

        monkeypatch.setattr(session_module, "detect_breaks", boom)

        with pytest.raises(RuntimeError):
            session.load(three_images)
        assert not session.is_loaded

    def test_reload_discards_edits(self, session, three_images):
        session.load(three_images)
        session.add_pin(150)

        session.load(three_images)

        assert session.pins.offsets == (100, 200)


class TestEdits:
    def test_accepted_edit_replaces_pins(self, session, three_images):
        session.load(three_images)
        before = session.pins

        result = session.add_pin(150)

        assert result.accepted
        assert session.pins.offsets == (100, 150, 200)
        assert before.offsets == (100, 200)

    def test_rejected_edit_keeps_pins(self, session, three_images):
        session.load(three_images)

        result = session.add_pin(100)

        assert not result.accepted
        assert session.pins.offsets == (100, 200)

    def test_delete_then_guard_last_pin(self, session, three_images):
        session.load(three_images)

        assert session.delete_pin(0).accepted
        assert not session.delete_pin(0).accepted
        assert session.pins.offsets == (200,)

    def test_snap_uses_session_breaks(self, session, three_images):
        session.load(three_images)
        session.move_pin(0, 90)

        result = session.snap_pin(0, SnapDirection.AFTER)

        assert result.accepted
        assert session.pins.offsets == (100, 200)

    def test_add_adjacent_pin(self, session, three_images):
        session.load(three_images)

        session.add_adjacent_pin(1, SnapDirection.AFTER, step=30)

        assert session.pins.offsets == (100, 200, 230)

    def test_edits_without_strip_are_rejected(self, session):
        assert not session.add_pin(10).accepted


class TestResets:
    def test_reset_to_breaks(self, session, solid_image):
        session.load([solid_image(10, 60), solid_image(10, 70), solid_image(10, 80)])

        assert session.reset_to_breaks().offsets == (60, 130)

    def test_reset_to_spacing_uses_new_config(self, session, three_images):
        session.load(three_images)
        session.update_config(SlicerConfig(page_size=150, warn_difference=20, smart_breaks=False))

        assert session.reset_to_spacing().offsets == (150,)

    def test_set_pins_normalises(self, session, three_images):
        session.load(three_images)

        assert session.set_pins([250, 0, 50, 50, 300]).offsets == (50, 250)


class TestOutputs:
    def test_page_sizes_sum_to_height(self, session, three_images):
        session.load(three_images)
        session.add_pin(130)

        sizes = session.page_sizes()

        assert [s.height for s in sizes] == [100, 30, 70, 100]
        assert sum(s.height for s in sizes) == session.strip_height
        assert [s.out_of_tolerance for s in sizes] == [False, True, True, False]

    def test_export_uses_config_prefix(self, three_images):
        with SlicerSession(SlicerConfig(page_size=100, smart_breaks=False, filename_prefix="ep_")) as session:
            session.load(three_images)
            names = [s.name for s in session.export()]

        assert names == ["ep_01.png", "ep_02.png", "ep_03.png"]

    def test_export_without_strip_raises(self, session):
        with pytest.raises(EmptyInputError):
            session.export()

    def test_log_lines_capture_activity(self, session, three_images):
        session.load(three_images)
        session.add_pin(100)

        text = "\n".join(session.log_lines)
        assert "loaded 3 images, total 300px" in text
        assert "already exists" in text

    def test_closed_session_stops_capturing(self, three_images):
        session = SlicerSession()
        session.close()
        session.load(three_images)

        assert session.log_lines == []


class TestLogIsolation:
    def test_sessions_keep_separate_logs(self, config, solid_image):
        with SlicerSession(config) as first, SlicerSession(config) as second:
            second.load([solid_image(10, 500)])

            assert first.log_lines == []
            assert "loaded 1 images, total 500px" in "\n".join(second.log_lines)

            first.load([solid_image(10, 300)])

            assert "loaded 1 images, total 300px" in "\n".join(first.log_lines)
            assert "loaded 1 images, total 300px" not in "\n".join(second.log_lines)

    def test_outside_records_are_not_captured(self, session):
        logging.getLogger("strip_slicer.layout.planner").info("unrelated")

        assert session.log_lines == []

    def test_close_restores_logger_level(self):
        package_logger = logging.getLogger("strip_slicer")
        previous = package_logger.level
        package_logger.setLevel(logging.NOTSET)
        try:
            with SlicerSession():
                assert package_logger.level == logging.DEBUG
            assert package_logger.level == logging.NOTSET
        finally:
            package_logger.setLevel(previous)

    def test_level_kept_while_another_session_is_open(self):
        package_logger = logging.getLogger("strip_slicer")
        previous = package_logger.level
        package_logger.setLevel(logging.WARNING)
        try:
            outer = SlicerSession()
            with SlicerSession():
                pass
            assert package_logger.level == logging.DEBUG
            outer.close()
            assert package_logger.level == logging.WARNING
        finally:
            package_logger.setLevel(previous)

    def test_unclosed_session_detaches_when_collected(self):
        package_logger = logging.getLogger("strip_slicer")
        before = len(package_logger.handlers)

        session = SlicerSession()
        assert len(package_logger.handlers) == before + 1

        del session
        gc.collect()

        assert len(package_logger.handlers) == before

    def test_close_twice_is_harmless(self):
        session = SlicerSession()
        session.close()
        session.close()

        assert session.log_lines == []
