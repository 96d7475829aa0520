import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import strip_slicer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from strip_slicer.core.models import SourceImage
from strip_slicer.geometry import build_strip


# Common test fixtures
@pytest.fixture
def solid_image():
    """Factory for solid-colour SourceImages."""
    def _create(width: int, height: int, color="white", name: str = "", mode: str = "RGB"):
        return SourceImage(image=Image.new(mode, (width, height), color=color), name=name)
    return _create


@pytest.fixture
def busy_image():
    """Factory for SourceImages where every row is complex (first pixel differs)."""
    def _create(width: int, height: int, name: str = ""):
        img = Image.new("RGB", (width, height), color="white")
        for y in range(height):
            img.putpixel((0, y), (0, 0, 0))
        return SourceImage(image=img, name=name)
    return _create


@pytest.fixture
def strip_of_height(solid_image):
    """Factory for a single-image strip of a given height."""
    def _create(height: int, width: int = 10):
        return build_strip([solid_image(width, height)])
    return _create


@pytest.fixture
def sample_image_file(tmp_path: Path):
    """Create a simple test image on disk."""
    def _create(name: str = "sample.png", size=(20, 30), color="white", mode: str = "RGB"):
        img = Image.new(mode, size, color=color)
        img_path = tmp_path / name
        img.save(img_path)
        return img_path
    return _create
