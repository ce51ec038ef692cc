import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import catalogue_pager
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from catalogue_pager.core.models import Catalogue, Item, ItemOverrides  # noqa: E402


def make_items(count: int, prefix: str = "item"):
    """Items item-0 .. item-(count-1) with links and image URLs."""
    return tuple(
        Item(
            identifier=f"{prefix}-{i}",
            display_title=f"Title {i}",
            url=f"https://shop.example/products/{prefix}-{i}",
            image_url=f"https://cdn.example/{prefix}-{i}.jpg",
            author=f"Author {i}",
            price=f"${10 + i}.00",
            isbn=f"97800000000{i:02d}",
        )
        for i in range(count)
    )


# Common test fixtures
@pytest.fixture
def items_factory():
    """Return the make_items factory."""
    return make_items


@pytest.fixture
def catalogue_factory():
    """Factory for catalogues of n items with optional overrides."""
    def _create(count: int, overrides: ItemOverrides = None) -> Catalogue:
        return Catalogue(items=make_items(count), overrides=overrides or ItemOverrides())
    return _create


@pytest.fixture
def fake_fetcher():
    """Image fetcher that never touches the network."""
    def _fetch(url: str) -> Image.Image:
        return Image.new("RGB", (60, 90), color="steelblue")
    return _fetch


@pytest.fixture
def sample_image():
    """Create a simple test image."""
    return Image.new("RGB", (200, 100), color="white")
