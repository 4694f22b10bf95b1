"""Pytest configuration and fixtures"""
import pytest

from shop.cart import Cart, MemoryStorage


class FailingStorage(MemoryStorage):
    """Reads work, every write blows up (quota exceeded and the like)."""

    def set(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notes():
    """Notification sink that records (kind, message) pairs"""
    return []


@pytest.fixture
def notify(notes):
    def _notify(kind, message):
        notes.append((kind, message))
    return _notify


@pytest.fixture
def cart(storage, notify):
    return Cart(storage, notify=notify)


@pytest.fixture
def saree():
    return {
        "id": "p1",
        "name": "Saree",
        "name_si": "සාරිය",
        "name_ta": "புடவை",
        "price": 2500,
        "original_price": 3000,
        "image_url": "https://example.com/saree.jpg",
    }


@pytest.fixture
def sarong():
    return {"id": "p2", "name": "Sarong", "price": "1250.50"}
