import json

import pytest
from PIL import Image


@pytest.fixture
def split_payload():
    """A well-formed response from the split service"""
    return {
        "total": 108.00,
        "individuals": [
            {
                "name": "Alex",
                "items": [
                    {"name": "Burger", "price": 18.00, "quantity": 1},
                    {"name": "Beer", "price": 6.00, "quantity": 2},
                ],
                "subtotal": 30.00,
                "taxShare": 2.40,
                "tipShare": 0,
                "owed": 32.40,
            },
            {
                "name": "Sam",
                "items": [
                    {"name": "Steak", "price": 70.00, "quantity": 1},
                ],
                "subtotal": 70.00,
                "taxShare": 5.60,
                "tipShare": 0,
                "owed": 75.60,
            },
        ],
    }


@pytest.fixture
def split_text(split_payload):
    return json.dumps(split_payload)


@pytest.fixture
def receipt_image(tmp_path):
    path = tmp_path / "receipt.png"
    Image.new("RGBA", (400, 900), (255, 255, 255, 255)).save(path)
    return str(path)
