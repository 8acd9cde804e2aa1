import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

API_URL = "https://shop.test/wp-json/wc/v3"
API_HOST = "shop.test"
PRODUCTS_PATH = "/wp-json/wc/v3/products"


def load_fixture(path: str) -> str:
    return (FIXTURES / path).read_text()


def load_json_fixture(path: str):
    return json.loads(load_fixture(path))


def variation_path(parent_id, variation_id) -> str:
    return f"{PRODUCTS_PATH}/{parent_id}/variations/{variation_id}"


@pytest.fixture()
def write_feed(tmp_path):
    def _write(header: list[str], rows: list[list[str]], name: str = "giacenze.csv") -> Path:
        path = tmp_path / name
        lines = [";".join(header)] + [";".join(row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
