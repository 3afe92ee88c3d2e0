import json

import pytest

from spatial_lookup import build


def square(x0, y0, x1, y1):
    return {
        "type": "Polygon",
        "coordinates": [[[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]],
    }


def feature(geometry, **props):
    return {"type": "Feature", "geometry": geometry, "properties": props}


@pytest.fixture
def peter_paul_mary():
    """Two identical unit squares at the origin plus one square at (10, 10)."""
    return [
        feature(square(0, 0, 1, 1), name="Peter"),
        feature(square(0, 0, 1, 1), name="Paul"),
        feature(square(10, 10, 11, 11), name="Mary"),
    ]


@pytest.fixture
def service(peter_paul_mary):
    return build(peter_paul_mary, "name").raise_for_failure()


@pytest.fixture
def geojson_file(tmp_path, peter_paul_mary):
    path = tmp_path / "regions.geojson"
    fc = {
        "type": "FeatureCollection",
        "features": peter_paul_mary + [feature({"type": "Point", "coordinates": [5, 5]}, name="Nowhere")],
    }
    path.write_text(json.dumps(fc), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("FILE", "PROPERTY", "HOST", "PORT", "NODE_CAPACITY", "QUERY_CRS", "DATA_CRS", "LOG_LEVEL"):
        monkeypatch.delenv("SPATIAL_LOOKUP_" + key, raising=False)
