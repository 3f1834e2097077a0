"""
Tests for the mesh endpoints.

These tests use FastAPI's TestClient to simulate requests against the
application without running a real server.  Each request uploads a
small ASCII STL and checks the JSON, STL or SVG response.
"""

import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the backend directory to sys.path so we can import the app
sys.path.append(str(Path(__file__).resolve().parents[1]))

from steel.main import app  # type: ignore
from steel.services.stl_io import read_stl  # type: ignore

TETRA = b"""solid tetra
facet normal 0 0 -1
  outer loop
    vertex 0 0 0
    vertex 0 2 0
    vertex 2 0 0
  endloop
endfacet
facet normal 0 -1 0
  outer loop
    vertex 0 0 0
    vertex 2 0 0
    vertex 0 0 2
  endloop
endfacet
facet normal -1 0 0
  outer loop
    vertex 0 0 0
    vertex 0 0 2
    vertex 0 2 0
  endloop
endfacet
facet normal 1 1 1
  outer loop
    vertex 2 0 0
    vertex 0 2 0
    vertex 0 0 2
  endloop
endfacet
endsolid tetra
"""


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _files(content: bytes = TETRA) -> dict:
    return {"file": ("tetra.stl", io.BytesIO(content), "application/octet-stream")}


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_info(client: TestClient) -> None:
    response = client.post("/api/meshes/info", files=_files())
    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "tetra.stl"
    assert data["triangles"] == 4
    assert data["bbox"] == {"min": [0.0, 0.0, 0.0], "max": [2.0, 2.0, 2.0]}


def test_scale_returns_binary_stl(client: TestClient) -> None:
    response = client.post("/api/meshes/scale", params={"factor": 2.0}, files=_files())
    assert response.status_code == 200
    mesh = read_stl(io.BytesIO(response.content))
    assert len(mesh) == 4
    assert mesh.triangles[0].vertices[1] == (0.0, 4.0, 0.0)


def test_slice_returns_svg(client: TestClient) -> None:
    response = client.post("/api/meshes/slice", params={"z": 1.0}, files=_files())
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.count("<path d='M") == 3


def test_cut_returns_both_parts(client: TestClient) -> None:
    response = client.post("/api/meshes/cut", params={"z": 1.0}, files=_files())
    assert response.status_code == 200
    data = response.json()
    assert data["plane"] == "xy"
    assert data["offset"] == 1.0
    below = read_stl(io.BytesIO(data["below"]["stl"].encode("ascii")))
    above = read_stl(io.BytesIO(data["above"]["stl"].encode("ascii")))
    assert len(below) == data["below"]["triangles"]
    assert len(above) == data["above"]["triangles"]
    assert all(v[2] <= 1.0 for tr in below.triangles for v in tr.vertices)
    assert all(v[2] >= 1.0 for tr in above.triangles for v in tr.vertices)


def test_two_plane_coordinates_are_rejected(client: TestClient) -> None:
    response = client.post("/api/meshes/cut", params={"x": 3.0, "y": 2.0}, files=_files())
    assert response.status_code == 400
    assert "More than one coord" in response.json()["detail"]


def test_malformed_stl_is_rejected(client: TestClient) -> None:
    response = client.post("/api/meshes/info", files=_files(b"not an stl"))
    assert response.status_code == 400
