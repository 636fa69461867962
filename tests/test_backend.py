"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from backend import config
from backend.app import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "OUTPUT_DIR", tmp_path)
    return TestClient(app)


TRIANGLE = {
    "vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
    "triangles": [0, 1, 2],
}


def test_root(client):
    assert client.get("/").json()["status"] == "ok"


def test_points(client):
    response = client.post("/api/ply/points", json={
        "points": [[0, 0, 0], [1, 2, 3]],
        "colors": [[255, 0, 0], [0, 255, 0]],
    })

    assert response.status_code == 200
    lines = response.text.splitlines()
    assert lines[2] == "element vertex 2"
    assert lines[-2:] == ["0 0 0 255 0 0", "1 2 -3 0 255 0"]


def test_points_null(client):
    response = client.post("/api/ply/points", json={})
    assert response.status_code == 400


def test_points_length_mismatch(client):
    response = client.post("/api/ply/points", json={
        "points": [[0, 0, 0], [1, 2, 3]],
        "colors": [[255, 0, 0]],
    })
    assert response.status_code == 400
    assert "one RGB or RGBA row per point" in response.json()["detail"]


def test_meshes_merge_and_skip(client):
    response = client.post("/api/ply/meshes", json={
        "meshes": [TRIANGLE, None, TRIANGLE],
    })

    assert response.status_code == 200
    lines = response.text.splitlines()
    assert "element vertex 6" in lines
    assert lines[-2:] == ["3 2 1 0", "3 5 4 3"]


def test_meshes_transform(client):
    shifted = dict(TRIANGLE, transform=[[1, 0, 0, 0],
                                        [0, 1, 0, 0],
                                        [0, 0, 1, 4],
                                        [0, 0, 0, 1]])
    world = client.post("/api/ply/meshes", json={"meshes": [shifted]})
    local = client.post("/api/ply/meshes", json={"meshes": [shifted],
                                                 "use_world_position": False})

    assert "0 0 -4 255 255 255" in world.text.splitlines()
    assert "0 0 0 255 255 255" in local.text.splitlines()


def test_meshes_null(client):
    assert client.post("/api/ply/meshes", json={}).status_code == 400


def test_store_and_list(client, tmp_path):
    response = client.post("/api/ply/meshes", json={
        "meshes": [TRIANGLE], "filename": "tri.ply",
    })

    assert response.status_code == 200
    stored = response.json()
    assert (stored["filename"], stored["vertices"], stored["faces"]) == ("tri.ply", 3, 1)
    assert stored["size_bytes"] == (tmp_path / "tri.ply").stat().st_size
    assert (tmp_path / "tri.ply").read_text().startswith("ply\n")

    models = client.get("/api/models").json()
    assert [(m["filename"], m["vertices"], m["faces"]) for m in models] == [("tri.ply", 3, 1)]

    served = client.get("/api/models/tri.ply")
    assert served.status_code == 200
    assert served.text.splitlines()[-1] == "3 2 1 0"


def test_store_rejects_paths(client):
    response = client.post("/api/ply/points", json={
        "points": [[0, 0, 0]], "filename": "../escape.ply",
    })
    assert response.status_code == 400


def test_missing_model(client):
    assert client.get("/api/models/nope.ply").status_code == 404


def test_store_records_skipped_meshes(client):
    response = client.post("/api/ply/meshes", json={
        "meshes": [TRIANGLE, None, {"vertices": [[1, 2]], "triangles": [0, 0, 0]}],
        "filename": "partial.ply",
    })

    assert response.status_code == 200
    assert response.json()["vertices"] == 3
    assert response.json()["skipped"] == 2


def test_unlisted_files_not_served(client, tmp_path):
    (tmp_path / "stray.ply").write_text("ply\n")

    assert client.get("/api/models").json() == []
    assert client.get("/api/models/stray.ply").status_code == 404


def test_bad_transform_skipped(client):
    bad = dict(TRIANGLE, transform=[[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    response = client.post("/api/ply/meshes", json={"meshes": [TRIANGLE, bad]})

    assert response.status_code == 200
    assert "element vertex 3" in response.text.splitlines()


def test_points_bad_color_shape(client):
    response = client.post("/api/ply/points", json={
        "points": [[0, 0, 0]], "colors": [[255, 0]],
    })
    assert response.status_code == 400
