def test_catalog_endpoint(client):
    r = client.get("/api/mapgen/catalog")
    assert r.status_code == 200
    data = r.get_json()
    assert data["origin"] == "origin"
    assert data["exit"] == "exit"
    assert {p["name"] for p in data["pieces"]} == {"origin", "mid", "exit"}


def test_config_endpoint_reflects_app_config(client):
    r = client.get("/api/mapgen/config")
    assert r.status_code == 200
    data = r.get_json()
    assert data["max_rooms"] == 3
    assert data["min_path_length"] == 2
    assert data["iteration_budget"] == 1000


def test_generate_line_layout(client):
    r = client.post("/api/mapgen/generate", json={"seed": 5, "include_ascii": True})
    assert r.status_code == 200
    data = r.get_json()
    assert data["success"] is True
    assert data["seed"] == 5
    assert data["room_count"] == 3
    assert data["path_length"] == 2
    assert [room["piece"] for room in data["rooms"]] == ["origin", "mid", "exit"]
    assert [h["orientation"] for h in data["hallways"]] == ["horizontal", "horizontal"]
    assert data["ascii"] == "S-R-X"
    assert data["metrics"]["iterations"] == 3


def test_generate_without_body(client):
    r = client.post("/api/mapgen/generate")
    assert r.status_code == 200
    assert isinstance(r.get_json()["seed"], int)


def test_text_seed_is_stable(client):
    s1 = client.post("/api/mapgen/generate", json={"seed": "alpha"}).get_json()["seed"]
    s2 = client.post("/api/mapgen/generate", json={"seed": "alpha"}).get_json()["seed"]
    assert isinstance(s1, int)
    assert s1 == s2


def test_generation_failure_is_422(client):
    r = client.post("/api/mapgen/generate", json={"min_path_length": 6, "attempts": 2})
    assert r.status_code == 422
    data = r.get_json()
    assert data["error"] == "generation_failed"
    assert data["attempts"] == 2


def test_budget_exceeded_is_422(client):
    r = client.post("/api/mapgen/generate", json={"iteration_budget": 1})
    assert r.status_code == 422
    data = r.get_json()
    assert data["error"] == "iteration_budget_exceeded"
    assert data["iterations"] == 2
    assert data["budget"] == 1


def test_invalid_field_type(client):
    r = client.post("/api/mapgen/generate", json={"max_rooms": "ten"})
    assert r.status_code == 400
    data = r.get_json()
    assert data == {"error": "invalid_request", "field": "max_rooms", "detail": "expected int", "code": "type"}


def test_invalid_field_range(client):
    r = client.post("/api/mapgen/generate", json={"max_rooms": 1})
    assert r.status_code == 400
    assert r.get_json()["code"] == "min"


def test_boolean_is_not_an_integer(client):
    r = client.post("/api/mapgen/generate", json={"iteration_budget": True})
    assert r.status_code == 400
    assert r.get_json()["field"] == "iteration_budget"


def test_too_many_attempts(client, test_app):
    test_app.config["MAPGEN_MAX_REQUEST_ATTEMPTS"] = 3
    r = client.post("/api/mapgen/generate", json={"attempts": 4})
    assert r.status_code == 400
    assert r.get_json()["field"] == "attempts"


def test_missing_catalog_file(client, test_app, tmp_path):
    test_app.config["MAPGEN_CATALOG_PATH"] = str(tmp_path / "missing.json")
    r = client.get("/api/mapgen/catalog")
    assert r.status_code == 500
    assert r.get_json()["error"] == "catalog_unavailable"
