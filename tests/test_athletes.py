from fastapi.testclient import TestClient


def _create_athlete(client: TestClient, name: str) -> dict:
    r = client.post("/api/athletes", json={"name": name})
    assert r.status_code == 201, r.text
    return r.json()


def test_athlete_crud_flow(client: TestClient):
    created = _create_athlete(client, "  Mika  ")
    athlete_id = created["id"]
    assert created["name"] == "Mika"

    r = client.get(f"/api/athletes/{athlete_id}")
    assert r.status_code == 200
    assert r.json()["sessions"] == []

    r = client.put(f"/api/athletes/{athlete_id}", json={"name": "Mika K"})
    assert r.status_code == 200
    assert r.json()["name"] == "Mika K"

    r = client.delete(f"/api/athletes/{athlete_id}")
    assert r.status_code == 204
    assert client.get(f"/api/athletes/{athlete_id}").status_code == 404


def test_athlete_name_must_not_be_blank(client: TestClient):
    assert client.post("/api/athletes", json={"name": "   "}).status_code == 422
    assert client.post("/api/athletes", json={}).status_code == 422


def test_list_athletes_newest_first_with_name_filter(client: TestClient):
    first = _create_athlete(client, "Anna")
    second = _create_athlete(client, "Bo")
    third = _create_athlete(client, "Hanna")

    r = client.get("/api/athletes")
    assert [a["id"] for a in r.json()] == [third["id"], second["id"], first["id"]]

    r = client.get("/api/athletes", params={"name": "ANNA"})
    assert [a["id"] for a in r.json()] == [third["id"], first["id"]]

    assert client.get("/api/athletes", params={"name": "_"}).json() == []
    assert client.get("/api/athletes", params={"name": "%"}).json() == []
    percent = _create_athlete(client, "100% Effort")
    assert [a["id"] for a in client.get("/api/athletes", params={"name": "%"}).json()] == [percent["id"]]


def test_unknown_athlete_returns_404(client: TestClient):
    assert client.get("/api/athletes/999").json() == {"detail": "Athlete not found"}
    assert client.put("/api/athletes/999", json={"name": "X"}).status_code == 404
    assert client.delete("/api/athletes/999").status_code == 404
    assert client.post("/api/athletes/999/sessions", json={"videoUrl": "v.mp4"}).status_code == 404
    assert client.get("/api/athletes/999/sessions").status_code == 404


def test_athlete_sessions_and_delete_cascade(client: TestClient):
    athlete = _create_athlete(client, "Sam")
    ids = []
    for notes in ("sparring round", "drills", "Sparring again"):
        r = client.post(f"/api/athletes/{athlete['id']}/sessions", json={"videoUrl": "https://cdn/v.mp4", "notes": notes})
        assert r.status_code == 201, r.text
        assert r.json()["athleteId"] == athlete["id"]
        ids.append(r.json()["id"])

    r = client.get(f"/api/athletes/{athlete['id']}/sessions")
    assert [s["id"] for s in r.json()] == list(reversed(ids))

    r = client.get(f"/api/athletes/{athlete['id']}/sessions", params={"search": "sparring"})
    assert [s["id"] for s in r.json()] == [ids[2], ids[0]]

    detail = client.get(f"/api/athletes/{athlete['id']}").json()
    assert [s["id"] for s in detail["sessions"]] == ids

    assert client.delete(f"/api/athletes/{athlete['id']}").status_code == 204
    assert client.get(f"/api/sessions/{ids[0]}/tags").status_code == 404
