import pytest
from fastapi.testclient import TestClient

from conftest import bearer, register_user


def _create_my_tag(client: TestClient, headers: dict, **payload) -> dict:
    r = client.post("/api/my/tags", headers=headers, json=payload)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Counter", "category": "OFFENSIVE"},
        {"name": "Counter", "category": "DEFENSIVE", "outcome": None},
        {"name": "Dropped guard", "category": "TECHNICAL_ERROR", "outcome": "FAIL"},
        {"name": "Mystery", "category": "UNKNOWN"},
        {"name": "Nothing"},
        {"name": "", "category": "MENTAL"},
    ],
)
def test_create_tag_rejects_invalid_category_outcome(client: TestClient, auth_headers: dict, payload: dict):
    r = client.post("/api/my/tags", headers=auth_headers, json=payload)
    assert r.status_code == 422


def test_create_plain_and_outcome_tags(client: TestClient, auth_headers: dict, registered: dict):
    plain = _create_my_tag(client, auth_headers, name=" Focus ", category="MENTAL", description="stay calm")
    assert plain["name"] == "Focus"
    assert plain["category"] == "MENTAL"
    assert plain["outcome"] is None
    assert plain["athleteId"] == registered["athlete"]["id"]

    scored = _create_my_tag(client, auth_headers, name="Takedown", category="OFFENSIVE", outcome="SUCCESS")
    assert scored["category"] == "OFFENSIVE"
    assert scored["outcome"] == "SUCCESS"


def test_tag_names_unique_per_owner(client: TestClient, auth_headers: dict):
    _create_my_tag(client, auth_headers, name="Jab", category="TECHNICAL_STRENGTH")
    r = client.post("/api/my/tags", headers=auth_headers, json={"name": "Jab", "category": "PHYSICAL"})
    assert r.status_code == 409

    other = bearer(register_user(client, email="other@combat.io")["token"])
    _create_my_tag(client, other, name="Jab", category="TECHNICAL_STRENGTH")

    r = client.post("/api/tags", json={"name": "Jab", "category": "TECHNICAL_STRENGTH"})
    assert r.status_code == 201
    r = client.post("/api/tags", json={"name": "Jab", "category": "TECHNICAL_STRENGTH"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Tag with this name already exists"


def test_global_tags_listing_and_search(client: TestClient, auth_headers: dict):
    client.post("/api/tags", json={"name": "Slip", "category": "DEFENSIVE", "outcome": "SUCCESS"})
    client.post("/api/tags", json={"name": "Cardio", "category": "PHYSICAL"})
    _create_my_tag(client, auth_headers, name="Private", category="MENTAL")

    r = client.get("/api/tags")
    assert [t["name"] for t in r.json()] == ["Cardio", "Slip"]
    assert all(t["athleteId"] is None for t in r.json())

    r = client.get("/api/tags", params={"search": "sli"})
    assert [t["name"] for t in r.json()] == ["Slip"]

    mine = client.get("/api/my/tags", headers=auth_headers).json()
    assert [t["name"] for t in mine] == ["Cardio", "Slip", "Private"]


def test_global_tag_search_matches_wildcard_characters_literally(client: TestClient):
    for name in ("Jab", "Low kick", "50% guard", "clinch_entry"):
        assert client.post("/api/tags", json={"name": name, "category": "TECHNICAL_STRENGTH"}).status_code == 201

    assert [t["name"] for t in client.get("/api/tags", params={"search": "%"}).json()] == ["50% guard"]
    assert [t["name"] for t in client.get("/api/tags", params={"search": "_"}).json()] == ["clinch_entry"]
    assert client.get("/api/tags", params={"search": "j_b"}).json() == []


def test_tag_name_conflict_from_unique_constraint(client: TestClient, auth_headers: dict, monkeypatch):
    from combat_analyzer.services.tag_service import TagService

    _create_my_tag(client, auth_headers, name="Jab", category="TECHNICAL_STRENGTH")
    other = _create_my_tag(client, auth_headers, name="Cross", category="TECHNICAL_STRENGTH")
    # another request inserted the same name after the lookup
    monkeypatch.setattr(TagService, "_name_taken", lambda self, *args, **kwargs: False)

    r = client.post("/api/my/tags", headers=auth_headers, json={"name": "Jab", "category": "PHYSICAL"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Tag with this name already exists"

    r = client.patch(f"/api/my/tags/{other['id']}", headers=auth_headers, json={"name": "Jab"})
    assert r.status_code == 409

    names = [t["name"] for t in client.get("/api/my/tags", headers=auth_headers).json()]
    assert names == ["Cross", "Jab"]


def test_global_tags_are_read_only_through_my_tags(client: TestClient, auth_headers: dict):
    tag = client.post("/api/tags", json={"name": "Cardio", "category": "PHYSICAL"}).json()

    r = client.patch(f"/api/my/tags/{tag['id']}", headers=auth_headers, json={"name": "Gas tank"})
    assert r.status_code == 403
    r = client.delete(f"/api/my/tags/{tag['id']}", headers=auth_headers)
    assert r.status_code == 403


def test_other_athletes_tags_are_hidden(client: TestClient, auth_headers: dict):
    other = bearer(register_user(client, email="other@combat.io")["token"])
    theirs = _create_my_tag(client, other, name="Secret", category="MENTAL")

    assert client.patch(f"/api/my/tags/{theirs['id']}", headers=auth_headers, json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/my/tags/{theirs['id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/api/my/tags/{theirs['id']}/usage", headers=auth_headers).status_code == 404


def test_update_tag_revalidates_merged_variant(client: TestClient, auth_headers: dict):
    tag = _create_my_tag(client, auth_headers, name="Hook", category="TECHNICAL_STRENGTH")

    # switching to an outcome category without an outcome is rejected
    r = client.patch(f"/api/my/tags/{tag['id']}", headers=auth_headers, json={"category": "OFFENSIVE"})
    assert r.status_code == 422

    r = client.patch(
        f"/api/my/tags/{tag['id']}",
        headers=auth_headers,
        json={"category": "OFFENSIVE", "outcome": "FAIL", "description": "left hook"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["outcome"] == "FAIL"
    assert r.json()["description"] == "left hook"

    # the stored outcome now blocks a plain category unless cleared
    r = client.patch(f"/api/my/tags/{tag['id']}", headers=auth_headers, json={"category": "PHYSICAL"})
    assert r.status_code == 422
    r = client.patch(f"/api/my/tags/{tag['id']}", headers=auth_headers, json={"category": "PHYSICAL", "outcome": None})
    assert r.status_code == 200
    assert r.json()["category"] == "PHYSICAL"
    assert r.json()["outcome"] is None

    r = client.patch(f"/api/my/tags/{tag['id']}", headers=auth_headers, json={"outcome": "SUCCESS"})
    assert r.status_code == 422


def test_rename_conflict(client: TestClient, auth_headers: dict):
    _create_my_tag(client, auth_headers, name="Jab", category="TECHNICAL_STRENGTH")
    cross = _create_my_tag(client, auth_headers, name="Cross", category="TECHNICAL_STRENGTH")
    r = client.patch(f"/api/my/tags/{cross['id']}", headers=auth_headers, json={"name": "Jab"})
    assert r.status_code == 409
    r = client.patch(f"/api/my/tags/{cross['id']}", headers=auth_headers, json={"name": "Cross"})
    assert r.status_code == 200


def test_usage_count_and_delete_removes_applications(client: TestClient, auth_headers: dict):
    tag = _create_my_tag(client, auth_headers, name="Feint", category="TACTICAL_DECISION")
    session = client.post("/api/my/sessions", headers=auth_headers, json={"videoUrl": "https://cdn/1.mp4"}).json()
    for second in (5, 12):
        r = client.post(
            f"/api/my/sessions/{session['id']}/tags",
            headers=auth_headers,
            json={"tagId": tag["id"], "timestampSec": second},
        )
        assert r.status_code == 201

    r = client.get(f"/api/my/tags/{tag['id']}/usage", headers=auth_headers)
    assert r.json() == {"tagId": tag["id"], "usageCount": 2}

    assert client.delete(f"/api/my/tags/{tag['id']}", headers=auth_headers).status_code == 204
    detail = client.get(f"/api/my/sessions/{session['id']}", headers=auth_headers).json()
    assert detail["sessionTags"] == []
    assert client.get(f"/api/my/tags/{tag['id']}/usage", headers=auth_headers).status_code == 404
