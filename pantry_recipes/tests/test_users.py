from __future__ import annotations

import base64
import uuid

from fastapi.testclient import TestClient

from pantry_recipes.app import create_app
from pantry_recipes.auth.config import AuthConfig
from pantry_recipes.config import AppConfig
from pantry_recipes.store.memory import MemoryGraph
from pantry_recipes.users.profile import MAX_PICTURE_BYTES

AUTH_CONFIG = AuthConfig(jwt_secret="test-secret-key-for-pantry-recipes-tests", bcrypt_rounds=4)

client = TestClient(create_app(MemoryGraph.seeded(), AppConfig(environment="production"), AUTH_CONFIG))


def _signup():
    resp = client.post(
        "/api/auth/signup",
        json={"email": f"cook-{uuid.uuid4().hex[:8]}@example.com", "password": "secret123"},
    )
    body = resp.json()
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}


def _picture(size: int, mime: str = "png") -> str:
    return f"data:image/{mime};base64," + base64.b64encode(b"\x89" * size).decode()


# ── Access control ───────────────────────────────────────────────────────


def test_get_own_user():
    user_id, headers = _signup()
    resp = client.get(f"/api/users/{user_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user_id


def test_requires_token():
    user_id, _ = _signup()
    resp = client.get(f"/api/users/{user_id}")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Access token required"


def test_invalid_token_is_forbidden():
    user_id, _ = _signup()
    resp = client.get(f"/api/users/{user_id}", headers={"Authorization": "Bearer a.b.c"})
    assert resp.status_code == 403


def test_other_users_are_forbidden():
    user_id, _ = _signup()
    _, other_headers = _signup()
    resp = client.put(
        f"/api/users/{user_id}/preferences",
        json={"dietaryPreferences": ["vegan"], "allergies": []},
        headers=other_headers,
    )
    assert resp.status_code == 403


# ── Preferences ──────────────────────────────────────────────────────────


def test_update_preferences_normalizes_values():
    user_id, headers = _signup()
    resp = client.put(
        f"/api/users/{user_id}/preferences",
        json={"dietaryPreferences": ["Vegan ", "gluten-free", "vegan"], "allergies": ["Peanuts", " kiwi ", ""]},
        headers=headers,
    )
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["dietaryPreferences"] == ["vegan", "gluten-free"]
    assert user["allergies"] == ["peanuts", "kiwi"]


def test_unknown_dietary_preference_is_rejected():
    user_id, headers = _signup()
    resp = client.put(
        f"/api/users/{user_id}/preferences",
        json={"dietaryPreferences": ["carnivore"], "allergies": []},
        headers=headers,
    )
    assert resp.status_code == 422


def test_null_lists_clear_preferences():
    user_id, headers = _signup()
    url = f"/api/users/{user_id}/preferences"
    client.put(url, json={"dietaryPreferences": ["vegan"], "allergies": ["soy"]}, headers=headers)
    resp = client.put(url, json={"dietaryPreferences": None, "allergies": None}, headers=headers)
    user = resp.json()["user"]
    assert user["dietaryPreferences"] == []
    assert user["allergies"] == []


def test_preference_debug_view():
    user_id, headers = _signup()
    client.put(
        f"/api/users/{user_id}/preferences",
        json={"dietaryPreferences": ["vegetarian"], "allergies": ["Tree Nuts"]},
        headers=headers,
    )
    body = client.get(f"/api/users/{user_id}/debug", headers=headers).json()
    assert body["parsedDietaryPreferences"] == ["vegetarian"]
    assert body["parsedAllergies"] == ["tree nuts"]
    assert body["hasPreferences"] is True


# ── Profile ──────────────────────────────────────────────────────────────


def test_update_profile():
    user_id, headers = _signup()
    resp = client.put(f"/api/users/{user_id}/profile", json={"name": "Julia", "age": 41}, headers=headers)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["name"] == "Julia"
    assert user["age"] == 41


def test_update_profile_only_age_keeps_name():
    user_id, headers = _signup()
    client.put(f"/api/users/{user_id}/profile", json={"name": "Julia"}, headers=headers)
    resp = client.put(f"/api/users/{user_id}/profile", json={"age": 30}, headers=headers)
    assert resp.json()["user"]["name"] == "Julia"


def test_update_profile_without_fields():
    user_id, headers = _signup()
    resp = client.put(f"/api/users/{user_id}/profile", json={}, headers=headers)
    assert resp.status_code == 400


def test_update_profile_age_out_of_range():
    user_id, headers = _signup()
    resp = client.put(f"/api/users/{user_id}/profile", json={"age": -3}, headers=headers)
    assert resp.status_code == 422


# ── Profile picture ──────────────────────────────────────────────────────


def test_set_and_delete_profile_picture():
    user_id, headers = _signup()
    picture = _picture(64)
    url = f"/api/users/{user_id}/profile-picture"
    resp = client.put(url, json={"profilePicture": picture}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["profilePicture"] == picture

    resp = client.delete(url, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["profilePicture"] is None


def test_null_profile_picture_removes_it():
    user_id, headers = _signup()
    url = f"/api/users/{user_id}/profile-picture"
    client.put(url, json={"profilePicture": _picture(8)}, headers=headers)
    resp = client.put(url, json={"profilePicture": None}, headers=headers)
    assert resp.json()["user"]["profilePicture"] is None


def test_profile_picture_must_be_image_data_url():
    user_id, headers = _signup()
    url = f"/api/users/{user_id}/profile-picture"
    for bad in ("https://example.com/me.png", "data:text/plain;base64,aGVsbG8=", "data:image/png;base64,@@@"):
        resp = client.put(url, json={"profilePicture": bad}, headers=headers)
        assert resp.status_code == 400, bad


def test_profile_picture_size_limit():
    user_id, headers = _signup()
    url = f"/api/users/{user_id}/profile-picture"
    assert client.put(url, json={"profilePicture": _picture(MAX_PICTURE_BYTES)}, headers=headers).status_code == 200
    resp = client.put(url, json={"profilePicture": _picture(MAX_PICTURE_BYTES + 1)}, headers=headers)
    assert resp.status_code == 400
