import time

import pytest
from jose import jwt

from medicamp import security
from medicamp.cryptography import TokenError, issue_token, verify_token
from medicamp.security import RoleCache

from conftest import ORGANIZER_EMAIL, PARTICIPANT_EMAIL, SECRET, auth_header, camp_payload

ORGANIZER_ONLY = [
    ("get", "/users"),
    ("get", "/participants"),
    ("get", "/organizer-stats"),
    ("patch", "/confirmation-status/65f1c0e2a1b2c3d4e5f60718"),
    ("delete", "/delete-camp/65f1c0e2a1b2c3d4e5f60718"),
]


# ----------------------- token service -----------------------
def test_issue_and_verify_token():
    token = issue_token({"email": "a@example.com"}, SECRET)
    claims = verify_token(token, SECRET)
    assert claims["email"] == "a@example.com"
    assert claims["exp"] - time.time() == pytest.approx(24 * 3600, abs=60)


def test_verify_rejects_wrong_secret():
    token = issue_token({"email": "a@example.com"}, SECRET)
    with pytest.raises(TokenError):
        verify_token(token, "another-secret")


def test_verify_rejects_expired_token():
    token = issue_token({"email": "a@example.com"}, SECRET, expires_hours=-1)
    with pytest.raises(TokenError):
        verify_token(token, SECRET)


def test_verify_rejects_garbage_and_missing_claim():
    with pytest.raises(TokenError):
        verify_token("not-a-token", SECRET)
    claimless = jwt.encode({"sub": "someone"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        verify_token(claimless, SECRET)


# ----------------------- gates -----------------------
@pytest.mark.parametrize("method,path", ORGANIZER_ONLY)
def test_organizer_routes_without_token_are_unauthorized(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json()["message"] == "unauthorized access"


@pytest.mark.parametrize("method,path", ORGANIZER_ONLY)
def test_organizer_routes_reject_participants(client, participant, method, path):
    response = getattr(client, method)(path, headers=participant)
    assert response.status_code == 403
    assert response.json()["message"] == "forbidden access"


def test_unknown_user_with_valid_token_is_forbidden(client):
    response = client.get("/organizer-stats", headers=auth_header("stranger@example.com"))
    assert response.status_code == 403


def test_invalid_and_expired_tokens_are_unauthorized(client, organizer):
    assert client.get("/users", headers={"Authorization": "Bearer nonsense"}).status_code == 401
    assert client.get("/users", headers={"Authorization": "Token abc"}).status_code == 401
    expired = auth_header(ORGANIZER_EMAIL, expires_hours=-1)
    assert client.get("/users", headers=expired).status_code == 401
    forged = auth_header(ORGANIZER_EMAIL, secret="forged")
    assert client.get("/users", headers=forged).status_code == 401


def test_organizer_passes_both_gates(client, organizer):
    response = client.get("/users", headers=organizer)
    assert response.status_code == 200
    assert [u["email"] for u in response.json()] == [ORGANIZER_EMAIL]


def test_failed_gate_never_runs_the_handler(client, db, organizer, participant):
    camp_id = client.post("/camps", json=camp_payload(), headers=organizer).json()["insertedId"]

    assert client.delete(f"/delete-camp/{camp_id}", headers=participant).status_code == 403
    assert client.post("/camps", json=camp_payload(campName="Sneaky"), headers=participant).status_code == 403
    assert db["camps"].count_documents({}) == 1


def test_role_is_looked_up_on_every_request(client, db, participant):
    assert client.get("/organizer-stats", headers=participant).status_code == 403
    db["users"].update_one({"email": PARTICIPANT_EMAIL}, {"$set": {"role": "Organizer"}})
    assert client.get("/organizer-stats", headers=participant).status_code == 200


def test_owner_gate_blocks_other_emails(client, participant):
    assert client.get(f"/registered-camps/{PARTICIPANT_EMAIL}", headers=participant).status_code == 200
    assert client.get("/registered-camps/someone@example.com", headers=participant).status_code == 403
    assert client.get("/history-count", params={"email": "someone@example.com"},
                      headers=participant).status_code == 403


def test_cookie_token_when_enabled(client, organizer, monkeypatch):
    token = organizer["Authorization"].split(" ", 1)[1]
    assert client.get("/users", headers={"Cookie": f"token={token}"}).status_code == 401

    monkeypatch.setattr(security, "AUTH_COOKIE_NAME", "token")
    assert client.get("/users", headers={"Cookie": f"token={token}"}).status_code == 200


def test_jwt_access_issues_usable_token(client, organizer):
    response = client.post("/jwt-access", json={"email": ORGANIZER_EMAIL})
    assert response.status_code == 200
    token = response.json()["token"]
    assert client.get("/users", headers={"Authorization": f"Bearer {token}"}).status_code == 200


def test_jwt_access_requires_email(client):
    response = client.post("/jwt-access", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"


# ----------------------- role cache -----------------------
def test_role_cache_disabled_by_default():
    cache = RoleCache()
    cache.set("a@example.com", "Organizer")
    assert cache.get("a@example.com") is None


def test_role_cache_expires_and_invalidates(monkeypatch):
    now = [100.0]
    monkeypatch.setattr(security.time, "monotonic", lambda: now[0])
    cache = RoleCache(ttl=30)

    cache.set("a@example.com", "Organizer")
    assert cache.get("a@example.com") == "Organizer"
    now[0] += 31
    assert cache.get("a@example.com") is None

    cache.set("a@example.com", "Organizer")
    cache.invalidate("a@example.com")
    assert cache.get("a@example.com") is None


def test_role_cache_drops_expired_callers(monkeypatch):
    now = [100.0]
    monkeypatch.setattr(security.time, "monotonic", lambda: now[0])
    cache = RoleCache(ttl=30)

    for i in range(50):
        cache.set(f"user{i}@example.com", "Participant")
    assert len(cache) == 50

    now[0] += 31
    cache.set("late@example.com", "Organizer")
    assert len(cache) == 1
    assert cache.get("late@example.com") == "Organizer"
