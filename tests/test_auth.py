import asyncio

import pytest

from gameplane.auth import Decision, FirebaseIdentityVerifier, IdentityProviderError
from gameplane.models import Coupon


def test_missing_authorization_header_is_unauthorized(client):
    response = client.get("/users/role", params={"email": "alice@example.com"})

    assert response.status_code == 401
    assert response.json() == {"message": "unauthorized access"}


def test_non_bearer_scheme_is_unauthorized(client):
    response = client.get(
        "/users/role",
        params={"email": "alice@example.com"},
        headers={"Authorization": "Token alice-token"},
    )

    assert response.status_code == 401


def test_rejected_token_is_unauthorized(client):
    response = client.get(
        "/users/role",
        params={"email": "alice@example.com"},
        headers={"Authorization": "Bearer forged"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "unauthorized access"


def test_email_mismatch_is_forbidden(client, alice_headers):
    response = client.get("/users/role", params={"email": "bob@example.com"}, headers=alice_headers)

    assert response.status_code == 403
    assert response.json() == {"message": "forbidden access"}


def test_email_match_ignores_case(client, seed, alice_headers):
    seed.user("alice@example.com")

    response = client.get("/users/role", params={"email": "Alice@Example.com"}, headers=alice_headers)

    assert response.status_code == 200
    assert response.json() == {"role": "user"}


def test_admin_route_rejects_regular_user(client, seed, alice_headers):
    seed.user("alice@example.com")

    response = client.get("/allUsers", headers=alice_headers)

    assert response.status_code == 403


def test_admin_route_rejects_unknown_user(client, bob_headers):
    response = client.get("/allUsers", headers=bob_headers)

    assert response.status_code == 403


def test_admin_route_allows_admin(client, admin_headers):
    response = client.get("/allUsers", headers=admin_headers)

    assert response.status_code == 200
    assert [u["email"] for u in response.json()] == ["admin@example.com"]


def test_unauthorized_write_leaves_storage_untouched(client, session_factory):
    response = client.post("/coupons", json={"code": "FREE", "maxUses": 3})

    assert response.status_code == 401
    with session_factory() as db:
        assert db.query(Coupon).count() == 0


def test_forbidden_write_leaves_storage_untouched(client, seed, session_factory, alice_headers):
    seed.user("alice@example.com")

    response = client.post("/coupons", json={"code": "FREE", "maxUses": 3}, headers=alice_headers)

    assert response.status_code == 403
    with session_factory() as db:
        assert db.query(Coupon).count() == 0


def test_unconfigured_identity_provider_is_server_error(client, verifier, alice_headers):
    verifier.broken = True

    response = client.get("/users/role", params={"email": "alice@example.com"}, headers=alice_headers)

    assert response.status_code == 500


def test_firebase_verifier_without_configuration_raises():
    verifier = FirebaseIdentityVerifier(app_name="gameplane-unconfigured-test")

    with pytest.raises(IdentityProviderError):
        asyncio.run(verifier.verify("any-token"))


def test_decision_helpers():
    assert Decision.allow().allowed
    denied = Decision.deny(403, "forbidden access")
    assert not denied.allowed
    assert denied.status_code == 403
    assert denied.reason == "forbidden access"
