from datetime import timedelta

from factories import auth_header, create_club, create_member, create_plan
from gymmonitor.core.clock import local_today
from gymmonitor.core.security import issue_token
from gymmonitor.db import models


def _seed_club(SessionLocal):
    db = SessionLocal()
    club = create_club(db, code="HARBOUR")
    plan = create_plan(db, club, billing_period_days=14)
    other_club = create_club(db, code="OTHER", name="Other Gym")
    other_plan = create_plan(db, other_club, name="Other plan")
    db.close()
    return club, plan, other_plan


def _signup_payload(plan_id, **overrides):
    payload = {
        "name": "Nora New",
        "email": "Nora@Example.com",
        "password": "correct-horse",
        "clubCode": "HARBOUR",
        "membershipPlanId": plan_id,
    }
    payload.update(overrides)
    return payload


def test_signup_login_and_check(api_client):
    client, SessionLocal = api_client
    _, plan, _ = _seed_club(SessionLocal)

    response = client.post("/api/auth/signup", json=_signup_payload(plan.id))
    assert response.status_code == 200
    assert response.json() == {"message": "User registered successfully"}

    response = client.post("/api/auth/login", json={"email": "nora@example.com", "password": "correct-horse"})
    assert response.status_code == 200
    token = response.json()["token"]

    response = client.get("/api/auth/check", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Nora New"
    assert body["role"] == "MEMBER"

    db = SessionLocal()
    user = db.query(models.User).filter_by(email="nora@example.com").one()
    assert user.cents_owed == 0
    assert user.next_billing_date == local_today() + timedelta(days=14)
    assert user.password_hash != "correct-horse"
    db.close()


def test_signup_rejects_duplicate_email(api_client):
    client, SessionLocal = api_client
    club, plan, _ = _seed_club(SessionLocal)
    db = SessionLocal()
    create_member(db, club, plan, email="nora@example.com")
    db.close()

    response = client.post("/api/auth/signup", json=_signup_payload(plan.id))

    assert response.status_code == 409
    assert response.json() == {"error": "Email is already in use"}


def test_signup_rejects_unknown_club_code(api_client):
    client, SessionLocal = api_client
    _, plan, _ = _seed_club(SessionLocal)

    response = client.post("/api/auth/signup", json=_signup_payload(plan.id, clubCode="NOPE"))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid club code"}


def test_signup_rejects_plan_from_another_club(api_client):
    client, SessionLocal = api_client
    _, _, other_plan = _seed_club(SessionLocal)

    response = client.post("/api/auth/signup", json=_signup_payload(other_plan.id))

    assert response.status_code == 400
    assert response.json() == {"error": "Membership plan does not belong to club"}


def test_signup_validation_errors_use_error_envelope(api_client):
    client, SessionLocal = api_client
    _, plan, _ = _seed_club(SessionLocal)

    response = client.post("/api/auth/signup", json=_signup_payload(plan.id, password="short"))

    assert response.status_code == 400
    assert response.json()["error"].startswith("password")


def test_login_with_wrong_password(api_client):
    client, SessionLocal = api_client
    _, plan, _ = _seed_club(SessionLocal)
    client.post("/api/auth/signup", json=_signup_payload(plan.id))

    response = client.post("/api/auth/login", json={"email": "nora@example.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


def test_check_rejects_missing_and_invalid_tokens(api_client):
    client, SessionLocal = api_client
    club, plan, _ = _seed_club(SessionLocal)
    db = SessionLocal()
    member = create_member(db, club, plan)
    db.close()

    assert client.get("/api/auth/check").status_code == 401

    response = client.get("/api/auth/check", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    expired = issue_token(member.id, "MEMBER", lifetime=timedelta(minutes=-1))
    response = client.get("/api/auth/check", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401

    response = client.get("/api/auth/check", headers=auth_header(member))
    assert response.status_code == 200
    assert response.json()["id"] == member.id
