"""API tests for the admin endpoints and login."""
from datetime import datetime, timedelta
from uuid import uuid4

from sqlalchemy import select

from medicare_api.models import (
    BloodGroup,
    Donation,
    Dose,
    DoseStatus,
    Link,
    Medication,
    User,
    UserRole,
    UserStatus,
)

BASE = "/api/v1/admin"


def test_list_users_paginates_newest_first(client, admin_headers, make_user):
    for _ in range(3):
        make_user(UserRole.PATIENT)
    newest = make_user(UserRole.DONOR, blood_group=BloodGroup.O_NEG, city="Pune")

    response = client.get(f"{BASE}/users?page=1&limit=2", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 5, "totalPages": 3}
    assert body["data"][0]["id"] == str(newest.id)
    assert body["data"][0]["blood_group"] == "O-"
    assert "hashed_password" not in body["data"][0]


def test_list_users_filters_by_role(client, admin_headers, make_user):
    make_user(UserRole.PATIENT)
    make_user(UserRole.DONOR)
    make_user(UserRole.DONOR)

    body = client.get(f"{BASE}/users?role=donor", headers=admin_headers).json()

    assert body["pagination"]["total"] == 2
    assert {u["role"] for u in body["data"]} == {"donor"}


def test_list_users_rejects_unknown_role(client, admin_headers):
    response = client.get(f"{BASE}/users?role=nurse", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_update_user_status(client, admin_headers, make_user, query):
    patient = make_user(UserRole.PATIENT)

    response = client.patch(f"{BASE}/users/{patient.id}/status", json={"status": "suspended"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "User status updated to suspended"
    stored = query(select(User).where(User.id == patient.id))[0]
    assert stored.status == UserStatus.SUSPENDED


def test_update_user_status_rejects_unknown_value(client, admin_headers, make_user):
    patient = make_user(UserRole.PATIENT)
    response = client.patch(f"{BASE}/users/{patient.id}/status", json={"status": "banned"}, headers=admin_headers)
    assert response.status_code == 400
    assert "active, inactive, or suspended" in response.json()["message"]


def test_admin_cannot_change_own_status(client, admin, admin_headers):
    response = client.patch(f"{BASE}/users/{admin.id}/status", json={"status": "inactive"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot change your own status"


def test_update_status_of_unknown_user(client, admin_headers):
    response = client.patch(f"{BASE}/users/{uuid4()}/status", json={"status": "inactive"}, headers=admin_headers)
    assert response.status_code == 404


def test_suspended_user_token_is_rejected(client, make_user, headers_for):
    other_admin = make_user(UserRole.ADMIN, status=UserStatus.SUSPENDED)
    response = client.get(f"{BASE}/analytics", headers=headers_for(other_admin))
    assert response.status_code == 401


def test_analytics_counts(client, admin_headers, make_user, seed):
    patient = make_user(UserRole.PATIENT)
    caretaker = make_user(UserRole.CARETAKER)
    donor = make_user(UserRole.DONOR)
    medication = seed(Medication(patient_id=patient.id, name="Metformin"))
    seed(
        Dose(medication_id=medication.id, scheduled_time=datetime(2025, 6, 1, 8)),
        Dose(medication_id=medication.id, scheduled_time=datetime(2025, 6, 1, 20)),
        Link(caretaker_id=caretaker.id, patient_id=patient.id),
        Donation(donor_id=donor.id, blood_group=BloodGroup.B_POS, units=1),
    )

    response = client.get(f"{BASE}/analytics", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {
        "users": {"total": 4, "byRole": {"patient": 1, "caretaker": 1, "donor": 1, "admin": 1}},
        "medications": 1,
        "donations": 1,
        "doses": 2,
        "caretakerPatientLinks": 1,
    }


def test_links_embed_both_users(client, admin_headers, make_user, seed):
    patient = make_user(UserRole.PATIENT, name="Pat")
    caretaker = make_user(UserRole.CARETAKER, name="Carl")
    seed(Link(caretaker_id=caretaker.id, patient_id=patient.id))

    body = client.get(f"{BASE}/links", headers=admin_headers).json()

    assert body["pagination"]["limit"] == 20
    link = body["data"][0]
    assert link["caretaker"]["name"] == "Carl"
    assert link["patient"]["name"] == "Pat"
    assert link["status"] == "active"


def test_activity_feed_merges_and_sorts(client, admin_headers, make_user, seed):
    patient = make_user(UserRole.PATIENT, name="Pat")
    medication = seed(Medication(patient_id=patient.id, name="Aspirin"))
    seed(Dose(
        medication_id=medication.id,
        scheduled_time=datetime(2025, 6, 1, 8),
        status=DoseStatus.TAKEN,
        updated_at=datetime.now() + timedelta(days=1),
    ))

    body = client.get(f"{BASE}/activity", headers=admin_headers).json()

    entries = body["data"]
    assert entries[0]["type"] == "dose_updated"
    assert entries[0]["data"]["status"] == "taken"
    types = [e["type"] for e in entries]
    assert types.count("user_created") == 2
    medication_entry = next(e for e in entries if e["type"] == "medication_created")
    assert medication_entry["data"] == {"medication": "Aspirin", "patient": "Pat"}


def test_activity_feed_is_capped(client, admin_headers, make_user):
    for _ in range(25):
        make_user(UserRole.PATIENT)
    body = client.get(f"{BASE}/activity", headers=admin_headers).json()
    assert len(body["data"]) == 20


def test_admin_routes_require_admin(client, make_user, headers_for):
    caretaker = make_user(UserRole.CARETAKER)
    assert client.get(f"{BASE}/users").status_code == 401
    assert client.get(f"{BASE}/users", headers={"Authorization": "Bearer not-a-token"}).status_code == 401
    assert client.get(f"{BASE}/users", headers=headers_for(caretaker)).status_code == 403


def test_login_and_me(client, make_user, user_password):
    admin = make_user(UserRole.ADMIN, email="boss@example.com")

    login = client.post("/api/v1/auth/login", json={"email": "boss@example.com", "password": user_password})

    assert login.status_code == 200
    token = login.json()["data"]["access_token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["id"] == str(admin.id)


def test_login_rejects_bad_password_and_inactive_accounts(client, make_user, user_password):
    make_user(UserRole.ADMIN, email="boss@example.com")
    make_user(UserRole.ADMIN, email="gone@example.com", status=UserStatus.INACTIVE)

    wrong = client.post("/api/v1/auth/login", json={"email": "boss@example.com", "password": "nope"})
    inactive = client.post("/api/v1/auth/login", json={"email": "gone@example.com", "password": user_password})

    assert wrong.status_code == 401
    assert inactive.status_code == 401
    assert wrong.json()["success"] is False
