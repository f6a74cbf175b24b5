import mongomock
import pytest
from fastapi.testclient import TestClient

from medicamp.cryptography import issue_token
from medicamp.main import create_app

SECRET = "test-secret"
ORGANIZER_EMAIL = "organizer@example.com"
PARTICIPANT_EMAIL = "patient@example.com"


def auth_header(email, secret=SECRET, expires_hours=24):
    token = issue_token({"email": email}, secret, expires_hours)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    return mongomock.MongoClient()["medicalCampTest"]


@pytest.fixture
def app(db):
    return create_app(database=db, token_secret=SECRET)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def organizer(db):
    db["users"].insert_one({"email": ORGANIZER_EMAIL, "name": "Dr. Organizer", "role": "Organizer"})
    return auth_header(ORGANIZER_EMAIL)


@pytest.fixture
def participant(db):
    db["users"].insert_one({"email": PARTICIPANT_EMAIL, "name": "Pat Ient", "role": "Participant"})
    return auth_header(PARTICIPANT_EMAIL)


def camp_payload(**overrides):
    camp = {
        "campName": "General Health Checkup",
        "image": "https://i.ibb.co/camp.jpg",
        "fees": "500",
        "dateTime": "2026-11-02 10:00",
        "location": "Dhaka Medical College",
        "professionalName": "Dr. Rahman",
        "description": "Free screening for all ages",
    }
    camp.update(overrides)
    return camp


def registration_payload(camp_id, email=PARTICIPANT_EMAIL, **overrides):
    registration = {
        "campId": camp_id,
        "campName": "General Health Checkup",
        "campFees": "500",
        "location": "Dhaka Medical College",
        "professionalName": "Dr. Rahman",
        "participantName": "Pat Ient",
        "participantEmail": email,
        "age": 34,
        "phone": "01711000000",
        "gender": "female",
        "emergencyContact": "01711000001",
    }
    registration.update(overrides)
    return registration


@pytest.fixture
def make_camp(client, organizer):
    def _make(**overrides):
        response = client.post("/camps", json=camp_payload(**overrides), headers=organizer)
        assert response.status_code == 200, response.text
        return response.json()["insertedId"]
    return _make


@pytest.fixture
def register(client, participant):
    def _register(camp_id, **overrides):
        response = client.post("/participants", json=registration_payload(camp_id, **overrides), headers=participant)
        assert response.status_code == 200, response.text
        return response.json()["insertedId"]
    return _register
