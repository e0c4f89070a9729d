import random
import pytest
from fastapi.testclient import TestClient
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from asset_triage import main
from asset_triage.main import app
from asset_triage.models.classifier import IssueClassifier
from data.generate_dataset import generate_sample_dataset
from asset_triage.worklogs import records_from_frame


HISTORY = [
    {"status": "HARDWARE", "issueSummary": "laptop screen broken"},
    {"status": "HARDWARE", "issueSummary": "desktop fan dead"},
    {"status": "NETWORK", "issueSummary": "wifi drops in lab"},
]


@pytest.fixture(autouse=True)
def reset_state():
    """Each test starts without a trained classifier and with empty rate limit buckets"""
    main.classifier = None
    main._rate_buckets.clear()
    yield
    main.classifier = None
    main._rate_buckets.clear()


@pytest.fixture
def client():
    """Create test client"""
    return TestClient(app)


@pytest.fixture
def trained_app():
    """Create app with a classifier trained on generated work logs"""
    df = generate_sample_dataset(200, label="category")
    main.classifier = IssueClassifier(records_from_frame(df), rng=random.Random(1))
    return TestClient(app)


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "ICT Asset Issue Classifier" in data["message"]


def test_liveness(client):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"


def test_readiness_without_classifier(client):
    response = client.get("/health/ready")
    assert response.status_code == 503
    body = response.json()
    assert body["code"] == "HTTP_503"
    assert "x-request-id" in response.headers


def test_classify_without_classifier(client):
    response = client.post("/classify", json={"issueDescription": "printer dead", "itemType": "Printer"})
    assert response.status_code == 503


def test_readiness_with_classifier(trained_app):
    response = trained_app.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_classify_endpoint(trained_app):
    response = trained_app.post(
        "/classify",
        json={"issueDescription": "Laptop screen flickering and broken", "itemType": "Laptop"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "HARDWARE"
    assert data["severity"] == "CRITICAL"
    assert data["estimatedResolutionTime"] == 16
    assert data["priority"] == 32
    assert data["suggestedTechnician"] in ["tech1", "tech2"]
    assert 0 <= data["confidence"] <= 1
    assert data["escalation"]["shouldEscalate"] is True
    assert data["escalation"]["recommendedTechnician"] == data["suggestedTechnician"]


def test_classify_low_severity_is_not_escalated(trained_app):
    response = trained_app.post("/classify", json={"issueDescription": "Replace toner cartridge in copier"})
    assert response.status_code == 200
    data = response.json()
    assert data["severity"] == "LOW"
    assert data["escalation"]["shouldEscalate"] is False
    assert data["escalation"]["escalationReason"] == "Issue can be resolved by current user"


def test_classify_validation_error(trained_app):
    response = trained_app.post("/classify", json={"itemType": "Laptop"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_classify_with_history(client):
    response = client.post(
        "/classify/with-history",
        json={"issueDescription": "wifi is slow", "itemType": "Access Point", "workLogs": HISTORY},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "NETWORK"
    assert data["severity"] == "HIGH"
    assert data["estimatedResolutionTime"] == 6
    assert data["priority"] == 9
    assert data["suggestedTechnician"] in ["tech5", "tech6"]


def test_classify_with_history_defaults_missing_fields(client):
    response = client.post(
        "/classify/with-history",
        json={"issueDescription": "anything", "workLogs": [{"issueSummary": "no status here"}, {}]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "UNKNOWN"
    assert data["confidence"] == 0.5


def test_classify_with_empty_history(client):
    response = client.post(
        "/classify/with-history",
        json={"issueDescription": "printer dead", "itemType": "Printer", "workLogs": []},
    )
    assert response.status_code == 422
    assert response.json()["code"] == "EMPTY_TRAINING_SET"


def test_model_status(trained_app):
    data = trained_app.get("/model/status").json()
    assert data["isTrained"] is True
    assert set(data["categories"]) == {"HARDWARE", "SOFTWARE", "NETWORK", "PERFORMANCE", "MAINTENANCE"}
    assert data["vocabularySize"] > 0
    assert data["trainingRecords"] == 200


def test_model_status_untrained(client):
    data = client.get("/model/status").json()
    assert data["isTrained"] is False
    assert data["categories"] == []


def test_version(trained_app):
    data = trained_app.get("/version").json()
    assert data["model_loaded"] is True
    assert data["training_records"] == 200


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"x-request-id": "abc123"})
    assert response.headers["x-request-id"] == "abc123"


def test_body_size_limit(client):
    big = [{"status": "OPEN", "issueSummary": "x" * 1000}] * (main.settings.MAX_BODY_BYTES // 1000 + 10)
    response = client.post("/classify/with-history", json={"issueDescription": "x", "workLogs": big})
    assert response.status_code == 413
