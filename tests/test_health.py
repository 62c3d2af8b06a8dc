"""
Test Health Check Endpoints
"""


def test_root(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.text == "SyncFlo Backend is running and configured correctly!"


def test_health(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready(test_client, mock_database):
    response = test_client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["dependencies"]["database"]["status"] == "healthy"
    mock_database.ping.assert_called_once()


def test_not_ready_when_database_down(test_client, mock_database):
    mock_database.ping.side_effect = OSError("connection refused")

    response = test_client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["dependencies"]["database"]["status"] == "unhealthy"
