"""
Test stats API endpoints.
"""
from fastapi.testclient import TestClient


def _post_hit(client: TestClient, uri: str, ip: str, timestamp: str = "2030-05-01 12:00:00"):
    return client.post("/hit", json={"app": "eventhub", "uri": uri, "ip": ip, "timestamp": timestamp})


class TestHitEndpoint:

    def test_post_hit(self, client: TestClient):
        response = _post_hit(client, "/events/1", "10.0.0.1")

        assert response.status_code == 201
        data = response.json()
        assert data["uri"] == "/events/1"
        assert data["timestamp"] == "2030-05-01 12:00:00"

    def test_post_hit_missing_field(self, client: TestClient):
        response = client.post("/hit", json={"app": "eventhub", "uri": "/events"})

        assert response.status_code == 400
        assert response.json()["status"] == "BAD_REQUEST"


class TestStatsEndpoint:

    def test_get_stats(self, client: TestClient):
        _post_hit(client, "/events/1", "10.0.0.1")
        _post_hit(client, "/events/1", "10.0.0.1")
        _post_hit(client, "/events/2", "10.0.0.2")

        response = client.get(
            "/stats",
            params={"start": "2030-05-01 00:00:00", "end": "2030-05-02 00:00:00", "unique": "true"},
        )

        assert response.status_code == 200
        assert response.json() == [
            {"app": "eventhub", "uri": "/events/1", "hits": 1},
            {"app": "eventhub", "uri": "/events/2", "hits": 1},
        ]

    def test_repeated_uris_param(self, client: TestClient):
        _post_hit(client, "/events/1", "10.0.0.1")
        _post_hit(client, "/events/2", "10.0.0.1")
        _post_hit(client, "/events/3", "10.0.0.1")

        response = client.get(
            "/stats",
            params={"start": "2030-05-01 00:00:00", "end": "2030-05-02 00:00:00", "uris": ["/events/1", "/events/3"]},
        )

        assert sorted(s["uri"] for s in response.json()) == ["/events/1", "/events/3"]

    def test_end_before_start(self, client: TestClient):
        response = client.get("/stats", params={"start": "2030-05-02 00:00:00", "end": "2030-05-01 00:00:00"})

        assert response.status_code == 400

    def test_bad_date_format(self, client: TestClient):
        response = client.get("/stats", params={"start": "yesterday", "end": "2030-05-01 00:00:00"})

        assert response.status_code == 400
        assert "start" in response.json()["message"]

    def test_missing_range(self, client: TestClient):
        assert client.get("/stats").status_code == 400
