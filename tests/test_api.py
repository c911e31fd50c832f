import uuid

import pytest


@pytest.fixture
def session_id(client):
    response = client.post("/api/session", json={"studentName": "Ada"})
    assert response.status_code == 200
    return response.json()["id"]


class TestHealth:
    def test_database_connected(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["database"] == "connected"


class TestPredict:
    def test_arithmetic(self, client):
        response = client.post("/api/predict", json={"history": [1, 2, 3, 4, 5]})
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "ARITHMETIC"
        assert data["nextValues"] == pytest.approx([6, 7, 8])
        assert data["isDeterministic"] is True

    def test_random(self, client, random_history):
        data = client.post("/api/predict", json={"history": random_history}).json()
        assert data["type"] == "RANDOM"
        assert data["interval"]["min"] <= data["interval"]["max"]

    @pytest.mark.parametrize("body", [{"history": [1, 2]}, {"history": "1,2,3"}, {}])
    def test_invalid_history(self, client, body):
        response = client.post("/api/predict", json=body)
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid history")

    def test_non_numeric_values(self, client):
        response = client.post("/api/predict", json={"history": ["a", "b", "c"]})
        assert response.status_code == 400

    def test_non_finite_values(self, client):
        response = client.post("/api/predict", json={"history": ["1", "nan", "3", "inf"]})
        assert response.status_code == 400
        assert "finite" in response.json()["detail"]

    def test_non_finite_values_not_recorded(self, client, session_id):
        response = client.post(
            "/api/predict", json={"history": [1, "nan", 3], "sessionId": session_id}
        )
        assert response.status_code == 400
        session = client.get(f"/api/session/{session_id}").json()
        assert session["numberSequences"] == []

    def test_huge_magnitudes(self, client):
        response = client.post("/api/predict", json={"history": [1e200, -1e200, 3e200]})
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "RANDOM"
        assert 0.0 <= data["confidence"] <= 1.0

    def test_recorded_against_session(self, client, session_id):
        response = client.post(
            "/api/predict", json={"history": [1, 2, 3, 4, 5], "sessionId": session_id}
        )
        assert response.status_code == 200

        session = client.get(f"/api/session/{session_id}").json()
        assert len(session["numberSequences"]) == 1
        recorded = session["numberSequences"][0]
        assert recorded["inputValues"] == [1, 2, 3, 4, 5]
        assert recorded["isDeterministic"] is True

    def test_unknown_session(self, client):
        response = client.post(
            "/api/predict", json={"history": [1, 2, 3], "sessionId": str(uuid.uuid4())}
        )
        assert response.status_code == 404


class TestSessions:
    def test_defaults(self, client):
        data = client.post("/api/session", json={}).json()
        assert data["studentName"] == "Anonymous"
        assert data["mode"] == "EDUCATION"

    def test_missing(self, client):
        assert client.get(f"/api/session/{uuid.uuid4()}").status_code == 404


class TestSeries:
    def _save(self, client, session_id, numbers, source="MANUAL"):
        return client.post(
            "/api/series",
            json={"sessionId": session_id, "numbers": numbers, "source": source},
        )

    def test_save_and_duplicate(self, client, session_id):
        saved = self._save(client, session_id, [1, 2, 3]).json()
        assert saved["success"] is True
        assert saved["series"]["count"] == 3

        duplicate = self._save(client, session_id, [1, 2, 3]).json()
        assert duplicate == {"message": "Series already exists", "duplicate": True}

    def test_unknown_session(self, client):
        assert self._save(client, str(uuid.uuid4()), [1, 2, 3]).status_code == 404

    def test_pagination(self, client, session_id):
        self._save(client, session_id, [1, 2, 3])
        self._save(client, session_id, [4, 5, 6], source="HTML")
        self._save(client, session_id, [7, 8], source="OCR")

        page = client.get(f"/api/series/{session_id}", params={"page": 1, "limit": 2}).json()
        assert page["total"] == 3
        assert page["totalPages"] == 2
        assert len(page["series"]) == 2
        assert page["series"][0]["numbers"] == [7, 8]

    def test_assembly_skips_contained_batches(self, client, session_id):
        self._save(client, session_id, [1, 2, 3])
        self._save(client, session_id, [1, 2, 3, 4, 5])
        data = client.get(f"/api/series/{session_id}/all").json()
        assert data["numbers"] == [1, 2, 3, 4, 5]
        assert data["count"] == 5

    def test_assembly_concatenates_new_batches(self, client, session_id):
        self._save(client, session_id, [1, 2, 3])
        self._save(client, session_id, [4, 5, 6])
        data = client.get(f"/api/series/{session_id}/all").json()
        assert data["numbers"] == [1, 2, 3, 4, 5, 6]

    def test_delete(self, client, session_id):
        series_id = self._save(client, session_id, [1, 2, 3]).json()["series"]["id"]
        response = client.delete(f"/api/series/{series_id}")
        assert response.json() == {"success": True, "message": "Series deleted"}
        assert client.delete(f"/api/series/{series_id}").status_code == 404


class TestUpload:
    def test_html(self, client):
        data = client.post(
            "/api/upload/html", json={"html": "<span>1.5</span><span>3.25x</span>"}
        ).json()
        assert data["numbers"] == [1.5, 3.25]
        assert data["count"] == 2
        assert data["stats"]["max"] == 3.25

    def test_html_required(self, client):
        response = client.post("/api/upload/html", json={"html": ""})
        assert response.status_code == 400
        assert response.json()["detail"] == "HTML content is required"

    def test_ocr(self, client):
        words = [
            {"text": "215", "bbox": {"x0": 80, "y0": 10, "x1": 100, "y1": 20}},
            {"text": "1.05", "bbox": {"x0": 5, "y0": 12, "x1": 40, "y1": 22}},
        ]
        data = client.post("/api/upload/ocr", json={"words": words}).json()
        assert data["numbers"] == [1.05, 2.15]

    def test_manual(self, client):
        data = client.post("/api/upload/manual", json={"numbers": [1, "2.5", "x"]}).json()
        assert data == {"success": True, "numbers": [1.0, 2.5], "count": 2}

    def test_manual_requires_array(self, client):
        response = client.post("/api/upload/manual", json={"numbers": "1,2"})
        assert response.status_code == 400
