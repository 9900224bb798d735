"""Tests for Alert CRUD, filtering, ordering and the summary.

Covers:
- Create with defaults; owner taken from the token, never the body
- Field validation → 400 with a per-field error list
- Priority / status / type filters (AND semantics)
- Severity-then-recency ordering
- Partial update and metadata merge
- Delete
- Sparse summary counts
"""
from tests.conftest import register_and_auth, create_alert


class TestAlertCreate:

    def test_create_alert_defaults(self, client):
        user, headers = register_and_auth(client)
        alert = create_alert(client, headers, title="Check blood pressure")
        assert alert["title"] == "Check blood pressure"
        assert alert["status"] == "active"
        assert alert["priority"] == "medium"
        assert alert["type"] == "general"
        assert alert["metadata"] == {}
        assert alert["acknowledgedAt"] is None
        assert alert["resolvedAt"] is None
        assert alert["userId"] == user["id"]
        assert alert["user"] == {"id": user["id"], "name": "Test User", "email": "test@example.com"}

    def test_owner_comes_from_token_not_body(self, client):
        user, headers = register_and_auth(client)
        other, _ = register_and_auth(client, name="Other", email="other@example.com")
        alert = create_alert(client, headers, userId=other["id"], user_id=other["id"])
        assert alert["userId"] == user["id"]

    def test_create_response_message(self, client):
        _, headers = register_and_auth(client)
        resp = client.post("/api/alerts", json={"title": "X"}, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["message"] == "Alert created successfully"

    def test_title_required(self, client):
        _, headers = register_and_auth(client)
        resp = client.post("/api/alerts", json={"message": "no title"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "title"

    def test_blank_title_rejected(self, client):
        _, headers = register_and_auth(client)
        resp = client.post("/api/alerts", json={"title": "   "}, headers=headers)
        assert resp.status_code == 400

    def test_title_and_message_length_limits(self, client):
        _, headers = register_and_auth(client)
        resp = client.post("/api/alerts", json={"title": "x" * 256}, headers=headers)
        assert resp.status_code == 400
        resp = client.post("/api/alerts", json={"title": "ok", "message": "m" * 1001}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "message"

    def test_invalid_enum_rejected(self, client):
        _, headers = register_and_auth(client)
        resp = client.post("/api/alerts", json={"title": "x", "priority": "urgent"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "priority"


class TestAlertFilters:

    def test_priority_filter(self, client):
        _, headers = register_and_auth(client)
        created = create_alert(client, headers, title="Test Alert", priority="high", type="health")

        resp = client.get("/api/alerts?priority=high", headers=headers)
        assert resp.status_code == 200
        alerts = resp.json()["alerts"]
        assert [a["id"] for a in alerts] == [created["id"]]

        resp = client.get("/api/alerts?priority=low", headers=headers)
        assert resp.json()["alerts"] == []
        assert resp.json()["pagination"]["totalItems"] == 0

    def test_filters_are_anded(self, client):
        _, headers = register_and_auth(client)
        create_alert(client, headers, title="a", priority="high", type="health")
        create_alert(client, headers, title="b", priority="high", type="system")
        create_alert(client, headers, title="c", priority="low", type="health")

        resp = client.get("/api/alerts?priority=high&type=health", headers=headers)
        assert [a["title"] for a in resp.json()["alerts"]] == ["a"]

    def test_status_filter(self, client):
        _, headers = register_and_auth(client)
        a = create_alert(client, headers, title="a")
        create_alert(client, headers, title="b")
        client.put(f"/api/alerts/{a['id']}/resolve", headers=headers)

        resp = client.get("/api/alerts?status=resolved", headers=headers)
        assert [x["title"] for x in resp.json()["alerts"]] == ["a"]

    def test_invalid_filter_rejected_before_query(self, client):
        _, headers = register_and_auth(client)
        resp = client.get("/api/alerts?status=bogus", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "status"

    def test_invalid_page_and_limit(self, client):
        _, headers = register_and_auth(client)
        assert client.get("/api/alerts?page=0", headers=headers).status_code == 400
        assert client.get("/api/alerts?limit=0", headers=headers).status_code == 400
        assert client.get("/api/alerts?limit=101", headers=headers).status_code == 400
        assert client.get("/api/alerts?page=abc", headers=headers).status_code == 400

    def test_severity_then_recency_order(self, client):
        _, headers = register_and_auth(client)
        create_alert(client, headers, title="low", priority="low")
        create_alert(client, headers, title="critical", priority="critical")
        create_alert(client, headers, title="medium-old", priority="medium")
        create_alert(client, headers, title="high", priority="high")
        create_alert(client, headers, title="medium-new", priority="medium")

        resp = client.get("/api/alerts", headers=headers)
        titles = [a["title"] for a in resp.json()["alerts"]]
        assert titles == ["critical", "high", "medium-new", "medium-old", "low"]

    def test_active_shortcut(self, client):
        _, headers = register_and_auth(client)
        low = create_alert(client, headers, title="low", priority="low")
        create_alert(client, headers, title="critical", priority="critical")
        done = create_alert(client, headers, title="done", priority="critical")
        client.put(f"/api/alerts/{done['id']}", json={"status": "dismissed"}, headers=headers)

        resp = client.get("/api/alerts/active", headers=headers)
        body = resp.json()
        assert body["count"] == 2
        assert [a["title"] for a in body["alerts"]] == ["critical", "low"]
        assert body["alerts"][1]["id"] == low["id"]


class TestAlertUpdate:

    def test_partial_update_keeps_omitted_fields(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers, title="Original", message="keep me", priority="high")
        resp = client.put(f"/api/alerts/{alert['id']}", json={"title": "Renamed"}, headers=headers)
        assert resp.status_code == 200
        updated = resp.json()["alert"]
        assert updated["title"] == "Renamed"
        assert updated["message"] == "keep me"
        assert updated["priority"] == "high"

    def test_message_can_be_cleared(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers, message="temporary")
        resp = client.put(f"/api/alerts/{alert['id']}", json={"message": None}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["alert"]["message"] is None

    def test_title_cannot_be_nulled(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers)
        resp = client.put(f"/api/alerts/{alert['id']}", json={"title": None}, headers=headers)
        assert resp.status_code == 400

    def test_metadata_is_merged(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers)
        client.put(f"/api/alerts/{alert['id']}", json={"metadata": {"a": 1}}, headers=headers)
        resp = client.put(f"/api/alerts/{alert['id']}", json={"metadata": {"b": 2}}, headers=headers)
        assert resp.json()["alert"]["metadata"] == {"a": 1, "b": 2}

    def test_metadata_merge_overwrites_same_key(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers, metadata={"source": "manual", "reading": 140})
        resp = client.put(f"/api/alerts/{alert['id']}", json={"metadata": {"reading": 120}}, headers=headers)
        assert resp.json()["alert"]["metadata"] == {"source": "manual", "reading": 120}

    def test_update_invalid_status(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers)
        resp = client.put(f"/api/alerts/{alert['id']}", json={"status": "closed"}, headers=headers)
        assert resp.status_code == 400

    def test_update_missing_alert(self, client):
        _, headers = register_and_auth(client)
        resp = client.put("/api/alerts/does-not-exist", json={"title": "x"}, headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"message": "Alert not found"}


class TestAlertDelete:

    def test_delete_alert(self, client):
        _, headers = register_and_auth(client)
        alert = create_alert(client, headers)
        resp = client.delete(f"/api/alerts/{alert['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Alert deleted successfully"}
        assert client.get(f"/api/alerts/{alert['id']}", headers=headers).status_code == 404


class TestAlertSummary:

    def test_empty_summary(self, client):
        _, headers = register_and_auth(client)
        resp = client.get("/api/alerts/stats/summary", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"summary": {"total": 0, "byStatus": {}, "byPriority": {}}}

    def test_summary_counts_are_sparse(self, client):
        _, headers = register_and_auth(client)
        create_alert(client, headers, priority="high")
        create_alert(client, headers, priority="high")
        ack = create_alert(client, headers, priority="low")
        client.put(f"/api/alerts/{ack['id']}/acknowledge", headers=headers)

        summary = client.get("/api/alerts/stats/summary", headers=headers).json()["summary"]
        assert summary["total"] == 3
        assert summary["byStatus"] == {"active": 2, "acknowledged": 1}
        assert summary["byPriority"] == {"high": 2, "low": 1}
