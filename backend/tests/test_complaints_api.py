"""Tests for complaint API endpoints."""

import pytest

from tests.conftest import (
    ADMIN_ACTOR,
    INACTIVE_TECH_ID,
    OTHER_USER_ACTOR,
    TECH_ACTOR,
    TECH_ID,
    USER_ACTOR,
    actor_headers,
)

COMPLAINT_PAYLOAD = {
    "category_id": 3,
    "subcategory": "Washing Machine",
    "complaint_type": "Over Warranty",
    "state": "Johor",
    "brand_name": "Acme",
    "model_no": "WM-10",
    "details": "Drum does not spin after the rinse cycle.",
}


@pytest.fixture
def complaint(client):
    response = client.post(
        "/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(USER_ACTOR)
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def forwarded(client, complaint):
    response = client.post(
        f"/v1/complaints/{complaint['id']}/forward",
        json={"technician_id": str(TECH_ID)},
        headers=actor_headers(ADMIN_ACTOR),
    )
    assert response.status_code == 200
    return response.json()


class TestCreateComplaint:
    def test_create(self, client):
        response = client.post(
            "/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(USER_ACTOR)
        )
        assert response.status_code == 201
        data = response.json()
        assert data["report_number"] == "A00001"
        assert data["status"] == "pending"
        assert data["assigned_to"] is None

    def test_requires_actor(self, client):
        response = client.post("/v1/complaints/", json=COMPLAINT_PAYLOAD)
        assert response.status_code == 401

    def test_admin_cannot_create(self, client):
        response = client.post(
            "/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(ADMIN_ACTOR)
        )
        assert response.status_code == 403

    @pytest.mark.parametrize(
        "override",
        [
            {"details": "short"},
            {"details": "x" * 2001},
            {"complaint_type": "Extended Warranty"},
            {"category_id": 0},
            {"subcategory": ""},
        ],
    )
    def test_validation(self, client, override):
        response = client.post(
            "/v1/complaints/",
            json={**COMPLAINT_PAYLOAD, **override},
            headers=actor_headers(USER_ACTOR),
        )
        assert response.status_code == 422


class TestComplaintLifecycle:
    def test_forward(self, client, forwarded):
        assert forwarded["status"] == "in_process"
        assert forwarded["assigned_to"] == str(TECH_ID)

    def test_forward_to_inactive_technician(self, client, complaint):
        response = client.post(
            f"/v1/complaints/{complaint['id']}/forward",
            json={"technician_id": str(INACTIVE_TECH_ID)},
            headers=actor_headers(ADMIN_ACTOR),
        )
        assert response.status_code == 400

    def test_forward_missing_complaint(self, client):
        response = client.post(
            "/v1/complaints/999/forward",
            json={"technician_id": str(TECH_ID)},
            headers=actor_headers(ADMIN_ACTOR),
        )
        assert response.status_code == 404

    def test_add_remark_with_status(self, client, forwarded):
        response = client.post(
            f"/v1/complaints/{forwarded['id']}/remarks",
            json={"checking": "Motor replaced", "status": "closed"},
            headers=actor_headers(TECH_ACTOR),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status_changed"] is True
        assert data["new_status"] == "closed"

    def test_remark_cannot_cancel(self, client, forwarded):
        response = client.post(
            f"/v1/complaints/{forwarded['id']}/remarks",
            json={"remark": "Customer gave up", "status": "cancelled"},
            headers=actor_headers(TECH_ACTOR),
        )
        assert response.status_code == 422

    def test_fourth_remark_is_rejected(self, client, forwarded):
        url = f"/v1/complaints/{forwarded['id']}/remarks"
        for n in range(3):
            response = client.post(
                url, json={"remark": f"note {n}"}, headers=actor_headers(TECH_ACTOR)
            )
            assert response.status_code == 201

        response = client.post(url, json={"remark": "note 4"}, headers=actor_headers(ADMIN_ACTOR))
        assert response.status_code == 400
        assert "Maximum 3 remarks" in response.json()["detail"]

    def test_update_and_delete_remark(self, client, forwarded):
        created = client.post(
            f"/v1/complaints/{forwarded['id']}/remarks",
            json={"remark": "first draft"},
            headers=actor_headers(TECH_ACTOR),
        ).json()

        updated = client.put(
            f"/v1/complaints/remarks/{created['remark_id']}",
            json={"remark": "final"},
            headers=actor_headers(TECH_ACTOR),
        )
        assert updated.status_code == 200
        assert updated.json()["status_changed"] is False

        deleted = client.delete(
            f"/v1/complaints/remarks/{created['remark_id']}", headers=actor_headers(TECH_ACTOR)
        )
        assert deleted.status_code == 204

        missing = client.delete(
            f"/v1/complaints/remarks/{created['remark_id']}", headers=actor_headers(TECH_ACTOR)
        )
        assert missing.status_code == 404

    def test_update_status(self, client, forwarded):
        response = client.put(
            f"/v1/complaints/{forwarded['id']}/status",
            json={"status": "closed"},
            headers=actor_headers(TECH_ACTOR),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "closed"

        reopened = client.put(
            f"/v1/complaints/{forwarded['id']}/status",
            json={"status": "in_process"},
            headers=actor_headers(ADMIN_ACTOR),
        )
        assert reopened.status_code == 409

    def test_cancel(self, client, complaint):
        response = client.post(
            f"/v1/complaints/{complaint['id']}/cancel", headers=actor_headers(USER_ACTOR)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_cancel_by_other_user(self, client, complaint):
        response = client.post(
            f"/v1/complaints/{complaint['id']}/cancel", headers=actor_headers(OTHER_USER_ACTOR)
        )
        assert response.status_code == 403

    def test_cancel_after_forward(self, client, forwarded):
        response = client.post(
            f"/v1/complaints/{forwarded['id']}/cancel", headers=actor_headers(USER_ACTOR)
        )
        assert response.status_code == 409


class TestComplaintReads:
    def test_detail(self, client, forwarded):
        client.post(
            f"/v1/complaints/{forwarded['id']}/remarks",
            json={"remark": "Admin note"},
            headers=actor_headers(ADMIN_ACTOR),
        )
        response = client.get(
            f"/v1/complaints/{forwarded['id']}", headers=actor_headers(USER_ACTOR)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["complaint"]["report_number"] == "A00001"
        assert [r["remark"] for r in data["admin_remarks"]] == ["Admin note"]
        assert data["technician_remarks"] == []
        assert data["forward_history"][0]["forward_to"] == str(TECH_ID)

    def test_detail_hidden_from_other_user(self, client, complaint):
        response = client.get(
            f"/v1/complaints/{complaint['id']}", headers=actor_headers(OTHER_USER_ACTOR)
        )
        assert response.status_code == 403

    def test_list_with_total_count(self, client, complaint):
        client.post("/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(USER_ACTOR))

        response = client.get("/v1/complaints/?limit=1", headers=actor_headers(USER_ACTOR))
        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.headers["X-Total-Count"] == "2"

    def test_list_not_forwarded(self, client, forwarded):
        client.post("/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(USER_ACTOR))
        response = client.get(
            "/v1/complaints/?status=not_forwarded", headers=actor_headers(ADMIN_ACTOR)
        )
        assert [c["report_number"] for c in response.json()] == ["A00002"]

    def test_list_rejects_unknown_status(self, client):
        response = client.get("/v1/complaints/?status=archived", headers=actor_headers(ADMIN_ACTOR))
        assert response.status_code == 422

    def test_stats(self, client, forwarded):
        client.post("/v1/complaints/", json=COMPLAINT_PAYLOAD, headers=actor_headers(USER_ACTOR))
        response = client.get("/v1/complaints/stats", headers=actor_headers(ADMIN_ACTOR))
        assert response.status_code == 200
        assert response.json() == {
            "total": 2,
            "pending": 1,
            "in_process": 1,
            "closed": 0,
            "cancelled": 0,
            "not_forwarded": 1,
        }
