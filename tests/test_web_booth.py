"""API tests driving the booth through the Flask test client."""

import time

import pytest

LEAD = {
    "fullName": "Ada Lovelace",
    "workEmail": "ada@engines.io",
    "phone": "+441234567890",
    "organizationName": "Analytical Engines",
}


def open_session(client):
    resp = client.post("/api/session")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["step"] == "landing"
    assert body["csrf_token"]
    return body["token"]


def play(client, lead=LEAD):
    token = open_session(client)
    assert client.post(f"/api/session/{token}/form").get_json()["step"] == "form"
    resp = client.post(f"/api/session/{token}/lead", json=lead)
    return token, resp


def test_rewards_endpoint(client):
    """Test the rewards endpoint returns the wheel table."""
    body = client.get("/api/rewards").get_json()
    assert body["sector_angle"] == 72
    assert [r["name"] for r in body["rewards"]][0] == "Orgwide Survey"


def test_full_visit(client):
    """Test a visit from landing to recorded success."""
    token, resp = play(client)
    assert resp.status_code == 200
    assert resp.get_json()["is_new_participant"] is True

    spin = client.post(f"/api/session/{token}/spin").get_json()["spin"]
    assert spin["duration_ms"] == 50
    assert 5 * 360 <= spin["rotation"] < 8 * 360

    done = client.post(f"/api/session/{token}/complete").get_json()
    assert done["step"] == "success"
    assert done["result"]["reward"] == spin["reward"]
    assert done["result"]["recorded"] is True

    assert client.get(f"/api/session/{token}").get_json()["step"] == "success"


def test_second_visit_is_refused(client):
    """Test a second visit by the same contact is refused."""
    token, _ = play(client)
    client.post(f"/api/session/{token}/spin")
    won = client.post(f"/api/session/{token}/complete").get_json()["result"]["reward"]

    _, resp = play(client, {**LEAD, "workEmail": "ADA@engines.io"})
    body = resp.get_json()
    assert resp.status_code == 409
    assert body["step"] == "already_played"
    assert body["prior_reward"] == won
    assert won in body["message"]


def test_invalid_lead_is_rejected(client):
    """Test an invalid lead returns field errors and keeps the form."""
    token, resp = play(client, {**LEAD, "workEmail": "ada@gmail.com"})
    assert resp.status_code == 422
    assert "workEmail" in resp.get_json()["fields"]
    assert client.get(f"/api/session/{token}").get_json()["step"] == "form"


def test_unknown_session(client):
    """Test an unknown token returns 404."""
    resp = client.post("/api/session/deadbeef/form")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "session_not_found"


@pytest.mark.parametrize("step", ["lead", "spin", "complete"])
def test_steps_out_of_order(client, step):
    """Test steps called out of order return 409."""
    token = open_session(client)
    resp = client.post(f"/api/session/{token}/{step}", json=LEAD)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "invalid_step"


def test_spin_twice_is_refused(client):
    """Test a second spin request is refused."""
    token, _ = play(client)
    assert client.post(f"/api/session/{token}/spin").status_code == 200
    assert client.post(f"/api/session/{token}/spin").status_code == 409


def test_health_and_metrics(client):
    """Test health and metrics endpoints after a visit."""
    token, _ = play(client)
    client.post(f"/api/session/{token}/spin")
    client.post(f"/api/session/{token}/complete")

    health = client.get("/health").get_json()
    assert health["status"] == "ok"
    assert health["db_pool_size"] == 2
    assert sum(health["outcomes"].values()) == 1

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert b"booth_spins_total" in metrics.data


def test_abandoned_spin_blocks_a_new_visit(client):
    """Test a spin whose result is never requested still counts as the visitor's play."""
    token, _ = play(client)
    spin = client.post(f"/api/session/{token}/spin").get_json()["spin"]

    deadline = time.monotonic() + 5
    while client.get(f"/api/session/{token}").get_json()["step"] != "success":
        assert time.monotonic() < deadline, "spin outcome was never recorded"
        time.sleep(0.02)

    _, resp = play(client)
    body = resp.get_json()
    assert resp.status_code == 409
    assert body["step"] == "already_played"
    assert body["prior_reward"] == spin["reward"]
