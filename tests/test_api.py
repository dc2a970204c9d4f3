"""Tests for the FastAPI API endpoints."""

import pytest
from fastapi.testclient import TestClient

from syndicate_kernel.api.app import create_app
from syndicate_kernel.session.providers import FixedClock
from syndicate_kernel.world.store import SessionStore


@pytest.fixture
def client():
    """Create a test client with a fresh session store."""
    clock = FixedClock()
    store = SessionStore(clock=clock)
    app = create_app(store=store, clock=clock)
    return TestClient(app)


@pytest.fixture
def session_id(client):
    response = client.post("/sessions", json={})
    assert response.status_code == 200
    return response.json()["id"]


class TestSessionEndpoints:
    def test_create_session(self, client):
        response = client.post("/sessions", json={})
        data = response.json()
        assert data["id"].startswith("game_")
        assert data["state"]["wealth"] == 100_000

    def test_create_session_with_config(self, client):
        response = client.post("/sessions", json={"config": {"bribe_cost": 1000}})
        session_id = response.json()["id"]
        result = client.post(f"/sessions/{session_id}/commands", json={"command": "bribe"})
        assert result.json()["state"]["wealth"] == 99_000

    def test_get_session(self, client, session_id):
        response = client.get(f"/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["status"] == "idle"

    def test_unknown_session(self, client):
        assert client.get("/sessions/game_missing").status_code == 404
        response = client.post("/sessions/game_missing/turns")
        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"

    def test_command(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/commands", json={"command": "hit tattaglia"}
        )
        data = response.json()
        assert data["decision"]["verdict"] == "hit"
        assert data["state"]["rivals"]["tattaglia"]["strength"] == 40

    def test_command_not_found_is_not_an_http_error(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/commands", json={"command": "hit corleone"}
        )
        assert response.status_code == 200
        assert response.json()["decision"]["verdict"] == "not_found"

    def test_advance_turn(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/turns")
        data = response.json()
        assert data["report"]["week"] == 1
        assert data["state"]["week"] == 2

    def test_log(self, client, session_id):
        client.post(f"/sessions/{session_id}/commands", json={"command": "bribe"})
        entries = client.get(f"/sessions/{session_id}/log", params={"limit": 1}).json()
        assert len(entries) == 1
        assert entries[0]["kind"] == "command"


class TestSessionDecisionEndpoints:
    def test_agent_decision(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/agents/capo/decision")
        assert response.status_code == 200
        assert response.json()["table"] == "agent_action"

    def test_unknown_agent(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/agents/consigliere/decision")
        assert response.status_code == 200
        assert response.json()["verdict"] == "not_found"

    def test_territory_valuation(self, client, session_id):
        response = client.get(f"/sessions/{session_id}/territories/docks/valuation")
        data = response.json()
        assert data["territory_id"] == "docks"
        assert data["base_revenue"] == 20_000

    def test_unknown_territory(self, client, session_id):
        response = client.get(f"/sessions/{session_id}/territories/harlem/valuation")
        assert response.json()["decision"]["verdict"] == "not_found"

    def test_rival_strategy(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/rivals/barzini/strategy")
        assert response.status_code == 200
        assert response.json()["table"] == "rival_strategy"

    def test_chain_reaction(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/chain-reactions",
            json={"trigger": "territory_lost", "payload": {"territory_id": "docks"}},
        )
        data = response.json()
        assert data["trigger"] == "territory_lost"
        state = client.get(f"/sessions/{session_id}").json()["state"]
        assert state["territories"]["docks"]["owner_id"] is None

    def test_unknown_chain_trigger(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/chain-reactions", json={"trigger": "earthquake"}
        )
        assert response.status_code == 200
        assert response.json()["decisions"] == []


class TestStatelessEndpoints:
    def test_mission_decision(self, client):
        response = client.post("/missions/decision", json={
            "player": {"money": 300},
            "mission": {"id": "m-1", "risk_level": 2},
        })
        data = response.json()
        assert data["decision"]["matched_rule_id"] == "ACCEPT_DESPERATE"
        assert data["success_chance"] == 60

    def test_mission_decision_without_mission(self, client):
        response = client.post("/missions/decision", json={"player": {}})
        data = response.json()
        assert data["decision"]["verdict"] == "not_found"
        assert data["success_chance"] is None

    def test_dialogue_decision(self, client):
        response = client.post("/dialogue/decision", json={
            "persona": {},
            "question": {"asker_id": "player", "type": "can_we_trust"},
            "relationship": -50,
        })
        data = response.json()
        assert data["decision"]["verdict"] == "refuse"
        assert data["response"]["will_answer"] is False

    def test_persona_experience(self, client):
        response = client.post("/personas/experience", json={
            "persona": {"trust": 50, "caution": 50},
            "experience": "betrayed",
            "intensity": 20,
        })
        data = response.json()
        assert data["persona"]["trust"] == 30
        assert data["persona"]["caution"] == 60
        assert data["changed"] == ["trust", "caution"]

    def test_reaction_bias(self, client):
        response = client.post("/personas/reaction-bias", json={
            "persona": {"ambition": 80, "caution": 30},
            "situation": "opportunity",
        })
        assert response.json()["bias"] == pytest.approx(0.5)
