"""
Syndicate Kernel API — FastAPI endpoints.

Exposes the engine over REST for:
- Session lifecycle and weekly turns
- Player commands
- Per-session decisions (agents, territories, rivals)
- Chain reactions
- Stateless decisions (missions, dialogue, persona drift)
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from syndicate_kernel.decisions.dialogue import DialogueResponder
from syndicate_kernel.decisions.mission import MissionDesk
from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.dialogue import Question
from syndicate_kernel.models.mission import Mission, PlayerProfile
from syndicate_kernel.models.persona import Persona
from syndicate_kernel.session.providers import Clock, SystemClock
from syndicate_kernel.session.turn_loop import TurnLoop
from syndicate_kernel.world.store import SessionStore

logger = logging.getLogger(__name__)


# --- Request Models ---

class SessionCreateRequest(BaseModel):
    config: Optional[EngineConfig] = None


class CommandRequest(BaseModel):
    command: str


class ChainReactionRequest(BaseModel):
    trigger: str
    payload: Dict[str, Any] = {}


class MissionDecisionRequest(BaseModel):
    player: PlayerProfile
    mission: Optional[Mission] = None


class DialogueDecisionRequest(BaseModel):
    persona: Persona
    question: Question
    relationship: int = 0
    relevant_memories: int = 0
    secret_memories: int = 0


class ExperienceRequest(BaseModel):
    persona: Persona
    experience: str
    intensity: int


class ReactionBiasRequest(BaseModel):
    persona: Persona
    situation: str


# --- Application Factory ---

def create_app(
    store: Optional[SessionStore] = None,
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Syndicate Kernel API",
        description="Rules engine for a turn-based crime-family simulation",
        version="0.1.0",
    )

    clock = clock or SystemClock()
    sessions = store or SessionStore(config=config, clock=clock)
    missions = MissionDesk()
    dialogue = DialogueResponder()

    app.state.sessions = sessions
    app.state.missions = missions
    app.state.dialogue = dialogue

    def _session(session_id: str) -> TurnLoop:
        loop = sessions.get(session_id)
        if loop is None:
            raise HTTPException(404, "Session not found")
        return loop

    # === SESSIONS ===

    @app.post("/sessions")
    def create_session(req: Optional[SessionCreateRequest] = None):
        """Seed a new game."""
        session_id = sessions.create(config=req.config if req else None)
        logger.info("Created session %s", session_id)
        return {"id": session_id, "state": sessions.snapshot(session_id)}

    @app.get("/sessions/{session_id}")
    def get_session(session_id: str):
        loop = _session(session_id)
        return {
            "id": session_id,
            "status": loop.status,
            "state": loop.state.model_dump(mode="json"),
        }

    @app.post("/sessions/{session_id}/commands")
    def run_command(session_id: str, req: CommandRequest):
        """Run a player command such as 'bribe' or 'hit tattaglia'."""
        loop = _session(session_id)
        decision = loop.run_command(req.command)
        return {
            "decision": decision.model_dump(mode="json"),
            "state": loop.state.model_dump(mode="json"),
        }

    @app.post("/sessions/{session_id}/turns")
    def advance_turn(session_id: str):
        """Play one week."""
        loop = _session(session_id)
        report = loop.advance()
        return {
            "report": report.to_dict(),
            "state": loop.state.model_dump(mode="json"),
        }

    @app.get("/sessions/{session_id}/log")
    def get_log(session_id: str, limit: int = 50):
        loop = _session(session_id)
        entries = loop.state.event_log[-limit:] if limit > 0 else []
        return [e.model_dump(mode="json") for e in entries]

    # === SESSION DECISIONS ===

    @app.post("/sessions/{session_id}/agents/{agent_id}/decision")
    def decide_agent(session_id: str, agent_id: str):
        loop = _session(session_id)
        decision = loop.agents.decide_for(loop.state, agent_id, now=loop.clock.now())
        return decision.model_dump(mode="json")

    @app.get("/sessions/{session_id}/territories/{territory_id}/valuation")
    def value_territory(session_id: str, territory_id: str):
        loop = _session(session_id)
        valuation = loop.valuator.value_by_id(loop.state, territory_id, now=loop.clock.now())
        return valuation.model_dump(mode="json")

    @app.post("/sessions/{session_id}/rivals/{rival_id}/strategy")
    def decide_rival(session_id: str, rival_id: str):
        """Let one rival family act now."""
        loop = _session(session_id)
        decision = loop.rivals.decide(loop.state, rival_id, now=loop.clock.now())
        return decision.model_dump(mode="json")

    @app.post("/sessions/{session_id}/chain-reactions")
    def dispatch_chain(session_id: str, req: ChainReactionRequest):
        loop = _session(session_id)
        result = loop.chains.dispatch_named(loop.state, req.trigger, req.payload)
        return result.to_dict()

    # === STATELESS DECISIONS ===

    @app.post("/missions/decision")
    def decide_mission(req: MissionDecisionRequest):
        """Would this player take this mission?"""
        decision = missions.decide(req.player, req.mission, now=clock.now())
        chance = (
            missions.success_chance(req.player, req.mission)
            if req.mission is not None else None
        )
        return {"decision": decision.model_dump(mode="json"), "success_chance": chance}

    @app.post("/dialogue/decision")
    def decide_dialogue(req: DialogueDecisionRequest):
        ruling = dialogue.respond(
            req.persona,
            req.question,
            relationship=req.relationship,
            relevant_memories=req.relevant_memories,
            secret_memories=req.secret_memories,
            now=clock.now(),
        )
        return ruling.model_dump(mode="json")

    @app.post("/personas/experience")
    def apply_experience(req: ExperienceRequest):
        """Apply an experience to a persona and return the drifted persona."""
        persona = req.persona
        changed = persona.apply_experience(req.experience, req.intensity)
        return {"persona": persona.model_dump(mode="json"), "changed": changed}

    @app.post("/personas/reaction-bias")
    def reaction_bias(req: ReactionBiasRequest):
        return {
            "situation": req.situation,
            "bias": req.persona.reaction_bias(req.situation),
        }

    return app


# Default application instance
app = create_app()
