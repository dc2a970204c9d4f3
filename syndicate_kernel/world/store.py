"""
Session Store — seeded games held in memory, one turn loop per session.

Sessions share no data. Persistence is out of scope: a restart loses
every session.
"""

from typing import Dict, List, Optional
from uuid import uuid4

from syndicate_kernel.models.config import EngineConfig
from syndicate_kernel.models.persona import Persona, PersonaKind
from syndicate_kernel.models.state import GameState, RivalFaction, Territory, TerritoryType
from syndicate_kernel.session.providers import Clock, RandomSource, SystemClock
from syndicate_kernel.session.turn_loop import TurnLoop


def new_game() -> GameState:
    """A fresh family: three territories, two rival families, three agents."""
    state = GameState()

    for territory in (
        Territory(id="little-italy", name="Little Italy", weekly_revenue=15_000,
                  heat_generation=5, type=TerritoryType.PROTECTION),
        Territory(id="docks", name="Brooklyn Docks", weekly_revenue=20_000,
                  heat_generation=10, type=TerritoryType.SMUGGLING),
        Territory(id="bronx", name="Bronx Gambling", weekly_revenue=12_000,
                  heat_generation=8, type=TerritoryType.GAMBLING),
    ):
        state.territories[territory.id] = territory

    for rival in (
        RivalFaction(id="tattaglia", name="Tattaglia Family", strength=60, hostility=20),
        RivalFaction(id="barzini", name="Barzini Family", strength=70, hostility=30),
    ):
        state.rivals[rival.id] = rival

    for agent in (
        Persona(id="underboss", name="Underboss", role="underboss", kind=PersonaKind.AGENT,
                aggression=60, greed=70, loyalty=90, ambition=40),
        Persona(id="capo", name="Capo", role="capo", kind=PersonaKind.AGENT,
                aggression=80, greed=60, loyalty=70, ambition=70),
        Persona(id="soldier", name="Soldier", role="soldier", kind=PersonaKind.AGENT,
                aggression=90, greed=40, loyalty=95, ambition=30),
    ):
        state.agents[agent.id] = agent

    return state


class SessionStore:
    """In-memory sessions keyed by id."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self._sessions: Dict[str, TurnLoop] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> str:
        """Seed a new game and return its session id."""
        config = config or self.config
        session_id = f"game_{uuid4().hex[:12]}"
        state = new_game()
        state.log("game_start", "The family begins operations in New York", self.clock.now())
        self._sessions[session_id] = TurnLoop(state, config=config, clock=self.clock, rng=rng)
        return session_id

    def get(self, session_id: str) -> Optional[TurnLoop]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def ids(self) -> List[str]:
        return list(self._sessions)

    def snapshot(self, session_id: str) -> Optional[dict]:
        """A serializable copy of a session's state."""
        loop = self._sessions.get(session_id)
        if loop is None:
            return None
        return loop.state.model_dump(mode="json")
