"""The uniform output of every rule table."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

NOT_FOUND = "not_found"
CANNOT_AFFORD = "cannot_afford"


class Decision(BaseModel):
    """A table's ruling for one evaluation."""

    table: str
    verdict: str
    matched_rule_id: Optional[str] = None        # None when the default applied
    matched_rule_name: Optional[str] = None
    confidence: int = Field(ge=0, le=100, default=50)
    reason: str = ""                             # Human-readable
    trace: List[str] = []
    decided_at: Optional[datetime] = None

    @property
    def defaulted(self) -> bool:
        return self.matched_rule_id is None
