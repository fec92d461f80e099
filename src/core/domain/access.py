"""Estado de acceso del usuario (plan + cuota diaria).

Snapshot inmutable: las transiciones son funciones puras en
`core.services.access_control` que devuelven un snapshot nuevo.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


DEFAULT_DAILY_QUOTA = 10


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"


class UserAccessState(BaseModel):
    """Plan y consumo del día.

    `quota_used` puede superar `quota_limit`: no hay techo, simplemente se
    sigue denegando. `charged_today` guarda los ids de contenido ya cobrados
    hoy.
    """

    model_config = ConfigDict(frozen=True)

    plan: Plan = Plan.FREE
    quota_used: int = Field(default=0, ge=0)
    quota_limit: int = Field(default=DEFAULT_DAILY_QUOTA, ge=0)
    last_reset_date: date = Field(default_factory=date.today)
    charged_today: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_pro(self) -> bool:
        return self.plan is Plan.PRO
