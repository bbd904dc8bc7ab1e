"""
Agency account schemas.
"""

from enum import Enum
from typing import Any, List

from pydantic import Field

from backoffice.app.schemas.common import Document


class AgentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    PENDING = "Pending"
    SUSPENDED = "Suspended"


class AgencyUser(Document):
    name: str = ""
    email: str = ""
    phone: str = ""
    company_name: str = ""
    agency_code: str = ""
    city: str = ""
    role: Any = ""
    roles: List[Any] = Field(default_factory=list)
    agent_status: str = AgentStatus.PENDING.value
    agent_activated_by: Any = None
    agent_deactivated_by: Any = None
    agent_deactivated_at: Any = None

    def role_names(self) -> List[str]:
        names = []
        for role in [self.role, *self.roles]:
            if isinstance(role, dict):
                role = role.get("name")
            if role:
                names.append(str(role))
        return names

    @property
    def is_agent(self) -> bool:
        return any(name.lower() in ("agent", "agency") for name in self.role_names())
