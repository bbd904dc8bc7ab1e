"""
Registered agencies.

Lists the agent accounts, filters them locally by search term, city and
status, changes an agent's status (bounded by the active-agent cap) and
exports the filtered directory.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, describe_error
from backoffice.app.core.http_client import ApiClient
from backoffice.app.core.reliability import RequestSequence
from backoffice.app.domain.resources.drafts import filter_records
from backoffice.app.schemas.agency import AgencyUser, AgentStatus
from backoffice.app.schemas.common import MutationEnvelope, collection_from
from backoffice.app.services.export_service import ExportService
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform

logger = logging.getLogger("backoffice.screens.agencies")

ALL = "All"
SEARCH_FIELDS = ("name", "email", "companyName", "agencyCode", "city")
EXPORT_MESSAGES = {
    "pdf": "PDF downloaded successfully",
    "excel": "Excel downloaded successfully",
}


def parse_users(raw_users: List[Any]) -> List[AgencyUser]:
    users = []
    for raw in raw_users:
        try:
            users.append(AgencyUser.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed user record: %s", exc)
    return users


class AgencyDirectory:

    def __init__(
        self,
        client: ApiClient,
        notifier: Notifier,
        platform: LocalPlatform,
        max_active_agents: int = 1000,
    ):
        self.client = client
        self.notifier = notifier
        self.platform = platform
        self.max_active_agents = max_active_agents
        self.users: List[AgencyUser] = []
        self.search_term = ""
        self.city = ALL
        self.status = ALL
        self.loading = False
        self.updating: Optional[str] = None
        self.exports = ExportService(client, platform, notifier)
        self._sequence = RequestSequence()

    async def load(self) -> List[AgencyUser]:
        token = self._sequence.issue()
        self.loading = True
        try:
            response = await self.client.get("/auth/users")
            users = parse_users(collection_from(response.data, "data"))
        except (AppException, ValidationError) as exc:
            if self._sequence.is_current(token):
                self.loading = False
                self.notifier.error(describe_error(exc, "Failed to fetch users"))
            return self.users

        if self._sequence.is_current(token):
            self.users = users
            self.loading = False
        return self.users

    @property
    def agents(self) -> List[AgencyUser]:
        return [user for user in self.users if user.is_agent]

    @property
    def cities(self) -> List[str]:
        return sorted({user.city for user in self.users if user.city})

    @property
    def visible(self) -> List[Dict[str, Any]]:
        exact = {
            "city": "" if self.city == ALL else self.city,
            "agentStatus": "" if self.status == ALL else self.status,
        }
        records = [user.to_record() for user in self.agents]
        return filter_records(records, self.search_term, SEARCH_FIELDS, exact)

    def counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in AgentStatus}
        for user in self.agents:
            counts[user.agent_status] = counts.get(user.agent_status, 0) + 1
        return counts

    def _active_excluding(self, user_id: str) -> int:
        return sum(
            1 for user in self.agents
            if user.agent_status == AgentStatus.ACTIVE.value and user.id != user_id
        )

    async def set_status(self, user_id: str, status: str) -> bool:
        status = AgentStatus(status).value
        if status == AgentStatus.ACTIVE.value and self._active_excluding(user_id) >= self.max_active_agents:
            self.notifier.error(
                f"Maximum limit of {self.max_active_agents} active agents reached. "
                "Please deactivate another agent first."
            )
            return False

        self.updating = user_id
        try:
            response = await self.client.patch(f"/auth/users/{user_id}/status", json={"agentStatus": status})
            envelope = MutationEnvelope.model_validate(response.data if isinstance(response.data, dict) else {})
        except AppException as exc:
            logger.warning("Updating status of %s failed: %s", user_id, exc)
            self.notifier.error(describe_error(exc, "Failed to update user status"))
            return False
        finally:
            self.updating = None

        if not envelope.success:
            self.notifier.error(envelope.message or "Failed to update user status")
            return False

        audit = envelope.data if isinstance(envelope.data, dict) else {}
        update = {
            "agent_status": status,
            "agent_activated_by": audit.get("agentActivatedBy"),
            "agent_deactivated_by": audit.get("agentDeactivatedBy"),
            "agent_deactivated_at": audit.get("agentDeactivatedAt"),
        }
        self.users = [user.model_copy(update=update) if user.id == user_id else user for user in self.users]
        self.notifier.success(f"Agent {status.lower()} successfully")
        return True

    async def send_credentials(self, user_id: str) -> bool:
        try:
            response = await self.client.post(f"/auth/users/{user_id}/send-credentials", json={})
        except AppException as exc:
            if exc.status_code == 500:
                self.notifier.error("Email service is not configured. Contact system administrator.")
            else:
                self.notifier.error(describe_error(exc, "Failed to send credentials"))
            return False

        envelope = MutationEnvelope.model_validate(response.data if isinstance(response.data, dict) else {})
        self.notifier.success(envelope.message or "Credentials sent successfully!")
        return True

    async def export(self, kind: str):
        if kind not in EXPORT_MESSAGES:
            raise ValueError(f"Unsupported export kind '{kind}'")
        params = {"searchTerm": self.search_term, "city": self.city, "status": self.status}
        return await self.exports.download(
            f"/export/users/{kind}",
            params,
            kind=kind,
            document="agencies",
            success_message=EXPORT_MESSAGES[kind],
        )
