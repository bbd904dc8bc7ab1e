"""
Tests for the registered agencies directory.
"""

import re

import pytest

from backoffice.app.domain.agencies.agency_directory import AgencyDirectory
from conftest import Reply

USERS = [
    {"_id": "u1", "name": "Bilal", "email": "bilal@alnoor.pk", "companyName": "Al Noor Travels",
     "agencyCode": "AN-01", "city": "Lahore", "roles": [{"name": "Agent"}], "agentStatus": "Active"},
    {"_id": "u2", "name": "Sana", "email": "sana@hajjways.pk", "companyName": "Hajj Ways",
     "agencyCode": "HW-07", "city": "Karachi", "roles": [{"name": "Agent"}], "agentStatus": "Pending"},
    {"_id": "u3", "name": "Usman", "email": "usman@zamzam.pk", "companyName": "Zamzam Tours",
     "agencyCode": "ZT-02", "city": "Karachi", "role": "Agency", "agentStatus": "Inactive"},
    {"_id": "u4", "name": "Admin", "email": "admin@backoffice.pk", "roles": [{"name": "Admin"}]},
]


@pytest.fixture
async def directory(backend, client, notifier, platform):
    backend.on("GET", "/auth/users", {"success": True, "data": USERS})
    agencies = AgencyDirectory(client, notifier, platform, max_active_agents=2)
    await agencies.load()
    return agencies


@pytest.mark.asyncio
async def test_only_agents_are_listed(directory):
    assert [u["_id"] for u in directory.visible] == ["u1", "u2", "u3"]
    assert directory.counts()["Active"] == 1
    assert directory.counts()["Pending"] == 1
    assert directory.cities == ["Karachi", "Lahore"]


@pytest.mark.asyncio
async def test_search_and_exact_filters(directory):
    directory.search_term = "karachi"
    assert [u["_id"] for u in directory.visible] == ["u2", "u3"]

    directory.status = "Inactive"
    assert [u["_id"] for u in directory.visible] == ["u3"]

    directory.search_term = ""
    directory.status = "All"
    directory.city = "Lahore"
    assert [u["_id"] for u in directory.visible] == ["u1"]


@pytest.mark.asyncio
async def test_status_change_merges_audit_fields(backend, directory, notifier):
    backend.on("PATCH", "/auth/users/u2/status", {
        "success": True,
        "data": {"agentStatus": "Active", "agentActivatedBy": "admin-1"},
    })

    assert await directory.set_status("u2", "Active") is True

    assert backend.calls("PATCH")[0].json() == {"agentStatus": "Active"}
    user = next(u for u in directory.users if u.id == "u2")
    assert user.agent_status == "Active"
    assert user.agent_activated_by == "admin-1"
    assert notifier.successes == ["Agent active successfully"]


@pytest.mark.asyncio
async def test_activation_refused_at_cap(backend, directory, notifier):
    directory.max_active_agents = 1

    assert await directory.set_status("u2", "Active") is False

    assert backend.calls("PATCH") == []
    assert notifier.errors == [
        "Maximum limit of 1 active agents reached. Please deactivate another agent first."
    ]


@pytest.mark.asyncio
async def test_status_change_failure(backend, directory, notifier):
    backend.on("PATCH", "/auth/users/u1/status", Reply(status=403, json={"message": "Not allowed"}))

    assert await directory.set_status("u1", "Suspended") is False

    assert notifier.errors == ["Not allowed"]
    assert next(u for u in directory.users if u.id == "u1").agent_status == "Active"


@pytest.mark.asyncio
async def test_send_credentials_without_mail_service(backend, directory, notifier):
    backend.on("POST", "/auth/users/u1/send-credentials", Reply(status=500, json={"message": "SMTP error"}))

    assert await directory.send_credentials("u1") is False
    assert notifier.errors == ["Email service is not configured. Contact system administrator."]


@pytest.mark.asyncio
async def test_pdf_export(backend, directory, notifier):
    backend.on("GET", "/export/users/pdf", Reply(content=b"%PDF-1.7", media_type="application/pdf"))
    directory.city = "Karachi"

    saved = await directory.export("pdf")

    assert re.fullmatch(r"agencies-\d+\.pdf", saved.name)
    assert backend.calls("GET", "/export/users/pdf")[0].params == {
        "searchTerm": "", "city": "Karachi", "status": "All",
    }
    assert notifier.successes == ["PDF downloaded successfully"]


@pytest.mark.asyncio
async def test_export_json_error(backend, directory, notifier):
    backend.on("GET", "/export/users/excel", {"success": False, "message": "Export limit exceeded"})

    assert await directory.export("excel") is None
    assert notifier.errors == ["Failed to export as EXCEL. Export limit exceeded"]


@pytest.mark.asyncio
async def test_malformed_user_is_skipped(backend, client, notifier, platform):
    backend.on("GET", "/auth/users", {"success": True, "data": [
        USERS[0],
        {"_id": "u9", "email": {"primary": "broken@example.pk"}, "roles": [{"name": "Agent"}]},
        "not-a-user",
        USERS[1],
    ]})
    agencies = AgencyDirectory(client, notifier, platform)

    users = await agencies.load()

    assert [u.id for u in users] == ["u1", "u2"]
    assert notifier.errors == []
