"""
Tests for the create/edit resource form.
"""

import asyncio

import pytest

from backoffice.app.core.http_client import ApiResponse
from backoffice.app.domain.resources.form import ResourceForm
from backoffice.app.domain.resources.registry import (
    FLIGHT_PACKAGES,
    FLIGHTS,
    HOTELS_RESOURCE,
    PACKAGES,
    PAYMENTS,
    TOURS,
)
from conftest import Reply

FLIGHT_DOC = {
    "_id": "f1",
    "flightNumber": "SV-740",
    "airline": {"_id": "a1", "airlineName": "Saudia"},
    "sector": {"_id": "s1", "sectorTitle": "KHI-JED"},
    "departureCity": "Karachi",
    "departureDate": "2024-03-01T00:00:00.000Z",
    "departureTime": "10:00",
    "arrivalCity": "Jeddah",
    "arrivalDate": "2024-03-01T00:00:00.000Z",
    "arrivalTime": "13:00",
    "createdAt": "2024-02-01T08:00:00.000Z",
}


def filled_flight_form(client, notifier, **kwargs):
    form = ResourceForm(FLIGHTS, client, notifier, **kwargs)
    for name, value in {
        "flightNumber": "EK-600", "airline": "a1", "sector": "s1",
        "departureCity": "Karachi", "departureDate": "2024-03-01", "departureTime": "10:00",
        "arrivalCity": "Jeddah", "arrivalDate": "2024-03-01", "arrivalTime": "13:00",
    }.items():
        form.set_field(name, value)
    return form


@pytest.mark.asyncio
async def test_new_draft_has_no_missing_fields(client, notifier):
    form = ResourceForm(HOTELS_RESOURCE, client, notifier)

    assert form.draft["name"] == ""
    assert form.draft["starRating"] == 3
    assert form.draft["location"]["city"] == "Makkah"
    assert form.draft["roomTypes"] == []
    assert "_id" not in form.draft
    assert form.title == "Add New Hotel"


@pytest.mark.asyncio
async def test_validation_blocks_submission(backend, client, notifier):
    form = ResourceForm(FLIGHTS, client, notifier)
    form.set_field("flightNumber", "SV-740")

    assert await form.submit() is False

    assert backend.requests == []
    assert notifier.errors == ["Please fill all required fields"]


@pytest.mark.asyncio
async def test_create_posts_full_draft(backend, client, notifier):
    backend.on("POST", "/flights", {"success": True, "data": {"_id": "f9"}})
    form = filled_flight_form(client, notifier)

    assert await form.submit() is True

    (call,) = backend.calls("POST", "/flights")
    assert call.json() == form.draft
    assert call.headers["authorization"] == "Bearer test-token"
    assert notifier.successes == ["Flight created successfully"]


@pytest.mark.asyncio
async def test_edit_loads_normalized_draft_and_puts(backend, client, notifier):
    backend.on("GET", "/flights/f1", {"success": True, "flight": FLIGHT_DOC})
    backend.on("PUT", "/flights/f1", {"success": True})
    saved = []
    form = ResourceForm(FLIGHTS, client, notifier, record_id="f1", on_success=lambda: saved.append(True))

    draft = await form.load()

    assert draft["airline"] == "a1"
    assert draft["sector"] == "s1"
    assert draft["departureDate"] == "2024-03-01"
    assert "createdAt" not in draft
    assert form.title == "Edit Flight"

    form.set_field("departureTime", "11:30")
    assert await form.submit() is True

    (call,) = backend.calls("PUT", "/flights/f1")
    assert call.json()["departureTime"] == "11:30"
    assert call.json()["flightNumber"] == "SV-740"
    assert backend.calls("POST") == []
    assert saved == [True]
    assert notifier.successes == ["Flight updated successfully"]


@pytest.mark.asyncio
async def test_load_failure_keeps_draft(backend, client, notifier):
    backend.on("GET", "/tours/t9", Reply(status=404, json={}))
    form = ResourceForm(TOURS, client, notifier, record_id="t9")
    before = form.draft

    await form.load()

    assert form.draft == before
    assert notifier.errors == ["Failed to fetch tour details"]


@pytest.mark.asyncio
async def test_backend_error_preserves_draft(backend, client, notifier):
    backend.on("POST", "/flights", Reply(status=400, json={"message": "Flight number already exists"}))
    form = filled_flight_form(client, notifier)
    before = dict(form.draft)

    assert await form.submit() is False

    assert form.draft == before
    assert notifier.errors == ["Flight number already exists"]
    assert form.loading is False


@pytest.mark.asyncio
async def test_unsuccessful_envelope_counts_as_failure(backend, client, notifier):
    backend.on("POST", "/flights", {"success": False})
    form = filled_flight_form(client, notifier)

    assert await form.submit() is False

    assert notifier.errors == ["Failed to save flight"]
    assert notifier.successes == []


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_refused(client, notifier, mocker):
    release = asyncio.Event()

    async def slow_post(*args, **kwargs):
        await release.wait()
        return ApiResponse({"success": True})

    post = mocker.patch.object(client, "post", side_effect=slow_post)
    form = filled_flight_form(client, notifier)

    first = asyncio.create_task(form.submit())
    await asyncio.sleep(0)
    assert form.loading is True
    assert await form.submit() is False
    release.set()

    assert await first is True
    assert post.call_count == 1


@pytest.mark.asyncio
async def test_hotel_submits_multipart_with_images(backend, client, notifier, platform, tmp_path):
    backend.on("POST", "/hotels", {"success": True})
    image = tmp_path / "front.jpg"
    image.write_bytes(b"\xff\xd8\xff fake jpeg")
    form = ResourceForm(HOTELS_RESOURCE, client, notifier, platform=platform)
    form.set_field("name", "Zamzam Tower")
    form.append_item("roomTypes", type="Quad", pricePerNight=450)

    attachment = form.attach(image)
    assert attachment.preview.startswith("data:image/jpeg;base64,")
    assert await form.submit() is True

    (call,) = backend.calls("POST", "/hotels")
    assert call.content_type.startswith("multipart/form-data")
    assert b'name="data"' in call.body
    assert b'"name": "Zamzam Tower"' in call.body
    assert b'name="images"; filename="front.jpg"' in call.body


@pytest.mark.asyncio
async def test_hotel_requires_room_type(backend, client, notifier):
    form = ResourceForm(HOTELS_RESOURCE, client, notifier)
    form.set_field("name", "Zamzam Tower")

    assert await form.submit() is False

    assert backend.requests == []
    assert notifier.errors == ["Please fill all required fields and add at least one room type"]


@pytest.mark.asyncio
async def test_payment_voucher_bank_hook_and_form_fields(backend, client, notifier, platform):
    backend.on("GET", "/bank", {"success": True, "data": [
        {"_id": "b1", "bankName": "Meezan Bank", "accountNo": "0101-22"},
        {"_id": "b2", "bankName": "HBL", "accountNo": "7788"},
    ]})
    backend.on("POST", "/payment/add", {"success": True})
    routes = []
    form = ResourceForm(PAYMENTS, client, notifier, platform=platform, navigate=routes.append)
    await form.load()

    form.set_field("bankName", "b2")
    assert form.draft["accountNo"] == "7788"
    form.set_field("date", "2024-03-01")
    form.set_field("description", "Umrah deposit")
    form.set_field("amount", 1500)

    assert await form.submit() is True

    (call,) = backend.calls("POST", "/payment/add")
    assert call.form()["bankAccount"] == "b2"
    assert call.form()["amount"] == "1500"
    assert routes == ["/view-payment-voucher"]
    assert notifier.successes == ["Payment voucher created successfully"]


@pytest.mark.asyncio
async def test_payment_voucher_requires_amount(backend, client, notifier):
    form = ResourceForm(PAYMENTS, client, notifier)
    form.set_field("bankName", "b1")
    form.set_field("date", "2024-03-01")
    form.set_field("description", "Umrah deposit")

    assert await form.submit() is False
    assert backend.requests == []


@pytest.mark.asyncio
async def test_itinerary_days_are_renumbered(client, notifier):
    form = ResourceForm(TOURS, client, notifier)
    for title in ("Arrival", "Ziyarat", "Departure"):
        form.append_item("itinerary", title=title)

    assert [d["dayNumber"] for d in form.draft["itinerary"]] == [1, 2, 3]

    form.remove_item("itinerary", 0)

    assert [(d["dayNumber"], d["title"]) for d in form.draft["itinerary"]] == [(1, "Ziyarat"), (2, "Departure")]


@pytest.mark.asyncio
async def test_unnumbered_lists_keep_elements(client, notifier):
    form = ResourceForm(PACKAGES, client, notifier)
    for tier in ("Quad", "Triple", "Double"):
        form.append_item("pricing", tierType=tier)

    form.update_item("pricing", 1, "price", 950)
    form.remove_item("pricing", 0)

    assert form.draft["pricing"] == [
        {"tierType": "Triple", "price": 950},
        {"tierType": "Double", "price": 0},
    ]


@pytest.mark.asyncio
async def test_tag_lists(client, notifier):
    form = ResourceForm(PACKAGES, client, notifier)
    form.add_unique("inclusions", "Visa")
    form.add_unique("inclusions", "Visa")
    form.add_unique("inclusions", "Ziyarat")
    form.remove_value("inclusions", "Visa")

    assert form.draft["inclusions"] == ["Ziyarat"]


@pytest.mark.asyncio
async def test_cancel_discards_draft(client, notifier):
    form = ResourceForm(PACKAGES, client, notifier)
    form.set_field("name", "Ramadan Umrah")

    form.cancel()

    assert form.draft["name"] == ""
    assert form.closed is True


@pytest.mark.asyncio
async def test_new_tour_meal_plan_is_text(client, notifier):
    form = ResourceForm(TOURS, client, notifier)

    assert form.draft["features"]["meals"] == "None"


@pytest.mark.asyncio
async def test_edit_tour_keeps_meal_plan(backend, client, notifier):
    backend.on("GET", "/tours/t1", {"success": True, "data": {
        "_id": "t1", "name": "Turkey Heritage", "features": {"meals": "Half Board", "guide": True},
    }})
    form = ResourceForm(TOURS, client, notifier, record_id="t1")

    draft = await form.load()

    assert draft["features"]["meals"] == "Half Board"
    assert draft["features"]["guide"] is True
    assert notifier.errors == []


@pytest.mark.asyncio
async def test_malformed_envelope_counts_as_failure(backend, client, notifier):
    backend.on("POST", "/flights", {"success": "maybe"})
    form = filled_flight_form(client, notifier)

    assert await form.submit() is False

    assert notifier.errors == ["Failed to save flight"]
    assert form.loading is False


@pytest.mark.asyncio
async def test_deleted_attachment_keeps_draft(backend, client, notifier, platform, tmp_path):
    image = tmp_path / "lobby.png"
    image.write_bytes(b"\x89PNG fake")
    form = ResourceForm(HOTELS_RESOURCE, client, notifier, platform=platform)
    form.set_field("name", "Hilton Suites")
    form.append_item("roomTypes", type="Double", pricePerNight=700)
    form.attach(image)
    before = dict(form.draft)
    image.unlink()

    assert await form.submit() is False

    assert backend.requests == []
    assert form.draft == before
    assert notifier.errors[0].startswith("Failed to save hotel.")
    assert form.loading is False


@pytest.mark.asyncio
async def test_unreadable_file_is_not_attached(client, notifier, platform, tmp_path):
    form = ResourceForm(HOTELS_RESOURCE, client, notifier, platform=platform)

    assert form.attach(tmp_path / "missing.jpg") is None

    assert form.attachments == []
    assert notifier.errors == ["Failed to read file missing.jpg"]


@pytest.mark.asyncio
async def test_flight_package_link_edit(backend, client, notifier):
    backend.on("GET", "/flights", {"flights": [FLIGHT_DOC]})
    backend.on("GET", "/packages", {"packages": [{"_id": "p1", "name": "Ramadan Umrah"}]})
    backend.on("GET", "/flight-packages/fp1", {"flightPackage": {
        "_id": "fp1",
        "flight": {"_id": "f1", "flightNumber": "SV-740"},
        "package": {"_id": "p1", "name": "Ramadan Umrah"},
        "remainingSlots": 12,
        "status": "Active",
        "createdAt": "2024-02-01T08:00:00.000Z",
    }})
    backend.on("PUT", "/flight-packages/fp1", {"message": "Flight package updated successfully"})
    form = ResourceForm(FLIGHT_PACKAGES, client, notifier, record_id="fp1")

    draft = await form.load()

    assert draft == {"flight": "f1", "package": "p1", "remainingSlots": 12, "status": "Active"}
    assert form.lookups["flights"].name_for("f1") == "SV-740"
    assert form.lookups["packages"].options() == [{"value": "p1", "label": "Ramadan Umrah"}]

    form.set_field("remainingSlots", 8)
    assert await form.submit() is True

    (call,) = backend.calls("PUT", "/flight-packages/fp1")
    assert call.json() == {"flight": "f1", "package": "p1", "remainingSlots": 8, "status": "Active"}
    assert notifier.successes == ["Flight package updated successfully"]


@pytest.mark.asyncio
async def test_flight_package_link_rules(backend, client, notifier):
    form = ResourceForm(FLIGHT_PACKAGES, client, notifier)
    form.set_field("flight", "f1")

    assert await form.submit() is False
    form.set_field("package", "p1")
    form.set_field("remainingSlots", -1)
    assert await form.submit() is False

    assert backend.requests == []
    assert notifier.errors == ["Please select both flight and package", "Remaining slots cannot be negative"]
