"""
Resource definitions.

A `ResourceDefinition` tells the generic list, form and detail screens
everything that differs between resource types: endpoints, response keys,
searchable fields, required-field rules, composite field templates, the
submission encoding and where to go after saving.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from backoffice.app.domain.resources.drafts import get_path, merge_field
from backoffice.app.schemas.common import Document
from backoffice.app.schemas.flight import Flight
from backoffice.app.schemas.flight_package import FlightPackage
from backoffice.app.schemas.group_ticketing import FlightLeg, GroupBooking, GroupPayment
from backoffice.app.schemas.hotel import Amenity, Hotel, RoomType
from backoffice.app.schemas.lookup import Airline, Bank, LookupTable, Sector
from backoffice.app.schemas.package import Accommodation, Package, PricingTier
from backoffice.app.schemas.payment import PaymentVoucher
from backoffice.app.schemas.tour import ItineraryDay, Tour, TourInclusion
from backoffice.app.schemas.visa import DocumentRequirement, Visa


JSON = "json"
MULTIPART = "multipart"   # draft as a JSON `data` part plus files
FORM = "form"             # flat form fields plus files


def is_present(value: Any) -> bool:
    """False for None, empty strings and empty containers."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


@dataclass(frozen=True)
class Rule:
    """One required-field condition checked before submission."""
    check: Callable[[Mapping[str, Any]], bool]
    message: str
    field: Optional[str] = None


def required(*paths: str, message: str = "Please fill all required fields") -> Tuple[Rule, ...]:
    return tuple(Rule(lambda d, p=p: is_present(get_path(d, p)), message, p) for p in paths)


def non_zero(path: str, message: str = "Please fill all required fields") -> Rule:
    return Rule(lambda d: bool(get_path(d, path, 0)), message, path)


def has_items(path: str, message: str) -> Rule:
    return Rule(lambda d: len(get_path(d, path) or []) > 0, message, path)


@dataclass(frozen=True)
class LookupSource:
    """A list fetched only to resolve ids to names."""
    path: str
    label_field: str
    list_key: str = "data"


@dataclass(frozen=True)
class DetailSection:
    key: str
    title: str
    field: str


def _template(schema) -> Callable[[], Dict[str, Any]]:
    return lambda: schema().model_dump(by_alias=True)


FieldHook = Callable[[Dict[str, Any], Any, Mapping[str, LookupTable]], Dict[str, Any]]


@dataclass(frozen=True)
class ResourceDefinition:
    name: str
    label: str
    path: str
    schema: Type[Document]
    list_key: str
    item_keys: Tuple[str, ...]
    search_fields: Tuple[str, ...]
    create_path: Optional[str] = None
    filters: Tuple[str, ...] = ()
    rules: Tuple[Rule, ...] = ()
    item_templates: Mapping[str, Callable[[], Dict[str, Any]]] = field(default_factory=dict)
    numbered_fields: Mapping[str, str] = field(default_factory=dict)
    encoding: str = JSON
    attachment_field: Optional[str] = None
    form_fields: Mapping[str, str] = field(default_factory=dict)
    lookups: Mapping[str, LookupSource] = field(default_factory=dict)
    field_hooks: Mapping[str, FieldHook] = field(default_factory=dict)
    detail_sections: Tuple[DetailSection, ...] = ()
    success_route: Optional[str] = None
    route: Optional[str] = None

    @property
    def plural(self) -> str:
        return self.label.lower() + "s"

    @property
    def create_endpoint(self) -> str:
        return self.create_path or self.path

    def item_path(self, record_id: str) -> str:
        return f"{self.path}/{record_id}"

    def edit_route(self, record_id: str) -> str:
        return f"{self.route or self.path}/edit/{record_id}"

    def normalize(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        return self.schema.model_validate(raw).to_record()

    def draft_from(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        return self.schema.model_validate(raw).to_draft()

    def default_draft(self) -> Dict[str, Any]:
        return self.schema().to_draft()


def _fill_account_no(draft: Dict[str, Any], bank_id: Any, lookups: Mapping[str, LookupTable]) -> Dict[str, Any]:
    banks = lookups.get("banks")
    bank = banks.get(bank_id) if banks else None
    if bank is None:
        return draft
    return merge_field(draft, "accountNo", bank.get("accountNo", ""))


def _slots_not_negative(draft: Mapping[str, Any]) -> bool:
    return (draft.get("remainingSlots") or 0) >= 0


def _legs_complete(draft: Mapping[str, Any]) -> bool:
    legs = draft.get("flights") or []
    keys = ("flightNo", "depDate", "depTime", "arrDate", "arrTime", "sectorFrom", "sectorTo")
    return bool(legs) and all(is_present(leg.get(k)) for leg in legs for k in keys)


AIRLINES = LookupSource("/airline", "airlineName")
SECTORS = LookupSource("/sector", "sectorTitle")
BANKS = LookupSource("/bank", "bankName")
HOTELS = LookupSource("/hotels", "name", list_key="hotels")
FLIGHT_OPTIONS = LookupSource("/flights", "flightNumber", list_key="flights")
PACKAGE_OPTIONS = LookupSource("/packages", "name", list_key="packages")


FLIGHTS = ResourceDefinition(
    name="flights",
    label="Flight",
    path="/flights",
    schema=Flight,
    list_key="flights",
    item_keys=("flight", "data"),
    search_fields=("flightNumber", "airline.airlineName", "sector.sectorTitle"),
    filters=("airline", "date"),
    rules=required(
        "flightNumber", "airline", "sector",
        "departureCity", "departureDate", "departureTime",
        "arrivalCity", "arrivalDate", "arrivalTime",
    ),
    lookups={"airlines": AIRLINES, "sectors": SECTORS},
)

HOTELS_RESOURCE = ResourceDefinition(
    name="hotels",
    label="Hotel",
    path="/hotels",
    schema=Hotel,
    list_key="hotels",
    item_keys=("hotel", "data"),
    search_fields=("name", "location.city"),
    filters=("city", "starRating"),
    rules=(
        *required("name", "location.city", message="Please fill all required fields and add at least one room type"),
        has_items("roomTypes", "Please fill all required fields and add at least one room type"),
    ),
    item_templates={"roomTypes": _template(RoomType), "amenities": _template(Amenity)},
    encoding=MULTIPART,
    attachment_field="images",
)

PACKAGES = ResourceDefinition(
    name="packages",
    label="Package",
    path="/packages",
    schema=Package,
    list_key="packages",
    item_keys=("package", "data"),
    search_fields=("name", "type"),
    filters=("type", "status", "city"),
    rules=(*required("name", "type"), non_zero("duration.days")),
    item_templates={"accommodation": _template(Accommodation), "pricing": _template(PricingTier)},
    lookups={"hotels": HOTELS},
)

FLIGHT_PACKAGES = ResourceDefinition(
    name="flight_packages",
    label="Flight package",
    path="/flight-packages",
    schema=FlightPackage,
    list_key="flightPackages",
    item_keys=("flightPackage", "data"),
    search_fields=("flight.flightNumber", "package.name", "flight.airline.airlineName"),
    filters=("status", "packageType"),
    rules=(
        *required("flight", "package", message="Please select both flight and package"),
        Rule(_slots_not_negative, "Remaining slots cannot be negative", "remainingSlots"),
    ),
    lookups={"flights": FLIGHT_OPTIONS, "packages": PACKAGE_OPTIONS},
)

TOURS = ResourceDefinition(
    name="tours",
    label="Tour",
    path="/tours",
    schema=Tour,
    list_key="tours",
    item_keys=("data", "tour"),
    search_fields=("name", "destination.country"),
    filters=("type", "category", "status"),
    rules=(
        *required("name", "description", "destination.country", "type"),
        non_zero("duration.days"),
        has_items("itinerary", "Tour must have at least one day in itinerary"),
    ),
    item_templates={
        "itinerary": _template(ItineraryDay),
        "inclusions": _template(TourInclusion),
    },
    numbered_fields={"itinerary": "dayNumber"},
    detail_sections=(
        DetailSection("description", "Overview", "description"),
        DetailSection("itinerary", "Itinerary", "itinerary"),
        DetailSection("inclusions", "Inclusions", "inclusions"),
        DetailSection("exclusions", "Exclusions", "exclusions"),
        DetailSection("pricing", "Pricing", "pricing"),
        DetailSection("features", "Features", "features"),
    ),
)

VISAS = ResourceDefinition(
    name="visas",
    label="Visa",
    path="/visas",
    schema=Visa,
    list_key="visas",
    item_keys=("data", "visa"),
    search_fields=("country.name", "visaType"),
    filters=("visaType", "status"),
    rules=(*required("country.name", "country.code", "visaType"), non_zero("processingTime.min")),
    item_templates={"documentRequirements": _template(DocumentRequirement)},
    detail_sections=(
        DetailSection("images", "Gallery", "images"),
        DetailSection("documentRequirements", "Document Requirements", "documentRequirements"),
        DetailSection("requirements", "General Requirements", "requirements"),
        DetailSection("importantNotes", "Important Notes", "importantNotes"),
        DetailSection("servicesIncluded", "Services Included", "servicesIncluded"),
        DetailSection("pricing", "Pricing", "pricing"),
    ),
)

GROUP_TICKETING = ResourceDefinition(
    name="group_ticketing",
    label="Booking",
    path="/group-ticketing",
    schema=GroupBooking,
    list_key="data",
    item_keys=("data",),
    search_fields=("groupBookingId", "id", "voucher_id", "pnr", "groupName", "sector"),
    rules=(
        *required("groupName", "groupCategory", "sector", "airline"),
        Rule(_legs_complete, "Please complete every flight leg", "flights"),
    ),
    item_templates={"flights": _template(FlightLeg), "payments": _template(GroupPayment)},
    lookups={"airlines": AIRLINES, "sectors": SECTORS},
    success_route="/group-ticketing",
)

PAYMENTS = ResourceDefinition(
    name="payments",
    label="Payment voucher",
    path="/payment",
    create_path="/payment/add",
    schema=PaymentVoucher,
    list_key="data",
    item_keys=("data", "payment"),
    search_fields=("voucherId", "description", "status"),
    filters=("dateFrom", "dateTo", "status"),
    rules=(*required("date", "bankName", "description"), non_zero("amount")),
    encoding=FORM,
    attachment_field="receipt",
    form_fields={
        "description": "description",
        "amount": "amount",
        "status": "status",
        "remarks": "remarks",
        "date": "date",
        "bankName": "bankAccount",
    },
    lookups={"banks": BANKS},
    field_hooks={"bankName": _fill_account_no},
    success_route="/view-payment-voucher",
)

AIRLINES_RESOURCE = ResourceDefinition(
    name="airlines",
    label="Airline",
    path="/airline",
    create_path="/airline/add",
    schema=Airline,
    list_key="data",
    item_keys=("data",),
    search_fields=("airlineName", "airlineCode", "shortCode"),
    rules=required("airlineCode", "airlineName", "shortCode"),
)

SECTORS_RESOURCE = ResourceDefinition(
    name="sectors",
    label="Sector",
    path="/sector",
    create_path="/sector/add",
    schema=Sector,
    list_key="data",
    item_keys=("data",),
    search_fields=("sectorTitle", "fullSector"),
    rules=required("sectorTitle", "fullSector"),
)

BANKS_RESOURCE = ResourceDefinition(
    name="banks",
    label="Bank",
    path="/bank",
    create_path="/bank/add",
    schema=Bank,
    list_key="data",
    item_keys=("data",),
    search_fields=("bankName", "accountTitle", "accountNo"),
    rules=required("bankName", "accountTitle", "accountNo"),
)


RESOURCES: Dict[str, ResourceDefinition] = {
    definition.name: definition
    for definition in (
        FLIGHTS, HOTELS_RESOURCE, PACKAGES, FLIGHT_PACKAGES, TOURS, VISAS, GROUP_TICKETING,
        PAYMENTS, AIRLINES_RESOURCE, SECTORS_RESOURCE, BANKS_RESOURCE,
    )
}


def get_resource(name: str) -> ResourceDefinition:
    try:
        return RESOURCES[name]
    except KeyError:
        raise KeyError(f"Unknown resource '{name}'") from None
