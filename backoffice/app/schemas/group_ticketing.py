"""
Group ticketing booking schemas.
"""

from typing import Any, Dict, List

from pydantic import Field

from backoffice.app.schemas.common import Document, Schema, date_only


class FlightLeg(Schema):
    airline: str = ""
    flight_no: str = ""
    dep_date: str = ""
    dep_time: str = ""
    arr_date: str = ""
    arr_time: str = ""
    sector_from: str = ""
    sector_to: str = ""
    from_terminal: str = ""
    to_terminal: str = ""
    flight_class: str = ""
    baggage: str = ""
    meal: str = ""


class Passengers(Schema):
    adults: int = 0
    children: int = 0
    infants: int = 0


class GroupPrice(Schema):
    buying_currency: str = "SAR"
    buying_adult_price: float = 0
    buying_child_price: float = 0
    buying_infant_price: float = 0
    selling_currency_b2b: str = Field("SAR", alias="sellingCurrencyB2B")
    selling_adult_price_b2b: float = Field(0, alias="sellingAdultPriceB2B")
    selling_child_price_b2b: float = Field(0, alias="sellingChildPriceB2B")
    selling_infant_price_b2b: float = Field(0, alias="sellingInfantPriceB2B")


class GroupPayment(Schema):
    amount: float = 0
    method: str = "Cash"
    status: str = "Pending"
    payment_date: str = ""


class GroupBooking(Document):
    user: str = ""
    evoucher_account: str = ""
    sector: str = ""
    airline: str = ""
    group_category: str = ""
    group_name: str = ""
    total_seats: int = 0
    show_seat: bool = False
    flights: List[FlightLeg] = Field(default_factory=lambda: [FlightLeg()])
    passengers: Passengers = Field(default_factory=Passengers)
    price: GroupPrice = Field(default_factory=GroupPrice)
    pnr: str = ""
    contact_person_phone: str = ""
    contact_person_email: str = ""
    internal_status: str = "Public"
    payments: List[GroupPayment] = Field(default_factory=list)

    def to_draft(self) -> Dict[str, Any]:
        draft = super().to_draft()
        for leg in draft["flights"]:
            leg["airline"] = leg["airline"] or self.airline
            leg["depDate"] = date_only(leg["depDate"])
            leg["arrDate"] = date_only(leg["arrDate"])
        for payment in draft["payments"]:
            payment["paymentDate"] = date_only(payment["paymentDate"])
        return draft
