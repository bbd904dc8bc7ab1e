"""
Hotel schemas.

Nested objects default to the skeleton the hotel form starts from.
"""

from typing import Any, Dict, List

from pydantic import Field

from backoffice.app.schemas.common import Document, Schema


class Coordinates(Schema):
    latitude: float = 0
    longitude: float = 0


class HotelLocation(Schema):
    address: str = ""
    city: str = "Makkah"
    district: str = ""
    distance_from_haram: float = 0
    walking_time: int = 0
    coordinates: Coordinates = Field(default_factory=Coordinates)


class RoomType(Schema):
    type: str = "Sharing"
    price_per_night: float = 0
    currency: str = "SAR"
    capacity: int = 4
    available_rooms: int = 0
    description: str = ""


class Amenity(Schema):
    name: str = ""
    icon: str = ""


class HotelServices(Schema):
    shuttle_service: bool = False
    breakfast: bool = False
    wifi: bool = True
    parking: bool = False
    ac: bool = True
    elevator: bool = True
    restaurant: bool = False
    room_service: bool = False
    laundry: bool = False


class HotelContact(Schema):
    phone: str = ""
    email: str = ""
    website: str = ""


class HotelPolicies(Schema):
    check_in_time: str = "14:00"
    check_out_time: str = "12:00"
    cancellation_policy: str = ""
    child_policy: str = ""
    pet_policy: str = ""


class Hotel(Document):
    name: str = ""
    name_arabic: str = ""
    description: str = ""
    location: HotelLocation = Field(default_factory=HotelLocation)
    star_rating: int = 3
    category: str = "Standard"
    room_types: List[RoomType] = Field(default_factory=list)
    amenities: List[Amenity] = Field(default_factory=list)
    services: HotelServices = Field(default_factory=HotelServices)
    contact: HotelContact = Field(default_factory=HotelContact)
    policies: HotelPolicies = Field(default_factory=HotelPolicies)
    images: List[Dict[str, Any]] = Field(default_factory=list)
    status: str = "Active"
    is_featured: bool = False
