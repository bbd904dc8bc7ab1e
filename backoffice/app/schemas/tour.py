"""
Tour schemas.

A tour carries a day-by-day itinerary whose `dayNumber` values are kept
contiguous from 1.
"""

from typing import List

from pydantic import Field

from backoffice.app.schemas.common import Document, Schema
from backoffice.app.schemas.package import Duration


class Activity(Schema):
    time: str = ""
    activity: str = ""
    location: str = ""


class Meals(Schema):
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False


class ItineraryDay(Schema):
    day_number: int = 1
    title: str = ""
    description: str = ""
    activities: List[Activity] = Field(default_factory=list)
    meals: Meals = Field(default_factory=Meals)
    accommodation: str = ""


class Destination(Schema):
    country: str = ""
    countries: List[str] = Field(default_factory=list)
    cities: List[str] = Field(default_factory=list)
    region: str = ""


class TourPricing(Schema):
    base_price: float = 0
    currency: str = "PKR"
    price_per_person: bool = True
    discounted_price: float = 0
    child_price: float = 0


class TourInclusion(Schema):
    category: str = "Other"
    description: str = ""
    icon: str = ""


class TourFeatures(Schema):
    return_tickets: bool = False
    visa: bool = False
    hotel: bool = True
    hotel_rating: int = 0
    meals: str = "None"
    transport: bool = False
    guide: bool = False


class Tour(Document):
    name: str = ""
    description: str = ""
    short_description: str = ""
    destination: Destination = Field(default_factory=Destination)
    duration: Duration = Field(default_factory=Duration)
    type: str = "Group Tour"
    category: str = "Standard"
    seasonal_category: str = ""
    itinerary: List[ItineraryDay] = Field(default_factory=list)
    pricing: TourPricing = Field(default_factory=TourPricing)
    inclusions: List[TourInclusion] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    features: TourFeatures = Field(default_factory=TourFeatures)
    status: str = "Active"
    is_featured: bool = False
