from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


BASE_PRICE = 300
HOURLY_RATE = 80
BASE_HOURS = 3

WINDOW_HOURLY_RATE = 50
REDUCED_BASE_PRICE = 235

MIN_ROOMS = 1
MAX_ROOMS = 10

TIME_SLOTS = [
    "08:00", "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00",
]


@dataclass(frozen=True)
class ServiceType:
    id: str
    name: str
    description: str
    is_quote_based: bool = False
    price_info: Optional[str] = None


SERVICE_TYPES: List[ServiceType] = [
    # Instant Book Services
    ServiceType("indoor_cleaning", "Indoor Cleaning", "3.5-10 hours comprehensive home cleaning"),
    ServiceType("deep_clean", "Deep Cleaning", "Thorough top-to-bottom intensive cleaning"),
    ServiceType("airbnb", "AirBnB Turnover", "Quick turnaround for short-term rentals"),
    ServiceType("express_cleaning", "Express Cleaning", "1-3 hour quick cleaning tasks"),
    ServiceType("moving_cleaning", "Moving Cleaning", "Move-in/move-out deep cleaning", price_info="From R235"),
    ServiceType("one_time_cleaning", "One-Time Cleaning", "Single, flexible booking", price_info="From R235"),
    ServiceType("window_cleaning", "Window Cleaning", "Professional window cleaning", price_info="R50/hour"),
    # Quote-Based Services
    ServiceType("office_cleaning", "Office Cleaning", "Half-day or full-day office cleaning", True),
    ServiceType("commercial_cleaning", "Commercial Cleaning", "Office and industrial spaces (R5.10/sqm)", True),
    ServiceType("small_business_cleaning", "Small Business Cleaning", "Retail and small facility cleaning", True),
    ServiceType("outdoor_services", "Outdoor Services", "Garden maintenance and dog walking", True),
    ServiceType("gardening", "Gardening Services", "Landscaping and irrigation", True),
    ServiceType("laundry_ironing", "Laundry & Ironing", "Professional laundry services", True),
]

SERVICES_BY_ID: Dict[str, ServiceType] = {s.id: s for s in SERVICE_TYPES}


def get_service(service_id: Optional[str]) -> Optional[ServiceType]:
    if not service_id:
        return None
    return SERVICES_BY_ID.get(service_id)


def instant_book_services() -> List[ServiceType]:
    return [s for s in SERVICE_TYPES if not s.is_quote_based]


def quote_based_services() -> List[ServiceType]:
    return [s for s in SERVICE_TYPES if s.is_quote_based]


def calculate_hours(bedrooms: int, bathrooms: int) -> int:
    return BASE_HOURS + max(0, bedrooms - 2) + max(0, bathrooms - 1)


def calculate_price(bedrooms: int, bathrooms: int, service_type: Optional[str] = None) -> int:
    """
    Price in rand for an instant booking.

    Standard services: BASE_PRICE covers the first three hours, every extra
    hour (one per bedroom beyond two, one per bathroom beyond one) adds
    HOURLY_RATE. Window cleaning is billed purely by the hour; moving and
    one-time cleans start from the reduced base.
    """
    hours = calculate_hours(bedrooms, bathrooms)
    extra_hours = max(0, hours - BASE_HOURS)

    if service_type == "window_cleaning":
        return hours * WINDOW_HOURLY_RATE
    if service_type in ("moving_cleaning", "one_time_cleaning"):
        return REDUCED_BASE_PRICE + extra_hours * HOURLY_RATE
    return BASE_PRICE + extra_hours * HOURLY_RATE


def clamp_rooms(count: int) -> int:
    return max(MIN_ROOMS, min(MAX_ROOMS, int(count)))


def format_rand(amount: int) -> str:
    return f"R{amount:,.0f}"
