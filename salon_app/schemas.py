"""Request and AI-response shapes, validated with Pydantic.

Field names are snake_case in Python and camelCase on the wire.
"""

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .models import BOOKING_STATUSES, PAYMENT_METHODS, SALON_GENDERS

TIME_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

BookingStatus = Literal[BOOKING_STATUSES]
PaymentMethod = Literal[PAYMENT_METHODS]
SalonGender = Literal[SALON_GENDERS]


def promotion_rule_error(discount_type, discount_value, start_date, end_date):
    """Message for a promotion that breaks a discount or date rule, else None."""
    if discount_type == "percentage" and discount_value is not None and discount_value > 100:
        return "percentage discounts cannot exceed 100"
    if start_date and end_date and end_date < start_date:
        return "endDate must not be before startDate"
    return None


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class UserRegister(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=150)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    phone_number: str = Field(min_length=5, max_length=30)
    role: Literal["customer", "salon_owner"] = "customer"
    gender: Optional[Literal["female", "male", "other"]] = None
    preferences: Optional[str] = None
    language: Literal["ar", "en"] = "ar"
    profile_image: Optional[str] = None


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    phone_number: Optional[str] = Field(default=None, min_length=5, max_length=30)
    gender: Optional[Literal["female", "male", "other"]] = None
    preferences: Optional[str] = None
    language: Optional[Literal["ar", "en"]] = None
    privacy_settings: Optional[dict] = None
    profile_image: Optional[str] = None


# ---------------------------------------------------------------------------
# Salons, services, staff
# ---------------------------------------------------------------------------
class SalonCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    address: str = Field(min_length=1)
    address_en: Optional[str] = None
    city: str = Field(min_length=1)
    city_en: Optional[str] = None
    district: Optional[str] = None
    district_en: Optional[str] = None
    phone_number: str = Field(min_length=5, max_length=30)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    gender: SalonGender
    has_private_rooms: bool = False
    has_female_staff_only: bool = False
    provides_home_service: bool = False
    opening_hours: Optional[str] = None
    categories: List[str] = []
    amenities: List[str] = []
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    images: List[str] = []
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class SalonUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    address: Optional[str] = Field(default=None, min_length=1)
    address_en: Optional[str] = None
    city: Optional[str] = Field(default=None, min_length=1)
    city_en: Optional[str] = None
    district: Optional[str] = None
    district_en: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, min_length=5, max_length=30)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    gender: Optional[SalonGender] = None
    has_private_rooms: Optional[bool] = None
    has_female_staff_only: Optional[bool] = None
    provides_home_service: Optional[bool] = None
    is_active: Optional[bool] = None
    opening_hours: Optional[str] = None
    categories: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    images: Optional[List[str]] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class ServiceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    price: float = Field(ge=0)
    discounted_price: Optional[float] = Field(default=None, ge=0)
    category: str = Field(min_length=1)
    category_en: Optional[str] = None
    duration: int = Field(gt=0)
    featured: bool = False
    is_available: bool = True
    is_promoted: bool = False
    image: Optional[str] = None

    @model_validator(mode="after")
    def check_discount(self):
        if self.discounted_price is not None and self.discounted_price > self.price:
            raise ValueError("discountedPrice cannot exceed price")
        return self


class ServiceUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discounted_price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    category_en: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    featured: Optional[bool] = None
    is_available: Optional[bool] = None
    is_promoted: Optional[bool] = None
    image: Optional[str] = None


class StaffCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    name_en: Optional[str] = None
    specialization: Optional[str] = None
    specialization_en: Optional[str] = None
    bio: Optional[str] = None
    bio_en: Optional[str] = None
    gender: Optional[Literal["female", "male"]] = None
    image: Optional[str] = None
    is_available: bool = True


class StaffUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    name_en: Optional[str] = None
    specialization: Optional[str] = None
    specialization_en: Optional[str] = None
    bio: Optional[str] = None
    bio_en: Optional[str] = None
    gender: Optional[Literal["female", "male"]] = None
    image: Optional[str] = None
    is_available: Optional[bool] = None


# ---------------------------------------------------------------------------
# Promotions and membership
# ---------------------------------------------------------------------------
class PromotionCreate(CamelModel):
    salon_id: Optional[int] = None
    code: Optional[str] = Field(default=None, min_length=3, max_length=50)
    title: str = Field(min_length=1, max_length=150)
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    discount_type: Literal["percentage", "fixed"] = "percentage"
    discount_value: float = Field(gt=0)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_discount(self):
        error = promotion_rule_error(
            self.discount_type, self.discount_value, self.start_date, self.end_date
        )
        if error:
            raise ValueError(error)
        return self


class PromotionUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=150)
    title_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[float] = Field(default=None, gt=0)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    is_active: Optional[bool] = None


class MembershipTierCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    name_en: Optional[str] = None
    points_threshold: int = Field(ge=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    benefits: List[str] = []


# ---------------------------------------------------------------------------
# Bookings and reviews
# ---------------------------------------------------------------------------
class BookingCreate(CamelModel):
    service_id: int
    salon_id: int
    date: datetime.date
    time: str = Field(pattern=TIME_PATTERN)
    total_price: float = Field(ge=0)
    payment_method: PaymentMethod = "cash"
    staff_id: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class ReviewCreate(CamelModel):
    salon_id: int
    rating: float = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)
    service_id: Optional[int] = None
    booking_id: Optional[int] = None


class ReviewResponse(CamelModel):
    response: str = Field(min_length=1, max_length=2000)


class ReviewVisibility(CamelModel):
    is_hidden: bool


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class BookingDetails(CamelModel):
    salon_id: Optional[int] = None
    date: datetime.date
    time: str = Field(pattern=TIME_PATTERN)
    payment_method: Literal["card", "mada"] = "card"
    staff_id: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class PaymentIntentRequest(CamelModel):
    amount: float = Field(gt=0)
    service_id: int
    booking_details: Optional[BookingDetails] = None


class ConfirmBookingRequest(CamelModel):
    payment_intent_id: str = Field(min_length=1)
    service_id: int
    booking_details: BookingDetails


# ---------------------------------------------------------------------------
# AI responses
# ---------------------------------------------------------------------------
class AIRecommendation(CamelModel):
    service_id: int
    service_name: str = Field(min_length=1)
    score: float = Field(ge=0, le=100)
    reason: str = ""

    @field_validator("reason", mode="before")
    @classmethod
    def default_reason(cls, v):
        return v or ""


class AIRecommendationPayload(BaseModel):
    recommendations: List[AIRecommendation] = Field(min_length=1)


class AITimeSuggestions(BaseModel):
    times: List[str] = Field(min_length=1)
