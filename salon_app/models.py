from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata

SALON_GENDERS = ("female_only", "male_only", "both")
BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")
PAYMENT_METHODS = ("card", "mada", "cash")


def utc_now():
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


def _split(value):
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("username_unique", "username", unique=True),
        Index("email_unique", "email", unique=True),
    )

    id = mapped_column(Integer, primary_key=True)
    username = mapped_column(String(100), nullable=False)
    password_hash = mapped_column(String(128), nullable=False)
    name = mapped_column(String(150), nullable=False)
    email = mapped_column(String(255), nullable=False)
    phone_number = mapped_column(String(30), nullable=False)
    role = mapped_column(String(20), nullable=False, default="customer")
    gender = mapped_column(String(20))
    preferences = mapped_column(Text)
    language = mapped_column(String(5), nullable=False, default="ar")
    privacy_settings = mapped_column(JSON, default=dict)
    profile_image = mapped_column(String(500))
    loyalty_points = mapped_column(Integer, nullable=False, default=0)
    membership_type = mapped_column(String(50))
    last_login_at = mapped_column(DateTime)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)

    salons: Mapped[List["Salon"]] = relationship(
        "Salon", uselist=True, back_populates="owner"
    )
    bookings: Mapped[List["Booking"]] = relationship(
        "Booking", uselist=True, back_populates="user"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "role": self.role,
            "gender": self.gender,
            "preferences": self.preferences,
            "language": self.language,
            "privacySettings": self.privacy_settings or {},
            "profileImage": self.profile_image,
            "loyaltyPoints": self.loyalty_points or 0,
            "membershipType": self.membership_type,
            "lastLoginAt": _iso(self.last_login_at),
            "createdAt": _iso(self.created_at),
        }


class Salon(Base):
    __tablename__ = "salons"
    __table_args__ = (
        ForeignKeyConstraint(["owner_id"], ["users.id"], name="fk_salon_owner"),
        Index("owner_id", "owner_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    owner_id = mapped_column(Integer, nullable=False)
    name = mapped_column(String(150), nullable=False)
    name_en = mapped_column(String(150))
    description = mapped_column(Text)
    description_en = mapped_column(Text)
    address = mapped_column(String(255), nullable=False)
    address_en = mapped_column(String(255))
    city = mapped_column(String(100), nullable=False)
    city_en = mapped_column(String(100))
    district = mapped_column(String(100))
    district_en = mapped_column(String(100))
    phone_number = mapped_column(String(30), nullable=False)
    email = mapped_column(String(255))
    gender = mapped_column(String(20), nullable=False)
    has_private_rooms = mapped_column(Boolean, nullable=False, default=False)
    has_female_staff_only = mapped_column(Boolean, nullable=False, default=False)
    provides_home_service = mapped_column(Boolean, nullable=False, default=False)
    verified = mapped_column(Boolean, nullable=False, default=False)
    is_active = mapped_column(Boolean, nullable=False, default=True)
    opening_hours = mapped_column(String(100))
    categories = mapped_column(Text)
    amenities = mapped_column(Text)
    logo = mapped_column(String(500))
    cover_image = mapped_column(String(500))
    images = mapped_column(JSON, default=list)
    latitude = mapped_column(Float)
    longitude = mapped_column(Float)
    rating = mapped_column(Float, nullable=False, default=0)
    review_count = mapped_column(Integer, nullable=False, default=0)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)

    owner: Mapped["User"] = relationship("User", back_populates="salons")
    services: Mapped[List["Service"]] = relationship(
        "Service", uselist=True, back_populates="salon"
    )

    @property
    def category_list(self):
        return _split(self.categories)

    def to_dict(self):
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "name": self.name,
            "nameEn": self.name_en,
            "description": self.description,
            "descriptionEn": self.description_en,
            "address": self.address,
            "addressEn": self.address_en,
            "city": self.city,
            "cityEn": self.city_en,
            "district": self.district,
            "districtEn": self.district_en,
            "phoneNumber": self.phone_number,
            "email": self.email,
            "gender": self.gender,
            "hasPrivateRooms": bool(self.has_private_rooms),
            "hasFemaleStaffOnly": bool(self.has_female_staff_only),
            "providesHomeService": bool(self.provides_home_service),
            "verified": bool(self.verified),
            "isActive": bool(self.is_active),
            "openingHours": self.opening_hours,
            "categories": self.category_list,
            "amenities": _split(self.amenities),
            "logo": self.logo,
            "coverImage": self.cover_image,
            "images": self.images or [],
            "latitude": self.latitude,
            "longitude": self.longitude,
            "rating": self.rating or 0,
            "reviewCount": self.review_count or 0,
            "createdAt": _iso(self.created_at),
        }


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        ForeignKeyConstraint(["salon_id"], ["salons.id"], name="fk_service_salon"),
        Index("service_salon_id", "salon_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    salon_id = mapped_column(Integer, nullable=False)
    name = mapped_column(String(150), nullable=False)
    name_en = mapped_column(String(150))
    description = mapped_column(Text)
    description_en = mapped_column(Text)
    price = mapped_column(Float, nullable=False)
    discounted_price = mapped_column(Float)
    category = mapped_column(String(100), nullable=False)
    category_en = mapped_column(String(100))
    duration = mapped_column(Integer, nullable=False)
    featured = mapped_column(Boolean, nullable=False, default=False)
    is_available = mapped_column(Boolean, nullable=False, default=True)
    is_promoted = mapped_column(Boolean, nullable=False, default=False)
    image = mapped_column(String(500))
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    salon: Mapped["Salon"] = relationship("Salon", back_populates="services")

    @property
    def display_name(self):
        return self.name_en or self.name

    def to_dict(self):
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "name": self.name,
            "nameEn": self.name_en,
            "description": self.description,
            "descriptionEn": self.description_en,
            "price": self.price,
            "discountedPrice": self.discounted_price,
            "category": self.category,
            "categoryEn": self.category_en,
            "duration": self.duration,
            "featured": bool(self.featured),
            "isAvailable": bool(self.is_available),
            "isPromoted": bool(self.is_promoted),
            "image": self.image,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Staff(Base):
    __tablename__ = "staff"
    __table_args__ = (
        ForeignKeyConstraint(["salon_id"], ["salons.id"], name="fk_staff_salon"),
        Index("staff_salon_id", "salon_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    salon_id = mapped_column(Integer, nullable=False)
    name = mapped_column(String(150), nullable=False)
    name_en = mapped_column(String(150))
    specialization = mapped_column(String(150))
    specialization_en = mapped_column(String(150))
    bio = mapped_column(Text)
    bio_en = mapped_column(Text)
    gender = mapped_column(String(20))
    image = mapped_column(String(500))
    is_available = mapped_column(Boolean, nullable=False, default=True)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "name": self.name,
            "nameEn": self.name_en,
            "specialization": self.specialization,
            "specializationEn": self.specialization_en,
            "bio": self.bio,
            "bioEn": self.bio_en,
            "gender": self.gender,
            "image": self.image,
            "isAvailable": bool(self.is_available),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_booking_user"),
        ForeignKeyConstraint(["salon_id"], ["salons.id"], name="fk_booking_salon"),
        ForeignKeyConstraint(["service_id"], ["services.id"], name="fk_booking_service"),
        ForeignKeyConstraint(["staff_id"], ["staff.id"], name="fk_booking_staff"),
        Index("booking_user_id", "user_id"),
        Index("booking_salon_id", "salon_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    user_id = mapped_column(Integer, nullable=False)
    salon_id = mapped_column(Integer, nullable=False)
    service_id = mapped_column(Integer, nullable=False)
    staff_id = mapped_column(Integer)
    status = mapped_column(String(20), nullable=False, default="pending")
    date = mapped_column(Date, nullable=False)
    time = mapped_column(String(10), nullable=False)
    total_price = mapped_column(Float, nullable=False)
    payment_method = mapped_column(String(20))
    payment_status = mapped_column(String(20), nullable=False, default="pending")
    notes = mapped_column(Text)
    is_rated = mapped_column(Boolean, nullable=False, default=False)
    loyalty_points_earned = mapped_column(Integer, nullable=False, default=0)
    cancelled_at = mapped_column(DateTime)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    user: Mapped["User"] = relationship("User", back_populates="bookings")
    service: Mapped[Optional["Service"]] = relationship("Service")

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "salonId": self.salon_id,
            "serviceId": self.service_id,
            "staffId": self.staff_id,
            "status": self.status,
            "date": _iso(self.date),
            "time": self.time,
            "totalPrice": self.total_price,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "notes": self.notes,
            "isRated": bool(self.is_rated),
            "loyaltyPointsEarned": self.loyalty_points_earned or 0,
            "cancelledAt": _iso(self.cancelled_at),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_review_user"),
        ForeignKeyConstraint(["salon_id"], ["salons.id"], name="fk_review_salon"),
        ForeignKeyConstraint(["service_id"], ["services.id"], name="fk_review_service"),
        ForeignKeyConstraint(["booking_id"], ["bookings.id"], name="fk_review_booking"),
        Index("review_salon_id", "salon_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    user_id = mapped_column(Integer, nullable=False)
    salon_id = mapped_column(Integer, nullable=False)
    service_id = mapped_column(Integer)
    booking_id = mapped_column(Integer)
    rating = mapped_column(Float, nullable=False)
    comment = mapped_column(Text)
    owner_response = mapped_column(Text)
    owner_response_date = mapped_column(DateTime)
    is_hidden = mapped_column(Boolean, nullable=False, default=False)
    date = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "salonId": self.salon_id,
            "serviceId": self.service_id,
            "bookingId": self.booking_id,
            "rating": self.rating,
            "comment": self.comment,
            "ownerResponse": self.owner_response,
            "ownerResponseDate": _iso(self.owner_response_date),
            "isHidden": bool(self.is_hidden),
            "date": _iso(self.date),
            "updatedAt": _iso(self.updated_at),
        }


class Promotion(Base):
    __tablename__ = "promotions"
    __table_args__ = (
        ForeignKeyConstraint(["salon_id"], ["salons.id"], name="fk_promotion_salon"),
        Index("promotion_code", "code", unique=True),
    )

    id = mapped_column(Integer, primary_key=True)
    salon_id = mapped_column(Integer)
    code = mapped_column(String(50), unique=True)
    title = mapped_column(String(150), nullable=False)
    title_en = mapped_column(String(150))
    description = mapped_column(Text)
    description_en = mapped_column(Text)
    discount_type = mapped_column(String(20), nullable=False, default="percentage")
    discount_value = mapped_column(Float, nullable=False)
    start_date = mapped_column(Date)
    end_date = mapped_column(Date)
    is_active = mapped_column(Boolean, nullable=False, default=True)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "code": self.code,
            "title": self.title,
            "titleEn": self.title_en,
            "description": self.description,
            "descriptionEn": self.description_en,
            "discountType": self.discount_type,
            "discountValue": self.discount_value,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class MembershipTier(Base):
    __tablename__ = "membership_tiers"

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(100), nullable=False)
    name_en = mapped_column(String(100))
    points_threshold = mapped_column(Integer, nullable=False, default=0)
    discount_percentage = mapped_column(Float, nullable=False, default=0)
    benefits = mapped_column(JSON, default=list)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "nameEn": self.name_en,
            "pointsThreshold": self.points_threshold,
            "discountPercentage": self.discount_percentage,
            "benefits": self.benefits or [],
            "createdAt": _iso(self.created_at),
        }


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"
    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_txn_user"),
        ForeignKeyConstraint(["booking_id"], ["bookings.id"], name="fk_txn_booking"),
        Index("gateway_transaction_id_unique", "gateway_transaction_id", unique=True),
        Index("txn_user_id", "user_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    user_id = mapped_column(Integer, nullable=False)
    booking_id = mapped_column(Integer)
    amount = mapped_column(Float, nullable=False)
    currency = mapped_column(String(10), nullable=False)
    payment_method = mapped_column(String(20))
    status = mapped_column(String(20), nullable=False, default="succeeded")
    gateway = mapped_column(String(30), nullable=False, default="stripe")
    gateway_transaction_id = mapped_column(String(255), nullable=False)
    created_at = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at = mapped_column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "bookingId": self.booking_id,
            "amount": self.amount,
            "currency": self.currency,
            "paymentMethod": self.payment_method,
            "status": self.status,
            "gateway": self.gateway,
            "gatewayTransactionId": self.gateway_transaction_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
