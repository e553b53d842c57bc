"""
Storage repository.

Every list operation starts from the whole table in insertion order and
narrows the candidate set one optional filter at a time. The default engine
is an in-memory SQLite database, so data lives as long as the process.
"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from .errors import DuplicateTransactionError
from .models import (
    Booking,
    MembershipTier,
    PaymentTransaction,
    Promotion,
    Review,
    Salon,
    Service,
    Staff,
    User,
    utc_now,
)

GENDER_ALIASES = {"female": "female_only", "male": "male_only"}
LIST_COLUMNS = ("categories", "amenities")


def round_rating(value):
    """Round half-up to one decimal place (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _join_lists(fields):
    for key in LIST_COLUMNS:
        if isinstance(fields.get(key), (list, tuple)):
            fields[key] = ",".join(item.strip() for item in fields[key] if item.strip())
    return fields


class Storage:
    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _get(self, model, entity_id):
        if entity_id is None:
            return None
        return self.session.get(model, entity_id)

    def _list(self, stmt):
        return list(self.session.scalars(stmt).all())

    def _insert(self, instance):
        self.session.add(instance)
        self.session.commit()
        return instance

    def _update(self, model, entity_id, fields):
        instance = self._get(model, entity_id)
        if instance is None:
            return None
        columns = model.__table__.columns.keys()
        for key, value in fields.items():
            if key in columns and key != "id":
                setattr(instance, key, value)
        self.session.commit()
        return instance

    # ------------------------------------------------------------------
    # users
    # ------------------------------------------------------------------
    def get_user(self, user_id):
        return self._get(User, user_id)

    def get_user_by_username(self, username):
        return self.session.scalar(select(User).where(User.username == username))

    def get_user_by_email(self, email):
        return self.session.scalar(
            select(User).where(func.lower(User.email) == email.lower())
        )

    def create_user(self, fields):
        user = User(**fields)
        user.role = user.role or "customer"
        user.loyalty_points = 0
        return self._insert(user)

    def update_user(self, user_id, fields):
        return self._update(User, user_id, fields)

    def record_login(self, user_id):
        return self._update(User, user_id, {"last_login_at": utc_now()})

    def update_user_loyalty_points(self, user_id, points):
        """Add ``points`` to the balance and move the user into the matching tier."""
        user = self._get(User, user_id)
        if user is None:
            return None
        user.loyalty_points = (user.loyalty_points or 0) + points
        self._sync_membership(user)
        self.session.commit()
        return user

    def update_user_membership_type(self, user_id, membership_type):
        return self._update(User, user_id, {"membership_type": membership_type})

    def _sync_membership(self, user):
        tier = self.get_membership_tier_by_points_threshold(user.loyalty_points or 0)
        if tier is not None:
            user.membership_type = tier.name_en or tier.name

    # ------------------------------------------------------------------
    # salons
    # ------------------------------------------------------------------
    def get_salons(self, filters=None):
        filters = filters or {}
        stmt = select(Salon)

        gender = filters.get("gender")
        if gender:
            gender = GENDER_ALIASES.get(gender, gender)
            stmt = stmt.where(or_(Salon.gender == gender, Salon.gender == "both"))

        city = filters.get("city")
        if city:
            city = city.strip().lower()
            stmt = stmt.where(
                or_(func.lower(Salon.city) == city, func.lower(Salon.city_en) == city)
            )

        if filters.get("has_private_rooms"):
            stmt = stmt.where(Salon.has_private_rooms.is_(True))
        if filters.get("has_female_staff_only"):
            stmt = stmt.where(Salon.has_female_staff_only.is_(True))
        if filters.get("provides_home_service"):
            stmt = stmt.where(Salon.provides_home_service.is_(True))

        salons = self._list(stmt.order_by(Salon.id))

        category = filters.get("category")
        if category:
            salons = [salon for salon in salons if category in salon.category_list]

        return salons

    def get_salon_by_id(self, salon_id):
        return self._get(Salon, salon_id)

    def get_salons_by_owner_id(self, owner_id):
        return self._list(
            select(Salon).where(Salon.owner_id == owner_id).order_by(Salon.id)
        )

    def create_salon(self, fields):
        salon = Salon(**_join_lists(dict(fields)))
        salon.rating = 0
        salon.review_count = 0
        return self._insert(salon)

    def update_salon(self, salon_id, fields):
        fields = _join_lists(dict(fields))
        # rating and reviewCount are derived from reviews only
        fields.pop("rating", None)
        fields.pop("review_count", None)
        return self._update(Salon, salon_id, fields)

    def update_salon_rating(self, salon_id):
        """Recompute rating/reviewCount from the salon's visible reviews."""
        salon = self._get(Salon, salon_id)
        if salon is None:
            return None

        ratings = self.session.scalars(
            select(Review.rating).where(
                Review.salon_id == salon_id, Review.is_hidden.is_(False)
            )
        ).all()

        if ratings:
            salon.rating = round_rating(sum(ratings) / len(ratings))
            salon.review_count = len(ratings)
        else:
            salon.rating = 0
            salon.review_count = 0

        self.session.commit()
        return salon

    # ------------------------------------------------------------------
    # services
    # ------------------------------------------------------------------
    def get_services(self, salon_id, category=None, is_available=None):
        stmt = select(Service).where(Service.salon_id == salon_id)
        if category:
            stmt = stmt.where(Service.category == category)
        if is_available is not None:
            stmt = stmt.where(Service.is_available.is_(is_available))
        return self._list(stmt.order_by(Service.id))

    def get_all_services(self, only_available=False):
        stmt = select(Service)
        if only_available:
            stmt = stmt.where(Service.is_available.is_(True))
        return self._list(stmt.order_by(Service.id))

    def get_service_by_id(self, service_id):
        return self._get(Service, service_id)

    def get_featured_services(self, salon_id):
        return self._list(
            select(Service)
            .where(Service.salon_id == salon_id, Service.featured.is_(True))
            .order_by(Service.id)
        )

    def get_promoted_services(self):
        return self._list(
            select(Service).where(Service.is_promoted.is_(True)).order_by(Service.id)
        )

    def create_service(self, fields):
        return self._insert(Service(**fields))

    def update_service(self, service_id, fields):
        return self._update(Service, service_id, fields)

    # ------------------------------------------------------------------
    # bookings
    # ------------------------------------------------------------------
    def get_bookings_by_user_id(self, user_id):
        return self._list(
            select(Booking).where(Booking.user_id == user_id).order_by(Booking.id)
        )

    def get_bookings_by_salon_id(self, salon_id):
        return self._list(
            select(Booking).where(Booking.salon_id == salon_id).order_by(Booking.id)
        )

    def get_bookings_by_service_id(self, service_id):
        return self._list(
            select(Booking).where(Booking.service_id == service_id).order_by(Booking.id)
        )

    def get_booking_by_id(self, booking_id):
        return self._get(Booking, booking_id)

    def create_booking(self, fields):
        booking = Booking(**fields)
        booking.status = booking.status or "pending"
        booking.payment_status = booking.payment_status or "pending"
        return self._insert(booking)

    def update_booking_status(self, booking_id, status):
        booking = self._get(Booking, booking_id)
        if booking is None:
            return None
        now = utc_now()
        booking.status = status
        booking.updated_at = now
        if status == "cancelled":
            booking.cancelled_at = now
        self.session.commit()
        return booking

    def cancel_booking(self, booking_id):
        return self.update_booking_status(booking_id, "cancelled")

    def expire_stale_pending_bookings(self, older_than):
        """Cancel pending bookings created before ``older_than``; returns the count."""
        stale = self._list(
            select(Booking).where(
                Booking.status == "pending", Booking.created_at < older_than
            )
        )
        now = utc_now()
        for booking in stale:
            booking.status = "cancelled"
            booking.cancelled_at = now
            booking.updated_at = now
        if stale:
            self.session.commit()
        return len(stale)

    # ------------------------------------------------------------------
    # reviews
    # ------------------------------------------------------------------
    def get_reviews_by_salon_id(self, salon_id, include_hidden=False):
        stmt = select(Review).where(Review.salon_id == salon_id)
        if not include_hidden:
            stmt = stmt.where(Review.is_hidden.is_(False))
        return self._list(stmt.order_by(Review.id))

    def get_reviews_by_user_id(self, user_id):
        return self._list(
            select(Review).where(Review.user_id == user_id).order_by(Review.id)
        )

    def get_review_by_id(self, review_id):
        return self._get(Review, review_id)

    def create_review(self, fields):
        review = Review(**fields)
        review.is_hidden = False
        self.session.add(review)

        booking = self._get(Booking, review.booking_id)
        if booking is not None:
            booking.is_rated = True

        self.session.commit()
        self.update_salon_rating(review.salon_id)
        return review

    def respond_to_review(self, review_id, response):
        return self._update(
            Review,
            review_id,
            {"owner_response": response, "owner_response_date": utc_now()},
        )

    def set_review_hidden(self, review_id, hidden):
        review = self._update(Review, review_id, {"is_hidden": hidden})
        if review is not None:
            self.update_salon_rating(review.salon_id)
        return review

    # ------------------------------------------------------------------
    # staff
    # ------------------------------------------------------------------
    def get_staff_by_salon_id(self, salon_id):
        return self._list(
            select(Staff).where(Staff.salon_id == salon_id).order_by(Staff.id)
        )

    def get_staff_by_id(self, staff_id):
        return self._get(Staff, staff_id)

    def create_staff(self, fields):
        return self._insert(Staff(**fields))

    def update_staff(self, staff_id, fields):
        return self._update(Staff, staff_id, fields)

    # ------------------------------------------------------------------
    # promotions
    # ------------------------------------------------------------------
    def get_promotions(self, is_active=None, salon_id=None):
        stmt = select(Promotion)
        if is_active is not None:
            stmt = stmt.where(Promotion.is_active.is_(is_active))
        if salon_id is not None:
            stmt = stmt.where(Promotion.salon_id == salon_id)
        return self._list(stmt.order_by(Promotion.id))

    def get_promotion_by_id(self, promotion_id):
        return self._get(Promotion, promotion_id)

    def get_promotion_by_code(self, code):
        return self.session.scalar(select(Promotion).where(Promotion.code == code))

    def create_promotion(self, fields):
        return self._insert(Promotion(**fields))

    def update_promotion(self, promotion_id, fields):
        return self._update(Promotion, promotion_id, fields)

    # ------------------------------------------------------------------
    # membership tiers
    # ------------------------------------------------------------------
    def get_membership_tiers(self):
        return self._list(
            select(MembershipTier).order_by(
                MembershipTier.points_threshold, MembershipTier.id
            )
        )

    def get_membership_tier_by_id(self, tier_id):
        return self._get(MembershipTier, tier_id)

    def get_membership_tier_by_points_threshold(self, points):
        """Highest tier whose threshold the given balance has reached."""
        return self.session.scalars(
            select(MembershipTier)
            .where(MembershipTier.points_threshold <= points)
            .order_by(MembershipTier.points_threshold.desc())
            .limit(1)
        ).first()

    def create_membership_tier(self, fields):
        return self._insert(MembershipTier(**fields))

    # ------------------------------------------------------------------
    # payments
    # ------------------------------------------------------------------
    def create_payment_transaction(self, fields):
        transaction = PaymentTransaction(**fields)
        self.session.add(transaction)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateTransactionError(fields.get("gateway_transaction_id")) from e
        return transaction

    def get_payment_transactions_by_user_id(self, user_id):
        return self._list(
            select(PaymentTransaction)
            .where(PaymentTransaction.user_id == user_id)
            .order_by(PaymentTransaction.id)
        )

    def get_payment_transactions_by_booking_id(self, booking_id):
        return self._list(
            select(PaymentTransaction)
            .where(PaymentTransaction.booking_id == booking_id)
            .order_by(PaymentTransaction.id)
        )

    def get_payment_transaction_by_gateway_id(self, gateway_transaction_id):
        return self.session.scalar(
            select(PaymentTransaction).where(
                PaymentTransaction.gateway_transaction_id == gateway_transaction_id
            )
        )

    def record_paid_booking(self, booking_fields, transaction_fields, loyalty_points):
        """
        Write a confirmed/paid booking, its payment transaction and the
        loyalty accrual as one unit. The transaction's gateway id is unique,
        so a second confirmation of the same payment rolls everything back
        and raises DuplicateTransactionError.
        """
        session = self.session
        try:
            booking = Booking(**booking_fields)
            booking.status = "confirmed"
            booking.payment_status = "paid"
            booking.loyalty_points_earned = loyalty_points
            session.add(booking)
            session.flush()

            transaction = PaymentTransaction(
                user_id=booking.user_id, booking_id=booking.id, **transaction_fields
            )
            session.add(transaction)
            session.flush()

            user = session.get(User, booking.user_id)
            if user is not None:
                user.loyalty_points = (user.loyalty_points or 0) + loyalty_points
                self._sync_membership(user)

            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise DuplicateTransactionError(
                transaction_fields.get("gateway_transaction_id")
            ) from e

        return booking, transaction
