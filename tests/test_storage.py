import datetime

import pytest

from salon_app.errors import DuplicateTransactionError
from salon_app.models import Booking, PaymentTransaction
from salon_app.storage import round_rating


def paid_booking_fields(**overrides):
    fields = {
        "user_id": 4,
        "salon_id": 1,
        "service_id": 1,
        "date": datetime.date(2025, 3, 1),
        "time": "11:00",
        "total_price": 150.0,
        "payment_method": "card",
    }
    fields.update(overrides)
    return fields


def transaction_fields(gateway_id):
    return {
        "amount": 150.0,
        "currency": "sar",
        "payment_method": "card",
        "status": "succeeded",
        "gateway": "stripe",
        "gateway_transaction_id": gateway_id,
    }


@pytest.mark.storage
class TestRatingRounding:
    @pytest.mark.parametrize(
        "value,expected",
        [(4.25, 4.3), (4.35, 4.4), (4.24, 4.2), (3.05, 3.1), (5, 5.0), (23 / 6, 3.8), (1.0, 1.0)],
    )
    def test_round_half_up(self, value, expected):
        assert round_rating(value) == expected

    def test_salon_without_reviews(self, storage):
        salon = storage.update_salon_rating(5)

        assert salon.rating == 0
        assert salon.review_count == 0

    def test_unknown_salon(self, storage):
        assert storage.update_salon_rating(999) is None

    def test_hidden_reviews_are_ignored(self, storage):
        storage.create_review({"user_id": 4, "salon_id": 3, "rating": 2})
        hidden = storage.create_review({"user_id": 5, "salon_id": 3, "rating": 5})

        storage.set_review_hidden(hidden.id, True)

        salon = storage.get_salon_by_id(3)
        assert salon.rating == 2.0
        assert salon.review_count == 1
        assert len(storage.get_reviews_by_salon_id(3)) == 1
        assert len(storage.get_reviews_by_salon_id(3, include_hidden=True)) == 2


@pytest.mark.storage
class TestSalonQueries:
    def test_no_filters(self, storage):
        assert [s.id for s in storage.get_salons()] == [1, 2, 3, 4, 5, 6, 7]

    def test_gender_alias(self, storage):
        salons = storage.get_salons({"gender": "female"})

        assert {s.gender for s in salons} == {"female_only", "both"}

    def test_combined_filters(self, storage):
        salons = storage.get_salons(
            {"city": "al-ahsa", "provides_home_service": True, "gender": "female_only"}
        )

        assert [s.name_en for s in salons] == ["Oasis Beauty Salon"]

    def test_owner_salons(self, storage):
        assert [s.id for s in storage.get_salons_by_owner_id(2)] == [1, 2]

    def test_update_salon_keeps_rating(self, storage):
        salon = storage.update_salon(1, {"rating": 5, "review_count": 40, "name_en": "Renamed"})

        assert salon.name_en == "Renamed"
        assert salon.rating == 0
        assert salon.review_count == 0


@pytest.mark.storage
class TestPaidBookings:
    def test_record_paid_booking(self, storage):
        booking, transaction = storage.record_paid_booking(
            paid_booking_fields(), transaction_fields("pi_1"), 10
        )

        assert booking.status == "confirmed"
        assert booking.payment_status == "paid"
        assert transaction.booking_id == booking.id
        assert transaction.user_id == 4
        assert storage.get_user(4).loyalty_points == 10
        assert storage.get_payment_transaction_by_gateway_id("pi_1").id == transaction.id

    def test_duplicate_rolls_back_everything(self, storage):
        storage.record_paid_booking(paid_booking_fields(), transaction_fields("pi_dup"), 10)

        with pytest.raises(DuplicateTransactionError):
            storage.record_paid_booking(
                paid_booking_fields(time="12:00"), transaction_fields("pi_dup"), 10
            )

        assert storage.session.query(Booking).count() == 1
        assert storage.session.query(PaymentTransaction).count() == 1
        assert storage.get_user(4).loyalty_points == 10

    def test_create_payment_transaction_duplicate(self, storage):
        fields = dict(transaction_fields("pi_single"), user_id=4)
        storage.create_payment_transaction(fields)

        with pytest.raises(DuplicateTransactionError):
            storage.create_payment_transaction(dict(fields))

        assert len(storage.get_payment_transactions_by_user_id(4)) == 1


@pytest.mark.storage
class TestMembership:
    @pytest.mark.parametrize(
        "points,expected", [(0, "Bronze"), (99, "Bronze"), (100, "Silver"), (299, "Silver"), (1000, "Gold")]
    )
    def test_tier_by_points(self, storage, points, expected):
        assert storage.get_membership_tier_by_points_threshold(points).name_en == expected

    def test_loyalty_points_move_user_up(self, storage):
        user = storage.update_user_loyalty_points(5, 120)

        assert user.loyalty_points == 120
        assert user.membership_type == "Silver"

        user = storage.update_user_loyalty_points(5, 200)
        assert user.membership_type == "Gold"

    def test_tiers_sorted_by_threshold(self, storage):
        storage.create_membership_tier(
            {"name": "ماسي", "name_en": "Diamond", "points_threshold": 50, "discount_percentage": 2}
        )

        assert [t.points_threshold for t in storage.get_membership_tiers()] == [0, 50, 100, 300]


@pytest.mark.storage
class TestStaleBookings:
    def test_expire_only_old_pending(self, storage):
        now = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
        old = storage.create_booking(paid_booking_fields())
        fresh = storage.create_booking(paid_booking_fields())
        confirmed = storage.create_booking(paid_booking_fields(status="confirmed"))
        for booking in (old, confirmed):
            booking.created_at = now - datetime.timedelta(hours=48)
        storage.session.commit()

        assert storage.expire_stale_pending_bookings(now - datetime.timedelta(hours=24)) == 1

        assert storage.get_booking_by_id(old.id).status == "cancelled"
        assert storage.get_booking_by_id(old.id).cancelled_at is not None
        assert storage.get_booking_by_id(fresh.id).status == "pending"
        assert storage.get_booking_by_id(confirmed.id).status == "confirmed"
