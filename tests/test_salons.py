import itertools
import json

import pytest


def get_json(client, url, query=None):
    response = client.get(url, query_string=query)
    assert response.status_code == 200, response.data
    return json.loads(response.data)


@pytest.mark.salon
class TestSalons:
    """Test suite for salon browsing endpoints."""

    def test_list_all_salons(self, client):
        salons = get_json(client, "/api/salons")

        assert len(salons) == 7
        assert [s["id"] for s in salons] == sorted(s["id"] for s in salons)
        assert salons[0]["nameEn"] == "Beauty Touches Salon"
        assert salons[0]["categories"] == ["haircut", "makeup", "nails", "spa"]

    def test_filter_gender_includes_both(self, client):
        salons = get_json(client, "/api/salons?gender=male_only")

        assert {s["gender"] for s in salons} == {"male_only", "both"}
        assert "Areej Beauty Center" in [s["nameEn"] for s in salons]

    def test_filter_gender_shorthand(self, client):
        assert get_json(client, "/api/salons?gender=female") == get_json(
            client, "/api/salons?gender=female_only"
        )

    def test_filter_city_arabic_or_english(self, client):
        english = get_json(client, "/api/salons?city=riyadh")
        arabic = get_json(client, "/api/salons", {"city": "الرياض"})

        assert len(english) == 2
        assert english == arabic

    def test_filter_flag_only_when_true(self, client):
        everything = get_json(client, "/api/salons")
        assert get_json(client, "/api/salons?hasPrivateRooms=false") == everything

        with_rooms = get_json(client, "/api/salons?hasPrivateRooms=true")
        assert 0 < len(with_rooms) < len(everything)
        assert all(s["hasPrivateRooms"] for s in with_rooms)

    def test_filter_category(self, client):
        salons = get_json(client, "/api/salons?category=massage")

        assert {s["nameEn"] for s in salons} == {
            "Elegance Spa",
            "Baron Barber Shop",
            "Sidra Spa & Beauty",
        }

    def test_every_filter_combination_is_a_matching_subset(self, client):
        everything = get_json(client, "/api/salons")
        all_ids = {s["id"] for s in everything}

        options = {
            "gender": [None, "female_only", "male_only", "both"],
            "city": [None, "Riyadh", "الأحساء", "Dammam"],
            "hasPrivateRooms": [None, "true"],
            "hasFemaleStaffOnly": [None, "true"],
            "providesHomeService": [None, "true"],
            "category": [None, "haircut", "facial"],
        }
        names = list(options)

        for values in itertools.product(*(options[name] for name in names)):
            query = {name: value for name, value in zip(names, values) if value}
            result = get_json(client, "/api/salons", query)

            assert {s["id"] for s in result} <= all_ids
            for salon in result:
                if "gender" in query:
                    assert salon["gender"] in (query["gender"], "both")
                if "city" in query:
                    city = query["city"].lower()
                    assert city in (salon["city"].lower(), (salon["cityEn"] or "").lower())
                for flag in ("hasPrivateRooms", "hasFemaleStaffOnly", "providesHomeService"):
                    if flag in query:
                        assert salon[flag] is True
                if "category" in query:
                    assert query["category"] in salon["categories"]

    def test_get_salon(self, client):
        salon = get_json(client, "/api/salons/3")

        assert salon["nameEn"] == "Baron Barber Shop"
        assert salon["rating"] == 0
        assert salon["reviewCount"] == 0

    def test_get_salon_not_found(self, client):
        response = client.get("/api/salons/999")

        assert response.status_code == 404
        assert json.loads(response.data)["message"] == "الصالون غير موجود"


@pytest.mark.salon
class TestServices:
    def test_salon_services(self, client):
        services = get_json(client, "/api/salons/1/services")

        assert [s["nameEn"] for s in services] == [
            "Haircut",
            "Hair Coloring",
            "Evening Makeup",
            "Manicure",
            "Pedicure",
        ]

    def test_salon_services_by_category(self, client):
        services = get_json(client, "/api/salons/1/services?category=nails")

        assert [s["price"] for s in services] == [100, 120]

    def test_salon_services_availability(self, client):
        assert len(get_json(client, "/api/salons/1/services?isAvailable=true")) == 5
        assert get_json(client, "/api/salons/1/services?isAvailable=false") == []

    def test_featured_services(self, client):
        services = get_json(client, "/api/salons/3/featured-services")

        assert [s["nameEn"] for s in services] == ["Haircut and Styling", "Beard Shave"]
        assert all(s["featured"] for s in services)

    def test_get_service(self, client):
        service = get_json(client, "/api/services/7")

        assert service["nameEn"] == "Relaxing Massage"
        assert service["salonId"] == 2

    def test_get_service_not_found(self, client):
        assert client.get("/api/services/999").status_code == 404

    def test_promoted_services_empty(self, client):
        assert get_json(client, "/api/services/promoted") == []

    def test_salon_staff(self, client):
        staff = get_json(client, "/api/salons/1/staff")

        assert len(staff) == 2
        assert all(member["salonId"] == 1 for member in staff)

    def test_salon_promotions(self, client):
        promotions = get_json(client, "/api/salons/1/promotions")

        assert [p["code"] for p in promotions] == ["WELCOME20"]
        assert get_json(client, "/api/salons/2/promotions") == []


@pytest.mark.salon
class TestJsonErrors:
    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert json.loads(response.data)["message"] == "المورد غير موجود"

    def test_wrong_method(self, client):
        response = client.delete("/api/salons")

        assert response.status_code == 405

    def test_root(self, client):
        data = get_json(client, "/")

        assert data["status"] == "ok"
