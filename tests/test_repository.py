"""Generic repository behaviour, exercised through the real entity mappings."""

import pytest

from app.core.errors import IntegrityError, ValidationError
from app.models.content_models import Trip
from app.repository.base import ResourceRepository
from app.repository.registry import CERTIFICATES, DESTINATIONS, ENQUIRIES, TRIPS


def trip_payload(**overrides):
    payload = {
        "title": "Kyoto in Autumn",
        "location": "Kyoto, Japan",
        "duration": "6 days",
        "price": 1899.0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def trips(session):
    return ResourceRepository(TRIPS, session)


@pytest.fixture
def destinations(session):
    return ResourceRepository(DESTINATIONS, session)


@pytest.fixture
def enquiries(session):
    return ResourceRepository(ENQUIRIES, session)


class TestCreate:
    def test_missing_required_fields_are_listed(self, trips):
        with pytest.raises(ValidationError) as exc:
            trips.create({"title": "Nowhere", "location": "  "})
        assert exc.value.fields == ["location", "duration", "price"]

    def test_structured_fields_default_to_empty_lists(self, trips):
        trip = trips.create(trip_payload())
        for wire in ("gallery", "galleryPublicIds", "itinerary", "faq", "reviews"):
            assert trip[wire] == []

    def test_server_assigns_id_and_timestamps(self, trips):
        trip = trips.create(trip_payload())
        assert trip["id"] is not None
        assert trip["createdAt"] is not None
        assert trip["updatedAt"] is not None
        assert trip["status"] == "active"

    def test_slug_generated_from_title(self, trips):
        trip = trips.create(trip_payload(title="  Kyoto & Nara: Temples_Tour! "))
        assert trip["slug"] == "kyoto-nara-temples-tour"

    def test_duplicate_slug_is_a_validation_error(self, trips):
        trips.create(trip_payload())
        with pytest.raises(ValidationError):
            trips.create(trip_payload())

    def test_image_aliases_are_exposed(self, trips):
        trip = trips.create(trip_payload(imageUrl="https://cdn/x.jpg"))
        assert trip["image"] == trip["imageUrl"] == "https://cdn/x.jpg"
        assert trip["video"] is None

    def test_invalid_status_rejected(self, destinations):
        with pytest.raises(ValidationError):
            destinations.create({"name": "Kyoto", "status": "published"})

    def test_enquiry_defaults_and_email_normalised(self, enquiries):
        enquiry = enquiries.create({"name": "Ana", "email": "Ana@Example.COM"})
        assert enquiry["email"] == "ana@example.com"
        assert enquiry["numberOfTravelers"] == 1
        assert enquiry["status"] == "pending"


class TestFind:
    def test_find_by_id_missing_returns_none(self, trips):
        assert trips.find_by_id(999) is None

    def test_default_visibility_hides_drafts(self, destinations):
        destinations.create({"name": "Kyoto"})
        destinations.create({"name": "Osaka", "status": "draft"})

        assert [d["name"] for d in destinations.find_all({})] == ["Kyoto"]
        assert {d["name"] for d in destinations.find_all({"includeDraft": True})} == {
            "Kyoto",
            "Osaka",
        }

    def test_status_filter_is_exact(self, destinations):
        destinations.create({"name": "Kyoto"})
        destinations.create({"name": "Osaka", "status": "archived"})
        found = destinations.find_all({"status": "archived"})
        assert [d["name"] for d in found] == ["Osaka"]

    def test_most_recent_first(self, destinations):
        for name in ("first", "second", "third"):
            destinations.create({"name": name})
        assert [d["name"] for d in destinations.find_all()] == ["third", "second", "first"]

    def test_limit_and_offset(self, destinations):
        for name in ("a", "b", "c", "d"):
            destinations.create({"name": name})
        page = destinations.find_all({"limit": "2", "offset": "1"})
        assert [d["name"] for d in page] == ["c", "b"]

    def test_bad_limit_is_rejected(self, destinations):
        with pytest.raises(ValidationError):
            destinations.find_all({"limit": "lots"})

    def test_unrecognized_keys_ignored(self, destinations):
        destinations.create({"name": "Kyoto"})
        assert len(destinations.find_all({"colour": "blue", "sort": "name"})) == 1

    def test_location_filter_is_case_insensitive_substring(self, trips):
        trips.create(trip_payload())
        trips.create(trip_payload(title="Lisbon Lights", location="Lisbon, Portugal"))
        found = trips.find_all({"location": "kyoto"})
        assert [t["title"] for t in found] == ["Kyoto in Autumn"]

    def test_enquiries_have_no_default_visibility(self, enquiries):
        enquiries.create({"name": "Ana", "email": "ana@example.com", "tripId": 3})
        enquiries.create(
            {"name": "Ben", "email": "ben@example.com", "tripId": 4, "status": "booked"}
        )
        assert len(enquiries.find_all({})) == 2
        assert [e["name"] for e in enquiries.find_all({"tripId": "4"})] == ["Ben"]

    def test_find_one_by_slug_respects_visibility(self, trips):
        trips.create(trip_payload(status="draft"))
        assert trips.find_one("slug", "kyoto-in-autumn") is None
        assert trips.find_one("slug", "kyoto-in-autumn", include_draft=True) is not None

    def test_corrupt_row_is_an_integrity_error(self, session, trips):
        row = Trip(
            title="Broken",
            location="Nowhere",
            duration="1 day",
            price=1.0,
            slug="broken",
            gallery="{not json",
        )
        session.add(row)
        session.commit()
        with pytest.raises(IntegrityError):
            trips.find_by_id(row.id)


class TestUpdate:
    def test_status_only_update_leaves_other_fields_alone(self, trips):
        trip = trips.create(
            trip_payload(
                itinerary=[{"day": 1, "title": "Arrival"}],
                gallery=["https://cdn/1.jpg"],
                galleryPublicIds=["g1"],
            )
        )
        updated = trips.update(trip["id"], {"status": "draft"})

        assert updated["status"] == "draft"
        for key, value in trip.items():
            if key not in ("status", "updatedAt"):
                assert updated[key] == value, key

    def test_empty_list_clears_structured_field(self, trips):
        trip = trips.create(trip_payload(faq=[{"q": "Visa?", "a": "No"}]))
        assert trips.update(trip["id"], {"faq": []})["faq"] == []

    def test_absent_structured_field_untouched(self, trips):
        trip = trips.create(trip_payload(faq=[{"q": "Visa?", "a": "No"}]))
        assert trips.update(trip["id"], {"intro": "Hello"})["faq"] == trip["faq"]

    def test_no_recognized_fields_skips_write(self, trips):
        trip = trips.create(trip_payload())
        same = trips.update(trip["id"], {"unknown": 1, "createdBy": "99"})
        assert same == trip

    def test_missing_id_returns_none(self, trips):
        assert trips.update(404, {"status": "draft"}) is None

    def test_required_field_cannot_be_blanked(self, destinations):
        destination = destinations.create({"name": "Kyoto"})
        with pytest.raises(ValidationError):
            destinations.update(destination["id"], {"name": ""})

    def test_certificate_images_replaced(self, session):
        certificates = ResourceRepository(CERTIFICATES, session)
        cert = certificates.create(
            {"title": "IATA", "images": ["u1", "u2"], "imagesPublicIds": ["h1", "h2"]}
        )
        updated = certificates.update(
            cert["id"], {"images": ["u2"], "imagesPublicIds": ["h2"]}
        )
        assert updated["images"] == ["u2"]
        assert updated["imagesPublicIds"] == ["h2"]


class TestDelete:
    def test_returns_deleted_record(self, destinations):
        destination = destinations.create(
            {"name": "Kyoto", "image": "url1", "imagePublicId": "h1"}
        )
        deleted = destinations.delete(destination["id"])
        assert deleted["imagePublicId"] == "h1"
        assert destinations.find_by_id(destination["id"]) is None

    def test_missing_returns_none(self, destinations):
        assert destinations.delete(12345) is None
