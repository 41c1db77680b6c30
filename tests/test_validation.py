"""
Test suite for form validation.

Covers required fields, normalisation of raw form strings, date parsing,
booking sector rules and the guarantee that malformed input is reported
as field errors instead of raising.
"""

import json
from datetime import date

import pytest

from ticketdesk.models import (
    BookingStatus,
    BookingType,
    ErrorKind,
    SectorStatus,
    TaskStatus,
    TrackerError,
    ValidationFailed,
)
from ticketdesk.validation import (
    FORM_ERROR_KEY,
    read_form,
    validate_booking,
    validate_booking_update,
    validate_customer,
    validate_fare_class,
    validate_sector,
    validate_task,
)

SECTOR_ID = "2f1c1b8e-4a44-4b7b-9d0e-6a0d7cbd1f10"
OTHER_SECTOR_ID = "7d6b3c2a-1e4f-4c5d-8b9a-0f1e2d3c4b5a"
CUSTOMER_ID = "0b8f7c3e-2d1a-4e5f-9a6b-7c8d9e0f1a2b"


def sector(sector_id=SECTOR_ID, **overrides):
    data = {"predefined_sector_id": sector_id, "status": "Confirmed", "num_pax": "2"}
    data.update(overrides)
    return data


class TestCustomerValidation:
    """Test cases for customer form validation."""

    def test_valid_name_is_trimmed(self):
        """Test surrounding whitespace is stripped."""
        result = validate_customer({"company_name": "  Acme Air  "})

        assert result.ok
        assert result.value.company_name == "Acme Air"

    @pytest.mark.parametrize("form", [{}, {"company_name": ""}, {"company_name": "   "}, {"company_name": None}])
    def test_missing_name(self, form):
        """Test absent or blank names are rejected."""
        result = validate_customer(form)

        assert not result.ok
        assert result.errors["company_name"] == ["Company name is required"]

    def test_name_too_long(self):
        """Test the 255 character limit."""
        result = validate_customer({"company_name": "x" * 256})

        assert result.errors["company_name"] == ["Company name cannot exceed 255 characters."]

    def test_non_mapping_input_is_reported_not_raised(self):
        """Test non-dict input becomes field errors."""
        result = validate_customer(None)

        assert not result.ok
        assert "company_name" in result.errors

    def test_wrong_type_is_reported(self):
        """Test a non-string name is rejected."""
        result = validate_customer({"company_name": 42})

        assert result.errors["company_name"] == ["Company name is required"]


class TestFareClassValidation:
    """Test cases for fare class form validation."""

    def test_valid_fare_class(self):
        """Test a blank description is stored as None."""
        result = validate_fare_class({"name": "Business", "description": ""})

        assert result.ok
        assert result.value.name == "Business"
        assert result.value.description is None

    def test_name_required(self):
        """Test a blank name is rejected."""
        result = validate_fare_class({"name": " "})

        assert result.errors["name"] == ["Fare class name is required."]

    def test_name_length(self):
        """Test the 50 character limit."""
        result = validate_fare_class({"name": "n" * 51})

        assert result.errors["name"] == ["Name cannot exceed 50 characters."]

    def test_description_length(self):
        """Test the 255 character description limit."""
        result = validate_fare_class({"name": "Economy", "description": "d" * 256})

        assert result.errors["description"] == ["Description cannot exceed 255 characters."]


class TestSectorValidation:
    """Test cases for predefined sector form validation."""

    def test_codes_are_upper_cased(self):
        """Test codes are trimmed and upper-cased."""
        result = validate_sector({"origin_code": " sin ", "destination_code": "kul"})

        assert result.ok
        assert result.value.origin_code == "SIN"
        assert result.value.destination_code == "KUL"

    def test_short_codes(self):
        """Test codes under three characters."""
        result = validate_sector({"origin_code": "SI", "destination_code": ""})

        assert result.errors["origin_code"] == ["Origin code must be at least 3 characters"]
        assert result.errors["destination_code"] == ["Destination code must be at least 3 characters"]

    def test_long_code(self):
        """Test codes over ten characters."""
        result = validate_sector({"origin_code": "ABCDEFGHIJK", "destination_code": "KUL"})

        assert result.errors["origin_code"] == ["Origin code cannot exceed 10 characters"]


class TestTaskValidation:
    """Test cases for task form validation."""

    def test_minimal_task(self):
        """Test a task with only a title."""
        result = validate_task({"title": "Chase ticketing deadline"})

        assert result.ok
        assert result.value.due_date is None
        assert result.value.status is None
        assert result.value.booking_id is None

    def test_title_required(self):
        """Test a blank title is rejected."""
        result = validate_task({"title": ""})

        assert result.errors["title"] == ["Title is required."]

    @pytest.mark.parametrize("raw,expected", [
        ("2026-11-02", date(2026, 11, 2)),
        ("2026-11-02T10:30:00Z", date(2026, 11, 2)),
        ("2026-11-02T23:59:59+08:00", date(2026, 11, 2)),
        ("", None),
    ])
    def test_due_date_parsing(self, raw, expected):
        """Test dates and timestamps reduce to a calendar date."""
        result = validate_task({"title": "Call customer", "due_date": raw})

        assert result.ok
        assert result.value.due_date == expected

    @pytest.mark.parametrize("raw", ["2026-02-30", "tomorrow", "02/11/2026"])
    def test_invalid_due_date(self, raw):
        """Test unparseable due dates."""
        result = validate_task({"title": "Call customer", "due_date": raw})

        assert result.errors["due_date"] == ["Due date must be a valid date."]

    def test_status_choice(self):
        """Test status must be a known task status."""
        assert validate_task({"title": "t", "status": "In Progress"}).value.status == TaskStatus.IN_PROGRESS

        result = validate_task({"title": "t", "status": "Done"})
        assert result.errors["status"] == ["Status must be Pending, In Progress or Completed."]

    def test_all_errors_reported_together(self):
        """Test every failing field is reported at once."""
        result = validate_task({"title": "", "due_date": "nope", "description": "x" * 2001})

        assert set(result.errors) == {"title", "due_date", "description"}


class TestBookingValidation:
    """Test cases for new booking form validation."""

    def test_one_way_booking(self):
        """Test a valid one-way booking is normalised."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": " BK-001 ",
            "deadline": "2026-10-30",
            "sectors": [sector(fare_class_id="", flight_number="MH 602", travel_date="2026-11-02")],
        })

        assert result.ok
        booking = result.value
        assert booking.booking_type == BookingType.ONE_WAY
        assert booking.booking_reference == "BK-001"
        assert booking.deadline == date(2026, 10, 30)
        assert booking.sectors[0].status == SectorStatus.CONFIRMED
        assert booking.sectors[0].num_pax == 2
        assert booking.sectors[0].fare_class_id is None

    def test_sectors_from_json_field(self):
        """Test sectors read from the JSON form field."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "Return",
            "booking_reference": "BK-002",
            "sectors_json": json.dumps([sector(), sector(OTHER_SECTOR_ID, status="Waiting List")]),
        })

        assert result.ok
        assert [s.status for s in result.value.sectors] == [SectorStatus.CONFIRMED, SectorStatus.WAITING_LIST]

    def test_sector_count_must_match_type(self):
        """Test sector counts for each booking type."""
        one_way = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": "BK-003",
            "sectors": [sector(), sector(OTHER_SECTOR_ID)],
        })
        ret = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "Return",
            "booking_reference": "BK-004",
            "sectors": [sector()],
        })

        assert one_way.errors["sectors"] == ["One-Way bookings must have exactly one sector."]
        assert ret.errors["sectors"] == ["Return bookings must have exactly two sectors."]

    def test_sectors_required(self):
        """Test an empty sector list is rejected."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": "BK-005",
            "sectors_json": "[]",
        })

        assert result.errors["sectors"] == ["At least one sector is required."]

    def test_unreadable_sectors(self):
        """Test malformed sector JSON is a field error."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": "BK-006",
            "sectors_json": "{not json",
        })

        assert result.errors["sectors"] == ["Sectors could not be read."]

    def test_nested_sector_errors_are_keyed_by_position(self):
        """Test sector errors are keyed by index."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": "BK-007",
            "sectors": [sector(predefined_sector_id="not-a-uuid", num_pax="1000", status="")],
        })

        assert result.errors["sectors.0.predefined_sector_id"] == ["Please select a valid sector."]
        assert result.errors["sectors.0.num_pax"] == ["Maximum 999 passengers."]
        assert result.errors["sectors.0.status"] == ["Sector status is required."]

    @pytest.mark.parametrize("num_pax,expected", [
        ("0", None),
        ("-1", ["Passenger count cannot be negative."]),
        ("-99999999999999999999", ["Passenger count cannot be negative."]),
        ("99999999999999999999", ["Maximum 999 passengers."]),
    ])
    def test_passenger_count_bounds(self, num_pax, expected):
        """Test passenger counts outside zero to 999 are field errors."""
        result = validate_booking({
            "customer_id": CUSTOMER_ID,
            "booking_type": "One-Way",
            "booking_reference": "BK-008",
            "sectors": [sector(num_pax=num_pax)],
        })

        if expected is None:
            assert result.ok
            assert result.value.sectors[0].num_pax == 0
        else:
            assert result.errors["sectors.0.num_pax"] == expected

    def test_required_booking_fields(self):
        """Test every required booking field is reported."""
        result = validate_booking({})

        assert result.errors["customer_id"] == ["Please select a valid customer."]
        assert result.errors["booking_type"] == ["Booking type is required."]
        assert result.errors["booking_reference"] == ["Booking reference is required."]
        assert result.errors["sectors"] == ["At least one sector is required."]


class TestBookingUpdateValidation:
    """Test cases for booking edit form validation."""

    def test_valid_update(self):
        """Test a valid booking edit."""
        result = validate_booking_update({
            "booking_reference": "BK-001",
            "customer_id": CUSTOMER_ID,
            "status": "Ticketed",
            "deadline": "",
        })

        assert result.ok
        assert result.value.status == BookingStatus.TICKETED
        assert result.value.deadline is None

    def test_status_required(self):
        """Test status is required on edit."""
        result = validate_booking_update({"booking_reference": "BK-001", "customer_id": CUSTOMER_ID})

        assert result.errors["status"] == ["Booking status is required for update."]


class TestReadForm:
    """Test cases for picking fields out of raw form input."""

    def test_absent_fields_become_none(self):
        """Test missing fields are filled with None."""
        assert read_form({"a": "1"}, ["a", "b"]) == {"a": "1", "b": None}

    def test_alias_used_when_field_missing(self):
        """Test the alias supplies a missing field."""
        assert read_form({"sectors_json": "[]"}, ["sectors"], {"sectors": "sectors_json"}) == {"sectors": "[]"}

    def test_form_error_key(self):
        """Test the key used for form-level errors."""
        assert FORM_ERROR_KEY == "_form"


class TestValidationFailed:
    """Test cases for the validation exception."""

    def test_carries_field_errors(self):
        """Test the exception carries its field errors."""
        exc = ValidationFailed({"title": ["Title is required."]})

        assert isinstance(exc, TrackerError)
        assert exc.kind == ErrorKind.VALIDATION
        assert exc.errors == {"title": ["Title is required."]}
        assert exc.to_failure().message == "Validation failed"
