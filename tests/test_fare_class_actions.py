"""
Test suite for the fare class actions.
"""

from ticketdesk.actions import (
    add_booking,
    add_fare_class,
    delete_fare_class,
    get_fare_class_by_id,
    list_fare_classes,
    update_fare_class,
)
from ticketdesk.models import SortSpec, ViewName

from tests.conftest import sector_form


class TestFareClassActions:
    """Test cases for fare class CRUD."""

    def test_add_returns_id(self, ctx, invalidations):
        """Test adding a fare class returns its ID."""
        state = add_fare_class(ctx, {"name": "Business", "description": "Lie-flat seats"})

        assert state.message == "Successfully added fare class"
        assert state.invalidated == (ViewName.FARES,)
        fare_class = get_fare_class_by_id(ctx, state.record_id)
        assert fare_class.name == "Business"
        assert fare_class.description == "Lie-flat seats"

    def test_add_requires_name(self, ctx, store):
        """Test a blank name is rejected before the store."""
        state = add_fare_class(ctx, {"name": ""})

        assert state.errors == {"name": ["Fare class name is required."]}
        assert store.count("fare_classes").data == 0

    def test_duplicate_name_any_case(self, ctx, fare_class_id, invalidations):
        """Test names are unique regardless of case."""
        invalidations.clear()

        state = add_fare_class(ctx, {"name": "ECONOMY"})

        assert state.errors == {"name": ["This fare class name is already taken."]}
        assert invalidations == []

    def test_rename_onto_another_name(self, ctx, fare_class_id):
        """Test renaming onto an existing name is rejected."""
        other = add_fare_class(ctx, {"name": "Business"})

        state = update_fare_class(ctx, other.record_id, {"name": "economy"})

        assert state.errors == {"name": ["Another fare class with this name already exists."]}

    def test_update_keeping_own_name(self, ctx, fare_class_id):
        """Test an update may keep the record's own name."""
        state = update_fare_class(ctx, fare_class_id, {"name": "Economy", "description": "Saver fares"})

        assert state.message == "Successfully updated fare class"
        assert state.record_id == fare_class_id
        assert get_fare_class_by_id(ctx, fare_class_id).description == "Saver fares"

    def test_delete_unused(self, ctx, fare_class_id):
        """Test deleting a fare class nothing uses."""
        assert delete_fare_class(ctx, fare_class_id).message == "Successfully deleted fare class"
        assert list_fare_classes(ctx) == []

    def test_delete_linked_to_booking_sector(self, ctx, customer_id, sector_ids, fare_class_id):
        """Test a fare class used by a sector cannot be deleted."""
        add_booking(ctx, {
            "customer_id": customer_id,
            "booking_type": "One-Way",
            "booking_reference": "BK-001",
            "sectors": [sector_form(sector_ids[0], fare_class_id=fare_class_id)],
        })

        state = delete_fare_class(ctx, fare_class_id)

        assert state.message == "Database Error: Cannot delete fare class as it is linked to booking sectors."
        assert get_fare_class_by_id(ctx, fare_class_id) is not None

    def test_missing_ids(self, ctx):
        """Test update and delete without an ID."""
        assert update_fare_class(ctx, "", {"name": "x"}).message == "Error: Missing fare class ID for update."
        assert delete_fare_class(ctx, "").message == "Error: Missing fare class ID for delete."

    def test_list_alphabetical(self, ctx):
        """Test listing by name in both directions."""
        for name in ["First", "Economy", "Business"]:
            add_fare_class(ctx, {"name": name})

        assert [f.name for f in list_fare_classes(ctx)] == ["Business", "Economy", "First"]
        assert [f.name for f in list_fare_classes(ctx, SortSpec(sort_by="name", ascending=False))] == [
            "First", "Economy", "Business",
        ]

    def test_list_ignores_case(self, ctx):
        """Test names are ordered without regard to case."""
        for name in ["economy", "Business", "First"]:
            add_fare_class(ctx, {"name": name})

        assert [f.name for f in list_fare_classes(ctx)] == ["Business", "economy", "First"]
        assert [f.name for f in list_fare_classes(ctx, SortSpec(sort_by="name", ascending=False))] == [
            "First", "economy", "Business",
        ]
