"""
Tests for the catalog view flows.
"""

import pytest
from pydantic import ValidationError

from mediconnect.flows.catalog_view import (
    PRESCRIPTION_REQUIRED,
    DoctorSearchView,
    LabTestCatalogView,
    MedicineCatalogView,
)
from mediconnect.models.catalog import DoctorFilters, LabTest, Medicine


class TestDoctorSearchView:
    """Test the find-a-doctor page state."""

    def test_initial_results(self):
        view = DoctorSearchView()
        assert view.count == 8
        assert view.sort_by == "rating"
        assert view.results[0].id == "4"

    def test_set_filter_recomputes(self):
        view = DoctorSearchView()
        results = view.set_filter(city="Mumbai")
        assert [d.id for d in results] == ["1", "8"]
        assert view.count == 2

    def test_filter_updates_merge(self):
        view = DoctorSearchView()
        view.set_filter({"city": "Mumbai"})
        view.set_filter(availability="today", max_fee=500)
        assert [d.id for d in view.results] == ["8"]

    def test_set_filter_with_model_replaces(self):
        view = DoctorSearchView()
        view.set_filter(city="Mumbai")
        view.set_filter(DoctorFilters(specialty_id=3))
        assert view.filters.city is None
        assert [d.id for d in view.results] == ["3"]

    def test_invalid_filter_keeps_previous(self):
        view = DoctorSearchView()
        view.set_filter(city="Delhi")
        with pytest.raises(ValidationError):
            view.set_filter(min_fee=1500, max_fee=100)
        assert view.filters.city == "Delhi"
        assert [d.id for d in view.results] == ["2"]

    def test_set_sort(self):
        view = DoctorSearchView()
        view.set_sort("fees")
        assert view.results[0].fees == 400

    def test_unknown_sort_key(self):
        view = DoctorSearchView()
        with pytest.raises(ValueError):
            view.set_sort("distance")
        assert view.sort_by == "rating"

    def test_clear(self):
        view = DoctorSearchView()
        view.set_filter(city="Pune")
        view.set_sort("experience")
        view.clear()
        assert view.count == 8
        assert view.sort_by == "rating"


class TestMedicineCatalogView:
    """Test the pharmacy page and cart gating."""

    def test_otc_item_added(self):
        view = MedicineCatalogView()
        assert view.add_to_cart("1") is True
        assert view.cart[0].unit_price == 38
        assert view.cart_total == 38

    def test_repeat_add_increments_quantity(self):
        view = MedicineCatalogView()
        view.add_to_cart("4")
        view.add_to_cart("4")
        assert len(view.cart) == 1
        assert view.cart[0].quantity == 2
        assert view.cart_total == 160

    def test_prescription_required(self):
        view = MedicineCatalogView()
        assert view.add_to_cart("2") is False
        assert view.errors == [PRESCRIPTION_REQUIRED]
        assert view.cart == []

    def test_prescription_upload_unlocks(self):
        view = MedicineCatalogView()
        view.upload_prescription()
        assert view.add_to_cart("2") is True

    def test_unknown_medicine(self):
        view = MedicineCatalogView()
        assert view.add_to_cart("999") is False

    def test_custom_catalog(self):
        saline = Medicine(
            id="custom-1",
            name="Saline Nasal Spray",
            generic_name="Sodium chloride",
            manufacturer="Local Pharma",
            category="respiratory",
            prescription_required=False,
            price=120,
            discounted_price=99,
            rating=4.1,
            reviews_count=12,
        )
        view = MedicineCatalogView([saline])

        assert view.add_to_cart("custom-1") is True
        assert view.cart_total == 99
        # Items outside the view's own catalog are unknown to it
        assert view.add_to_cart("1") is False
        assert view.errors == ["Medicine not found"]

    def test_filter_and_sort(self):
        view = MedicineCatalogView()
        view.set_filter(prescription="otc")
        view.set_sort("price_low")
        assert [m.id for m in view.results] == ["1", "4", "5"]


class TestLabTestCatalogView:
    """Test the lab tests page."""

    def test_category_filter(self):
        view = LabTestCatalogView()
        view.set_filter(category="liver")
        assert [t.id for t in view.results] == ["5"]

    def test_all_category(self):
        view = LabTestCatalogView()
        view.set_filter(category="all")
        assert view.count == 7

    def test_book_test(self):
        view = LabTestCatalogView()
        assert view.add_to_cart("7") is True
        assert view.cart_total == 1999

    def test_custom_catalog(self):
        vitamin_panel = LabTest(
            id="custom-1",
            name="Vitamin Panel",
            category="vitamin",
            sample_type="Blood",
            report_time="24 hours",
            price=900,
            rating=4.4,
            reviews_count=30,
        )
        view = LabTestCatalogView([vitamin_panel])

        assert view.add_to_cart("custom-1") is True
        assert view.cart_total == 900
        assert view.add_to_cart("7") is False
        assert view.errors == ["Lab test not found"]
