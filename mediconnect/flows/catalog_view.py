"""
Catalog Views - Search pages for doctors, medicines and lab tests.

Each view keeps the active filter criteria and sort key and recomputes its
results synchronously whenever either changes.
"""

from typing import Callable, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel

from mediconnect.catalog_data import DOCTORS, LAB_TESTS, MEDICINES
from mediconnect.exceptions import ValidationError
from mediconnect.flows.base import BaseFlow
from mediconnect.models.catalog import (
    Doctor,
    DoctorFilters,
    LabTest,
    LabTestFilters,
    Medicine,
    MedicineFilters,
)
from mediconnect.services.catalog import (
    DOCTOR_SORT_KEYS,
    LAB_TEST_SORT_KEYS,
    MEDICINE_SORT_KEYS,
    search_doctors,
    search_lab_tests,
    search_medicines,
)

ItemT = TypeVar("ItemT", bound=BaseModel)
FiltersT = TypeVar("FiltersT", bound=BaseModel)

PRESCRIPTION_REQUIRED = "Prescription Required"


class CatalogView(BaseFlow, Generic[ItemT, FiltersT]):
    """
    Filterable, sortable listing over a fixed catalog.

    Subclasses set the filter model, the search function and the sort keys.
    """

    filters_model: Type[FiltersT]
    sort_keys: dict
    default_sort: str

    def __init__(
        self,
        items: Sequence[ItemT],
        search: Callable[[Sequence[ItemT], FiltersT, str], List[ItemT]],
    ):
        super().__init__()
        self._items = list(items)
        self._search = search
        self.filters: FiltersT = self.filters_model()
        self.sort_by = self.default_sort
        self.results: List[ItemT] = []
        self._recompute()

    @property
    def count(self) -> int:
        return len(self.results)

    def find(self, item_id: str) -> Optional[ItemT]:
        """Look up an item of this catalog by ID, ignoring the current filters."""
        return next((item for item in self._items if item.id == item_id), None)

    def set_filter(self, criteria: Union[FiltersT, dict, None] = None, **changes) -> List[ItemT]:
        """
        Replace or update the filter criteria.

        Args:
            criteria: A full filter model, or a dict of fields to change
            **changes: Individual fields to change

        Raises:
            pydantic.ValidationError: If the resulting criteria are invalid;
                the previous criteria stay in effect
        """
        if isinstance(criteria, self.filters_model):
            updated = criteria
        else:
            merged = {**self.filters.model_dump(), **(criteria or {}), **changes}
            updated = self.filters_model(**merged)
        self.filters = updated
        return self._recompute()

    def set_sort(self, sort_by: str) -> List[ItemT]:
        """
        Change the sort key.

        Raises:
            ValidationError: If the key is not one this catalog supports
        """
        if sort_by not in self.sort_keys:
            raise ValidationError(f"Unknown sort key: {sort_by!r} (expected one of {sorted(self.sort_keys)})")
        self.sort_by = sort_by
        return self._recompute()

    def clear(self) -> List[ItemT]:
        """Reset filters and sort to their defaults."""
        self.filters = self.filters_model()
        self.sort_by = self.default_sort
        return self._recompute()

    def _recompute(self) -> List[ItemT]:
        self.results = self._search(self._items, self.filters, self.sort_by)
        self.log_action("results_updated", {"count": len(self.results), "sort_by": self.sort_by})
        return self.results


class DoctorSearchView(CatalogView[Doctor, DoctorFilters]):
    """Find-a-doctor page."""

    filters_model = DoctorFilters
    sort_keys = DOCTOR_SORT_KEYS
    default_sort = "rating"

    def __init__(self, doctors: Optional[Sequence[Doctor]] = None):
        super().__init__(DOCTORS if doctors is None else doctors, search_doctors)


class CartItem(BaseModel):
    """A line in the pharmacy or lab-test cart."""

    item_id: str
    name: str
    unit_price: float
    quantity: int = 1

    @property
    def total(self) -> float:
        return self.unit_price * self.quantity


class _CartMixin:
    """Cart state shared by the pharmacy and lab-test pages."""

    cart: List[CartItem]

    def _add_line(self, item_id: str, name: str, unit_price: float) -> CartItem:
        for line in self.cart:
            if line.item_id == item_id:
                line.quantity += 1
                return line
        line = CartItem(item_id=item_id, name=name, unit_price=unit_price)
        self.cart.append(line)
        return line

    @property
    def cart_total(self) -> float:
        return sum(line.total for line in self.cart)


class MedicineCatalogView(_CartMixin, CatalogView[Medicine, MedicineFilters]):
    """Online pharmacy page."""

    filters_model = MedicineFilters
    sort_keys = MEDICINE_SORT_KEYS
    default_sort = "popularity"

    def __init__(self, medicines: Optional[Sequence[Medicine]] = None):
        super().__init__(MEDICINES if medicines is None else medicines, search_medicines)
        self.cart: List[CartItem] = []
        self.prescription_uploaded = False

    def upload_prescription(self) -> None:
        """Record that the patient has attached a prescription."""
        self.prescription_uploaded = True
        self.log_action("prescription_uploaded")

    def add_to_cart(self, medicine_id: str) -> bool:
        """
        Add a medicine to the cart.

        Prescription-only medicines are rejected until a prescription
        has been uploaded, as are unknown or out-of-stock items.
        """
        self.clear_errors()
        medicine = self.find(medicine_id)
        if medicine is None:
            return self.fail("Medicine not found")
        if not medicine.in_stock:
            return self.fail("Out of stock")
        if medicine.prescription_required and not self.prescription_uploaded:
            return self.fail(PRESCRIPTION_REQUIRED)

        self._add_line(medicine.id, medicine.name, medicine.effective_price)
        self.notify(f"{medicine.name} added to cart")
        return True


class LabTestCatalogView(_CartMixin, CatalogView[LabTest, LabTestFilters]):
    """Lab tests page."""

    filters_model = LabTestFilters
    sort_keys = LAB_TEST_SORT_KEYS
    default_sort = "popularity"

    def __init__(self, tests: Optional[Sequence[LabTest]] = None):
        super().__init__(LAB_TESTS if tests is None else tests, search_lab_tests)
        self.cart: List[CartItem] = []

    def add_to_cart(self, test_id: str) -> bool:
        """Book a test for home sample collection."""
        self.clear_errors()
        test = self.find(test_id)
        if test is None:
            return self.fail("Lab test not found")

        self._add_line(test.id, test.name, test.effective_price)
        self.notify(f"{test.name} added to cart")
        return True
