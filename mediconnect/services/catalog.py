"""
Catalog Service - Filtering and sorting of doctors, medicines and lab tests.

Every filter is a conjunction of independent predicates, so the order in
which predicates are applied never changes the result set. Sorting uses a
single key at a time and is stable: items that compare equal keep their
catalog order. Descending keys negate the value instead of passing
``reverse=True``, which would also reverse ties.
"""

from typing import Callable, Dict, Iterable, List, Sequence, TypeVar

from mediconnect.exceptions import ValidationError
from mediconnect.models.catalog import (
    Doctor,
    DoctorFilters,
    LabTest,
    LabTestFilters,
    Medicine,
    MedicineFilters,
)

T = TypeVar("T")
Predicate = Callable[[T], bool]


def contains_text(query: str, *fields: str) -> bool:
    """Case-insensitive substring match against any of the fields."""
    needle = query.lower()
    return any(needle in field.lower() for field in fields)


def apply_filters(items: Iterable[T], predicates: Sequence[Predicate]) -> List[T]:
    """Keep the items that pass every predicate, preserving order."""
    return [item for item in items if all(predicate(item) for predicate in predicates)]


# ============================================================================
# Doctors
# ============================================================================


def doctor_predicates(filters: DoctorFilters) -> List[Predicate]:
    """Build the active predicates for a doctor search."""
    predicates: List[Predicate] = []

    if filters.query:
        predicates.append(
            lambda d: contains_text(filters.query, d.name, d.specialty, d.city)
        )
    if filters.city:
        predicates.append(lambda d: d.city.lower() == filters.city.lower())
    if filters.specialty_id is not None:
        predicates.append(lambda d: d.specialty_id == filters.specialty_id)

    predicates.append(lambda d: filters.min_fee <= d.fees <= filters.max_fee)

    if filters.min_rating > 0:
        predicates.append(lambda d: d.rating >= filters.min_rating)
    if filters.availability == "today":
        predicates.append(lambda d: d.available_today)
    elif filters.availability == "tomorrow":
        predicates.append(lambda d: d.available_tomorrow)

    return predicates


DOCTOR_SORT_KEYS: Dict[str, Callable[[Doctor], float]] = {
    "rating": lambda d: -d.rating,
    "fees": lambda d: d.fees,
    "experience": lambda d: -d.years_experience,
}


def search_doctors(
    doctors: Iterable[Doctor], filters: DoctorFilters, sort_by: str = "rating"
) -> List[Doctor]:
    """
    Filter and sort doctors for the search page.

    Args:
        doctors: Full doctor catalog
        filters: Active search filters
        sort_by: One of 'rating', 'fees', 'experience'

    Returns:
        Matching doctors in display order
    """
    matches = apply_filters(doctors, doctor_predicates(filters))
    return sorted(matches, key=_sort_key(DOCTOR_SORT_KEYS, sort_by))


# ============================================================================
# Medicines
# ============================================================================


def medicine_predicates(filters: MedicineFilters) -> List[Predicate]:
    """Build the active predicates for the pharmacy listing."""
    predicates: List[Predicate] = []

    if filters.query:
        predicates.append(
            lambda m: contains_text(filters.query, m.name, m.generic_name, *m.uses)
        )
    if filters.category:
        predicates.append(lambda m: m.category == filters.category)
    if filters.prescription == "otc":
        predicates.append(lambda m: not m.prescription_required)
    elif filters.prescription == "rx":
        predicates.append(lambda m: m.prescription_required)

    return predicates


MEDICINE_SORT_KEYS: Dict[str, Callable[[Medicine], float]] = {
    "price_low": lambda m: m.effective_price,
    "price_high": lambda m: -m.effective_price,
    "rating": lambda m: -m.rating,
    "popularity": lambda m: -m.reviews_count,
}


def search_medicines(
    medicines: Iterable[Medicine], filters: MedicineFilters, sort_by: str = "popularity"
) -> List[Medicine]:
    """Filter and sort the pharmacy catalog."""
    matches = apply_filters(medicines, medicine_predicates(filters))
    return sorted(matches, key=_sort_key(MEDICINE_SORT_KEYS, sort_by))


# ============================================================================
# Lab tests
# ============================================================================


def lab_test_predicates(filters: LabTestFilters) -> List[Predicate]:
    """Build the active predicates for the lab test listing."""
    predicates: List[Predicate] = []

    if filters.query:
        predicates.append(
            lambda t: contains_text(filters.query, t.name, t.description, t.category)
        )
    if filters.category:
        predicates.append(lambda t: t.category == filters.category)

    return predicates


LAB_TEST_SORT_KEYS: Dict[str, Callable[[LabTest], object]] = {
    "price_low": lambda t: t.effective_price,
    "price_high": lambda t: -t.effective_price,
    "rating": lambda t: -t.rating,
    "report_time": lambda t: t.report_time,
    "popularity": lambda t: -t.reviews_count,
}


def search_lab_tests(
    tests: Iterable[LabTest], filters: LabTestFilters, sort_by: str = "popularity"
) -> List[LabTest]:
    """Filter and sort the lab test catalog."""
    matches = apply_filters(tests, lab_test_predicates(filters))
    return sorted(matches, key=_sort_key(LAB_TEST_SORT_KEYS, sort_by))


def _sort_key(keys: Dict[str, Callable], sort_by: str) -> Callable:
    if sort_by not in keys:
        raise ValidationError(f"Unknown sort key: {sort_by!r} (expected one of {sorted(keys)})")
    return keys[sort_by]
