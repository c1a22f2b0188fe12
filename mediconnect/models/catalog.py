"""
Catalog data models: doctors, medicines and lab tests, plus the
filter criteria the catalog views accept.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# Select boxes send this when no option is chosen
ALL_OPTION = "all"


def none_if_all(v):
    if v is None or (isinstance(v, str) and v.strip().lower() in ("", ALL_OPTION)):
        return None
    return v


class Specialty(BaseModel):
    id: int
    name: str
    icon: str = ""
    description: Optional[str] = None


class Doctor(BaseModel):
    """
    A doctor listed in search results and on the profile page.
    """

    id: str
    name: str
    specialty: str
    specialty_id: int
    years_experience: int = Field(ge=0)
    clinic_name: str
    city: str
    fees: int = Field(ge=0, description="Consultation fee in INR")
    rating: float = Field(ge=0, le=5)
    reviews_count: int = Field(ge=0)
    bio: str = ""
    profile_image: Optional[str] = None
    available_today: bool = False
    available_tomorrow: bool = False


class PricedItem(BaseModel):
    """Shared pricing for catalog items sold with an optional discount."""

    price: float = Field(ge=0)
    discounted_price: Optional[float] = Field(default=None, ge=0)

    @property
    def effective_price(self) -> float:
        """Discounted price when there is one, list price otherwise."""
        if self.discounted_price:
            return self.discounted_price
        return self.price


class Medicine(PricedItem):
    """
    A medicine sold in the online pharmacy.
    """

    id: str
    name: str
    generic_name: str
    manufacturer: str
    category: str
    prescription_required: bool
    description: str = ""
    dosage_forms: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    image_url: str = "/placeholder.svg"
    in_stock: bool = True
    rating: float = Field(ge=0, le=5)
    reviews_count: int = Field(ge=0)
    uses: List[str] = Field(default_factory=list)
    side_effects: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class LabTest(PricedItem):
    """
    A diagnostic test that can be ordered with home sample collection.
    """

    id: str
    name: str
    category: str
    description: str = ""
    preparation_required: bool = False
    preparation_instructions: List[str] = Field(default_factory=list)
    sample_type: str
    report_time: str
    rating: float = Field(ge=0, le=5)
    reviews_count: int = Field(ge=0)
    popular: bool = False


# ============================================================================
# Filter criteria
# ============================================================================

DoctorSortKey = Literal["rating", "fees", "experience"]
MedicineSortKey = Literal["popularity", "price_low", "price_high", "rating"]
LabTestSortKey = Literal["popularity", "price_low", "price_high", "rating", "report_time"]


class DoctorFilters(BaseModel):
    """Search page filters. Defaults match everything."""

    query: str = ""
    city: Optional[str] = None
    specialty_id: Optional[int] = None
    min_fee: int = Field(default=0, ge=0)
    max_fee: int = Field(default=2000, ge=0)
    min_rating: float = Field(default=0, ge=0, le=5)
    availability: Literal["any", "today", "tomorrow"] = "any"

    @field_validator("city", "specialty_id", mode="before")
    @classmethod
    def normalize_selects(cls, v):
        return none_if_all(v)

    @model_validator(mode="after")
    def check_fee_range(self) -> "DoctorFilters":
        if self.min_fee > self.max_fee:
            raise ValueError("min_fee must not exceed max_fee")
        return self


class MedicineFilters(BaseModel):
    """Pharmacy filters. `prescription` is 'otc', 'rx' or 'all'."""

    query: str = ""
    category: Optional[str] = None
    prescription: Literal["all", "otc", "rx"] = "all"

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return none_if_all(v)


class LabTestFilters(BaseModel):
    """Lab test filters."""

    query: str = ""
    category: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return none_if_all(v)
