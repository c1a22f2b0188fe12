"""
Patient data models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from mediconnect.validation import normalize_phone, validate_phone


class PatientDetails(BaseModel):
    """
    Patient details collected during the booking process.

    Both fields start empty and are filled in while the wizard is on the
    patient details step; nothing here rejects partial input, the
    wizard decides when the details are complete.
    """

    name: str = Field(default="", description="Patient's full name")
    phone: str = Field(default="", description="Patient's phone number as typed")

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: Optional[str]) -> str:
        """Strip surrounding whitespace, keep internal formatting."""
        if v is None:
            return ""
        return v.strip()

    @property
    def normalized_phone(self) -> str:
        """Phone number reduced to its digits."""
        return normalize_phone(self.phone)

    @property
    def has_valid_phone(self) -> bool:
        """Whether the phone is a valid Indian mobile number."""
        return validate_phone(self.phone)

    @property
    def is_complete(self) -> bool:
        """Name present and phone valid."""
        return bool(self.name) and self.has_valid_phone

    model_config = {"validate_assignment": True}


class Patient(BaseModel):
    """
    Patient record as stored in the backend `patients` table.
    """

    id: str
    user_id: str
    full_name: str
    age: Optional[int] = Field(default=None, ge=0, le=150)
    gender: Optional[str] = None
    phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_conditions: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def matches(self, search: str) -> bool:
        """Case-insensitive match on full name or medical conditions."""
        needle = search.lower()
        if needle in self.full_name.lower():
            return True
        return bool(self.medical_conditions) and needle in self.medical_conditions.lower()
