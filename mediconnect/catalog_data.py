"""
Static catalog data for doctors, medicines and lab tests.

Loaded once at startup; catalog views filter and sort these lists
in memory.
"""

from typing import List

from mediconnect.models.catalog import Doctor, LabTest, Medicine, Specialty

CITIES: List[str] = [
    "Mumbai",
    "Delhi",
    "Bangalore",
    "Chennai",
    "Hyderabad",
    "Pune",
    "Kolkata",
]

SPECIALTIES: List[Specialty] = [
    Specialty(id=1, name="General Physician", icon="stethoscope"),
    Specialty(id=2, name="Cardiologist", icon="heart"),
    Specialty(id=3, name="Dermatologist", icon="sparkles"),
    Specialty(id=4, name="Pediatrician", icon="baby"),
    Specialty(id=5, name="Orthopedic", icon="bone"),
    Specialty(id=6, name="Gynecologist", icon="user"),
    Specialty(id=7, name="Neurologist", icon="brain"),
    Specialty(id=8, name="Dentist", icon="smile"),
]

DOCTORS: List[Doctor] = [
    Doctor(
        id="1",
        name="Priya Sharma",
        specialty="Cardiologist",
        specialty_id=2,
        years_experience=15,
        clinic_name="Heart Care Clinic",
        city="Mumbai",
        fees=800,
        rating=4.8,
        reviews_count=342,
        bio="Interventional cardiologist focused on preventive heart care.",
        available_today=True,
        available_tomorrow=True,
    ),
    Doctor(
        id="2",
        name="Rajesh Kumar",
        specialty="General Physician",
        specialty_id=1,
        years_experience=12,
        clinic_name="City Health Centre",
        city="Delhi",
        fees=500,
        rating=4.6,
        reviews_count=518,
        bio="Family medicine, diabetes and hypertension management.",
        available_today=True,
        available_tomorrow=False,
    ),
    Doctor(
        id="3",
        name="Ananya Iyer",
        specialty="Dermatologist",
        specialty_id=3,
        years_experience=9,
        clinic_name="Skin & Glow Clinic",
        city="Chennai",
        fees=700,
        rating=4.7,
        reviews_count=276,
        bio="Clinical and cosmetic dermatology.",
        available_today=False,
        available_tomorrow=True,
    ),
    Doctor(
        id="4",
        name="Vikram Reddy",
        specialty="Orthopedic",
        specialty_id=5,
        years_experience=20,
        clinic_name="Bone & Joint Hospital",
        city="Hyderabad",
        fees=1000,
        rating=4.9,
        reviews_count=611,
        bio="Joint replacement and sports injuries.",
        available_today=False,
        available_tomorrow=False,
    ),
    Doctor(
        id="5",
        name="Meera Nair",
        specialty="Pediatrician",
        specialty_id=4,
        years_experience=11,
        clinic_name="Little Steps Children's Clinic",
        city="Bangalore",
        fees=600,
        rating=4.8,
        reviews_count=389,
        bio="Newborn care, vaccinations and child development.",
        available_today=True,
        available_tomorrow=True,
    ),
    Doctor(
        id="6",
        name="Arjun Mehta",
        specialty="Neurologist",
        specialty_id=7,
        years_experience=17,
        clinic_name="NeuroCare Institute",
        city="Pune",
        fees=1200,
        rating=4.5,
        reviews_count=198,
        bio="Headache, epilepsy and stroke rehabilitation.",
        available_today=False,
        available_tomorrow=True,
    ),
    Doctor(
        id="7",
        name="Sneha Banerjee",
        specialty="Gynecologist",
        specialty_id=6,
        years_experience=14,
        clinic_name="Women's Wellness Centre",
        city="Kolkata",
        fees=900,
        rating=4.7,
        reviews_count=455,
        bio="Pregnancy care and women's health.",
        available_today=True,
        available_tomorrow=False,
    ),
    Doctor(
        id="8",
        name="Karan Singh",
        specialty="Dentist",
        specialty_id=8,
        years_experience=8,
        clinic_name="Smile Dental Studio",
        city="Mumbai",
        fees=400,
        rating=4.6,
        reviews_count=231,
        bio="Root canals, implants and cosmetic dentistry.",
        available_today=True,
        available_tomorrow=True,
    ),
]

MEDICINE_CATEGORIES: List[dict] = [
    {"id": "analgesics", "name": "Pain Relief"},
    {"id": "antibiotics", "name": "Antibiotics"},
    {"id": "antidiabetic", "name": "Diabetes Care"},
    {"id": "cardiovascular", "name": "Heart Health"},
    {"id": "respiratory", "name": "Respiratory"},
    {"id": "digestive", "name": "Digestive Health"},
    {"id": "vitamins", "name": "Vitamins & Supplements"},
    {"id": "skincare", "name": "Skin Care"},
    {"id": "baby", "name": "Baby Care"},
    {"id": "women", "name": "Women's Health"},
]

LAB_TEST_CATEGORIES: List[dict] = [
    {"id": "blood", "name": "Blood Tests"},
    {"id": "diabetes", "name": "Diabetes Tests"},
    {"id": "heart", "name": "Heart Health"},
    {"id": "liver", "name": "Liver Function"},
    {"id": "kidney", "name": "Kidney Function"},
    {"id": "thyroid", "name": "Thyroid Tests"},
    {"id": "vitamin", "name": "Vitamin Tests"},
    {"id": "infection", "name": "Infection Tests"},
    {"id": "cancer", "name": "Cancer Screening"},
    {"id": "comprehensive", "name": "Full Body Checkup"},
]

MEDICINES: List[Medicine] = [
    Medicine(
        id="1",
        name="Paracetamol 500mg",
        generic_name="Paracetamol",
        price=45,
        discounted_price=38,
        manufacturer="Cipla Ltd",
        category="analgesics",
        prescription_required=False,
        description="Effective pain reliever and fever reducer suitable for headaches, body aches, and fever.",
        dosage_forms=["Tablet", "Syrup"],
        strengths=["500mg", "650mg"],
        rating=4.5,
        reviews_count=1250,
        uses=["Headache", "Fever", "Body pain", "Toothache"],
        side_effects=["Nausea", "Allergic reactions (rare)"],
        warnings=["Do not exceed recommended dose", "Consult doctor if symptoms persist"],
    ),
    Medicine(
        id="2",
        name="Azithromycin 500mg",
        generic_name="Azithromycin",
        price=180,
        discounted_price=155,
        manufacturer="Sun Pharma",
        category="antibiotics",
        prescription_required=True,
        description="Broad-spectrum antibiotic for bacterial infections.",
        dosage_forms=["Tablet", "Suspension"],
        strengths=["250mg", "500mg"],
        rating=4.3,
        reviews_count=890,
        uses=["Respiratory infections", "Skin infections", "Throat infections"],
        side_effects=["Stomach upset", "Diarrhea", "Dizziness"],
        warnings=["Complete full course", "Prescription required", "Not for viral infections"],
    ),
    Medicine(
        id="3",
        name="Metformin 500mg",
        generic_name="Metformin Hydrochloride",
        price=65,
        discounted_price=55,
        manufacturer="Abbott",
        category="antidiabetic",
        prescription_required=True,
        description="First-line medication for type 2 diabetes management.",
        dosage_forms=["Tablet", "Extended Release"],
        strengths=["500mg", "850mg", "1000mg"],
        rating=4.4,
        reviews_count=2100,
        uses=["Type 2 diabetes", "PCOS", "Pre-diabetes"],
        side_effects=["Nausea", "Diarrhea", "Metallic taste"],
        warnings=["Monitor kidney function", "Take with meals", "Prescription required"],
    ),
    Medicine(
        id="4",
        name="Omeprazole 20mg",
        generic_name="Omeprazole",
        price=95,
        discounted_price=80,
        manufacturer="Dr. Reddy's",
        category="digestive",
        prescription_required=False,
        description="Proton pump inhibitor for acid reflux and ulcers.",
        dosage_forms=["Capsule", "Tablet"],
        strengths=["20mg", "40mg"],
        rating=4.6,
        reviews_count=1560,
        uses=["Acid reflux", "Gastric ulcers", "GERD", "Heartburn"],
        side_effects=["Headache", "Stomach pain", "Diarrhea"],
        warnings=["Long-term use requires medical supervision", "Take before meals"],
    ),
    Medicine(
        id="5",
        name="Vitamin D3 60K IU",
        generic_name="Cholecalciferol",
        price=120,
        discounted_price=105,
        manufacturer="Mankind Pharma",
        category="vitamins",
        prescription_required=False,
        description="High-strength Vitamin D supplement for bone health.",
        dosage_forms=["Capsule", "Oral Solution"],
        strengths=["60000 IU"],
        rating=4.7,
        reviews_count=3200,
        uses=["Vitamin D deficiency", "Bone health", "Immunity support"],
        side_effects=["Nausea", "Vomiting", "Weakness (with overdose)"],
        warnings=["Do not exceed recommended dose", "Get blood levels checked"],
    ),
]

LAB_TESTS: List[LabTest] = [
    LabTest(
        id="1",
        name="Complete Blood Count (CBC)",
        category="blood",
        price=400,
        discounted_price=320,
        description="Comprehensive blood test to check overall health and detect various disorders.",
        sample_type="Blood",
        report_time="4-6 hours",
        rating=4.8,
        reviews_count=5200,
        popular=True,
    ),
    LabTest(
        id="2",
        name="HbA1c (Diabetes Test)",
        category="diabetes",
        price=550,
        discounted_price=450,
        description="Measures average blood sugar levels over the past 2-3 months.",
        sample_type="Blood",
        report_time="6-8 hours",
        rating=4.7,
        reviews_count=3100,
        popular=True,
    ),
    LabTest(
        id="3",
        name="Lipid Profile",
        category="heart",
        price=650,
        discounted_price=520,
        description="Measures cholesterol and triglycerides to assess heart disease risk.",
        preparation_required=True,
        preparation_instructions=["Fast for 12-14 hours", "Only water allowed", "Take medicines as usual"],
        sample_type="Blood",
        report_time="6-8 hours",
        rating=4.6,
        reviews_count=2800,
        popular=True,
    ),
    LabTest(
        id="4",
        name="Thyroid Function Test (TSH, T3, T4)",
        category="thyroid",
        price=800,
        discounted_price=650,
        description="Complete thyroid function evaluation including TSH, T3, and T4 levels.",
        sample_type="Blood",
        report_time="8-12 hours",
        rating=4.7,
        reviews_count=2200,
        popular=True,
    ),
    LabTest(
        id="5",
        name="Liver Function Test (LFT)",
        category="liver",
        price=700,
        discounted_price=560,
        description="Measures liver enzymes and proteins to assess liver health.",
        preparation_required=True,
        preparation_instructions=["Fast for 8-10 hours", "Avoid alcohol 24 hours prior"],
        sample_type="Blood",
        report_time="6-8 hours",
        rating=4.5,
        reviews_count=1900,
    ),
    LabTest(
        id="6",
        name="Vitamin D Test",
        category="vitamin",
        price=1200,
        discounted_price=950,
        description="Measures 25-hydroxy vitamin D levels to detect deficiency.",
        sample_type="Blood",
        report_time="12-24 hours",
        rating=4.6,
        reviews_count=1600,
    ),
    LabTest(
        id="7",
        name="Full Body Health Checkup",
        category="comprehensive",
        price=2500,
        discounted_price=1999,
        description=(
            "Comprehensive health screening with 60+ tests including CBC, diabetes, "
            "heart, liver, kidney, and vitamin tests."
        ),
        preparation_required=True,
        preparation_instructions=[
            "Fast for 12 hours",
            "Bring first morning urine sample",
            "Avoid vigorous exercise 24 hours prior",
        ],
        sample_type="Blood, Urine",
        report_time="24-48 hours",
        rating=4.9,
        reviews_count=4500,
        popular=True,
    ),
]


def get_doctor(doctor_id: str) -> Doctor | None:
    """Get a doctor by ID, None when unknown."""
    for doctor in DOCTORS:
        if doctor.id == doctor_id:
            return doctor
    return None


def get_medicine(medicine_id: str) -> Medicine | None:
    """Get a medicine by ID, None when unknown."""
    for medicine in MEDICINES:
        if medicine.id == medicine_id:
            return medicine
    return None


def get_lab_test(test_id: str) -> LabTest | None:
    """Get a lab test by ID, None when unknown."""
    for test in LAB_TESTS:
        if test.id == test_id:
            return test
    return None
