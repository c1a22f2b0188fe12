"""
Unit tests for the health alert rules and reading model.
"""

import pytest
from pydantic import ValidationError

from mediconnect.models.health import HealthMetricsInput
from mediconnect.services.metrics import alert_messages, evaluate_metrics


class TestHeartRateRules:
    """Test the heart-rate thresholds."""

    def test_high_heart_rate(self):
        assert alert_messages(HealthMetricsInput(heart_rate=110)) == ["High heart rate detected"]

    def test_low_heart_rate(self):
        assert alert_messages(HealthMetricsInput(heart_rate=45)) == ["Low heart rate detected"]

    def test_normal_heart_rate(self):
        assert alert_messages(HealthMetricsInput(heart_rate=72)) == []

    def test_boundaries_do_not_alert(self):
        """Thresholds are strict: exactly 60 and 100 BPM are normal."""
        assert alert_messages(HealthMetricsInput(heart_rate=60)) == []
        assert alert_messages(HealthMetricsInput(heart_rate=100)) == []

    def test_value_is_described(self):
        assert evaluate_metrics(HealthMetricsInput(heart_rate=110)) == [
            ("High heart rate detected", "110 BPM")
        ]


class TestBloodPressureRule:
    """Test the blood-pressure threshold."""

    def test_high_systolic(self):
        metrics = HealthMetricsInput(blood_pressure_systolic=150, blood_pressure_diastolic=80)
        assert alert_messages(metrics) == ["High blood pressure detected"]

    def test_high_diastolic(self):
        metrics = HealthMetricsInput(blood_pressure_systolic=120, blood_pressure_diastolic=95)
        assert alert_messages(metrics) == ["High blood pressure detected"]

    def test_boundary_does_not_alert(self):
        metrics = HealthMetricsInput(blood_pressure_systolic=140, blood_pressure_diastolic=90)
        assert alert_messages(metrics) == []

    def test_needs_both_values(self):
        """A lone systolic value is not evaluated."""
        assert alert_messages(HealthMetricsInput(blood_pressure_systolic=180)) == []
        assert alert_messages(HealthMetricsInput(blood_pressure_diastolic=120)) == []

    def test_value_is_described(self):
        metrics = HealthMetricsInput(blood_pressure_systolic=150, blood_pressure_diastolic=95)
        assert evaluate_metrics(metrics) == [("High blood pressure detected", "150/95 mmHg")]


class TestTemperatureAndOxygenRules:
    """Test the temperature and blood-oxygen thresholds."""

    def test_fever(self):
        assert alert_messages(HealthMetricsInput(body_temperature=101.2)) == ["Fever detected"]

    def test_low_temperature(self):
        assert alert_messages(HealthMetricsInput(body_temperature=96.5)) == [
            "Low body temperature detected"
        ]

    def test_temperature_boundaries(self):
        assert alert_messages(HealthMetricsInput(body_temperature=100.4)) == []
        assert alert_messages(HealthMetricsInput(body_temperature=97)) == []

    def test_low_oxygen(self):
        assert alert_messages(HealthMetricsInput(blood_oxygen=90)) == [
            "Low blood oxygen level detected"
        ]

    def test_oxygen_boundary(self):
        assert alert_messages(HealthMetricsInput(blood_oxygen=95)) == []


class TestCombinedReadings:
    """Rules are independent; one reading can raise several alerts."""

    def test_multiple_alerts_in_rule_order(self):
        metrics = HealthMetricsInput(
            blood_pressure_systolic=150,
            blood_pressure_diastolic=95,
            blood_oxygen=90,
        )
        assert alert_messages(metrics) == [
            "High blood pressure detected",
            "Low blood oxygen level detected",
        ]

    def test_empty_reading_raises_nothing(self):
        assert evaluate_metrics(HealthMetricsInput()) == []

    def test_lifestyle_fields_never_alert(self):
        metrics = HealthMetricsInput(stress_level=10, sleep_hours=2, sleep_quality_rating=1)
        assert alert_messages(metrics) == []


class TestHealthMetricsInput:
    """Test field validation on the reading form."""

    @pytest.mark.parametrize("field,value", [
        ("stress_level", 0),
        ("stress_level", 11),
        ("sleep_quality_rating", 6),
        ("sleep_hours", -1),
        ("blood_oxygen", 101),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            HealthMetricsInput(**{field: value})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            HealthMetricsInput(glucose=110)

    def test_is_empty(self):
        assert HealthMetricsInput().is_empty is True
        assert HealthMetricsInput(heart_rate=72).is_empty is False

    def test_to_record_drops_missing_fields(self):
        assert HealthMetricsInput(heart_rate=72, stress_level=3).to_record() == {
            "heart_rate": 72,
            "stress_level": 3,
        }
