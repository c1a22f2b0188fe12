"""
Configuration management for MediConnect.

This module provides centralized configuration using Pydantic settings
for type-safe environment variable management.
"""

import sys
from functools import lru_cache
from typing import List, Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Managed backend (auth provider, record store, functions)
    backend_url: str = Field(default="http://localhost:54321", alias="BACKEND_URL")
    backend_anon_key: str = Field(default="", alias="BACKEND_ANON_KEY")
    backend_timeout: int = Field(default=10, alias="BACKEND_TIMEOUT")
    record_store: Literal["memory", "rest"] = Field(default="memory", alias="RECORD_STORE")

    # EmailJS Configuration
    emailjs_api_url: str = Field(
        default="https://api.emailjs.com/api/v1.0/email/send", alias="EMAILJS_API_URL"
    )
    emailjs_service_id: str = Field(default="service_mediconnect", alias="EMAILJS_SERVICE_ID")
    emailjs_template_id: str = Field(default="template_welcome", alias="EMAILJS_TEMPLATE_ID")
    emailjs_public_key: str = Field(default="", alias="EMAILJS_PUBLIC_KEY")

    # Application Configuration
    app_name: str = Field(default="MediConnect", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    booking_latency_seconds: float = Field(default=1.0, alias="BOOKING_LATENCY_SECONDS")
    recent_readings_limit: int = Field(default=10, alias="RECENT_READINGS_LIMIT")
    appointment_log_size: int = Field(default=500, ge=1, alias="APPOINTMENT_LOG_SIZE")

    # Concurrency Settings
    connection_pool_size: int = Field(default=20, alias="CONNECTION_POOL_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once,
    improving performance for repeated access.
    """
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_settings().log_level).upper())


# Booking wizard constants
BOOKING_WINDOW_DAYS = 7
BOOKING_ID_PREFIX = "BK"

# Candidate appointment times offered on every bookable day
TIME_SLOTS: List[dict] = [
    {"id": "1", "time": "09:00 AM", "available": True},
    {"id": "2", "time": "09:30 AM", "available": True},
    {"id": "3", "time": "10:00 AM", "available": False},
    {"id": "4", "time": "10:30 AM", "available": True},
    {"id": "5", "time": "11:00 AM", "available": True},
    {"id": "6", "time": "11:30 AM", "available": False},
    {"id": "7", "time": "02:00 PM", "available": True},
    {"id": "8", "time": "02:30 PM", "available": True},
    {"id": "9", "time": "03:00 PM", "available": True},
    {"id": "10", "time": "04:00 PM", "available": False},
    {"id": "11", "time": "04:30 PM", "available": True},
    {"id": "12", "time": "05:00 PM", "available": True},
]

# Health alert constants
ALERT_METRIC_TYPE = "vital_signs"
ALERT_TYPE_WARNING = "warning"

# Wearable band subscription plans (monthly price in USD)
SUBSCRIPTION_PLANS: List[dict] = [
    {
        "id": "essential",
        "name": "Essential",
        "price": 29,
        "description": "Perfect for individuals starting their health journey",
        "badge": None,
        "features": [
            "Fashionable Smart Band",
            "6 Core Health Metrics Tracking",
            "Basic Real-time Monitoring",
            "Mobile App Access",
            "Weekly Health Reports",
            "Community Support",
        ],
    },
    {
        "id": "premium",
        "name": "Premium",
        "price": 49,
        "description": "Complete health management with doctor connectivity",
        "badge": "Most Popular",
        "features": [
            "Everything in Essential",
            "Instant Doctor Alerts & Notifications",
            "Advanced Health Analytics & Trends",
            "24/7 Emergency SOS Feature",
            "Priority Doctor Consultation Booking",
            "Family Health Sharing",
            "Personalized Health Recommendations",
            "Sleep Quality Analysis",
        ],
    },
    {
        "id": "family",
        "name": "Family",
        "price": 99,
        "description": "Health monitoring for the whole family",
        "badge": None,
        "features": [
            "Everything in Premium",
            "Up to 5 Smart Bands",
            "Family Dashboard",
            "Shared Doctor Access",
            "Dedicated Care Coordinator",
        ],
    },
]


def get_available_time_slots() -> List[dict]:
    """Get the time slots that can currently be booked."""
    return [slot for slot in TIME_SLOTS if slot["available"]]


def get_plan_by_id(plan_id: str) -> dict | None:
    """Get a subscription plan by its ID."""
    for plan in SUBSCRIPTION_PLANS:
        if plan["id"] == plan_id:
            return plan
    return None
