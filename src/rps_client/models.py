"""Typed request and response models for the Resume Parsing Service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class RPSModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # The service sends null for absent strings, lists and objects.
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class Location(RPSModel):
    formatted: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    country_code: str = Field(default="", alias="countryCode")


class Position(RPSModel):
    title: str = ""
    title_normalized: str = ""
    organization: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None
    description: str = ""
    location: Location = Field(default_factory=Location)
    management_level: str = ""


class Education(RPSModel):
    organization: str = ""
    degree: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: Location = Field(default_factory=Location)
    education_level: str = ""


class SocialUrl(RPSModel):
    source: str = ""
    url: str = ""
    username: str = ""


class PhoneNumber(RPSModel):
    country_code: str = ""
    country_name: str = ""
    national_number: str = ""


class Skill(RPSModel):
    name: str = ""
    num_months: int = 0


class Resume(RPSModel):
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    summary: str = ""
    pdf: str = ""
    location: Location = Field(default_factory=Location)
    emails: list[str] = Field(default_factory=list)
    profession: str = ""
    positions: list[Position] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    social_urls: list[SocialUrl] = Field(default_factory=list)
    phone_numbers: list[PhoneNumber] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    detected_language: str = ""
    skills: list[Skill] = Field(default_factory=list)
    raw_text: str = ""


class ParseDocumentRequest(RPSModel):
    base64_data: str
