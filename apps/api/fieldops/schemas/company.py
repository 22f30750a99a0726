from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator
from uuid import UUID


class CompanyCreate(BaseModel):
    name: str
    timezone: str = "Australia/Sydney"

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone {v!r}")
        return v


class CompanyOut(BaseModel):
    company_id: UUID
    name: str
    timezone: str
