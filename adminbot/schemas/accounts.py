"""DTOs exchanged with the account micro-service."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AccountDto(BaseModel):
    """End-user account as returned by the account service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    city: str | None = None
    country: str | None = None
    about: str | None = None
    reg_date: datetime | None = None
    birth_date: date | None = None
    last_online_time: datetime | None = None
    is_online: bool | None = None
    is_blocked: bool = False
    is_deleted: bool | None = None


class AccountPage(BaseModel):
    """Zero-based page of accounts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[AccountDto] = Field(default_factory=list)
    total_pages: int = 0
    total_elements: int = 0
    size: int = 0
    number: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.content
