"""Application-level settings stored in the database."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

LAST_RECONCILED_DATE_KEY = "last_reconciled_date"


class AppSetting(SQLModel, table=True):
    """Key-value storage for runtime state such as the last reconciled date."""

    __tablename__: ClassVar[str] = "app_setting"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
