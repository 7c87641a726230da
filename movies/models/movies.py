from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Enum, Integer
from sqlalchemy.dialects import mysql
from pydantic import ConfigDict, StrictFloat, StrictInt, StrictStr, StringConstraints
from pydantic import field_validator, model_validator
from typing import Annotated, Literal, Optional, Union
from datetime import datetime, timezone
from decimal import Decimal

MOVIE_TYPES = ("TV Shows", "Movies")

MovieType = Literal["TV Shows", "Movies"]
BudgetInput = Union[StrictInt, StrictFloat, Annotated[StrictStr, StringConstraints(min_length=1)]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Movie(SQLModel, table=True):
    __tablename__ = "Movies"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        sa_type=Integer().with_variant(mysql.INTEGER(unsigned=True), "mysql"),
    )
    title: str = Field(max_length=255)
    type: str = Field(sa_column=Column(Enum(*MOVIE_TYPES, name="movie_type"), nullable=False))
    director: str = Field(max_length=255)
    budget: Decimal = Field(default=Decimal("0.00"), max_digits=15, decimal_places=2)
    location: str = Field(max_length=255)
    duration: str = Field(max_length=100)
    year: str = Field(max_length=50)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


class MovieCreate(SQLModel):
    title: StrictStr = Field(min_length=1, max_length=255)
    type: MovieType
    director: StrictStr = Field(min_length=1, max_length=255)
    budget: BudgetInput
    location: StrictStr = Field(min_length=1, max_length=255)
    duration: StrictStr = Field(min_length=1, max_length=100)
    year: StrictStr = Field(min_length=1, max_length=50)


class MovieUpdate(SQLModel):
    title: Optional[StrictStr] = Field(default=None, min_length=1, max_length=255)
    type: Optional[MovieType] = None
    director: Optional[StrictStr] = Field(default=None, min_length=1, max_length=255)
    budget: Optional[BudgetInput] = None
    location: Optional[StrictStr] = Field(default=None, min_length=1, max_length=255)
    duration: Optional[StrictStr] = Field(default=None, min_length=1, max_length=100)
    year: Optional[StrictStr] = Field(default=None, min_length=1, max_length=50)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Optional only means "may be omitted"
        if value is None:
            raise ValueError("must not be null")
        return value

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one of title, type, director, budget, location, duration, year is required")
        return self


class MovieRead(SQLModel):
    """Public JSON shape of a stored movie."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    type: str
    director: str
    budget: Decimal
    location: str
    duration: str
    year: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
