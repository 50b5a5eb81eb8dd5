"""
Records produced by the scraper: one Property per detail page, one ScrapingReport per request.
Serialized with camelCase aliases (priceValue) to match the map frontend.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_TITLE_LENGTH = 200
MAX_REPORTED_ERRORS = 10


class Property(BaseModel):
    """One listing with resolved coordinates. Never built without both coordinates."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = Field(max_length=MAX_TITLE_LENGTH)
    price: str = Field(description="Display price, e.g. 'R$ 1.250,00', or 'inquire'")
    price_value: float = Field(default=0.0, ge=0.0, alias="priceValue")
    image: str
    link: str
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)

    @field_validator("latitude", "longitude")
    @classmethod
    def _non_zero(cls, value: float) -> float:
        # 0 is how missing coordinates show up in the source pages
        if value == 0:
            raise ValueError("coordinate must be non-zero")
        return value

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class ScrapingReport(BaseModel):
    """Outcome of one scrape: properties in completion order plus the first errors."""

    model_config = ConfigDict(frozen=True)

    success: bool
    properties: list[Property] = Field(default_factory=list)
    total: int = 0
    errors: list[str] = Field(default_factory=list, max_length=MAX_REPORTED_ERRORS)

    @model_validator(mode="after")
    def _total_matches(self) -> "ScrapingReport":
        if self.total != len(self.properties):
            raise ValueError(f"total={self.total} but {len(self.properties)} properties")
        return self

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
