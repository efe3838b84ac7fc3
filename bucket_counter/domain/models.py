from datetime import timedelta
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BucketKeys(NamedTuple):
    """Store keys derived for a single bucket."""

    bucket_start: int
    counter_key: str
    series_key: str


class CounterOptions(BaseModel):
    """Validated, immutable configuration of a BucketedCounter."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    timestep_seconds: int = Field(gt=0)
    ttl_seconds: int = Field(ge=0)
    propagate_expiry_errors: bool = True
    inclusive_end: bool = True

    @field_validator("timestep_seconds", mode="before")
    @classmethod
    def _whole_seconds(cls, v):
        # Keys are formatted with whole epoch seconds
        if isinstance(v, timedelta):
            v = v.total_seconds()
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("timestep must be a whole number of seconds")
            v = int(v)
        return v

    @field_validator("ttl_seconds", mode="before")
    @classmethod
    def _truncate_ttl(cls, v):
        if isinstance(v, timedelta):
            v = v.total_seconds()
        if isinstance(v, (int, float)) and v < 0:
            raise ValueError("ttl must be non-negative")
        if isinstance(v, float):
            v = int(v)
        return v
