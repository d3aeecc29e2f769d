"""Tree configuration model."""

from pydantic import BaseModel, Field, field_validator

from dynamotree.models import BillingMode

DEFAULT_SPECIAL_CHARACTER = "¦"


class TreeConfig(BaseModel):
    """Configuration for a single Tree.

    The special character delimits path components in stored keys. It may
    not appear in path components or at the start of attribute names.
    """

    table_name: str = Field(default="dynamotree", min_length=1, description="Backing table")
    special_character: str = Field(
        default=DEFAULT_SPECIAL_CHARACTER,
        description="Reserved delimiter character",
    )
    batch_size: int = Field(
        default=25,
        gt=0,
        le=25,
        description="Requests per batch_write call",
    )
    retry_base_delay: float = Field(
        default=0.05,
        ge=0.0,
        description="First backoff delay before resubmitting unprocessed items (seconds)",
    )
    retry_max_delay: float = Field(
        default=2.0,
        ge=0.0,
        description="Upper bound on a single backoff delay (seconds)",
    )
    max_unprocessed_retries: int | None = Field(
        default=None,
        ge=0,
        description="Resubmissions allowed per chunk; None retries until done",
    )
    max_link_hops: int = Field(
        default=16,
        gt=0,
        description="Links followed by get before giving up",
    )
    query_page_size: int | None = Field(
        default=None,
        gt=0,
        description="Rows per query page; None uses the backend default",
    )
    billing_mode: BillingMode = Field(
        default="PROVISIONED",
        description="Capacity mode used by create_table",
    )
    read_capacity_units: int = Field(default=1, gt=0)
    write_capacity_units: int = Field(default=1, gt=0)

    @field_validator("special_character", mode="before")
    @classmethod
    def default_special_character(cls, value: str | None) -> str:
        """Fall back to the default delimiter when none is given."""
        if not value:
            return DEFAULT_SPECIAL_CHARACTER
        return value
