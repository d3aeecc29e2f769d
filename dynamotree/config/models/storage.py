"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "dynamodb"]


class InMemoryConfig(BaseModel):
    """In-memory backend configuration."""

    page_size: int = Field(default=100, gt=0, description="Rows per query page")
    auto_create: bool = Field(
        default=False,
        description="Create tables on first write",
    )


class DynamoDBConfig(BaseModel):
    """DynamoDB backend configuration.

    Note: credentials come from the standard AWS environment variables or
    profiles, never from config files.
    """

    region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: str | None = Field(
        default=None,
        description="Override endpoint, e.g. http://localhost:8000 for DynamoDB Local",
    )
    connect_timeout: float = Field(default=10.0, gt=0, description="Seconds")
    read_timeout: float = Field(default=30.0, gt=0, description="Seconds")
    max_attempts: int = Field(
        default=5,
        gt=0,
        description="botocore retry attempts for throttled or failed calls",
    )
    wait_for_table: bool = Field(
        default=True,
        description="Wait until a newly created table is active",
    )


class StorageConfig(BaseModel):
    """Configuration for the tree's backing store."""

    backend: BackendType = Field(default="inmemory", description="Backend type")
    inmemory: InMemoryConfig = Field(default_factory=InMemoryConfig)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
