"""Row, write request and table schema models shared by stores and the tree."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

KeyType = Literal["S", "N", "B"]
BillingMode = Literal["PROVISIONED", "PAY_PER_REQUEST"]

# Attribute names of the table's hash and range keys
PARTITION_KEY_NAME = "Key"
SORT_KEY_NAME = "Child"


class ItemKey(BaseModel):
    """Composite primary key of a row."""

    model_config = ConfigDict(frozen=True)

    partition_key: str = Field(..., description="Hash key value")
    sort_key: str = Field(..., description="Range key value")


class Row(BaseModel):
    """A stored row: its key plus non-key attributes."""

    model_config = ConfigDict(frozen=True)

    partition_key: str = Field(..., description="Hash key value")
    sort_key: str = Field(..., description="Range key value")
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Non-key attributes"
    )

    @property
    def key(self) -> ItemKey:
        return ItemKey(partition_key=self.partition_key, sort_key=self.sort_key)


class PutRequest(BaseModel):
    """Write (or overwrite) a whole row."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["put"] = "put"
    row: Row

    @property
    def key(self) -> ItemKey:
        return self.row.key


class DeleteRequest(BaseModel):
    """Remove the row at key, if any."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["delete"] = "delete"
    item_key: ItemKey

    @property
    def key(self) -> ItemKey:
        return self.item_key


WriteRequest = PutRequest | DeleteRequest


class TableSchema(BaseModel):
    """Key schema and capacity of the table backing a tree."""

    table_name: str = Field(..., min_length=1, description="Table name")
    partition_key_name: str = Field(default=PARTITION_KEY_NAME, description="Hash key attribute")
    partition_key_type: KeyType = Field(default="S", description="Hash key type")
    sort_key_name: str = Field(default=SORT_KEY_NAME, description="Range key attribute")
    sort_key_type: KeyType = Field(default="S", description="Range key type")
    billing_mode: BillingMode = Field(
        default="PROVISIONED", description="Capacity mode for the table"
    )
    read_capacity_units: int = Field(default=1, gt=0)
    write_capacity_units: int = Field(default=1, gt=0)
