"""DynamoDB implementation of TableStore.

Uses aiobotocore for async access to the low-level DynamoDB API. Rows are
stored as items whose hash key attribute ("Key") and range key attribute
("Child") carry the row key; all other attributes are the row's attributes.
Plain Python values are converted with boto3's TypeSerializer and
TypeDeserializer.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack
from decimal import Decimal
from typing import Any

from aiobotocore.config import AioConfig
from aiobotocore.session import get_session
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from dynamotree.config.models.storage import DynamoDBConfig
from dynamotree.errors import StoreError, TableExistsError
from dynamotree.models import (
    PARTITION_KEY_NAME,
    SORT_KEY_NAME,
    DeleteRequest,
    ItemKey,
    PutRequest,
    Row,
    TableSchema,
    WriteRequest,
)
from dynamotree.observability.logging import get_logger
from dynamotree.observability.metrics import STORE_LATENCY
from dynamotree.store import MAX_BATCH_SIZE, TableStore

logger = get_logger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo(value: Any) -> Any:
    """Replace floats with Decimals, which is what DynamoDB numbers accept."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(v) for v in value]
    return value


class DynamoDBTableStore(TableStore):
    """DynamoDB-backed table store.

    Either pass a ready aiobotocore client (which the caller owns) or call
    connect() to create one from the config; close() releases a client the
    store created.
    """

    def __init__(
        self,
        config: DynamoDBConfig | None = None,
        *,
        client: Any = None,
        partition_key_name: str = PARTITION_KEY_NAME,
        sort_key_name: str = SORT_KEY_NAME,
    ) -> None:
        self._config = config or DynamoDBConfig()
        self._client = client
        self._exit_stack: AsyncExitStack | None = None
        self._pk = partition_key_name
        self._sk = sort_key_name

    async def connect(self) -> None:
        """Create the DynamoDB client if none was supplied."""
        if self._client is not None:
            return
        kwargs: dict[str, Any] = {
            "region_name": self._config.region,
            "config": AioConfig(
                connect_timeout=self._config.connect_timeout,
                read_timeout=self._config.read_timeout,
                retries={"max_attempts": self._config.max_attempts, "mode": "standard"},
            ),
        }
        if self._config.endpoint_url:
            kwargs["endpoint_url"] = self._config.endpoint_url

        self._exit_stack = AsyncExitStack()
        session = get_session()
        self._client = await self._exit_stack.enter_async_context(
            session.create_client("dynamodb", **kwargs)
        )
        logger.info(
            "dynamodb_connected",
            region=self._config.region,
            endpoint_url=self._config.endpoint_url,
        )

    async def close(self) -> None:
        """Close a client created by connect()."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None
            self._client = None

    def _require_client(self) -> Any:
        if self._client is None:
            raise StoreError("DynamoDB client not connected; call connect() first")
        return self._client

    def _wrap(self, call: str, e: Exception) -> StoreError:
        logger.error("dynamodb_error", call=call, error=str(e))
        return StoreError(f"DynamoDB {call} failed: {e}", cause=e)

    def _encode_key(self, key: ItemKey) -> dict[str, Any]:
        return {
            self._pk: {"S": key.partition_key},
            self._sk: {"S": key.sort_key},
        }

    def _encode_row(self, row: Row) -> dict[str, Any]:
        item = {
            name: _serializer.serialize(_to_dynamo(value))
            for name, value in row.attributes.items()
        }
        item.update(self._encode_key(row.key))
        return item

    def _decode_row(self, item: dict[str, Any]) -> Row:
        attributes = {
            name: _deserializer.deserialize(value)
            for name, value in item.items()
            if name not in (self._pk, self._sk)
        }
        return Row(
            partition_key=item[self._pk]["S"],
            sort_key=item[self._sk]["S"],
            attributes=attributes,
        )

    def _encode_request(self, request: WriteRequest) -> dict[str, Any]:
        if isinstance(request, PutRequest):
            return {"PutRequest": {"Item": self._encode_row(request.row)}}
        return {"DeleteRequest": {"Key": self._encode_key(request.key)}}

    def _decode_request(self, request: dict[str, Any]) -> WriteRequest:
        if "PutRequest" in request:
            return PutRequest(row=self._decode_row(request["PutRequest"]["Item"]))
        key = request["DeleteRequest"]["Key"]
        return DeleteRequest(
            item_key=ItemKey(partition_key=key[self._pk]["S"], sort_key=key[self._sk]["S"])
        )

    async def create_table(self, schema: TableSchema) -> None:
        """Create the table; ResourceInUseException becomes TableExistsError."""
        client = self._require_client()
        kwargs: dict[str, Any] = {
            "TableName": schema.table_name,
            "KeySchema": [
                {"AttributeName": schema.partition_key_name, "KeyType": "HASH"},
                {"AttributeName": schema.sort_key_name, "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {
                    "AttributeName": schema.partition_key_name,
                    "AttributeType": schema.partition_key_type,
                },
                {
                    "AttributeName": schema.sort_key_name,
                    "AttributeType": schema.sort_key_type,
                },
            ],
            "BillingMode": schema.billing_mode,
        }
        if schema.billing_mode == "PROVISIONED":
            kwargs["ProvisionedThroughput"] = {
                "ReadCapacityUnits": schema.read_capacity_units,
                "WriteCapacityUnits": schema.write_capacity_units,
            }

        try:
            await client.create_table(**kwargs)
            if self._config.wait_for_table:
                waiter = client.get_waiter("table_exists")
                await waiter.wait(TableName=schema.table_name)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceInUseException":
                raise TableExistsError(
                    f"table already exists: {schema.table_name}", cause=e
                ) from e
            raise self._wrap("CreateTable", e) from e
        except BotoCoreError as e:
            raise self._wrap("CreateTable", e) from e

        logger.info("dynamodb_table_created", table=schema.table_name)

    async def get_item(self, table: str, key: ItemKey) -> Row | None:
        """Consistent point read of one row."""
        client = self._require_client()
        start = time.perf_counter()
        try:
            resp = await client.get_item(
                TableName=table,
                Key=self._encode_key(key),
                ConsistentRead=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise self._wrap("GetItem", e) from e
        finally:
            STORE_LATENCY.labels(backend="dynamodb", call="get_item").observe(
                time.perf_counter() - start
            )

        item = resp.get("Item")
        if not item:
            return None
        return self._decode_row(item)

    async def put_item(self, table: str, row: Row) -> None:
        client = self._require_client()
        try:
            await client.put_item(TableName=table, Item=self._encode_row(row))
        except (ClientError, BotoCoreError) as e:
            raise self._wrap("PutItem", e) from e

    async def delete_item(self, table: str, key: ItemKey) -> None:
        client = self._require_client()
        try:
            await client.delete_item(TableName=table, Key=self._encode_key(key))
        except (ClientError, BotoCoreError) as e:
            raise self._wrap("DeleteItem", e) from e

    async def batch_write(
        self, table: str, requests: list[WriteRequest]
    ) -> list[WriteRequest]:
        """BatchWriteItem; returns UnprocessedItems as request models."""
        if len(requests) > MAX_BATCH_SIZE:
            raise StoreError(
                f"batch of {len(requests)} requests exceeds limit of {MAX_BATCH_SIZE}"
            )
        if not requests:
            return []

        client = self._require_client()
        start = time.perf_counter()
        try:
            resp = await client.batch_write_item(
                RequestItems={table: [self._encode_request(r) for r in requests]}
            )
        except (ClientError, BotoCoreError) as e:
            raise self._wrap("BatchWriteItem", e) from e
        finally:
            STORE_LATENCY.labels(backend="dynamodb", call="batch_write").observe(
                time.perf_counter() - start
            )

        unprocessed = resp.get("UnprocessedItems") or {}
        return [self._decode_request(r) for r in unprocessed.get(table, [])]

    async def query(
        self,
        table: str,
        partition_key: str,
        *,
        page_size: int | None = None,
    ) -> AsyncGenerator[list[Row], None]:
        """Query one partition, following LastEvaluatedKey page by page."""
        client = self._require_client()
        kwargs: dict[str, Any] = {
            "TableName": table,
            "KeyConditionExpression": "#K = :key",
            "ExpressionAttributeNames": {"#K": self._pk},
            "ExpressionAttributeValues": {":key": {"S": partition_key}},
            "ConsistentRead": True,
        }
        if page_size:
            kwargs["Limit"] = page_size

        while True:
            start = time.perf_counter()
            try:
                resp = await client.query(**kwargs)
            except (ClientError, BotoCoreError) as e:
                raise self._wrap("Query", e) from e
            finally:
                STORE_LATENCY.labels(backend="dynamodb", call="query").observe(
                    time.perf_counter() - start
                )

            yield [self._decode_row(item) for item in resp.get("Items", [])]

            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key
