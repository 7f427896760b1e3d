# Standardized Cosmos DB client implementation

import time
import logging
import backoff
from typing import Optional, List, Dict, Any
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, PartitionKey, exceptions
from azure.cosmos.container import ContainerProxy
from src.shared.settings import StoreSettings
from src.specs.common.errors import ConfigurationError, StorageError

class RetryableCosmosError(StorageError):
    """Indicates a Cosmos DB operation that should be retried"""
    pass

def _raise_storage_error(action: str, item_id: Optional[str], exc: Exception) -> None:
    """Translate an SDK failure into RetryableCosmosError or StorageError."""
    details = {"action": action}
    if item_id is not None:
        details["itemId"] = item_id
    if isinstance(exc, exceptions.CosmosHttpResponseError) and exc.status_code in (429, 503):
        logging.warning(f"Retryable error during {action}: {exc}")
        raise RetryableCosmosError(f"Retryable error during {action}", details=details) from exc
    logging.error(f"Cosmos error during {action}: {exc}")
    raise StorageError(f"Cosmos DB {action} failed", details=details) from exc

class CosmosDBClient:
    # Max retries and timeout configuration
    MAX_RETRIES = 3
    OPERATION_TIMEOUT = 10.0    # 10s

    def __init__(self, settings: Optional[StoreSettings] = None, database: Any = None):
        """Initialize the Cosmos DB client with connection settings and retry policy.

        A pre-built database proxy may be passed in place of a live connection.
        """
        self.settings = settings or StoreSettings.from_env()
        self.database_name = self.settings.database_name
        self.client = None

        if database is not None:
            self.database = database
            return

        if not self.settings.cosmos_configured:
            raise ConfigurationError("Missing Cosmos DB connection string or database name")

        self.client = CosmosClient.from_connection_string(
            self.settings.connection_string,
            retry_total=self.MAX_RETRIES
        )
        if self.settings.create_container:
            self.database = self.client.create_database_if_not_exists(id=self.database_name)
        else:
            self.database = self.client.get_database_client(self.database_name)

    def ensure_container(self, container_name: str) -> ContainerProxy:
        """Create the container partitioned on /id if it does not exist yet"""
        try:
            return self.database.create_container_if_not_exists(
                id=container_name,
                partition_key=PartitionKey(path="/id")
            )
        except AzureError as e:
            _raise_storage_error("create container", None, e)

    def get_container(self, container_name: str) -> ContainerProxy:
        return self.database.get_container_client(container_name)

    @backoff.on_exception(
        backoff.expo,
        RetryableCosmosError,
        max_tries=MAX_RETRIES,
        max_time=OPERATION_TIMEOUT
    )
    def create_item(self, container_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new item; fails if an item with the same id exists

        Args:
            container_name: Name of the container
            item: The item body, including its 'id'

        Returns:
            The stored item as returned by Cosmos DB

        Raises:
            RetryableCosmosError: If operation should be retried
            StorageError: For other errors
        """
        container = self.get_container(container_name)
        try:
            return container.create_item(body=item)
        except AzureError as e:
            _raise_storage_error("create", item.get("id"), e)

    @backoff.on_exception(
        backoff.expo,
        RetryableCosmosError,
        max_tries=MAX_RETRIES,
        max_time=OPERATION_TIMEOUT
    )
    def get_item(
        self,
        container_name: str,
        item_id: str,
        partition_key: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item by ID

        Args:
            container_name: Name of the container
            item_id: ID of the item to retrieve
            partition_key: Optional partition key (defaults to item_id)

        Returns:
            The item if found, None if not found
        """
        container = self.get_container(container_name)
        try:
            return container.read_item(
                item=item_id,
                partition_key=partition_key or item_id
            )
        except exceptions.CosmosResourceNotFoundError:
            logging.debug(f"Item not found: {item_id}")
            return None
        except AzureError as e:
            _raise_storage_error("read", item_id, e)

    @backoff.on_exception(
        backoff.expo,
        RetryableCosmosError,
        max_tries=MAX_RETRIES,
        max_time=OPERATION_TIMEOUT
    )
    def query_items(
        self,
        container_name: str,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None
    ) -> List[Any]:
        """
        Query items with parameterized queries for safety

        Args:
            container_name: Name of the container
            query: The query to execute (use @param syntax for parameters)
            parameters: List of parameter dictionaries with 'name' and 'value'

        Returns:
            List of matching items
        """
        start_time = time.time()
        container = self.get_container(container_name)
        try:
            items = list(container.query_items(
                query=query,
                parameters=parameters or [],
                enable_cross_partition_query=True
            ))
        except AzureError as e:
            _raise_storage_error("query", None, e)
        logging.debug(
            f"Query returned {len(items)} items from '{container_name}' in {time.time() - start_time:.2f}s"
        )
        return items

    @backoff.on_exception(
        backoff.expo,
        RetryableCosmosError,
        max_tries=MAX_RETRIES,
        max_time=OPERATION_TIMEOUT
    )
    def patch_item(
        self,
        container_name: str,
        item_id: str,
        fields: Dict[str, Any],
        partition_key: Optional[str] = None
    ) -> bool:
        """
        Set the given top-level fields on an item in one atomic operation

        Returns:
            True if the item was patched, False if it does not exist
        """
        container = self.get_container(container_name)
        operations = [
            {"op": "set", "path": f"/{name}", "value": value}
            for name, value in fields.items()
        ]
        try:
            if operations:
                container.patch_item(
                    item=item_id,
                    partition_key=partition_key or item_id,
                    patch_operations=operations
                )
            else:
                container.read_item(item=item_id, partition_key=partition_key or item_id)
            return True
        except exceptions.CosmosResourceNotFoundError:
            logging.debug(f"Item '{item_id}' not found during patch")
            return False
        except AzureError as e:
            _raise_storage_error("patch", item_id, e)

    @backoff.on_exception(
        backoff.expo,
        RetryableCosmosError,
        max_tries=MAX_RETRIES,
        max_time=OPERATION_TIMEOUT
    )
    def delete_item(
        self,
        container_name: str,
        item_id: str,
        partition_key: Optional[str] = None
    ) -> bool:
        """
        Delete an item by ID with retries

        Returns:
            True if the item was deleted, False if it was already gone
        """
        start_time = time.time()
        container = self.get_container(container_name)

        try:
            container.delete_item(item=item_id, partition_key=partition_key or item_id)
            logging.debug(f"Successfully deleted item '{item_id}' in {time.time() - start_time:.2f}s")
            return True
        except exceptions.CosmosResourceNotFoundError:
            logging.info(f"Item '{item_id}' not found during delete - already deleted")
            return False
        except AzureError as e:
            _raise_storage_error("delete", item_id, e)

    def bulk_delete_items(self, container_name: str, item_ids: List[str]) -> int:
        """
        Delete multiple items by ID, skipping ones already gone

        Returns:
            Number of items actually deleted
        """
        start_time = time.time()
        deleted = 0
        for item_id in item_ids:
            if self.delete_item(container_name, item_id):
                deleted += 1
        logging.info(
            f"Bulk delete completed: {deleted}/{len(item_ids)} items removed in {time.time() - start_time:.2f}s"
        )
        return deleted
