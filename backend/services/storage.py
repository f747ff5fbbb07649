"""Whole-value storage backends for the durable conversation log."""
import asyncio
import copy
import json
import logging
import os
from typing import Any, Optional

from supabase import create_client, Client

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a storage backend cannot read or write its value."""


class StorageBackend:
    """
    A single readable/writable location holding one serialized value.

    Only whole-value read and whole-value overwrite are offered. Both are
    coroutines so callers yield to other requests while the I/O runs.
    """

    async def read(self) -> Optional[Any]:
        """
        Return the stored value, or None if nothing has been stored yet.

        Raises:
            StorageError: If the value exists but cannot be read or parsed
        """
        raise NotImplementedError

    async def write(self, data: Any) -> None:
        """
        Replace the stored value.

        Raises:
            StorageError: If the value cannot be written
        """
        raise NotImplementedError


class JsonFileStorage(StorageBackend):
    """Stores the value as one JSON document on the local filesystem."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        logger.info(f"Initialized JsonFileStorage at {file_path}")

    async def read(self) -> Optional[Any]:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, data: Any) -> None:
        await asyncio.to_thread(self._write_sync, data)

    def _read_sync(self) -> Optional[Any]:
        if not os.path.exists(self.file_path):
            return None
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.file_path}: {e}") from e

    def _write_sync(self, data: Any) -> None:
        try:
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {self.file_path}: {e}") from e


class SupabaseStorage(StorageBackend):
    """Stores the value in the `data` jsonb column of one row of a Supabase table."""

    def __init__(
        self,
        supabase_url: Optional[str],
        supabase_key: Optional[str],
        table_name: str = "memory_store",
        key: str = "conversations"
    ):
        """
        Initialize the storage with a Supabase client.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase API key
            table_name: Table with `key` (primary key) and `data` (jsonb) columns
            key: Row key holding the value

        Raises:
            ValueError: If Supabase credentials are missing
        """
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")

        self.table_name = table_name
        self.key = key
        self.client: Client = create_client(supabase_url, supabase_key)
        logger.info(f"Initialized SupabaseStorage with table: {table_name}, key: {key}")

    async def read(self) -> Optional[Any]:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, data: Any) -> None:
        await asyncio.to_thread(self._write_sync, data)

    def _read_sync(self) -> Optional[Any]:
        try:
            result = self.client.table(self.table_name).select("data").eq("key", self.key).execute()
        except Exception as e:
            raise StorageError(f"Failed to read {self.table_name}/{self.key}: {e}") from e

        if not result.data:
            return None
        return result.data[0]["data"]

    def _write_sync(self, data: Any) -> None:
        try:
            self.client.table(self.table_name).upsert({
                "key": self.key,
                "data": data
            }).execute()
        except Exception as e:
            raise StorageError(f"Failed to write {self.table_name}/{self.key}: {e}") from e


class InMemoryStorage(StorageBackend):
    """Keeps the value in process memory; lost on restart."""

    def __init__(self, data: Optional[Any] = None):
        self._data = copy.deepcopy(data)

    async def read(self) -> Optional[Any]:
        await asyncio.sleep(0)
        return copy.deepcopy(self._data)

    async def write(self, data: Any) -> None:
        await asyncio.sleep(0)
        self._data = copy.deepcopy(data)


def create_storage(
    backend: str,
    file_path: Optional[str] = None,
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
    table_name: str = "memory_store",
    key: str = "conversations"
) -> StorageBackend:
    """
    Create the storage backend named by `backend`.

    Raises:
        ValueError: For an unknown backend name or missing settings
    """
    if backend == "file":
        if not file_path:
            raise ValueError("A file path is required for the file storage backend")
        return JsonFileStorage(file_path)
    if backend == "supabase":
        return SupabaseStorage(supabase_url, supabase_key, table_name=table_name, key=key)
    if backend == "memory":
        return InMemoryStorage()
    raise ValueError(f"Unknown storage backend: {backend}")
