"""
Database client.

Supabase PostgREST client wrapper with async execution and query utilities.
"""

import asyncio
from typing import Optional, Any, Callable, Dict
from supabase import create_client, Client
from shared.config import Settings
from shared.errors import PersistenceError, ConfigError


class DatabaseClient:
    """Supabase database client wrapper with optional retry logic."""

    def __init__(self, settings: Settings):
        """
        Initialize database client.

        Args:
            settings: Resolved application settings (service role credentials)
        """
        try:
            self.client: Client = create_client(
                settings.supabase_url,
                settings.supabase_service_key
            )
        except Exception as e:
            raise ConfigError(f"Failed to initialize database client: {str(e)}") from e

    async def _execute_sync(self, func: Callable[[], Any], max_attempts: int = 1) -> Any:
        """
        Execute a synchronous Supabase operation in an async context.

        Args:
            func: Synchronous function to execute
            max_attempts: Maximum number of attempts (webhook writes use one)

        Returns:
            Function result

        Raises:
            PersistenceError: If operation fails after all attempts
        """
        for attempt in range(max_attempts):
            try:
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(None, func)
            except Exception as e:
                if attempt < max_attempts - 1:
                    # Exponential backoff: 2s, 4s, 8s
                    delay = 2 ** (attempt + 1)
                    await asyncio.sleep(delay)
                else:
                    raise PersistenceError(
                        f"Database operation failed after {max_attempts} attempt(s): {str(e)}"
                    ) from e

    def table(self, table_name: str) -> "AsyncTableQueryBuilder":
        """
        Get a table query builder with async execution support.

        Args:
            table_name: Name of the table

        Returns:
            AsyncTableQueryBuilder wrapper
        """
        return AsyncTableQueryBuilder(self, table_name)

    async def rpc(
        self,
        function_name: str,
        params: Optional[Dict[str, Any]] = None,
        max_attempts: int = 1
    ) -> Any:
        """
        Call a Postgres function through PostgREST.

        Args:
            function_name: Name of the database function
            params: Named function arguments
            max_attempts: Maximum number of attempts

        Returns:
            RPC result
        """
        return await self._execute_sync(
            lambda: self.client.rpc(function_name, params or {}).execute(),
            max_attempts
        )

    async def health_check(self) -> bool:
        """
        Check database connection health.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            await self._execute_sync(
                lambda: self.client.table("pipelines").select("id").limit(1).execute()
            )
            return True
        except PersistenceError:
            return False


class AsyncTableQueryBuilder:
    """Async wrapper for Supabase table query builder."""

    def __init__(self, db_client: DatabaseClient, table_name: str):
        """Initialize async table query builder."""
        self.db_client = db_client
        self.table_name = table_name
        self._query_builder = db_client.client.table(table_name)

    def select(self, *args, **kwargs):
        """Chain select operation."""
        self._query_builder = self._query_builder.select(*args, **kwargs)
        return self

    def update(self, *args, **kwargs):
        """Chain update operation."""
        self._query_builder = self._query_builder.update(*args, **kwargs)
        return self

    def eq(self, *args, **kwargs):
        """Chain eq filter."""
        self._query_builder = self._query_builder.eq(*args, **kwargs)
        return self

    def limit(self, *args, **kwargs):
        """Chain limit operation."""
        self._query_builder = self._query_builder.limit(*args, **kwargs)
        return self

    async def execute(self, max_attempts: int = 1) -> Any:
        """
        Execute the query asynchronously.

        Args:
            max_attempts: Maximum number of attempts

        Returns:
            Query result
        """
        query_builder = self._query_builder
        return await self.db_client._execute_sync(
            lambda: query_builder.execute(),
            max_attempts
        )
