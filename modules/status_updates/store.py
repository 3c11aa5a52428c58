"""
Status store.

Thin persistence layer over the hosted Supabase tables and the credit refund RPC.
"""

from decimal import Decimal
from typing import Any, Dict

from modules.status_updates.config import ACTORS_TABLE, FILES_TABLE, PIPELINES_TABLE, REFUND_RPC
from shared.database import DatabaseClient
from shared.errors import PersistenceError, RefundError
from shared.logging import get_logger

logger = get_logger("status_updates.store")


class StatusStore:
    """Writes pipeline/file/actor status updates and issues credit refunds."""

    def __init__(self, db_client: DatabaseClient):
        """
        Initialize status store.

        Args:
            db_client: Supabase client wrapper (service role)
        """
        self.db_client = db_client

    async def update_pipeline(self, pipeline_id: str, data: Dict[str, Any]) -> None:
        """
        Apply a partial update to a pipeline row.

        Raises:
            PersistenceError: If the update fails
        """
        try:
            await self.db_client.table(PIPELINES_TABLE).update(data).eq("id", pipeline_id).execute()
        except PersistenceError as e:
            e.pipeline_id = pipeline_id
            raise

    async def update_file(self, file_id: str, data: Dict[str, Any]) -> None:
        """
        Apply a partial update to a file row.

        Raises:
            PersistenceError: If the update fails
        """
        await self.db_client.table(FILES_TABLE).update(data).eq("id", file_id).execute()

    async def update_actor(self, actor_id: str, data: Dict[str, Any]) -> None:
        """
        Apply a partial update to an actor row.

        Raises:
            PersistenceError: If the update fails
        """
        await self.db_client.table(ACTORS_TABLE).update(data).eq("id", actor_id).execute()

    async def refund_credits(self, user_id: str, amount: Decimal, description: str) -> None:
        """
        Return credits to a user through the refund RPC.

        Args:
            user_id: Owning user
            amount: Credits to return
            description: Ledger description

        Raises:
            RefundError: If the RPC fails
        """
        try:
            await self.db_client.rpc(REFUND_RPC, {
                "p_user_id": user_id,
                "p_amount": float(amount),  # PostgREST takes JSON numbers
                "p_description": description,
            })
        except PersistenceError as e:
            raise RefundError(f"Failed to refund credits: {e.message}") from e
