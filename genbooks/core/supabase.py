import logging
from typing import Optional
from supabase import create_async_client, AsyncClient
from genbooks.core.config import Settings

logger = logging.getLogger(__name__)

class SupabaseManager:
    """
    Lazily creates the async Supabase client for the storefront tables.

    The backend writes orders and payments on behalf of anonymous shoppers, so it
    always talks to Supabase with the Service Role Key.
    """

    def __init__(self, settings: Settings):
        self.url: str = settings.SUPABASE_URL
        self.key: Optional[str] = settings.SUPABASE_SERVICE_ROLE_KEY
        self.service_client: Optional[AsyncClient] = None

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)

    async def get_service_client(self) -> AsyncClient:
        if self.service_client is None:
            if not self.configured:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be provided in the environment variables.")
            logger.info("Initializing Supabase client with Service Role Key.")
            self.service_client = await create_async_client(self.url, self.key)
        return self.service_client
