import logging
from datetime import date
from typing import List, Optional, Union

from normalizer import to_canonical_client, to_remote_client
from schemas import Client, ClientCreate, ClientUpdate, ClientStatus
from services.store import RecordStore, CLIENTS
from services.tasks import validate_input

logger = logging.getLogger(__name__)


def _matches_client_search(client: Client, search: str) -> bool:
    needle = search.lower()
    return any(needle in (value or "").lower()
               for value in (client.full_name, client.company_name, client.email))


class ClientService:
    def __init__(self, store: RecordStore, clock=date.today):
        self.store = store
        self.clock = clock

    async def list(self, search: str = "", status: Optional[Union[ClientStatus, str]] = None) -> List[Client]:
        clients = [to_canonical_client(r) for r in await self.store.fetch_records(CLIENTS)]
        if search:
            clients = [c for c in clients if _matches_client_search(c, search)]
        if status:
            clients = [c for c in clients if c.client_status == ClientStatus(status)]
        # newest first
        return sorted(clients, key=lambda c: c.id, reverse=True)

    async def get(self, client_id: int) -> Client:
        return to_canonical_client(await self.store.get_record(CLIENTS, client_id))

    async def create(self, data: Union[ClientCreate, dict]) -> Client:
        data = validate_input(ClientCreate, data)
        fields = data.model_dump()
        fields["created_date"] = self.clock()
        client = to_canonical_client(await self.store.create_record(CLIENTS, to_remote_client(fields)))
        logger.info("Created client %s", client.id)
        return client

    async def update(self, client_id: int, data: Union[ClientUpdate, dict]) -> Client:
        data = validate_input(ClientUpdate, data)
        record = to_remote_client(data.model_dump(exclude_unset=True))
        return to_canonical_client(await self.store.update_record(CLIENTS, client_id, record))

    async def delete(self, client_id: int) -> bool:
        deleted = await self.store.delete_record(CLIENTS, client_id)
        logger.info("Deleted client %s", client_id)
        return deleted
