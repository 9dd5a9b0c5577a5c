from fastapi import APIRouter, Depends
from typing import List, Optional

from dependencies import get_client_service
from schemas import Client, ClientCreate, ClientUpdate, ClientStatus
from services import ClientService

router = APIRouter(
    prefix="/clients",
    tags=["clients"]
)


@router.get("", response_model=List[Client])
async def read_clients(search: str = "", status: Optional[ClientStatus] = None,
                       service: ClientService = Depends(get_client_service)):
    return await service.list(search, status)


@router.post("", response_model=Client)
async def create_client(client: ClientCreate, service: ClientService = Depends(get_client_service)):
    return await service.create(client)


@router.get("/{client_id}", response_model=Client)
async def read_client(client_id: int, service: ClientService = Depends(get_client_service)):
    return await service.get(client_id)


@router.put("/{client_id}", response_model=Client)
async def update_client(client_id: int, client: ClientUpdate,
                        service: ClientService = Depends(get_client_service)):
    return await service.update(client_id, client)


@router.delete("/{client_id}")
async def delete_client(client_id: int, service: ClientService = Depends(get_client_service)):
    await service.delete(client_id)
    return {"detail": "Client deleted"}
