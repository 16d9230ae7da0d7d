"""Store endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.interfaces.http.deps import get_current_admin, get_db_session, get_store_service
from marketplace.interfaces.http.envelope import ok
from marketplace.modules.common import UNSET
from marketplace.modules.stores import Store, StoreCreateInput, StoreService, StoreUpdateInput
from marketplace.modules.users import User
from marketplace.schemas import Envelope, StoreCreateRequest, StoreResponse, StoreUpdateRequest

router = APIRouter()


def _to_schema(store: Store) -> StoreResponse:
    return StoreResponse.model_validate(store)


@router.get("", response_model=Envelope[list[StoreResponse]], summary="List stores")
@router.get("/getAll", response_model=Envelope[list[StoreResponse]], summary="List stores")
async def list_stores(service: StoreService = Depends(get_store_service)):
    stores = await service.list_stores()
    return ok([_to_schema(store) for store in stores], "Stores found")


@router.post(
    "/create",
    response_model=Envelope[StoreResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a store",
)
async def create_store(
    payload: StoreCreateRequest,
    _: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    service: StoreService = Depends(get_store_service),
):
    store = await service.create_store(StoreCreateInput(name=payload.name, address=payload.address))
    await db.commit()
    return ok(_to_schema(store), "Store created")


@router.get("/{store_id}", response_model=Envelope[StoreResponse], summary="Get a store by ID")
async def get_store(store_id: str, service: StoreService = Depends(get_store_service)):
    store = await service.get_store(store_id)
    return ok(_to_schema(store), "Store found")


@router.put("/{store_id}", response_model=Envelope[StoreResponse], summary="Update a store")
async def update_store(
    store_id: str,
    payload: StoreUpdateRequest,
    _: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    service: StoreService = Depends(get_store_service),
):
    provided = payload.model_fields_set
    changes = StoreUpdateInput(
        name=payload.name if "name" in provided else UNSET,
        address=payload.address if "address" in provided else UNSET,
    )
    store = await service.update_store(store_id, changes)
    await db.commit()
    return ok(_to_schema(store), "Store updated")


@router.delete("/{store_id}", response_model=Envelope[StoreResponse], summary="Delete a store")
async def delete_store(
    store_id: str,
    _: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    service: StoreService = Depends(get_store_service),
):
    store = await service.delete_store(store_id)
    await db.commit()
    return ok(_to_schema(store), "Store deleted")
