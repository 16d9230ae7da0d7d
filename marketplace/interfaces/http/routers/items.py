"""Item endpoints, including multipart image uploads."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.validation import MAX_PAGE_SIZE, MAX_PRICE, MAX_STOCK, ensure_uuid
from marketplace.interfaces.http.deps import get_current_user, get_db_session, get_item_service
from marketplace.interfaces.http.envelope import ok
from marketplace.modules.common import UNSET, Page
from marketplace.modules.items import Item, ItemCreateInput, ItemListQuery, ItemService, ItemUpdateInput
from marketplace.modules.users import User
from marketplace.schemas import Envelope, ItemPageResponse, ItemResponse, PaginationInfo

router = APIRouter()


def _to_schema(item: Item) -> ItemResponse:
    return ItemResponse.model_validate(item)


def _to_page(page: Page[Item]) -> ItemPageResponse:
    return ItemPageResponse(
        items=[_to_schema(item) for item in page.items],
        pagination=PaginationInfo(
            total_items=page.total,
            total_pages=page.total_pages,
            current_page=page.page,
            items_per_page=page.limit,
        ),
    )


def _image_or_none(image: Optional[UploadFile]) -> Optional[UploadFile]:
    # browsers submit an empty part when no file was chosen
    if image is None or not image.filename:
        return None
    return image


@router.post(
    "/create",
    response_model=Envelope[ItemResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an item",
)
async def create_item(
    name: str = Form(..., min_length=1, max_length=100),
    price: int = Form(..., ge=0, le=MAX_PRICE),
    store_id: str = Form(...),
    stock: int = Form(0, ge=0, le=MAX_STOCK),
    image: Optional[UploadFile] = File(None),
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: ItemService = Depends(get_item_service),
):
    item = await service.create_item(
        ItemCreateInput(
            name=name,
            price=price,
            store_id=ensure_uuid(store_id, entity="store"),
            stock=stock,
        ),
        actor,
        _image_or_none(image),
    )
    await db.commit()
    return ok(_to_schema(item), "Item created")


@router.get("", response_model=Envelope[ItemPageResponse], summary="List items")
async def list_items(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    sort_by: Literal["created_at", "name", "price", "stock"] = Query("created_at"),
    sort_order: Literal["asc", "desc", "ASC", "DESC"] = Query("desc"),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    name: Optional[str] = Query(None, max_length=100),
    service: ItemService = Depends(get_item_service),
):
    result = await service.list_items(
        ItemListQuery(
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            min_price=min_price,
            max_price=max_price,
            name=name,
        )
    )
    return ok(_to_page(result), "Items found")


@router.get("/byId/{item_id}", response_model=Envelope[ItemResponse], summary="Get an item by ID")
async def get_item(item_id: str, service: ItemService = Depends(get_item_service)):
    item = await service.get_item(ensure_uuid(item_id, entity="item"))
    return ok(_to_schema(item), "Item found")


@router.get("/byStoreId/{store_id}", response_model=Envelope[ItemPageResponse], summary="List items of a store")
async def list_store_items(
    store_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    service: ItemService = Depends(get_item_service),
):
    result = await service.list_by_store(ensure_uuid(store_id, entity="store"), page=page, limit=limit)
    return ok(_to_page(result), "Items found")


@router.put("/{item_id}", response_model=Envelope[ItemResponse], summary="Update an item")
async def update_item(
    item_id: str,
    name: Optional[str] = Form(None, max_length=100),
    price: Optional[int] = Form(None, ge=0, le=MAX_PRICE),
    store_id: Optional[str] = Form(None),
    stock: Optional[int] = Form(None, ge=0, le=MAX_STOCK),
    image: Optional[UploadFile] = File(None),
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: ItemService = Depends(get_item_service),
):
    changes = ItemUpdateInput(
        name=name if name is not None else UNSET,
        price=price if price is not None else UNSET,
        store_id=ensure_uuid(store_id, entity="store") if store_id else UNSET,
        stock=stock if stock is not None else UNSET,
    )
    item = await service.update_item(ensure_uuid(item_id, entity="item"), changes, actor, _image_or_none(image))
    await db.commit()
    await service.discard_stale_images()
    return ok(_to_schema(item), "Item updated")


@router.delete("/{item_id}", response_model=Envelope[ItemResponse], summary="Delete an item")
async def delete_item(
    item_id: str,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: ItemService = Depends(get_item_service),
):
    item = await service.delete_item(ensure_uuid(item_id, entity="item"), actor)
    await db.commit()
    await service.discard_stale_images()
    return ok(_to_schema(item), "Item deleted")
