"""Transaction endpoints: create, pay, cancel, delete and list purchases."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.interfaces.http.deps import get_current_user, get_db_session, get_transaction_service
from marketplace.interfaces.http.envelope import ok
from marketplace.modules.transactions import (
    Transaction,
    TransactionCreateInput,
    TransactionDetail,
    TransactionService,
)
from marketplace.modules.users import User
from marketplace.schemas import (
    Envelope,
    ItemResponse,
    TransactionCreateRequest,
    TransactionDetailResponse,
    TransactionResponse,
    UserSummary,
)

router = APIRouter()


def _to_schema(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse.model_validate(transaction)


def _to_detail(detail: TransactionDetail) -> TransactionDetailResponse:
    base = _to_schema(detail.transaction).model_dump()
    return TransactionDetailResponse(
        **base,
        user=UserSummary.model_validate(detail.user) if detail.user else None,
        item=ItemResponse.model_validate(detail.item) if detail.item else None,
    )


@router.post(
    "/create",
    response_model=Envelope[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a pending transaction",
)
async def create_transaction(
    payload: TransactionCreateRequest,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: TransactionService = Depends(get_transaction_service),
):
    transaction = await service.create(
        TransactionCreateInput(user_id=payload.user_id, item_id=payload.item_id, quantity=payload.quantity),
        actor,
    )
    await db.commit()
    return ok(_to_schema(transaction), "Transaction created")


@router.post("/pay/{transaction_id}", response_model=Envelope[TransactionResponse], summary="Pay a transaction")
async def pay_transaction(
    transaction_id: str,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: TransactionService = Depends(get_transaction_service),
):
    transaction = await service.pay(transaction_id, actor)
    await db.commit()
    return ok(_to_schema(transaction), "Payment processed successfully")


@router.post(
    "/cancel/{transaction_id}",
    response_model=Envelope[TransactionResponse],
    summary="Cancel a pending transaction",
)
async def cancel_transaction(
    transaction_id: str,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: TransactionService = Depends(get_transaction_service),
):
    transaction = await service.cancel(transaction_id, actor)
    await db.commit()
    return ok(_to_schema(transaction), "Transaction cancelled")


@router.get("", response_model=Envelope[list[TransactionDetailResponse]], summary="List transactions")
async def list_transactions(
    user_id: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    details = await service.list_transactions(actor, user_id=user_id, status=status_filter)
    return ok([_to_detail(detail) for detail in details], "Transactions found")


@router.get("/{transaction_id}", response_model=Envelope[TransactionDetailResponse], summary="Get a transaction")
async def get_transaction(
    transaction_id: str,
    actor: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    detail = await service.get(transaction_id, actor)
    return ok(_to_detail(detail), "Transaction found")


@router.delete("/{transaction_id}", response_model=Envelope[TransactionResponse], summary="Delete a transaction")
async def delete_transaction(
    transaction_id: str,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: TransactionService = Depends(get_transaction_service),
):
    transaction = await service.delete(transaction_id, actor)
    await db.commit()
    return ok(_to_schema(transaction), "Transaction deleted")
