"""HTTP interface: routers, dependencies, error handling and middleware."""

from fastapi import APIRouter

from .routers import items, stores, system, transactions, users


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(system.router, tags=["System"])
    router.include_router(users.router, prefix="/user", tags=["Users"])
    router.include_router(stores.router, prefix="/store", tags=["Stores"])
    router.include_router(items.router, prefix="/item", tags=["Items"])
    router.include_router(transactions.router, prefix="/transaction", tags=["Transactions"])
    return router


__all__ = [
    "create_api_router",
]
