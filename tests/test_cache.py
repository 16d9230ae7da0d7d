from marketplace.core.cache import TTLCache
from marketplace.infrastructure.database.repositories import SqlStoreRepository
from marketplace.modules.stores import StoreCreateInput, StoreService, StoreUpdateInput


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("key", "value")

    clock.now = 9.5
    assert cache.get("key") == "value"
    clock.now = 10
    assert cache.get("key") is None
    assert len(cache) == 0


def test_oldest_entry_is_evicted_when_full():
    cache = TTLCache(ttl_seconds=60, max_entries=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)
    cache.set("c", 4)

    assert cache.get("b") is None
    assert cache.get("a") == 3
    assert cache.get("c") == 4


def test_store_writes_invalidate_cached_lookups(run_with_db):
    async def scenario(database):
        cache = TTLCache(ttl_seconds=60)
        async with database.transaction() as session:
            service = StoreService.with_session(session, cache)
            store = await service.create_store(StoreCreateInput(name="Corner Shop", address="1 Main St"))
            assert [entry.name for entry in await service.list_stores()] == ["Corner Shop"]
            assert (await service.get_store(store.id)).name == "Corner Shop"

            # bypass the service, the cached copy is served
            await SqlStoreRepository(session).update_store(store.id, name="Renamed", address="1 Main St")
            assert (await service.get_store(store.id)).name == "Corner Shop"

            await service.update_store(store.id, StoreUpdateInput(address="2 Side St"))
            refreshed = await service.get_store(store.id)
            assert refreshed.name == "Renamed"
            assert refreshed.address == "2 Side St"
            assert [entry.address for entry in await service.list_stores()] == ["2 Side St"]

    run_with_db(scenario)


def test_store_cache_is_evicted_when_the_writer_commits(run_with_db):
    async def scenario(database):
        cache = TTLCache(ttl_seconds=60)
        async with database.transaction() as session:
            renamed = await StoreService.with_session(session, cache).create_store(
                StoreCreateInput(name="Old Name", address="1 Main St")
            )
            removed = await StoreService.with_session(session, cache).create_store(
                StoreCreateInput(name="Closing Down", address="2 Side St")
            )

        async with database.transaction() as writer:
            writer_service = StoreService.with_session(writer, cache)
            await writer_service.update_store(renamed.id, StoreUpdateInput(name="New Name"))
            await writer_service.delete_store(removed.id)

            # a concurrent request caches the committed rows before the writer commits
            async with database.transaction() as reader:
                reader_service = StoreService.with_session(reader, cache)
                assert (await reader_service.get_store(renamed.id)).name == "Old Name"
                assert await reader_service.exists(removed.id)

        async with database.transaction() as session:
            service = StoreService.with_session(session, cache)
            assert (await service.get_store(renamed.id)).name == "New Name"
            assert not await service.exists(removed.id)
            assert [store.name for store in await service.list_stores()] == ["New Name"]

    run_with_db(scenario)
