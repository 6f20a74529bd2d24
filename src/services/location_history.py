"""Per-entity current location, bounded history and derived region.

Every accepted location goes through :meth:`LocationHistoryTracker.update_location`,
which builds a complete new :class:`LocationSnapshot` -- the new current
record, the superseded record prepended to history (three newest kept) and
a recomputed approximate location -- and stores it as one value.

Writes are compare-and-set on the snapshot ``version``: a store only
accepts a snapshot built from the version it currently holds.  Writers in
one process are additionally serialised by a per-entity
:class:`asyncio.Lock`; writers in different processes that race on the
same entity see :class:`SnapshotConflictError`, and the tracker rebuilds
from the fresh snapshot.  Readers never lock and see whichever whole
snapshot was stored last.

State machine per entity::

    NoLocation --update_location--> Located --update_location--> Located

There is no delete or rollback.  A previous value can be read from the
history but is never restored automatically.
"""

from __future__ import annotations

import asyncio
import contextlib
import weakref
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from typing import Any, Final, Protocol, runtime_checkable

import orjson
import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from src.exceptions import LocationStoreError, SnapshotConflictError
from src.models.enums import LocationMethod
from src.models.location import MAX_HISTORY, LocationRecord, LocationSnapshot
from src.services.regions import approximate_location

logger = structlog.get_logger(__name__)

MAX_WRITE_ATTEMPTS: Final[int] = 3


# ---------------------------------------------------------------------------
# Snapshot stores
# ---------------------------------------------------------------------------


@runtime_checkable
class LocationStore(Protocol):
    """Durable persistence for location snapshots (one value per entity).

    ``save`` must fail with :class:`SnapshotConflictError` unless the
    stored version equals *expected_version* (``0`` meaning "nothing
    stored yet").  Stores never evict.
    """

    async def load(self, entity_id: str) -> LocationSnapshot | None: ...

    async def save(self, snapshot: LocationSnapshot, expected_version: int) -> None: ...

    async def all(self) -> list[LocationSnapshot]: ...

    async def ping(self) -> bool: ...


class InMemoryLocationStore:
    """Process-local store for development and tests.

    The version check and the dict assignment run without an ``await`` in
    between, so they are atomic on the event loop.
    """

    __slots__ = ("_snapshots",)

    def __init__(self) -> None:
        self._snapshots: dict[str, LocationSnapshot] = {}

    async def load(self, entity_id: str) -> LocationSnapshot | None:
        return self._snapshots.get(entity_id)

    async def save(self, snapshot: LocationSnapshot, expected_version: int) -> None:
        stored = self._snapshots.get(snapshot.entity_id)
        if (stored.version if stored is not None else 0) != expected_version:
            raise SnapshotConflictError(snapshot.entity_id, expected_version)
        self._snapshots[snapshot.entity_id] = snapshot

    async def all(self) -> list[LocationSnapshot]:
        return list(self._snapshots.values())

    async def ping(self) -> bool:
        return True


# KEYS[1] snapshot hash, KEYS[2] index set.
# ARGV: expected version, new version, snapshot JSON, entity id.
_SAVE_SCRIPT: Final[str] = """
local stored = redis.call('HGET', KEYS[1], 'version')
if (stored or '0') ~= ARGV[1] then
    return 0
end
redis.call('HSET', KEYS[1], 'version', ARGV[2], 'data', ARGV[3])
redis.call('SADD', KEYS[2], ARGV[4])
return 1
"""


@contextlib.contextmanager
def _redis_errors(operation: str, entity_id: str | None = None) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        logger.error("location_store.redis_failed", operation=operation, entity_id=entity_id, error=str(exc))
        raise LocationStoreError(f"Location store unavailable ({operation})") from exc


class RedisLocationStore:
    """Snapshots in Redis, shared by every API worker.

    Each entity is a hash ``{prefix}{entity_id}`` holding ``version`` and
    the snapshot JSON under ``data``.  A Lua script compares the version,
    writes the hash and adds the id to the ``{prefix}_index`` set in one
    atomic step.  Keys carry no TTL.  Redis failures raise
    :class:`LocationStoreError`; nothing falls back to memory.

    Parameters
    ----------
    client:
        A ``redis.asyncio.Redis`` client (``decode_responses=False``).
    prefix:
        Key prefix for snapshot hashes and the index set.
    """

    __slots__ = ("_index_key", "_prefix", "_redis", "_save_script")

    def __init__(self, client: aioredis.Redis, *, prefix: str = "fixly:location:") -> None:
        self._redis = client
        self._prefix = prefix
        self._index_key = f"{prefix}_index"
        self._save_script = client.register_script(_SAVE_SCRIPT)

    @classmethod
    def from_url(cls, url: str, *, prefix: str = "fixly:location:") -> RedisLocationStore:
        return cls(aioredis.from_url(url, decode_responses=False), prefix=prefix)

    def _key(self, entity_id: str) -> str:
        return f"{self._prefix}{entity_id}"

    @staticmethod
    def _decode(raw: bytes | None) -> LocationSnapshot | None:
        if raw is None:
            return None
        return LocationSnapshot.model_validate(orjson.loads(raw))

    async def load(self, entity_id: str) -> LocationSnapshot | None:
        with _redis_errors("load", entity_id):
            raw = await self._redis.hget(self._key(entity_id), "data")
        return self._decode(raw)

    async def save(self, snapshot: LocationSnapshot, expected_version: int) -> None:
        with _redis_errors("save", snapshot.entity_id):
            written = await self._save_script(
                keys=[self._key(snapshot.entity_id), self._index_key],
                args=[
                    expected_version,
                    snapshot.version,
                    orjson.dumps(snapshot.model_dump(mode="json")),
                    snapshot.entity_id,
                ],
            )
        if not written:
            raise SnapshotConflictError(snapshot.entity_id, expected_version)

    async def all(self) -> list[LocationSnapshot]:
        with _redis_errors("all"):
            members = await self._redis.smembers(self._index_key)
            entity_ids = sorted(m.decode() if isinstance(m, bytes) else m for m in members)
            if not entity_ids:
                return []
            pipe = self._redis.pipeline()
            for entity_id in entity_ids:
                pipe.hget(self._key(entity_id), "data")
            raws: list[Any] = await pipe.execute()
        return [snapshot for snapshot in map(self._decode, raws) if snapshot is not None]

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._redis.aclose()


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LocationHistoryTracker:
    """Applies atomic location updates for owning entities.

    Parameters
    ----------
    store:
        Where snapshots live.  Defaults to an :class:`InMemoryLocationStore`.
    clock:
        Returns the timestamp stamped on accepted records.
    """

    __slots__ = ("_clock", "_locks", "_store")

    def __init__(
        self,
        store: LocationStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store: LocationStore = store if store is not None else InMemoryLocationStore()
        self._clock = clock
        # Entries disappear once no coroutine holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, entity_id: str) -> asyncio.Lock:
        lock = self._locks.get(entity_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[entity_id] = lock
        return lock

    @property
    def tracked_locks(self) -> int:
        """Number of per-entity locks currently alive."""
        return len(self._locks)

    async def get_snapshot(self, entity_id: str) -> LocationSnapshot | None:
        """Current snapshot for *entity_id*, or ``None`` before its first update."""
        return await self._store.load(entity_id)

    async def located_entities(self) -> list[LocationSnapshot]:
        return await self._store.all()

    async def ping(self) -> bool:
        return await self._store.ping()

    def _next_snapshot(
        self,
        entity_id: str,
        record: LocationRecord,
        role: str | None,
        previous: LocationSnapshot | None,
    ) -> LocationSnapshot:
        now = self._clock()
        current = record.model_copy(
            update={
                "timestamp": now,
                "verified": record.method == LocationMethod.GPS,
            }
        )

        if previous is None:
            history: tuple = ()
            version = 1
        else:
            history = (previous.current.to_history_entry(), *previous.history)[:MAX_HISTORY]
            version = previous.version + 1

        return LocationSnapshot(
            entity_id=entity_id,
            role=role if role is not None else (previous.role if previous else None),
            current=current,
            history=history,
            approximate=approximate_location(current.city, current.state, now),
            version=version,
        )

    async def update_location(
        self,
        entity_id: str,
        record: LocationRecord,
        role: str | None = None,
    ) -> LocationSnapshot:
        """Replace the entity's location and recompute history and region.

        The incoming *record* has already passed model validation, so
        nothing below can fail half-way: the new snapshot is built in full
        and then stored with a single compare-and-set write.  GPS fixes are
        marked verified.  *role* is remembered on the snapshot; ``None``
        keeps the stored role.

        Raises
        ------
        SnapshotConflictError
            Other writers won the race :data:`MAX_WRITE_ATTEMPTS` times.
        LocationStoreError
            The store is unreachable; the stored snapshot is unchanged.
        """
        lock = self._lock_for(entity_id)
        async with lock:
            for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
                previous = await self._store.load(entity_id)
                snapshot = self._next_snapshot(entity_id, record, role, previous)
                try:
                    await self._store.save(snapshot, expected_version=previous.version if previous else 0)
                    break
                except SnapshotConflictError:
                    logger.warning("location_history.write_conflict", entity_id=entity_id, attempt=attempt)
                    if attempt == MAX_WRITE_ATTEMPTS:
                        raise

        logger.info(
            "location_history.updated",
            entity_id=entity_id,
            city=snapshot.current.city,
            state=snapshot.current.state,
            method=snapshot.current.method,
            region=snapshot.approximate.region,
            history_len=len(snapshot.history),
            version=snapshot.version,
        )
        return snapshot
