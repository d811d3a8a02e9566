"""MongoDB connection: one async client per process, built at startup and injected into the app."""

import asyncio
from enum import IntEnum
from typing import Optional

import structlog
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.monitoring import TopologyListener

from employee_manager.config import Settings
from employee_manager.domain.models import employee as employee_model
from employee_manager.domain.models import user as user_model
from employee_manager.infrastructure.repositories.employee_repository import MongoEmployeeRepository
from employee_manager.infrastructure.repositories.user_repository import MongoUserRepository

logger = structlog.get_logger(__name__)


class ReadyState(IntEnum):
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class StoreTopologyListener(TopologyListener):
    """Keeps `MongoStore.ready_state` in step with the driver's server monitoring."""

    def __init__(self, store: "MongoStore"):
        self.store = store

    def opened(self, event) -> None:
        pass

    def description_changed(self, event) -> None:
        # connect() and close() own the state while they run
        if self.store.ready_state in (ReadyState.CONNECTING, ReadyState.DISCONNECTING):
            return
        if event.new_description.has_writable_server():
            self.store.mark_reachable()
        else:
            self.store.mark_unreachable(ConnectionFailure("No writable MongoDB server available"))

    def closed(self, event) -> None:
        pass


class MongoStore:
    """Owns the driver client, tracks connection state and hands out repositories."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.ready_state = ReadyState.DISCONNECTED
        self._client: Optional[AsyncMongoClient] = None
        self._indexes_ready = False
        self.topology_listener = StoreTopologyListener(self)

    def _create_client(self) -> AsyncMongoClient:
        return AsyncMongoClient(
            self.settings.MONGO_URI,
            serverSelectionTimeoutMS=self.settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=self.settings.MONGO_SOCKET_TIMEOUT_MS,
            tz_aware=True,
            event_listeners=[self.topology_listener],
        )

    @property
    def db(self) -> AsyncDatabase:
        if self._client is None:
            self._client = self._create_client()
        return self._client[self.settings.MONGO_DB_NAME]

    async def connect(self) -> bool:
        """Ping the server, retrying a fixed number of times.

        A failed startup is not fatal: the driver keeps reconnecting in the
        background and requests answer 503 until the server is reachable.
        """
        retries = max(1, self.settings.MONGO_CONNECT_RETRIES)
        self.ready_state = ReadyState.CONNECTING
        for attempt in range(1, retries + 1):
            logger.info("Connecting to MongoDB", attempt=attempt, retries=retries)
            try:
                await self.db.command("ping")
                await self.ensure_indexes()
            except PyMongoError as exc:
                logger.error("MongoDB connection attempt failed", attempt=attempt, error=str(exc))
                if attempt < retries:
                    await asyncio.sleep(self.settings.MONGO_CONNECT_RETRY_DELAY_SECONDS)
                continue
            self.ready_state = ReadyState.CONNECTED
            logger.info("MongoDB connected", database=self.settings.MONGO_DB_NAME)
            return True

        self.ready_state = ReadyState.DISCONNECTED
        logger.error(
            "Failed to connect to MongoDB after all retries",
            uri_host=self.settings.MONGO_URI.rsplit("@", 1)[-1],
        )
        return False

    async def ensure_indexes(self) -> None:
        """Unique indexes are the source of truth for username/email uniqueness.

        Connection errors propagate. Any other failure (existing duplicates,
        missing privileges) is logged once and does not block requests.
        """
        if self._indexes_ready:
            return
        try:
            users = self.db[user_model.COLLECTION]
            await users.create_index([("username", ASCENDING)], unique=True)
            await users.create_index([("email", ASCENDING)], unique=True)
            employees = self.db[employee_model.COLLECTION]
            await employees.create_index([("email", ASCENDING)], unique=True)
            await employees.create_index([("createdAt", DESCENDING)])
        except ConnectionFailure:
            raise
        except PyMongoError as exc:
            logger.error("MongoDB index creation failed", error=str(exc))
        self._indexes_ready = True

    async def collection(self, name: str) -> AsyncCollection:
        await self.ensure_indexes()
        return self.db[name]

    def mark_reachable(self) -> None:
        if self.ready_state != ReadyState.CONNECTED:
            logger.info("MongoDB reachable again")
        self.ready_state = ReadyState.CONNECTED

    def mark_unreachable(self, exc: Exception) -> None:
        if self.ready_state == ReadyState.CONNECTED:
            logger.warning("MongoDB disconnected", error=str(exc))
        self.ready_state = ReadyState.DISCONNECTED

    async def close(self) -> None:
        if self._client is None:
            return
        self.ready_state = ReadyState.DISCONNECTING
        await self._client.close()
        self._client = None
        self._indexes_ready = False
        self.ready_state = ReadyState.DISCONNECTED
        logger.info("MongoDB connection closed")

    def users(self) -> MongoUserRepository:
        return MongoUserRepository(self)

    def employees(self) -> MongoEmployeeRepository:
        return MongoEmployeeRepository(self)
