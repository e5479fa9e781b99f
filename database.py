# database.py
import asyncio
import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

from errors import StorageError

logger = logging.getLogger(__name__)

load_dotenv()
DB_FILE = os.getenv("STUDENTS_DB_FILE", "db.json")
MEMORY = ":memory:"


def default_data() -> Dict[str, Any]:
    return {"students": []}


def reject_constant(name: str):
    raise ValueError(f"non-finite number {name} is not valid JSON")


class Database(ABC):
    """JSON document store holding the ``students`` collection.

    ``data`` is an in-memory cache of the document. Call ``read()`` before
    trusting it and go through ``update()`` for every change: the mutator runs
    against freshly loaded data and the result is persisted before the lock
    is released.
    """

    def __init__(self):
        self.data: Optional[Dict[str, Any]] = None
        self._lock = asyncio.Lock()

    async def read(self) -> Dict[str, Any]:
        data = await asyncio.to_thread(self._load)
        if not isinstance(data, dict):
            raise StorageError("Invalid datastore document", "top level must be a JSON object")
        if not isinstance(data.setdefault("students", []), list):
            raise StorageError("Invalid datastore document", "'students' must be a list")
        if not all(isinstance(student, dict) for student in data["students"]):
            raise StorageError("Invalid datastore document", "every student must be a JSON object")
        self.data = data
        return self.data

    async def write(self) -> None:
        if self.data is None:
            self.data = default_data()
        await asyncio.to_thread(self._dump, self.data)

    async def update(self, mutator: Callable[[Dict[str, Any]], Any]) -> Any:
        async with self._lock:
            await self.read()
            result = mutator(self.data)
            await self.write()
            return result

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data if self.data is not None else default_data())

    @abstractmethod
    def _load(self) -> Any:
        ...

    @abstractmethod
    def _dump(self, data: Dict[str, Any]) -> None:
        ...


class JSONFileDatabase(Database):
    def __init__(self, path: str):
        super().__init__()
        self.path = path

    def _load(self) -> Any:
        if not os.path.exists(self.path):
            return default_data()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f, parse_constant=reject_constant)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}", str(e)) from e

    def _dump(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        if not os.path.exists(self.path):
            logger.info(f"Creating datastore file {self.path}")
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".db-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False, allow_nan=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {self.path}", str(e)) from e


class MemoryDatabase(Database):
    """Keeps the serialized document in memory instead of on disk."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._document = json.dumps(initial if initial is not None else default_data())

    def _load(self) -> Any:
        try:
            return json.loads(self._document, parse_constant=reject_constant)
        except ValueError as e:
            raise StorageError("Failed to read in-memory datastore", str(e)) from e

    def _dump(self, data: Dict[str, Any]) -> None:
        try:
            self._document = json.dumps(data, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise StorageError("Failed to write in-memory datastore", str(e)) from e


def open_database(path: str) -> Database:
    if path == MEMORY:
        return MemoryDatabase()
    return JSONFileDatabase(path)


db = open_database(DB_FILE)


def get_db() -> Database:
    return db
