"""
SCUM Feed - Cursor Persistence
Durable per-source read positions (JSON files or MongoDB parser_states)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
from motor.motor_asyncio import AsyncIOMotorClient
from motor.motor_asyncio import AsyncIOMotorDatabase

from .source import Cursor

logger = logging.getLogger(__name__)


class CursorStore:
    """
    CURSOR STORE
    - One record per Source, keyed by source name
    - A tracked file that no longer exists resets the cursor on load
    - Read/write failures are logged; the pipeline keeps running
    """

    async def _read(self, source: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def _write(self, source: str, record: Dict[str, Any]):
        raise NotImplementedError

    async def _delete(self, source: str):
        raise NotImplementedError

    async def load(self, source: str) -> Cursor:
        """Load the cursor of a source, or a fresh one if none was ever saved"""
        try:
            record = await self._read(source)
        except Exception as e:
            logger.error(f"Failed to load cursor for {source}: {e}")
            return Cursor(source)

        if not record:
            logger.info(f"No saved position for {source}, starting fresh")
            return Cursor(source)

        try:
            cursor = Cursor.from_record(source, record)
        except (TypeError, ValueError) as e:
            logger.error(f"Discarding malformed cursor for {source}: {e}")
            return Cursor(source)

        if cursor.current_file and not os.path.exists(cursor.current_file):
            logger.info(f"Tracked file for {source} is gone ({cursor.current_file}), resetting position")
            return cursor.reset()

        logger.debug(f"Loaded cursor for {source}: {cursor.current_file} line {cursor.last_line}")
        return cursor

    async def save(self, cursor: Cursor) -> bool:
        try:
            await self._write(cursor.source, cursor.to_record())
            logger.debug(f"Saved cursor for {cursor.source}: line {cursor.last_line}")
            return True
        except Exception as e:
            logger.error(f"Failed to save cursor for {cursor.source}: {e}")
            return False

    async def delete(self, source: str) -> bool:
        try:
            await self._delete(source)
            return True
        except Exception as e:
            logger.error(f"Failed to delete cursor for {source}: {e}")
            return False


class JsonCursorStore(CursorStore):
    """One <source>.json file per Source under the state directory"""

    def __init__(self, directory):
        self.directory = Path(directory)

    def path_for(self, source: str) -> Path:
        return self.directory / f"{source}.json"

    async def _read(self, source: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(source)
        if not path.exists():
            return None

        async with aiofiles.open(path, 'r', encoding='utf-8') as f:
            content = await f.read()
        return json.loads(content) if content.strip() else None

    async def _write(self, source: str, record: Dict[str, Any]):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(source)
        temp_path = path.with_name(path.name + '.tmp')

        async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
            await f.write(json.dumps(record, indent=2))
        os.replace(temp_path, path)

    async def _delete(self, source: str):
        path = self.path_for(source)
        if path.exists():
            path.unlink()


class MongoCursorStore(CursorStore):
    """Cursor records in the parser_states collection"""

    def __init__(self, database: AsyncIOMotorDatabase, parser_type: str = "log_pipeline"):
        self.db = database
        self.parser_states = database.parser_states
        self.parser_type = parser_type

    @classmethod
    def from_uri(cls, uri: str, database_name: str) -> 'MongoCursorStore':
        client = AsyncIOMotorClient(uri)
        return cls(client[database_name])

    def _filter(self, source: str) -> Dict[str, Any]:
        return {"source": source, "parser_type": self.parser_type}

    async def initialize_indexes(self):
        try:
            await self.parser_states.create_index([("source", 1), ("parser_type", 1)], unique=True)
        except Exception as e:
            logger.error(f"Failed to create parser_states index: {e}")

    async def _read(self, source: str) -> Optional[Dict[str, Any]]:
        state = await self.parser_states.find_one(self._filter(source))
        return state if state else None

    async def _write(self, source: str, record: Dict[str, Any]):
        await self.parser_states.update_one(
            self._filter(source),
            {
                "$set": {
                    **self._filter(source),
                    **record
                }
            },
            upsert=True
        )

    async def _delete(self, source: str):
        await self.parser_states.delete_one(self._filter(source))


def create_cursor_store(settings) -> CursorStore:
    """Build the cursor store selected by settings.cursor_store"""
    if settings.cursor_store == 'mongo':
        logger.info(f"Using MongoDB cursor store ({settings.mongo_database})")
        return MongoCursorStore.from_uri(settings.mongo_uri, settings.mongo_database)

    logger.info(f"Using JSON cursor store in {settings.state_directory}")
    return JsonCursorStore(settings.state_directory)
