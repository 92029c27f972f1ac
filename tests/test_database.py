import asyncio
import json

from scumfeed.models.database import JsonCursorStore, MongoCursorStore
from scumfeed.models.source import Cursor


class FakeCollection:
    """Just enough of a motor collection for parser_states"""

    def __init__(self):
        self.documents = []

    def _matches(self, document, query):
        return all(document.get(key) == value for key, value in query.items())

    async def find_one(self, query):
        for document in self.documents:
            if self._matches(document, query):
                return dict(document, _id="abc")
        return None

    async def update_one(self, query, update, upsert=False):
        for document in self.documents:
            if self._matches(document, query):
                document.update(update["$set"])
                return
        if upsert:
            self.documents.append(dict(update["$set"]))

    async def delete_one(self, query):
        self.documents = [d for d in self.documents if not self._matches(d, query)]


class FakeDatabase:
    def __init__(self):
        self.parser_states = FakeCollection()


def test_json_store_without_record_is_fresh(tmp_path):
    cursor = asyncio.run(JsonCursorStore(tmp_path).load("kills"))

    assert cursor.fresh
    assert cursor.current_file is None


def test_json_store_persists_position(tmp_path):
    log = tmp_path / "kill_1.log"
    log.write_text("x")
    store = JsonCursorStore(tmp_path / "state")

    assert asyncio.run(store.save(Cursor("kills").advance(str(log), 42)))
    record = json.loads((tmp_path / "state" / "kills.json").read_text())
    loaded = asyncio.run(store.load("kills"))

    assert record["CurrentFile"] == str(log)
    assert record["LastLineNumber"] == 42
    assert record["LastUpdate"]
    assert loaded.current_file == str(log)
    assert loaded.last_line == 42
    assert not loaded.fresh
    assert not (tmp_path / "state" / "kills.json.tmp").exists()


def test_vanished_tracked_file_resets_position(tmp_path):
    store = JsonCursorStore(tmp_path)
    asyncio.run(store.save(Cursor("kills").advance(str(tmp_path / "kill_gone.log"), 9)))

    cursor = asyncio.run(store.load("kills"))

    assert cursor.current_file is None
    assert cursor.last_line == 0
    assert not cursor.fresh


def test_corrupt_record_gives_fresh_cursor(tmp_path):
    (tmp_path / "kills.json").write_text("{not json")

    cursor = asyncio.run(JsonCursorStore(tmp_path).load("kills"))

    assert cursor.fresh


def test_json_delete(tmp_path):
    store = JsonCursorStore(tmp_path)
    asyncio.run(store.save(Cursor("kills").advance("x", 1)))

    assert asyncio.run(store.delete("kills"))
    assert not (tmp_path / "kills.json").exists()
    assert asyncio.run(store.load("kills")).fresh


def test_mongo_store_upserts_parser_state(tmp_path):
    log = tmp_path / "kill_1.log"
    log.write_text("x")
    database = FakeDatabase()
    store = MongoCursorStore(database)

    asyncio.run(store.save(Cursor("kills").advance(str(log), 3)))
    asyncio.run(store.save(Cursor("kills").advance(str(log), 7)))
    cursor = asyncio.run(store.load("kills"))

    assert len(database.parser_states.documents) == 1
    document = database.parser_states.documents[0]
    assert document["source"] == "kills"
    assert document["parser_type"] == "log_pipeline"
    assert cursor.last_line == 7


def test_mongo_failure_is_logged_not_raised():
    class Broken:
        async def find_one(self, query):
            raise ConnectionError("mongo down")

        async def update_one(self, *args, **kwargs):
            raise ConnectionError("mongo down")

    database = FakeDatabase()
    database.parser_states = Broken()
    store = MongoCursorStore(database)

    assert asyncio.run(store.load("kills")).fresh
    assert asyncio.run(store.save(Cursor("kills").advance("x", 1))) is False
