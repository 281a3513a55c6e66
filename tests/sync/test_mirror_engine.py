import json
import threading
from datetime import datetime

from bson import ObjectId

from dayflow_hrms.core.exceptions import StoreUnavailableError
from dayflow_hrms.sync.engine import MirrorSyncEngine
from dayflow_hrms.sync.model import MirrorCollection
from dayflow_hrms.sync.reader import MirrorReader, mirror_path

USER_ID = ObjectId("65f000000000000000000001")


def _docs():
    return {
        MirrorCollection.USERS: [
            {
                "_id": USER_ID,
                "employee_id": "EMP0001",
                "email": "jane@example.com",
                "password": "pbkdf2:sha256:secret",
                "role": "Employee",
                "profile": {"full_name": "Jane Roe"},
                "createdAt": datetime(2024, 4, 1, 9, 30),
                "__v": 0,
            }
        ],
        MirrorCollection.ATTENDANCE: [
            {
                "_id": ObjectId("65f000000000000000000002"),
                "employee_id": USER_ID,
                "date": "2024-04-01",
                "status": "Present",
                "employee": {"_id": USER_ID, "employee_id": "EMP0001", "full_name": "Jane Roe"},
            }
        ],
        MirrorCollection.LEAVES: [],
    }


class FakeSource:
    def __init__(self, docs=None):
        self.docs = docs if docs is not None else _docs()
        self.calls = []
        self.fail = False

    def fetch(self, name):
        self.calls.append(name)
        if self.fail:
            raise StoreUnavailableError("Record store timed out")
        return self.docs[name]


def _read_bytes(tmp_path, name):
    with open(mirror_path(str(tmp_path), name), "rb") as f:
        return f.read()


def test_sync_all_writes_every_collection(tmp_path):
    engine = MirrorSyncEngine(FakeSource(), str(tmp_path))

    result = engine.sync_all()

    assert result.success
    assert result.counts == {"users": 1, "attendance": 1, "leaves": 0}
    assert result.to_dict() == {"success": True, "counts": {"users": 1, "attendance": 1, "leaves": 0}}
    assert json.loads(_read_bytes(tmp_path, MirrorCollection.LEAVES)) == []


def test_user_mirror_never_contains_passwords(tmp_path):
    engine = MirrorSyncEngine(FakeSource(), str(tmp_path))
    engine.sync_all()

    users = MirrorReader(str(tmp_path)).read(MirrorCollection.USERS)

    assert users[0]["_id"] == str(USER_ID)
    assert users[0]["createdAt"] == "2024-04-01T09:30:00"
    assert "password" not in users[0]
    assert "__v" not in users[0]
    assert users[0]["team"] is None


def test_attendance_mirror_flattens_employee(tmp_path):
    MirrorSyncEngine(FakeSource(), str(tmp_path)).sync_all()

    row = MirrorReader(str(tmp_path)).read(MirrorCollection.ATTENDANCE)[0]

    assert row["employee_id"] == str(USER_ID)
    assert row["employee"] == {"employee_id": "EMP0001", "full_name": "Jane Roe"}


def test_repeated_sync_is_byte_identical(tmp_path):
    engine = MirrorSyncEngine(FakeSource(), str(tmp_path))

    engine.sync_all()
    first = {name: _read_bytes(tmp_path, name) for name in MirrorCollection}
    engine.sync_all()
    second = {name: _read_bytes(tmp_path, name) for name in MirrorCollection}

    assert first == second


def test_failed_sync_leaves_previous_file_untouched(tmp_path):
    source = FakeSource()
    engine = MirrorSyncEngine(source, str(tmp_path))
    engine.sync_all()
    before = _read_bytes(tmp_path, MirrorCollection.USERS)

    source.fail = True
    assert engine.sync_collection(MirrorCollection.USERS) is False
    result = engine.sync_all()

    assert not result.success
    assert "timed out" in result.error
    assert _read_bytes(tmp_path, MirrorCollection.USERS) == before
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith(".tmp-")] == []


def test_unserializable_document_does_not_truncate(tmp_path):
    source = FakeSource()
    engine = MirrorSyncEngine(source, str(tmp_path))
    engine.sync_all()
    before = _read_bytes(tmp_path, MirrorCollection.LEAVES)

    source.docs[MirrorCollection.LEAVES] = [{"_id": "x", "blob": object()}]

    assert engine.sync_collection(MirrorCollection.LEAVES) is False
    assert _read_bytes(tmp_path, MirrorCollection.LEAVES) == before


def test_triggers_during_a_sync_collapse_into_one_more_pass(tmp_path):
    entered = threading.Event()
    release = threading.Event()

    class BlockingSource(FakeSource):
        def fetch(self, name):
            docs = super().fetch(name)
            entered.set()
            release.wait(5)
            return docs

    source = BlockingSource()
    engine = MirrorSyncEngine(source, str(tmp_path))
    results = []
    worker = threading.Thread(target=lambda: results.append(engine.sync_collection(MirrorCollection.USERS)))
    worker.start()
    assert entered.wait(5)

    assert engine.sync_collection(MirrorCollection.USERS) is True
    assert engine.sync_collection(MirrorCollection.USERS) is True
    release.set()
    worker.join(5)

    assert results == [True]
    assert source.calls == [MirrorCollection.USERS, MirrorCollection.USERS]


def test_one_failing_collection_does_not_block_the_others(tmp_path):
    class UsersDown(FakeSource):
        def fetch(self, name):
            if name == MirrorCollection.USERS:
                raise StoreUnavailableError("users down")
            return super().fetch(name)

    result = MirrorSyncEngine(UsersDown(), str(tmp_path)).sync_all()

    assert not result.success
    assert result.error == "users: users down"
    assert result.counts == {"attendance": 1, "leaves": 0}
    assert result.to_dict()["counts"] == {"attendance": 1, "leaves": 0}
    assert MirrorReader(str(tmp_path)).read(MirrorCollection.ATTENDANCE)[0]["date"] == "2024-04-01"
    assert not (tmp_path / "users.json").exists()


def test_failed_follow_up_pass_does_not_block_the_next_trigger(tmp_path):
    entered = threading.Event()
    release = threading.Event()

    class BlockingSource(FakeSource):
        def fetch(self, name):
            docs = super().fetch(name)
            entered.set()
            release.wait(5)
            return docs

    source = BlockingSource()
    engine = MirrorSyncEngine(source, str(tmp_path))
    results = []
    worker = threading.Thread(target=lambda: results.append(engine.sync_collection(MirrorCollection.USERS)))
    worker.start()
    assert entered.wait(5)

    assert engine.sync_collection(MirrorCollection.USERS) is True
    source.fail = True
    release.set()
    worker.join(5)
    assert results == [False]

    source.fail = False
    source.docs[MirrorCollection.USERS] = []
    assert engine.sync_collection(MirrorCollection.USERS) is True

    assert len(source.calls) == 3
    assert _read_bytes(tmp_path, MirrorCollection.USERS) == b"[]"
