from cardkeeper.db.database import get_session, init_db
from cardkeeper.db.operations import delete_objects, get_object, put_object
from cardkeeper.db.store import ObjectStore

__all__ = [
    "ObjectStore",
    "delete_objects",
    "get_object",
    "get_session",
    "init_db",
    "put_object",
]
