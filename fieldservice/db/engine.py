# fieldservice/db/engine.py

from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from fieldservice.config import settings

# Connection execution option that makes a SQLite transaction take the
# database write lock up front (BEGIN IMMEDIATE).
WRITE_LOCK_OPTION = "fieldservice_write_lock"


def _install_sqlite_hooks(engine: Engine) -> None:
    # pysqlite opens transactions lazily on the first write; take control of
    # BEGIN ourselves so a write scope holds the lock before it reads.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_db_engine(url: str, echo: bool = False, busy_timeout: Optional[int] = None) -> Engine:
    connect_args = {}
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args["timeout"] = settings.db_busy_timeout if busy_timeout is None else busy_timeout
        connect_args["check_same_thread"] = False

    engine = create_engine(url, echo=echo, future=True, connect_args=connect_args)
    if is_sqlite:
        _install_sqlite_hooks(engine)
    return engine


@lru_cache(maxsize=None)
def get_engine() -> Engine:
    # echo=True (DB_ECHO) if you want to see SQL printed in the terminal
    return create_db_engine(settings.database_url, echo=settings.db_echo)
