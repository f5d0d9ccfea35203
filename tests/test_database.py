from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import text
from sqlalchemy.pool import QueuePool, StaticPool

from app.db.postgres import Database, fetch_all


def test_in_memory_sqlite_shares_one_connection():
    db = Database("sqlite://", pool_size=3, pool_timeout=1)
    try:
        assert isinstance(db.engine.pool, StaticPool)
        db.create_schema()
        with db.session() as conn:
            conn.execute(text("INSERT INTO users (username, password) VALUES ('alice', 'x')"))

        # a worker thread sees the same database
        with ThreadPoolExecutor(max_workers=1) as pool:
            rows = pool.submit(_usernames, db).result()
        assert rows == ["alice"]
        assert db.ping()
    finally:
        db.dispose()


def test_file_sqlite_uses_bounded_pool(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'pool.db'}", pool_size=2, pool_timeout=1)
    try:
        assert isinstance(db.engine.pool, QueuePool)
        assert db.engine.pool.size() == 2
        assert db.ping()
    finally:
        db.dispose()


def test_session_rolls_back_on_error(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'tx.db'}")
    db.create_schema()
    try:
        with db.session() as conn:
            conn.execute(text("INSERT INTO users (username, password) VALUES ('alice', 'x')"))
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert _usernames(db) == []
    db.dispose()


def _usernames(db):
    with db.session() as conn:
        return [r["username"] for r in fetch_all(conn, "SELECT username FROM users")]
