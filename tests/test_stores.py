import asyncio
import time
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth.exceptions import ConflictError
from auth.stores.memory_store import MemoryRateLimiter, MemoryUserStore, MemoryVerificationStore
from auth.stores.sql_store import SqlUserStore, SqlVerificationStore
from db.engine import init_db


def _user(email="a@x.com", **extra):
    data = {"email": email, "name": "A", "hashed_password": "$2b$04$hash", "is_verified": False}
    data.update(extra)
    return data


class TestMemoryStores(unittest.IsolatedAsyncioTestCase):
    async def test_user_lifecycle(self):
        store = MemoryUserStore()
        created = await store.create_user(_user(email="A@X.com"))

        self.assertEqual(created["email"], "a@x.com")
        self.assertEqual(created["role"], "user")
        self.assertEqual((await store.get_by_id(created["id"]))["email"], "a@x.com")

        updated = await store.update_user(created["id"], {"is_verified": True, "email": "b@x.com"})
        self.assertTrue(updated["is_verified"])
        self.assertEqual(updated["email"], "a@x.com")

        with self.assertRaises(ConflictError):
            await store.create_user(_user())

    async def test_code_is_purged_after_ttl(self):
        store = MemoryVerificationStore()
        await store.replace("a@x.com", {"code_hash": "h", "created_at": time.time()}, ttl_seconds=0.05)

        self.assertIsNotNone(await store.get("a@x.com"))
        await asyncio.sleep(0.1)
        self.assertIsNone(await store.get("a@x.com"))

    async def test_replacement_survives_old_timer(self):
        store = MemoryVerificationStore()
        await store.replace("a@x.com", {"code_hash": "old", "created_at": time.time()}, ttl_seconds=0.05)
        await store.replace("a@x.com", {"code_hash": "new", "created_at": time.time()}, ttl_seconds=10)

        await asyncio.sleep(0.1)
        record = await store.get("a@x.com")
        self.assertEqual(record["code_hash"], "new")
        await store.delete("a@x.com")

    async def test_attempts_count_per_record(self):
        store = MemoryVerificationStore()
        self.assertEqual(await store.increment_attempts("a@x.com"), 0)

        await store.replace("a@x.com", {"code_hash": "h", "created_at": time.time()}, ttl_seconds=10)
        self.assertEqual(await store.increment_attempts("a@x.com"), 1)
        self.assertEqual(await store.increment_attempts("A@x.com"), 2)

        record = await store.get("a@x.com")
        self.assertEqual(record["attempts"], 2)
        self.assertNotIn("confirmed", record)
        await store.delete("a@x.com")

    async def test_rate_limiter_window(self):
        limiter = MemoryRateLimiter()
        results = [await limiter.allow("ip", limit=2, window_seconds=60) for _ in range(3)]

        self.assertEqual(results, [True, True, False])
        self.assertTrue(await limiter.allow("other-ip", limit=2, window_seconds=60))

    async def test_rate_limiter_forgets_quiet_clients(self):
        limiter = MemoryRateLimiter()
        for index in range(5):
            await limiter.allow(f"ip-{index}", limit=1, window_seconds=0.05)

        await asyncio.sleep(0.1)
        self.assertTrue(await limiter.allow("ip-new", limit=1, window_seconds=0.05))

        self.assertEqual(list(limiter._hits), ["ip-new"])
        # A forgotten client starts a fresh window
        self.assertTrue(await limiter.allow("ip-0", limit=1, window_seconds=0.05))


class TestSqlStores(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        init_db(bind=engine)
        self.addCleanup(engine.dispose)
        session_factory = sessionmaker(bind=engine, autoflush=False)
        self.users = SqlUserStore(session_factory)
        self.codes = SqlVerificationStore(session_factory)

    async def test_user_lifecycle(self):
        created = await self.users.create_user(_user(email="A@X.com"))

        self.assertEqual(created["email"], "a@x.com")
        self.assertEqual(len(created["id"]), 32)
        self.assertIsInstance(created["created_at"], int)
        self.assertEqual((await self.users.get_by_email("a@x.com"))["id"], created["id"])

        updated = await self.users.update_user(created["id"], {"is_verified": True, "name": "Alice"})
        self.assertTrue(updated["is_verified"])
        self.assertEqual(updated["name"], "Alice")
        self.assertIsNone(await self.users.get_by_id("missing"))

    async def test_duplicate_email_conflicts(self):
        await self.users.create_user(_user())
        with self.assertRaises(ConflictError):
            await self.users.create_user(_user())

    async def test_replace_keeps_one_code_per_email(self):
        now = time.time()
        await self.codes.replace("a@x.com", {"code_hash": "first", "created_at": now}, ttl_seconds=600)
        await self.codes.replace("a@x.com", {"code_hash": "second", "created_at": now}, ttl_seconds=600)

        record = await self.codes.get("a@x.com")
        self.assertEqual(record["code_hash"], "second")
        self.assertEqual(record["attempts"], 0)
        self.assertEqual(set(record), {"email", "code_hash", "created_at", "attempts"})

    async def test_replace_sweeps_expired_codes(self):
        await self.codes.replace(
            "stale@x.com", {"code_hash": "h", "created_at": time.time() - 1000}, ttl_seconds=600
        )
        await self.codes.replace("fresh@x.com", {"code_hash": "h", "created_at": time.time()}, ttl_seconds=600)

        self.assertIsNone(await self.codes.get("stale@x.com"))
        self.assertIsNotNone(await self.codes.get("fresh@x.com"))

    async def test_attempts_and_delete(self):
        await self.codes.replace("a@x.com", {"code_hash": "h", "created_at": time.time()}, ttl_seconds=600)

        self.assertEqual(await self.codes.increment_attempts("a@x.com"), 1)
        self.assertEqual((await self.codes.get("a@x.com"))["attempts"], 1)

        await self.codes.delete("a@x.com")
        self.assertIsNone(await self.codes.get("a@x.com"))
        self.assertEqual(await self.codes.increment_attempts("a@x.com"), 0)


if __name__ == "__main__":
    unittest.main()
