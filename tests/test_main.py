import asyncio
import unittest
from unittest.mock import patch

from usermgmt import main
from usermgmt.core.exceptions import DatabaseConnectionError
from tests.fake_mongo import FakeDatabase


async def _start_and_stop(app):
    async with main.lifespan(app):
        pass


class TestRun(unittest.TestCase):
    @patch("usermgmt.main.uvicorn.run")
    @patch("usermgmt.main.connect_database")
    def test_exits_with_status_1_when_database_is_unreachable(
        self, connect_database, uvicorn_run
    ):
        connect_database.side_effect = DatabaseConnectionError("connection refused")

        with self.assertLogs("usermgmt.main", level="CRITICAL") as logs:
            with self.assertRaises(SystemExit) as ctx:
                main.run()

        self.assertEqual(ctx.exception.code, 1)
        uvicorn_run.assert_not_called()
        self.assertIn("connection refused", logs.output[0])

    @patch("usermgmt.main.uvicorn.run")
    @patch("usermgmt.main.connect_database")
    def test_serves_once_database_answers(self, connect_database, uvicorn_run):
        connect_database.return_value = FakeDatabase()

        main.run()

        uvicorn_run.assert_called_once()
        args, kwargs = uvicorn_run.call_args
        self.assertIs(args[0], main.app)
        self.assertEqual(kwargs["port"], main.settings.PORT)


class TestLifespan(unittest.TestCase):
    @patch("usermgmt.main.connect_database")
    def test_startup_fails_without_database(self, connect_database):
        connect_database.side_effect = DatabaseConnectionError("timed out")

        with self.assertRaises(DatabaseConnectionError):
            asyncio.run(_start_and_stop(main.app))

    @patch("usermgmt.main.connect_database")
    def test_startup_creates_unique_email_index(self, connect_database):
        db = FakeDatabase()
        connect_database.return_value = db

        asyncio.run(_start_and_stop(main.app))

        self.assertEqual(db["users"].unique_fields, ["email"])


if __name__ == "__main__":
    unittest.main()
