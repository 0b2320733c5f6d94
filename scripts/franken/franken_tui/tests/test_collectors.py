from __future__ import annotations

import json
import sqlite3
import subprocess
import tempfile
import unittest
from contextlib import closing
from pathlib import Path
from unittest import mock
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from franken_tui.collectors import collect_safely, database_path, read_env, tail_lines  # noqa: E402
from franken_tui.collectors import cache, jobs, logs, overview, queues, scheduler  # noqa: E402
from franken_tui.collectors.metrics import MetricsCollector  # noqa: E402
from franken_tui.formatting import human_size, sparkline  # noqa: E402
from franken_tui.models import PanelData  # noqa: E402

LOG_TEXT = """[2026-01-01 10:00:00] local.INFO: started
[2026-01-01 10:00:01] local.ERROR: boom {"exception":"RuntimeException"}
#0 /app/Http/Controller.php(12): handle()
#1 {main}
[2026-01-01 10:00:02] production.DEBUG: details
"""

SCHEDULE_OUTPUT = """
  0 * * * *    php artisan inspire .............. Next Due: 12 minutes from now
  */5 * * * *  App\\Jobs\\PruneSessions ........ Next Due: 2 minutes from now
"""


def make_database(app_dir: Path) -> Path:
    db_path = app_dir / "database" / "database.sqlite"
    db_path.parent.mkdir(parents=True)
    with closing(sqlite3.connect(db_path)) as conn:
        conn.execute(
            "CREATE TABLE jobs (id INTEGER PRIMARY KEY, queue TEXT, payload TEXT, attempts INTEGER,"
            " reserved_at INTEGER, available_at INTEGER, created_at INTEGER)"
        )
        conn.execute(
            "CREATE TABLE failed_jobs (id INTEGER PRIMARY KEY, uuid TEXT, connection TEXT, queue TEXT,"
            " payload TEXT, exception TEXT, failed_at TEXT)"
        )
        conn.execute(
            "INSERT INTO jobs VALUES (1, 'default', ?, 0, NULL, 1700000000, 1700000000)",
            (json.dumps({"displayName": "App\\Jobs\\SendMail"}),),
        )
        conn.execute(
            "INSERT INTO jobs VALUES (2, 'emails', ?, 1, 1700000100, 1700000100, 1700000100)",
            (json.dumps({"displayName": "App\\Jobs\\SendDigest"}),),
        )
        conn.execute(
            "INSERT INTO failed_jobs VALUES (1, 'u-1', 'database', 'default', ?, 'trace', '2030-01-01 00:00:00')",
            (json.dumps({"displayName": "App\\Jobs\\SyncInvoices"}),),
        )
        conn.commit()
    return db_path


class CollectorHelperTests(unittest.TestCase):
    def test_collect_safely_contains_exceptions(self):
        def broken():
            raise RuntimeError("boom")

        data = collect_safely("queues", broken, "Queues")
        self.assertEqual(data.status, "error")
        self.assertEqual(data.items, [])
        self.assertIn("RuntimeError: boom", data.errors[0])

    def test_collect_safely_rejects_non_panel_data(self):
        data = collect_safely("jobs", lambda: None)
        self.assertEqual(data.status, "error")
        self.assertEqual(data.title, "Jobs")

    def test_read_env_and_database_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            (app_dir / ".env").write_text('APP_NAME="Demo App"\nDB_DATABASE=storage/app.sqlite\n')
            env = read_env(app_dir)
            self.assertEqual(env["APP_NAME"], "Demo App")
            self.assertEqual(database_path(app_dir, env), app_dir / "storage" / "app.sqlite")
            self.assertIsNone(database_path(app_dir, {"DB_CONNECTION": "mysql"}))
            self.assertEqual(database_path(app_dir, {}), app_dir / "database" / "database.sqlite")

    def test_tail_lines_reads_backwards(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "big.log"
            path.write_text("".join(f"line {i}\n" for i in range(1000)))
            self.assertEqual(tail_lines(path, 3, chunk_size=64), ["line 997", "line 998", "line 999"])


class QueueCollectorTests(unittest.TestCase):
    def test_counts_per_queue(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            make_database(app_dir)
            with mock.patch("franken_tui.collectors.queues.collect_workers", return_value=[{"pid": "42"}]):
                data = queues.collect(app_dir)
        self.assertEqual(
            data.items,
            [
                {"name": "default", "pending": 1, "failed": 1},
                {"name": "emails", "pending": 1, "failed": 0},
            ],
        )
        self.assertEqual(data.status, "warn")
        self.assertEqual(data.meta["pending"], 2)
        self.assertEqual(data.meta["workers"], [{"pid": "42"}])

    def test_unsupported_database(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            (app_dir / ".env").write_text("DB_CONNECTION=mysql\n")
            data = queues.collect(app_dir)
        self.assertEqual(data.status, "error")
        self.assertIn("mysql", data.errors[0])

    def test_missing_database_surfaces_as_empty_data(self):
        with tempfile.TemporaryDirectory() as tmp:
            data = collect_safely("queues", lambda: queues.collect(Path(tmp)), "Queues")
        self.assertEqual(data.status, "error")
        self.assertEqual(data.items, [])


class JobCollectorTests(unittest.TestCase):
    def test_newest_first_with_status(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            make_database(app_dir)
            data = jobs.collect(app_dir)
        self.assertEqual([(j["id"], j["status"]) for j in data.items], [(1, "failed"), (2, "processing"), (1, "pending")])
        self.assertEqual(data.items[0]["class"], "App\\Jobs\\SyncInvoices")
        self.assertEqual(data.meta["failed"], 1)
        self.assertEqual(data.status, "warn")


class LogCollectorTests(unittest.TestCase):
    def test_parse_lines_groups_continuations(self):
        entries = logs.parse_lines(LOG_TEXT.splitlines())
        self.assertEqual([e["level"] for e in entries], ["info", "error", "debug"])
        self.assertEqual(entries[1]["extra"], 2)
        self.assertEqual(entries[2]["channel"], "production")

    def test_collect_filters_levels_newest_first(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "laravel.log"
            path.write_text(LOG_TEXT)
            data = logs.collect(path, limit=10, levels=("error", "info"))
        self.assertEqual([e["message"] for e in data.items], ['boom {"exception":"RuntimeException"}', "started"])
        self.assertEqual(data.meta["errors"], 1)
        self.assertEqual(data.status, "warn")

    def test_missing_log(self):
        data = logs.collect(Path("/nonexistent/laravel.log"))
        self.assertEqual(data.items, [])
        self.assertEqual(data.status, "error")


class CacheCollectorTests(unittest.TestCase):
    def test_file_store_usage(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            data_dir = app_dir / "storage" / "framework" / "cache" / "data" / "ab"
            data_dir.mkdir(parents=True)
            (data_dir / "cd").write_bytes(b"x" * 10)
            (data_dir.parent / ".gitignore").write_text("*\n")
            data = cache.collect(app_dir)
        values = {item["key"]: item["value"] for item in data.items}
        self.assertEqual(values["Driver"], "file")
        self.assertEqual(values["Size"], "10 B")
        self.assertEqual(values["Entries"], "1")
        self.assertEqual(values["Config cached"], "no")

    def test_non_file_store(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            (app_dir / ".env").write_text("CACHE_STORE=redis\n")
            data = cache.collect(app_dir)
        values = {item["key"]: item["value"] for item in data.items}
        self.assertEqual(values["Driver"], "redis")
        self.assertEqual(values["Size"], "unknown")


class MetricsCollectorTests(unittest.TestCase):
    def test_failed_probe_repeats_previous_sample(self):
        with tempfile.TemporaryDirectory() as tmp:
            collector = MetricsCollector(Path(tmp), history=3)
            pending = [4.0]

            def flaky():
                if pending:
                    return pending.pop()
                raise OSError("database locked")

            collector.probes["pending jobs"] = flaky
            collector.collect()
            data = collector.collect()
        series = {item["name"]: item for item in data.items}
        self.assertEqual(series["pending jobs"]["samples"], [4.0, 4.0])
        self.assertNotIn("failed jobs", series)
        self.assertEqual(data.status, "warn")
        self.assertIn("pending jobs", data.errors[0])

    def test_log_errors_read_configured_log(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "custom.log"
            log_path.write_text(LOG_TEXT)
            collector = MetricsCollector(Path(tmp), log_path=log_path)
            data = collector.collect()
        series = {item["name"]: item for item in data.items}
        self.assertEqual(series["log errors"]["current"], 1.0)

    def test_history_is_bounded(self):
        with tempfile.TemporaryDirectory() as tmp:
            collector = MetricsCollector(Path(tmp), history=3)
            values = iter(range(10))
            collector.probes["log errors"] = lambda: float(next(values))
            for _ in range(5):
                data = collector.collect()
        series = {item["name"]: item for item in data.items}
        self.assertEqual(series["log errors"]["samples"], [2.0, 3.0, 4.0])
        self.assertEqual(series["log errors"]["max"], 4.0)
        self.assertEqual(series["log errors"]["average"], 3.0)


class SchedulerCollectorTests(unittest.TestCase):
    def test_parse_schedule(self):
        rows = scheduler.parse_schedule(SCHEDULE_OUTPUT)
        self.assertEqual(
            rows,
            [
                {"expression": "0 * * * *", "command": "php artisan inspire", "next_due": "12 minutes from now"},
                {"expression": "*/5 * * * *", "command": "App\\Jobs\\PruneSessions", "next_due": "2 minutes from now"},
            ],
        )

    def test_collect_runs_artisan(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            (app_dir / "artisan").write_text("<?php\n")
            completed = subprocess.CompletedProcess([], 0, SCHEDULE_OUTPUT, "")
            with mock.patch("franken_tui.collectors.scheduler.run_command", return_value=completed) as run:
                data = scheduler.collect(app_dir)
        self.assertEqual(run.call_args[0][0], ["php", "artisan", "schedule:list", "--no-ansi"])
        self.assertEqual(data.meta["count"], 2)

    def test_collect_without_artisan(self):
        with tempfile.TemporaryDirectory() as tmp:
            data = scheduler.collect(Path(tmp))
        self.assertEqual(data.status, "error")


class OverviewCollectorTests(unittest.TestCase):
    def test_application_summary(self):
        with tempfile.TemporaryDirectory() as tmp:
            app_dir = Path(tmp)
            (app_dir / "artisan").write_text("<?php\n")
            (app_dir / ".env").write_text("APP_NAME=Demo\nAPP_ENV=testing\n")
            (app_dir / "composer.lock").write_text(
                json.dumps({"packages": [{"name": "laravel/framework", "version": "v11.2.0"}]})
            )
            data = overview.collect(app_dir)
        values = {item["key"]: item["value"] for item in data.items}
        self.assertEqual(values["Application"], "Demo")
        self.assertEqual(values["Environment"], "testing")
        self.assertEqual(values["Laravel"], "11.2.0")
        self.assertEqual(values["Database"], "sqlite (missing)")
        self.assertEqual(data.status, "ok")


class FormattingTests(unittest.TestCase):
    def test_human_size(self):
        self.assertEqual(human_size(512), "512 B")
        self.assertEqual(human_size(2048), "2.0 KB")
        self.assertEqual(human_size(5 * 1024 * 1024), "5.0 MB")

    def test_sparkline(self):
        self.assertEqual(sparkline([]), "")
        self.assertEqual(sparkline([0, 7]), "▁█")
        self.assertEqual(sparkline([0, 0, 0]), "▁▁▁")
        self.assertEqual(len(sparkline([3, 1, 4, 1, 5])), 5)

    def test_panel_data_empty(self):
        self.assertEqual(PanelData.empty("jobs").status, "warn")
        self.assertEqual(PanelData.empty("jobs", error="x").status, "error")


if __name__ == "__main__":
    unittest.main()
