"""Unit tests for the data services

Covers query caching and invalidation, toasts emitted by mutations, and
the create/update/delete round trips against the store.
"""
import random
import time

import peewee
import pytest

from fleetconsole.models import Server, ServerMetric, FileItem, Process
from fleetconsole.services import notifier, QueryCache, Notifier
from fleetconsole.services.cache import query_cache
from fleetconsole.services import servers as server_service
from fleetconsole.services import files as file_service
from fleetconsole.services import processes as process_service


class TestQueryCache:
    def test_fetch_loads_once(self):
        cache = QueryCache()
        calls = []

        def loader():
            calls.append(1)
            return [1, 2, 3]

        assert cache.fetch(("servers",), loader) == [1, 2, 3]
        assert cache.fetch(("servers",), loader) == [1, 2, 3]
        assert len(calls) == 1

    def test_invalidate_drops_whole_bucket(self):
        cache = QueryCache()
        cache.fetch(("files", "a", None), lambda: 1)
        cache.fetch(("files", "b", "/home"), lambda: 2)
        cache.fetch(("servers",), lambda: 3)

        assert cache.invalidate("files") == 2
        assert not cache.contains(("files", "a", None))
        assert cache.contains(("servers",))

    def test_invalidate_unknown_bucket(self):
        assert QueryCache().invalidate("nothing") == 0

    def test_load_racing_invalidation_is_not_stored(self):
        cache = QueryCache()

        def loader():
            cache.invalidate("servers")
            return ["old"]

        assert cache.fetch(("servers",), loader) == ["old"]
        assert not cache.contains(("servers",))
        assert cache.fetch(("servers",), lambda: ["new"]) == ["new"]

    def test_invalidation_of_other_bucket_keeps_load(self):
        cache = QueryCache()

        def loader():
            cache.invalidate("files")
            return 1

        cache.fetch(("servers",), loader)
        assert cache.contains(("servers",))


class TestNotifier:
    def test_drain_empties_queue(self):
        n = Notifier()
        n.notify("Server added", "New server has been added successfully.")
        n.error("Failed", ValueError("boom"))

        items = n.drain()
        assert [i.title for i in items] == ["Server added", "Failed"]
        assert items[1].variant == "destructive"
        assert items[1].description == "boom"
        assert n.drain() == []

    def test_bounded(self):
        n = Notifier(maxlen=3)
        for i in range(5):
            n.notify(f"t{i}")
        assert [i.title for i in n.peek()] == ["t2", "t3", "t4"]


class TestServerService:
    def test_create_then_delete_round_trip(self, test_db):
        assert server_service.list_servers() == []

        server = server_service.create_server({
            "name": "Web Server 01", "hostname": "web-01", "ip_address": "192.168.1.10",
        })
        listed = server_service.list_servers()
        assert [s.id for s in listed] == [server.id]
        assert listed[0].status == "offline"
        assert listed[0].port == 22

        server_service.delete_server(server.id)
        assert server_service.list_servers() == []

        titles = [n.title for n in notifier.drain()]
        assert titles == ["Server added", "Server removed"]

    def test_list_is_cached_until_mutation(self, sample_servers):
        first = server_service.list_servers()
        # Bypass the service: the cached list is still served
        Server.create(name="late", hostname="late", ip_address="10.0.0.99")
        assert len(server_service.list_servers()) == len(first)

        server_service.update_server_status(sample_servers[0].id, "error")
        assert len(server_service.list_servers()) == len(first) + 1

    def test_create_during_list_load_is_visible(self, test_db):
        def loader():
            snapshot = list(Server.select())
            server_service.create_server({"name": "late", "hostname": "late", "ip_address": "10.0.0.99"})
            return snapshot

        assert query_cache.fetch(("servers",), loader) == []
        assert [s.name for s in server_service.list_servers()] == ["late"]

    def test_list_orders_newest_first(self, sample_servers):
        assert [s.name for s in server_service.list_servers()] == [
            "server-00", "server-01", "server-02", "server-03",
        ]

    def test_update_status(self, sample_server):
        updated = server_service.update_server_status(sample_server.id, "maintenance")
        assert updated.status == "maintenance"
        assert Server.get_by_id(sample_server.id).status == "maintenance"
        assert notifier.drain()[0].description == "Server status has been updated successfully."

    def test_invalid_status_rejected_by_store(self, sample_server):
        with pytest.raises(peewee.IntegrityError):
            server_service.update_server_status(sample_server.id, "rebooting")

        note = notifier.drain()[0]
        assert note.title == "Failed to update server"
        assert note.variant == "destructive"

    def test_delete_unknown_server(self, test_db):
        with pytest.raises(Server.DoesNotExist):
            server_service.delete_server("missing")
        assert notifier.drain()[0].title == "Failed to remove server"

    def test_delete_cascades(self, sample_server, sample_files, sample_processes, sample_metrics):
        server_service.delete_server(sample_server.id)
        assert FileItem.select().count() == 0
        assert Process.select().count() == 0
        assert ServerMetric.select().count() == 0

    def test_latest_metric(self, sample_metrics, sample_server):
        latest = server_service.get_latest_metric(sample_server.id)
        assert latest.cpu_usage == 78.0
        assert server_service.get_latest_metric(None) is None

    def test_record_metric_invalidates_latest(self, sample_metrics, sample_server):
        server_service.get_latest_metric(sample_server.id)
        server_service.record_metric(sample_server.id, {"cpu_usage": 12.5, "recorded_at": int(time.time()) + 10})
        assert server_service.get_latest_metric(sample_server.id).cpu_usage == 12.5

    def test_metric_history_filters(self, sample_metrics, sample_server):
        since = sample_metrics[4].recorded_at
        rows = server_service.metric_history(since=since)
        assert [r["cpu_usage"] for r in rows] == [89.0, 56.0, 34.0, 78.0]
        assert server_service.metric_history(server_ids=["other"]) == []


class TestFileService:
    def test_directories_first_then_name(self, sample_files, sample_server):
        names = [f.name for f in file_service.list_files(sample_server.id)]
        assert names[:2] == ["Documents", "Scripts"]
        assert names[2:] == sorted(names[2:])

    def test_prefix_filter(self, sample_files, sample_server):
        names = {f.name for f in file_service.list_files(sample_server.id, "/home/server/Documents")}
        assert names == {"Documents", "report.pdf", "notes.txt"}

    def test_no_server_no_files(self, sample_files):
        assert file_service.list_files(None) == []

    def test_list_directory_direct_children(self, sample_files, sample_server):
        names = [f.name for f in file_service.list_directory(sample_server.id, "/home/server")]
        assert names == ["Documents", "Scripts", "config.json", "system.log"]

    def test_count_children(self, sample_files, sample_server):
        assert file_service.count_children(sample_server.id, "/home/server/Documents") == 2
        assert file_service.count_children(sample_server.id, "/home/server/Scripts") == 0

    def test_prefix_match_is_case_sensitive(self, sample_files, sample_server):
        FileItem.create(server=sample_server, path="/home/server/documents/draft.md",
                        name="draft.md", type="file", size_bytes=10)
        assert file_service.count_children(sample_server.id, "/home/server/Documents") == 2
        assert file_service.count_children(sample_server.id, "/home/server/documents") == 1
        names = {f.name for f in file_service.list_files(sample_server.id, "/home/server/Documents")}
        assert "draft.md" not in names

    def test_create_defaults_path(self, sample_server):
        item = file_service.create_file({"server": sample_server.id, "name": "todo.txt", "type": "file"})
        assert item.path == "/home/server/todo.txt"
        assert notifier.drain()[0].title == "File created"

    def test_create_invalidates_listing(self, sample_files, sample_server):
        before = len(file_service.list_files(sample_server.id))
        file_service.create_file({"server": sample_server.id, "name": "new.sh"})
        assert len(file_service.list_files(sample_server.id)) == before + 1

    def test_delete(self, sample_files):
        file_service.delete_file(sample_files[-1].id)
        assert not FileItem.select().where(FileItem.id == sample_files[-1].id).exists()
        assert notifier.drain()[0].title == "File deleted"

    def test_filter_case_insensitive(self, sample_files):
        assert [f.name for f in file_service.filter_files(sample_files, "LOG")] == ["system.log", "syslog"]
        assert file_service.filter_files(sample_files, "") == sample_files

    @pytest.mark.parametrize("raw,expected", [
        (None, "/home/server"),
        ("", "/home/server"),
        ("home/server/", "/home/server"),
        ("/var//log/../log", "/var/log"),
        ("/", "/"),
    ])
    def test_normalize_path(self, raw, expected):
        assert file_service.normalize_path(raw) == expected

    def test_breadcrumbs_and_navigation(self):
        crumbs = file_service.breadcrumbs("/home/server/Documents")
        assert crumbs == [("home", "/home"), ("server", "/home/server"), ("Documents", "/home/server/Documents")]
        assert file_service.navigate_to(crumbs, 1) == crumbs[:2]
        assert file_service.breadcrumbs("/") == []


class TestProcessService:
    def test_terminate_removes_row_and_toasts(self, sample_processes):
        nginx = sample_processes[0]
        process_service.terminate_process(nginx.id)

        assert 1234 not in [p.pid for p in process_service.list_processes()]
        note = notifier.drain()[0]
        assert note.title == "Process terminated"
        assert note.description == "nginx (PID: 1234) has been terminated successfully"

    def test_terminate_unknown(self, test_db):
        with pytest.raises(Process.DoesNotExist):
            process_service.terminate_process("missing")

    def test_refresh_jitters_within_bounds(self, sample_processes):
        before = {p.pid: (p.cpu_percent, p.memory_mb) for p in sample_processes}
        refreshed = process_service.refresh_processes(rng=random.Random(3))

        assert len(refreshed) == len(sample_processes)
        for p in refreshed:
            cpu, mem = before[p.pid]
            assert p.cpu_percent >= 0 and abs(p.cpu_percent - cpu) <= 2.55
            assert p.memory_mb >= 0 and abs(p.memory_mb - mem) <= 5.05
        assert notifier.drain()[-1].title == "Process list refreshed"

    def test_refresh_never_negative(self, sample_server):
        Process.create(server=sample_server, pid=1, name="idle", cpu_percent=0.0, memory_mb=0.0)
        for _ in range(5):
            proc = process_service.refresh_processes()[0]
            assert proc.cpu_percent >= 0
            assert proc.memory_mb >= 0

    def test_filter_by_name_or_pid(self, sample_processes):
        assert [p.name for p in process_service.filter_processes(sample_processes, "SQL")] == ["mysql"]
        assert [p.pid for p in process_service.filter_processes(sample_processes, "123")] == [1234, 1235, 1236, 1238]

    @pytest.mark.parametrize("field,direction,expected", [
        ("pid", "asc", [1234, 1235, 1236, 1238, 1241]),
        ("pid", "desc", [1241, 1238, 1236, 1235, 1234]),
        ("name", "asc", [1235, 1234, 1236, 1238, 1241]),
        ("cpu", "desc", [1236, 1234, 1235, 1238, 1241]),
        ("memory", "asc", [1241, 1238, 1234, 1236, 1235]),
    ])
    def test_sort(self, sample_processes, field, direction, expected):
        result = process_service.sort_processes(sample_processes, field, direction)
        assert [p.pid for p in result] == expected

    def test_sort_rejects_unknown_field(self, sample_processes):
        with pytest.raises(ValueError):
            process_service.sort_processes(sample_processes, "user")

    def test_toggle_sort(self):
        assert process_service.toggle_sort("pid", "asc", "pid") == ("pid", "desc")
        assert process_service.toggle_sort("pid", "desc", "pid") == ("pid", "asc")
        assert process_service.toggle_sort("pid", "desc", "cpu") == ("cpu", "asc")

    def test_totals(self, sample_processes):
        totals = process_service.process_totals(sample_processes)
        assert totals == {"count": 5, "cpu_percent": 50.2, "memory_gb": 0.3}
