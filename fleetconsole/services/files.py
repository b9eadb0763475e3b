"""Simulated filesystem queries/mutations and file-manager view helpers."""

import logging
import posixpath
from typing import Any, Dict, List, Optional, Tuple

import peewee

from ..models import FileItem
from .cache import query_cache
from .notifications import notifier
from .mutation import mutation

logger = logging.getLogger("fleetconsole.services")

DEFAULT_PATH = "/home/server"


def _path_under(prefix: str):
    # startswith() is a case-insensitive LIKE on SQLite
    return peewee.fn.substr(FileItem.path, 1, len(prefix)) == prefix


def list_files(server_id: Optional[str], path: Optional[str] = None) -> List[FileItem]:
    """
    Files of one server, directories first then by name.

    `path` is a prefix filter on the full path; no server means no files.
    """
    if not server_id:
        return []

    def load():
        query = (FileItem.select()
                 .where(FileItem.server == server_id)
                 # "directory" < "file", so ascending puts directories first
                 .order_by(FileItem.type.asc(), FileItem.name.asc()))
        if path:
            query = query.where(_path_under(path))
        return list(query)

    return query_cache.fetch(("files", server_id, path), load)


def list_directory(server_id: Optional[str], path: str) -> List[FileItem]:
    """Direct children of `path` only."""
    parent = normalize_path(path)
    return [f for f in list_files(server_id, parent)
            if posixpath.dirname(f.path.rstrip("/")) == parent]


def create_file(data: Dict[str, Any]) -> FileItem:
    data = dict(data)
    if not data.get("path"):
        data["path"] = posixpath.join(DEFAULT_PATH, data["name"])
    with mutation("files", "Failed to create file"):
        item = FileItem.create(**data)
    logger.info(f"file created: {item.path}")
    notifier.notify("File created", "File has been created successfully.")
    return item


def delete_file(file_id: str) -> FileItem:
    with mutation("files", "Failed to delete file"):
        item = FileItem.get_by_id(file_id)
        item.delete_instance()
    logger.info(f"file deleted: {item.path}")
    notifier.notify("File deleted", "File has been deleted successfully.")
    return item


def count_children(server_id: str, directory: str) -> int:
    prefix = directory.rstrip("/") + "/"
    return (FileItem.select(peewee.fn.COUNT(FileItem.id))
            .where((FileItem.server == server_id) & _path_under(prefix))
            .scalar()) or 0


# ---- view helpers ----

def filter_files(files: List[FileItem], search: Optional[str]) -> List[FileItem]:
    if not search:
        return list(files)
    needle = search.lower()
    return [f for f in files if needle in f.name.lower()]


def normalize_path(path: Optional[str]) -> str:
    if not path:
        return DEFAULT_PATH
    path = posixpath.normpath("/" + path.strip("/"))
    return path


def breadcrumbs(path: Optional[str]) -> List[Tuple[str, str]]:
    """Split a path into (label, path) crumbs: /home/server -> [("home", "/home"), ("server", "/home/server")]."""
    parts = [p for p in normalize_path(path).split("/") if p]
    crumbs = []
    for i, part in enumerate(parts):
        crumbs.append((part, "/" + "/".join(parts[: i + 1])))
    return crumbs


def navigate_to(crumbs: List[Tuple[str, str]], index: int) -> List[Tuple[str, str]]:
    """Keep crumbs up to and including `index`."""
    return crumbs[: index + 1]
