"""Suppliers of raw configuration documents for the ConfigStore.

How documents are physically fetched is outside the store's concern; any
object with a ``fetch()`` returning ConfigObjects will do.
"""

from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Iterable, List

from circonus_adapter.core.logger import get_logger
from circonus_adapter.domain.models import ConfigObject

logger = get_logger("config_source")

CONFIG_SUFFIXES = (".yaml", ".yml")


class StaticConfigSource:
    """In-memory source whose objects are replaced by the caller."""

    def __init__(self, objects: Iterable[ConfigObject] = ()):
        self._lock = threading.Lock()
        self._objects: List[ConfigObject] = list(objects)

    def set_objects(self, objects: Iterable[ConfigObject]):
        with self._lock:
            self._objects = list(objects)

    def put(
        self,
        namespace: str,
        name: str,
        data: bytes | str,
        enabled: bool = True,
    ) -> ConfigObject:
        """Add or replace one document; the change marker is its content hash."""
        raw = data.encode() if isinstance(data, str) else data
        obj = ConfigObject(
            namespace=namespace,
            name=name,
            change_marker=content_marker(raw),
            data=raw,
            enabled=enabled,
        )
        with self._lock:
            self._objects = [o for o in self._objects if o.key != obj.key] + [obj]
        return obj

    def fetch(self) -> List[ConfigObject]:
        with self._lock:
            return list(self._objects)


class DirectoryConfigSource:
    """Reads ``<root>/<namespace>/<name>.yaml`` files, e.g. mounted ConfigMaps.

    Every listed file is enabled. Hidden entries (the ``..data`` links
    Kubernetes creates for ConfigMap volumes) are ignored.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def fetch(self) -> List[ConfigObject]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"configuration directory {self.root} not found")

        objects: List[ConfigObject] = []
        for ns_dir in sorted(self.root.iterdir()):
            if ns_dir.name.startswith(".") or not ns_dir.is_dir():
                continue
            for path in sorted(ns_dir.iterdir()):
                if path.name.startswith(".") or path.suffix not in CONFIG_SUFFIXES:
                    continue
                if not path.is_file():
                    continue
                try:
                    data = path.read_bytes()
                except OSError as e:
                    logger.warning(
                        "config_file_unreadable",
                        extra={"path": str(path), "error": str(e)},
                    )
                    continue
                objects.append(
                    ConfigObject(
                        namespace=ns_dir.name,
                        name=path.stem,
                        change_marker=content_marker(data),
                        data=data,
                    )
                )
        return objects


def content_marker(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
