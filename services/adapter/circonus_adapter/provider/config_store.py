"""Live mapping of external metric names to CAQL query definitions.

The store publishes an immutable ConfigurationSnapshot and replaces it
wholesale on every refresh that changes something. Readers grab the current
reference without locking, so a resolution running during a refresh sees
either the old snapshot or the new one, never a mix. Writers serialise on a
lock; in practice there is a single refresher thread.
"""

from __future__ import annotations

import threading
from typing import Iterable, Optional, Protocol

import yaml
from pydantic import ValidationError

from circonus_adapter.core.errors import ConfigurationError
from circonus_adapter.core.logger import get_logger
from circonus_adapter.domain.models import (
    AdapterConfig,
    ConfigObject,
    ConfigurationSnapshot,
    QueryDefinition,
    metric_key,
)

from .metrics import (
    CONFIG_OBJECTS_APPLIED_TOTAL,
    CONFIG_PARSE_ERRORS_TOTAL,
    CONFIGURED_METRICS,
)

logger = get_logger("config_store")


class ConfigSource(Protocol):
    def fetch(self) -> Iterable[ConfigObject]: ...


def parse_config_document(obj: ConfigObject) -> list[QueryDefinition]:
    """Decode one raw document; unknown fields reject the whole document."""
    try:
        doc = yaml.safe_load(obj.data)
    except yaml.YAMLError as e:
        raise ConfigurationError(obj.key, _describe_yaml_error(e)) from e
    if doc is None:
        return []
    if not isinstance(doc, dict):
        raise ConfigurationError(obj.key, "document must be a mapping")
    try:
        return AdapterConfig.model_validate(doc).queries
    except ValidationError as e:
        raise ConfigurationError(obj.key, _describe_validation_error(e)) from e


class ConfigStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = ConfigurationSnapshot()

    def snapshot(self) -> ConfigurationSnapshot:
        return self._snapshot

    def refresh(self, source: ConfigSource) -> int:
        """Fetch every object from ``source`` and apply the changed ones.

        Errors raised by the source itself propagate; per-object parse
        failures do not.
        """
        return self.apply(list(source.fetch()))

    def apply(self, objects: Iterable[ConfigObject]) -> int:
        """Merge a batch of configuration objects and publish the result.

        Objects without the enable marker, or whose change marker matches
        the last one seen, are skipped. Returns how many objects were
        parsed and merged.
        """
        with self._lock:
            current = self._snapshot
            definitions = dict(current.definitions)
            markers = dict(current.markers)
            owners = dict(current.owners)
            applied = 0
            changed = False

            for obj in objects:
                if not obj.enabled:
                    logger.debug(
                        "config_object_not_enabled", extra={"config_object": obj.key}
                    )
                    continue
                if markers.get(obj.key) == obj.change_marker:
                    continue

                # Record the marker even on failure so a broken revision is reported once
                markers[obj.key] = obj.change_marker
                changed = True
                try:
                    queries = parse_config_document(obj)
                except ConfigurationError as e:
                    CONFIG_PARSE_ERRORS_TOTAL.inc()
                    logger.error(
                        "config_object_invalid",
                        extra={
                            "config_object": obj.key,
                            "change_marker": obj.change_marker,
                            "error": e.detail,
                        },
                    )
                    continue

                contributed = {}
                for query in queries:
                    name = metric_key(obj.namespace, query.external_name)
                    definitions[name] = query
                    contributed[name] = query
                # Keys dropped from a revision stay until overwritten or forgotten
                previous = owners.pop(obj.key, {})
                owners[obj.key] = {**previous, **contributed}
                applied += 1
                CONFIG_OBJECTS_APPLIED_TOTAL.inc()
                logger.info(
                    "config_object_applied",
                    extra={
                        "config_object": obj.key,
                        "change_marker": obj.change_marker,
                        "queries": len(queries),
                    },
                )

            if changed:
                self._publish(definitions, markers, owners)
            return applied

    def forget(self, namespace: str, name: str) -> bool:
        """Drop everything a configuration object contributed.

        This is the explicit removal signal: keys are never expired by a
        refresh. A key that another object also defines keeps the
        definition from the most recently applied of those objects.
        """
        object_key = f"{namespace}/{name}"
        with self._lock:
            current = self._snapshot
            if object_key not in current.markers and object_key not in current.owners:
                return False
            definitions = dict(current.definitions)
            markers = dict(current.markers)
            owners = dict(current.owners)
            dropped = owners.pop(object_key, {})
            for name_key in dropped:
                # Fall back to the most recently applied object that also defines it
                for owned in reversed(list(owners.values())):
                    if name_key in owned:
                        definitions[name_key] = owned[name_key]
                        break
                else:
                    definitions.pop(name_key, None)
            markers.pop(object_key, None)
            self._publish(definitions, markers, owners)
        logger.info("config_object_forgotten", extra={"config_object": object_key})
        return True

    def lookup(self, namespace: str, external_name: str) -> Optional[QueryDefinition]:
        return self._snapshot.definitions.get(metric_key(namespace, external_name))

    def list_names(self) -> list[str]:
        return sorted(self._snapshot.definitions)

    def _publish(self, definitions, markers, owners):
        self._snapshot = ConfigurationSnapshot.build(
            definitions, markers, owners, self._snapshot.version + 1
        )
        CONFIGURED_METRICS.set(len(definitions))


# Error descriptions leave out document content, which may carry API keys.


def _describe_yaml_error(e: yaml.YAMLError) -> str:
    mark = getattr(e, "problem_mark", None)
    problem = getattr(e, "problem", None) or type(e).__name__
    if mark is not None:
        line, column = mark.line + 1, mark.column + 1
        return f"invalid YAML: {problem} at line {line}, column {column}"
    return f"invalid YAML: {problem}"


def _describe_validation_error(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in e.errors(include_url=False, include_input=False)
    )
