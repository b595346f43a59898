"""Kafka Admin façade built on kafka-python."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

import kafka
from kafka.admin import KafkaAdminClient, NewTopic  # kafka-python
from kafka.errors import KafkaError

from kafka_topics.core.exceptions import AdminConfigError
from kafka_topics.domain.models.request import OperationResult

logger = logging.getLogger(__name__)

AdminClientFactory = Callable[..., Any]

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def client_library_version() -> str:
    return kafka.__version__


def normalise_key(key: str) -> str:
    """`security.protocol` / `security-protocol` -> `security_protocol`."""
    return key.strip().replace(".", "_").replace("-", "_")


def coerce_value(key: str, value: str) -> Any:
    """Convert a string property to the type kafka-python expects for `key`.

    Keys unknown to KafkaAdminClient are returned untouched; the client
    rejects them itself when the session is opened.
    """
    if key == "api_version":
        try:
            return tuple(int(part) for part in value.split("."))
        except ValueError:
            raise AdminConfigError(key, value, "a dotted version such as 2.5.0") from None

    default = KafkaAdminClient.DEFAULT_CONFIG.get(key)
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise AdminConfigError(key, value, "a boolean")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            raise AdminConfigError(key, value, "an integer") from None
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            raise AdminConfigError(key, value, "a number") from None
    return value


def build_admin_config(
    bootstrap_servers: str,
    extra: Mapping[str, str],
    defaults: Mapping[str, str] | None = None,
) -> Dict[str, Any]:
    """Return KafkaAdminClient keyword arguments.

    Later sources win: `defaults`, then the bootstrap address, then `extra`
    in its own order.
    """
    config: Dict[str, Any] = {}
    for key, value in (defaults or {}).items():
        config[normalise_key(key)] = value
    config["bootstrap_servers"] = bootstrap_servers
    for key, value in extra.items():
        config[normalise_key(key)] = value
    return {key: coerce_value(key, value) for key, value in config.items()}


class KafkaAdminFacade:
    """Encapsulates admin operations against a Kafka cluster.

    One instance is one admin session. Use it as a context manager so the
    underlying client is closed on every path.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        client_factory: AdminClientFactory = KafkaAdminClient,
    ) -> None:
        self._client = client_factory(**config)

    def __enter__(self) -> "KafkaAdminFacade":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ---------- Topic CRUD -------------------------------------------------

    def list_topics(self) -> OperationResult:
        """Return topic names in the order the cluster reports them."""
        try:
            names = self._client.list_topics()
        except KafkaError as exc:
            return OperationResult.failure(str(exc))
        return OperationResult(ok=True, topics=list(names))

    def create_topic(
        self,
        name: str,
        partitions: int,
        replication_factor: int,
        configs: Mapping[str, str] | None = None,
    ) -> OperationResult:
        """Create a single topic.

        Parameters
        ----------
        name : str
            Topic name.
        partitions : int
            Number of partitions.
        replication_factor : int
            Number of replicas per partition.
        configs : Mapping[str, str] | None
            Topic-level properties such as ``retention.ms``.
        """
        new_topic = NewTopic(
            name=name,
            num_partitions=partitions,
            replication_factor=replication_factor,
            topic_configs=dict(configs or {}),
        )
        try:
            self._client.create_topics([new_topic])
        except KafkaError as exc:
            return OperationResult.failure(str(exc))
        return OperationResult(ok=True)

    def delete_topic(self, name: str) -> OperationResult:
        try:
            self._client.delete_topics([name])
        except KafkaError as exc:
            return OperationResult.failure(str(exc))
        return OperationResult(ok=True)
