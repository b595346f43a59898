"""Dispatch of one validated request to one admin call."""
from __future__ import annotations

import logging
from typing import Mapping, Optional, TextIO

from kafka.admin import KafkaAdminClient
from kafka.errors import KafkaError

from kafka_topics.domain.models.request import Operation, OperationResult, TopicRequest
from kafka_topics.infra.kafka.admin import (
    AdminClientFactory,
    KafkaAdminFacade,
    build_admin_config,
)

logger = logging.getLogger(__name__)


class TopicService:
    """Runs exactly one list/create/delete per request, never retrying."""

    def __init__(
        self,
        client_factory: AdminClientFactory = KafkaAdminClient,
        defaults: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._client_factory = client_factory
        self._defaults = dict(defaults or {})

    def execute(self, request: TopicRequest) -> OperationResult:
        """Open a session, perform the request's operation and close it.

        Raises
        ------
        AdminConfigError
            If an admin-config value has the wrong type. Nothing has been
            sent to the cluster at that point.
        """
        config = build_admin_config(request.bootstrap_server, request.admin_config, self._defaults)
        logger.debug("Opening admin session to %s for %s", request.bootstrap_server, request.operation.value)
        try:
            session = KafkaAdminFacade(config, client_factory=self._client_factory)
        except (KafkaError, AssertionError, ValueError) as exc:
            # kafka-python validates client settings with assert/ValueError
            logger.warning("Could not open admin session: %s", exc)
            return OperationResult.failure(str(exc))

        with session:
            result = self._invoke(session, request)

        if not result.ok:
            logger.warning("%s failed: %s", request.operation.value, result.detail)
        return result

    @staticmethod
    def _invoke(session: KafkaAdminFacade, request: TopicRequest) -> OperationResult:
        if request.operation is Operation.LIST:
            return session.list_topics()
        if request.operation is Operation.CREATE:
            return session.create_topic(
                request.topic,
                request.partitions,
                request.replication_factor,
                request.topic_props,
            )
        return session.delete_topic(request.topic)

    def run(self, request: TopicRequest, out: TextIO, err: TextIO) -> int:
        """Execute `request`, render the result and return the exit status."""
        result = self.execute(request)
        if not result.ok:
            print(f"Error: {result.detail}", file=err)
            return 1
        for name in result.topics or ():
            print(name, file=out)
        return 0
