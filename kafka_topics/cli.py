"""Command-line entry point: list, create and delete Kafka topics."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, Sequence, TextIO

from kafka.admin import KafkaAdminClient
from pydantic import ValidationError

from kafka_topics.core.config import get_settings
from kafka_topics.core.exceptions import TopicToolError, UsageError
from kafka_topics.domain.models.properties import parse_properties
from kafka_topics.domain.models.request import Operation, TopicRequest, rule_violation
from kafka_topics.domain.services.topic_service import TopicService
from kafka_topics.infra.kafka.admin import AdminClientFactory, client_library_version

LOG = logging.getLogger("kafka_topics")


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that raises instead of printing usage and exiting with 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


MAX_PARTITIONS = 2**31 - 1  # int32 on the wire
MAX_REPLICATION_FACTOR = 2**15 - 1  # int16 on the wire


def positive_int(upper: int):
    """argparse type accepting integers in [1, upper]."""
    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid positive integer: '{text}'") from None
        if not 1 <= value <= upper:
            raise argparse.ArgumentTypeError(f"must be between 1 and {upper}, got {value}")
        return value
    return convert


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="kafka-topics",
        description="Options description",
        add_help=False,
        allow_abbrev=False,
    )
    ap.add_argument("-h", "--help", action="store_true",
                    help="Print usage information.")
    ap.add_argument("--bootstrap-server", metavar="ADDR",
                    help="REQUIRED: One broker from the Kafka cluster.")
    ap.add_argument("--admin-config", metavar="KEY=VALUE", nargs="+", action="extend",
                    help="Properties for the Admin Client (e.g. security.protocol=SASL_SSL)")

    ops = ap.add_argument_group("operations (choose exactly one)")
    ops.add_argument("--list", action="store_true", help="List topics.")
    ops.add_argument("--create", action="store_true", help="Create a topic.")
    ops.add_argument("--delete", action="store_true", help="Delete a topic.")

    ap.add_argument("--topic",
                    help="REQUIRED for --create/--delete: the topic name.")
    ap.add_argument("--partitions", type=positive_int(MAX_PARTITIONS),
                    help="REQUIRED for --create: partitions number of the topic.")
    ap.add_argument("--replication-factor", type=positive_int(MAX_REPLICATION_FACTOR),
                    help="REQUIRED for --create: replication factor of the topic.")
    ap.add_argument("--topic-props", metavar="KEY=VALUE", nargs="+", action="extend",
                    help="Only used for --create: properties for the topic (e.g. retention.ms=86400000)")
    return ap


def format_help(parser: Optional[argparse.ArgumentParser] = None) -> str:
    parser = parser or build_parser()
    banner = (
        "This tool helps in Kafka topic operations\n"
        f"    (with kafka-python v{client_library_version()})\n"
    )
    return banner + parser.format_help()


def parse_args(argv: Sequence[str]) -> Optional[TopicRequest]:
    """Turn an argument vector into a validated request.

    Returns None when help was asked for (explicitly, or by passing no
    arguments at all). Raises UsageError, or its MalformedPropertyError
    subclass, when the arguments do not describe exactly one valid
    operation.
    """
    argv = list(argv)
    if not argv:
        return None

    ns = build_parser().parse_args(argv)
    if ns.help:
        return None

    if ns.bootstrap_server is None:
        raise UsageError("the option '--bootstrap-server' is required but missing")

    selected: List[Operation] = [op for op in Operation if getattr(ns, op.value)]
    if len(selected) != 1:
        raise UsageError("MUST choose exactly one operation from '--list/--create/--delete'")
    operation = selected[0]

    present = {
        name
        for name in ("topic", "partitions", "replication_factor", "topic_props")
        if getattr(ns, name) is not None
    }
    message = rule_violation(operation, present)
    if message:
        raise UsageError(message)

    admin_config = parse_properties(ns.admin_config, option="--admin-config")
    topic_props = None
    if ns.topic_props is not None:
        topic_props = dict(parse_properties(ns.topic_props, option="--topic-props"))

    try:
        return TopicRequest(
            bootstrap_server=ns.bootstrap_server,
            operation=operation,
            topic=ns.topic,
            partitions=ns.partitions,
            replication_factor=ns.replication_factor,
            admin_config=dict(admin_config),
            topic_props=topic_props,
        )
    except ValidationError as exc:
        raise UsageError(_first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    where = ".".join(str(part) for part in err.get("loc", ()))
    return f"{where}: {err['msg']}" if where else err["msg"]


def setup_logging(level: str) -> None:
    lvl = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=lvl, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


def main(
    argv: Optional[Sequence[str]] = None,
    client_factory: AdminClientFactory = KafkaAdminClient,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run one invocation and return the process exit status."""
    argv = sys.argv[1:] if argv is None else argv
    out = out or sys.stdout
    err = err or sys.stderr

    try:
        request = parse_args(argv)
    except UsageError as exc:
        print(exc, file=err)
        return exc.exit_code
    if request is None:
        out.write(format_help())
        return 0

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Invalid KAFKA_TOPICS_* environment: {_first_error(exc)}", file=err)
        return 1
    setup_logging(settings.log_level)

    LOG.debug("Request: %s", request.model_dump(exclude_none=True))
    defaults = {"client_id": settings.client_id, **settings.admin_config}
    service = TopicService(client_factory=client_factory, defaults=defaults)
    try:
        return service.run(request, out=out, err=err)
    except TopicToolError as exc:
        print(exc, file=err)
        return exc.exit_code


def run() -> None:
    sys.exit(main())
