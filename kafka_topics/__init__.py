"""Command-line administration of Kafka topics."""

__version__ = "1.0.0"
