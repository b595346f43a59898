import io

import pytest
from kafka.errors import TopicAlreadyExistsError

from kafka_topics.cli import main

from conftest import FakeAdminClient


def _run(argv, fake):
    out, err = io.StringIO(), io.StringIO()
    code = main(argv, client_factory=fake, out=out, err=err)
    return code, out.getvalue(), err.getvalue()


def test_list_scenario(fake_admin):
    code, out, err = _run(["--bootstrap-server", "broker:9092", "--list"], fake_admin)
    assert (code, out, err) == (0, "a\nb\n", "")
    assert fake_admin.config["bootstrap_servers"] == "broker:9092"
    assert fake_admin.closed


def test_list_twice_is_identical(fake_admin):
    argv = ["--bootstrap-server", "broker:9092", "--list"]
    assert _run(argv, fake_admin) == _run(argv, fake_admin)


def test_create_scenario(fake_admin):
    argv = ["--bootstrap-server", "broker:9092", "--create", "--topic", "t1",
            "--partitions", "3", "--replication-factor", "2"]
    code, out, err = _run(argv, fake_admin)
    assert (code, out, err) == (0, "", "")
    assert [c[0] for c in fake_admin.calls] == ["create_topics"]


def test_delete_with_partitions_is_rejected(fake_admin):
    argv = ["--bootstrap-server", "broker:9092", "--delete", "--topic", "t1", "--partitions", "3"]
    code, out, err = _run(argv, fake_admin)
    assert code == 1
    assert out == ""
    assert "--delete operation CANNOT" in err
    assert fake_admin.config is None


def test_malformed_topic_props_is_rejected(fake_admin):
    argv = ["--bootstrap-server", "broker:9092", "--create", "--topic", "t1",
            "--partitions", "3", "--replication-factor", "2", "--topic-props", "retention.ms"]
    code, out, err = _run(argv, fake_admin)
    assert code == 1
    assert "Wrong option for --topic-props" in err
    assert fake_admin.config is None


def test_external_error():
    fake = FakeAdminClient(error=TopicAlreadyExistsError("t1"))
    argv = ["--bootstrap-server", "broker:9092", "--create", "--topic", "t1",
            "--partitions", "1", "--replication-factor", "1"]
    code, out, err = _run(argv, fake)
    assert code == 1
    assert out == ""
    assert err.startswith("Error: ")
    assert fake.closed


def test_no_arguments_prints_help(fake_admin):
    code, out, err = _run([], fake_admin)
    assert code == 0
    assert out.startswith("This tool helps in Kafka topic operations")
    assert fake_admin.config is None


def test_bad_admin_config_value(fake_admin):
    argv = ["--bootstrap-server", "broker:9092", "--list", "--admin-config", "request.timeout.ms=soon"]
    code, out, err = _run(argv, fake_admin)
    assert code == 1
    assert "request_timeout_ms" in err
    assert fake_admin.config is None


def test_environment_defaults_reach_admin_client(monkeypatch, fake_admin):
    monkeypatch.setenv("KAFKA_TOPICS_CLIENT_ID", "ops-shell")
    monkeypatch.setenv("KAFKA_TOPICS_ADMIN_CONFIG", "security.protocol=SSL,request.timeout.ms=1000")
    argv = ["--bootstrap-server", "broker:9092", "--list", "--admin-config", "request.timeout.ms=2000"]
    code, _, _ = _run(argv, fake_admin)
    assert code == 0
    assert fake_admin.config == {
        "client_id": "ops-shell",
        "security_protocol": "SSL",
        "request_timeout_ms": 2000,
        "bootstrap_servers": "broker:9092",
    }


def test_invalid_environment(monkeypatch, fake_admin):
    monkeypatch.setenv("KAFKA_TOPICS_ADMIN_CONFIG", "broken")
    code, _, err = _run(["--bootstrap-server", "broker:9092", "--list"], fake_admin)
    assert code == 1
    assert "KAFKA_TOPICS_" in err


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help_flag_prints_help(flag, fake_admin):
    code, out, err = _run([flag], fake_admin)
    assert code == 0
    assert out.startswith("This tool helps in Kafka topic operations")
    assert err == ""
    assert fake_admin.config is None


def test_help_ignores_broken_environment(monkeypatch, fake_admin):
    monkeypatch.setenv("KAFKA_TOPICS_ADMIN_CONFIG", "broken")
    code, out, _ = _run(["--help"], fake_admin)
    assert code == 0
    assert out.startswith("This tool helps in Kafka topic operations")


def test_rejected_security_protocol_is_reported():
    fake = FakeAdminClient(connect_error=AssertionError("security_protocol must be one of PLAINTEXT, SSL"))
    argv = ["--bootstrap-server", "broker:9092", "--list", "--admin-config", "security.protocol=FOO"]
    code, out, err = _run(argv, fake)
    assert code == 1
    assert out == ""
    assert err == "Error: security_protocol must be one of PLAINTEXT, SSL\n"
    assert fake.config["security_protocol"] == "FOO"
