import pytest

from junoindex.actions_config import ActionsConfig, parse_config


def test_default_config_listens_on_3000_without_node():
    config = ActionsConfig()
    assert config.port == 3000
    assert config.node is None


def test_parse_port():
    config = parse_config("actions:\n  port: 3000\n")
    assert config == ActionsConfig(port=3000, node=None)


def test_parse_accepts_bytes():
    config = parse_config(b"actions:\n  port: 8080\n")
    assert config.port == 8080


def test_parse_node_details():
    config = parse_config(
        "actions:\n  port: 4000\n  node:\n    rpc:\n      address: http://localhost:26657\n"
    )
    assert config.port == 4000
    assert config.node == {"rpc": {"address": "http://localhost:26657"}}


def test_missing_section_gives_none():
    assert parse_config("database:\n  name: juno\n") is None


def test_empty_document_gives_none():
    assert parse_config("") is None


def test_missing_port_is_zero():
    config = parse_config("actions:\n  node:\n    kind: remote\n")
    assert config.port == 0


def test_invalid_yaml_raises():
    with pytest.raises(ValueError):
        parse_config("actions: [unclosed")


def test_negative_port_raises():
    with pytest.raises(ValueError):
        parse_config("actions:\n  port: -1\n")


def test_text_port_raises():
    with pytest.raises(ValueError):
        parse_config("actions:\n  port: abc\n")


def test_non_mapping_section_raises():
    with pytest.raises(ValueError):
        parse_config("actions: 12\n")