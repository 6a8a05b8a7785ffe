# tests/unit/test_discovery.py
"""Tests for gathering ports and RBAC policies from a collector config."""

import pytest
from structlog.testing import capture_logs

from collectorscope.authz import DynamicRolePolicy, PolicyRule
from collectorscope.discovery import exporter_ports, exporter_rbac_policies
from collectorscope.exporters.loadbalancing import K8S_RESOLVER_RULES
from collectorscope.factory import create_registries
from collectorscope.ports import ServicePort
from tests.conftest import FixedPortParser, OtlpPluginStub


@pytest.fixture
def registries():
    return create_registries([OtlpPluginStub()])


class TestExporterPorts:
    def test_collects_ports_in_document_order(self, log, registries) -> None:
        config = {
            "exporters": {
                "otlp/2": {"endpoint": "0.0.0.0:4318"},
                "prometheus": {"endpoint": "0.0.0.0:9090"},
                "otlp": {"endpoint": "0.0.0.0:4317"},
            }
        }

        ports = exporter_ports(log, registries.ports, config)

        assert ports == [
            ServicePort(name="otlp-2", port=4318),
            ServicePort(name="prometheus", port=9090),
            ServicePort(name="otlp", port=4317),
        ]

    def test_unregistered_exporters_are_skipped(self, log, registries) -> None:
        config = {"exporters": {"debug": {"verbosity": "detailed"}, "prometheus": None}}

        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, config)

        assert [p.port for p in ports] == [8888]
        skipped = [entry for entry in logs if entry["event"] == "exporter_has_no_port_parser"]
        assert skipped[0]["exporter"] == "debug"
        assert skipped[0]["log_level"] == "debug"

    def test_malformed_endpoint_does_not_block_others(self, log, registries) -> None:
        config = {
            "exporters": {
                "otlp/broken": {"endpoint": 4317},
                "otlp/bad": {"endpoint": "localhost"},
                "otlp": {"endpoint": "localhost:4317"},
            }
        }

        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, config)

        assert [p.port for p in ports] == [4317]
        errors = [entry["event"] for entry in logs if entry["log_level"] == "error"]
        assert errors == ["endpoint_not_a_string", "endpoint_port_unparseable"]

    def test_duplicate_port_kept_once(self, log, registries) -> None:
        config = {
            "exporters": {
                "otlp": {"endpoint": ":4317"},
                "otlp/again": {"endpoint": ":4317"},
            }
        }

        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, config)

        assert ports == [ServicePort(name="otlp", port=4317)]
        assert any(entry["event"] == "duplicate_exporter_port" for entry in logs)

    @pytest.mark.parametrize("config", [{}, {"exporters": None}, {"receivers": {"otlp": {}}}])
    def test_no_exporters(self, log, registries, config) -> None:
        assert exporter_ports(log, registries.ports, config) == []

    def test_exporters_section_not_a_mapping(self, log, registries) -> None:
        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, {"exporters": ["otlp"]})

        assert ports == []
        assert logs[0]["event"] == "exporters_section_not_a_mapping"
        assert logs[0]["value_type"] == "list"

    def test_exporter_block_not_a_mapping(self, log, registries) -> None:
        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, {"exporters": {"otlp": "localhost:4317"}})

        assert ports == []
        assert logs[0]["event"] == "exporter_config_not_a_mapping"

    def test_non_string_exporter_name_skipped(self, log, registries) -> None:
        with capture_logs() as logs:
            ports = exporter_ports(log, registries.ports, {"exporters": {1: {"endpoint": ":1"}}})

        assert ports == []
        assert logs[0]["event"] == "exporter_name_not_a_string"

    def test_parser_receives_qualified_name(self, log) -> None:
        seen: list[str] = []

        def builder(logger, name, config):
            seen.append(name)
            return FixedPortParser(logger, name, config)

        registries = create_registries(include_builtins=False, seal=False)
        registries.ports.register("otlp", builder)

        exporter_ports(log, registries.ports, {"exporters": {"otlp/traces": {}}})

        assert seen == ["otlp/traces"]


class TestExporterRbacPolicies:
    def test_loadbalancing_k8s_resolver(self, log, registries) -> None:
        config = {
            "exporters": {
                "loadbalancing": {"resolver": {"k8s": {"service": "backends.obs"}}},
                "otlp": {"endpoint": ":4317"},
            }
        }

        policies = exporter_rbac_policies(log, registries.authz, config)

        assert policies == [DynamicRolePolicy(rules=K8S_RESOLVER_RULES, namespaces=("obs",))]

    def test_policies_from_several_exporters_are_concatenated(self, log) -> None:
        rule = PolicyRule(api_groups=("",), resources=("events",), verbs=("create",))

        class EventsParser:
            def __init__(self, logger, name, config):
                pass

            def parser_name(self) -> str:
                return "__events"

            def rbac_rules(self) -> list[DynamicRolePolicy]:
                return [DynamicRolePolicy(rules=(rule,))]

        registries = create_registries(seal=False)
        registries.authz.register("k8s_events", EventsParser)

        policies = exporter_rbac_policies(
            log,
            registries.authz,
            {
                "exporters": {
                    "k8s_events": {},
                    "loadbalancing": {"resolver": {"k8s": {"service": "svc"}}},
                }
            },
        )

        assert policies == [
            DynamicRolePolicy(rules=(rule,)),
            DynamicRolePolicy(rules=K8S_RESOLVER_RULES),
        ]

    def test_no_authz_parsers_matched(self, log, registries) -> None:
        with capture_logs() as logs:
            policies = exporter_rbac_policies(log, registries.authz, {"exporters": {"otlp": {}}})

        assert policies == []
        assert logs[0]["event"] == "exporter_has_no_authz_parser"
