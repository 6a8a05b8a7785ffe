# tests/property/test_port_extraction_properties.py
"""Property-based tests for endpoint port extraction and registry keys.

Properties:
1. Any host followed by ':<port>' yields that port
2. Extraction never raises anything but PortParseError
3. single_port_from_endpoint never raises and only returns valid ports
4. Qualified and bare component names resolve to the same builder
"""

import structlog
from hypothesis import given
from hypothesis import strategies as st

from collectorscope.config_tree import ConfigTree
from collectorscope.errors import PortParseError
from collectorscope.ports import MAX_PORT, port_from_endpoint, single_port_from_endpoint
from collectorscope.registry import PortParserRegistry
from tests.conftest import FixedPortParser

# Hosts without ':' so the first colon-digit run is the port
hosts = st.text(alphabet=st.characters(exclude_characters=":"), max_size=30)
ports = st.integers(min_value=1, max_value=MAX_PORT)
yaml_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=True),
    st.text(max_size=40),
    st.lists(st.integers(), max_size=3),
    st.dictionaries(st.text(max_size=5), st.integers(), max_size=3),
)
component_names = st.text(alphabet=st.characters(exclude_characters="/"), min_size=1, max_size=20)


@given(host=hosts, port=ports)
def test_host_port_round_trip(host: str, port: int) -> None:
    assert port_from_endpoint(f"{host}:{port}") == port


@given(host=hosts, port=ports, suffix=st.text(alphabet="/abcxyz", max_size=10))
def test_path_suffix_does_not_change_port(host: str, port: int, suffix: str) -> None:
    assert port_from_endpoint(f"{host}:{port}{suffix}") == port


@given(endpoint=st.text(max_size=60))
def test_only_port_parse_errors_escape(endpoint: str) -> None:
    try:
        port = port_from_endpoint(endpoint)
    except PortParseError:
        return
    assert 1 <= port <= 2**31 - 1


@given(value=yaml_scalars)
def test_single_port_never_raises(value: object) -> None:
    port = single_port_from_endpoint(structlog.get_logger("prop"), "otlp", ConfigTree({"endpoint": value}))
    if port is not None:
        port.validate()


@given(base=component_names, qualifier=st.text(max_size=10))
def test_qualified_names_share_builder(base: str, qualifier: str) -> None:
    registry = PortParserRegistry()
    registry.register(base, FixedPortParser)

    assert registry.builder_for(f"{base}/{qualifier}") is FixedPortParser
    assert registry.is_registered(f"{base}/{qualifier}")
