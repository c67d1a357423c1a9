import httpx

from discovery_mock import InMemoryRegistry, InstanceStatus, ServiceInstance

JSON_HEADERS = {"Accept": "application/json"}


def test_session_server_is_running(discovery_server):
    assert discovery_server.is_started
    assert discovery_server.port > 0


def test_registry_fixture_starts_empty(discovery_registry):
    assert isinstance(discovery_registry, InMemoryRegistry)
    assert discovery_registry.get_applications() == []

    discovery_registry.register_application(
        ServiceInstance(
            instance_id="i-1",
            host_name="host-1",
            app_name="plugin",
            vip_address="plugin",
            status=InstanceStatus.UP,
        )
    )


def test_registry_fixture_is_reset_between_tests(
    discovery_server, discovery_registry
):
    assert discovery_registry.get_application("plugin") is None

    resp = httpx.get(
        discovery_server.base_url + "apps/plugin/i-1", headers=JSON_HEADERS
    )
    assert resp.status_code == 404
