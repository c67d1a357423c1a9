pytest_plugins = ["discovery_mock.testing.pytest_plugin"]
