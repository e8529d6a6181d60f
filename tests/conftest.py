"""Pytest configuration for the fire-planner test suite."""

# Load pytest-asyncio so the MCP server's async handlers can be awaited in tests
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )
