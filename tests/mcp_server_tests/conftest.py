"""Pytest configuration for MCP server tests."""

import pytest


# Run anyio-based tests on asyncio, the loop the MCP stdio server uses
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
