"""Tests for the MCP server module."""

import os
import sys
import json
import shutil
import tempfile
import pytest
from unittest.mock import patch

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)

tools_spec = importlib.util.spec_from_file_location("tools", os.path.join(MCP_SERVER_PATH, "tools.py"))
tools_module = importlib.util.module_from_spec(tools_spec)
tools_spec.loader.exec_module(tools_module)
MultiProgramTools = tools_module.MultiProgramTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary planner root holding the fixture programs."""
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    for program in ('testprogram', 'saverprogram'):
        shutil.copytree(
            os.path.join(FIXTURES_PATH, program),
            os.path.join(input_params_dir, program)
        )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def fixture_tools(test_base_path):
    """Point the server at the fixture programs for the duration of a test."""
    mcp_server.tools = MultiProgramTools(test_base_path, 'testprogram')
    yield mcp_server.tools
    mcp_server.tools = None


async def call(name, arguments):
    result = await mcp_server.call_tool(name, arguments)
    assert isinstance(result, list)
    assert len(result) == 1
    assert isinstance(result[0], TextContent)
    return json.loads(result[0].text)


class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        assert mcp_server.server.name == "fire-planner"

    def test_program_param_schema(self):
        assert mcp_server.PROGRAM_PARAM['type'] == 'string'
        assert 'description' in mcp_server.PROGRAM_PARAM


class TestGetTools:
    """Tests for get_tools function."""

    def setup_method(self):
        """Reset global tools before each test."""
        mcp_server.tools = None

    def teardown_method(self):
        """Reset global tools after each test."""
        mcp_server.tools = None

    def test_get_tools_initializes_on_first_call(self):
        tools = mcp_server.get_tools()

        assert tools is not None
        # Check by class name since we're using dynamic imports
        assert tools.__class__.__name__ == 'MultiProgramTools'
        assert 'example' in tools.programs

    def test_get_tools_returns_cached_instance(self):
        tools1 = mcp_server.get_tools()
        tools2 = mcp_server.get_tools()

        assert tools1 is tools2

    @patch.dict(os.environ, {'FIRE_PLANNER_PROGRAM': 'example'})
    def test_get_tools_uses_env_default_program(self):
        """Test that FIRE_PLANNER_PROGRAM env var sets default program."""
        tools = mcp_server.get_tools()

        assert tools.default_program == 'example'


class TestListTools:
    """Tests for list_tools function."""

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        tools = await mcp_server.list_tools()

        assert all(isinstance(t, Tool) for t in tools)
        assert [t.name for t in tools] == [
            'list_programs',
            'reload_programs',
            'get_program_overview',
            'get_projection',
            'get_statistics',
            'compare_years',
            'compare_programs',
            'validate_allocation',
            'adjust_allocation',
        ]

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        tools = await mcp_server.list_tools()

        for tool in tools:
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_required_arguments(self):
        tools = {t.name: t for t in await mcp_server.list_tools()}

        assert tools['compare_years'].inputSchema['required'] == ['year1', 'year2']
        assert tools['compare_programs'].inputSchema['required'] == ['program1', 'program2']
        assert 'field' in tools['adjust_allocation'].inputSchema['required']
        assert tools['get_projection'].inputSchema['required'] == []


class TestCallTool:
    """Tests for call_tool function."""

    @pytest.mark.asyncio
    async def test_call_list_programs(self, fixture_tools):
        data = await call('list_programs', {})

        assert data['available_programs'] == ['saverprogram', 'testprogram']
        assert data['default_program'] == 'testprogram'

    @pytest.mark.asyncio
    async def test_call_reload_programs(self, fixture_tools):
        data = await call('reload_programs', {})

        assert data['status'] == 'success'

    @pytest.mark.asyncio
    async def test_call_get_program_overview(self, fixture_tools):
        data = await call('get_program_overview', {'program': 'saverprogram'})

        assert data['program'] == 'saverprogram'
        assert data['income']['first_earning_year'] == 2015

    @pytest.mark.asyncio
    async def test_call_get_projection_for_year(self, fixture_tools):
        data = await call('get_projection', {'year': 2025})

        assert data['program'] == 'testprogram'
        assert data['investments'] == 50000.0
        assert data['period'] == 'past'

    @pytest.mark.asyncio
    async def test_call_get_statistics(self, fixture_tools):
        data = await call('get_statistics', {'program': 'testprogram'})

        assert 'fire_year' in data
        assert 'total_value' in data

    @pytest.mark.asyncio
    async def test_call_compare_years(self, fixture_tools):
        data = await call('compare_years', {'year1': 2025, 'year2': 2030})

        assert data['comparison']['income']['2025'] == 75000.0

    @pytest.mark.asyncio
    async def test_call_compare_programs(self, fixture_tools):
        data = await call('compare_programs', {
            'program1': 'testprogram',
            'program2': 'saverprogram',
            'metrics': ['total_income']
        })

        assert list(data['comparison']) == ['total_income']
        assert 'recommendation' in data

    @pytest.mark.asyncio
    async def test_call_validate_allocation(self, fixture_tools):
        data = await call('validate_allocation', {'spend': 70, 'savings': 20, 'investment': 5})

        assert data == {'valid': False, 'total': 95}

    @pytest.mark.asyncio
    async def test_call_adjust_allocation(self, fixture_tools):
        data = await call('adjust_allocation', {
            'spend': 70, 'savings': 10, 'investment': 20,
            'field': 'savings', 'value': 30
        })

        assert data['savings'] == 30
        assert data['valid'] is True

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, fixture_tools):
        data = await call('unknown_tool', {})

        assert data == {'error': 'Unknown tool: unknown_tool'}

    @pytest.mark.asyncio
    async def test_unknown_program_returns_error(self, fixture_tools):
        data = await call('get_statistics', {'program': 'nonexistent'})

        assert 'not found' in data['error']

    @pytest.mark.asyncio
    async def test_missing_required_argument_returns_error(self, fixture_tools):
        data = await call('compare_years', {'year1': 2025})

        assert 'error' in data

    @pytest.mark.asyncio
    async def test_invalid_allocation_field_returns_error(self, fixture_tools):
        data = await call('adjust_allocation', {
            'spend': 70, 'savings': 10, 'investment': 20,
            'field': 'taxes', 'value': 30
        })

        assert 'Unknown allocation field' in data['error']
