#!/usr/bin/env python3
"""MCP Server for the FIRE Planner.

This server exposes the projection engine as MCP tools, allowing AI
assistants to answer questions about a user's path to financial
independence.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools


# Create the MCP server
server = Server("fire-planner")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via FIRE_PLANNER_PROGRAM env var
        default_program = os.environ.get('FIRE_PLANNER_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

ALLOCATION_PROPERTIES = {
    "spend": {"type": "number", "description": "Percentage of income spent"},
    "savings": {"type": "number", "description": "Percentage of income saved"},
    "investment": {"type": "number", "description": "Percentage of income invested"},
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available FIRE planning tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available FIRE planning programs with their current year and estimated FIRE year.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_program_overview",
            description="Get the plan's parameters: current savings and investments with growth rates, income and growth, allocation percentages, inflation, and historical earnings.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_projection",
            description="Get yearly income, savings, investments and spending. Past years are reconstructed history; future years are inflation-adjusted projections.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: specific year. If omitted, returns every past and future year."
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_statistics",
            description="Get the estimated FIRE year (4% rule against 70% of current income), lifetime income, and final savings and investments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compare_years",
            description="Compare income, savings, investments and spending between two years.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year1": {
                        "type": "integer",
                        "description": "First year to compare"
                    },
                    "year2": {
                        "type": "integer",
                        "description": "Second year to compare"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": ["year1", "year2"]
            }
        ),
        Tool(
            name="compare_programs",
            description="Compare two programs on FIRE year, final balances and lifetime income, with a recommendation.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program1": {
                        "type": "string",
                        "description": "First program name to compare"
                    },
                    "program2": {
                        "type": "string",
                        "description": "Second program name to compare"
                    },
                    "metrics": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional: metrics to compare. Options: 'fire_year', 'total_value', 'final_investments', 'final_savings', 'total_income'."
                    }
                },
                "required": ["program1", "program2"]
            }
        ),
        Tool(
            name="validate_allocation",
            description="Check whether spend, savings and investment percentages sum to 100%.",
            inputSchema={
                "type": "object",
                "properties": ALLOCATION_PROPERTIES,
                "required": ["spend", "savings", "investment"]
            }
        ),
        Tool(
            name="adjust_allocation",
            description="Change one allocation percentage and rebalance the other two proportionally so the total stays 100%.",
            inputSchema={
                "type": "object",
                "properties": {
                    **ALLOCATION_PROPERTIES,
                    "field": {
                        "type": "string",
                        "enum": ["spend", "savings", "investment"],
                        "description": "The percentage being changed"
                    },
                    "value": {
                        "type": "number",
                        "description": "The new percentage for field"
                    }
                },
                "required": ["spend", "savings", "investment", "field", "value"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fp_tools = get_tools()
        program = arguments.get("program")

        if name == "list_programs":
            result = fp_tools.list_programs()
        elif name == "reload_programs":
            result = fp_tools.reload_programs()
        elif name == "get_program_overview":
            result = fp_tools.get_program_overview(program)
        elif name == "get_projection":
            result = fp_tools.get_projection(arguments.get("year"), program)
        elif name == "get_statistics":
            result = fp_tools.get_statistics(program)
        elif name == "compare_years":
            result = fp_tools.compare_years(arguments["year1"], arguments["year2"], program)
        elif name == "compare_programs":
            result = fp_tools.compare_programs(
                arguments["program1"],
                arguments["program2"],
                arguments.get("metrics")
            )
        elif name == "validate_allocation":
            result = fp_tools.validate_allocation(
                arguments["spend"], arguments["savings"], arguments["investment"]
            )
        elif name == "adjust_allocation":
            result = fp_tools.adjust_allocation(
                arguments["spend"], arguments["savings"], arguments["investment"],
                arguments["field"], arguments["value"]
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except (KeyError, ValueError) as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
