"""Field metadata for YearlyRecord and DerivedStatistics fields.

This module provides descriptions and short names for projection fields.
Short names are used as column headers in tables and the shell 'get' command.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Yearly records
    "year": FieldInfo("Year", "Calendar year"),
    "income": FieldInfo("Income", "Annual income (interpolated for past years, inflation-adjusted for future years)"),
    "savings": FieldInfo("Savings", "End-of-year savings balance"),
    "investments": FieldInfo("Investments", "End-of-year investments balance"),
    "spending": FieldInfo("Spending", "Annual spending drawn from income"),

    # Summary statistics
    "total_income": FieldInfo("Total Income", "Past income plus the first 20 projected years"),
    "final_savings": FieldInfo("Final Savings", "Savings balance at the end of the projection"),
    "final_investments": FieldInfo("Final Investments", "Investments balance at the end of the projection"),
    "total_value": FieldInfo("Total Value", "Final savings plus final investments"),
    "fire_year": FieldInfo("FIRE Year", "First year 4% of investments covers estimated spending (0 if never)"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_field_info(field_name: str) -> FieldInfo | None:
    """Get the full FieldInfo for a field, or None if not found."""
    return FIELD_METADATA.get(field_name)


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.
    
    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.
    
    Args:
        text: The header text to wrap
        max_width: Maximum width per line
        
    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]
    
    words = text.split()
    lines = []
    current_line = ""
    
    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word
    
    if current_line:
        lines.append(current_line)
    
    return lines
