"""
Utility functions for the application.
"""
from typing import Any, Dict


def normalize_name(name: str) -> str:
    """Trim a person's name and capitalize it ("  aNA " -> "Ana")."""
    trimmed = (name or "").strip()
    if not trimmed:
        return ""
    return trimmed[0].upper() + trimmed[1:].lower()


def format_response(data: Any, message: str = "Success") -> Dict[str, Any]:
    """Format API response."""
    return {
        "message": message,
        "data": data
    }


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
