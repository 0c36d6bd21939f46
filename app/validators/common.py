"""
Identifier validation shared by all services
"""

from bson import ObjectId

from app.core.errors import ValidationFailed


def check_object_id(value, field: str = "id") -> str:
    """Reject identifiers the store could never have assigned"""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationFailed(f"Invalid {field} format", details={"field": field})
    return value
