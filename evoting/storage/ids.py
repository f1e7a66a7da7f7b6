from bson import ObjectId
from bson.errors import InvalidId

from ..errors import ValidationError


def parse_object_id(value, label: str = "ID") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} format.")
