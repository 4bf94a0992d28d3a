# profesiones/serialize.py
from bson import ObjectId
from bson.errors import InvalidId

from profesiones.core.error_messages import ErrorResponses

# Never leave the server
SENSITIVE_FIELDS = {"password", "reset_password_token", "reset_password_expires"}


def _serialize_value(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc):
    if doc is None:
        return None
    return {k: _serialize_value(v) for k, v in doc.items() if k not in SENSITIVE_FIELDS}


def serialize_list(docs):
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise ErrorResponses.INVALID_ID
