import typing
from dataclasses import fields, is_dataclass

# Type marker key used for serialization/deserialization
_TYPE_KEY = "_type"

# Registry mapping type names to classes (populated lazily)
_TYPE_REGISTRY: dict[str, type] = {}


def _serialize_for_json(value: typing.Any) -> typing.Any:
    if is_dataclass(value) and not isinstance(value, type):
        result = {
            _TYPE_KEY: type(value).__name__,
        }
        for item in fields(value):
            result[item.name] = _serialize_for_json(getattr(value, item.name))
        return result
    if isinstance(value, dict):
        return {str(key): _serialize_for_json(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize_for_json(item) for item in value]
    return value


def serialize_note(value: typing.Any) -> dict:
    serialized = _serialize_for_json(value)
    if isinstance(serialized, dict):
        return serialized
    return {"value": serialized}


def _get_type_registry() -> dict[str, type]:
    """Lazily populate and return the type registry."""
    if _TYPE_REGISTRY:
        return _TYPE_REGISTRY

    from stickies2text import data_types

    for name in dir(data_types):
        obj = getattr(data_types, name)
        if isinstance(obj, type) and is_dataclass(obj):
            _TYPE_REGISTRY[name] = obj

    return _TYPE_REGISTRY


def _deserialize_value(value: typing.Any) -> typing.Any:
    if isinstance(value, dict):
        if _TYPE_KEY in value:
            return _deserialize_dataclass(value)
        return {key: _deserialize_value(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value


def _deserialize_dataclass(data: dict) -> typing.Any:
    registry = _get_type_registry()
    cls = registry.get(data.get(_TYPE_KEY))
    if cls is None:
        # Unknown type, return dict as-is
        return data

    field_names = {f.name for f in fields(cls)}
    kwargs = {
        name: _deserialize_value(data[name]) for name in field_names if name in data
    }
    return cls(**kwargs)


def deserialize_note(data: dict) -> typing.Any:
    """
    Rebuild the dataclass hierarchy produced by serialize_note().

    Raises:
        ValueError: If the payload carries no known type marker.
    """
    if _TYPE_KEY not in data:
        raise ValueError(f"Missing '{_TYPE_KEY}' key in serialized data")
    if data[_TYPE_KEY] not in _get_type_registry():
        raise ValueError(f"Unknown type: {data[_TYPE_KEY]}")
    return _deserialize_dataclass(data)
