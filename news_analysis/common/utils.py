from __future__ import annotations

import json
import types
import typing
from datetime import datetime
from enum import Enum

import pyarrow as pa
from pydantic import BaseModel

# scalar annotations and their Arrow column types
_ARROW_SCALARS: dict[type, pa.DataType] = {
    bool: pa.bool_(),
    int: pa.int64(),
    float: pa.float64(),
    str: pa.string(),
    datetime: pa.timestamp("us", tz="UTC"),
}


class CustomEncoder(json.JSONEncoder):
    """JSON encoder for report bodies and stored payloads."""

    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        return super().default(o)


class ArrowConverter:
    """Maps the flat pydantic records of this package onto Arrow tables."""

    @staticmethod
    def _unwrap_optional(python_type):
        """Strip `None` from `X | None` annotations."""
        origin = typing.get_origin(python_type)
        if origin in (typing.Union, types.UnionType):
            args = [a for a in typing.get_args(python_type) if a is not type(None)]
            if len(args) == 1:
                return args[0]
        return python_type

    @classmethod
    def _is_json_field(cls, annotation) -> bool:
        return typing.get_origin(cls._unwrap_optional(annotation)) is dict

    @classmethod
    def _get_arrow_type(cls, python_type) -> pa.DataType:
        python_type = cls._unwrap_optional(python_type)

        if typing.get_origin(python_type) is list:
            (item_type,) = typing.get_args(python_type) or (str,)
            return pa.list_(cls._get_arrow_type(item_type))
        if python_type in _ARROW_SCALARS:
            return _ARROW_SCALARS[python_type]
        # enums by value, dicts as JSON text, anything else as its string form
        return pa.string()

    @classmethod
    def to_arrow_schema(cls, model: type[BaseModel]) -> pa.Schema:
        return pa.schema(
            [
                pa.field(name, cls._get_arrow_type(field.annotation))
                for name, field in model.model_fields.items()
            ]
        )

    @classmethod
    def to_row(cls, record: BaseModel) -> dict[str, typing.Any]:
        """Dump a model into a row matching `to_arrow_schema`."""
        row = record.model_dump(mode="python")
        for name, field in type(record).model_fields.items():
            value = row[name]
            if cls._is_json_field(field.annotation):
                row[name] = None if value is None else json.dumps(value, cls=CustomEncoder)
            elif isinstance(value, Enum):
                row[name] = value.value
        return row

    @classmethod
    def from_row(cls, model: type[BaseModel], row: dict[str, typing.Any]) -> BaseModel:
        """Rebuild a model from a row written by `to_row`."""
        data = dict(row)
        for name, field in model.model_fields.items():
            if cls._is_json_field(field.annotation) and data.get(name) is not None:
                data[name] = json.loads(data[name])
        return model.model_validate(data)
