"""Typed bodies returned by the device's JSON endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Generic, Type, TypeVar

from mashumaro import DataClassDictMixin, field_options
from mashumaro.exceptions import InvalidFieldValue, MissingField

from .errors import DecodeError

M = TypeVar("M", bound="JSONMessage")
T = TypeVar("T")


def _json_bool(value) -> bool:
    # JSON true/false only, no truthiness
    if not isinstance(value, bool):
        raise TypeError(f"expected a JSON boolean, got {value!r}")
    return value


def _json_str(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a JSON string, got {value!r}")
    return value


def _bool_field(alias: str):
    return field(metadata=field_options(alias=alias, deserialize=_json_bool))


def _str_field(**kwargs):
    return field(metadata=field_options(deserialize=_json_str), **kwargs)


@dataclass(frozen=True)
class JSONMessage(DataClassDictMixin):
    """Base for the flat JSON objects sent by the device.

    Field names are snake_case in python and aliased to the device's camelCase
    keys.
    """

    @classmethod
    def from_body(cls: Type[M], body: str | bytes) -> M:
        """Decode a JSON body.

        Raises
        ------
        DecodeError
            If the body is not JSON, not an object, misses a required field or
            has a field of the wrong JSON type.
        """
        try:
            obj = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"{cls.__name__}: body is not JSON: {e}") from e
        if not isinstance(obj, dict):
            raise DecodeError(f"{cls.__name__}: expected a JSON object, got {obj!r}")
        try:
            return cls.from_dict(obj)
        except (MissingField, InvalidFieldValue) as e:
            raise DecodeError(f"{cls.__name__}: {e}") from e


@dataclass(frozen=True)
class Status(JSONMessage):
    """Device readiness snapshot. Never cached, fetch again to refresh."""

    reference_ready: bool = _bool_field("referenceReady")
    modules_ready: bool = _bool_field("modulesReady")
    measurement_active: bool = _bool_field("measurementActive")


@dataclass(frozen=True)
class Version(JSONMessage):
    """Installed firmware identifier, e.g. "2.13.1.0.5583D-20210924"."""

    firmware: str = _str_field()


@dataclass(frozen=True)
class Result(JSONMessage):
    """Device outcome envelope of mutating calls.

    A false `success` is a normal decode, not an error: the device accepted the
    request over HTTP but reports that it could not act on it. Inspect
    `success` and `message`.
    """

    success: bool = _bool_field("result")
    message: str = _str_field(default="")

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """HTTP outcome plus the decoded device outcome.

    Keeps the two layers apart: `status_code` tells that the exchange worked,
    `value` carries what the device made of it.
    """

    status_code: int
    value: T

    @property
    def ok(self) -> bool:
        if 200 <= self.status_code < 300:
            return bool(getattr(self.value, "success", True))
        return False
