# Copyright (c) Syntropy Systems
"""Shared Pydantic model helpers for simscope."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, JsonValue
from pydantic.alias_generators import to_camel
from typing_extensions import TypeAlias

JSONValue: TypeAlias = JsonValue
JSONObject: TypeAlias = dict[str, JSONValue]


class SimscopeBaseModel(BaseModel):
    """Base model with shared config for simscope schemas.

    Fields are snake_case in Python and camelCase on the wire, which keeps
    summary and golden files readable by the rest of the toolchain.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json(self) -> str:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump_json(by_alias=True, indent=2)

    def to_dict(self) -> JSONObject:
        """Dump to a JSON-compatible dict with wire field names."""
        return self.model_dump(mode="json", by_alias=True)
