# Copyright (c) Syntropy Systems
"""Spec adapter registry.

A spec adapter supplies per-spec configuration (key buffs, off-GCD
abilities, resource flow tables). Analysis never requires one: when no
adapter is registered, resolve_spec_config returns None and every
extractor falls back to its documented defaults.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, cast

import yaml
from pydantic import ValidationError

from simscope.models.spec import SpecConfig

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class SpecAdapterError(Exception):
    """A spec adapter could not produce a configuration."""


class SpecAdapter(Protocol):
    def get_spec_config(self) -> SpecConfig:
        ...


class StaticSpecAdapter:
    """Adapter over an in-memory SpecConfig."""

    def __init__(self, config: SpecConfig) -> None:
        self._config = config

    def get_spec_config(self) -> SpecConfig:
        return self._config


class YamlSpecAdapter:
    """Adapter that reads a spec config from a YAML file.

    Keys may be camelCase (``keyBuffs``) or snake_case (``key_buffs``).
    """

    path: Path
    _config: SpecConfig

    def __init__(self, path: Path) -> None:
        """Load and validate the spec file.

        Raises:
            SpecAdapterError: if the file is unreadable or invalid.

        """
        self.path = path
        try:
            with path.open() as f:
                data = cast("object", yaml.safe_load(f) or {})
        except (OSError, yaml.YAMLError) as e:
            msg = f"Cannot read spec file {path}: {e}"
            raise SpecAdapterError(msg) from e

        try:
            self._config = SpecConfig.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid spec file {path}: {e}"
            raise SpecAdapterError(msg) from e

    def get_spec_config(self) -> SpecConfig:
        return self._config


_adapter_state: dict[str, SpecAdapter | None] = {"adapter": None}


def set_spec_adapter(adapter: SpecAdapter) -> None:
    """Register the process-wide spec adapter."""
    _adapter_state["adapter"] = adapter


def get_spec_adapter() -> SpecAdapter | None:
    """Get the registered spec adapter, if any."""
    return _adapter_state["adapter"]


def clear_spec_adapter() -> None:
    """Unregister the spec adapter."""
    _adapter_state["adapter"] = None


def resolve_spec_config(adapter: SpecAdapter | None = None) -> SpecConfig | None:
    """Resolve the spec config from an explicit or registered adapter.

    Returns None when no adapter is available or the adapter fails. Any
    exception raised by the adapter counts as a failure.
    """
    if adapter is None:
        adapter = get_spec_adapter()
    if adapter is None:
        logger.debug("No spec adapter registered; using defaults")
        return None

    try:
        return adapter.get_spec_config()
    except Exception as e:  # noqa: BLE001
        logger.debug("Spec adapter unavailable: %s", e)
        return None
