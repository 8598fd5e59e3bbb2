"""Denormalizers turning decoded mappings into typed model instances."""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from content_loader.domain.errors import DenormalizationError, type_name

__all__ = [
    "ChainDenormalizer",
    "DataclassDenormalizer",
    "Denormalizer",
    "PydanticDenormalizer",
    "SkippingInstantiatedObjectDenormalizer",
    "default_denormalizer",
]


class Denormalizer(Protocol):
    def supports(self, data: Any, target_type: type, *, skip_instantiated: bool = False) -> bool: ...

    def denormalize(
        self,
        data: Any,
        target_type: type,
        format: str | None = None,
        *,
        skip_instantiated: bool = False,
    ) -> Any: ...


class ChainDenormalizer:
    """Delegates to the first registered denormalizer supporting the target type."""

    def __init__(self, denormalizers: Iterable[Denormalizer] = ()) -> None:
        self._denormalizers: list[Denormalizer] = []
        for denormalizer in denormalizers:
            self.register(denormalizer)

    def register(self, denormalizer: Denormalizer) -> None:
        if hasattr(denormalizer, "set_denormalizer"):
            denormalizer.set_denormalizer(self)
        self._denormalizers.append(denormalizer)

    def supports(self, data: Any, target_type: type, *, skip_instantiated: bool = False) -> bool:
        return self._find(data, target_type, skip_instantiated) is not None

    def denormalize(
        self,
        data: Any,
        target_type: type,
        format: str | None = None,
        *,
        skip_instantiated: bool = False,
    ) -> Any:
        denormalizer = self._find(data, target_type, skip_instantiated)
        if denormalizer is None:
            raise DenormalizationError(f'No denormalizer supports type "{type_name(target_type)}".')
        return denormalizer.denormalize(data, target_type, format, skip_instantiated=skip_instantiated)

    def _find(self, data: Any, target_type: type, skip_instantiated: bool) -> Denormalizer | None:
        for denormalizer in self._denormalizers:
            if denormalizer.supports(data, target_type, skip_instantiated=skip_instantiated):
                return denormalizer
        return None


class SkippingInstantiatedObjectDenormalizer:
    """Returns values that are already instances of the target type untouched."""

    def supports(self, data: Any, target_type: type, *, skip_instantiated: bool = False) -> bool:
        return skip_instantiated and isinstance(target_type, type) and isinstance(data, target_type)

    def denormalize(
        self,
        data: Any,
        target_type: type,
        format: str | None = None,
        *,
        skip_instantiated: bool = False,
    ) -> Any:
        return data


class PydanticDenormalizer:
    """Validates mappings into pydantic models."""

    def supports(self, data: Any, target_type: type, *, skip_instantiated: bool = False) -> bool:
        return isinstance(target_type, type) and issubclass(target_type, BaseModel)

    def denormalize(
        self,
        data: Any,
        target_type: type[BaseModel],
        format: str | None = None,
        *,
        skip_instantiated: bool = False,
    ) -> BaseModel:
        if not isinstance(data, Mapping):
            raise DenormalizationError(
                f"Cannot denormalize {type(data).__name__} into {type_name(target_type)}: a mapping is required."
            )
        try:
            return target_type.model_validate(dict(data))
        except ValidationError as exc:
            raise DenormalizationError(
                f"Invalid data for {type_name(target_type)}: {exc}"
            ) from exc


class DataclassDenormalizer:
    """Builds dataclass instances, denormalizing nested dataclass fields through the chain."""

    def __init__(self) -> None:
        self._denormalizer: ChainDenormalizer | None = None

    def set_denormalizer(self, denormalizer: ChainDenormalizer) -> None:
        self._denormalizer = denormalizer

    def supports(self, data: Any, target_type: type, *, skip_instantiated: bool = False) -> bool:
        return isinstance(target_type, type) and dataclasses.is_dataclass(target_type)

    def denormalize(
        self,
        data: Any,
        target_type: type,
        format: str | None = None,
        *,
        skip_instantiated: bool = False,
    ) -> Any:
        if not isinstance(data, Mapping):
            raise DenormalizationError(
                f"Cannot denormalize {type(data).__name__} into {type_name(target_type)}: a mapping is required."
            )

        hints = typing.get_type_hints(target_type)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(target_type):
            if not field.init or field.name not in data:
                continue
            kwargs[field.name] = self._denormalize_value(
                data[field.name], hints.get(field.name), format, skip_instantiated
            )

        try:
            return target_type(**kwargs)
        except TypeError as exc:
            raise DenormalizationError(f"Invalid data for {type_name(target_type)}: {exc}") from exc

    def _denormalize_value(
        self, value: Any, hint: Any, format: str | None, skip_instantiated: bool
    ) -> Any:
        nested = _dataclass_from_hint(hint)
        if nested is None or value is None or self._denormalizer is None:
            return value
        if isinstance(value, list):
            return [
                self._denormalizer.denormalize(item, nested, format, skip_instantiated=skip_instantiated)
                for item in value
            ]
        return self._denormalizer.denormalize(value, nested, format, skip_instantiated=skip_instantiated)


def _dataclass_from_hint(hint: Any) -> type | None:
    """Return the dataclass named by ``X``, ``X | None`` or ``list[X]`` hints."""

    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return hint
    for arg in typing.get_args(hint):
        if isinstance(arg, type) and dataclasses.is_dataclass(arg):
            return arg
    return None


def default_denormalizer() -> ChainDenormalizer:
    return ChainDenormalizer(
        [
            SkippingInstantiatedObjectDenormalizer(),
            PydanticDenormalizer(),
            DataclassDenormalizer(),
        ]
    )
