"""Options controlling which imports and decorators the transform recognizes."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MODULE = "realm"


@dataclass(frozen=True)
class TransformOptions:
    """Configuration for :class:`~model_schema.transform.SchemaTransformer`.

    Attributes:
        modules: Module specifiers whose exports are recognized as the
            storage engine's types, e.g. ``import Realm from "realm"``.
        base_class: Exported name of the base entity type a model class
            must extend.
        index_decorator: Name of the bare decorator marking an indexed property.
        map_to_decorator: Name of the call decorator renaming a property.
    """

    modules: tuple[str, ...] = (DEFAULT_MODULE,)
    base_class: str = "Object"
    index_decorator: str = "index"
    map_to_decorator: str = "mapTo"

    def is_recognized_module(self, source: str | None) -> bool:
        return source is not None and source in self.modules
