"""JSON serialization for babyvm objects.

This module provides custom JSON encoding/decoding for machine states and
execution traces.
"""

import importlib
import json
import logging
from typing import Any, Self

logger = logging.getLogger(__name__)

_MARKERS = ('_list', '_dict', '_set', '_class')


class BabyEncoder(json.JSONEncoder):
    """Custom JSON encoder for babyvm objects."""

    def iterencode(self, obj: Any, _one_shot: bool = False) -> Any:
        """Add type markers before encoding; both json.dump and json.dumps end up here."""
        return super().iterencode(self._add_type_markers(obj), _one_shot)

    def default(self, obj: Any) -> Any:
        """Handle objects that can't be serialized by default JSON encoder."""
        return self._add_type_markers(obj)

    def _get_common_type(self, items: list[Any]) -> str | None:
        """Get the common type name if all items are the same type."""
        if not items:
            return None
        types = {type(item).__name__ for item in items}
        if len(types) == 1:
            return types.pop()
        return None

    def _add_type_markers(self, obj: Any) -> Any:
        """Add type markers at the collection level, indicating element types."""
        if isinstance(obj, set):
            values_list = list(obj)
            result: dict[str, Any] = {'_set': True, 'values': values_list}
            common_type = self._get_common_type(values_list)
            if common_type:
                result['_type'] = common_type
            return result
        if isinstance(obj, (list, tuple)):
            processed_list = [self._add_type_markers(item) for item in obj]
            result = {'_list': processed_list}
            common_type = self._get_common_type(list(obj))
            if common_type:
                result['_type'] = common_type
            return result
        if isinstance(obj, dict):
            # Already marked, don't wrap twice
            if len(obj) == 1 and next(iter(obj.keys())) in _MARKERS:
                return obj
            processed_dict = {k: self._add_type_markers(v) for k, v in obj.items()}
            result = {'_dict': processed_dict}

            key_type = self._get_common_type(list(obj.keys()))
            if key_type:
                result['_key_type'] = key_type

            value_type = self._get_common_type(list(obj.values()))
            if value_type:
                result['_value_type'] = value_type

            return result
        if hasattr(obj, '__dict__'):
            result = {'_class': obj.__class__.__name__, '_module': obj.__class__.__module__}
            for k, v in obj.__dict__.items():
                result[k] = self._add_type_markers(v)
            return result
        # int, str, bool, None
        return obj


class BabyDecoder(json.JSONDecoder):
    """Custom JSON decoder for babyvm objects."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(object_hook=self.object_hook, *args, **kwargs)  # noqa: B026

    def object_hook(self, dct: dict[str, Any]) -> Any:
        if '_list' in dct:
            return dct['_list']

        if '_dict' in dct:
            inner_dict = dct['_dict']
            # JSON object keys are always strings
            if dct.get('_key_type') == 'int':
                inner_dict = {int(k): v for k, v in inner_dict.items()}
            return inner_dict

        if '_set' in dct and dct.get('_set'):
            return set(dct['values'])

        if '_class' not in dct:
            return dct

        class_name = dct.pop('_class')
        module_name = dct.pop('_module')

        try:
            module = importlib.import_module(module_name)
            cls = getattr(module, class_name)

            # Create instance without calling __init__
            obj = cls.__new__(cls)
            obj.__dict__.update(dct)
            return obj
        except (ImportError, AttributeError) as e:
            logger.warning(f'Could not deserialize {module_name}.{class_name}: {e}')
            return dct


class SerializableMixin:
    """Mixin to add serialize/deserialize methods to any class."""

    def serialize(self) -> str:
        """Serialize object to JSON string."""
        return json.dumps(self, cls=BabyEncoder)

    @classmethod
    def deserialize(cls, data: str) -> Self:
        """Deserialize object from JSON string."""
        return json.loads(data, cls=BabyDecoder)  # type: ignore[no-any-return]
