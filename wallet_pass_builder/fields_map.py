"""
Ordered, key-unique collection of pass display fields.
"""

import copy
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .exceptions import InconsistentFieldsError
from .w3cdate import get_w3c_date_string, to_datetime

# Formatting options accepted by set_date_time, mapped to descriptor keys
DATE_OPTIONS = {
    "date_style": "dateStyle",
    "time_style": "timeStyle",
    "ignores_time_zone": "ignoresTimeZone",
    "is_relative": "isRelative",
    "change_message": "changeMessage",
}


class FieldsMap:
    """
    Display fields of one structure slot (header, primary, ...).

    Insertion order is the display order on the pass. Records are stored
    without their key; it is inlined again on serialization.
    """

    def __init__(self, fields=None):
        self._fields: Dict[str, Dict[str, Any]] = {}
        if isinstance(fields, FieldsMap):
            for key, data in fields.items():
                self.add({"key": key, **data})
        elif fields:
            for field in fields:
                self.add(field)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __contains__(self, key) -> bool:
        return key in self._fields

    def __repr__(self) -> str:
        return f"FieldsMap({self.to_list()!r})"

    def keys(self) -> List[str]:
        return list(self._fields)

    def items(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        for key, data in self._fields.items():
            yield key, copy.deepcopy(data)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Returns a copy of the field record (without key) or None."""
        data = self._fields.get(key)
        return copy.deepcopy(data) if data is not None else None

    def remove(self, key: str) -> "FieldsMap":
        self._fields.pop(key, None)
        return self

    def clear(self) -> "FieldsMap":
        self._fields.clear()
        return self

    def copy(self) -> "FieldsMap":
        return FieldsMap(self)

    def add(self, field: Dict[str, Any]) -> "FieldsMap":
        """
        Adds a field to the end of the list, replacing a field with the same key.

        Args:
            field: record with at least ``key`` and ``value``

        Raises:
            TypeError: key is missing or not a string, value is missing, or
                ``dateStyle`` is given with a value that is not a date
        """
        if not isinstance(field, dict):
            raise TypeError(f"Field must be a dict, received {type(field).__name__}")
        data = copy.deepcopy(field)
        key = data.pop("key", None)
        if not isinstance(key, str):
            raise TypeError(
                f"To add a field you must provide string key value, received {type(key).__name__}"
            )
        if "value" not in data:
            raise TypeError(f"To add a field you must provide a value field, received: {field!r}")

        if "dateStyle" in data:
            try:
                data["value"] = to_datetime(data["value"])
            except TypeError:
                raise TypeError(
                    "When dateStyle specified the value must be a valid datetime or "
                    f"date string, received {data['value']!r}"
                ) from None
        self._fields[key] = data
        return self

    def set_value(self, key: str, value: str) -> "FieldsMap":
        """Sets the value of a field, keeping the rest of its properties."""
        if not isinstance(key, str):
            raise TypeError(f"key for set_value must be a string, received {type(key).__name__}")
        if not isinstance(value, str):
            raise TypeError(
                f"value for set_value must be a string, received {type(value).__name__}"
            )
        field = self._fields.get(key, {})
        field["value"] = value
        self._fields[key] = field
        return self

    def set_date_time(self, key: str, label: str, date: datetime, **options) -> "FieldsMap":
        """
        Sets a date field with its formatting options.

        Args:
            key: field key
            label: field label
            date: the date to display
            **options: date_style, time_style, ignores_time_zone, is_relative,
                change_message

        Raises:
            TypeError: bad key, label or date
            InconsistentFieldsError: only one of date_style / time_style given
        """
        if not isinstance(key, str):
            raise TypeError(f"Key must be a string, received {type(key).__name__}")
        if not isinstance(label, str):
            raise TypeError(f"Label must be a string, received {type(label).__name__}")
        if not isinstance(date, datetime):
            raise TypeError("Third parameter of set_date_time must be a datetime instance")
        unknown = set(options) - set(DATE_OPTIONS)
        if unknown:
            raise TypeError(f"Unknown date field options: {', '.join(sorted(unknown))}")
        if bool(options.get("date_style")) != bool(options.get("time_style")):
            raise InconsistentFieldsError(
                "Either specify both a date style and a time style, or neither"
            )

        field: Dict[str, Any] = {"label": label, "value": date}
        for option, descriptor_key in DATE_OPTIONS.items():
            if options.get(option) is not None:
                field[descriptor_key] = options[option]
        self._fields[key] = field
        return self

    def to_list(self) -> Optional[List[Dict[str, Any]]]:
        """Returns the descriptor form, or None when the collection is empty."""
        if not self._fields:
            return None
        result = []
        for key, data in self._fields.items():
            record = {"key": key, **copy.deepcopy(data)}
            if isinstance(record["value"], datetime):
                record["value"] = get_w3c_date_string(record["value"])
            result.append(record)
        return result
