"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains the DataRow class, which represents a single row of a DataTable.
"""
from typing import Any, Dict, Iterator, List, Union


class DataRow:
    """
    A fixed-length row of values belonging to a DataTable.

    Values are addressed by position (row[0]) or by column name (row["name"]).
    The row shares its table's column map rather than referencing the table, so
    it stays usable after the table itself is gone.

    Out-of-range positions raise IndexError and unknown column names raise
    KeyError; both are programming errors.
    """

    __slots__ = ("_values", "_column_map")

    def __init__(self, size: int, column_map: Dict[str, int]) -> None:
        """
        Initialize a DataRow with every position set to None.
        Args:
            size: Number of values, fixed for the lifetime of the row
            column_map: The owning table's column name to index mapping (shared)
        """
        self._values: List[Any] = [None] * size
        self._column_map = column_map

    @property
    def count(self) -> int:
        """Number of values in the row."""
        return len(self._values)

    def _index(self, key: Union[int, str]) -> int:
        if isinstance(key, str):
            return self._column_map[key]
        return key

    def __getitem__(self, key: Union[int, str]) -> Any:
        """Access a value by position (row[0]) or column name (row["id"])."""
        return self._values[self._index(key)]

    def __setitem__(self, key: Union[int, str], value: Any) -> None:
        """Set a value by position or column name."""
        self._values[self._index(key)] = value

    def __getattr__(self, name: str) -> Any:
        """
        Allow read access by column name as attribute: row.column_name
        """
        column_map = object.__getattribute__(self, "_column_map")
        if name in column_map:
            return object.__getattribute__(self, "_values")[column_map[name]]
        raise AttributeError(f"DataRow has no attribute '{name}'")

    def as_dict(self) -> Dict[str, Any]:
        """Return the row as a column name to value dictionary, in column order."""
        return {name: self._values[index] for name, index in
                sorted(self._column_map.items(), key=lambda item: item[1])
                if index < len(self._values)}

    def __eq__(self, other: Any) -> bool:
        """
        Rows compare equal to rows and lists holding the same values.
        """
        if isinstance(other, list):
            return self._values == other
        if isinstance(other, DataRow):
            return self._values == other._values
        return NotImplemented

    __hash__ = None

    def __len__(self) -> int:
        """Return the number of values in the row"""
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        """Allow iteration through values"""
        return iter(self._values)

    def __repr__(self) -> str:
        return f"DataRow({self._values!r})"
