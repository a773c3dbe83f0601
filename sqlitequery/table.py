"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains the DataTable class, an ordered container of named columns
and rows that SQLiteConnector.execute_data_table() fills from a result set.
"""
from typing import Dict, Iterator, List
from sqlitequery.exceptions import (
    ColumnNameAlreadyExistsError,
    ColumnsFrozenError,
    RowLengthMismatchError,
)
from sqlitequery.row import DataRow


class DataTable:
    """
    Holds rows of data pulled from a SQLite database.

    Attributes:
        columns: Column name to zero-based index, assigned in append order.
        rows: The appended DataRow objects, in append order.

    Columns must all be appended before the first row is created: every row is
    sized from the column count at creation, so the column set is frozen from
    that point on.

    Example:
        table = DataTable()
        table.append_column("id")
        table.append_column("name")
        row = table.new_row()
        row["id"] = 1
        row["name"] = "Darrel"
        table.append_row(row)
        table.rows[0]["name"]  # "Darrel"
    """

    def __init__(self) -> None:
        self.columns: Dict[str, int] = {}
        self.rows: List[DataRow] = []
        self._columns_frozen = False

    @property
    def column_names(self) -> List[str]:
        """Column names in index order."""
        return sorted(self.columns, key=self.columns.__getitem__)

    def append_column(self, column_name: str) -> None:
        """
        Append a column; its index is the number of columns before it.

        Args:
            column_name: Unique name of the column.

        Raises:
            ColumnNameAlreadyExistsError: If column_name is already a column.
            ColumnsFrozenError: If a row has already been created for this table.
        """
        if column_name in self.columns:
            raise ColumnNameAlreadyExistsError(column_name)
        if self._columns_frozen:
            raise ColumnsFrozenError(column_name)
        self.columns[column_name] = len(self.columns)

    def new_row(self) -> DataRow:
        """
        Create an empty row sized to this table's columns. The row is not part
        of the table until it is passed to append_row().
        """
        self._columns_frozen = True
        return DataRow(len(self.columns), self.columns)

    def append_row(self, row: DataRow) -> None:
        """
        Append a row to this table.

        Raises:
            RowLengthMismatchError: If the row's length differs from the column count.
        """
        if len(row) != len(self.columns):
            raise RowLengthMismatchError(len(self.columns), len(row))
        self.rows.append(row)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[DataRow]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return f"DataTable(columns={self.column_names!r}, rows={len(self.rows)})"
