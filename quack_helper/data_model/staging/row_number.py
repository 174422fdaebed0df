# quack_helper/data_model/staging/row_number.py
from __future__ import annotations


class RowNumber(int):
    """
    File-local, 1-based number of a Transactions data row.

    Assigned once at staging in sheet order and never recomputed. It is the
    only join key between the Transactions and Splits sheets, and between a
    reimbursement and the row it reimburses.
    """

    __slots__ = ()

    def __new__(cls, value: int) -> "RowNumber":
        if int(value) < 1:
            raise ValueError(f"Row numbers start at 1, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"RowNumber({int(self)})"
