"""
Pandas DataFrame as a row source.

Lets a DataFrame (for example one loaded with ``pd.read_sql``) be written
through the same writers as a live cursor. Column type tags come from the
column dtypes; missing values (None, NaN, NaT, pd.NA) are NULL.
"""
import logging
from collections.abc import Iterator

import numpy as np
import pandas as pd
from dbpipe.row import Row

logger = logging.getLogger(__name__)


def dtype_type_tag(dtype) -> str | None:
    """Type tag for a pandas/numpy dtype.

    Returns None for dtypes whose values carry their own type (object,
    categorical, interval, period ...); the tag is then inferred per value.
    """
    if isinstance(dtype, pd.CategoricalDtype):
        return None
    if pd.api.types.is_bool_dtype(dtype):
        return 'BOOLEAN'
    if pd.api.types.is_integer_dtype(dtype):
        return 'BIGINT'
    if pd.api.types.is_float_dtype(dtype):
        return 'FLOAT' if np.dtype(getattr(dtype, 'numpy_dtype', dtype)) == np.float32 else 'DOUBLE'
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return 'DATETIME'
    if pd.api.types.is_timedelta64_dtype(dtype):
        return 'DURATION'
    if isinstance(dtype, pd.StringDtype):
        return 'TEXT'
    return None


def _to_python(value):
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def iter_frame_rows(df: pd.DataFrame) -> Iterator[Row]:
    """Yield one Row per DataFrame row, in index order.

    Object and categorical columns may hold values that are not strings;
    their tag is then inferred per value instead of forcing TEXT.
    """
    fields = [(str(name), dtype_type_tag(dtype)) for name, dtype in df.dtypes.items()]
    logger.debug(f'DataFrame columns: {fields}')

    for values in df.itertuples(index=False, name=None):
        yield Row(fields, [_to_python(v) for v in values])
