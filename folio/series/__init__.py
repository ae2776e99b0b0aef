"""Portfolio value curves from weighted per-asset price series.

Public API::

    from folio.series import (
        ChartRange,
        CombinedPoint,
        InvalidRequestError,
        PriceSample,
        combine_time_series,
        nearest_sample,
    )
"""

from folio.series.combiner import (
    CombinedPoint,
    FetchedSeries,
    PriceSample,
    combine_series,
    combine_time_series,
    fetch_weighted_series,
    nearest_sample,
    validate_request,
)
from folio.series.ranges import ChartRange, InvalidRequestError, format_date_label

__all__ = [
    "ChartRange",
    "CombinedPoint",
    "FetchedSeries",
    "InvalidRequestError",
    "PriceSample",
    "combine_series",
    "combine_time_series",
    "fetch_weighted_series",
    "format_date_label",
    "nearest_sample",
    "validate_request",
]
