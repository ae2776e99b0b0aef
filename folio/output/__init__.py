"""Output: Plotly charts and CSV export.

Public API::

    from folio.output import (
        build_allocation_donut,
        build_value_curve,
        export_report,
        write_chart_html,
    )
"""

from folio.output.charts import build_allocation_donut, build_value_curve, write_chart_html
from folio.output.export import export_report

__all__ = [
    "build_allocation_donut",
    "build_value_curve",
    "export_report",
    "write_chart_html",
]
