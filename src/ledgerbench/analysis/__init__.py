from __future__ import annotations

from ledgerbench.analysis.compare import SUMMARY_COLUMNS, Comparison, compare_networks, summary_frame

__all__ = ["SUMMARY_COLUMNS", "Comparison", "compare_networks", "summary_frame"]
