"""
Run report output for wcraw.

Serializes a :class:`~wcraw.crawler.models.CrawlReport` to a JSON file.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

from wcraw.crawler.models import CrawlReport

__all__ = ["render_json"]


def render_json(report: CrawlReport, output_path: Union[Path, str], *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path* and return the path.

    Example:
    ```python
    from wcraw.report import render_json
    report_path = render_json(report, "reports/run.json")
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
