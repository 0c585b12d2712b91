"""Visualization module."""

from gitqa.visualization.charts import ChartGenerator
from gitqa.visualization.report import ReportGenerator

__all__ = ["ChartGenerator", "ReportGenerator"]
