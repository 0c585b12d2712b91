"""Plotly chart generators."""

from typing import Optional

import plotly.graph_objects as go

from gitqa.config import UNKNOWN_BUCKET
from gitqa.models import AggregationResult, FileCount, MergeAnalysisResult, MergeCategory


class ChartGenerator:
    """Generate Plotly charts from aggregation results.

    All chart methods return Plotly Figure objects that can be
    rendered to HTML, PNG, or displayed interactively. Charts only
    plot counts already present on the results.
    """

    # Color palette for charts
    COLORS = {
        "primary": "#2563eb",
        "secondary": "#7c3aed",
        "success": "#16a34a",
        "danger": "#dc2626",
        "warning": "#d97706",
        "info": "#0891b2",
    }

    # Colors for merge categories
    CATEGORY_COLORS = {
        MergeCategory.HOTFIX: "#dc2626",
        MergeCategory.FIX: "#d97706",
        MergeCategory.RELEASE: "#16a34a",
        MergeCategory.OTHER: "#9ca3af",
    }

    def __init__(
        self,
        result: AggregationResult,
        merge_result: Optional[MergeAnalysisResult] = None,
    ):
        """Initialize the chart generator.

        Args:
            result: AggregationResult to plot
            merge_result: Optional merge analysis for the merge charts
        """
        self.result = result
        self.merge_result = merge_result

    @staticmethod
    def _sorted_days(counts: dict[str, int]) -> list[str]:
        # Chronological, with the unknown bucket last
        return sorted(counts, key=lambda day: (day == UNKNOWN_BUCKET, day))

    def commit_frequency_chart(self) -> go.Figure:
        """Generate commits per day chart.

        Returns:
            Plotly Figure showing daily commit counts as a bar chart
        """
        counts = self.result.daily_total_counts
        if not counts:
            return self._empty_figure("No commit data available", "Commit Frequency by Date")

        days = self._sorted_days(counts)

        fig = go.Figure(
            data=[
                go.Bar(
                    x=days,
                    y=[counts[day] for day in days],
                    marker_color=self.COLORS["primary"],
                    hovertemplate="%{x}<br>%{y} commits<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title="Commit Frequency by Date",
            xaxis_title="Date",
            yaxis_title="Commits",
            template="plotly_white",
            hovermode="x unified",
        )

        return fig

    def fix_trend_chart(self) -> go.Figure:
        """Generate fix commits over time chart.

        Returns:
            Plotly Figure showing daily fix counts as a line chart
        """
        trend = self.result.trend_by_day
        if not trend:
            return self._empty_figure("No fix commits found", "Fix Commit Trend")

        days = self._sorted_days(trend)

        fig = go.Figure(
            data=[
                go.Scatter(
                    x=days,
                    y=[trend[day] for day in days],
                    mode="lines+markers",
                    line=dict(color=self.COLORS["danger"]),
                    hovertemplate="%{x}<br>%{y} fixes<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title="Fix Commit Trend",
            xaxis_title="Date",
            yaxis_title="Fix Commits",
            template="plotly_white",
        )

        return fig

    def _files_chart(self, files: list[FileCount], title: str, color: str) -> go.Figure:
        if not files:
            return self._empty_figure("No files found", title)

        # Plotly draws horizontal bars bottom-up; reverse so rank 1 is on top
        ranked = list(reversed(files))

        fig = go.Figure(
            data=[
                go.Bar(
                    x=[entry.count for entry in ranked],
                    y=[entry.file for entry in ranked],
                    orientation="h",
                    marker_color=color,
                    hovertemplate="%{y}<br>%{x} touches<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title=title,
            xaxis_title="Touches",
            yaxis_title="File",
            template="plotly_white",
        )

        return fig

    def top_files_chart(self) -> go.Figure:
        """Generate hotspot file ranking.

        Returns:
            Plotly Figure with the most fixed files as horizontal bars
        """
        return self._files_chart(self.result.top_files, "Top Fix Files", self.COLORS["warning"])

    def fix_rate_pie(self) -> go.Figure:
        """Generate fix versus other commits pie chart."""
        if self.result.total_commits == 0:
            return self._empty_figure("No commit data available", "Defect-Fix Rate")

        matched = self.result.matched_count
        fig = go.Figure(
            data=[
                go.Pie(
                    labels=["Fix Commits", "Other Commits"],
                    values=[matched, self.result.total_commits - matched],
                    marker=dict(colors=[self.COLORS["danger"], self.COLORS["primary"]]),
                    hole=0.4,
                    textinfo="label+percent",
                    hovertemplate="%{label}<br>%{value} commits (%{percent})<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title="Defect-Fix Rate",
            template="plotly_white",
        )

        return fig

    def keyword_chart(self) -> go.Figure:
        """Generate bar chart of keyword counts."""
        counts = self.result.keyword_counts
        if not counts:
            return self._empty_figure("No keywords configured", "Keyword Counts")

        fig = go.Figure(
            data=[
                go.Bar(
                    x=list(counts.keys()),
                    y=list(counts.values()),
                    marker_color=self.COLORS["secondary"],
                    hovertemplate="%{x}<br>%{y} commits<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title="Keyword Counts",
            xaxis_title="Keyword",
            yaxis_title="Commits",
            template="plotly_white",
        )

        return fig

    def merge_category_chart(self) -> go.Figure:
        """Generate pie chart of merge categories."""
        if self.merge_result is None or self.merge_result.total_merges == 0:
            return self._empty_figure("No merge data available", "Merge Categories")

        categories = list(self.merge_result.category_counts.keys())

        fig = go.Figure(
            data=[
                go.Pie(
                    labels=[category.value for category in categories],
                    values=[self.merge_result.category_counts[c] for c in categories],
                    marker=dict(colors=[self.CATEGORY_COLORS[c] for c in categories]),
                    textinfo="label+percent",
                    hovertemplate="%{label}<br>%{value} merges (%{percent})<extra></extra>",
                )
            ]
        )

        fig.update_layout(
            title="Merge Categories",
            template="plotly_white",
            showlegend=True,
        )

        return fig

    def fix_merge_files_chart(self) -> go.Figure:
        """Generate ranking of files touched by fix merges."""
        files = self.merge_result.top_fix_files if self.merge_result else []
        return self._files_chart(files, "Top Fix Merge Files", self.COLORS["warning"])

    def hotfix_files_chart(self) -> go.Figure:
        """Generate ranking of files touched by hotfix merges."""
        files = self.merge_result.top_hotfix_files if self.merge_result else []
        return self._files_chart(files, "Top Hotfix Files", self.COLORS["danger"])

    def all_charts(self) -> list[go.Figure]:
        """Generate all available charts.

        Returns:
            List of Plotly Figure objects
        """
        charts = [
            self.commit_frequency_chart(),
            self.fix_trend_chart(),
            self.top_files_chart(),
            self.fix_rate_pie(),
            self.keyword_chart(),
        ]

        # Merge charts only for merge-oriented runs
        if self.merge_result is not None:
            charts.extend(
                [
                    self.merge_category_chart(),
                    self.fix_merge_files_chart(),
                    self.hotfix_files_chart(),
                ]
            )

        return charts

    def _empty_figure(self, message: str, title: Optional[str] = None) -> go.Figure:
        """Create an empty figure with a message.

        Args:
            message: Message to display
            title: Chart title, kept so exports stay named

        Returns:
            Empty Plotly Figure with centered message
        """
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=16, color="#6b7280"),
        )
        fig.update_layout(
            title=title,
            template="plotly_white",
            xaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            yaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
        )
        return fig
