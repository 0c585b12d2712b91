"""HTML, JSON and CSV report generation."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader
import plotly.graph_objects as go

from gitqa.models import AggregationResult, MergeAnalysisResult, MergeCategory

CSV_HEADER = ["Hash", "Author", "Date", "Message", "KeywordsFound"]


class ReportGenerator:
    """Generate reports from an aggregation result and its charts.

    Uses Jinja2 templates to create self-contained HTML reports
    with embedded Plotly charts. Reports only format values the
    result already holds.
    """

    def __init__(
        self,
        figures: list[go.Figure],
        result: AggregationResult,
        title: str = "Defect-Fix Analysis Report",
        merge_result: Optional[MergeAnalysisResult] = None,
        repo_path: Optional[str] = None,
    ):
        """Initialize the report generator.

        Args:
            figures: List of Plotly Figure objects to include
            result: AggregationResult to report on
            title: Report title
            merge_result: Optional merge analysis for the hotfix section
            repo_path: Optional repository path for display
        """
        self.figures = figures
        self.result = result
        self.title = title
        self.merge_result = merge_result
        self.repo_path = repo_path

        # Set up Jinja2 environment
        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True,
        )

    def generate_html(self) -> str:
        """Generate HTML report with embedded charts.

        Returns:
            Complete HTML document as string
        """
        template = self.env.get_template("report.html")

        chart_htmls = [
            fig.to_html(full_html=False, include_plotlyjs=False)  # Template loads from CDN
            for fig in self.figures
        ]

        data = self.result.to_dict()

        return template.render(
            title=self.title,
            repo_path=self.repo_path,
            summary=self._build_summary(),
            keyword_counts=data["keyword_counts"],
            top_files=data["top_files"],
            matched_commits=data["matched_commits"],
            merges=self._build_merge_context(),
            charts=chart_htmls,
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        )

    def write_html(self, output_path: str | Path) -> Path:
        """Write HTML report to file.

        Args:
            output_path: Path to write the HTML file
        """
        path = Path(output_path)
        path.write_text(self.generate_html(), encoding="utf-8")
        return path

    def to_json(self) -> dict:
        """Export report data as JSON-serializable dict.

        Returns:
            Dictionary with the summary and the full result
        """
        return {
            "title": self.title,
            "summary": self._build_summary(),
            "result": self.result.to_dict(),
            "merges": self.merge_result.to_dict() if self.merge_result else None,
        }

    def write_json(self, output_path: str | Path) -> Path:
        """Write the JSON export to file."""
        path = Path(output_path)
        path.write_text(json.dumps(self.to_json(), indent=2, default=str), encoding="utf-8")
        return path

    def write_csv(self, output_path: str | Path) -> Path:
        """Write one row per matched commit.

        Args:
            output_path: Path to write the CSV file
        """
        path = Path(output_path)
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            for commit in self.result.matched_commits:
                writer.writerow(
                    [
                        commit.sha,
                        commit.author,
                        commit.date or "",
                        commit.message,
                        "; ".join(commit.matched_keywords),
                    ]
                )
        return path

    def export_png(self, output_dir: str | Path) -> list[Path]:
        """Export charts as PNG files.

        Args:
            output_dir: Directory to write PNG files

        Returns:
            List of paths to generated PNG files
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        exported = []
        for i, fig in enumerate(self.figures):
            title = fig.layout.title.text if fig.layout.title.text else f"chart_{i}"
            png_path = output_path / f"{self._sanitize_filename(title)}.png"
            fig.write_image(str(png_path), width=1200, height=600, scale=2)
            exported.append(png_path)

        return exported

    def write_report(
        self, output_dir: str | Path, formats: Iterable[str] = ("html",)
    ) -> dict[str, Path]:
        """Write the requested report formats into a directory.

        Args:
            output_dir: Directory to create and write into
            formats: Any of "html", "json", "csv", "png"

        Returns:
            Mapping of format to written path (the directory for "png")
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written: dict[str, Path] = {}
        for fmt in formats:
            if fmt == "html":
                written[fmt] = self.write_html(output_path / "report.html")
            elif fmt == "json":
                written[fmt] = self.write_json(output_path / "report.json")
            elif fmt == "csv":
                written[fmt] = self.write_csv(output_path / "report.csv")
            elif fmt == "png":
                self.export_png(output_path)
                written[fmt] = output_path
            else:
                raise ValueError(f"Unknown report format: {fmt}")

        return written

    def _build_summary(self) -> dict[str, str]:
        """Build summary dictionary for template.

        Returns:
            Dictionary of summary key-value pairs
        """
        result = self.result
        summary = {
            "Total Commits": f"{result.total_commits:,}",
            "Fix Commits": f"{result.matched_count:,}",
            "Defect-Fix Rate": f"{result.defect_fix_rate:.1%}",
            "Code Stability": f"{result.code_stability:.1%}",
            "Hotfix Share": f"{result.hotfix_share:.1%}",
            "Files Touched by Fixes": f"{result.total_fix_files:,}",
            "Hotspot Concentration": f"{result.hotspot_concentration:.1%}",
            "Commit Consistency": f"{result.commit_consistency:.1%}",
        }

        if result.top_files:
            top = result.top_files[0]
            summary["Top Hotspot"] = f"{top.file} ({top.count})"

        return summary

    def _build_merge_context(self) -> Optional[dict]:
        """Build the merge section context, if this is a merge run."""
        if self.merge_result is None:
            return None

        merges = self.merge_result.to_dict()
        return {
            "branch": merges["branch"],
            "total": merges["total_merges"],
            "categories": merges["category_counts"],
            "hotfix_merge_share": f"{self.merge_result.hotfix_merge_share:.1%}",
            "top_fix_files": merges["fixes"]["top_files"],
            "top_hotfix_files": merges["hotfixes"]["top_files"],
            "fix_files": self.merge_result.fixes.total_fix_files,
            "hotfix_files": self.merge_result.hotfixes.total_fix_files,
            "sources": [
                f"{merge.source_branch} (#{merge.pull_request})"
                if merge.pull_request is not None
                else merge.source_branch
                for merge in self.merge_result.merges_by_category[MergeCategory.HOTFIX]
                if merge.source_branch
            ],
        }

    def _sanitize_filename(self, title: str) -> str:
        """Sanitize a string for use as a filename.

        Args:
            title: String to sanitize

        Returns:
            Safe filename string
        """
        # Remove or replace unsafe characters
        safe = "".join(c if c.isalnum() or c in "._- " else "_" for c in title)
        # Replace spaces with underscores and lowercase
        return safe.strip().replace(" ", "_").lower()
