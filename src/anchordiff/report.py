from __future__ import annotations

from datetime import datetime
from html import escape
import json
import logging
from pathlib import Path
import tempfile

from .errors import SinkWriteError
from .models import AnalysisResult
from .selector_rules import looks_generated_selector

logger = logging.getLogger("anchordiff.io")

DEFAULT_JSON_OUTPUT = Path("output") / "analysis-results.json"
DEFAULT_HTML_OUTPUT = Path("output") / "analysis-report.html"

TOP_STABLE_VALUES = 10

_REPORT_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 1200px; margin: 0 auto; padding: 20px; }
    h1, h2, h3 { color: #0078d4; }
    .report-section { margin-bottom: 30px; border-bottom: 1px solid #eee; padding-bottom: 20px; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 20px; }
    th, td { border: 1px solid #ddd; padding: 8px 12px; text-align: left; }
    th { background-color: #f2f2f2; }
    .score-high { color: #107c10; }
    .score-medium { color: #ff8c00; }
    .score-low { color: #d83b01; }
    .status-changed { color: #0078d4; font-weight: bold; }
    .status-added { color: #107c10; font-weight: bold; }
    .status-removed { color: #d83b01; font-weight: bold; }
    .risky { color: #d83b01; font-size: 0.85em; margin-left: 6px; }
    pre { background: #f6f8fa; border-radius: 3px; padding: 10px; overflow: auto; }
    .highlight { background-color: #fff3cd; padding: 2px; }
"""


def score_class(score: float) -> str:
    if score >= 80:
        return "score-high"
    if score >= 50:
        return "score-medium"
    return "score-low"


def result_to_json(result: AnalysisResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def render_integration_snippet(result: AnalysisResult, variable_name: str = "STABLE_ANCHORS") -> str:
    lines = [f"{variable_name} = {{"]
    for name, anchor in result.recommended_anchors.items():
        lines.append(f"    {name!r}: {{")
        lines.append(f"        'primary': {anchor.primary_selector!r},")
        lines.append(f"        'alternatives': {list(anchor.alternative_selectors)!r},")
        lines.append(f"        'stabilityScore': {anchor.stability_score!r},")
        lines.append(f"        'selectorType': {anchor.strategy_used!r},")
        lines.append("    },")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_html_report(
    result: AnalysisResult,
    before_label: str,
    after_label: str,
    generated_at: datetime | None = None,
) -> str:
    timestamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    sections = [
        _attributes_section(result),
        _changes_section(result),
        _anchors_section(result),
        _summary_section(result),
        _snippet_section(result),
    ]
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '  <meta charset="UTF-8">',
            '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
            "  <title>HTML Snapshot Comparison</title>",
            f"  <style>{_REPORT_STYLE}  </style>",
            "</head>",
            "<body>",
            "  <h1>HTML Snapshot Comparison</h1>",
            '  <div class="report-meta">',
            f"    <p><strong>Before:</strong> {escape(before_label)}</p>",
            f"    <p><strong>After:</strong> {escape(after_label)}</p>",
            f"    <p><strong>Generated:</strong> {escape(timestamp)}</p>",
            "  </div>",
            *sections,
            "</body>",
            "</html>",
            "",
        ]
    )


def write_json_report(result: AnalysisResult, path: str | Path) -> Path:
    target = Path(path)
    _write_atomic(target, result_to_json(result))
    logger.info("JSON results saved to %s", target)
    return target


def write_html_report(
    result: AnalysisResult,
    path: str | Path,
    before_label: str,
    after_label: str,
) -> Path:
    target = Path(path)
    _write_atomic(target, render_html_report(result, before_label, after_label))
    logger.info("HTML report saved to %s", target)
    return target


def _write_atomic(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SinkWriteError(path, f"could not create output folder: {exc}") from exc

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
            handle.flush()
        temp_path.replace(path)
    except OSError as exc:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise SinkWriteError(path, str(exc)) from exc


def _attributes_section(result: AnalysisResult) -> str:
    rows = []
    values = []
    for name, record in result.stable_attributes.items():
        percent = record.stability_score_percent
        rows.append(
            "      <tr>"
            f"<td>{escape(name)}</td>"
            f"<td>{record.before_count}</td>"
            f"<td>{record.after_count}</td>"
            f"<td>{record.common_count}</td>"
            f'<td class="{score_class(percent)}">{percent:.2f}%</td>'
            "</tr>"
        )
        top_values = json.dumps(list(record.stable_values[:TOP_STABLE_VALUES]), indent=2, ensure_ascii=False)
        values.append(
            f"    <div>\n      <h4>{escape(name)} (top {TOP_STABLE_VALUES})</h4>\n"
            f"      <pre>{escape(top_values)}</pre>\n    </div>"
        )
    return "\n".join(
        [
            '  <div class="report-section">',
            "    <h2>Stable Attributes Analysis</h2>",
            "    <table>",
            "      <tr><th>Attribute</th><th>Before Count</th><th>After Count</th>"
            "<th>Common Count</th><th>Stability Score</th></tr>",
            *rows,
            "    </table>",
            "    <h3>Most Stable Values</h3>",
            *values,
            "  </div>",
        ]
    )


def _changes_section(result: AnalysisResult) -> str:
    rows = []
    for change in result.changed_selectors:
        before = change.before_match.selector_used if change.before_match.found else "N/A"
        after = change.after_match.selector_used if change.after_match.found else "N/A"
        rows.append(
            "      <tr>"
            f"<td>{escape(change.landmark_name)}</td>"
            f'<td class="status-{change.change_kind}">{change.change_kind}</td>'
            f"<td>{escape(before or 'N/A')}</td>"
            f"<td>{escape(after or 'N/A')}</td>"
            "</tr>"
        )
    if not rows:
        rows.append('      <tr><td colspan="4">No landmark changes detected.</td></tr>')
    return "\n".join(
        [
            '  <div class="report-section">',
            "    <h2>Changed Selectors</h2>",
            "    <table>",
            "      <tr><th>Landmark</th><th>Status</th><th>Before</th><th>After</th></tr>",
            *rows,
            "    </table>",
            "  </div>",
        ]
    )


def _selector_cell(selector: str | None) -> str:
    if not selector:
        return "None found"
    cell = f"<code>{escape(selector)}</code>"
    if looks_generated_selector(selector):
        cell += '<span class="risky">Risky</span>'
    return cell


def _anchors_section(result: AnalysisResult) -> str:
    rows = []
    for name, anchor in result.recommended_anchors.items():
        alternatives = json.dumps(list(anchor.alternative_selectors), indent=2, ensure_ascii=False)
        rows.append(
            "      <tr>"
            f"<td>{escape(name)}</td>"
            f"<td>{_selector_cell(anchor.primary_selector)}</td>"
            f'<td class="{score_class(anchor.stability_score)}">{anchor.stability_score}</td>'
            f"<td>{escape(anchor.strategy_used or 'N/A')}</td>"
            f"<td><pre>{escape(alternatives)}</pre></td>"
            "</tr>"
        )
    return "\n".join(
        [
            '  <div class="report-section">',
            "    <h2>Recommended Anchors</h2>",
            "    <table>",
            "      <tr><th>Feature</th><th>Primary Selector</th><th>Stability Score</th>"
            "<th>Type</th><th>Alternatives</th></tr>",
            *rows,
            "    </table>",
            "  </div>",
        ]
    )


def _summary_section(result: AnalysisResult) -> str:
    reliable = result.reliable_anchors
    items = [
        f'      <li>Use <code class="highlight">{escape(anchor.primary_selector or "")}</code> '
        f"as a reliable selector for {escape(anchor.feature_name)}</li>"
        for anchor in reliable
    ]
    return "\n".join(
        [
            '  <div class="report-section">',
            "    <h2>Summary</h2>",
            f"    <p>This analysis identified {len(result.changed_selectors)} changed landmark(s) and "
            f"{len(reliable)} reliable anchor point(s) between the before and after snapshots.</p>",
            "    <h3>Recommendations</h3>",
            "    <ul>",
            *items,
            "    </ul>",
            "  </div>",
        ]
    )


def _snippet_section(result: AnalysisResult) -> str:
    return "\n".join(
        [
            '  <div class="report-section">',
            "    <h2>Integration Snippet</h2>",
            f"    <pre>{escape(render_integration_snippet(result))}</pre>",
            "  </div>",
        ]
    )
