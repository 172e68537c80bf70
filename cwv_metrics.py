"""
Core Web Vitals summary of the reports a batch has already written.

Reporting only: the audit path never reads these values back.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

GOOD, NEEDS_WORK, POOR = "🟢", "🟡", "🔴"


@dataclass(frozen=True)
class Metric:
    column: str
    audit_id: str
    scale: float
    good: float
    needs_work: float
    weight: int
    likely_cause: str
    required: bool = True


METRICS = {
    "LCP": Metric("LCP (s)", "largest-contentful-paint", 1000, 2.5, 4, 3,
                  "Slow Server / Heavy Images / Render Blocking JS"),
    # lab navigations usually have no INP
    "INP": Metric("INP (ms)", "interaction-to-next-paint", 1, 200, 500, 2,
                  "Heavy JS Execution", required=False),
    "CLS": Metric("CLS", "cumulative-layout-shift", 1, 0.1, 0.25, 1,
                  "Layout Shift (Images / Ads / Fonts)"),
}


def metric_status(metric, value):
    m = METRICS[metric]
    if value <= m.good:
        return GOOD
    if value <= m.needs_work:
        return NEEDS_WORK
    return POOR


def fix_priority(statuses):
    """Each poor metric adds its weight, each one needing work adds 0.5."""
    score = 0
    for metric, status in statuses.items():
        if status == POOR:
            score += METRICS[metric].weight
        elif status == NEEDS_WORK:
            score += 0.5
    return score


def _metric_value(audits, metric):
    m = METRICS[metric]
    value = audits.get(m.audit_id, {}).get("numericValue")
    if value is None:
        if m.required:
            raise KeyError(m.audit_id)
        value = 0
    return value / m.scale


def summarize_report(report, url, profile):
    """Flatten one saved Lighthouse report into a summary row."""
    row = {"URL": url, "Device": profile}

    try:
        row["Performance Score"] = round(report["categories"]["performance"]["score"] * 100)
        values = {metric: _metric_value(report["audits"], metric) for metric in METRICS}
    except (KeyError, TypeError, AttributeError) as e:
        logger.warning("Report for %s (%s) is missing %s", url, profile, e)
        row["Error"] = f"Missing field: {e}"
        return row

    statuses = {}
    for metric, value in values.items():
        statuses[metric] = metric_status(metric, value)
        row[METRICS[metric].column] = round(value, 2)
        row[f"{metric} Status"] = statuses[metric]

    failed = [metric for metric, status in statuses.items() if status != GOOD]
    poor = [metric for metric, status in statuses.items() if status == POOR]

    row["CWV Overall"] = "❌" if failed else "✅"
    row["CWV Failed Due To"] = ", ".join(failed) or "None"
    row["Fix Priority Score"] = fix_priority(statuses)
    row["Likely Root Cause"] = " | ".join(METRICS[m].likely_cause for m in poor) or "None"
    return row


def summarize_outcomes(outcomes):
    """Build a summary DataFrame from the reports a batch wrote to disk."""
    rows = []

    for outcome in outcomes:

        if not outcome.ok:
            rows.append({"URL": outcome.url, "Error": outcome.error})
            continue

        for profile, path in (("desktop", outcome.desktop_path), ("mobile", outcome.mobile_path)):
            with open(path, encoding="utf-8") as f:
                report = json.load(f)
            rows.append(summarize_report(report, outcome.url, profile))

    return pd.DataFrame(rows)


def write_summary(outcomes, output_dir):
    summary_path = Path(output_dir) / "summary.csv"
    summarize_outcomes(outcomes).to_csv(summary_path, index=False)
    logger.info("Saved Core Web Vitals summary to %s", summary_path)
    return summary_path
