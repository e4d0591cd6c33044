"""Human-readable build summary rendering for CLI output."""

from __future__ import annotations

from collections import Counter

from core.render.models import BuildReport


def render_build_summary(report: BuildReport, *, max_links: int = 5) -> str:
    """Render one-screen human-readable build summary."""

    lines: list[str] = []
    lines.append("build_summary:")
    lines.append(f"result={'PASSED' if report.passed else 'FAILED'}")
    lines.append(
        f"items={report.item_count} headers={report.header_count} groups={report.group_count}"
    )

    if not report.unresolved_links:
        lines.append("unresolved_links: none")
        return "\n".join(lines)

    target_counter: Counter[str] = Counter(link.target for link in report.unresolved_links)
    top_targets = sorted(target_counter.items(), key=lambda item: (-item[1], item[0]))
    lines.append(f"unresolved_links: {report.unresolved_count}")
    for target, count in top_targets[:max_links]:
        lines.append(f"  {target} x{count}")
    if len(top_targets) > max_links:
        lines.append(f"  ... {len(top_targets) - max_links} more")
    return "\n".join(lines)
