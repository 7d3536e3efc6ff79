"""Recommendation report rendering.

Renders the per-tier recommendations and the overall saving either as a
human-readable report (rich tables) or as a JSON document for other tools.
"""

import json
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from elbpruner.consolidation.aggregator import ConsolidationSummary
from elbpruner.models import Recommendation, TargetType


def _proposal_table(recommendation: Recommendation) -> Table | None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Action", style="cyan")
    table.add_column("Type")
    table.add_column("Load Balancers")
    table.add_column("Security Groups")
    table.add_column("Ports", justify="right")

    for target_type in TargetType:
        for clb in recommendation.clbs_for(target_type):
            action = "Retaining" if clb.is_retained else "Replacing"
            table.add_row(
                action,
                target_type.value,
                "\n".join(escape(name) for name in clb.load_balancers),
                "\n".join(clb.security_groups) or "-",
                "\n".join(clb.ports),
            )

    return table if table.row_count else None


def summary_line(summary: ConsolidationSummary) -> str:
    return (
        f"So {summary.original} ELBs would become {summary.albs} ALBs, {summary.nlbs} NLBs "
        f"and {summary.elbs} ELBs with a potential saving of {summary.savings_percent:.0f}%"
    )


def render_text(
    recommendations: Sequence[Recommendation],
    summary: ConsolidationSummary,
    console: Console | None = None,
) -> None:
    """Print the recommendations as tables, one per tier."""
    console = console or Console()

    if not recommendations:
        console.print("[yellow]No classic load balancers found[/yellow]")

    for recommendation in recommendations:
        subnets = escape(", ".join(recommendation.subnets))
        console.print(
            f'\nThe subnets "[bold cyan]{subnets}[/bold cyan]" could contain '
            "the following load balancer(s):",
            soft_wrap=True,
        )
        table = _proposal_table(recommendation)
        if table is not None:
            console.print(table)

    console.print()
    console.print(f"[bold]{escape(summary_line(summary))}[/bold]", soft_wrap=True)


def render_json(recommendations: Sequence[Recommendation], summary: ConsolidationSummary) -> str:
    """Serialize the recommendations and summary as a JSON document."""
    document = {
        "recommendations": [recommendation.to_dict() for recommendation in recommendations],
        "summary": summary.to_dict(),
    }
    return json.dumps(document, indent=2)


__all__ = ["render_json", "render_text", "summary_line"]
