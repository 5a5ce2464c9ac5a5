"""Rich renderer for policy impact results.

Transforms the camelCase results payload (PolicyResults.to_json_dict())
into formatted Rich tables.
"""

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box


def render_policy_results(console: Console, data: dict) -> None:
    """Render policy impact results as Rich tables.

    Args:
        console: Rich Console instance
        data: Results payload with an optional bigBillScenario
    """
    if "error" in data:
        console.print(Panel(
            f"[red]{data['error']}[/red]",
            title="Error",
            border_style="red"
        ))
        return

    big_bill = data.get("bigBillScenario")

    _render_summary_table(console, data, big_bill)
    _render_breakdown(console, "Current Law", data.get("breakdown", []))
    if big_bill:
        _render_breakdown(console, "Big Bill", big_bill.get("breakdown", []))
    _render_community_table(console, data, big_bill)
    _render_purchasing_power(console, data, big_bill)

    console.print(
        "[dim]Negative amounts are savings, positive amounts are added costs. "
        "Estimates for educational purposes only.[/dim]"
    )


def _render_summary_table(console: Console, data: dict, big_bill: dict | None) -> None:
    table = Table(title="Annual Impact vs Current Law", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=24)
    table.add_column("Current Law", justify="right", min_width=14)
    if big_bill:
        table.add_column("Big Bill", justify="right", min_width=14)

    def row(label: str, key: str, formatter=None, style: str | None = None) -> None:
        formatter = formatter or _fmt_impact
        values = [formatter(data.get(key))]
        if big_bill:
            values.append(formatter(big_bill.get(key)))
        table.add_row(label, *values, style=style)

    row("Federal Tax", "annualTaxImpact")
    row("Healthcare", "healthcareCostImpact")
    row("Energy", "energyCostImpact")
    table.add_row("", "", *([""] if big_bill else []))
    row("[bold]NET ANNUAL[/bold]", "netAnnualImpact")
    table.add_row("", "", *([""] if big_bill else []))

    costs = [_fmt_cost_pair(data.get("healthcareCosts"))]
    if big_bill:
        costs.append(_fmt_cost_pair(big_bill.get("healthcareCosts")))
    table.add_row("Healthcare cost (cur → new)", *costs, style="dim")

    for label, key in (("5-year total", "fiveYear"), ("10-year total", "tenYear"), ("20-year total", "twentyYear")):
        values = [_fmt_impact(data.get("timeline", {}).get(key))]
        if big_bill:
            values.append(_fmt_impact(big_bill.get("timeline", {}).get(key)))
        table.add_row(label, *values)

    table.add_row("", "", *([""] if big_bill else []))
    row("Deficit share", "deficitImpact", formatter=_fmt)
    row("Recession probability", "recessionProbability", formatter=_fmt_percent)

    console.print(table)


def _render_breakdown(console: Console, label: str, breakdown: list) -> None:
    if not breakdown:
        return

    table = Table(title=f"{label} Breakdown", box=box.ROUNDED)
    table.add_column("Item", min_width=36)
    table.add_column("Amount", justify="right", min_width=12)

    for entry in breakdown:
        table.add_row(f"[bold]{entry['title']}[/bold]", f"[bold]{_fmt_impact(entry['impact'])}[/bold]")
        for detail in entry.get("details", []):
            table.add_row(f"  {detail['item']}", _fmt_impact(detail["amount"]))

    console.print(table)


def _render_community_table(console: Console, data: dict, big_bill: dict | None) -> None:
    table = Table(title="Community Impact", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=24)
    table.add_column("Current Law", justify="right", min_width=14)
    if big_bill:
        table.add_column("Big Bill", justify="right", min_width=14)

    community = data.get("communityImpact", {})
    big_bill_community = big_bill.get("communityImpact", {}) if big_bill else {}

    rows = (
        ("School funding", "schoolFunding", _fmt_percent),
        ("Infrastructure", "infrastructure", _fmt),
        ("Job opportunities", "jobOpportunities", _fmt_count),
    )
    for label, key, formatter in rows:
        values = [formatter(community.get(key))]
        if big_bill:
            values.append(formatter(big_bill_community.get(key)))
        table.add_row(label, *values)

    console.print(table)


def _render_purchasing_power(console: Console, data: dict, big_bill: dict | None) -> None:
    power = data.get("purchasingPower")
    if not power:
        return

    table = Table(title="Purchasing Power (disposable income, base-year dollars)", box=box.ROUNDED)
    table.add_column("Year", style="bold")
    table.add_column("Index", justify="right")
    table.add_column("Current Law", justify="right", min_width=12)
    table.add_column("Proposed", justify="right", min_width=12)
    if big_bill:
        table.add_column("Big Bill", justify="right", min_width=12)

    big_bill_points = big_bill["purchasingPower"]["proposedScenario"] if big_bill else []
    for i, point in enumerate(power["currentScenario"]):
        values = [
            str(point["year"]),
            str(point["purchasingPowerIndex"]),
            _fmt(point["projectedDisposableIncome"]),
            _fmt(power["proposedScenario"][i]["projectedDisposableIncome"]),
        ]
        if big_bill:
            values.append(_fmt(big_bill_points[i]["projectedDisposableIncome"]))
        table.add_row(*values)

    console.print(table)
    console.print(f"[dim]Source: {power['dataSource']} (updated {power['lastUpdated']})[/dim]")


def render_federal_taxes(console: Console, data: dict) -> None:
    """Render the current/proposed/Big Bill federal tax comparison."""
    table = Table(
        title=f"Federal Income Tax: ${data['income']:,.0f} ({data['familyStatus']})",
        box=box.ROUNDED,
    )
    table.add_column("", style="bold", min_width=18)
    table.add_column("Tax", justify="right", min_width=12)
    table.add_column("vs Current", justify="right", min_width=12)

    current = data["current"]
    table.add_row("Current Law", _fmt(current), "")
    table.add_row("Proposed", _fmt(data["proposed"]), _fmt_impact(data["proposed"] - current))
    table.add_row("Big Bill", _fmt(data["bigBill"]), _fmt_impact(data["bigBill"] - current))

    console.print(table)


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.0f}"


def _fmt_impact(amount: float | None) -> str:
    """Format a signed impact; savings in green, costs in red."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"[green]-${abs(amount):,.0f}[/green]"
    if amount > 0:
        return f"[red]+${amount:,.0f}[/red]"
    return "$0"


def _fmt_count(value: int | None) -> str:
    if value is None:
        return "-"
    return f"{value:,}"


def _fmt_percent(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value}%"


def _fmt_cost_pair(costs: dict | None) -> str:
    if not costs:
        return "-"
    return f"{_fmt(costs['current'])} → {_fmt(costs['proposed'])}"
