"""
Terminal rendering with rich

Results table, per-name detail view and summary. Status cells link to
the matching search page (trademark register, App Store, Google Play)
so a result can be verified with one click.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.table import Table

from .checkers.app_store import app_store_search_url
from .checkers.domain import PRIMARY_TLD
from .checkers.play_store import play_store_search_url
from .checkers.trademark import trademark_search_url
from .models import AppStoreResult, AvailabilityStatus, DomainCheckResult, NameCheckResult, TrademarkStatus
from .scoring import assess, best_candidate, fully_available, score_result

console = Console()

MAX_DOMAIN_CELLS = 12
MAX_AVAILABLE_CELLS = 8
MAX_TAKEN_CELLS = 3

TRADEMARK_LABELS = {
    TrademarkStatus.AVAILABLE: ("green", "AVAIL"),
    TrademarkStatus.PENDING: ("yellow", "PENDING"),
    TrademarkStatus.REGISTERED: ("red", "REG"),
    TrademarkStatus.UNKNOWN: ("dim", "UNKNOWN"),
}

APP_LABELS = {
    AvailabilityStatus.AVAILABLE: ("green", "✓ Available"),
    AvailabilityStatus.TAKEN: ("red", "✗ Taken"),
    AvailabilityStatus.UNKNOWN: ("dim", "? Unknown"),
}

APP_ICONS = {
    AvailabilityStatus.AVAILABLE: "[green]✓[/green]",
    AvailabilityStatus.TAKEN: "[red]✗[/red]",
    AvailabilityStatus.UNKNOWN: "[dim]?[/dim]",
}


def link(text: str, url: Optional[str]) -> str:
    """Wrap markup in a terminal hyperlink."""
    if not url:
        return text
    return f"[link={url}]{text}[/link]"


def format_trademark_cell(status: TrademarkStatus, name: str) -> str:
    color, label = TRADEMARK_LABELS[status]
    return link(f"[{color}]{status.symbol} {label}[/{color}]", trademark_search_url(name))


def _fallback_store_url(name: str, store: str) -> str:
    return app_store_search_url(name) if store == "ios" else play_store_search_url(name)


def format_app_cell(result: AppStoreResult, name: str, store: str) -> str:
    """Status cell; taken apps link to the store page or a search."""
    color, label = APP_LABELS[result.status]
    text = f"[{color}]{label}[/{color}]"
    if result.status == AvailabilityStatus.TAKEN:
        return link(text, result.store_url or _fallback_store_url(name, store))
    return text


def order_domains(domains: tuple[DomainCheckResult, ...]) -> list[DomainCheckResult]:
    """.com first, then available domains, then a few taken ones."""
    primary = next((d for d in domains if d.domain.endswith(PRIMARY_TLD)), None)
    others = [d for d in domains if not d.domain.endswith(PRIMARY_TLD)]
    available = [d for d in others if d.available][:MAX_AVAILABLE_CELLS]
    taken = [d for d in others if not d.available][:MAX_TAKEN_CELLS]
    ordered = ([primary] if primary else []) + available + taken
    return ordered[:MAX_DOMAIN_CELLS]


def format_domains_cell(domains: tuple[DomainCheckResult, ...]) -> str:
    cells = []
    for d in order_domains(domains):
        icon = "[green]✓[/green]" if d.available else "[red]✗[/red]"
        cells.append(f"{escape(d.tld)}{icon}")
    return " ".join(cells)


def build_results_table(results: list[NameCheckResult]) -> Table:
    """One row per name, in the order given."""
    table = Table(show_header=True, header_style="bold", show_lines=False)
    table.add_column("Name", style="bold cyan", min_width=12)
    table.add_column("Trademark", min_width=11)
    table.add_column("iOS App", min_width=12)
    table.add_column("Google Play", min_width=12)
    table.add_column("Domains")

    for result in results:
        table.add_row(
            escape(result.name),
            format_trademark_cell(result.trademark.status, result.name),
            format_app_cell(result.ios_app_store, result.name, "ios"),
            format_app_cell(result.google_play_store, result.name, "play"),
            format_domains_cell(result.domains),
        )
    return table


def display_results(results: list[NameCheckResult], out: Optional[Console] = None) -> None:
    out = out or console
    out.print()
    out.print(build_results_table(results))
    out.print()


class LiveResults:
    """Results table that grows as each name finishes checking."""

    def __init__(self, live: Live):
        self._live = live
        self.results: list[NameCheckResult] = []

    def add(self, result: NameCheckResult) -> None:
        self.results.append(result)
        self._live.update(build_results_table(self.results), refresh=True)


@contextmanager
def live_results(out: Optional[Console] = None) -> Iterator[LiveResults]:
    """Context manager yielding a LiveResults bound to a rich Live display."""
    with Live(build_results_table([]), console=out or console, auto_refresh=False) as live:
        yield LiveResults(live)


def display_single_result(result: NameCheckResult, out: Optional[Console] = None) -> None:
    """Detailed view of one name, every domain listed."""
    out = out or console
    name = escape(result.name)
    out.print(f"\n[bold]Results for \"[cyan]{name}[/cyan]\":[/bold]\n")

    tm = result.trademark
    color, _ = TRADEMARK_LABELS[tm.status]
    tm_text = f"[{color}]{tm.status.symbol}[/{color}] {tm.status.value}"
    if tm.details:
        tm_text += f" [dim]({escape(tm.details)})[/dim]"
    out.print(f"   Trademark:    {link(tm_text, trademark_search_url(result.name))}")

    for label, store_result, store in (
        ("iOS App:     ", result.ios_app_store, "ios"),
        ("Google Play: ", result.google_play_store, "play"),
    ):
        text = f"{APP_ICONS[store_result.status]} {store_result.status.value}"
        if store_result.existing_app:
            text += f" [dim]({escape(store_result.existing_app)})[/dim]"
        url = store_result.store_url
        if not url and store_result.status == AvailabilityStatus.TAKEN:
            url = _fallback_store_url(result.name, store)
        out.print(f"   {label} {link(text, url)}")

    out.print("   Domains:")
    for d in result.domains:
        if d.available:
            out.print(f"      [green]✓[/green] {escape(d.domain)} - available")
        else:
            out.print(f"      [red]✗[/red] {escape(d.domain)} - taken")

    verdict = assess(result)
    style = {"Excellent candidate!": "bold green", "Good potential": "yellow"}.get(verdict, "red")
    out.print(f"\n   Overall: [{style}]{verdict}[/{style}] [dim](score {score_result(result)})[/dim]\n")


def display_summary(results: list[NameCheckResult], out: Optional[Console] = None) -> None:
    """Best candidate and the fully available names."""
    out = out or console
    out.print("\n[bold]Summary:[/bold]\n")

    best = best_candidate(results)
    if best is not None:
        out.print(f"   [green]Best candidate: [bold]{escape(best.name)}[/bold][/green]")
        if best.available_domains:
            out.print(f"   [dim]Available domains: {escape(', '.join(best.available_domains))}[/dim]")

    complete = fully_available(results)
    if complete:
        names = escape(", ".join(r.name for r in complete))
        out.print(f"\n   [bold green]Fully available (including .com): {names}[/bold green]")
    out.print()


def display_error(message: str, out: Optional[Console] = None) -> None:
    (out or console).print(f"\n[red]Error: {escape(message)}[/red]\n")


def display_info(message: str, out: Optional[Console] = None) -> None:
    (out or console).print(f"[blue]ℹ {escape(message)}[/blue]")
