"""
Command-line interface for name-maker

Generates product names with AI and checks each one against the
trademark register, both app stores and a set of domains.

    name-maker                                  # interactive
    name-maker -d "habit tracker for teams" -k habit,streak -s playful
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, Prompt

from . import __version__
from .auth import CredentialError, ensure_authenticated
from .config import config
from .display import (
    console,
    display_error,
    display_info,
    display_results,
    display_single_result,
    display_summary,
    live_results,
)
from .generator import GenerationError, NameGenerator
from .models import NameBrief, NameCheckResult, NameLength, NameStyle, ProductType, ToneStyle, parse_list
from .orchestrator import AvailabilityOrchestrator
from .providers import get_provider
from .sessions import Session, SessionStore, format_session_date

logger = logging.getLogger(__name__)

PRODUCT_TYPE_CHOICES = [
    (ProductType.APP, "Mobile App"),
    (ProductType.SAAS, "SaaS / Web Application"),
    (ProductType.WEBSITE, "Website / Platform"),
    (ProductType.PHYSICAL, "Physical Product"),
    (ProductType.SERVICE, "Service / Agency"),
    (ProductType.OTHER, "Other"),
]

TONE_CHOICES = [
    (ToneStyle.MODERN, "Modern/Tech - innovative, cutting-edge, sleek"),
    (ToneStyle.FRIENDLY, "Friendly - approachable, warm, welcoming"),
    (ToneStyle.PROFESSIONAL, "Professional - trustworthy, established, serious"),
    (ToneStyle.PLAYFUL, "Playful - fun, creative, energetic"),
    (ToneStyle.LUXURIOUS, "Luxurious - premium, exclusive, elegant"),
    (ToneStyle.BOLD, "Bold - strong, confident, powerful"),
]

NAME_STYLE_CHOICES = [
    (NameStyle.REAL_WORDS, "Real words - actual dictionary words (e.g., Slack, Apple, Square)"),
    (NameStyle.INVENTED, "Invented words - made-up but memorable (e.g., Spotify, Kodak, Xerox)"),
    (NameStyle.COMPOUND, "Compound words - two words combined (e.g., Facebook, YouTube)"),
    (NameStyle.ABSTRACT, "Abstract - evocative, non-literal (e.g., Amazon, Nike, Oracle)"),
    (NameStyle.ANY, "Any style - surprise me with variety"),
]

NAME_LENGTH_CHOICES = [
    (NameLength.SHORT, "Short (1-5 letters) - punchy and memorable"),
    (NameLength.MEDIUM, "Medium (6-8 letters) - balanced"),
    (NameLength.LONG, "Longer (9+ letters) - descriptive"),
    (NameLength.ANY, "Any length - whatever works best"),
]

MENU_CHOICES = [
    ("generate", "Generate more names"),
    ("generate-feedback", "Generate more names with feedback"),
    ("check", "Check specific names"),
    ("show", "Show all results"),
    ("best", "Show best candidates"),
    ("info", "Show session info"),
    ("exit", "Exit"),
]

MIN_DESCRIPTION_LENGTH = 10


def build_brief(description: str, keywords: Optional[str] = None, style: str = "modern") -> NameBrief:
    """Brief for a one-shot run; unknown styles fall back to modern."""
    try:
        tone = ToneStyle(style)
    except ValueError:
        tone = ToneStyle.MODERN
    return NameBrief(
        description=description,
        product_type=ProductType.OTHER,
        industry="technology",
        target_audience="general consumers",
        tone=tone,
        name_style=NameStyle.ANY,
        name_length=NameLength.ANY,
        keywords=parse_list(keywords or ""),
    )


def choose(message: str, choices: list, out: Console = console):
    """Numbered menu; returns the value of the picked entry."""
    out.print(f"\n[bold]{message}[/bold]")
    for i, (_, label) in enumerate(choices, 1):
        out.print(f"  [cyan]{i}[/cyan]. {label}")
    index = IntPrompt.ask(
        "Choose",
        choices=[str(i) for i in range(1, len(choices) + 1)],
        show_choices=False,
        console=out,
    )
    return choices[index - 1][0]


def ask_text(message: str, default: str = "", required: bool = False, min_length: int = 1) -> str:
    while True:
        value = Prompt.ask(message, default=default, console=console).strip()
        if not required or len(value) >= min_length:
            return value
        console.print(f"[yellow]Please enter at least {min_length} characters.[/yellow]")


def prompt_brief() -> NameBrief:
    """Collect a full brief interactively."""
    console.print("\n[bold]Let's learn about your product[/bold]")
    product_type = choose("What type of product is this?", PRODUCT_TYPE_CHOICES)
    description = ask_text(
        "Describe what your product does",
        required=True,
        min_length=MIN_DESCRIPTION_LENGTH,
    )
    industry = ask_text("What industry or category? (e.g., fintech, health, education)", required=True)
    audience = ask_text("Who is your target audience?", default="general consumers")

    console.print("\n[bold]Now let's define the name style[/bold]")
    tone = choose("What tone should the name convey?", TONE_CHOICES)
    name_style = choose("What type of name do you prefer?", NAME_STYLE_CHOICES)
    name_length = choose("Preferred name length?", NAME_LENGTH_CHOICES)

    console.print("\n[bold]Help guide the creative direction[/bold] [dim](comma-separated, Enter to skip)[/dim]")
    return NameBrief(
        description=description,
        product_type=product_type,
        industry=industry,
        target_audience=audience,
        tone=tone,
        name_style=name_style,
        name_length=name_length,
        keywords=parse_list(ask_text("Keywords to incorporate or draw inspiration from")),
        themes=parse_list(ask_text("Themes or concepts to evoke")),
        avoid_words=parse_list(ask_text("Words or sounds to AVOID")),
        competitors=parse_list(ask_text("Competitor names to differentiate from")),
    )


def display_session_summary(session: Session) -> None:
    brief = session.brief
    console.print("\n[bold]Session Summary:[/bold]\n")
    console.print(f"[dim]   Product: {brief.product_type.value} - {escape(brief.description[:50])}[/dim]")
    console.print(f"[dim]   Industry: {brief.industry} | Audience: {brief.target_audience}[/dim]")
    console.print(
        f"[dim]   Style: {brief.tone.value} | Type: {brief.name_style.value} | Length: {brief.name_length.value}[/dim]"
    )
    if brief.keywords:
        console.print(f"[dim]   Keywords: {', '.join(brief.keywords)}[/dim]")
    if brief.themes:
        console.print(f"[dim]   Themes: {', '.join(brief.themes)}[/dim]")
    console.print(f"[dim]   Names generated: {len(session.generated_names)}[/dim]")


class NameMakerApp:
    """
    One naming session: generation rounds, availability checks and the
    interactive menu. Every change to the session is saved immediately.
    """

    def __init__(
        self,
        generator: NameGenerator,
        orchestrator: AvailabilityOrchestrator,
        store: SessionStore,
    ):
        self.generator = generator
        self.orchestrator = orchestrator
        self.store = store

    def select_session(self) -> Optional[Session]:
        """Pick a recent session to resume; None means start a new one."""
        sessions = self.store.list_sessions()
        if not sessions:
            return None

        choices = [(None, "[green]+ Start a new session[/green]")]
        for s in sessions:
            age = format_session_date(s.updated_at)
            choices.append((s.id, f"[cyan]{escape(s.name)}[/cyan] [dim]({age} · {len(s.results)} names)[/dim]"))

        session_id = choose("What would you like to do?", choices)
        if session_id is None:
            return None

        session = self.store.load(session_id)
        if session is None:
            console.print("[yellow]Could not load session, starting new one.[/yellow]")
        return session

    async def generate_and_check(self, session: Session, feedback: Optional[str] = None) -> list[NameCheckResult]:
        """
        Run one generation round and check every new name.

        Raises:
            GenerationError: If the model call fails; the session is unchanged
        """
        previous = session.seen_names()
        with console.status("Generating creative names with AI..."):
            if feedback or previous:
                candidates = await self.generator.generate_more(session.brief, previous, feedback)
            else:
                candidates = await self.generator.generate(session.brief)
        console.print(f"[green]✓[/green] Generated {len(candidates)} name ideas")

        console.print("\n[bold]Generated Names:[/bold]\n")
        for i, candidate in enumerate(candidates, 1):
            console.print(f"   {i}. [bold cyan]{escape(candidate.name)}[/bold cyan]")
            if candidate.reasoning:
                console.print(f"      [dim]{escape(candidate.reasoning)}[/dim]")

        session.add_names([c.name for c in candidates])
        self.store.save(session)

        console.print("\n[bold]Checking availability...[/bold]")
        with live_results() as live:
            results = await self.orchestrator.check_names(
                [c.name for c in candidates],
                on_result=live.add,
            )
        console.print("[green]✓ Availability check complete[/green]")

        for result in results:
            session.add_result(result)
        self.store.save(session)
        return results

    async def check_specific_name(self, session: Session, name: str) -> None:
        """Check one name; add it to the session unless already there."""
        with console.status(f"Checking availability for \"{name}\"..."):
            [result] = await self.orchestrator.check_names([name])
        display_single_result(result)

        if not session.has_result(name):
            session.add_result(result)
            self.store.save(session)

    async def run_round(self, session: Session, feedback: Optional[str] = None) -> None:
        try:
            results = await self.generate_and_check(session, feedback)
        except GenerationError as e:
            display_error(f"Failed to generate names: {e}")
            return
        display_summary(results)

    async def interactive_loop(self, session: Session) -> None:
        while True:
            console.rule(style="dim")
            action = choose("What would you like to do?", MENU_CHOICES)

            if action == "generate":
                await self.run_round(session)

            elif action == "generate-feedback":
                feedback = ask_text(
                    "What direction should we take? (e.g., \"more playful\", \"shorter names\")",
                    required=True,
                )
                await self.run_round(session, feedback)

            elif action == "check":
                names = parse_list(ask_text("Enter name(s) to check (comma-separated)", required=True))
                for name in names:
                    await self.check_specific_name(session, name)

            elif action == "show":
                if session.results:
                    display_results(session.results)
                else:
                    console.print("[yellow]\nNo results to show yet.[/yellow]")

            elif action == "best":
                if session.results:
                    display_summary(session.results)
                else:
                    console.print("[yellow]\nNo results to analyze yet.[/yellow]")

            elif action == "info":
                display_session_summary(session)
                console.print(f"\n[dim]   Session ID: {session.id}[/dim]")
                console.print(f"[dim]   Created: {format_session_date(session.created_at)}[/dim]")
                console.print(f"[dim]   Last updated: {format_session_date(session.updated_at)}[/dim]")

            elif action == "exit":
                console.print("\n[cyan]Session saved! You can resume it later.[/cyan]")
                console.print(f"[dim]   Session: {session.name}[/dim]\n")
                return

    async def run_interactive(self) -> None:
        session = self.select_session()
        if session is not None:
            console.print(f"\n[green]✓ Resumed session: {session.name}[/green]")
            display_session_summary(session)
            if session.results:
                console.print(f"\n[bold]Previous Results ({len(session.results)} names):[/bold]")
                display_results(session.results)
                display_summary(session.results)
        else:
            session = self.store.create(prompt_brief())
            display_session_summary(session)
            await self.run_round(session)

        await self.interactive_loop(session)

    async def run_with_brief(self, brief: NameBrief) -> None:
        session = self.store.create(brief)
        await self.run_round(session)
        await self.interactive_loop(session)


async def run(args: argparse.Namespace) -> None:
    provider = get_provider("mock" if args.mock else config.models.provider)
    app = NameMakerApp(
        generator=NameGenerator(provider),
        orchestrator=AvailabilityOrchestrator(),
        store=SessionStore(),
    )
    try:
        if args.description:
            await app.run_with_brief(build_brief(args.description, args.keywords, args.style))
        else:
            await app.run_interactive()
    finally:
        await app.orchestrator.close()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="name-maker",
        description="AI-powered product name generator with availability checking",
        epilog='Example: name-maker -d "budgeting app for students" -k money,save -s friendly',
    )
    parser.add_argument("-d", "--description", help="Product description (skips the interactive brief)")
    parser.add_argument("-k", "--keywords", help="Comma-separated keywords")
    parser.add_argument(
        "-s", "--style",
        default="modern",
        help="Style: modern, friendly, professional, playful, luxurious, bold (default: modern)",
    )
    parser.add_argument("--mock", action="store_true", help="Use mock AI (for testing without API key)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console.print("\n[bold cyan]Name Maker - AI-Powered Product Name Generator[/bold cyan]")

    if not args.mock and config.models.provider != "mock":
        try:
            ensure_authenticated(
                on_ready=lambda url: display_info(f"Opening browser for authentication. If it doesn't open, visit: {url}")
            )
        except CredentialError as e:
            display_error(f"Authentication failed: {e}")
            sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted. Session saved.[/dim]")
        sys.exit(130)


if __name__ == "__main__":
    main()
