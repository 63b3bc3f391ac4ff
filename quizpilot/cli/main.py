"""
QuizPilot CLI - inspect pages and solve quizzes from the command line.

SOURCE arguments accept either a URL (opened in Chrome) or the path of a
saved HTML file (parsed offline, no browser needed).
"""

import json
import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from quizpilot.core.agent import READINESS_POLICIES, AgentConfig, PageAgent
from quizpilot.layers.sense import HtmlDocument

console = Console()


def agent_options(func):
    """Options shared by every command that opens a page."""
    options = [
        click.option('--headless/--headed', default=False, help='Run browser in headless mode'),
        click.option('--settle-delay', default=1.5, type=float, show_default=True,
                     help='Seconds to wait after answering each question'),
        click.option('--readiness', default='fixed', type=click.Choice(READINESS_POLICIES),
                     help='How to wait between questions: fixed delay or until the question set changes'),
        click.option('--report-dir', default=None, help='Write flight_record.json under this directory'),
        click.option('--timeout', default=30, type=int, help='Page load timeout in seconds'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(headless, settle_delay, readiness, report_dir, timeout, **overrides) -> AgentConfig:
    return AgentConfig(
        headless=headless,
        settle_delay=settle_delay,
        readiness=readiness,
        report_dir=report_dir,
        timeout=timeout,
        **overrides,
    )


def _open_agent(source: str, config: AgentConfig) -> PageAgent:
    if os.path.isfile(source):
        return PageAgent(HtmlDocument.from_file(source), config=config)
    return PageAgent.launch(source, config=config)


def _report_footer(agent: PageAgent) -> None:
    if agent.report_path:
        console.print(f"[dim]Flight record: {agent.report_path}[/dim]")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def cli(verbose):
    """QuizPilot - DOM mining and quiz answering for arbitrary web pages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@cli.command()
@click.argument('source')
@agent_options
def snapshot(source, **options):
    """
    Print the accessibility snapshot of a page.

    \b
    Examples:

        quizpilot snapshot https://example.com/quiz --headless

        quizpilot snapshot ./saved_quiz.html
    """
    config = _build_config(**options)
    with _open_agent(source, config) as agent:
        tree = agent.handle({"action": "getAccessibilityTree"})
        if isinstance(tree, dict) and "error" in tree:
            console.print(f"[red]Error: {tree['error']}[/red]")
            sys.exit(1)

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Role", style="green")
        table.add_column("Label", max_width=40)
        table.add_column("Selector", style="yellow", max_width=50)
        table.add_column("Type", style="dim")
        table.add_column("Visible", justify="center")

        for item in tree:
            table.add_row(
                item["role"],
                item["label"],
                item["selector"],
                item["inputType"] or "",
                "[green]yes[/green]" if item["visible"] else "[dim]no[/dim]",
            )

        console.print(table)
        console.print(f"[dim]{len(tree)} elements[/dim]")
    _report_footer(agent)


@cli.command()
@click.argument('source')
@click.option('--html-limit', default=10000, type=int, help='Maximum characters of body HTML')
@agent_options
def read(source, html_limit, **options):
    """Dump the page as JSON (url, title, text, html, accessibilityTree)."""
    config = _build_config(html_limit=html_limit, **options)
    with _open_agent(source, config) as agent:
        console.print_json(data=agent.handle({"action": "readPage"}))
    _report_footer(agent)


@cli.command()
@click.argument('source')
@agent_options
def analyze(source, **options):
    """Show the questions and options QuizPilot finds on a page."""
    config = _build_config(**options)
    with _open_agent(source, config) as agent:
        response = agent.handle({"action": "analyzeQuiz"})
        quiz_data = response.get("quizData", [])

        if not quiz_data:
            console.print("[yellow]No questions found on page[/yellow]")
        for i, item in enumerate(quiz_data, 1):
            options_text = "\n".join(f"  {n}. {o}" for n, o in enumerate(item["options"], 1))
            console.print(Panel(
                f"{item['question']}\n\n{options_text or '[dim](no options found)[/dim]'}",
                title=f"Q{i}",
                border_style="cyan",
            ))
    _report_footer(agent)


@cli.command()
@click.argument('source')
@click.option('--answer', '-a', 'answers', multiple=True, required=True,
              help='Answer for the next question (repeat in question order)')
@click.option('--no-submit', is_flag=True, help='Do not click the submit button afterwards')
@agent_options
def solve(source, answers, no_submit, **options):
    """
    Solve a quiz with answers you supply.

    \b
    Example:

        quizpilot solve https://example.com/quiz -a Paris -a 4 -a "Blue whale"
    """
    config = _build_config(auto_submit=not no_submit, **options)
    with _open_agent(source, config) as agent:
        response = agent.handle({"action": "solveQuiz", "answers": list(answers)})
    _print_solve_result(response)
    _report_footer(agent)
    if not response.get("success"):
        sys.exit(1)


@cli.command()
@click.argument('source')
@click.option('--provider', default='auto', type=click.Choice(['auto', 'openai', 'anthropic']),
              help='Hosted model used to answer the quiz')
@click.option('--model', default=None, help='Specific model name (e.g. gpt-4o, claude-3-5-sonnet-latest)')
@click.option('--no-submit', is_flag=True, help='Do not click the submit button afterwards')
@agent_options
def auto(source, provider, model, no_submit, **options):
    """
    Extract the quiz, ask a language model for the answers, then solve it.

    Requires OPENAI_API_KEY or ANTHROPIC_API_KEY.
    """
    console.print(Panel.fit(
        "[bold blue]QuizPilot[/bold blue]\n"
        "[dim]Automatic quiz solving[/dim]",
        border_style="blue"
    ))
    console.print(f"\n[bold]Target:[/bold] {source}")
    console.print(f"[bold]Provider:[/bold] {provider.upper()}\n")

    config = _build_config(provider=provider, model=model, auto_submit=not no_submit, **options)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Solving quiz...", total=None)
        with _open_agent(source, config) as agent:
            response = agent.handle({"action": "autoSolveQuiz"})

    _print_solve_result(response)
    _report_footer(agent)
    if not response.get("success"):
        sys.exit(1)


@cli.command()
@click.argument('source')
@click.argument('action')
@click.option('--params', default='{}', help='JSON object of action parameters')
@agent_options
def send(source, action, params, **options):
    """
    Send one raw protocol message and print the response.

    \b
    Examples:

        quizpilot send ./quiz.html findByText --params '{"text": "Submit"}'

        quizpilot send https://example.com click --params '{"selector": "#start"}'
    """
    try:
        parsed = json.loads(params)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON ({e})", param_hint="--params")
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--params")

    config = _build_config(**options)
    with _open_agent(source, config) as agent:
        console.print_json(data=agent.handle({"action": action, "params": parsed}))
    _report_footer(agent)


def _print_solve_result(response):
    if response.get("success"):
        console.print(f"[bold green]Answered {response['questionsAnswered']} question(s).[/bold green]")
    else:
        console.print(f"[bold red]Solving failed: {response.get('error')}[/bold red]")


@cli.command()
def doctor():
    """
    Check dependencies and API keys.
    """
    console.print(Panel.fit(
        "[bold cyan]QuizPilot Doctor[/bold cyan]\n"
        "[dim]System Health Check[/dim]",
        border_style="cyan"
    ))
    console.print()

    dependencies = [
        ("selenium", "Live pages - WebDriver", True),
        ("lxml", "Saved pages - HTML parsing", True),
        ("cssselect", "Saved pages - CSS selectors", True),
        ("openai", "Answers - OpenAI provider", False),
        ("anthropic", "Answers - Anthropic provider", False),
    ]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Package", style="blue")
    table.add_column("Role", style="dim")
    table.add_column("Status", justify="center")

    required_ok = True
    for package, role, required in dependencies:
        try:
            __import__(package)
            status = "[green]Installed[/green]"
        except ImportError:
            status = "[red]Missing[/red]" if required else "[yellow]Missing (optional)[/yellow]"
            required_ok = required_ok and not required
        table.add_row(package, role, status)

    for key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        status = "[green]Set[/green]" if os.environ.get(key) else "[yellow]Not set[/yellow]"
        table.add_row(key, "Answers - API key", status)

    console.print(table)
    console.print()

    if required_ok:
        console.print("[bold green]Required dependencies installed. QuizPilot is ready.[/bold green]")
    else:
        console.print("[red]Required dependencies are missing.[/red]")
        console.print("[dim]Reinstall with: pip install quizpilot[/dim]")


@cli.command()
def version():
    """Show version information."""
    from quizpilot import __version__
    console.print(f"QuizPilot v{__version__}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
