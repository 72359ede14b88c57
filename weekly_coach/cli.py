"""Command-line interface for the Weekly Coach tool."""

import json
import logging
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from sqlalchemy.exc import SQLAlchemyError

from .config import config
from .db import Database
from .checkins import CheckInService, CheckInError, iso_week
from .analysis.recommendations import InvalidInputError, RecommendationInput, evaluate
from .analysis.signals import get_weekly_recommendation

console = Console()

PRIORITY_COLORS = {
    "high": "red",
    "medium": "yellow",
    "low": "green",
}

TYPE_ICONS = {
    "nutrition": "🍽️ ",
    "training": "🏋️ ",
    "none": "✅",
}


def _escape(text: str) -> str:
    return str(text).replace("[", r"\[")


def _open_db(ctx: click.Context) -> Database:
    """Database for the current invocation, created on first use."""
    db = ctx.obj.get("db")
    if db is None:
        db = Database(ctx.obj["database_url"])
        db.create_tables()
        ctx.obj["db"] = db
    return db


def show_recommendation(recommendation, as_json: bool = False):
    """Render a recommendation as a rich panel or JSON."""
    data = recommendation.to_dict()
    if as_json:
        click.echo(json.dumps(data, ensure_ascii=False))
        return

    color = PRIORITY_COLORS.get(data["priority"], "black")
    rec_text = f"""
[bold {color}]{TYPE_ICONS.get(data['type'], '')} {data['action']}[/bold {color}]

[bold]Do this:[/bold] {_escape(data['message'])}
[bold]Why:[/bold] {_escape(data['reason'])}
[bold]Priority:[/bold] {data['priority']}
"""
    console.print(Panel(rec_text.strip(), title="💡 Weekly Recommendation", border_style=color))


@click.group()
@click.option("--database-url", default=None, help="Database URL (defaults to DATABASE_URL)")
@click.pass_context
def cli(ctx, database_url):
    """Weekly Coach: adaptive nutrition and training recommendations."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url or config.DATABASE_URL


@cli.command("init-db")
@click.pass_context
def init_db(ctx):
    """Create database tables."""
    _open_db(ctx)
    console.print("[green]✅ Database ready[/green]")


@cli.command()
@click.option("--user-id", default=None, help="User ID (defaults to DEFAULT_USER_ID)")
@click.option("--weight", "weights", type=float, multiple=True, required=True,
              help="Weigh-in in kg (repeat up to 3 times)")
@click.option("--adherence", type=click.IntRange(0, 100), required=True, help="Diet adherence in percent")
@click.option("--rpe", type=click.FloatRange(0, 10), required=True, help="Average RPE of the week (0-10)")
@click.option("--pain", is_flag=True, help="Pain felt during the week")
@click.option("--energy", type=click.Choice(["low", "normal", "high"]), default="normal", show_default=True)
@click.option("--note", default=None, help="Anything that got in the way this week")
@click.pass_context
def checkin(ctx, user_id, weights, adherence, rpe, pain, energy, note):
    """Record this week's check-in."""
    console.print(Panel.fit(f"📝 Weekly Check-in ({iso_week()})", style="bold blue"))

    service = CheckInService(db=_open_db(ctx), user_id=user_id)
    try:
        checkin_id = service.record_checkin(
            weights=list(weights),
            adherence=adherence,
            rpe=rpe,
            has_pain=pain,
            energy=energy,
            blockers=note,
        )
    except CheckInError as e:
        console.print(f"[red]❌ {_escape(e)}[/red]")
        return

    average = sum(weights) / len(weights)
    console.print(f"[green]✅ Check-in #{checkin_id} saved (average weight {average:.1f} kg)[/green]")


@cli.command()
@click.option("--user-id", default=None, help="User ID (defaults to DEFAULT_USER_ID)")
@click.option("--date", "session_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Session date (YYYY-MM-DD), defaults to today")
@click.option("--skipped", is_flag=True, help="Record the session as not completed")
@click.pass_context
def session(ctx, user_id, session_date, skipped):
    """Record a training session."""
    service = CheckInService(db=_open_db(ctx), user_id=user_id)
    session_id = service.record_session(session_date=session_date, completed=not skipped)
    state = "skipped" if skipped else "completed"
    console.print(f"[green]✅ Session #{session_id} recorded as {state}[/green]")


@cli.command()
@click.option("--user-id", default=None, help="User ID (defaults to DEFAULT_USER_ID)")
@click.option("--language", type=click.Choice(list(config.SUPPORTED_LANGUAGES)), default=None,
              help="Message language (defaults to COACH_LANGUAGE)")
@click.option("--save", is_flag=True, help="Record the adjustment in the journal")
@click.option("--json", "as_json", is_flag=True, help="Print the recommendation as JSON")
@click.pass_context
def recommend(ctx, user_id, language, save, as_json):
    """Get this week's recommendation."""
    if not as_json:
        console.print(Panel.fit("🎯 Weekly Recommendation", style="bold blue"))

    try:
        db = _open_db(ctx)
        recommendation = get_weekly_recommendation(user_id=user_id, db=db, language=language)
    except (SQLAlchemyError, InvalidInputError) as e:
        console.print(f"[red]❌ Unable to load recommendation: {_escape(e)}[/red]")
        return

    if recommendation is None:
        if as_json:
            click.echo("null")
        else:
            console.print("[yellow]No check-in yet. Complete your first weekly check-in to get a recommendation.[/yellow]")
        return

    show_recommendation(recommendation, as_json=as_json)

    if save:
        entry_id = CheckInService(db=db, user_id=user_id).log_adjustment(recommendation)
        if entry_id and not as_json:
            console.print(f"[green]✅ Saved to journal (#{entry_id})[/green]")


@cli.command("evaluate")
@click.option("--current-weight", type=float, required=True, help="Current average weight (kg)")
@click.option("--previous-weight", type=float, default=None, help="Previous average weight (kg)")
@click.option("--adherence", type=int, required=True, help="Diet adherence in percent")
@click.option("--rpe", type=float, required=True, help="Average RPE (0-10)")
@click.option("--pain", is_flag=True, help="Pain reported")
@click.option("--energy", default="normal", show_default=True, help="Energy level (low, normal, high)")
@click.option("--sessions", type=int, default=0, show_default=True, help="Sessions completed this week")
@click.option("--language", type=click.Choice(list(config.SUPPORTED_LANGUAGES)), default=None)
@click.option("--json", "as_json", is_flag=True, help="Print the recommendation as JSON")
def evaluate_command(current_weight, previous_weight, adherence, rpe, pain, energy, sessions, language, as_json):
    """Evaluate a recommendation from explicit values, without the database."""
    try:
        params = RecommendationInput(
            current_weight=current_weight,
            previous_weight=previous_weight,
            adherence=adherence,
            rpe=rpe,
            has_pain=pain,
            energy=energy,
            sessions_completed=sessions,
        )
    except InvalidInputError as e:
        console.print(f"[red]❌ Invalid input: {_escape(e)}[/red]")
        raise SystemExit(2)

    show_recommendation(evaluate(params, language=language), as_json=as_json)


@cli.command()
@click.option("--user-id", default=None, help="User ID (defaults to DEFAULT_USER_ID)")
@click.option("--limit", default=config.JOURNAL_LIMIT, show_default=True, help="Number of entries")
@click.pass_context
def journal(ctx, user_id, limit):
    """Show the adjustments journal."""
    console.print(Panel.fit("📒 Adjustments", style="bold blue"))

    entries = CheckInService(db=_open_db(ctx), user_id=user_id).get_adjustments(limit=limit)
    if not entries:
        console.print("[black]No adjustments yet[/black]")
        return

    table = Table(box=box.ROUNDED)
    table.add_column("Date", width=10)
    table.add_column("Type", style="blue")
    table.add_column("Change", style="magenta")
    table.add_column("Reason")

    for entry in entries:
        change = f"{entry['old_value']} → {entry['new_value']}" if entry["old_value"] else entry["new_value"]
        table.add_row(
            entry["created_at"].strftime("%Y-%m-%d"),
            entry["type"],
            change,
            _escape(entry["reason"] or ""),
        )

    console.print(table)


@cli.command()
@click.option("--user-id", default=None, help="User ID (defaults to DEFAULT_USER_ID)")
@click.pass_context
def status(ctx, user_id):
    """Show this week's check-in status."""
    console.print(Panel.fit(f"ℹ️  Week {iso_week()}", style="bold blue"))

    service = CheckInService(db=_open_db(ctx), user_id=user_id)
    now = datetime.utcnow()

    if service.has_checkin_this_week(now):
        console.print("[green]✅ Check-in done this week[/green]")
    else:
        console.print("[yellow]⚠️  No check-in yet this week[/yellow]")

    delta = service.weight_delta(now)
    if delta is not None:
        console.print(f"  • Weight change vs last week: {delta:+.1f} kg")


def main():
    """Main entry point."""
    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]❌ Configuration Error: {_escape(e)}[/red]")
        return

    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
    except Exception as e:
        console.print(f"[red]❌ Unexpected error: {_escape(e)}[/red]")


if __name__ == "__main__":
    main()
