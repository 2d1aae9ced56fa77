import logging
from datetime import date

import typer

from pythra_forms import DatePicker, Framework, ModelBinding, TextInput
from pythra_forms.calendar_grid import MONTHS, WEEKDAYS, classify_cells, month_dates
from pythra_forms.config import Config
from pythra_forms.dateformat import DateFormatError, parse_date, try_parse_date

logger = logging.getLogger(__name__)

# Create the main Typer application object
app = typer.Typer(
    name="pythra-forms",
    help="Inspect Pythra Forms widgets from the command line.",
    add_completion=False
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
):
    """
    Pythra Forms command line tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _default_format() -> str:
    return Config().get_nested("datepicker.format", "YYYY-MM-DD")


@app.command()
def calendar(
    year: int = typer.Argument(..., help="Four digit year."),
    month: int = typer.Argument(..., min=1, max=12, help="Month, 1-12."),
    hide_offset: bool = typer.Option(False, "--hide-offset", help="Blank the days of neighbouring months."),
    selected: str = typer.Option(None, "--selected", help="Date to mark with [ ], in the configured format."),
):
    """
    Prints the grid a date picker shows for MONTH of YEAR.
    """
    chosen = try_parse_date(selected, _default_format()) if selected else None
    grid = classify_cells(month_dates(year, month - 1), today=date.today(), selected=chosen, hideOffset=hide_offset)

    typer.echo(f"{MONTHS[month - 1]} {year}".center(7 * 5))
    typer.echo("".join(day.rjust(5) for day in WEEKDAYS))
    for week in grid:
        cells = []
        for cell in week:
            if cell.hidden:
                text = ""
            elif cell.selected:
                text = f"[{cell.date.day}]"
            elif cell.today:
                text = f"*{cell.date.day}"
            elif cell.offset:
                text = f"({cell.date.day})"
            else:
                text = str(cell.date.day)
            cells.append(text.rjust(5))
        typer.echo("".join(cells).rstrip())


@app.command()
def render(
    value: str = typer.Option("", "--value", help="Initial model value."),
    format: str = typer.Option(None, "--format", help="Date pattern; defaults to the configured one."),
    disable_past: bool = typer.Option(False, "--disable-past", help="Disable days before today."),
    hide_offset: bool = typer.Option(False, "--hide-offset", help="Blank the days of neighbouring months."),
    open_popup: bool = typer.Option(False, "--open", help="Click the input first so the calendar is shown."),
    stylesheet: bool = typer.Option(False, "--css", help="Print the collected stylesheet before the HTML."),
):
    """
    Renders a DatePicker and prints its HTML.
    """
    model = ModelBinding(value)
    framework = Framework()
    framework.set_root(DatePicker(
        model=model,
        format=format,
        disablePast=disable_past,
        hideOffset=hide_offset,
        name="date",
    ))

    if open_popup:
        inputs = framework.find(TextInput)
        if not inputs:
            typer.echo("❌ Error: the date picker rendered no input.", err=True)
            raise typer.Exit(code=1)
        framework.dispatch(inputs[0], "click")

    logger.debug("Rendered after %d redraws, model=%r", framework.redraw_count, model)
    if stylesheet:
        typer.echo(f"<style>\n{framework.stylesheet()}\n</style>")
    typer.echo(framework.render_html())


@app.command()
def parse(
    value: str = typer.Argument(..., help="The text to parse."),
    format: str = typer.Option(None, "--format", help="Date pattern; defaults to the configured one."),
):
    """
    Parses VALUE with a date pattern and prints it as an ISO date.
    """
    pattern = format or _default_format()
    try:
        parsed = parse_date(value, pattern)
    except DateFormatError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(parsed.isoformat())


if __name__ == "__main__":
    app()
