from __future__ import annotations

from typing import Iterator

import typer

from app.schemas import WeatherSnapshot


def iter_error_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` followed by every exception it was raised from."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def describe_error(exc: BaseException) -> str:
    text = str(exc).strip()
    name = exc.__class__.__name__
    return f"{name}: {text}" if text else name


def render_error_chain(exc: BaseException) -> None:
    chain = list(iter_error_chain(exc))
    typer.secho(f"Error: {describe_error(chain[0])}", fg=typer.colors.RED, err=True)
    for cause in chain[1:]:
        typer.echo(f"  Caused by: {describe_error(cause)}", err=True)


def render_snapshot(snapshot: WeatherSnapshot) -> None:
    typer.echo(snapshot.to_json())
