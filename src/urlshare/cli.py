"""Command line front end: urlshare URL --param key=value [--hash]"""

from __future__ import annotations

import logging

import typer

from urlshare.errors import InvalidParameterError, UrlShareError
from urlshare.params import ABSENT, ParameterValue
from urlshare.share import ShareRequest

logger = logging.getLogger(__name__)

app = typer.Typer(help="urlshare - rewrite the query or fragment parameters of a URL before sharing it")


def parse_parameter_arguments(arguments: list[str]) -> dict[str, ParameterValue]:
    """Turns KEY=VALUE / KEY arguments into new parameters. Text is taken literally, not percent-decoded."""
    parameters: dict[str, ParameterValue] = {}
    for argument in arguments:
        key, assignment, value = argument.partition("=")
        if key == "":
            raise InvalidParameterError(f"parameter argument {argument!r} has an empty key")
        parameters[key] = value if assignment else ABSENT
    return parameters


@app.command()
def update(
    url: str = typer.Argument(..., help="Absolute URL to update"),
    params: list[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Parameter to write, as KEY=VALUE, or KEY for a parameter without a value",
    ),
    hash_component: bool = typer.Option(
        False,
        "--hash",
        help="Write the parameters into the fragment instead of the query",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Print URL with the given parameters written into it."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        new_parameters = parse_parameter_arguments(params)
    except InvalidParameterError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2)

    request = ShareRequest(
        url_to_update=url,
        new_parameters=new_parameters,
        should_apply_new_parameters_to_hash_component=hash_component,
    )

    try:
        updated_url = request.apply()
    except UrlShareError as exc:
        logger.debug("rejected %r: %s", url, exc.code)
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)

    typer.echo(updated_url)


def main() -> None:
    app()
