"""Build parameter collection.

CI servers export build parameters as environment variables; explicit
``--param NAME=VALUE`` options are appended after them so they win.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping

import click

from rbstatus_core.client import StatusUpdateClient
from rbstatus_core.review_request import RECOGNIZED_PARAMETERS


def parse_param_option(ctx, param, values: Iterable[str]) -> list[tuple[str, str]]:
    """click callback turning ``NAME=VALUE`` strings into pairs."""
    pairs = []
    for value in values:
        name, sep, rest = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {value!r}")
        pairs.append((name.strip(), rest))
    return pairs


def collect_parameters(
    explicit: Iterable[tuple[str, str]] = (),
    environ: Mapping[str, str] | None = None,
) -> list[tuple[str, str]]:
    environ = os.environ if environ is None else environ
    parameters = [(name, environ[name]) for name in RECOGNIZED_PARAMETERS if name in environ]
    parameters.extend(explicit)
    return parameters


def param_option(f):
    return click.option(
        "--param",
        "params",
        multiple=True,
        callback=parse_param_option,
        metavar="NAME=VALUE",
        help="Build parameter, e.g. REVIEWBOARD_REVIEW_ID=42. Overrides the environment.",
    )(f)


def make_client(ctx: click.Context) -> StatusUpdateClient:
    return StatusUpdateClient(
        registry=ctx.obj["registry"],
        credentials=ctx.obj["credentials"],
        timeout=ctx.obj["config"].get("timeout"),
    )
