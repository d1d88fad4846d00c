import json
from functools import wraps
from typing import Any, Callable

import click

from .._sharepoint import SharePoint
from ..models import (
    BaseUrlMissingError,
    EnrichedException,
    SecretMissingError,
    SubstitutionError,
)


def get_client(ctx: click.Context) -> SharePoint:
    """Create the SharePoint client from the root command's options."""
    obj = ctx.find_root().obj or {}
    return SharePoint(
        base_url=obj.get("url"),
        secret=obj.get("token"),
        debug=obj.get("debug", False),
    )


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def echo_json(value: Any) -> None:
    click.echo(json.dumps(_to_jsonable(value), indent=2, default=str))


def service_command(f: Callable[..., Any]) -> Callable[..., Any]:
    """Pass the client to the command and turn SDK errors into CLI errors."""

    @click.pass_context
    @wraps(f)
    def wrapper(ctx: click.Context, *args: Any, **kwargs: Any) -> Any:
        try:
            client = get_client(ctx)
            return f(client, *args, **kwargs)
        except (BaseUrlMissingError, SecretMissingError) as e:
            raise click.UsageError(e.message) from e
        except (EnrichedException, SubstitutionError) as e:
            raise click.ClickException(str(e)) from e

    return wrapper
