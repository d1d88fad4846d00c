import click

from .._utils import sdk_version
from .cli_people import people
from .cli_profiles import profile, tags


@click.group()
@click.version_option(sdk_version(), prog_name="sprest")
@click.option("--url", envvar="SPREST_URL", help="Site URL")
@click.option("--token", envvar="SPREST_ACCESS_TOKEN", help="Bearer access token")
@click.option("--debug", is_flag=True, help="Log requests to stderr")
@click.pass_context
def cli(ctx: click.Context, url: str, token: str, debug: bool) -> None:
    """Query a SharePoint site's REST API."""
    ctx.obj = {"url": url, "token": token, "debug": debug}


cli.add_command(profile)
cli.add_command(tags)
cli.add_command(people)

__all__ = ["cli"]
