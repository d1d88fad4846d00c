"""Profile and tag commands.

Login names are SharePoint claims, e.g. ``i:0#.f|membership|alice@contoso.com``.
"""

import click

from .._sharepoint import SharePoint
from ._utils import echo_json, service_command


@click.group()
def profile():
    r"""Read user profiles.

    \b
    Examples:
        sprest profile property "i:0#.f|membership|bob@contoso.com" Title
        sprest profile properties "i:0#.f|membership|bob@contoso.com"
        sprest profile following "i:0#.f|membership|alice@contoso.com"
    """
    pass


@profile.command(name="property")
@click.argument("login_name")
@click.argument("property_name")
@service_command
def profile_property(client: SharePoint, login_name: str, property_name: str):
    """Print PROPERTY_NAME of the user LOGIN_NAME."""
    echo_json(client.profiles.get_user_profile_property_for(login_name, property_name))


@profile.command(name="properties")
@click.argument("login_name")
@service_command
def profile_properties(client: SharePoint, login_name: str):
    """Print all profile properties of the user LOGIN_NAME."""
    echo_json(client.profiles.get_properties_for(login_name))


@profile.command(name="following")
@click.argument("login_name")
@service_command
def profile_following(client: SharePoint, login_name: str):
    """Print whether the current user follows LOGIN_NAME."""
    echo_json(client.profiles.am_i_following(login_name))


@click.group()
def tags():
    """Read hash tags."""
    pass


@tags.command(name="trending")
@service_command
def tags_trending(client: SharePoint):
    """Print the most popular tags of the past week."""
    echo_json(client.profiles.trending_tags())


@tags.command(name="followed")
@click.option(
    "--max",
    "max_count",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Maximum number of tags to return",
)
@service_command
def tags_followed(client: SharePoint, max_count: int):
    """Print the tags the current user follows."""
    echo_json(client.profiles.get_followed_tags(max_count))
