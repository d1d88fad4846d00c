import click

from .._sharepoint import SharePoint
from ..models import ClientPeoplePickerQueryParameters, PrincipalType
from ._utils import echo_json, service_command

_PRINCIPAL_TYPES = {
    "user": PrincipalType.USER,
    "group": PrincipalType.SECURITY_GROUP | PrincipalType.SHAREPOINT_GROUP,
    "all": PrincipalType.ALL,
}


@click.group()
def people():
    """Search users and groups with the people picker."""
    pass


@people.command(name="search")
@click.argument("query")
@click.option(
    "--max",
    "max_results",
    type=click.IntRange(min=1, max=100),
    default=10,
    show_default=True,
    help="Maximum number of suggestions",
)
@click.option(
    "--type",
    "principal_type",
    type=click.Choice(sorted(_PRINCIPAL_TYPES)),
    default="user",
    show_default=True,
)
@service_command
def people_search(
    client: SharePoint, query: str, max_results: int, principal_type: str
):
    """Search for users or groups matching QUERY."""
    params = ClientPeoplePickerQueryParameters(
        query_string=query,
        maximum_entity_suggestions=max_results,
        principal_type=_PRINCIPAL_TYPES[principal_type],
        allow_email_addresses=True,
    )
    echo_json(client.profiles.client_people_picker_search_user(params))


@people.command(name="resolve")
@click.argument("query")
@service_command
def people_resolve(client: SharePoint, query: str):
    """Resolve QUERY to a single user or group."""
    params = ClientPeoplePickerQueryParameters(
        query_string=query,
        maximum_entity_suggestions=1,
        allow_email_addresses=True,
    )
    echo_json(client.profiles.client_people_picker_resolve_user(params))
