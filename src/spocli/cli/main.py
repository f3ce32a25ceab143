"""spocli CLI - main entry point."""

import click
from rich.table import Table

from .ui import configure_logging, console, print_error, print_info, print_success, print_warning
from ..auth.config import Config, CONFIG_FILE
from ..auth.credentials import CredentialService, resource_from_url
from ..commands.base import CommandContext
from ..commands.list_label_set import (
    DESCRIPTION as LIST_LABEL_SET_DESCRIPTION,
    LabelSetOperation,
    ListLabelSetOptions,
    validate as validate_list_label_set,
)
from ..errors import AuthError
from ..spo.client import SpoClient
from ..spo.urls import is_valid_sharepoint_url


@click.group()
@click.version_option(package_name="spocli")
@click.option("--debug", is_flag=True, help="Show debug logging")
def cli(debug: bool):
    """spocli - Manage SharePoint Online from the command line."""
    configure_logging(debug)


# =============================================================================
# Connection Commands
# =============================================================================


@cli.command()
@click.argument("url")
def login(url: str):
    """Log in to SharePoint Online.

    URL is the address of any site in the tenant. You will be asked to
    open a browser and enter a code.

    Examples:

        spocli login https://contoso.sharepoint.com
    """
    result = is_valid_sharepoint_url(url)
    if result is not True:
        print_error(result)
        raise SystemExit(1)

    config = Config.load()
    credentials = CredentialService(config.tenant_id, config.client_id)

    try:
        flow = credentials.start_device_flow(resource_from_url(url))
        console.print(flow["message"])
        login_result = credentials.complete_device_flow(flow)
    except AuthError as e:
        print_error(f"Authentication failed: {e}")
        raise SystemExit(1)

    try:
        config.set_refresh_token(login_result.refresh_token)
    except Exception as e:
        print_warning(f"Could not save to keyring: {e}")
        console.print("Set environment variable instead:")
        console.print("  export SPOCLI_REFRESH_TOKEN=<refresh token>")
        raise SystemExit(1)

    config.site_url = url
    config.user_name = login_result.user_name
    config.save()

    if login_result.user_name:
        print_success(f"Logged in to {url} as {login_result.user_name}")
    else:
        print_success(f"Logged in to {url}")


@cli.command()
def logout():
    """Log out from SharePoint Online.

    Removes the stored refresh token.

    Examples:

        spocli logout
    """
    config = Config.load()
    config.delete_refresh_token()
    config.site_url = None
    config.user_name = None
    config.save()

    print_success("Logged out.")


@cli.command()
def status():
    """Show SharePoint Online connection status.

    Examples:

        spocli status
    """
    config = Config.load()

    if not config.is_logged_in:
        console.print("Logged out from SharePoint Online")
        return

    console.print(f"Connected to {config.site_url}")
    if config.user_name:
        console.print(f"  User: {config.user_name}")


# =============================================================================
# Configuration Commands
# =============================================================================


@cli.group()
def config():
    """Manage spocli configuration."""
    pass


@config.command("show")
def config_show():
    """Show current configuration.

    Examples:

        spocli config show
    """
    config = Config.load()

    table = Table(title="spocli Configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Tenant ID", config.tenant_id)
    table.add_row("Client ID", config.client_id)
    table.add_row("Site URL", config.site_url or "[dim](not set)[/dim]")
    table.add_row("User", config.user_name or "[dim](not set)[/dim]")
    table.add_row(
        "Refresh token",
        "[green]✓ stored[/green]" if config.get_refresh_token() else "[dim](not set)[/dim]",
    )

    console.print(table)
    console.print(f"\n[dim]Config file: {CONFIG_FILE}[/dim]")


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value.

    Keys:

        tenant_id       Azure AD tenant ID or domain (default: common)

        client_id       Azure AD application ID used to sign in

    Examples:

        spocli config set tenant_id contoso.onmicrosoft.com

        spocli config set client_id def456-...
    """
    config = Config.load()

    if key == "tenant_id":
        config.tenant_id = value
        config.save()
        print_success("Tenant ID set.")

    elif key == "client_id":
        config.client_id = value
        config.save()
        print_success("Client ID set.")

    else:
        print_error(f"Unknown key: {key}")
        console.print("\nValid keys: tenant_id, client_id")
        raise SystemExit(1)

    print_info("Run spocli login again for the change to take effect.")


# =============================================================================
# SharePoint Online Commands
# =============================================================================


@cli.group()
def spo():
    """SharePoint Online commands."""
    pass


@spo.group("list")
def spo_list():
    """Manage lists."""
    pass


@spo_list.group("label")
def spo_list_label():
    """Manage list classification labels."""
    pass


@spo_list_label.command("set", short_help=LIST_LABEL_SET_DESCRIPTION)
@click.option("-u", "--webUrl", "web_url", help="The URL of the site where the list is located")
@click.option("--label", "label", help="The label to set on the list")
@click.option(
    "-t",
    "--listTitle",
    "list_title",
    help="The title of the list on which to set the label. "
    "Specify only one of listTitle, listId or listUrl",
)
@click.option(
    "-l",
    "--listId",
    "list_id",
    help="The ID of the list on which to set the label. "
    "Specify only one of listTitle, listId or listUrl",
)
@click.option(
    "--listUrl",
    "list_url",
    help="Server- or web-relative URL of the list on which to set the label. "
    "Specify only one of listTitle, listId or listUrl",
)
@click.option("--syncToItems", "sync_to_items", is_flag=True, help="Set the label on all items in the list")
@click.option("--blockDelete", "block_delete", is_flag=True, help="Disallow deleting items in the list")
@click.option("--blockEdit", "block_edit", is_flag=True, help="Disallow editing items in the list")
@click.option("--verbose", is_flag=True, help="Runs command with verbose logging")
@click.option("--debug", is_flag=True, help="Runs command with debug logging")
def spo_list_label_set(
    web_url: str,
    label: str,
    list_title: str,
    list_id: str,
    list_url: str,
    sync_to_items: bool,
    block_delete: bool,
    block_edit: bool,
    verbose: bool,
    debug: bool,
):
    """Sets classification label on the specified list

    Before using this command, log in to SharePoint Online with
    spocli login.

    Examples:

    Set classification label "Confidential" for list Shared Documents
    located in site https://contoso.sharepoint.com/sites/project-x

        spocli spo list label set --webUrl https://contoso.sharepoint.com/sites/project-x
        --listUrl 'Shared Documents' --label 'Confidential'

    Set classification label "Confidential" and disable editing and deleting
    items on the list and all existing items for list Documents
    located in site https://contoso.sharepoint.com/sites/project-x

        spocli spo list label set --webUrl https://contoso.sharepoint.com/sites/project-x
        --listTitle 'Documents' --label 'Confidential' --blockEdit --blockDelete --syncToItems
    """
    options = ListLabelSetOptions(
        web_url=web_url,
        label=label,
        list_id=list_id,
        list_title=list_title,
        list_url=list_url,
        sync_to_items=sync_to_items,
        block_delete=block_delete,
        block_edit=block_edit,
    )

    error = validate_list_label_set(options)
    if error:
        raise click.UsageError(error)

    if debug:
        configure_logging(debug=True)

    config = Config.load()

    with SpoClient() as client:
        context = CommandContext(
            refresh_token=config.get_refresh_token(),
            credentials=CredentialService(config.tenant_id, config.client_id),
            client=client,
            verbose=verbose,
            debug=debug,
            log=console.print,
        )
        result = LabelSetOperation(options, context).execute()

    if not result.success:
        print_error(result.error)
        raise SystemExit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
