"""
Node IP commands.

Usage:
    runtimecfg node-ip show [VIP...]       # Print the chosen node IP
    runtimecfg node-ip set [VIP...]        # Write kubelet/CRI-O overrides
    runtimecfg node-ip vipable VIP [VIP...]  # Exit 0 if a VIP is on a local subnet
    runtimecfg node-ip addresses [VIP...]  # Inspect the candidates
    runtimecfg node-ip -r show [VIP...]    # Retry until an address shows up
"""

from typing import Annotated

import typer
from rich.table import Table

from runtimecfg.cli.output import console, print_error, print_warning
from runtimecfg.config import config
from runtimecfg.models.enums import CandidateSource
from runtimecfg.models.report import CandidateReport, NodeIPReport
from runtimecfg.net.addresses import NetlinkAddressResolver, valid_node_address
from runtimecfg.net.exceptions import NodeIPError
from runtimecfg.net.overrides import write_node_ip_overrides
from runtimecfg.net.selector import select_node_ip
from runtimecfg.net.vip import find_attached_interface, parse_ips
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)

app = typer.Typer(
    help="Node IP has tools that aid in the configuration of the default node IP",
    no_args_is_help=True,
)

RetryOption = Annotated[
    bool,
    typer.Option(
        "--retry-on-failure",
        "-r",
        help="Keep retrying until it finds a suitable IP address. "
        "System errors will still abort",
    ),
]


def _resolver() -> NetlinkAddressResolver:
    """Build the resolver used by all node-ip commands."""
    return NetlinkAddressResolver(table=config.ROUTE_TABLE)


def _retry(ctx: typer.Context, retry: bool) -> bool:
    """Combine a command's retry flag with the one given to the group."""
    return retry or bool((ctx.obj or {}).get("retry"))


@app.callback()
def node_ip(ctx: typer.Context, retry: RetryOption = False):
    """
    Node IP has tools that aid in the configuration of the default node IP.

    The retry flag may be given before the command or to show/set.
    """
    ctx.ensure_object(dict)["retry"] = retry


# =============================================================================
# Commands
# =============================================================================


@app.command("show")
def show(
    ctx: typer.Context,
    vips: Annotated[
        list[str] | None, typer.Argument(help="Virtual IPs", show_default=False)
    ] = None,
    retry: RetryOption = False,
):
    """
    Show a configured IP address that directly routes to the given Virtual IPs.

    If no Virtual IPs are provided or if the node isn't attached to the VIP
    subnet, it will pick an IP associated with the default route.
    """
    try:
        parsed = parse_ips(vips or [])
        chosen = select_node_ip(parsed, _resolver(), retry=_retry(ctx, retry))
    except NodeIPError as e:
        print_error(f"error in node-ip show: {e}")
        raise typer.Exit(1)

    logger.info(f"Chosen Node IP {chosen}")
    typer.echo(str(chosen))


@app.command("set")
def set_node_ip(
    ctx: typer.Context,
    vips: Annotated[
        list[str] | None, typer.Argument(help="Virtual IPs", show_default=False)
    ] = None,
    retry: RetryOption = False,
    kubelet_override: Annotated[
        str | None,
        typer.Option(
            "--kubelet-override",
            help="Kubelet service override file",
            envvar="RUNTIMECFG_KUBELET_OVERRIDE",
        ),
    ] = None,
    crio_override: Annotated[
        str | None,
        typer.Option(
            "--crio-override",
            help="CRI-O service override file",
            envvar="RUNTIMECFG_CRIO_OVERRIDE",
        ),
    ] = None,
):
    """
    Set container runtime services to bind to the chosen node IP.

    Picks the address the same way as `show`, then writes the kubelet and
    CRI-O systemd overrides. A failure writing the CRI-O override leaves
    the kubelet override in place.
    """
    try:
        parsed = parse_ips(vips or [])
        chosen = select_node_ip(parsed, _resolver(), retry=_retry(ctx, retry))
        logger.info(f"Chosen Node IP {chosen}")
        write_node_ip_overrides(chosen, kubelet_override, crio_override)
    except NodeIPError as e:
        print_error(f"error in node-ip set: {e}")
        raise typer.Exit(1)


@app.command("vipable")
def vipable(
    vips: Annotated[list[str], typer.Argument(help="Virtual IPs")],
):
    """
    Exit with zero status code when the node is attached to the VIP subnet.

    Exits non-zero otherwise.
    """
    try:
        parsed = parse_ips(vips)
        find_attached_interface(parsed, _resolver())
    except NodeIPError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("addresses")
def addresses(
    vips: Annotated[
        list[str] | None, typer.Argument(help="Virtual IPs", show_default=False)
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the report as JSON")
    ] = False,
):
    """Show every candidate node IP and which one would be chosen."""
    try:
        parsed = parse_ips(vips or [])
        resolver = _resolver()
        routed = (
            resolver.addresses_routing_to(parsed, valid_node_address) if parsed else []
        )
        default = resolver.addresses_on_default_route(valid_node_address)
    except NodeIPError as e:
        print_error(f"error in node-ip addresses: {e}")
        raise typer.Exit(1)

    candidates = routed or default
    report = NodeIPReport(
        vips=[str(vip) for vip in parsed],
        vip_routed=[
            CandidateReport(address=str(ip), source=CandidateSource.VIP_ROUTE)
            for ip in routed
        ],
        default_route=[
            CandidateReport(address=str(ip), source=CandidateSource.DEFAULT_ROUTE)
            for ip in default
        ],
        chosen=str(candidates[0]) if candidates else None,
    )

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    if report.chosen is None:
        print_warning("No suitable node IP found")

    table = Table(title="Node IP Candidates")
    table.add_column("Address", style="cyan")
    table.add_column("Source")
    table.add_column("Chosen", justify="center")
    for i, candidate in enumerate(report.vip_routed or report.default_route):
        table.add_row(
            candidate.address,
            candidate.source.value,
            "[green]*[/green]" if i == 0 else "",
        )
    if report.vip_routed:
        for candidate in report.default_route:
            table.add_row(candidate.address, candidate.source.value, "")
    console.print(table)
