import sys
from typing import Optional

import click


@click.group()
def fabric() -> None:
    """Leaf-spine fabric sizing and uplink allocation commands."""
    pass


def _export_yaml(data: dict, path: str) -> None:
    import yaml

    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=True)


@fabric.command("derive")
@click.option(
    "--spec",
    "spec_path",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="fabrics/fabric.yaml",
    show_default=True,
    help="Path to the fabric spec YAML (legacy fields or leafClasses).",
)
@click.option(
    "--policy",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="fabrics/sizing-policy.yaml",
    show_default=True,
    help="Sizing policy YAML (port budgets, oversubscription limit). Defaults apply if missing.",
)
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Write the derived topology to this YAML file.",
)
def derive(spec_path: str, policy: str, export: Optional[str]) -> None:
    """Size a fabric into leaf/spine counts and validate it."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    console = Console()

    try:
        from hnc_core.data import load_fabric_spec, load_sizing_policy_typed
        from hnc_core.validation import derive_topology

        spec = load_fabric_spec(spec_path)
        topology = derive_topology(spec, load_sizing_policy_typed(policy))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading fabric: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"\n[bold cyan]Topology: {escape(spec.name)}[/bold cyan]")

    table = Table(title="Topology Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Leaves", str(topology.leaves_needed))
    table.add_row("Spines", str(topology.spines_needed))
    table.add_row("Total Ports", str(topology.total_ports))
    table.add_row("Used Ports", str(topology.used_ports))
    table.add_row("Oversubscription", f"{topology.oversubscription_ratio:.2f}:1")
    table.add_row("Valid", "yes" if topology.is_valid else "no", style="green" if topology.is_valid else "red")

    console.print(table)

    if topology.validation_errors:
        console.print("\n[bold]Validation Errors:[/bold]")
        for error in topology.validation_errors:
            console.print(f"[red]FAIL[/red] {escape(error)}")

    if topology.guards:
        console.print("\n[bold]Guards:[/bold]")
        for guard in topology.guards:
            console.print(f"[yellow]{guard.guard_type}[/yellow] {escape(guard.message)}")

    if export:
        _export_yaml(topology.model_dump(by_alias=True, mode="json"), export)
        console.print(f"[green]✓[/green] Topology exported to {escape(export)}")

    if not topology.is_valid:
        console.print("\n[red]✗[/red] Topology is invalid")
        sys.exit(1)

    console.print("\n[green]✓[/green] Topology is valid")
    sys.exit(0)


@fabric.command("allocate")
@click.option(
    "--spec",
    "spec_path",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="fabrics/fabric.yaml",
    show_default=True,
    help="Path to the fabric spec YAML.",
)
@click.option(
    "--profiles",
    type=click.Path(path_type=str, exists=False),
    default="profiles",
    show_default=True,
    help="Switch profile catalog: a directory of profiles or a single YAML file.",
)
@click.option(
    "--policy",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="fabrics/sizing-policy.yaml",
    show_default=True,
    help="Sizing policy YAML. Defaults apply if missing.",
)
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Write the allocation result to this YAML file.",
)
def allocate(spec_path: str, profiles: str, policy: str, export: Optional[str]) -> None:
    """Compute leaf-to-spine uplink port maps for every leaf class."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    console = Console()

    try:
        from hnc_core.data import load_fabric_spec, load_sizing_policy_typed, load_switch_profiles
        from hnc_tools.allocation import (
            allocate_multi_class_uplinks,
            legacy_allocation_spec,
            validate_allocation_result,
        )

        spec = load_fabric_spec(spec_path)
        catalog = load_switch_profiles(profiles)
        sizing = load_sizing_policy_typed(policy)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading inputs: {escape(str(e))}[/red]")
        sys.exit(1)

    spine_profile = catalog.get(spec.spine_model_id)
    if spine_profile is None:
        console.print(f"[red]Spine profile not found for model: {escape(spec.spine_model_id)}[/red]")
        sys.exit(1)

    console.print(f"\n[bold cyan]Uplink Allocation: {escape(spec.name)}[/bold cyan]")

    result = allocate_multi_class_uplinks(spec, catalog, spine_profile, sizing)

    if result.class_allocations:
        table = Table(title="Leaf Classes")
        table.add_column("Class", style="cyan")
        table.add_column("Leaves", justify="right")
        table.add_column("Leaf IDs", justify="right")
        table.add_column("Endpoints", justify="right")

        for allocation in result.class_allocations:
            ids = [leaf.leaf_id for leaf in allocation.leaf_maps]
            id_range = f"{ids[0]}-{ids[-1]}" if ids else "-"
            table.add_row(allocation.class_id, str(allocation.leaves_allocated), id_range, str(allocation.total_endpoints))

        console.print(table)

    if result.ok:
        spines = Table(title="Spine Utilization")
        spines.add_column("Spine", style="cyan")
        spines.add_column("Uplinks", justify="right")
        for spine_id, used in enumerate(result.spine_utilization):
            spines.add_row(str(spine_id), str(used))
        console.print(spines)
        console.print(f"Leaves allocated: {result.total_leaves_allocated}")

    audit: list[str] = []
    if result.legacy is not None:
        audit = validate_allocation_result(result.legacy, legacy_allocation_spec(spec, sizing))
        for problem in audit:
            console.print(f"[yellow]AUDIT[/yellow] {escape(problem)}")

    if export:
        _export_yaml(result.model_dump(by_alias=True, mode="json", exclude_none=True), export)
        console.print(f"[green]✓[/green] Allocation exported to {escape(export)}")

    if not result.ok:
        console.print("\n[bold]Issues:[/bold]")
        for message in result.messages:
            console.print(f"[red]FAIL[/red] {escape(message)}")
        console.print(f"\n[red]✗[/red] Allocation failed with {len(result.messages)} issues")
        sys.exit(1)

    if audit:
        console.print(f"\n[red]✗[/red] Allocation audit found {len(audit)} inconsistencies")
        sys.exit(1)

    console.print("\n[green]✓[/green] Allocation completed successfully")
    sys.exit(0)


@fabric.command("profiles")
@click.option(
    "--profiles",
    type=click.Path(path_type=str, exists=False),
    default="profiles",
    show_default=True,
    help="Switch profile catalog: a directory of profiles or a single YAML file.",
)
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Write the normalized catalog to this YAML file.",
)
def profiles(profiles: str, export: Optional[str]) -> None:
    """List the switch profiles in a catalog."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    console = Console()

    try:
        from hnc_core.data import load_switch_profiles
        from hnc_core.data.profiles import dump_switch_profiles
        from hnc_tools.allocation import expand_port_ranges

        catalog = load_switch_profiles(profiles)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading profiles: {escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(title="Switch Profiles")
    table.add_column("Model", style="cyan")
    table.add_column("Roles")
    table.add_column("Endpoint Ports", justify="right")
    table.add_column("Fabric Ports", justify="right")

    for model_id in sorted(catalog):
        profile = catalog[model_id]
        table.add_row(
            model_id,
            ", ".join(profile.roles),
            str(len(expand_port_ranges(profile.ports.endpoint_assignable))),
            str(len(expand_port_ranges(profile.ports.fabric_assignable))),
        )

    console.print(table)

    if export:
        _export_yaml({"profiles": dump_switch_profiles(catalog)}, export)
        console.print(f"[green]✓[/green] Catalog exported to {escape(export)}")

    sys.exit(0)
