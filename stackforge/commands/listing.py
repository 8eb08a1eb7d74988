"""``stackforge list``: print the supported choices."""

from __future__ import annotations

from rich.table import Table

from stackforge import catalog
from stackforge.utils import console, print_header


def languages_table() -> Table:
    table = Table(title="Languages", header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Extensions", style="dim")
    table.add_column("Package managers")
    for lang in catalog.LANGUAGES:
        table.add_row(
            lang.id,
            lang.name,
            ", ".join(lang.extensions),
            ", ".join(pm.id for pm in catalog.package_managers_for(lang.id)) or "-",
        )
    return table


def frameworks_table(language: str) -> Table | None:
    """Frameworks for *language*, or ``None`` if it has none."""
    frameworks = catalog.frameworks_for(language)
    if not frameworks:
        return None
    table = Table(title=f"{catalog.display_name(language)} frameworks", header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description", style="dim")
    for fw in frameworks:
        table.add_row(fw.id, fw.name, fw.description)
    return table


def package_managers_table() -> Table:
    table = Table(title="Package managers", header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Languages")
    table.add_column("Install", style="dim")
    for pm in catalog.PACKAGE_MANAGERS:
        table.add_row(pm.id, pm.name, ", ".join(pm.languages), " ".join(pm.install_command))
    return table


def licenses_table() -> Table:
    table = Table(title="Licenses", header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("SPDX", style="dim")
    for lic in catalog.LICENSES:
        table.add_row(lic.id, lic.name, lic.spdx)
    return table


def run_list() -> int:
    print_header("stackforge: supported options")
    console.print(languages_table())
    console.print()
    for lang in catalog.LANGUAGES:
        table = frameworks_table(lang.id)
        if table is not None:
            console.print(table)
            console.print()
    console.print(package_managers_table())
    console.print()
    console.print(licenses_table())
    return 0
