"""Inventory file helpers.

The inventory format belongs to the SuperBench CLI (an Ansible INI
inventory). Only the pieces this tool needs are handled here: writing the
single-host local inventory, spotting the local-connection marker, and
listing host lines for status output.
"""

from pathlib import Path

from pydantic import BaseModel, Field

LOCAL_CONNECTION_MARKER = "ansible_connection=local"

LOCAL_INVENTORY = """\
# SuperBench Inventory Configuration
# Single node setup with local connection

[all]
localhost ansible_connection=local
"""

_COMMENT_PREFIXES = ("#", ";")


class InventoryHost(BaseModel):
    """A host line from an inventory file."""

    name: str
    group: str = "ungrouped"
    variables: dict[str, str] = Field(default_factory=dict)

    @property
    def is_local(self) -> bool:
        return self.variables.get("ansible_connection") == "local"


def is_local_inventory(path: Path) -> bool:
    """True if the file exists and declares a local connection."""
    path = Path(path)
    if not path.is_file():
        return False
    try:
        return LOCAL_CONNECTION_MARKER in path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def write_local_inventory(path: Path) -> bool:
    """
    Write the single-host local inventory.

    Returns:
        True if the file was written, False if it already existed
    """
    path = Path(path)
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(LOCAL_INVENTORY, encoding="utf-8")
    return True


def parse_inventory(path: Path) -> list[InventoryHost]:
    """Parse host lines; ``:vars`` and ``:children`` sections are skipped.

    Undecodable bytes are replaced; the host list is informational only.
    """
    hosts: list[InventoryHost] = []
    group = "ungrouped"
    skip_section = False

    for raw in Path(path).read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue

        if line.startswith("[") and line.endswith("]"):
            group = line[1:-1].strip()
            skip_section = ":" in group
            continue

        if skip_section:
            continue

        name, *pairs = line.split()
        variables = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if sep:
                variables[key] = value
        hosts.append(InventoryHost(name=name, group=group, variables=variables))

    return hosts
