"""
CLI-specific formatting functions for human-readable output.

This module handles presentation formatting for the CLI, including:
- JSON and YAML rendering
- Rich tables for binding listings
- Indented trees for resolution plans
"""
import json
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    elif format_type == "table":
        return format_table_output(data)
    else:
        return json.dumps(data, indent=2, default=str)


def format_table_output(data: Any) -> str:
    """Format data as a table."""
    if isinstance(data, dict) and "bindings" in data:
        return format_bindings_table(data["bindings"])
    elif isinstance(data, dict) and "plan" in data:
        return format_plan_tree(data["plan"])
    else:
        # Fallback to JSON for unknown data structures
        return json.dumps(data, indent=2, default=str)


def _render(renderable: Any) -> str:
    console = Console(width=120, legacy_windows=False, force_terminal=False)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def format_bindings_table(bindings: List[Dict[str, Any]]) -> str:
    """Format registrations as a table."""
    if not bindings:
        return "No bindings registered."

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Kind", style="blue")
    table.add_column("Target", style="green")
    table.add_column("Scope", style="yellow")

    for binding in bindings:
        table.add_row(*(escape(str(binding.get(column, "N/A"))) for column in ("key", "kind", "target", "scope")))

    return _render(table)


def format_plan_tree(plan: Dict[str, Any]) -> str:
    """Format an explain() result as a tree."""
    tree = Tree(_plan_label(plan))
    _add_plan_children(tree, plan)
    return _render(tree)


def _plan_label(node: Dict[str, Any]) -> str:
    label = node.get("key", "?")
    binding = node.get("binding")
    if binding:
        label += f" ({binding['scope']} {binding['kind']} -> {binding['target']})"
    if "error" in node:
        label += f" !! {node['error']}"
    return escape(label)


def _add_plan_children(tree: Tree, node: Dict[str, Any]) -> None:
    if "resolves_to" in node:
        child = tree.add(_plan_label(node["resolves_to"]))
        _add_plan_children(child, node["resolves_to"])
    for parameter in node.get("parameters", []):
        label = f"{parameter['name']}: {parameter['type']}"
        if "default" in parameter:
            label += f" = {parameter['default']}"
        branch = tree.add(escape(label))
        if "resolves_to" in parameter:
            child = branch.add(_plan_label(parameter["resolves_to"]))
            _add_plan_children(child, parameter["resolves_to"])
