"""Entry point: main(), click group, tool discovery, bare-pattern routing."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import load_settings
from .core import (
    IgnoreTool,
    build_tool_context,
    configure_logging,
    logger,
    register_tool,
    run_tool,
)

# ── Tool Discovery ───────────────────────────────────────────────────


def _discover_tools(package_path: list[str], package_name: str) -> list[IgnoreTool]:
    """Instantiate every IgnoreTool subclass defined in the package's modules."""
    tools: list[IgnoreTool] = []
    for module_info in pkgutil.iter_modules(package_path):
        name = module_info.name
        if name.startswith("_") or name in ("cli", "core"):
            continue
        module = importlib.import_module(f"{package_name}.{name}")

        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls is IgnoreTool or not issubclass(cls, IgnoreTool):
                continue
            # Only classes defined in this module, not imported bases
            if cls.__module__ != module.__name__:
                continue
            tool = cls()
            if not tool.name:
                logger.warning(f"Skipping tool '{cls.__name__}' with empty name")
                continue
            tools.append(tool)
    return sorted(tools, key=lambda t: t.name)


# ── Click Command Builder ────────────────────────────────────────────


def _make_tool_command(tool: IgnoreTool) -> click.Command:
    """Build a click command for a tool."""

    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        context = build_tool_context(ctx.obj)

        # Merge: defaults < CLI kwargs
        args: dict[str, Any] = {**tool.default_args()}
        for k, v in kwargs.items():
            if v is not None:
                args[k] = list(v) if isinstance(v, tuple) else v

        run_tool(tool, context, args)

    cmd = click.Command(name=tool.name, help=tool.help, callback=callback)

    # Let the tool add its own options
    cmd = tool.setup(cmd)

    return cmd


class IgnoreGroup(click.Group):
    """Group that treats unknown leading words as patterns for ``add``.

    ``gitignore node_modules '*.log'`` is shorthand for
    ``gitignore add node_modules '*.log'``; ``-a`` forces that reading
    even when a pattern collides with a command name.
    """

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        add_cmd = self.get_command(ctx, "add")
        if add_cmd is not None and args:
            first = args[0]
            if ctx.params.get("add_mode") or (
                not first.startswith("-") and self.get_command(ctx, first) is None
            ):
                return "add", add_cmd, list(args)
        return super().resolve_command(ctx, args)


# ── Main CLI Group ───────────────────────────────────────────────────


def _build_cli(
    workspace_root: str | None = None,
    home: str | None = None,
) -> click.Group:
    """Build the top-level click group with all discovered tools."""

    @click.group(cls=IgnoreGroup, context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--workspace-root",
        type=click.Path(exists=True, file_okay=False),
        default=workspace_root,
        hidden=True,
    )
    @click.option("--dry-run", is_flag=True, help="Show what would change without writing")
    @click.option("-V", "--verbose", is_flag=True, help="Debug output; errors include their code")
    @click.option("-q", "--quiet", is_flag=True, help="Only report errors")
    @click.option("-a", "--add", "add_mode", is_flag=True, help="Treat every argument as a pattern to add")
    @click.version_option(__version__, "-v", "--version", prog_name="gitignore")
    @click.pass_context
    def cli(
        ctx: click.Context,
        workspace_root: str | None,
        dry_run: bool,
        verbose: bool,
        quiet: bool,
        add_mode: bool,
    ) -> None:
        """Generate, merge and maintain .gitignore files."""
        ctx.ensure_object(dict)

        if workspace_root is None:
            workspace_root = str(Path.cwd())

        settings = load_settings(
            Path(home) if home else None,
            verbose=True if verbose else None,
            quiet=True if quiet else None,
        )
        configure_logging(settings)

        ctx.obj["workspace_root"] = workspace_root
        ctx.obj["settings"] = settings
        ctx.obj["dry_run"] = dry_run

    import gitignore_tools as pkg

    for tool in _discover_tools(list(pkg.__path__), pkg.__name__):
        register_tool(tool)
        custom_cmd = tool.create_click_command()
        if custom_cmd is not None:
            cli.add_command(custom_cmd)
        else:
            cli.add_command(_make_tool_command(tool))

    return cli


def main() -> None:
    """Console-script entry point (``gitignore``)."""
    from colorama import init as colorama_init
    colorama_init()

    cli = _build_cli()
    cli(prog_name="gitignore", standalone_mode=True)


if __name__ == "__main__":
    main()
