"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

COMMAND_NAME = "cds_to_types"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return COMMAND_NAME

    if not cli_args:
        return COMMAND_NAME

    arguments = []
    options = []

    for param in click_command.params:
        value = cli_args.get(param.name)
        if value is None or value is False or value == "":
            continue

        # File paths are shown by name only
        if isinstance(value, (str, Path)):
            path_obj = Path(str(value))
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)

        elif isinstance(param, click.Option):
            if value == param.default:
                continue

            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, formatted_value])

    return " ".join([COMMAND_NAME, *arguments, *options])
