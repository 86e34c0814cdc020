"""CLI entrypoint: Typer app definition and command registration"""

import typer

from vaultlink.cli.commands import (
    config_set_cmd, config_show_cmd, copy_cmd, id_cmd, index_cmd, init_cmd, main_callback, open_cmd,
)


app = typer.Typer(name="vaultlink", no_args_is_help=True, help="Persistent links to markdown notes")
app.callback()(main_callback)

app.command(name="init")(init_cmd)
app.command(name="index")(index_cmd)
app.command(name="copy")(copy_cmd)
app.command(name="id")(id_cmd)
app.command(name="open")(open_cmd)

config_app = typer.Typer(no_args_is_help=True, help="Show or change settings")
config_app.command(name="show")(config_show_cmd)
config_app.command(name="set")(config_set_cmd)
app.add_typer(config_app, name="config")
