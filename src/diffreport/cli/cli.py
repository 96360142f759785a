"""CLI entrypoint: Typer app definition and command registration"""

import typer

from diffreport.cli.commands import dirs_cmd, git_cmd, init_cmd


app = typer.Typer(name="diffreport", no_args_is_help=True, help="Line-numbered diff reports between two revisions")

app.command(name="dirs")(dirs_cmd)
app.command(name="git")(git_cmd)
app.command(name="init")(init_cmd)
