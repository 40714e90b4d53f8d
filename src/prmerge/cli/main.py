import typer

from prmerge.cli.merge_cmd import merge as merge_command
from prmerge.cli.status import status as status_command

app = typer.Typer(name="prmerge", help="Rebase and merge pull requests locally")
app.command(name="merge")(merge_command)
app.command(name="status")(status_command)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
