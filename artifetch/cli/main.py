import typer

from artifetch.cli.commands import ensure

app = typer.Typer(
    name="artifetch",
    help="Fetch pinned CI build artifacts.",
    add_completion=False,
)

app.command("ensure", no_args_is_help=True)(ensure.ensure)

if __name__ == "__main__":
    app()
