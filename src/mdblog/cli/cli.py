"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdblog.cli.commands import (
    build_cmd, check_site_cmd, devcontainer_cmd, index_cmd, init_cmd, lint_cmd,
    list_cmd, main_callback, new_page_cmd, new_post_cmd, serve_cmd, snippets_cmd, tags_cmd,
)


app = typer.Typer(name="mdblog", no_args_is_help=True, help="Authoring tools for a Markdown/front-matter blog")

app.callback()(main_callback)
app.command(name="lint")(lint_cmd)
app.command(name="check-site")(check_site_cmd)
app.command(name="new-post")(new_post_cmd)
app.command(name="new-page")(new_page_cmd)
app.command(name="index")(index_cmd)
app.command(name="list")(list_cmd)
app.command(name="tags")(tags_cmd)
app.command(name="snippets")(snippets_cmd)
app.command(name="devcontainer")(devcontainer_cmd)
app.command(name="serve")(serve_cmd)
app.command(name="build")(build_cmd)
app.command(name="init")(init_cmd)
