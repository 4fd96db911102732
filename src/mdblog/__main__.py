from mdblog.cli.cli import app

app()
