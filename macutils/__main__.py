from macutils.cli import app

app()
