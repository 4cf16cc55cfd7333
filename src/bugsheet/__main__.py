from bugsheet.cli.app import app

app(prog_name="bugsheet")
