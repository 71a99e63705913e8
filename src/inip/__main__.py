from inip.cli.app import app

app(prog_name="inip")
