from wsldisplay.cli import cli

cli()
