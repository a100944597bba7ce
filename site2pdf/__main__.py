from site2pdf.cli import cli

cli()
