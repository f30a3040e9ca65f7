"""Entry point for python -m contract_automation"""

from contract_automation.cli.main import app

app()
