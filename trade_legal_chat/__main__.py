"""Allow running as ``python -m trade_legal_chat``"""

from trade_legal_chat.cli.main import app

app()
