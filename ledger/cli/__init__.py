"""
ledger.cli — command-line tools.

- replay: apply a JSON script of calls to fresh ledgers and audit supply
"""
