"""
aurora_invest.reporting: terminal formatting of engine outputs.

The engines return plain structured models; this package turns them into
text for the CLI. It never computes anything the engines did not.

Modules:
  formatters: ASCII formatters for analysis, portfolio and recommendation output.
"""
