"""
bugsheet - per-team Bugzilla counts, reconciled on a timer and published
to a Smartsheet report.

Subpackages:
- bugsheet.core: errors, logging, settings, credentials
- bugsheet.teams: org file and the component → team directory
- bugsheet.bugs: bug records, classifier, snapshot store, query engine
- bugsheet.sources: issue-tracker sources (Bugzilla, fixture file)
- bugsheet.reconcile: the periodic reconciliation loop
- bugsheet.report: Smartsheet client and row publisher
- bugsheet.cli: typer application
"""

__version__ = "0.1.0"
