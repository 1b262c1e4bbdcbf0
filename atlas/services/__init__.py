"""Pure pipeline stages: eligibility, scoring, ranking, prompt and reply handling.

Nothing in this package performs I/O; the orchestrator in
:mod:`atlas.pipeline.orchestrator` feeds them already-fetched data.
"""
