"""Candidate store adapters (ICandidateStore implementations)."""

from atlas.providers.business.sqlite_candidate_store import SQLiteCandidateStore

__all__ = ["SQLiteCandidateStore"]
