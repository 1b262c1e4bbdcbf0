"""Shared pytest fixtures for the Atlas test suite."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from atlas.interfaces.alert_sink import IAlertSink
from atlas.interfaces.candidate_store import ICandidateStore
from atlas.interfaces.knowledge_search_provider import IKnowledgeSearchProvider
from atlas.interfaces.llm_provider import ILLMProvider
from atlas.interfaces.tenant_config_provider import ITenantConfigProvider
from atlas.models.business import BusinessCandidate, BusinessTier, Coordinate, KnowledgeMatch


def make_candidate(
    business_id: str = "biz-1",
    display_name: str = "Harbour Sushi",
    rating: float | None = 4.6,
    tier: BusinessTier | str = BusinessTier.FEATURED,
    lat: float | None = 50.72,
    lng: float | None = -1.88,
    with_coordinate: bool = True,
) -> BusinessCandidate:
    """Build a BusinessCandidate; eligible (FEATURED, valid coords) by default."""
    return BusinessCandidate(
        business_id=business_id,
        display_name=display_name,
        rating=rating,
        tier=tier,
        coordinate=Coordinate(lat=lat, lng=lng) if with_coordinate else None,
    )


def make_reply(
    summary: str = "Harbour Sushi is a top pick nearby.",
    business_ids: list[str] | None = None,
    primary: str | None = None,
    focus: str = "pins",
    auto_dismiss_ms: Any = 4200,
) -> str:
    """Serialise a model reply in the shape the system prompt asks for."""
    return json.dumps(
        {
            "summary": summary,
            "businessIds": business_ids if business_ids is not None else [],
            "primaryBusinessId": primary,
            "ui": {"focus": focus, "autoDismissMs": auto_dismiss_ms},
        }
    )


@pytest.fixture
def candidate_factory():
    return make_candidate


@pytest.fixture
def reply_factory():
    return make_reply


@pytest.fixture
def mock_llm() -> MagicMock:
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value=make_reply())
    llm.get_provider_name.return_value = "mock-llm"
    llm.is_available.return_value = True
    return llm


@pytest.fixture
def mock_knowledge_search() -> MagicMock:
    search = MagicMock(spec=IKnowledgeSearchProvider)
    search.search = AsyncMock(
        return_value=[
            KnowledgeMatch(business_id="biz-1", relevance_score=0.82),
            KnowledgeMatch(business_id="biz-2", relevance_score=0.74),
            KnowledgeMatch(business_id="biz-1", relevance_score=0.91),
        ]
    )
    search.get_provider_name.return_value = "mock-knowledge"
    search.is_available.return_value = True
    return search


@pytest.fixture
def mock_candidate_store() -> MagicMock:
    store = MagicMock(spec=ICandidateStore)
    store.fetch = AsyncMock(
        return_value=[
            make_candidate("biz-1", "Harbour Sushi", 4.6, BusinessTier.FEATURED),
            make_candidate("biz-2", "Sakura House", 4.8, BusinessTier.SPOTLIGHT),
        ]
    )
    store.list_for_map = AsyncMock(return_value=[])
    store.get_provider_name.return_value = "mock-store"
    return store


@pytest.fixture
def mock_tenant_configs() -> MagicMock:
    configs = MagicMock(spec=ITenantConfigProvider)
    configs.get = AsyncMock(return_value=None)
    configs.get_provider_name.return_value = "mock-config"
    return configs


@pytest.fixture
def mock_alert_sink() -> MagicMock:
    sink = MagicMock(spec=IAlertSink)
    sink.raise_leak_alert = AsyncMock(return_value=None)
    sink.get_provider_name.return_value = "mock-alert"
    return sink
