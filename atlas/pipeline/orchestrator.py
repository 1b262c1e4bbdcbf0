"""Query pipeline: from free text to a safe AtlasResponse.

Stages, in order:

    knowledge search -> dedupe/score -> eligibility-scoped fetch
    -> leak guard -> rank -> top-N -> prompt -> model call
    -> validate -> assemble

Every stage except the three collaborator calls is a pure function from
:mod:`atlas.services`.  Any stage can end the request early with a
deterministic fallback; :meth:`AtlasQueryPipeline.run` never raises.

Collaborators are injected once at startup and shared across requests.
The pipeline keeps no per-request state on ``self``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from atlas.interfaces.alert_sink import IAlertSink
from atlas.interfaces.candidate_store import ICandidateStore
from atlas.interfaces.knowledge_search_provider import IKnowledgeSearchProvider
from atlas.interfaces.llm_provider import ILLMProvider
from atlas.interfaces.tenant_config_provider import ITenantConfigProvider
from atlas.models.business import BusinessCandidate, BusinessPin
from atlas.models.pipeline import AtlasQueryOutcome, FallbackReason
from atlas.models.query import DEFAULT_MAX_RESULTS, DEFAULT_MIN_RATING, QueryRequest, TenantConfig
from atlas.services.fallback import produce_fallback, status_for
from atlas.services.leak_guard import describe_violation, guard
from atlas.services.query_expansion import expand_query
from atlas.services.ranker import rank_candidates, select_top
from atlas.services.response_assembler import assemble_response
from atlas.services.response_planner import plan_prompt, tier_label
from atlas.services.response_validator import validate_response
from atlas.services.scoring import candidate_ids, dedupe_matches
from atlas.utils.errors import CollaboratorError, LLMError
from atlas.utils.logging import get_logger


@dataclass(frozen=True)
class PipelineOptions:
    """Tuning for :class:`AtlasQueryPipeline` (the ``atlas:`` config section)."""

    default_min_rating: float = DEFAULT_MIN_RATING
    default_max_results: int = DEFAULT_MAX_RESULTS
    fetch_multiplier: int = 2
    knowledge_search_limit: int = 30
    map_listing_limit: int = 50
    temperature: float = 0.2
    max_tokens: int = 200

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> PipelineOptions:
        atlas_cfg = config.get("atlas", {}) or {}
        model_cfg = atlas_cfg.get("model", {}) or {}
        defaults = cls()
        return cls(
            default_min_rating=float(
                atlas_cfg.get("default_min_rating", defaults.default_min_rating)
            ),
            default_max_results=int(
                atlas_cfg.get("default_max_results", defaults.default_max_results)
            ),
            fetch_multiplier=int(atlas_cfg.get("fetch_multiplier", defaults.fetch_multiplier)),
            knowledge_search_limit=int(
                atlas_cfg.get("knowledge_search_limit", defaults.knowledge_search_limit)
            ),
            map_listing_limit=int(
                atlas_cfg.get("map_listing_limit", defaults.map_listing_limit)
            ),
            temperature=float(model_cfg.get("temperature", defaults.temperature)),
            max_tokens=int(model_cfg.get("max_tokens", defaults.max_tokens)),
        )


class AtlasQueryPipeline:
    """Turns one :class:`QueryRequest` into an :class:`AtlasQueryOutcome`.

    ``llm`` may be ``None`` when no model is configured; every query then
    gets the model-unavailable fallback with status 503.
    """

    def __init__(
        self,
        llm: ILLMProvider | None,
        knowledge_search: IKnowledgeSearchProvider,
        candidate_store: ICandidateStore,
        tenant_configs: ITenantConfigProvider,
        alert_sink: IAlertSink,
        options: PipelineOptions | None = None,
    ) -> None:
        self._llm = llm
        self._knowledge_search = knowledge_search
        self._candidate_store = candidate_store
        self._tenant_configs = tenant_configs
        self._alert_sink = alert_sink
        self._options = options or PipelineOptions()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def model_available(self) -> bool:
        return self._llm is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, request: QueryRequest) -> AtlasQueryOutcome:
        """Run the full pipeline for *request*.  Never raises."""
        try:
            return await self._run(request)
        except Exception:
            self._logger.exception(
                "atlas_query_internal_error",
                tenant_id=request.tenant_id,
            )
            return self._fallback(FallbackReason.INTERNAL_ERROR)

    async def list_pins(
        self,
        tenant_id: str,
        name_filter: str = "",
        limit: int | None = None,
    ) -> list[BusinessPin]:
        """Return map pins for the eligible businesses of *tenant_id*.

        Scoped by the tenant's minimum rating like a query fetch, and
        capped at ``map_listing_limit`` whatever *limit* asks for.  Goes
        through the same leak guard as queries.

        Raises
        ------
        atlas.utils.errors.CandidateFetchError
            If the candidate store cannot be read.
        """
        cap = self._options.map_listing_limit
        effective_limit = min(limit, cap) if limit else cap
        tenant_config = await self._tenant_config(tenant_id)
        fetched = await self._candidate_store.list_for_map(
            tenant_id,
            min_rating=tenant_config.min_rating,
            name_filter=name_filter,
            limit=effective_limit,
        )
        checked = guard(fetched)
        if checked.has_violations:
            await self._report_leaks(tenant_id, checked.violations)
        return [_to_pin(candidate) for candidate in checked.safe]

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _run(self, request: QueryRequest) -> AtlasQueryOutcome:
        tenant_id = request.tenant_id
        log = self._logger.bind(tenant_id=tenant_id)

        if self._llm is None:
            log.warning("atlas_model_unavailable")
            return self._fallback(FallbackReason.MODEL_UNAVAILABLE)

        config = await self._tenant_config(tenant_id)

        search_text = expand_query(request.query_text)
        try:
            matches = await self._knowledge_search.search(
                search_text, tenant_id, limit=self._options.knowledge_search_limit
            )
        except CollaboratorError as exc:
            log.error("knowledge_search_failed", error=str(exc))
            return self._fallback(FallbackReason.FETCH_ERROR)

        scores = dedupe_matches(matches)
        if not scores:
            log.info("atlas_no_query_match", query_length=len(request.query_text))
            return self._fallback(FallbackReason.NO_QUERY_MATCH)

        ids = candidate_ids(scores, self._options.fetch_multiplier * config.max_results)
        try:
            fetched = await self._candidate_store.fetch(ids, tenant_id, config.min_rating)
        except CollaboratorError as exc:
            log.error("candidate_fetch_failed", error=str(exc), requested=len(ids))
            return self._fallback(FallbackReason.FETCH_ERROR)

        checked = guard(fetched)
        if checked.has_violations:
            await self._report_leaks(tenant_id, checked.violations)
        leak_count = len(checked.violations)

        top = select_top(rank_candidates(checked.safe, scores), config.max_results)
        if not top:
            log.info("atlas_no_eligible_candidates", fetched=len(fetched))
            return self._fallback(FallbackReason.NO_ELIGIBLE_CANDIDATES, leak_violations=leak_count)

        plan = plan_prompt(request.query_text, top, tenant_id)
        try:
            raw = await self._llm.complete(
                system_prompt=plan.system_prompt,
                user_prompt=plan.user_prompt,
                temperature=self._options.temperature,
                max_tokens=self._options.max_tokens,
                json_mode=True,
            )
        except LLMError as exc:
            log.error("atlas_model_call_failed", error=str(exc))
            # 503 is reserved for "no model configured at all".
            return self._fallback(
                FallbackReason.MODEL_UNAVAILABLE,
                status_code=500,
                leak_violations=leak_count,
            )

        reply = validate_response(raw)
        if reply is None:
            log.warning(
                "model_output_rejected",
                provider=self._llm.get_provider_name(),
                raw_length=len(raw) if isinstance(raw, str) else None,
            )
            return self._fallback(FallbackReason.MALFORMED_MODEL_OUTPUT, leak_violations=leak_count)

        response = assemble_response(reply, top)
        log.info(
            "atlas_query_answered",
            matches=len(matches),
            unique_businesses=len(scores),
            fetched=len(fetched),
            returned=len(response.business_ids),
            leak_violations=leak_count,
        )
        return AtlasQueryOutcome(response=response, status_code=200, leak_violations=leak_count)

    async def _tenant_config(self, tenant_id: str) -> TenantConfig:
        defaults = TenantConfig(
            min_rating=self._options.default_min_rating,
            max_results=self._options.default_max_results,
        )
        try:
            config = await self._tenant_configs.get(tenant_id)
        except Exception as exc:
            self._logger.warning("tenant_config_lookup_failed", tenant_id=tenant_id, error=str(exc))
            return defaults
        return config or defaults

    async def _report_leaks(
        self,
        tenant_id: str,
        violations: list[BusinessCandidate],
    ) -> None:
        """Escalate leaked records.  The records themselves are already dropped."""
        details = [describe_violation(candidate) for candidate in violations]
        self._logger.critical(
            "tier_leak_detected",
            tenant_id=tenant_id,
            violation_count=len(details),
            violations=details,
            store=self._candidate_store.get_provider_name(),
        )
        try:
            await self._alert_sink.raise_leak_alert(tenant_id, details)
        except Exception as exc:
            self._logger.critical(
                "leak_alert_delivery_failed",
                tenant_id=tenant_id,
                sink=self._alert_sink.get_provider_name(),
                error=str(exc),
            )

    @staticmethod
    def _fallback(
        reason: FallbackReason,
        status_code: int | None = None,
        leak_violations: int = 0,
    ) -> AtlasQueryOutcome:
        return AtlasQueryOutcome(
            response=produce_fallback(reason),
            status_code=status_for(reason) if status_code is None else status_code,
            fallback_reason=reason,
            leak_violations=leak_violations,
        )


def _to_pin(candidate: BusinessCandidate) -> BusinessPin:
    coordinate = candidate.coordinate
    return BusinessPin(
        id=candidate.business_id,
        name=candidate.display_name,
        lat=coordinate.lat,
        lng=coordinate.lng,
        rating=candidate.rating,
        tier=tier_label(candidate.tier),
    )
