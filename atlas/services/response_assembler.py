"""Final response assembly: the model never decides which businesses show.

Whatever ids the model put in its reply are thrown away.  The response's
``business_ids`` are the pipeline's own ranked, leak-guarded top-N, and the
primary business is always rank 0.  The model only contributes the summary
sentence and the UI hints.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from atlas.models.business import RankedCandidate
from atlas.models.response import AtlasResponse
from atlas.services.response_validator import ValidatedReply
from atlas.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def assemble_response(
    reply: ValidatedReply,
    candidates: Sequence[RankedCandidate],
) -> AtlasResponse:
    """Combine the validated reply with the pipeline's own candidate list."""
    business_ids = [ranked.business_id for ranked in candidates]

    if reply.business_ids and reply.business_ids != business_ids:
        _logger.info(
            "model_business_ids_discarded",
            model_ids=len(reply.business_ids),
            pipeline_ids=len(business_ids),
        )

    return AtlasResponse(
        summary=reply.summary,
        business_ids=business_ids,
        primary_business_id=business_ids[0] if business_ids else None,
        ui=reply.atlas_ui(),
    )
