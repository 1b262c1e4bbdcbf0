"""Command-line tools for Atlas.

Usage::

    python -m atlas.cli seed --file data/seed.json
    python -m atlas.cli seed --file data/seed.json --skip-index
    python -m atlas.cli query --tenant bournemouth "good sushi nearby"

``seed`` loads tenants and businesses into SQLite and indexes business
facts into ChromaDB.  ``query`` runs one query through the same pipeline
the API uses and prints the AtlasResponse JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from pydantic import ValidationError

from atlas.config.loader import load_config
from atlas.config.settings import Settings
from atlas.models.query import QueryRequest
from atlas.utils.errors import AtlasError
from atlas.utils.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m atlas.cli",
        description="Seed the Atlas stores and run ad-hoc map queries.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Atlas commands")

    seed_parser = subparsers.add_parser("seed", help="Load tenants and businesses from JSON")
    seed_parser.add_argument("--file", required=True, help="Path to the seed JSON file")
    seed_parser.add_argument(
        "--skip-index",
        action="store_true",
        help="Only write SQLite; do not embed and index business facts",
    )

    query_parser = subparsers.add_parser("query", help="Run one query and print the response")
    query_parser.add_argument("text", help="Query text, e.g. 'good sushi nearby'")
    query_parser.add_argument("--tenant", required=True, help="Tenant id (e.g. bournemouth)")
    query_parser.add_argument("--lat", type=float, default=None, help="User latitude")
    query_parser.add_argument("--lng", type=float, default=None, help="User longitude")

    return parser


async def _handle_seed(args: argparse.Namespace, app_settings: Settings) -> int:
    from atlas.cli.seed import apply_seed, load_seed_file
    from atlas.providers.business.sqlite_candidate_store import SQLiteCandidateStore
    from atlas.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
    from atlas.providers.knowledge.chromadb_provider import ChromaDBKnowledgeProvider
    from atlas.providers.tenant.sqlite_tenant_config_provider import (
        SQLiteTenantConfigProvider,
    )

    try:
        seed = load_seed_file(args.file)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Error: cannot read seed file {args.file}: {exc}", file=sys.stderr)
        return 1

    knowledge = None
    if not args.skip_index:
        embedding = OpenAIEmbeddingProvider(settings=app_settings)
        if not embedding.is_available():
            print(
                "Error: OPENAI_API_KEY is required to index facts (or pass --skip-index)",
                file=sys.stderr,
            )
            return 1
        knowledge = ChromaDBKnowledgeProvider(
            embedding_provider=embedding,
            persist_directory=app_settings.chromadb_persist_dir,
            collection_name=app_settings.chromadb_collection,
        )

    try:
        result = await apply_seed(
            seed,
            candidate_store=SQLiteCandidateStore(db_path=app_settings.atlas_db_path),
            tenant_configs=SQLiteTenantConfigProvider(db_path=app_settings.atlas_db_path),
            knowledge=knowledge,
        )
    except AtlasError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Seed complete:")
    print(f"  Tenants:       {result.tenants}")
    print(f"  Businesses:    {result.businesses}")
    print(f"  Facts indexed: {result.facts_indexed}")
    return 0


async def _handle_query(args: argparse.Namespace, app_settings: Settings) -> int:
    from atlas.main import _build_all

    components = _build_all(app_settings, load_config(settings=app_settings))
    try:
        location = None
        if args.lat is not None and args.lng is not None:
            location = {"lat": args.lat, "lng": args.lng}
        try:
            request = QueryRequest(
                query_text=args.text,
                tenant_id=args.tenant,
                user_location=location,
            )
        except ValidationError as exc:
            print(f"Error: invalid query: {exc}", file=sys.stderr)
            return 1

        outcome = await components["pipeline"].run(request)
    finally:
        await components["http_client"].aclose()

    print(json.dumps(outcome.response.to_wire(), indent=2, ensure_ascii=False))
    if outcome.is_fallback:
        print(
            f"(fallback: {outcome.fallback_reason.value}, status {outcome.status_code})",
            file=sys.stderr,
        )
    return 0 if outcome.status_code < 500 else 2


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand and dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level, json_output=False)

    if args.command == "seed":
        sys.exit(asyncio.run(_handle_seed(args, app_settings)))

    if args.command == "query":
        sys.exit(asyncio.run(_handle_query(args, app_settings)))

    parser.print_help()
    sys.exit(1)
