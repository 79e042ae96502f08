"""CLI entrypoint: resolve a topic pack from a JSON fixture or a content service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from aggregator import MetricCallbacks, RichProgressMetrics
from config import get_compatibility_settings
from core import PermissiveCompatibilityChecker, SchemaVersionCompatibilityChecker, StructureCompatibilityChecker
from fetchers import BaseContentFetcher, HttpContentFetcher, InMemoryContentFetcher
from models import CompleteTopicPack
from orchestrator import TopicPackRepository
from utils import IncompatibleTopicError, TopicPackError, setup_logger
from utils.logger import console


def _build_fetcher(args: argparse.Namespace) -> BaseContentFetcher:
    if args.fixture:
        return InMemoryContentFetcher.from_fixture(args.fixture)
    return HttpContentFetcher(args.base_url)


def _build_checker(name: str) -> StructureCompatibilityChecker:
    if name == "schema":
        return SchemaVersionCompatibilityChecker(get_compatibility_settings())
    return PermissiveCompatibilityChecker()


def _summary(pack: CompleteTopicPack) -> Dict[str, Any]:
    return {
        "topic_id": pack.topic.id,
        "topic_version": pack.topic.version,
        "default_language": pack.default_language.value,
        "subtopic_pages": {str(index): page.version for index, page in pack.subtopic_pages.items()},
        "stories": {story_id: story.version for story_id, story in pack.stories.items()},
        "explorations": {exp_id: exp.version for exp_id, exp in pack.explorations.items()},
        "skills": {skill_id: skill.version for skill_id, skill in pack.referenced_skills.items()},
    }


async def _resolve(args: argparse.Namespace) -> CompleteTopicPack:
    checker = _build_checker(args.checker)
    async with _build_fetcher(args) as fetcher:
        repository = TopicPackRepository(fetcher, checker)
        if args.no_progress:
            return await repository.resolve_topic_pack(args.topic_id, MetricCallbacks())
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
        ) as progress:
            return await repository.resolve_topic_pack(args.topic_id, RichProgressMetrics(progress))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Topic pack resolver CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Resolve the newest compatible pack for a topic")
    resolve.add_argument("--topic-id", required=True)
    source = resolve.add_mutually_exclusive_group(required=True)
    source.add_argument("--fixture", help="JSON fixture served by the in-memory fetcher")
    source.add_argument("--base-url", help="Content service base URL")
    resolve.add_argument("--checker", choices=["permissive", "schema"], default="permissive")
    resolve.add_argument("--no-progress", action="store_true")

    args = parser.parse_args(argv)
    setup_logger("", level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "resolve":
        try:
            pack = asyncio.run(_resolve(args))
        except IncompatibleTopicError as e:
            print(
                json.dumps(
                    {"topic_id": e.topic_id, "failures": [str(failure) for failure in e.failures]},
                    ensure_ascii=False,
                )
            )
            return 1
        except TopicPackError as e:
            logging.getLogger(__name__).error(str(e))
            return 2
        print(json.dumps(_summary(pack), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
