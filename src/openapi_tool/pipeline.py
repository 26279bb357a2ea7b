"""Bundle, rewrite and merge a set of OpenAPI files.

Every file is processed concurrently and independently. Problems from all
files are gathered before anything is merged: a single problem anywhere
blocks the merge for the whole batch.
"""

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel

from openapi_tool.config import Config
from openapi_tool.discover import expand_patterns
from openapi_tool.errors import BundlingProblemsError
from openapi_tool.merger import merge
from openapi_tool.parser.base import Problem
from openapi_tool.parser.bundle import bundle
from openapi_tool.parser.detect import is_openapi_spec
from openapi_tool.rewrite import rewrite_schema_refs

logger = logging.getLogger(__name__)


class FileResult(BaseModel):
    """Outcome of processing one candidate file."""

    path: Path
    document: dict | None = None
    problems: list[Problem] = []
    skipped: bool = False


async def process_file(path: Path, config: Config) -> FileResult:
    """Detect, bundle and rewrite a single file."""
    if not await asyncio.to_thread(is_openapi_spec, path):
        logger.debug("Skipping %s: not an OpenAPI document", path)
        return FileResult(path=path, skipped=True)

    result = await asyncio.to_thread(
        bundle,
        config,
        path,
        dereference=False,
        remove_unused_components=False,
    )
    if result.problems:
        return FileResult(path=path, problems=result.problems)

    deps = ", ".join(str(dep) for dep in result.file_dependencies) or "none"
    logger.debug("Bundled %s (dependencies: %s)", path, deps)
    document = rewrite_schema_refs(result.document)
    return FileResult(path=path, document=document)


async def process_files(paths: list[Path], config: Config) -> list[FileResult]:
    """Process all files concurrently, returning results in input order.

    Every task runs to completion; the first exception raised by any of
    them is re-raised afterwards.
    """
    results = await asyncio.gather(
        *(process_file(path, config) for path in paths),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def collect_documents(results: list[FileResult]) -> list[dict]:
    """Return the documents to merge, or raise if any file had problems."""
    problems = [problem for result in results for problem in result.problems]
    if problems:
        raise BundlingProblemsError(problems)
    return [result.document for result in results if result.document is not None]


def generate(patterns: list[str] | tuple[str, ...], config: Config) -> dict:
    """Run the full pipeline over ``patterns`` and return the merged document."""
    paths = expand_patterns(patterns)
    logger.info("Processing %d candidate file(s)", len(paths))
    results = asyncio.run(process_files(paths, config))
    documents = collect_documents(results)
    logger.info("Merging %d document(s)", len(documents))
    return merge(documents)
