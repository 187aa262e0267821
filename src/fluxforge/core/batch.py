"""Batch scheduling of independent export requests."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tqdm import tqdm

from .base import ProcessingResult, ProcessingStatus
from .thermal import MediaType, check_thermal_throttling, get_thermal_safe_worker_count

if TYPE_CHECKING:
    from pathlib import Path

    from .base import MediaProcessor

LOG = logging.getLogger(__name__)


@dataclass
class BatchConfig:
    """Configuration for batch runs."""

    max_workers: int | None = None
    show_progress: bool = True


def process_batch(
    processor: MediaProcessor,
    paths: list[Path],
    config: BatchConfig | None = None,
    **kwargs: Any,
) -> list[ProcessingResult]:
    """
    Run ``processor.process_file`` for every path as an independent task.

    Paths the processor cannot handle are reported as skipped. Results come
    back in input order regardless of completion order.

    Args:
        processor: Processor that handles each path
        paths: Inputs to process
        config: Worker and progress settings (optional)
        **kwargs: Additional arguments passed to process_file

    Returns:
        One result per input path

    """
    if config is None:
        config = BatchConfig()

    media_type: MediaType = "video" if processor.media_type == "video" else "archive"
    results: dict[int, ProcessingResult] = {}
    work: list[tuple[int, Path]] = []

    for index, path in enumerate(paths):
        if processor.can_process(path):
            work.append((index, path))
        else:
            processor.logger.warning("Skipping unsupported input: %s", path)
            results[index] = ProcessingResult(
                source_file=path,
                status=ProcessingStatus.SKIPPED,
                message=f"Not a supported {media_type} file",
            )

    if work:
        max_workers = min(get_thermal_safe_worker_count(config.max_workers, media_type), len(work))
        progress_bar = tqdm(
            total=len(work),
            desc=f"Processing {media_type} files",
            unit="file",
            disable=not config.show_progress,
        )
        try:
            if max_workers == 1:
                _run_sequential(processor, work, results, progress_bar, media_type, kwargs)
            else:
                _run_threaded(processor, work, results, progress_bar, max_workers, kwargs)
        finally:
            progress_bar.close()

    ordered = [results[index] for index in range(len(paths))]
    succeeded = sum(1 for r in ordered if r.status == ProcessingStatus.SUCCESS)
    processor.logger.info("Batch complete: %d/%d succeeded", succeeded, len(ordered))
    return ordered


def _crash_result(path: Path, error: Exception) -> ProcessingResult:
    return ProcessingResult(
        source_file=path,
        status=ProcessingStatus.ERROR,
        message=f"Unexpected error: {error}",
        metadata={"error_type": type(error).__name__},
    )


def _run_sequential(
    processor: MediaProcessor,
    work: list[tuple[int, Path]],
    results: dict[int, ProcessingResult],
    progress_bar: tqdm,
    media_type: MediaType,
    kwargs: dict[str, Any],
) -> None:
    for index, path in work:
        progress_bar.set_description(f"Processing {path.name}")
        try:
            results[index] = processor.process_file(path, **kwargs)
        except Exception as e:
            processor.logger.exception("Error processing %s", path)
            results[index] = _crash_result(path, e)
        progress_bar.update(1)
        check_thermal_throttling(media_type)


def _run_threaded(
    processor: MediaProcessor,
    work: list[tuple[int, Path]],
    results: dict[int, ProcessingResult],
    progress_bar: tqdm,
    max_workers: int,
    kwargs: dict[str, Any],
) -> None:
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_item = {executor.submit(processor.process_file, path, **kwargs): (index, path) for index, path in work}

        for future in as_completed(future_to_item):
            index, path = future_to_item[future]
            try:
                result = future.result()
            except Exception as e:
                processor.logger.exception("Error processing %s", path)
                result = _crash_result(path, e)
            results[index] = result
            mark = "✓" if result.status == ProcessingStatus.SUCCESS else "✗"
            progress_bar.set_description(f"{mark} {path.name}")
            progress_bar.update(1)
