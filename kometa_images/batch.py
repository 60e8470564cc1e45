"""
Parallel poster rendering for Kometa Images.

Render jobs are independent ImageMagick subprocesses, so they run on a thread
pool. Each subprocess carries its own timeout, which acts as the per-job
watchdog. One failed poster never stops the rest of the batch.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple

from .constants import logger, RENDER_WORKERS
from .render import RenderParams


class PosterJob(NamedTuple):
    """One poster to render, with the category/item it came from."""
    category: str
    item: str
    params: RenderParams

    @property
    def job_id(self) -> str:
        return f"{self.category}/{self.item}"


class BatchResult:
    """Outcome of a batch: rendered files, failed jobs and skipped variants."""

    def __init__(self):
        self.rendered: List[Path] = []
        self.failed: Dict[str, str] = {}
        self.skipped: Dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped

    def merge(self, other: 'BatchResult') -> None:
        self.rendered.extend(other.rendered)
        self.failed.update(other.failed)
        self.skipped.update(other.skipped)


def run_batch(
    jobs: List[PosterJob],
    render: Callable[[RenderParams], Path],
    workers: int = RENDER_WORKERS,
) -> BatchResult:
    """Render every job on a pool of worker threads."""
    result = BatchResult()
    if not jobs:
        return result

    workers = max(1, min(workers, len(jobs)))
    logger.info(f"BATCH_START jobs={len(jobs)} workers={workers}")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(render, job.params): job for job in jobs}

        for future in as_completed(futures):
            job = futures[future]
            try:
                path = future.result()
                result.rendered.append(Path(path))
                logger.info(f"POSTER_OK job={job.job_id} path={path}")
            except Exception as e:
                result.failed[job.job_id] = str(e)
                logger.error(f"POSTER_FAILED job={job.job_id} error={e}")

    result.rendered.sort()
    logger.info(f"BATCH_DONE rendered={len(result.rendered)} failed={len(result.failed)}")
    return result
