"""
Poster batch generation for Kometa Images.

For every item of a category the generator looks up its display text,
resolves a point size through the PointSizeCache (one resolve per poster,
strictly in order) and then hands the finished render jobs to the batch
runner.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .batch import BatchResult, PosterJob, run_batch
from .categories import get_category
from .constants import logger, OUTPUT_DIR, POSTER_WIDTH, POSTER_HEIGHT, RENDER_WORKERS
from .errors import PointSizeResolveError
from .pointsize_cache import PointSizeCache
from .render import RenderParams
from .translations import translate

OUTPUT_EXTENSION = 'jpg'


class PosterGenerator:
    """
    Builds and renders the posters of one or more categories.

    Args:
        cache: PointSizeCache shared by the whole run
        renderer: object with render(RenderParams) -> Path
        translation: loaded translation data
        fonts: font identifier -> font file, from validate_fonts
        output_dir: root directory; posters land in <output_dir>/<category>/
    """

    def __init__(
        self,
        cache: PointSizeCache,
        renderer,
        translation: Dict[str, Any],
        fonts: Optional[Dict[str, str]] = None,
        output_dir: Path = OUTPUT_DIR,
    ):
        self.cache = cache
        self.renderer = renderer
        self.translation = translation
        self.fonts = fonts or {}
        self.output_dir = Path(output_dir)

    def _font_for(self, font: str) -> str:
        return self.fonts.get(font, font)

    def plan_category(self, name: str) -> Tuple[List[PosterJob], Dict[str, str]]:
        """
        Resolve point sizes and build render jobs for a category.

        Returns (jobs, skipped) where skipped maps job id -> reason for the
        variants whose point size could not be resolved.
        """
        category = get_category(name)
        font = self._font_for(category['font'])
        box_width, box_height = category['box']
        min_size, max_size = category['point_sizes']

        jobs: List[PosterJob] = []
        skipped: Dict[str, str] = {}

        for item, background in category['items'].items():
            text = translate(self.translation, name, item)
            job_id = f"{name}/{item}"
            try:
                point_size = self.cache.resolve(text, font, box_width, box_height, min_size, max_size)
            except PointSizeResolveError as e:
                logger.error(f"POSTER_SKIPPED job={job_id} error={e}")
                skipped[job_id] = str(e)
                continue

            params = RenderParams(
                text=text,
                font=font,
                point_size=point_size,
                width=POSTER_WIDTH,
                height=POSTER_HEIGHT,
                box_width=box_width,
                box_height=box_height,
                fill=category.get('fill', '#FFFFFF'),
                background=background,
                output_path=self.output_dir / name / f"{item}.{OUTPUT_EXTENSION}",
            )
            jobs.append(PosterJob(name, item, params))

        logger.info(f"CATEGORY_PLANNED category={name} jobs={len(jobs)} skipped={len(skipped)}")
        return jobs, skipped

    def generate(self, categories: Iterable[str], workers: int = RENDER_WORKERS) -> BatchResult:
        """Plan every category, then render all jobs in parallel."""
        all_jobs: List[PosterJob] = []
        skipped: Dict[str, str] = {}

        for name in categories:
            jobs, category_skipped = self.plan_category(name)
            all_jobs.extend(jobs)
            skipped.update(category_skipped)

        result = run_batch(all_jobs, self.renderer.render, workers)
        result.skipped.update(skipped)
        return result
