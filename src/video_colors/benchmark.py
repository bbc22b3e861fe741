"""
Executor Benchmark Module

This module is responsible for:
1. Running the same extraction with every executor and several worker counts
2. Timing each run
3. Checking that every run produced the identical ColorTrack
4. Saving benchmark results to a JSON file

The first run is the baseline; any run whose ColorTrack differs from it is
reported as a mismatch.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .executors import EXECUTOR_NAMES, default_worker_count
from .models import ColorTrack
from .pipeline import ColorExtractionPipeline, ExtractionConfig


logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Timing and outcome of a single extraction run"""
    executor: str
    max_workers: int
    elapsed_seconds: float
    num_colors: int
    matches_baseline: bool


@dataclass
class BenchmarkResults:
    """Complete benchmark results for one video"""
    video_path: str
    timestamp: str
    color_mode: str
    runs: List[Dict]
    all_identical: bool
    fastest: Optional[Dict] = None


def default_worker_counts() -> List[int]:
    """1, 2 and the default pool size, without duplicates"""
    return sorted({1, 2, default_worker_count()})


class ExecutorBenchmark:
    """Compares executor variants and worker counts on one video"""

    def __init__(
        self,
        video_path: str,
        executors: Sequence[str] = EXECUTOR_NAMES,
        worker_counts: Optional[Sequence[int]] = None,
        color_mode: str = 'mean',
        pipeline_factory=ColorExtractionPipeline
    ):
        """
        Args:
            video_path: Video to extract colors from
            executors: Executor names to compare
            worker_counts: Worker counts to try with each executor
            color_mode: Color strategy used for every run
            pipeline_factory: Builds a pipeline from an ExtractionConfig
        """
        self.video_path = str(video_path)
        self.executors = list(executors)
        self.worker_counts = list(worker_counts) if worker_counts else default_worker_counts()
        self.color_mode = color_mode
        self.pipeline_factory = pipeline_factory

    def run(self) -> BenchmarkResults:
        """Run every executor/worker-count combination once"""
        baseline: Optional[ColorTrack] = None
        runs: List[RunResult] = []

        for executor in self.executors:
            for workers in self.worker_counts:
                config = ExtractionConfig(
                    max_workers=workers,
                    executor=executor,
                    color_mode=self.color_mode
                )
                pipeline = self.pipeline_factory(config)

                start = time.perf_counter()
                colors = pipeline.run(self.video_path)
                elapsed = time.perf_counter() - start

                if baseline is None:
                    baseline = colors

                result = RunResult(
                    executor=executor,
                    max_workers=workers,
                    elapsed_seconds=elapsed,
                    num_colors=len(colors),
                    matches_baseline=(colors == baseline)
                )
                runs.append(result)

                logger.info(
                    f"{executor:>9} x{workers:<3} {elapsed:8.2f}s  "
                    f"{len(colors)} colors  {'OK' if result.matches_baseline else 'MISMATCH'}"
                )

        fastest = min(runs, key=lambda r: r.elapsed_seconds) if runs else None

        return BenchmarkResults(
            video_path=self.video_path,
            timestamp=datetime.now().isoformat(),
            color_mode=self.color_mode,
            runs=[asdict(r) for r in runs],
            all_identical=all(r.matches_baseline for r in runs),
            fastest=asdict(fastest) if fastest else None
        )


def save_results(results: BenchmarkResults, output_path: str) -> Path:
    """Save benchmark results as JSON"""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(asdict(results), f, indent=2)

    logger.info(f"Benchmark results saved to: {output_path}")
    return output_path
