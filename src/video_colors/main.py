#!/usr/bin/env python3
"""
Video Color Extraction

Main CLI application entry point.

Extracts one representative color per second of footage from a video file
and writes the ordered colors as JSON:
1. Read frame rate and frame count
2. Split the video into chunks, one per worker
3. Decode sampled frames in parallel, each worker with its own decoder
4. Order the colors by frame index and write them out
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from .benchmark import ExecutorBenchmark, save_results
from .color_extraction import COLOR_MODES
from .errors import VideoColorsError
from .executors import EXECUTOR_NAMES
from .pipeline import ColorExtractionPipeline, ExtractionConfig
from .writer import default_output_path, write_colors_to_file


logger = logging.getLogger(__name__)


def configure_logging(debug: int):
    """INFO by default, DEBUG with -d"""
    logging.basicConfig(
        level=logging.DEBUG if debug > 0 else logging.INFO,
        format='%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract one color per second of footage from a video',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mean color per second, written to movie.mp4.json
  video-colors movie.mp4

  # Dominant color with 4 workers and the fork-join executor
  video-colors movie.mp4 -o colors.json --mode dominant --workers 4 --executor fork-join

  # Compare executors and worker counts
  video-colors movie.mp4 --benchmark bench.json
        """
    )

    parser.add_argument(
        'input',
        help='Input video file to operate on'
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        metavar='FILE',
        help='Output file (default: input file name with .json appended)'
    )
    parser.add_argument(
        '-d', '--debug',
        action='count',
        default=0,
        help='Turn debugging information on'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Number of parallel workers (default: available CPUs - 1)'
    )
    parser.add_argument(
        '--executor',
        default='pool',
        choices=EXECUTOR_NAMES,
        help='Concurrency strategy (default: pool)'
    )
    parser.add_argument(
        '--mode',
        default='mean',
        choices=COLOR_MODES,
        help='Color per frame: mean color or dominant k-means cluster (default: mean)'
    )
    parser.add_argument(
        '--processes',
        action='store_true',
        help='Run chunks in worker processes instead of threads (fork-join executor only)'
    )
    parser.add_argument(
        '--no-progress',
        action='store_false',
        dest='show_progress',
        help='Hide the progress bar'
    )
    parser.add_argument(
        '--benchmark',
        default=None,
        metavar='FILE',
        help='Benchmark every executor and worker count, saving results to FILE'
    )
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    timer = time.perf_counter()

    if not Path(args.input).exists():
        logger.error(f"Input video not found: {args.input}")
        sys.exit(1)

    output = Path(args.output) if args.output else default_output_path(args.input)
    logger.debug(f"input={args.input}, output={output}, debug={args.debug}")

    try:
        if args.benchmark:
            logger.info(f"Benchmarking executors on {args.input}")
            results = ExecutorBenchmark(args.input, color_mode=args.mode).run()
            save_results(results, args.benchmark)
            if not results.all_identical:
                logger.error("Executors produced different color tracks")
                sys.exit(1)
        else:
            logger.info(f"Extracting colors from {args.input}")
            config = ExtractionConfig(
                max_workers=args.workers,
                executor=args.executor,
                color_mode=args.mode,
                show_progress=args.show_progress,
                processes=args.processes
            )
            colors = ColorExtractionPipeline(config).run(args.input)
            write_colors_to_file(colors, output)
            logger.info(f"Wrote {len(colors)} color(s) to {output}")
    except VideoColorsError as e:
        logger.error(f"Extraction failed: {e}")
        sys.exit(1)

    logger.info(f"Done in {time.perf_counter() - timer:.2f}s")


if __name__ == '__main__':
    main()
