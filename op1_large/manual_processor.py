#!/usr/bin/env python3
"""Derive form session search values from a JSON file, streaming large inputs."""

import argparse, logging, os, pathlib, sys

sys.path.append(str(pathlib.Path(__file__).parent.parent))
from shared.errors import SearchValueError
from shared.size_guard import InputSizeGuard
from shared.step import DEFAULT_SESSION_SEARCH_PATH, LocalFileContext, ResolutionMode, StepParameters, execute

logger = logging.getLogger(__name__)
size_guard = InputSizeGuard(threshold_mb=float(os.environ.get("STREAMING_THRESHOLD_MB", "8")))


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def process(input_path: pathlib.Path, output_path: pathlib.Path, search_path: str,
            mode: ResolutionMode = ResolutionMode.AUTO, chunk_kb: int = 64):
    parameters = StepParameters.from_mapping({
        "inputDataFile": input_path,
        "outputSearchValuesFile": output_path,
        "sessionSearchPath": search_path,
    })
    result = execute(LocalFileContext(), parameters, mode=mode, guard=size_guard, chunk_size=chunk_kb * 1024)
    logger.info("%s search value(s) written as %s", len(result.values), result.output_mode.value)
    return result


def cli(argv=None):
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("input_data_file", type=pathlib.Path, help="JSON input data file")
    ap.add_argument("output_search_values_file", type=pathlib.Path, help="file to write the search values to")
    ap.add_argument("--search-path", default=os.environ.get("SESSION_SEARCH_PATH", DEFAULT_SESSION_SEARCH_PATH),
                    help="JSONPath expression or concat(<delimiter>, <expr>, <expr>, ...)")
    ap.add_argument("--mode", choices=[m.value for m in ResolutionMode], default=ResolutionMode.AUTO.value,
                    help="resolve in memory, from the parse event stream, or pick by input size")
    ap.add_argument("--chunk-size", type=positive_int, default=os.environ.get("JSON_CHUNK_SIZE", "64"),
                    help="read chunk size KB when streaming")
    ap.add_argument("--threshold-mb", type=float, help="override input size that switches to streaming")
    ap.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "INFO"))
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.threshold_mb is not None:
        size_guard.threshold_mb = args.threshold_mb

    try:
        process(args.input_data_file, args.output_search_values_file, args.search_path,
                ResolutionMode(args.mode), args.chunk_size)
    except SearchValueError as e:
        logger.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
