"""
Vehicle Counter CLI

Runs the detector and the dispatcher as two processes connected by a
bounded queue, or checks a configuration with --validate.
"""

import argparse
import logging
import signal
import sys
import time
from multiprocessing import Event, Process, Queue
from pathlib import Path
from threading import Event as ThreadEvent

import yaml

from .config import (
    ConfigValidationError,
    ValidationResult,
    load_config_with_env,
    prepare_runtime_config,
    print_validation_result,
    validate_config_full,
)
from .core import run_detection
from .processor import dispatch_events
from .utils import DEFAULT_QUEUE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"
USER_CONFIG_PATH = Path.home() / ".config" / "vehicle-counter" / DEFAULT_CONFIG_NAME
RULE = "=" * 70

# Set from signal handlers, polled by monitor_processes
_stop_requested = ThreadEvent()


def _request_stop(signum, _frame):
    # print, not logging: handlers may hold the logging lock
    print(f"\n{signal.Signals(signum).name} received, stopping after the current frame...")
    _stop_requested.set()


def _install_signal_handlers():
    for signum in (signal.SIGTERM, signal.SIGINT):
        signal.signal(signum, _request_stop)


class _ShortNameFormatter(logging.Formatter):
    """Abbreviates the package prefix in logger names."""

    def format(self, record):
        record.name = record.name.replace("vehicle_counter.", "vc.")
        return super().format(record)


def setup_logging(quiet: bool = False) -> None:
    """Route all loggers to stderr; quiet keeps warnings and errors only."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        _ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.WARNING if quiet else logging.INFO)


def find_config_file(config_path: str) -> Path:
    """
    Locate the configuration file.

    An explicit --config path is used as given. Otherwise ./config.yaml is
    tried, then ~/.config/vehicle-counter/config.yaml.

    Raises:
        SystemExit: If nothing is found
    """
    if config_path != DEFAULT_CONFIG_NAME:
        candidates = [Path(config_path)]
    else:
        candidates = [Path.cwd() / DEFAULT_CONFIG_NAME, USER_CONFIG_PATH]

    found = next((path for path in candidates if path.exists()), None)
    if found is not None:
        logger.info(f"Using config: {found}")
        return found

    logger.error("Config file not found, looked in:")
    for path in candidates:
        logger.error(f"  - {path}")
    logger.error("Copy the example config.yaml there or pass --config PATH")
    sys.exit(1)


def _read_yaml(path: Path):
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(config_path: str = DEFAULT_CONFIG_NAME, skip_validation: bool = False) -> dict:
    """
    Read the YAML configuration and apply environment overrides.

    A file whose only key is `use` is a pointer; the referenced file,
    relative to the pointer's directory, is read instead.

    Args:
        config_path: Value of --config
        skip_validation: Return the raw config even if it is invalid

    Returns:
        Configuration dictionary (not yet filled with defaults)

    Raises:
        SystemExit: On unreadable YAML or, unless skipped, invalid config
    """
    path = find_config_file(config_path)

    try:
        config = _read_yaml(path)
        if isinstance(config, dict) and set(config) == {"use"}:
            target = path.parent / config["use"]
            logger.info(f"Config pointer: {path} -> {target}")
            path = target
            config = _read_yaml(path)
    except (yaml.YAMLError, OSError) as e:
        logger.error(f"Cannot load {path}: {e}")
        sys.exit(1)

    logger.info(f"Configuration loaded from {path}")
    config = config if config is not None else {}
    if isinstance(config, dict):
        config = load_config_with_env(config)

    if not skip_validation:
        _require_valid(validate_config_full(config))

    return config


def _require_valid(result: ValidationResult) -> None:
    """Exit on validation errors, log warnings otherwise."""
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)
    for warning in result.warnings:
        logger.warning(warning)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="vehicle-counter",
        description="Count vehicles crossing a line and measure their speed to a second line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vehicle_counter                  # video.source from config.yaml
  python -m vehicle_counter highway.mp4      # a recorded video
  python -m vehicle_counter 0 -q             # camera 0, warnings only
  python -m vehicle_counter --validate       # check config.yaml and exit

Environment Variables:
  VIDEO_SOURCE - Replaces video.source from the config file
        """,
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="video file, stream URL or camera index; overrides video.source",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_NAME,
        help=f"configuration file (default: search for {DEFAULT_CONFIG_NAME})",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="log warnings and errors only; output files are still written",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="print validation result and derived settings, then exit",
    )
    return parser.parse_args(argv)


def print_banner(config: dict) -> None:
    """Summarize the run configuration."""
    lines = config["lines"]
    detection = config["detection"]
    output = config["output"]
    max_frames = config["runtime"]["max_frames"]

    print(f"\n{RULE}\nVEHICLE COUNTER\n{RULE}")
    print(f"Source:         {config['video']['source']}")
    print(f"Counting line:  {lines['counting']}")
    print(f"Speed line:     {lines['speed']}  ({lines['distance_m']} m further)")
    print(
        f"Area filter:    > {detection['area_threshold']} px, "
        f"small up to {detection['vehicle_size_threshold']} px"
    )
    print(f"Output:         {output['format']} in {output['json_dir']}/")
    if max_frames is not None:
        print(f"Frame limit:    {max_frames}")
    print(f"Ctrl+C stops the run early\n{RULE}\n")


def _guarded(target, role: str, *args) -> None:
    """Process entry point: run target and log anything it raises."""
    try:
        target(*args)
    except Exception as e:
        logger.error(f"{role} failed: {e}", exc_info=True)
        sys.exit(1)


def monitor_processes(detector: Process, dispatcher: Process) -> str:
    """
    Wait until the run ends and report why.

    Returns:
        'finished', 'detector_died', 'dispatcher_died', 'interrupted' or 'signal'
    """
    try:
        while not _stop_requested.is_set():
            if not detector.is_alive():
                return "finished" if detector.exitcode == 0 else "detector_died"
            if not dispatcher.is_alive():
                return "dispatcher_died"
            time.sleep(1)
        return "signal"
    except KeyboardInterrupt:
        return "interrupted"


def shutdown_processes(
    detector: Process, dispatcher: Process, shutdown_event, config: dict, queue: Queue
) -> None:
    """Stop the detector, then let the dispatcher drain the queue."""
    shutdown_event.set()

    if detector.is_alive():
        detector.join(timeout=config["runtime"]["detector_shutdown_timeout"])
        if detector.is_alive():
            logger.warning("Detector did not stop in time, killing it")
            detector.kill()
            detector.join()

    # A killed detector never sends its sentinel
    queue.put(None)

    if dispatcher.is_alive():
        logger.info("Waiting for dispatcher to flush output...")
        dispatcher.join()


def print_final_status(
    detector: Process, dispatcher: Process, config: dict, reason: str, elapsed: float
) -> None:
    """Report how the run ended and where the output went."""
    messages = {
        "finished": f"End of video reached after {elapsed / 60:.1f} minutes",
        "detector_died": "Detector stopped with an error",
        "dispatcher_died": "Dispatcher stopped unexpectedly",
        "interrupted": "Interrupted by user (Ctrl+C)",
        "signal": "Stopped by SIGTERM/SIGINT",
    }
    print(f"\n{RULE}\n{messages.get(reason, reason)}\n{RULE}")

    for process in (detector, dispatcher):
        if process.exitcode not in (0, None):
            logger.warning(f"{process.name} exit code: {process.exitcode}")

    print(f"Results: {config['output']['json_dir']}/\n{RULE}\n")


def run_validate(config_path: str) -> None:
    """--validate: print the result and exit 0 when valid, 1 otherwise."""
    result = validate_config_full(load_config(config_path, skip_validation=True))
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def run_counter(config: dict) -> str:
    """
    Start dispatcher and detector processes and supervise them.

    Args:
        config: Prepared configuration (all defaults present)

    Returns:
        Stop reason from monitor_processes
    """
    runtime = config["runtime"]
    queue = Queue(maxsize=runtime.get("queue_size", DEFAULT_QUEUE_SIZE))
    shutdown_event = Event()

    dispatcher = Process(
        target=_guarded,
        args=(dispatch_events, "Dispatcher", queue, config),
        name="Dispatcher",
    )
    dispatcher.start()
    # Consumer first so the bounded queue never fills before it is read
    time.sleep(runtime["dispatcher_startup_delay"])

    detector = Process(
        target=_guarded,
        args=(run_detection, "Detector", queue, config, shutdown_event),
        name="Detector",
    )
    detector.start()
    logger.info("Detector and dispatcher running")

    started = time.time()
    reason = monitor_processes(detector, dispatcher)
    elapsed = time.time() - started

    logger.info(f"Stopping ({reason})")
    shutdown_processes(detector, dispatcher, shutdown_event, config, queue)
    print_final_status(detector, dispatcher, config, reason, elapsed)
    return reason


def main(argv: list[str] | None = None) -> None:
    """Command line entry point."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate)

    if args.validate:
        run_validate(args.config)
        return

    config = load_config(args.config, skip_validation=True)
    if args.source is not None and isinstance(config, dict):
        config.setdefault("video", {})["source"] = args.source
    _require_valid(validate_config_full(config))

    try:
        config = prepare_runtime_config(config)
    except ConfigValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    print_banner(config)
    _install_signal_handlers()

    if run_counter(config) in ("detector_died", "dispatcher_died"):
        sys.exit(1)


if __name__ == "__main__":
    main()
