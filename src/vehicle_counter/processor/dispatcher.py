"""
Event Dispatcher

Receives events from the detector and forwards them to the writer consumer
selected by output.format. The writer runs in its own process, so an
export failure never reaches the detector.
"""

import logging
from collections import Counter
from multiprocessing import Process, Queue

from ..utils.event_schema import EVENT_TYPE_RUN_SUMMARY, get_event_summary, is_valid_event
from .csv_writer import csv_writer_consumer
from .json_writer import json_writer_consumer

logger = logging.getLogger(__name__)

WRITERS = {
    "jsonl": json_writer_consumer,
    "csv": csv_writer_consumer,
}


def dispatch_events(data_queue: Queue, config: dict) -> None:
    """
    Central event dispatcher - routes detector events to the writer.

    Args:
        data_queue: Queue receiving events from the detector
        config: Configuration dictionary
    """
    writer_queue = None
    writer_process = None
    events_by_type = Counter()

    try:
        output_config = config.get("output", {})
        console_config = config.get("console_output", {})
        output_format = output_config.get("format", "jsonl")

        writer_queue = Queue()
        writer_config = {
            "json_dir": output_config.get("json_dir", "data"),
            "console_enabled": console_config.get("enabled", True),
            "console_level": console_config.get("level", "detailed"),
        }
        writer_process = Process(
            target=WRITERS[output_format],
            args=(writer_queue, writer_config),
            name=f"{output_format.upper()}Writer",
        )
        writer_process.start()
        logger.info(f"Started {writer_process.name} consumer")

        while True:
            event = data_queue.get()

            if event is None:
                logger.info("Received shutdown signal")
                break

            if not is_valid_event(event):
                logger.warning(f"Dropping malformed event: {event}")
                continue

            events_by_type[event["event_type"]] += 1
            logger.debug(get_event_summary(event))

            if event["event_type"] == EVENT_TYPE_RUN_SUMMARY:
                _log_run_summary(event)

            writer_queue.put(event)

    except Exception as e:
        logger.error(f"Error in dispatcher: {e}", exc_info=True)
    finally:
        if writer_queue is not None:
            writer_queue.put(None)
        if writer_process is not None:
            writer_process.join()
        logger.info(f"Dispatcher complete: {sum(events_by_type.values())} event(s)")
        for event_type, count in sorted(events_by_type.items()):
            logger.info(f"  {event_type}: {count}")


def _log_run_summary(event: dict) -> None:
    """Log the final per-class totals."""
    logger.info(f"Vehicles counted: {event['total_counted']}")
    for name, stats in event["classes"].items():
        logger.info(
            f"  {name}: {stats['count']} vehicles, "
            f"{stats['samples']} speed samples, avg {stats['average_speed_kmh']:.1f} km/h"
        )
    if event.get("pending_discarded"):
        logger.info(f"  {event['pending_discarded']} pending transit(s) discarded")
