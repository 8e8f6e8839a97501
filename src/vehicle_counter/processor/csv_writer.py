"""
CSV Writer Consumer
Writes one tab-separated row per completed transit.
"""

import csv
import logging
import os
from datetime import datetime

from ..utils.event_schema import EVENT_TYPE_TRANSIT_COMPLETED

logger = logging.getLogger(__name__)

CSV_HEADER = ["No.", "Vehicle type", "Speed [km/h]", "Video time [sec]"]


def csv_writer_consumer(event_queue, config: dict) -> None:
    """
    Consume events and write completed transits to a CSV file.

    Args:
        event_queue: Queue receiving events
        config: Consumer configuration with json_dir (output directory)
    """
    output_dir = config.get("json_dir", "data")
    os.makedirs(output_dir, exist_ok=True)
    csv_filename = _generate_output_filename(output_dir)

    logger.info(f"CSV Writer started: {csv_filename}")

    row_count = 0
    try:
        with open(csv_filename, "w", newline="") as csv_file:
            writer = csv.writer(csv_file, delimiter="\t")
            writer.writerow(CSV_HEADER)

            while True:
                event = event_queue.get()

                if event is None:  # Shutdown signal
                    break

                if event["event_type"] != EVENT_TYPE_TRANSIT_COMPLETED:
                    continue

                writer.writerow(transit_row(event))
                csv_file.flush()
                row_count += 1

    except KeyboardInterrupt:
        logger.info("CSV Writer stopped by user")
    except Exception as e:
        logger.error(f"Error in CSV Writer: {e}", exc_info=True)
    finally:
        logger.info(f"CSV Writer complete: {row_count} transit(s) -> {csv_filename}")


def transit_row(event: dict) -> list:
    """CSV row for a TRANSIT_COMPLETED event."""
    return [
        event["sequence_id"],
        event["vehicle_class"],
        round(event["speed_kmh"], 2),
        round(event["video_time"], 2),
    ]


def _generate_output_filename(output_dir: str) -> str:
    """Generate timestamped output filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{output_dir}/results_{timestamp}.csv"
