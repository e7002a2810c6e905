import csv
import logging
from pathlib import Path
import pandas as pd
from data_classes.data_classes import CSV_HEADER, MetricRecord

logger = logging.getLogger(__name__)


class CsvReporter:
    """
    Append-only CSV sink for per-frame metrics.

    The header is written once when the file is opened; every record is flushed
    as soon as it is written so a crash only loses the frame in progress.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._file = None
        self._writer = None
        self.rows_written = 0

    def open(self) -> 'CsvReporter':
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open('w', newline='', encoding='utf-8')
        self._writer = csv.writer(self._file)
        self._writer.writerow(CSV_HEADER)
        self._file.flush()
        return self

    def write(self, record: MetricRecord) -> None:
        if self._writer is None:
            raise RuntimeError("Reporter is not open")
        self._writer.writerow(record.as_row())
        self._file.flush()
        self.rows_written += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            logger.info("Wrote %d rows to %s", self.rows_written, self.path)
        self._file = None
        self._writer = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *args):
        self.close()


def load_results(path: str) -> pd.DataFrame:
    return pd.read_csv(path)


def summarize(path: str) -> pd.DataFrame:
    """Per (detector, descriptor) frame count and mean of every metric column"""
    df = load_results(path)
    det_col, desc_col = CSV_HEADER[0], CSV_HEADER[3]
    metrics = [c for c in CSV_HEADER if c not in (det_col, desc_col)]

    grouped = df.groupby([det_col, desc_col], sort=False)
    summary = grouped[metrics].mean()
    summary.insert(0, 'frames', grouped.size())
    return summary.reset_index()
