# =============================================================================
# core/services/export_service.py - CSV Export
# =============================================================================
# Writes every user matching a search term to a temporary CSV file.
#
# Lifecycle of an export file:
#   1. export_users_csv() creates it (only when at least one user matches)
#   2. app/responses.py streams it to the client
#   3. remove_export_file() deletes it, whatever happened in steps 1-2
# =============================================================================

import logging
import os
import tempfile
from collections.abc import Iterable, Iterator
from itertools import chain, islice
from pathlib import Path
from typing import Any

import pandas as pd
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure

from app.exceptions import ExportWriteError, NoUsersToExportError
from core.services.user_query import EXPORT_SEARCH_FIELDS, NEWEST_FIRST, build_search_filter
from lib.mongo_client import store_errors

logger = logging.getLogger(__name__)

# CSV header -> document key, in output order
CSV_COLUMNS = {
    "First Name": "first_name",
    "Last Name": "last_name",
    "Email": "email",
    "Phone": "phone",
    "Address": "address",
    "City": "city",
    "State": "state",
    "Zip Code": "zip_code",
    "Country": "country",
}

CSV_HEADERS = list(CSV_COLUMNS)

EXPORT_FILENAME = "users.csv"
EXPORT_FILE_PREFIX = "users-"


def format_user_row(user: dict[str, Any]) -> dict[str, str]:
    """Map a user document to a CSV row, blank for missing values."""
    return {header: user.get(key) or "" for header, key in CSV_COLUMNS.items()}


def _batched(items: Iterable[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    iterator = iter(items)
    while batch := list(islice(iterator, size)):
        yield batch


def remove_export_file(path: str | Path) -> bool:
    """
    Delete an export file.

    Failures are logged, never raised: by the time this runs the response
    may already have been sent.

    Returns:
        True if the file is gone (deleted now or already missing)
    """
    try:
        os.remove(path)
        logger.debug(f"Removed export file: {path}")
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.error(f"Failed to remove export file {path}: {e}")
        return False


class ExportService:
    """
    Service for exporting users to CSV.

    Writes the file in batches so the whole result set never has to sit in
    memory as one DataFrame.
    """

    def __init__(
        self,
        collection: Collection,
        export_dir: str | Path | None = None,
        batch_size: int = 500,
    ):
        self.collection = collection
        self.export_dir = Path(export_dir) if export_dir else None
        self.batch_size = batch_size

    def export_users_csv(self, search: str = "") -> Path:
        """
        Export every user matching `search` to a temporary CSV file.

        The caller owns the returned file and must delete it with
        remove_export_file() once it has been delivered.

        Args:
            search: Free-text term matched against the export search fields

        Returns:
            Path of the written CSV file

        Raises:
            NoUsersToExportError: If no user matches (no file is created)
            ExportWriteError: If the file cannot be written (it is removed)
        """
        query = build_search_filter(search, EXPORT_SEARCH_FIELDS)

        with store_errors("export users"):
            cursor = self.collection.find(query).sort(NEWEST_FIRST).batch_size(self.batch_size)
            first = next(cursor, None)

            if first is None:
                raise NoUsersToExportError(search)

            path, row_count = self._write_csv(chain([first], cursor))

        logger.info(f"Exported {row_count} users to {path} (search={search!r})")
        return path

    def _open_export_file(self):
        try:
            if self.export_dir:
                self.export_dir.mkdir(parents=True, exist_ok=True)
            return tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="",
                prefix=EXPORT_FILE_PREFIX,
                suffix=".csv",
                dir=self.export_dir,
                delete=False,
            )
        except OSError as e:
            logger.error(f"Could not create export file in {self.export_dir}: {e}")
            raise ExportWriteError(str(e)) from e

    def _write_csv(self, users: Iterable[dict[str, Any]]) -> tuple[Path, int]:
        handle = self._open_export_file()
        path = Path(handle.name)
        row_count = 0

        try:
            with handle:
                for index, batch in enumerate(_batched(users, self.batch_size)):
                    frame = pd.DataFrame(
                        [format_user_row(user) for user in batch],
                        columns=CSV_HEADERS,
                        dtype=str,
                    )
                    frame.to_csv(handle, index=False, header=(index == 0), lineterminator="\n")
                    row_count += len(batch)
        except ConnectionFailure:
            # Lost the database mid-cursor; store_errors reports it
            remove_export_file(path)
            raise
        except Exception as e:
            remove_export_file(path)
            logger.error(f"CSV export write failed: {e}")
            raise ExportWriteError(str(e)) from e

        return path, row_count
