"""
Snapshot run: snapshots every configured table, one after another.
"""

import logging
import uuid
from typing import List, Optional

from ..core.models import SnapshotConfig, TableSnapshotRequest, TableSnapshotResult
from ..source.base import TableSource
from .table_snapshot import TableSnapshotter

logger = logging.getLogger(__name__)


def build_requests(config: SnapshotConfig) -> List[TableSnapshotRequest]:
    """Build one snapshot request per configured table, in config order."""
    return [
        TableSnapshotRequest(table_name=table_name, base_dir=config.data_path)
        for table_name in config.tables
    ]


def run_snapshot(
    config: SnapshotConfig,
    source: TableSource,
    snapshotter: Optional[TableSnapshotter] = None,
    run_id: Optional[str] = None,
) -> List[TableSnapshotResult]:
    """
    Snapshot all configured tables sequentially.

    A failure in any table propagates immediately; tables snapshotted before
    it keep their output and later tables are not touched.

    Args:
        config: Resolved snapshot configuration
        source: Source the tables are loaded from
        snapshotter: Optional snapshotter (built from config if not provided)
        run_id: Optional run identifier for log correlation

    Returns:
        One result per table, in config order
    """
    if run_id is None:
        run_id = str(uuid.uuid4())

    if snapshotter is None:
        snapshotter = TableSnapshotter(
            source=source,
            max_file_name_length=config.max_file_name_length,
            skip_unchanged=config.skip_unchanged,
        )

    requests = build_requests(config)
    logger.info(
        f"Starting snapshot of {len(requests)} tables from {source.get_name()} into {config.data_path}",
        extra={"run_id": run_id},
    )

    results = []
    for request in requests:
        result = snapshotter.snapshot(request)
        logger.info(result.summary(), extra={"table": request.table_name, "run_id": run_id})
        results.append(result)

    total_rows = sum(r.row_count for r in results)
    logger.info(
        f"Snapshot complete: {len(results)} tables, {total_rows} rows",
        extra={"run_id": run_id},
    )
    return results
