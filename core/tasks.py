"""
Core — Celery Tasks

Snapshot persistence. Every successful mutation schedules a rewrite of
the snapshot file once its transaction commits; a failed write is logged
and never undoes the mutation.

@file core/tasks.py
"""

import logging

from celery import shared_task
from django.conf import settings
from django.db import transaction

logger = logging.getLogger('notis')


@shared_task(name='core.persist_snapshot')
def persist_snapshot_task(path=None):
    """Write the full people/batches snapshot to ``path`` (default SNAPSHOT_PATH)."""
    from .snapshot import SnapshotService

    path = path or settings.SNAPSHOT_PATH
    if not path:
        return None

    try:
        snapshot = SnapshotService.save(path)
    except OSError:
        logger.exception('Snapshot could not be written to %s.', path)
        return None

    counts = {key: len(records) for key, records in snapshot.items()}
    logger.info('persist_snapshot_task completed: %s written (%s).', path, counts)
    return {'path': str(path), **counts}


def schedule_snapshot_save():
    """Queue a snapshot write for when the current transaction commits."""
    path = settings.SNAPSHOT_PATH
    if not path:
        return
    transaction.on_commit(lambda: persist_snapshot_task.delay(str(path)), robust=True)
