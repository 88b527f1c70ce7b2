"""
Core — Management Command: dump_snapshot

Writes the current people and batches to a snapshot file.

Usage::

    python manage.py dump_snapshot path/to/snapshot.json

@file core/management/commands/dump_snapshot.py
"""

from django.core.management.base import BaseCommand, CommandError

from core.snapshot import SnapshotService


class Command(BaseCommand):
    help = 'Write people and batches to a snapshot file.'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Destination JSON file')

    def handle(self, *args, **options):
        try:
            snapshot = SnapshotService.save(options['path'])
        except OSError as exc:
            raise CommandError(f'Cannot write {options["path"]}: {exc}') from exc

        self.stdout.write(self.style.SUCCESS(
            f'Done. {len(snapshot["people"])} people and {len(snapshot["batches"])} batches '
            f'written to {options["path"]}.'
        ))
