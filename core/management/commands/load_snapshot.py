"""
Core — Management Command: load_snapshot

Replaces the people and batches tables with the content of a snapshot
file (the JSON kept by the NOTIS browser app, or one written by
dump_snapshot).

Usage::

    python manage.py load_snapshot path/to/snapshot.json

A missing or malformed file leaves an empty store; untrusted records are
skipped and reported.

@file core/management/commands/load_snapshot.py
"""

from django.core.management.base import BaseCommand

from core.snapshot import SnapshotService


class Command(BaseCommand):
    help = 'Load people and batches from a snapshot file, replacing the current store.'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Snapshot JSON file')

    def handle(self, *args, **options):
        result = SnapshotService.load_file(options['path'])

        if result.skipped_people or result.skipped_batches:
            self.stdout.write(self.style.WARNING(
                f'  Skipped: {result.skipped_people} people, {result.skipped_batches} batches'
            ))
        self.stdout.write(self.style.SUCCESS(
            f'Done. {result.people} people and {result.batches} batches loaded.'
        ))
