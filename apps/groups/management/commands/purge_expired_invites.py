"""
Management command to delete expired group invites.

Expired invites are also removed lazily when someone tries to use them;
this command cleans up the ones nobody touched.

Usage:
    python manage.py purge_expired_invites [--dry-run]
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.groups.models import GroupInvite
from apps.groups.services import purge_expired_invites


class Command(BaseCommand):
    help = 'Delete group invites past their expiry time'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many invites would be deleted without deleting them',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            count = GroupInvite.objects.filter(expires_at__lt=timezone.now()).count()
            self.stdout.write(
                self.style.WARNING(f'--dry-run mode: {count} expired invite(s) would be deleted.')
            )
            return

        purged = purge_expired_invites()

        self.stdout.write(
            self.style.SUCCESS(f'Deleted {purged} expired invite(s).')
        )
