"""
Seed management command.

Populates the database with initial demo data:
  - 1 admin member and 2 regular members
  - slot sets for the coming 7 days (weekdays only)

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
    python manage.py seed_data --admin-password s3cret
"""
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.accounts.models import Member, Role
from apps.bookings.models import Booking
from apps.slots.models import DailySlotSet
from apps.slots.registry import set_slots

DEFAULT_SLOTS = ['10:00', '10:30', '11:00', '14:00', '14:30', '15:00', '16:00', '19:00', '19:30']


class Command(BaseCommand):
    help = 'Seed demo members and bookable slots for the coming week'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all bookings, slot sets and members before creating fresh records',
        )
        parser.add_argument('--admin-password', default='admin1234')
        parser.add_argument('--user-password', default='user1234')
        parser.add_argument('--days', type=int, default=7)

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Booking.objects.all().delete()
            DailySlotSet.objects.all().delete()
            Member.objects.all().delete()

        # ── Members ───────────────────────────────────────────────────────────
        self.stdout.write('Seeding members...')
        members = [
            ('Admin', options['admin_password'], Role.ADMIN),
            ('Alice', options['user_password'], Role.USER),
            ('Bob',   options['user_password'], Role.USER),
        ]
        created = 0
        for name, password, role in members:
            if Member.objects.filter(display_name=name).exists():
                continue
            Member.objects.create_user(name, password, role=role)
            created += 1
        self.stdout.write(self.style.SUCCESS(f'  ✔ {created} members created'))

        # ── Slots (weekdays) ──────────────────────────────────────────────────
        self.stdout.write('Seeding slots...')
        today = timezone.localdate()
        seeded = 0
        for offset in range(options['days']):
            day = today + timedelta(days=offset)
            if day.weekday() >= 5:
                continue
            set_slots(day, DEFAULT_SLOTS)
            seeded += 1
        self.stdout.write(self.style.SUCCESS(f'  ✔ Slots set for {seeded} days ({len(DEFAULT_SLOTS)} per day)'))

        self.stdout.write(self.style.SUCCESS(f'\n✅ Seed complete! {created} members, {seeded} slot days ready.'))
