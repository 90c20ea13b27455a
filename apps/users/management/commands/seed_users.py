"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Management command to seed one demo user per role.
-------------------------------------------------------------------------
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.users.models import CustomUser, UserRole


DEMO_USERS = [
    {'email': 'civitas@demo.id', 'name': 'Civitas', 'role': UserRole.CIVITAS},
    {'email': 'bendahara@demo.id', 'name': 'Bendahara', 'role': UserRole.BENDAHARA},
    {'email': 'kepsek@demo.id', 'name': 'Kepsek', 'role': UserRole.KEPSEK},
]


class Command(BaseCommand):
    help = 'Seed demo users for each role (idempotent)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='password123',
            help='Password assigned to newly created demo users',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created_count = 0
        for data in DEMO_USERS:
            if CustomUser.objects.filter(email=data['email']).exists():
                self.stdout.write(f"  - {data['email']} already exists, skipped")
                continue
            CustomUser.objects.create_user(
                email=data['email'],
                password=options['password'],
                name=data['name'],
                role=data['role'],
            )
            created_count += 1
            self.stdout.write(self.style.SUCCESS(f"  + {data['email']} ({data['role']})"))

        self.stdout.write(self.style.SUCCESS(f'Seeded {created_count} demo user(s).'))
