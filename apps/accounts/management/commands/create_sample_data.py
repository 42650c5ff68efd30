"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 users (admin, alice, bob, charlie)
- 2 groups (Flat 3B, Lisbon Trip)
- A handful of expenses in each group

Groups, memberships and expenses go through the service layer, so the
data obeys the same rules as API traffic.
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.expenses.services import add_expense, get_group_balances
from apps.groups.models import Group, GroupMembership
from apps.groups.services import create_group, join_group


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        groups = self.create_groups(users)
        self.create_expenses(users, groups)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        for group in groups.values():
            self.stdout.write(f'{group.name} (invite code {group.invite_code}):')
            names = dict(
                GroupMembership.objects.filter(group=group).values_list('user_id', 'display_name')
            )
            for user_id, balance in get_group_balances(group_id=group.id).items():
                self.stdout.write(f'  {names[user_id]}: {balance.quantize(Decimal("0.01"))}')
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')
        self.stdout.write('  charlie@example.com / password123')

    def clear_data(self):
        """Clear all data from the database."""
        Expense.objects.all().delete()
        GroupMembership.objects.all().delete()
        Group.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        for key, display_name in [
            ('alice', 'Alice'),
            ('bob', 'Bob'),
            ('charlie', 'Charlie'),
        ]:
            user, _ = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'display_name': display_name}
            )
            user.set_password('password123')
            user.save()
            users[key] = user

        return users

    def create_groups(self, users):
        """Create groups and join members by invite code."""
        self.stdout.write('  Creating groups...')

        flat = create_group(
            name='Flat 3B',
            creator=users['alice'],
            description='Rent, bills and groceries',
        )
        join_group(invite_code=flat.invite_code.lower(), user=users['bob'])
        join_group(invite_code=flat.invite_code, user=users['charlie'])

        trip = create_group(
            name='Lisbon Trip',
            creator=users['bob'],
        )
        join_group(invite_code=trip.invite_code, user=users['charlie'])

        return {'flat': flat, 'trip': trip}

    def create_expenses(self, users, groups):
        """Log expenses in each group."""
        self.stdout.write('  Creating expenses...')

        expenses_data = [
            ('flat', 'alice', 'Electricity', '90.00'),
            ('flat', 'bob', 'Groceries', '45.30'),
            ('flat', 'charlie', 'Internet', '29.99'),
            ('trip', 'bob', 'Hostel', '140.00'),
            ('trip', 'charlie', 'Dinner', '62.50'),
        ]

        for group_key, payer_key, title, amount in expenses_data:
            add_expense(
                group_id=groups[group_key].id,
                title=title,
                amount=amount,
                payer=users[payer_key],
            )
