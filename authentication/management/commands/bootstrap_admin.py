"""
Management command to create (or promote) the first admin account
Usage: python manage.py bootstrap_admin --email owner@shop.com --password ... --first-name A --last-name B
"""
from django.core.management.base import BaseCommand, CommandError

from authentication.models import CustomUser


class Command(BaseCommand):
    help = 'Create the first admin account, or promote an existing account to admin'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Login email of the admin')
        parser.add_argument('--password', help='Password (required when the account does not exist)')
        parser.add_argument('--first-name', default='', help='First name')
        parser.add_argument('--last-name', default='', help='Last name')

    def handle(self, *args, **options):
        email = options['email'].lower()
        user = CustomUser.objects.filter(email__iexact=email).first()

        if user:
            user.role = CustomUser.ROLE_ADMIN
            user.is_active = True
            user.is_staff = True
            if options['password']:
                user.set_password(options['password'])
            user.save()
            self.stdout.write(self.style.SUCCESS(f'Promoted {user.username} to admin'))
            return

        if not options['password']:
            raise CommandError('--password is required to create a new account')

        user = CustomUser.objects.create_user(
            username=email,
            email=email,
            password=options['password'],
            first_name=options['first_name'],
            last_name=options['last_name'],
            role=CustomUser.ROLE_ADMIN,
            is_staff=True,
        )
        self.stdout.write(self.style.SUCCESS(f'Created admin account: {user.username}'))
