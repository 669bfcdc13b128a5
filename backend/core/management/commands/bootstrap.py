from django.core.management import call_command
from django.core.management.base import BaseCommand

from backend.core.utils import ensure_default_admin


class Command(BaseCommand):
    help = 'Apply migrations and seed the default admin account. Safe to run on every deploy.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-migrate',
            action='store_true',
            help='Only seed the default admin, do not run migrations',
        )
        parser.add_argument('--username', help='Override DEFAULT_ADMIN_USERNAME')
        parser.add_argument('--password', help='Override DEFAULT_ADMIN_PASSWORD')

    def handle(self, *args, **options):
        if not options['skip_migrate']:
            self.stdout.write('Applying migrations...')
            call_command('migrate', interactive=False, verbosity=options['verbosity'])

        user, created = ensure_default_admin(
            username=options.get('username'),
            password=options.get('password'),
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'Created default admin "{user.username}"'))
        else:
            self.stdout.write(f'Admin "{user.username}" already exists, nothing to seed')
