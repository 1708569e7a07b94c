"""
Management command to seed a demo grooming business.

Usage:
    python manage.py seed_demo_data [--clear] [--seed 42]

This creates:
- 3 staff accounts (owner, groomer, receptionist)
- Business tags
- 6 clients with 1-2 dogs each
- Past (completed) and upcoming appointments
- Charges for completed visits, some unpaid
- Loyalty programs fed by the completed visits
- A holiday reward pool
"""

import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.appointments.models import Appointment, AppointmentStatus, GroomingSession, ServiceType
from apps.appointments.services import (
    schedule_appointment,
    update_appointment_status,
    log_grooming_session,
    AppointmentConflictError,
)
from apps.billing.models import Charge, PaymentMethod
from apps.billing.services import record_charge
from apps.diagnostics.models import CrashReport
from apps.loyalty.models import LoyaltyProgram, RewardPool
from apps.loyalty.services import create_reward_pool
from apps.owners.models import DogOwner, Dog
from apps.owners.services import create_owner, add_dog
from apps.tags.models import Tag, TagType
from apps.tags.services import create_tag, apply_tag

DEMO_PASSWORD = 'password123'

SERVICE_PRICES = {
    ServiceType.FULL_GROOM: Decimal('85.00'),
    ServiceType.BASIC_BATH: Decimal('45.00'),
    ServiceType.NAIL_TRIM: Decimal('20.00'),
    ServiceType.CUSTOM: Decimal('60.00'),
}

CLIENTS = [
    ('Maria Lopez', 'maria@example.com', '555-0101', [('Biscuit', 'Poodle'), ('Pepper', 'Schnauzer')]),
    ('James Carter', 'james@example.com', '555-0102', [('Rocky', 'Boxer')]),
    ('Aiko Tanaka', 'aiko@example.com', '555-0103', [('Mochi', 'Shiba Inu')]),
    ('Sam Okafor', 'sam@example.com', '555-0104', [('Luna', 'Golden Retriever'), ('Max', 'Beagle')]),
    ('Priya Shah', 'priya@example.com', '555-0105', [('Coco', 'Cocker Spaniel')]),
    ('Tom Becker', 'tom@example.com', '555-0106', [('Duke', 'German Shepherd')]),
]

TAGS = [
    ('VIP', TagType.LOYALTY),
    ('Anxious', TagType.BEHAVIOR),
    ('Birthday Month', TagType.EVENT),
    ('Win-back', TagType.RETENTION),
    ('Allergies', TagType.HEALTH),
]


class Command(BaseCommand):
    help = 'Seed demo owners, dogs, appointments, charges and loyalty data'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Remove existing business data before seeding',
        )
        parser.add_argument('--seed', type=int, default=42, help='Random seed')

    @transaction.atomic
    def handle(self, *args, **options):
        self.rng = random.Random(options['seed'])

        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Seeding demo data...')
        staff = self.create_staff()
        tags = self.create_tags(staff['owner'])
        owners = self.create_clients(staff['receptionist'], tags)
        self.create_history(owners, staff)
        self.create_upcoming(owners, staff['receptionist'])
        create_reward_pool(name='Holiday Bonus', total_points=1000, user=staff['owner'])

        self.stdout.write(self.style.SUCCESS('Demo data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Staff accounts:')
        for user in staff.values():
            self.stdout.write(f'  {user.email} / {DEMO_PASSWORD} ({user.role})')

    def clear_data(self):
        """Delete business records; superusers are kept."""
        Charge.objects.all().delete()
        GroomingSession.objects.all().delete()
        Appointment.objects.all().delete()
        LoyaltyProgram.objects.all().delete()
        RewardPool.objects.all().delete()
        Dog.objects.all().delete()
        DogOwner.objects.all().delete()
        Tag.objects.all().delete()
        CrashReport.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_staff(self):
        self.stdout.write('  Creating staff...')
        staff = {}
        for key, email, name, role in [
            ('owner', 'owner@furfolio.example', 'Olivia Owner', UserRole.OWNER),
            ('groomer', 'groomer@furfolio.example', 'Gabe Groomer', UserRole.GROOMER),
            ('receptionist', 'desk@furfolio.example', 'Rita Reception', UserRole.RECEPTIONIST),
        ]:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={'display_name': name, 'role': role, 'verified': True},
            )
            user.set_password(DEMO_PASSWORD)
            user.save()
            staff[key] = user
        return staff

    def create_tags(self, actor):
        self.stdout.write('  Creating tags...')
        return [create_tag(label=label, tag_type=tag_type, actor=actor.email) for label, tag_type in TAGS]

    def create_clients(self, actor, tags):
        self.stdout.write('  Creating clients and dogs...')
        owners = []
        for name, email, phone, dogs in CLIENTS:
            owner = create_owner(owner_name=name, email=email, phone=phone, created_by=actor, allow_duplicate=True)
            for dog_name, breed in dogs:
                add_dog(owner_id=owner.id, name=dog_name, breed=breed, created_by=actor)
            if self.rng.random() < 0.5:
                apply_tag(tag_id=self.rng.choice(tags).id, owner_id=owner.id, actor=actor.email)
            owners.append(owner)
        return owners

    def create_history(self, owners, staff):
        """Completed visits over the last six months, each with a charge and session."""
        self.stdout.write('  Creating visit history...')
        now = timezone.now()
        for owner in owners:
            for dog in owner.dogs.all():
                for visit in range(self.rng.randint(1, 5)):
                    when = now - timedelta(days=self.rng.randint(3, 180), hours=self.rng.randint(0, 6))
                    service = self.rng.choice(list(ServiceType))
                    try:
                        appointment = schedule_appointment(
                            owner_id=owner.id,
                            dog_id=dog.id,
                            date=when,
                            service_type=service,
                            created_by=staff['receptionist'],
                        )
                    except AppointmentConflictError as e:
                        self.stdout.write(self.style.WARNING(f'    skipped visit: {e}'))
                        continue
                    update_appointment_status(
                        appointment_id=appointment.id,
                        status=AppointmentStatus.COMPLETED,
                        updated_by=staff['groomer'],
                    )
                    price = SERVICE_PRICES[service]
                    paid = self.rng.random() < 0.85
                    record_charge(
                        owner_id=owner.id,
                        dog=dog,
                        appointment=appointment,
                        amount=price,
                        charge_type=service,
                        date=when,
                        payment_method=self.rng.choice(
                            [PaymentMethod.CASH, PaymentMethod.CREDIT_CARD, PaymentMethod.ZELLE]
                        ) if paid else PaymentMethod.UNPAID,
                        created_by=staff['receptionist'],
                    )
                    log_grooming_session(
                        dog_id=dog.id,
                        staff=staff['groomer'],
                        appointment=appointment,
                        date=when,
                        service_type=service,
                        duration_minutes=appointment.duration_minutes,
                        rating=self.rng.randint(2, 5),
                        session_revenue=price,
                        session_cost=(price * Decimal('0.3')).quantize(Decimal('0.01')),
                        tip=Decimal(self.rng.choice([0, 5, 10])),
                    )

    def create_upcoming(self, owners, actor):
        self.stdout.write('  Creating upcoming appointments...')
        now = timezone.now().replace(minute=0, second=0, microsecond=0)
        for index, owner in enumerate(owners):
            dog = owner.dogs.first()
            schedule_appointment(
                owner_id=owner.id,
                dog_id=dog.id,
                date=now + timedelta(days=index + 1, hours=2),
                service_type=self.rng.choice(list(ServiceType)),
                created_by=actor,
            )
