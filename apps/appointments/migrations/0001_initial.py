# Generated manually for appointments and grooming sessions

import uuid
from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


SERVICE_TYPES = [('full_groom', 'Full Groom'), ('basic_bath', 'Basic Bath'), ('nail_trim', 'Nail Trim'), ('custom', 'Custom')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('owners', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField()),
                ('duration_minutes', models.PositiveIntegerField(default=60, validators=[django.core.validators.MinValueValidator(1)])),
                ('service_type', models.CharField(choices=SERVICE_TYPES, default='full_groom', max_length=20)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('no_show', 'No Show')], default='scheduled', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('audit_log', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments_created', to=settings.AUTH_USER_MODEL)),
                ('dog', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='owners.dog')),
                ('last_modified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments_modified', to=settings.AUTH_USER_MODEL)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='owners.dogowner')),
            ],
            options={
                'db_table': 'appointments',
                'ordering': ['date'],
                'indexes': [
                    models.Index(fields=['date'], name='appointments_date_idx'),
                    models.Index(fields=['dog', 'date'], name='appointments_dog_date_idx'),
                    models.Index(fields=['owner', 'date'], name='appointments_owner_date_idx'),
                    models.Index(fields=['status', 'date'], name='appointments_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GroomingSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('service_type', models.CharField(choices=SERVICE_TYPES, default='full_groom', max_length=20)),
                ('duration_minutes', models.PositiveIntegerField(default=60, validators=[django.core.validators.MinValueValidator(1)])),
                ('notes', models.TextField(blank=True)),
                ('products_used', models.JSONField(blank=True, default=list)),
                ('outcomes', models.TextField(blank=True)),
                ('is_favorite', models.BooleanField(default=False)),
                ('rating', models.PositiveSmallIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('route_order', models.PositiveIntegerField(blank=True, null=True)),
                ('session_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('session_revenue', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('tip', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('badge_tokens', models.JSONField(blank=True, default=list)),
                ('audit_log', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sessions', to='appointments.appointment')),
                ('dog', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grooming_sessions', to='owners.dog')),
                ('staff', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grooming_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'grooming_sessions',
                'ordering': ['-date'],
                'indexes': [
                    models.Index(fields=['dog', 'date'], name='sessions_dog_date_idx'),
                    models.Index(fields=['date'], name='sessions_date_idx'),
                ],
            },
        ),
    ]
