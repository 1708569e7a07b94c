# Generated manually for charges

import uuid
from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('appointments', '0001_initial'),
        ('owners', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Charge',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('charge_type', models.CharField(choices=[('full_groom', 'Full Groom'), ('basic_bath', 'Basic Bath'), ('nail_trim', 'Nail Trim'), ('custom', 'Custom Service'), ('product', 'Product')], default='full_groom', max_length=20)),
                ('payment_method', models.CharField(choices=[('unpaid', 'Unpaid'), ('cash', 'Cash'), ('credit_card', 'Credit Card'), ('debit_card', 'Debit Card'), ('zelle', 'Zelle'), ('other', 'Other')], default='unpaid', max_length=20)),
                ('is_paid', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='charges', to='appointments.appointment')),
                ('dog', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='charges', to='owners.dog')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='charges', to='owners.dogowner')),
                ('processed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='charges_processed', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'charges',
                'ordering': ['-date'],
                'indexes': [
                    models.Index(fields=['date'], name='charges_date_idx'),
                    models.Index(fields=['owner', 'date'], name='charges_owner_date_idx'),
                    models.Index(fields=['is_paid'], name='charges_is_paid_idx'),
                ],
            },
        ),
    ]
