# Generated manually for crash reports

import uuid
import django.utils.timezone
from django.db import migrations, models

import apps.diagnostics.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CrashReport',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('report_type', models.CharField(choices=[('crash', 'Crash'), ('fatal_error', 'Fatal Error'), ('data_corruption', 'Data Corruption')], default='crash', max_length=20)),
                ('message', models.TextField()),
                ('stack_trace', models.TextField(blank=True)),
                ('device_info', models.CharField(blank=True, max_length=255)),
                ('resolved', models.BooleanField(default=False)),
                ('app_version', models.CharField(default=apps.diagnostics.models._current_version, max_length=32)),
                ('build_number', models.CharField(blank=True, max_length=32)),
                ('os_version', models.CharField(blank=True, max_length=64)),
                ('device_model', models.CharField(blank=True, max_length=64)),
            ],
            options={
                'db_table': 'crash_reports',
                'ordering': ['-date'],
                'indexes': [
                    models.Index(fields=['resolved', 'date'], name='crash_reports_resolved_idx'),
                ],
            },
        ),
    ]
