# Generated manually for business tags

import uuid
import django.core.validators
import django.db.models.functions.text
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('label', models.CharField(max_length=50)),
                ('tag_type', models.CharField(choices=[('loyalty', 'Loyalty'), ('behavior', 'Behavior'), ('event', 'Event'), ('retention', 'Retention'), ('health', 'Health'), ('custom', 'Custom')], default='custom', max_length=20)),
                ('color', models.CharField(default='#E0E0E0', max_length=9, validators=[django.core.validators.RegexValidator(message='Color must be a #RRGGBB or #AARRGGBB hex string.', regex='^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$')])),
                ('icon_name', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tags',
                'ordering': ['label'],
                'indexes': [models.Index(fields=['tag_type'], name='tags_type_idx')],
                'constraints': [
                    models.UniqueConstraint(django.db.models.functions.text.Lower('label'), name='unique_tag_label_ci'),
                ],
            },
        ),
    ]
