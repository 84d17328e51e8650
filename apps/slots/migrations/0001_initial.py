import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DailySlotSet',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(unique=True)),
                ('slots', models.JSONField(blank=True, default=list)),
            ],
            options={
                'verbose_name': 'Daily Slot Set',
                'verbose_name_plural': 'Daily Slot Sets',
                'ordering': ['date'],
            },
        ),
    ]
