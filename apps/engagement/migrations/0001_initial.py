import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.UUIDField(db_index=True)),
                ('user_name', models.CharField(max_length=150)),
                ('activity_type', models.CharField(choices=[('task_completed', 'Task Completed')], max_length=30)),
                ('description', models.CharField(max_length=255)),
                ('task_title', models.TextField(blank=True, null=True)),
                ('points', models.IntegerField(default=0, help_text='Productivity score after the event')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'verbose_name_plural': 'Activities',
            },
        ),
    ]
