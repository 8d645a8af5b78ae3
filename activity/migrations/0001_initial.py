import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('create_product', 'Product Created'), ('edit_product', 'Product Edited'), ('restock_product', 'Product Restocked'), ('archive_product', 'Product Archived'), ('unarchive_product', 'Product Restored'), ('delete_product', 'Product Deleted'), ('create_category', 'Category Created'), ('checkout', 'Sale Checkout'), ('create_user', 'User Created'), ('toggle_user_status', 'User Status Changed'), ('delete_user', 'User Deleted')], max_length=50)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the action', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='activity_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'activity_log',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['action'], name='activity_log_action_idx'),
                    models.Index(fields=['timestamp'], name='activity_log_time_idx'),
                ],
            },
        ),
    ]
