import uuid

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
            name='Activity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('type', models.CharField(choices=[('volunteer_work', 'Volunteer work'), ('training', 'Training'), ('meeting', 'Meeting'), ('event', 'Event'), ('workshop', 'Workshop'), ('orientation', 'Orientation'), ('cleanup', 'Cleanup'), ('fundraising', 'Fundraising'), ('awareness', 'Awareness'), ('other', 'Other')], default='other', max_length=32)),
                ('max_participants', models.PositiveIntegerField(blank=True, null=True)),
                ('current_participants', models.PositiveIntegerField(default=0)),
                ('is_recurring', models.BooleanField(default=False)),
                ('recurrence_rule', models.CharField(blank=True, max_length=255, null=True)),
                ('address', models.CharField(blank=True, max_length=255, null=True)),
                ('city', models.CharField(blank=True, max_length=120, null=True)),
                ('state', models.CharField(blank=True, max_length=120, null=True)),
                ('zip_code', models.CharField(blank=True, max_length=20, null=True)),
                ('country', models.CharField(blank=True, max_length=120, null=True)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('is_online', models.BooleanField(default=False)),
                ('meeting_url', models.URLField(blank=True, max_length=1024, null=True)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('timezone', models.CharField(default='UTC', max_length=64)),
                ('opportunity_id', models.UUIDField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('scheduled', 'Scheduled'), ('confirmed', 'Confirmed'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('postponed', 'Postponed')], default='scheduled', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['start_date'],
                'indexes': [
                    models.Index(fields=['created_by', 'start_date'], name='activity_owner_start_idx'),
                    models.Index(fields=['start_date'], name='activity_start_idx'),
                    models.Index(fields=['status'], name='activity_status_idx'),
                    models.Index(fields=['opportunity_id', 'start_date'], name='activity_opp_start_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('start_date__lt', models.F('end_date'))), name='activity_start_before_end'),
                    models.CheckConstraint(condition=models.Q(('max_participants__isnull', True), ('current_participants__lte', models.F('max_participants')), _connector='OR'), name='activity_within_capacity'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ActivityMaterial',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('unit', models.CharField(blank=True, max_length=32, null=True)),
                ('is_required', models.BooleanField(default=True)),
                ('provided_by', models.CharField(blank=True, help_text='Who brings it', max_length=255, null=True)),
                ('activity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materials', to='activities.activity')),
            ],
        ),
        migrations.CreateModel(
            name='ActivityRequirement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('requirement_type', models.CharField(choices=[('age', 'Age'), ('experience', 'Experience'), ('education', 'Education'), ('skill', 'Skill'), ('language', 'Language'), ('availability', 'Availability'), ('location', 'Location'), ('document', 'Document'), ('background_check', 'Background check'), ('custom', 'Custom')], default='custom', max_length=32)),
                ('is_required', models.BooleanField(default=True)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], default='medium', max_length=16)),
                ('validation_rules', models.JSONField(blank=True, default=dict)),
                ('min_value', models.FloatField(blank=True, null=True)),
                ('max_value', models.FloatField(blank=True, null=True)),
                ('allowed_values', models.JSONField(blank=True, default=list)),
                ('activity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='requirements', to='activities.activity')),
            ],
        ),
        migrations.CreateModel(
            name='ActivityParticipant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('organizer', 'Organizer'), ('coordinator', 'Coordinator'), ('facilitator', 'Facilitator'), ('participant', 'Participant'), ('observer', 'Observer')], default='participant', max_length=32)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('activity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='activities.activity')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activity_participations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['activity', 'joined_at'], name='participant_activity_idx'),
                    models.Index(fields=['user'], name='participant_user_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('activity', 'user'), name='participant_activity_user_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ActivityConfirmation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('declined', 'Declined'), ('maybe', 'Maybe')], default='pending', max_length=16)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.CharField(blank=True, max_length=500, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('activity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='confirmations', to='activities.activity')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activity_confirmations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['activity', 'status'], name='confirmation_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('activity', 'user'), name='confirmation_activity_user_uniq'),
                ],
            },
        ),
    ]
