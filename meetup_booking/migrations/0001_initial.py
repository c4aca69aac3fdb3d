from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django_extensions.db.fields
import meetup_booking.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Meetup',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='Title')),
                ('url', models.URLField(blank=True, default='', help_text='Public page of the meetup, used to bring visitors back after login', verbose_name='Page URL')),
                ('starts_at', models.DateTimeField(blank=True, null=True, verbose_name='Start date')),
                ('book_limit', models.PositiveIntegerField(default=1, help_text='Maximum number of seats a visitor can book at once', verbose_name='Seats per booking')),
                ('capacity', models.PositiveIntegerField(default=0, help_text='Total number of seats, 0 for unlimited', verbose_name='Capacity')),
                ('booking_open', models.BooleanField(default=True, verbose_name='Booking open')),
            ],
            options={
                'verbose_name': 'Meetup',
                'verbose_name_plural': 'Meetups',
            },
        ),
        migrations.CreateModel(
            name='AttendeeProfile',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('display_name', models.CharField(blank=True, max_length=250, verbose_name='Display name')),
                ('phone', meetup_booking.fields.EncryptedTextField(blank=True, verbose_name='Phone')),
                ('site_url', models.CharField(blank=True, max_length=200, verbose_name='Website')),
                ('twitter', models.CharField(blank=True, max_length=100, verbose_name='Twitter')),
                ('career', models.CharField(blank=True, max_length=200, verbose_name='Career')),
                ('fb_id', models.CharField(blank=True, db_index=True, max_length=64, verbose_name='Facebook ID')),
                ('fb_link', models.CharField(blank=True, max_length=200, verbose_name='Facebook profile')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='meetup_profile', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Attendee profile',
                'verbose_name_plural': 'Attendee profiles',
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created', django_extensions.db.fields.CreationDateTimeField(auto_now_add=True, verbose_name='created')),
                ('modified', django_extensions.db.fields.ModificationDateTimeField(auto_now=True, verbose_name='modified')),
                ('seats', models.PositiveIntegerField(default=1, verbose_name='Seats')),
                ('status', models.CharField(choices=[('booked', 'Booked'), ('cancelled', 'Cancelled')], db_index=True, default='booked', max_length=20, verbose_name='Status')),
                ('cancelled_at', models.DateTimeField(blank=True, null=True, verbose_name='Cancellation date')),
                ('meetup', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to='meetup_booking.meetup', verbose_name='Meetup')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meetup_bookings', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Booking',
                'verbose_name_plural': 'Bookings',
                'ordering': ['-created'],
                'get_latest_by': 'modified',
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='booking',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'booked')), fields=('meetup', 'user'), name='unique_active_booking_per_user'),
        ),
    ]
