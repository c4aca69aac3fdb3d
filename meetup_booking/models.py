"""
Modèles de données des meetups

Un meetup limite le nombre de places par réservation (book_limit) et,
optionnellement, le nombre total de places (capacity). Les informations
complémentaires des participants sont stockées dans AttendeeProfile.
"""

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _
from django_extensions.db.models import TimeStampedModel

from .fields import EncryptedTextField


def fit_to_field(model, field_name, value):
    """Tronque `value` à la longueur maximale de la colonne `field_name`."""
    max_length = model._meta.get_field(field_name).max_length
    if max_length and value:
        return value[:max_length]
    return value


class Meetup(models.Model):
    """Un événement pour lequel les visiteurs réservent des places."""

    title = models.CharField(
        max_length=200,
        verbose_name=_('Title')
    )

    url = models.URLField(
        blank=True,
        default='',
        verbose_name=_('Page URL'),
        help_text=_('Public page of the meetup, used to bring visitors back after login')
    )

    starts_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Start date')
    )

    book_limit = models.PositiveIntegerField(
        default=1,
        verbose_name=_('Seats per booking'),
        help_text=_('Maximum number of seats a visitor can book at once')
    )

    capacity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Capacity'),
        help_text=_('Total number of seats, 0 for unlimited')
    )

    booking_open = models.BooleanField(
        default=True,
        verbose_name=_('Booking open')
    )

    class Meta:
        verbose_name = _('Meetup')
        verbose_name_plural = _('Meetups')

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return self.url

    @property
    def booked_seats(self):
        total = self.bookings.filter(status=Booking.STATUS_BOOKED).aggregate(total=Sum('seats'))['total']
        return total or 0

    @property
    def seats_left(self):
        """Places restantes, None si la capacité est illimitée."""
        if not self.capacity:
            return None
        return max(self.capacity - self.booked_seats, 0)


class Booking(TimeStampedModel):
    """Réservation d'un ou plusieurs sièges par un utilisateur."""

    STATUS_BOOKED = 'booked'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_BOOKED, _('Booked')),
        (STATUS_CANCELLED, _('Cancelled')),
    ]

    meetup = models.ForeignKey(
        Meetup,
        on_delete=models.CASCADE,
        related_name='bookings',
        verbose_name=_('Meetup')
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='meetup_bookings',
        verbose_name=_('User')
    )

    seats = models.PositiveIntegerField(
        default=1,
        verbose_name=_('Seats')
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_BOOKED,
        db_index=True,
        verbose_name=_('Status')
    )

    cancelled_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Cancellation date')
    )

    class Meta(TimeStampedModel.Meta):
        verbose_name = _('Booking')
        verbose_name_plural = _('Bookings')
        ordering = ['-created']
        # Une seule réservation active par utilisateur et par meetup
        constraints = [
            models.UniqueConstraint(
                fields=['meetup', 'user'],
                condition=models.Q(status='booked'),
                name='unique_active_booking_per_user',
            )
        ]

    def __str__(self):
        return f"{self.user} - {self.meetup} ({self.seats}) - {self.get_status_display()}"

    @property
    def is_active(self):
        return self.status == self.STATUS_BOOKED


class AttendeeProfile(models.Model):
    """
    Informations complémentaires saisies dans le formulaire d'inscription.

    Le téléphone est chiffré au repos.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='meetup_profile',
        verbose_name=_('User')
    )

    display_name = models.CharField(
        max_length=250,
        blank=True,
        verbose_name=_('Display name')
    )

    phone = EncryptedTextField(
        blank=True,
        verbose_name=_('Phone')
    )

    site_url = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Website')
    )

    twitter = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Twitter')
    )

    career = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Career')
    )

    fb_id = models.CharField(
        max_length=64,
        blank=True,
        db_index=True,
        verbose_name=_('Facebook ID')
    )

    fb_link = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Facebook profile')
    )

    class Meta:
        verbose_name = _('Attendee profile')
        verbose_name_plural = _('Attendee profiles')

    def __str__(self):
        return self.display_name or str(self.user)

    @classmethod
    def for_user(cls, user):
        profile, created = cls.objects.get_or_create(user=user)
        return profile
