"""
Meetup booking
Inscription des visiteurs et réservation de places pour les meetups.

Cette application Django expose les handlers AJAX utilisés par le formulaire
d'inscription : création de compte, vérification du nombre de places,
réservation et annulation.
"""

__version__ = '1.0.0'
