"""
Signaux émis par le module de réservation

Points d'extension pour le reste du site (équivalents des actions et
filtres WordPress du plugin d'origine).
"""

from django.dispatch import Signal

# Avant la création du compte. Arguments : username, email, errors (liste).
# Un receiver peut ajouter des messages à `errors` pour refuser l'inscription.
register_post = Signal()

# Un receiver qui retourne False désactive le mail de bienvenue.
# Arguments : user, username, email, password
new_user_notification = Signal()

# Compte créé et connecté. Arguments : user, username, email, password
user_registered = Signal()

# Profil mis à jour depuis le formulaire. Arguments : user, posted
user_meta_updated = Signal()

# Arguments : booking
seat_booked = Signal()
booking_cancelled = Signal()
