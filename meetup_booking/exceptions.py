"""
Exceptions du module de réservation.
"""


class MeetupError(Exception):
    """Erreur de base, porte un message affichable à l'utilisateur."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return str(self.message)


class BookingError(MeetupError):
    """Réservation ou annulation refusée."""


class RegistrationError(MeetupError):
    """Création du compte impossible."""


class FacebookAuthError(MeetupError):
    """Jeton Facebook absent, invalide ou API injoignable."""


class AjaxError(Exception):
    """
    Interrompt un handler AJAX avec une réponse d'erreur JSON.

    Équivalent de wp_send_json_error : le dispatcher transforme l'exception
    en {"success": false, "data": data}.
    """

    def __init__(self, data, status=200):
        super().__init__(data)
        self.data = data
        self.status = status
