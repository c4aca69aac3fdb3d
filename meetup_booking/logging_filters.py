"""
Filtres de logs pour masquer les données personnelles des participants
"""

import logging
import re


class SensitiveDataFilter(logging.Filter):
    """
    Masque automatiquement les données sensibles dans les logs.

    Redacte :
    - Adresses e-mail (garde la première lettre et le domaine)
    - Numéros de téléphone (garde les 2 derniers chiffres)
    - Mots de passe et tokens (password=, access_token=, token=...)
    """

    EMAIL_PATTERN = re.compile(r'\b([A-Za-z0-9])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+\.[A-Za-z]{2,})\b')

    # 8 chiffres ou plus, séparateurs usuels autorisés
    PHONE_PATTERN = re.compile(r'\+?\d[\d .\-]{6,}\d')

    SECRET_PATTERNS = [
        re.compile(r'(password[=:\s]+)[^\s,}&]+', re.IGNORECASE),
        re.compile(r'(access_token[=:\s]+)[^\s,}&]+', re.IGNORECASE),
        re.compile(r'(token[=:\s]+)[^\s,}&]+', re.IGNORECASE),
        re.compile(r'(bearer\s+)[^\s,}&]+', re.IGNORECASE),
    ]

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = self.redact(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._redact_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._redact_value(v) for v in record.args)

        return True

    def redact(self, text):
        text = self._redact_secrets(text)
        text = self.EMAIL_PATTERN.sub(r'\1***\2', text)
        return self._redact_phones(text)

    def _redact_phones(self, text):
        """
        Exemple: "06 12 34 56 78" -> "********78"
        """
        def replace_phone(match):
            digits = re.sub(r'\D', '', match.group(0))
            if len(digits) < 8:
                return match.group(0)
            return '*' * (len(digits) - 2) + digits[-2:]

        return self.PHONE_PATTERN.sub(replace_phone, text)

    def _redact_secrets(self, text):
        for pattern in self.SECRET_PATTERNS:
            text = pattern.sub(lambda m: m.group(1) + '********', text)
        return text

    def _redact_value(self, value):
        if isinstance(value, str):
            return self.redact(value)
        return value


def install(logger):
    """Attache le filtre au logger une seule fois."""
    if not any(isinstance(f, SensitiveDataFilter) for f in logger.filters):
        logger.addFilter(SensitiveDataFilter())
    return logger
