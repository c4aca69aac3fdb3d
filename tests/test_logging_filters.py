import logging

from meetup_booking.logging_filters import SensitiveDataFilter, install


def make_record(msg, args=()):
    return logging.LogRecord('meetup_booking', logging.INFO, __file__, 1, msg, args, None)


def test_redacts_email():
    record = make_record("Inscription de alice.durand@example.com")

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Inscription de a***@example.com"


def test_redacts_phone_in_args():
    record = make_record("Téléphone %s", ('06 12 34 56 78',))

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Téléphone ********78"


def test_redacts_secrets():
    record = make_record("GET /me?access_token=EAAB123secret&fields=id password=hunter2")

    SensitiveDataFilter().filter(record)

    message = record.getMessage()
    assert 'EAAB123secret' not in message
    assert 'hunter2' not in message
    assert 'access_token=********' in message


def test_keeps_short_numbers():
    record = make_record("Réservation %s : %s place(s)", (42, '3'))

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Réservation 42 : 3 place(s)"


def test_install_once():
    logger = logging.getLogger('meetup_booking.tests.install')

    install(logger)
    install(logger)

    assert len([f for f in logger.filters if isinstance(f, SensitiveDataFilter)]) == 1
