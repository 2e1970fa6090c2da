"""Phone number canonicalization.

Every mobile number that is stored, looked up or compared goes through
``normalize_phone_number`` first, so uniqueness checks and lookups do not
depend on how the client formatted the number.
"""

import re

from contacts_api.errors import InvalidPhoneNumber

# Separators people type between digit groups
SEPARATORS_REGEX = re.compile(r'[\s\-.()]')

DEFAULT_COUNTRY_CODE = '1'
NATIONAL_NUMBER_LENGTH = 10
MIN_INTERNATIONAL_DIGITS = 8
MAX_INTERNATIONAL_DIGITS = 15  # E.164 limit


def normalize_phone_number(phone, default_country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Normalize a phone number to E.164 format.

    Args:
        phone: Phone number in any common format, e.g. '(555) 123-4567',
            '+44 20 7946 0958' or '0044 20 7946 0958'
        default_country_code: Country code applied to national numbers

    Returns:
        Phone number in E.164 format (e.g. '+15551234567')

    Raises:
        InvalidPhoneNumber: If the input cannot be read as a phone number
    """
    if not phone or not isinstance(phone, str):
        raise InvalidPhoneNumber()

    cleaned = SEPARATORS_REGEX.sub('', phone.strip())

    if cleaned.startswith('+'):
        digits = cleaned[1:]
        international = True
    elif cleaned.startswith('00'):
        digits = cleaned[2:]
        international = True
    else:
        digits = cleaned
        international = False

    if not digits.isdigit() or not digits.isascii():
        raise InvalidPhoneNumber()

    if not international:
        if len(digits) == NATIONAL_NUMBER_LENGTH:
            digits = default_country_code + digits
        elif (len(digits) == NATIONAL_NUMBER_LENGTH + len(default_country_code)
              and digits.startswith(default_country_code)):
            pass
        else:
            raise InvalidPhoneNumber()

    if digits.startswith('0'):
        raise InvalidPhoneNumber()
    if not MIN_INTERNATIONAL_DIGITS <= len(digits) <= MAX_INTERNATIONAL_DIGITS:
        raise InvalidPhoneNumber()

    return '+' + digits
