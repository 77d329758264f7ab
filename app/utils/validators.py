"""
A collection of Pydantic validators
See https://docs.pydantic.dev/latest/concepts/validators/#reusing-validators
"""


def email_normalizer(email: object) -> object:
    """
    Normalize the email address by lowercasing it. We also remove trailing spaces.
    If the email is not a string, for example None, it is returned as is.
    This function is intended to be used as a Pydantic `before` validator, the format is then checked by `EmailStr`.
    """
    if not isinstance(email, str):
        return email
    return email.lower().strip()


def trailing_spaces_remover(value: str | None) -> str | None:
    """
    Remove trailing spaces.

    If the value is None, it is returned as is. The validator can thus be used for optional values.

    This function is intended to be used as a Pydantic validator.
    """
    if value is not None:
        return value.strip()
    return value
