"""
Caller-side credential validation.

These checks gate whether a credential provider is called at all. They
mirror the form rules of the sign-in and sign-up screens and stay
deliberately shallow: non-empty fields, matching confirmation and a
minimum password length. Email format is not checked.
"""

from ..errors import CredentialValidationError

DEFAULT_MIN_PASSWORD_LENGTH = 6


class CredentialValidator:
    """Validates form input before credentials are built."""

    def __init__(self, min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH):
        self.min_password_length = min_password_length

    def validate_sign_in(self, email: str, password: str) -> None:
        """
        Validate sign-in input.

        Raises:
            CredentialValidationError: If email or password is blank
        """
        self._require_filled(email=email, password=password)

    def validate_sign_up(self, email: str, password: str, confirm_password: str) -> None:
        """
        Validate sign-up input.

        Raises:
            CredentialValidationError: If a field is blank, the passwords
                differ or the password is too short
        """
        self._require_filled(email=email, password=password, confirm_password=confirm_password)

        if password != confirm_password:
            raise CredentialValidationError("Passwords don't match", field="confirm_password")

        if len(password) < self.min_password_length:
            raise CredentialValidationError(
                f"Password should be at least {self.min_password_length} characters long",
                field="password"
            )

    def validate_social_provider(self, provider: str) -> None:
        """Raises CredentialValidationError if no provider name is given."""
        self._require_filled(provider=provider)

    @staticmethod
    def _require_filled(**fields: str) -> None:
        for name, value in fields.items():
            if not value or not value.strip():
                raise CredentialValidationError("Please fill in all fields", field=name)
