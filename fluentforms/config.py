"""Environment-driven settings for FluentForms.

Settings are read once from environment variables into an immutable
FormSettings, which is then passed explicitly to the mail and HTTP adapters.
Nothing in the package reads the environment on its own.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag(raw: Optional[str]) -> bool:
    return raw is not None and raw.strip().lower() in TRUTHY


def _optional(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


@dataclass(frozen=True)
class FormSettings:
    """Application settings used when delivering form submissions.

    Attributes:
        app_name: Name used as sender name and in mail subjects
        app_env: Deployment environment; mail is only sent in "production"
        debug: Expose transport error messages to the user
        mail_to: Recipient address for submissions
        mail_to_name: Recipient display name
        mail_from: Sender address
        mailersend_api_key: API key for the MailerSend transport
        submit_delay: Minimum seconds between render and submit

    Examples:
        >>> settings = FormSettings.from_env({"APP_ENV": "production", "APP_DEBUG": "true"})
        >>> settings.is_production, settings.debug, settings.app_name
        (True, True, 'Contact Form')
    """
    app_name: str = "Contact Form"
    app_env: str = "local"
    debug: bool = False
    mail_to: Optional[str] = None
    mail_to_name: Optional[str] = None
    mail_from: Optional[str] = None
    mailersend_api_key: Optional[str] = None
    submit_delay: float = 3

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FormSettings":
        """Read settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Raises:
            ValueError: If FORM_SUBMIT_DELAY is not a number
        """
        env = os.environ if environ is None else environ
        delay = _optional(env.get("FORM_SUBMIT_DELAY"))
        return cls(
            app_name=_optional(env.get("APP_NAME")) or cls.app_name,
            app_env=(_optional(env.get("APP_ENV")) or cls.app_env).lower(),
            debug=_flag(env.get("APP_DEBUG")),
            mail_to=_optional(env.get("MAIL_TO")),
            mail_to_name=_optional(env.get("MAIL_TO_NAME")),
            mail_from=_optional(env.get("MAIL_FROM")),
            mailersend_api_key=_optional(env.get("MAILERSEND_API_KEY")),
            submit_delay=float(delay) if delay is not None else cls.submit_delay,
        )


__all__ = [
    "FormSettings",
]
