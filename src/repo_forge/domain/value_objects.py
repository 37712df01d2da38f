"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_forge.domain.exceptions import InvalidGitHubUrlError, ValidationError

_GITHUB_URL_RE = re.compile(
    r"^https?://(?:www\.)?github\.com/(?P<owner>[A-Za-z0-9\-_.]+)/(?P<name>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$"
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True, slots=True)
class RepoRef:
    """Owner / name pair identifying a GitHub repository.

    Parsed from a URL like ``https://github.com/psf/requests`` (a trailing
    ``.git`` or ``/`` is accepted).  Anything else is rejected.
    """

    owner: str
    name: str

    @classmethod
    def parse(cls, url: str) -> RepoRef:
        """Parse and validate a raw URL string."""
        url = url.strip()
        match = _GITHUB_URL_RE.match(url)
        if not match:
            raise InvalidGitHubUrlError(
                f"Invalid GitHub URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo>"
            )
        return cls(owner=match["owner"], name=match["name"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def normalize_email(email: str) -> str:
    """Trim, case-fold and validate an email address."""
    normalized = email.strip().lower()
    if not _EMAIL_RE.match(normalized):
        raise ValidationError("Invalid email address.")
    return normalized


def check_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    return password
