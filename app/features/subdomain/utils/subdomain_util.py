import re
import time
from typing import Callable

from app.features.subdomain.schemas.subdomain_schema import SubdomainIssue, SubdomainValidation

MIN_LENGTH = 3
MAX_LENGTH = 30
MAX_ATTEMPTS = 100

# Thai block, letters through digits
THAI_RANGE = "ก-๙"

_STRIP_PATTERN = re.compile(rf"[^a-z0-9{THAI_RANGE}]")
_SLUG_PATTERN = re.compile(rf"^[a-z0-9{THAI_RANGE}]+$")

RESERVED_WORDS = frozenset({
    "admin", "api", "app", "billing", "dashboard", "help", "login",
    "register", "settings", "support", "www", "mail", "blog", "docs",
})

MESSAGES = {
    SubdomainIssue.TOO_SHORT: f"Subdomain must be at least {MIN_LENGTH} characters long",
    SubdomainIssue.TOO_LONG: f"Subdomain must be at most {MAX_LENGTH} characters long",
    SubdomainIssue.INVALID_CHARACTERS: (
        "Subdomain can only contain lowercase letters, numbers, and Thai characters "
        "without spaces or special characters"
    ),
    SubdomainIssue.TAKEN: "This subdomain is already taken",
    SubdomainIssue.RESERVED: "This subdomain is reserved and cannot be used",
}

ExistsFn = Callable[[str], bool]


def normalize(name: str | None) -> str:
    """
    Turn a business or display name into a subdomain slug.
    'My Café!' -> 'mycaf'
    """
    if not name:
        return ""
    return _STRIP_PATTERN.sub("", name.lower())


def _fail(issue: SubdomainIssue) -> SubdomainValidation:
    return SubdomainValidation(valid=False, reason=issue, message=MESSAGES[issue])


def validate(slug: str, exists: ExistsFn) -> SubdomainValidation:
    if len(slug) < MIN_LENGTH:
        return _fail(SubdomainIssue.TOO_SHORT)
    if len(slug) > MAX_LENGTH:
        return _fail(SubdomainIssue.TOO_LONG)
    if not _SLUG_PATTERN.match(slug):
        return _fail(SubdomainIssue.INVALID_CHARACTERS)
    if exists(slug):
        return _fail(SubdomainIssue.TAKEN)
    if slug in RESERVED_WORDS:
        return _fail(SubdomainIssue.RESERVED)
    return SubdomainValidation(valid=True)


def allocate_unique(desired: str, exists: ExistsFn) -> str:
    """
    Return `desired` if it is free, otherwise the first free `desired<N>`.

    Failures other than "taken" are handed back unchanged so the caller's
    own validation reports them.
    """
    result = validate(desired, exists)
    if result.valid:
        return desired
    if result.reason != SubdomainIssue.TAKEN:
        return desired

    for counter in range(1, MAX_ATTEMPTS + 1):
        candidate = f"{desired}{counter}"
        result = validate(candidate, exists)
        if result.valid:
            return candidate
        if result.reason != SubdomainIssue.TAKEN:
            # suffix pushed it past the length limit
            break

    return f"{desired}{str(int(time.time() * 1000))[-6:]}"
