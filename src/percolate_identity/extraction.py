"""Declarative extraction of identity fields from provider payloads.

Each provider describes its payload with a ``UserSchema``: for every
``AuthUser`` field an ordered chain of ``FieldQuery`` entries. A chain is
evaluated first-match-wins; a query matches when its path exists and its
converter accepts the value. When nothing in a chain matches the field is
empty. Extraction never raises.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from email_validator import SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email
from loguru import logger

from percolate_identity.jsonpath import JsonPath, compile_path

Converter = Callable[[Any], str | None]

# Parent label under which reserved domains (corp.local, localhost) are syntax-checked.
_NEUTRAL_PARENT = ".example"


def as_string(value: Any) -> str | None:
    """Accept string values only."""
    return value if isinstance(value, str) else None


def as_identifier(value: Any) -> str | None:
    """Accept strings and integers (GitHub and friends use numeric ids)."""
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def as_mailbox(value: Any) -> str | None:
    """Accept values that parse as a mailbox and return the bare address.

    Only the syntax is checked. ``"Ada Lovelace <ada@example.com>"`` becomes
    ``"ada@example.com"``; directory addresses on dotless or reserved domains
    (``admin@localhost``, ``ada@corp.local``) are accepted.
    """
    text = as_string(value)
    if not text:
        return None
    text = text.strip()
    reserved = _reserved_domain_stand_in(text)
    try:
        result = validate_email(
            reserved or text,
            allow_display_name=True,
            check_deliverability=False,
            globally_deliverable=False,
        )
    except EmailNotValidError as e:
        logger.debug(f"Discarding invalid mailbox value {text!r}: {e}")
        return None

    if reserved:
        return result.normalized.removesuffix(_NEUTRAL_PARENT)
    return result.normalized


def _reserved_domain_stand_in(text: str) -> str | None:
    """Rewrite ``ada@corp.local`` as ``ada@corp.local.example``.

    email-validator rejects special-use domains outright, whatever their
    syntax. Returns None when the domain is not one of them.
    """
    head, closing = (text[:-1], ">") if text.endswith(">") else (text, "")
    _, at, domain = head.rpartition("@")
    domain = domain.strip().lower()
    if not at or not domain:
        return None
    if any(domain == name or domain.endswith("." + name) for name in SPECIAL_USE_DOMAIN_NAMES):
        return f"{head.rstrip()}{_NEUTRAL_PARENT}{closing}"
    return None


@dataclass(frozen=True)
class FieldQuery:
    """A path query plus the converter its match has to pass."""

    path: str
    convert: Converter = as_string
    compiled: JsonPath = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Compiling here makes a bad query fail when the schema is declared.
        object.__setattr__(self, "compiled", compile_path(self.path))

    def resolve(self, document: Any) -> str | None:
        value, found = self.compiled.get(document)
        if not found:
            return None
        return self.convert(value)


def first_match(queries: Sequence[FieldQuery], document: Any, default: str = "") -> str:
    """Return the first converted value of ``queries`` or ``default``."""
    for query in queries:
        value = query.resolve(document)
        if value is not None:
            return value
    return default


def chain(*queries: str | FieldQuery, convert: Converter = as_string) -> tuple[FieldQuery, ...]:
    """Build a fallback chain; plain strings get ``convert`` as converter.

    Example:
        >>> email = chain("$.emails[0].address", "$.account[0].userPrincipalName", convert=as_mailbox)
        >>> first_match(email, {"account": [{"userPrincipalName": "a@b.com"}]})
        'a@b.com'
    """
    return tuple(q if isinstance(q, FieldQuery) else FieldQuery(q, convert) for q in queries)


@dataclass(frozen=True)
class UserSchema:
    """Where one provider keeps the fields of ``AuthUser``.

    ``name`` is a sequence of chains (e.g. given name, family name). Each part
    is resolved on its own and the parts are joined with ``name_separator``.
    A missing part still leaves its separator behind, so first="" and
    last="Lovelace" give ``" Lovelace"``. Callers that want a clean display
    name have to strip it themselves.
    """

    id: tuple[FieldQuery, ...] = ()
    email: tuple[FieldQuery, ...] = ()
    name: tuple[tuple[FieldQuery, ...], ...] = ()
    username: tuple[FieldQuery, ...] = ()
    avatar_url: tuple[FieldQuery, ...] = ()
    name_separator: str = " "

    def extract(self, document: Any) -> dict[str, str]:
        """Resolve every field against ``document``.

        Returns:
            Mapping with ``id``, ``name``, ``email``, ``username`` and
            ``avatar_url``; unresolved fields are empty strings
        """
        return {
            "id": first_match(self.id, document),
            "name": self.name_separator.join(first_match(part, document) for part in self.name),
            "email": first_match(self.email, document),
            "username": first_match(self.username, document),
            "avatar_url": first_match(self.avatar_url, document),
        }
