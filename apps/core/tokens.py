"""
Badge and tag tokens stored as JSON string lists on models.

Owners, dogs, users, grooming sessions and loyalty programs all carry a
de-duplicated list of string tokens drawn from a ``TextChoices`` enum.
``TokenListMixin`` gives a model add/remove/has helpers for one such field.
"""

from typing import Iterable, List, Type

from django.db import models

from .exceptions import InvalidInputError


def normalize_token(value, choices: Type[models.TextChoices]) -> str:
    """
    Return the stored token for ``value``.

    Accepts either a choices member or its raw value.

    Raises:
        InvalidInputError: If the value is not one of the choices.
    """
    raw = value.value if isinstance(value, models.TextChoices) else str(value)
    if raw not in choices.values:
        raise InvalidInputError(f"Unknown {choices.__name__} '{raw}'")
    return raw


def add_token(tokens: List[str], token: str) -> bool:
    """Append ``token`` unless already present. Returns True when added."""
    if token in tokens:
        return False
    tokens.append(token)
    return True


def remove_token(tokens: List[str], token: str) -> bool:
    """Remove ``token`` if present. Returns True when removed."""
    if token not in tokens:
        return False
    tokens.remove(token)
    return True


def dedupe(tokens: Iterable[str]) -> List[str]:
    """Drop repeated tokens, keeping first occurrence order."""
    seen = []
    for token in tokens:
        if token not in seen:
            seen.append(token)
    return seen


class TokenListMixin:
    """
    Helpers for a JSON list-of-strings token field.

    Subclasses set ``token_field`` and ``token_choices``.
    """

    token_field = 'badge_tokens'
    token_choices: Type[models.TextChoices] = None

    def _token_list(self) -> List[str]:
        tokens = getattr(self, self.token_field)
        if tokens is None:
            tokens = []
            setattr(self, self.token_field, tokens)
        return tokens

    def add_token(self, value) -> bool:
        return add_token(self._token_list(), normalize_token(value, self.token_choices))

    def remove_token(self, value) -> bool:
        return remove_token(self._token_list(), normalize_token(value, self.token_choices))

    def has_token(self, value) -> bool:
        return normalize_token(value, self.token_choices) in self._token_list()

    def token_labels(self) -> List[str]:
        labels = dict(self.token_choices.choices)
        return [labels[t] for t in self._token_list() if t in labels]
