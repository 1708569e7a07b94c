"""Owner deduplication using fuzzy name matching plus contact details."""

from typing import List, Tuple
import re

from fuzzywuzzy import fuzz

from ..models import DogOwner


# Thresholds for fuzzy matching
HIGH_SIMILARITY_THRESHOLD = 90
MEDIUM_SIMILARITY_THRESHOLD = 80


def normalize_name(text: str) -> str:
    """
    Normalize a person's name for comparison.

    Args:
        text: Name to normalize

    Returns:
        Lowercase name with collapsed whitespace and no punctuation
    """
    text = (text or '').lower().strip()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text


def normalize_phone(phone: str) -> str:
    """Keep digits only, so '(555) 010-1234' and '555.010.1234' compare equal."""
    return re.sub(r'\D', '', phone or '')


def find_potential_duplicates(
    *,
    owner_name: str,
    phone: str = '',
    email: str = '',
    threshold: int = MEDIUM_SIMILARITY_THRESHOLD
) -> List[Tuple[DogOwner, int, str]]:
    """
    Find owners that look like the same person.

    A candidate matches when its name is at least ``threshold`` similar and
    it shares the phone number or email. Candidates sharing contact details
    but with a dissimilar name are not reported (families share phones).

    Args:
        owner_name: Name to check
        phone: Phone number to check (any formatting)
        email: Email to check
        threshold: Minimum name similarity score (0-100)

    Returns:
        List of (owner, similarity_score, match_type) tuples sorted by score,
        match_type is 'phone' or 'email'
    """
    name_norm = normalize_name(owner_name)
    phone_norm = normalize_phone(phone)
    email_norm = (email or '').strip().lower()

    if not phone_norm and not email_norm:
        return []

    candidates = []
    for owner in DogOwner.objects.filter(is_active=True).only('id', 'owner_name', 'phone', 'email'):
        if phone_norm and normalize_phone(owner.phone) == phone_norm:
            match_type = 'phone'
        elif email_norm and owner.email.strip().lower() == email_norm:
            match_type = 'email'
        else:
            continue

        score = fuzz.ratio(name_norm, normalize_name(owner.owner_name))
        if score >= threshold:
            candidates.append((owner, score, match_type))

    candidates.sort(key=lambda c: c[1], reverse=True)
    return candidates
