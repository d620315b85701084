from dataclasses import dataclass


@dataclass(frozen=True)
class SlugRecordModel:
    """Represent a minted slug record.

    Attributes:
        slug (str):
            The unique identifier mapped to a URL.
        is_custom (bool):
            True if the slug was chosen (and paid for) by the minter,
            False if it was generated by the registry.
        sequence_id (int):
            Strictly increasing mint counter value, starting at 1. It is also
            the token id in the ownership ledger.

    Example:
        >>> record = SlugRecordModel(slug='vanity', is_custom=True, sequence_id=1)
        >>> record.slug
        'vanity'
        >>> record.sequence_id
        1
    """

    slug: str
    is_custom: bool
    sequence_id: int
