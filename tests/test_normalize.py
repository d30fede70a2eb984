from smb_projectstats.normalize import (
    client_key_from_label,
    client_name_segment,
    normalize,
)


def test_normalize_trims_and_lowercases() -> None:
    """normalize trims, lower-cases and maps None to ""."""
    assert normalize("  Acme Corp ") == "acme corp"
    assert normalize(None) == ""


def test_client_name_segment_uses_first_separator_only() -> None:
    """Only the text before the first ' - ' is the client name."""
    assert client_name_segment("Jane Doe - Acme - Paris") == "Jane Doe"


def test_label_without_separator_is_used_whole() -> None:
    """A label without separator is its own name segment."""
    assert client_name_segment("Acme") == "Acme"
    assert client_key_from_label("  Acme-Corp ") == "acme-corp"


def test_client_key_from_label() -> None:
    assert client_key_from_label(" Acme  - Acme SARL") == "acme"
    assert client_key_from_label("") == ""
    assert client_key_from_label(None) == ""
