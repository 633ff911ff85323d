"""Tests for identifier keys and file naming."""

from tavern_logger import storage


def test_identifier_basic():
    assert storage.identifier_key("Nova") == "nova"


def test_identifier_equivalent_names():
    assert storage.identifier_key("Mx. Foo!") == storage.identifier_key("mx foo") == "mx_foo"


def test_identifier_collapses_whitespace():
    assert storage.identifier_key("  Nova \t  Star ") == "nova_star"


def test_identifier_drops_punctuation_without_separator():
    assert storage.identifier_key("Jean-Luc") == "jeanluc"
    assert storage.identifier_key("Nova's") == "novas"


def test_identifier_unicode():
    assert storage.identifier_key("Zoë") == "zoe"


def test_identifier_empty():
    assert storage.identifier_key("") == "unknown"
    assert storage.identifier_key("!!!") == "unknown"
    assert storage.identifier_key("雪") == "unknown"


def test_filenames():
    assert storage.log_filename("nova") == "request_nova.log"
    assert storage.raw_filename("nova") == "request_nova_raw.json"
    assert storage.FALLBACK_LOG_NAME == "error-log.log"
