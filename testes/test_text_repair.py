import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from syndicator.parsers.text_repair import MOJIBAKE_REPLACEMENTS, repair_mojibake


def test_every_known_sequence_is_replaced():
    for bad, good in MOJIBAKE_REPLACEMENTS:
        repaired = repair_mojibake(f"a{bad}b")
        assert bad not in repaired
        assert repaired == f"a{good}b"


def test_punctuation_in_sentence():
    text = "â€œQuotedâ€\u009d â€“ then â€¢ item"
    assert repair_mojibake(text) == "“Quoted” – then • item"


def test_non_breaking_space_artifact():
    assert repair_mojibake("10Â km") == "10 km"


def test_clean_text_unchanged():
    text = "<p>Plain ASCII and accents: café, naïve ’ok’</p>"
    assert repair_mojibake(text) == text
    assert repair_mojibake("") == ""


def test_real_circumflex_before_space_is_kept():
    text = "ÂNGULO Â DIREITA"
    assert repair_mojibake(text) == text
