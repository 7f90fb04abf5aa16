from __future__ import annotations

import pytest

from completion.context import CompletionContextKind, classify, is_parameter_position


@pytest.mark.parametrize(
    ("before", "after", "expected"),
    [
        ('@label("lea', "", CompletionContextKind.LABEL),
        ("@label(", "", CompletionContextKind.LABEL),
        ("SQ3", "", CompletionContextKind.CALL),
        ("    let notes = SQ3R(", "", CompletionContextKind.CALL),
        ("let total:Ste", "", CompletionContextKind.TYPE),
        ("fn plan()->Ste", "", CompletionContextKind.TYPE),
        ("SQ3R(depth: 3 +", ")", CompletionContextKind.PARAMETER),
        ('    SQ3R(version: "', "", CompletionContextKind.VERSION),
        ("x = 12", "", CompletionContextKind.VARIABLE),
        ("学习", "", CompletionContextKind.INTELLIGENT),
        ("learn.", "", CompletionContextKind.INTELLIGENT),
    ],
)
def test_classify_kind(before: str, after: str, expected: CompletionContextKind) -> None:
    assert classify(before, after).kind is expected


def test_label_rule_wins_over_call_rule() -> None:
    # "@label(" also ends in "(", which the call rule would accept.
    assert classify("@label(").kind is CompletionContextKind.LABEL


def test_partial_allows_digits() -> None:
    classification = classify("    SQ3")

    assert classification.partial == "SQ3"
    assert classification.include_variables is True


def test_no_variable_overlay_after_non_identifier() -> None:
    classification = classify("    let notes = SQ3R(")

    assert classification.partial == ""
    assert classification.include_variables is False


@pytest.mark.parametrize(
    "before",
    ['@label("lea', '    SQ3R(version: "', "let total:Ste", "x = 12"],
)
def test_variable_overlay_disabled_for_excluded_contexts(before: str) -> None:
    assert classify(before).include_variables is False


def test_parameter_position_requires_closing_paren_after_cursor() -> None:
    assert is_parameter_position("SQ3R(depth: 3 +", ")") is True
    assert is_parameter_position("SQ3R(depth: 3 +", "") is False
    assert is_parameter_position("SQ3R() +", ")") is False
