import pytest
from collections import Counter

from wordzy.services.feedback_service import evaluate_guess, is_solved


def test_exact_match_is_all_correct():
    feedback = evaluate_guess('CRANE', 'CRANE')
    assert feedback == [2, 2, 2, 2, 2]
    assert is_solved(feedback)


def test_no_common_letters_is_all_absent():
    assert evaluate_guess('BUMPY', 'CRANE') == [0, 0, 0, 0, 0]


def test_guessed_letter_more_often_than_in_target():
    # Three L's guessed, two in the target: exactly two are marked
    feedback = evaluate_guess('LOLLY', 'ALLOY')
    assert feedback == [1, 1, 2, 0, 2]
    marked_l = sum(1 for letter, code in zip('LOLLY', feedback) if letter == 'L' and code)
    assert marked_l == 2


def test_positionally_correct_copy_wins():
    # One E in the target; the E in the matching spot is correct, the other absent
    assert evaluate_guess('EERIE', 'CRANE') == [0, 0, 1, 0, 2]


def test_letter_in_target_twice_guessed_once():
    assert evaluate_guess('LEMON', 'ALLOY') == [1, 0, 0, 2, 0]


def test_case_insensitive():
    assert evaluate_guess('crane', 'CRANE') == evaluate_guess('CRANE', 'crane')


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        evaluate_guess('CRANES', 'CRANE')


@pytest.mark.parametrize('guess,target', [
    ('LOLLY', 'ALLOY'),
    ('SPEED', 'ERASE'),
    ('ABBEY', 'BABES'),
    ('CRANE', 'NACRE'),
    ('TOTAL', 'OTTER'),
])
def test_markings_never_exceed_target_counts(guess, target):
    feedback = evaluate_guess(guess, target)

    exact = sum(1 for g, t in zip(guess, target) if g == t)
    assert feedback.count(2) == exact

    marked = Counter(letter for letter, code in zip(guess, feedback) if code)
    available = Counter(target)
    for letter, count in marked.items():
        assert count <= available[letter]

    # Pure: same input, same output
    assert evaluate_guess(guess, target) == feedback
