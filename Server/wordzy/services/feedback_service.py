"""
Feedback Service

Scores a guess against the target word.
"""

from collections import Counter
from typing import List, Optional

from ..models.game import FeedbackCode


def evaluate_guess(guess: str, target: str) -> List[int]:
    """
    Implements the canonical Wordle letter evaluation algorithm.

    Returns one code per position: 2 (correct spot), 1 (elsewhere in the
    target), 0 (absent). Exact matches are resolved first and each consumes
    one occurrence of its letter, so a letter is never marked more times than
    it appears in the target, and the positionally correct copy wins.

    Args:
        guess: Guessed word
        target: Target word of the same length

    Raises:
        ValueError: If the two words differ in length
    """
    guess = guess.upper()
    target = target.upper()
    if len(guess) != len(target):
        raise ValueError(f"Guess '{guess}' and target must have the same length")

    codes: List[Optional[FeedbackCode]] = [None] * len(guess)
    remaining = Counter(target)

    # First pass: exact position matches
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            codes[i] = FeedbackCode.CORRECT
            remaining[g] -= 1

    # Second pass: present elsewhere while unconsumed copies remain
    for i, letter in enumerate(guess):
        if codes[i] is not None:
            continue
        if remaining[letter] > 0:
            codes[i] = FeedbackCode.PRESENT
            remaining[letter] -= 1
        else:
            codes[i] = FeedbackCode.ABSENT

    return [int(code) for code in codes]


def is_solved(feedback: List[int]) -> bool:
    return all(code == FeedbackCode.CORRECT for code in feedback)
