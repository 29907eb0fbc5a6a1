import random
import pytest

from wordzy.config.game_settings import validate_word_list_integrity
from wordzy.exceptions import InvalidGuess, InvalidStateTransition
from wordzy.models.game import PlayerStatus, SessionStatus
from wordzy.models.user import Player
from wordzy.services.game_service import GameService

from conftest import TARGET, TIME_LIMIT_MS

START = 10_000
PLAYERS = [Player('p1', 'alice'), Player('p2', 'bob')]


@pytest.fixture()
def session(game_service):
    return game_service.start_round('ROOM1', PLAYERS, START)


def test_start_round_creates_state_per_player(session):
    assert session.status is SessionStatus.ACTIVE
    assert session.target_word == TARGET
    assert session.deadline_ms == START + TIME_LIMIT_MS
    assert [s.join_order for s in session.players.values()] == [0, 1]
    assert all(s.status is PlayerStatus.ACTIVE for s in session.players.values())


def test_public_state_hides_target(session):
    public = session.to_public_state()
    assert TARGET not in str(public)
    assert public['timeLimit'] == TIME_LIMIT_MS
    assert public['players'] == [
        {'playerId': 'p1', 'username': 'alice'},
        {'playerId': 'p2', 'username': 'bob'},
    ]


def test_pick_target_avoids_recent_words():
    service = GameService(time_limit_ms=1000, word_list=['CRANE', 'ALLOY', 'ABOUT'], rng=random.Random(1))
    for _ in range(20):
        assert service.pick_target_word(['CRANE', 'ALLOY']) == 'ABOUT'


def test_pick_target_falls_back_when_everything_is_recent():
    service = GameService(time_limit_ms=1000, word_list=['CRANE'])
    assert service.pick_target_word(['CRANE']) == 'CRANE'


def test_wrong_guess_records_feedback(game_service, session):
    outcome = game_service.submit_guess(session, 'p1', 'nacre', START + 1_000)
    assert outcome.word == 'NACRE'
    assert outcome.feedback == [1, 1, 1, 1, 2]
    assert not outcome.solved and not outcome.failed
    assert session.players['p1'].attempts == 1


def test_correct_guess_solves_with_elapsed_time(game_service, session):
    game_service.submit_guess(session, 'p1', 'ALLOY', START + 1_000)
    outcome = game_service.submit_guess(session, 'p1', 'CRANE', START + 42_000)

    state = outcome.state
    assert outcome.solved
    assert state.status is PlayerStatus.SOLVED
    assert state.solve_attempts == 2
    assert state.solve_time_ms == 42_000


def test_sixth_wrong_guess_fails_player(game_service, session):
    for i in range(5):
        assert not game_service.submit_guess(session, 'p1', 'ALLOY', START + i).failed
    outcome = game_service.submit_guess(session, 'p1', 'ALLOY', START + 9_000)

    assert outcome.failed
    assert outcome.state.status is PlayerStatus.FAILED
    assert outcome.state.failed_at_ms == 9_000
    assert outcome.state.fail_sequence == 1


def test_no_guesses_after_finishing(game_service, session):
    game_service.submit_guess(session, 'p1', 'CRANE', START)
    with pytest.raises(InvalidGuess, match='already solved'):
        game_service.submit_guess(session, 'p1', 'ALLOY', START)

    for _ in range(6):
        game_service.submit_guess(session, 'p2', 'ALLOY', START)
    with pytest.raises(InvalidGuess, match='no guesses left'):
        game_service.submit_guess(session, 'p2', 'ALLOY', START)


@pytest.mark.parametrize('word,message', [
    (None, 'valid string'),
    (12345, 'valid string'),
    ('CRAN', 'exactly 5 letters'),
    ('CRANES', 'exactly 5 letters'),
    ('CR4NE', 'only letters'),
])
def test_malformed_guesses_rejected_without_using_an_attempt(game_service, session, word, message):
    with pytest.raises(InvalidGuess, match=message):
        game_service.submit_guess(session, 'p1', word, START)
    assert session.players['p1'].attempts == 0


def test_strict_dictionary():
    service = GameService(time_limit_ms=1000, word_list=['CRANE'], strict_dictionary=True)
    session = service.start_round('ROOM1', PLAYERS, 0)
    with pytest.raises(InvalidGuess, match='not in word list'):
        service.submit_guess(session, 'p1', 'QWXYZ', 0)
    assert service.submit_guess(session, 'p1', 'CRANE', 0).solved


def test_late_joiner_cannot_guess(game_service, session):
    with pytest.raises(InvalidGuess, match='next one'):
        game_service.submit_guess(session, 'p9', 'CRANE', START)


def test_time_left_and_expiry(game_service, session):
    assert game_service.time_left_ms(session, START + 1_000) == TIME_LIMIT_MS - 1_000
    assert not game_service.is_expired(session, START + TIME_LIMIT_MS - 1)
    assert game_service.is_expired(session, START + TIME_LIMIT_MS)
    assert game_service.time_left_ms(session, START + TIME_LIMIT_MS + 5_000) == 0


def test_end_round_forces_active_players_to_fail_together(game_service, session):
    game_service.submit_guess(session, 'p2', 'CRANE', START + 5_000)

    forced = game_service.end_round(session, START + TIME_LIMIT_MS + 700)

    assert [s.player_id for s in forced] == ['p1']
    p1 = session.players['p1']
    assert p1.status is PlayerStatus.FAILED
    assert p1.failed_at_ms == TIME_LIMIT_MS
    assert session.status is SessionStatus.ENDED
    assert game_service.end_round(session, START + TIME_LIMIT_MS + 800) == []


def test_all_finished(game_service, session):
    assert not game_service.all_finished(session)
    game_service.submit_guess(session, 'p1', 'CRANE', START)
    game_service.submit_guess(session, 'p2', 'CRANE', START)
    assert game_service.all_finished(session)


def test_ended_round_rejects_guesses(game_service, session):
    game_service.end_round(session, START + 1)
    with pytest.raises(InvalidGuess, match='not active'):
        game_service.submit_guess(session, 'p1', 'CRANE', START + 2)


def test_finished_player_state_is_frozen(session):
    state = session.players['p1']
    state.mark_solved(100)
    with pytest.raises(InvalidStateTransition):
        state.mark_failed(200, 1)
    with pytest.raises(InvalidStateTransition):
        state.record_guess('CRANE', [2, 2, 2, 2, 2])


def test_bundled_word_list_is_valid():
    assert validate_word_list_integrity() is True


@pytest.mark.parametrize('words', [['CRANE', 'CRAN'], ['CRANE', 'CR4NE'], ['CRANE', 'crane'], ['CRANE', 'CRANE']])
def test_word_list_validation_rejects_bad_lists(words):
    with pytest.raises(ValueError):
        validate_word_list_integrity(words)
