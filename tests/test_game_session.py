from random import Random

import pytest

from qwirkle.board import ORIGIN
from qwirkle.deck import remove_from_hand
from qwirkle.encode import session_to_dict
from qwirkle.errors import Reason, RuleViolation
from qwirkle.game import GameSession, GameStatus
from qwirkle.moves import Move, MoveKind
from qwirkle.rules_schema import RuleSet
from qwirkle.tiles import ALL_FACES
from qwirkle.tiles import deserialize_tile as T


def started_game(seed=3, rules=None):
    session = GameSession.create("alice", rng=Random(seed), rules=rules)
    assert session.join("bob")
    return session


def rig_hand(session, player, names):
    """Give ``player`` exactly ``names`` while keeping every face count intact."""
    wanted = [T(name) for name in names]
    session.deck.extend(session.hands[player])
    remaining = remove_from_hand(session.deck, wanted)
    assert remaining is not None
    session.deck = remaining
    session.hands[player] = wanted


def assert_conserved(session):
    counts = session.face_counts()
    assert set(counts) == set(ALL_FACES)
    assert all(count == 3 for count in counts.values())


def test_create_deals_first_hand():
    session = GameSession.create("alice", rng=Random(1))
    assert session.status is GameStatus.INITIALIZED
    assert session.current_player == "alice"
    assert len(session.hand_of("alice")) == 6
    assert len(session.deck) == 102
    assert session.scores == {"alice": 0}
    assert_conserved(session)


def test_join_activates_once():
    session = GameSession.create("alice", rng=Random(1))
    assert not session.join("alice")
    assert session.join("bob")
    assert session.status is GameStatus.ACTIVE
    assert len(session.deck) == 96
    assert not session.join("carol")
    assert session.player2 == "bob"
    assert_conserved(session)


def test_join_needs_a_full_hand_in_the_bag():
    session = GameSession.create("alice", rng=Random(1))
    session.deck = session.deck[:5]
    assert not session.join("bob")
    assert session.status is GameStatus.INITIALIZED


def test_moves_before_join_are_rejected():
    session = GameSession.create("alice", rng=Random(1))
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.pass_turn())
    assert excinfo.value.reason is Reason.GAME_NOT_ACTIVE


def test_opening_sequence_scores_and_turns():
    session = started_game()
    rig_hand(session, "alice", ["red_circle", "blue_circle", "green_star", "green_cross", "yellow_clover", "purple_diamond"])
    rig_hand(session, "bob", ["red_square", "orange_star", "orange_cross", "yellow_star", "blue_diamond", "green_clover"])

    outcome = session.submit_move("alice", Move.place([(ORIGIN, T("red_circle"))]))
    assert outcome.points == 1
    assert session.current_player == "bob"
    assert len(session.hand_of("alice")) == 6
    assert len(session.deck) == 95

    assert session.submit_move("bob", Move.place([((1, 0), T("red_square"))])).points == 2
    assert session.submit_move("alice", Move.place([((0, 1), T("blue_circle"))])).points == 2
    assert session.scores == {"alice": 3, "bob": 2}
    assert [record.points for record in session.move_history] == [1, 2, 2]
    assert_conserved(session)


def test_first_move_off_origin_changes_nothing():
    session = started_game()
    tile = session.hand_of("alice")[0]
    before = session_to_dict(session)
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.place([((1, 0), tile)]))
    assert excinfo.value.reason is Reason.NOT_AT_ORIGIN
    assert session_to_dict(session) == before


def test_turn_order_is_enforced():
    session = started_game()
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("bob", Move.pass_turn())
    assert excinfo.value.reason is Reason.NOT_YOUR_TURN
    assert session.current_player == "alice"
    assert session.move_history == []


def test_tiles_must_come_from_the_hand():
    session = started_game()
    rig_hand(session, "alice", ["red_circle", "red_square", "red_star", "red_cross", "red_clover", "red_diamond"])
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.place([(ORIGIN, T("blue_circle"))]))
    assert excinfo.value.reason is Reason.TILE_NOT_IN_HAND


def test_rejected_multi_tile_move_is_atomic():
    session = started_game()
    rig_hand(session, "alice", ["red_circle", "red_square", "red_star", "blue_cross", "green_clover", "yellow_diamond"])
    session.submit_move("alice", Move.place([(ORIGIN, T("red_circle"))]))
    rig_hand(session, "bob", ["red_square", "blue_star", "orange_star", "yellow_star", "blue_diamond", "green_clover"])

    before = session_to_dict(session)
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("bob", Move.place([((1, 0), T("red_square")), ((2, 0), T("blue_star"))]))
    assert excinfo.value.reason is Reason.ATTRIBUTE_MISMATCH
    assert session_to_dict(session) == before


def test_exchange_swaps_tiles_and_passes_the_turn():
    session = started_game()
    hand = session.hand_of("alice")
    deck_size = len(session.deck)
    outcome = session.submit_move("alice", Move.exchange(hand[:2]))
    assert outcome.kind is MoveKind.EXCHANGE
    assert outcome.points == 0
    assert len(outcome.drawn) == 2
    assert len(session.hand_of("alice")) == 6
    assert len(session.deck) == deck_size
    assert session.current_player == "bob"
    assert_conserved(session)


def test_exchange_needs_enough_tiles_in_the_bag():
    session = started_game()
    session.deck = session.deck[:1]
    hand = session.hand_of("alice")
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.exchange(hand[:2]))
    assert excinfo.value.reason is Reason.INSUFFICIENT_DECK
    assert session.hand_of("alice") == hand


def test_empty_exchange_is_rejected():
    session = started_game()
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.exchange([]))
    assert excinfo.value.reason is Reason.EMPTY_MOVE


def test_two_passes_end_the_game_with_one_bonus():
    session = started_game()
    tile = session.hand_of("alice")[0]
    session.submit_move("alice", Move.place([(ORIGIN, tile)]))
    session.submit_move("bob", Move.pass_turn())
    assert not session.is_game_over()

    outcome = session.submit_move("alice", Move.pass_turn())
    assert outcome.game_over
    assert session.status is GameStatus.COMPLETED
    assert session.end_bonus_player == "alice"
    assert session.scores == {"alice": 7, "bob": 0}
    assert session.winner() == "alice"

    assert session.check_termination()
    assert session.scores["alice"] == 7
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("bob", Move.pass_turn())
    assert excinfo.value.reason is Reason.GAME_NOT_ACTIVE


def test_passing_out_immediately_ties_without_bonus():
    session = started_game()
    session.submit_move("alice", Move.pass_turn())
    session.submit_move("bob", Move.pass_turn())
    assert session.is_game_over()
    assert session.end_bonus_player is None
    assert session.scores == {"alice": 0, "bob": 0}
    assert session.winner() == "alice"


def test_draw_tie_break_has_no_winner():
    session = started_game(rules=RuleSet(tie_break="draw"))
    session.submit_move("alice", Move.pass_turn())
    session.submit_move("bob", Move.pass_turn())
    assert session.winner() is None


def test_emptying_hand_with_empty_bag_ends_the_game():
    session = started_game()
    session.deck.clear()
    session.hands["alice"] = [T("red_circle")]
    outcome = session.submit_move("alice", Move.place([(ORIGIN, T("red_circle"))]))
    assert outcome.game_over
    assert session.hand_of("alice") == []
    assert session.scores["alice"] == 1 + 6
    assert session.winner() == "alice"


def test_available_moves_on_opening_turn():
    session = started_game()
    available = session.available_moves("alice")
    assert available.has_moves
    assert all(ranked.move.positions() == [ORIGIN] for ranked in available.moves)
    assert len(available.moves) == len(set(session.hand_of("alice")))


def test_exchange_tiles_must_come_from_the_hand():
    session = started_game()
    rig_hand(session, "alice", ["red_circle", "red_square", "red_star", "red_cross", "red_clover", "red_diamond"])
    before = session_to_dict(session)
    with pytest.raises(RuleViolation) as excinfo:
        session.submit_move("alice", Move.exchange([T("red_circle"), T("blue_circle")]))
    assert excinfo.value.reason is Reason.TILE_NOT_IN_HAND
    assert session_to_dict(session) == before


def test_session_built_without_rules_uses_defaults():
    session = GameSession(game_id="g1", player1="alice")
    assert session.rules == RuleSet()
    assert session.rules.hand_size == 6
