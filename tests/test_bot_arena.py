from qwirkle.board import Axis
from qwirkle.service import GameStateView
from qwirkle.tiles import ALL_FACES

from bots.baseline_greedy import GreedyBot
from bots.bot_arena import run_match
from bots.random_bot import RandomBot


def test_run_match_plays_a_full_game():
    results = run_match(GreedyBot(), RandomBot(seed=3), seed=7)
    assert results["completed"]
    assert results["turns"] > 0
    assert set(results["scores"]) == {"bot_a", "bot_b"}

    session = results["service"].store.load(results["game_id"])
    counts = session.face_counts()
    assert set(counts) == set(ALL_FACES)
    assert all(count == 3 for count in counts.values())

    for pos, _ in session.board.tiles():
        for axis in Axis:
            assert len(session.board.line(pos, axis)) + 1 <= 6

    placed_points = sum(entry["points"] for entry in results["history"])
    bonus = session.rules.end_game_bonus if session.end_bonus_player else 0
    assert sum(results["scores"].values()) == placed_points + bonus


def test_greedy_bot_takes_the_best_placement():
    view = GameStateView(
        game_id="g1",
        status="active",
        current_player="bot_a",
        player1="bot_a",
        player2="bot_b",
        your_hand=["red_square", "blue_circle", "green_circle"],
        hand_labels=[],
        board_tiles=[{"x": 0, "y": 0, "tile": "red_circle"}],
        scores={"bot_a": 0, "bot_b": 0},
        remaining_tiles=90,
        is_your_turn=True,
        winner=None,
        end_bonus_player=None,
        available_moves={
            "has_moves": True,
            "moves": [
                {"move_type": "place", "tiles": [{"x": 1, "y": 0, "tile": "red_square"}], "points": 2},
                {
                    "move_type": "place",
                    "tiles": [{"x": 0, "y": 1, "tile": "blue_circle"}, {"x": 0, "y": 2, "tile": "green_circle"}],
                    "points": 6,
                },
            ],
        },
    )
    move = GreedyBot().choose_move(view)
    assert move["move_type"] == "place"
    assert len(move["tiles"]) == 2
    assert "points" not in move


def test_bots_exchange_when_stuck():
    view = GameStateView(
        game_id="g1",
        status="active",
        current_player="bot_a",
        player1="bot_a",
        player2="bot_b",
        your_hand=["red_square", "red_star", "red_square", "blue_clover"],
        hand_labels=[],
        board_tiles=[],
        scores={"bot_a": 0, "bot_b": 0},
        remaining_tiles=2,
        is_your_turn=True,
        winner=None,
        end_bonus_player=None,
        available_moves={"has_moves": False, "moves": [{"move_type": "exchange"}, {"move_type": "pass"}]},
    )
    move = GreedyBot().choose_move(view)
    assert move["move_type"] == "exchange"
    assert move["tiles"] == ["red_square", "blue_clover"]

    move = RandomBot(seed=1).choose_move(view)
    assert move["move_type"] == "exchange"
    assert 1 <= len(move["tiles"]) <= 2

    view.remaining_tiles = 0
    assert GreedyBot().choose_move(view) == {"move_type": "pass"}
