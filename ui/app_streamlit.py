"""Streamlit UI for playing Qwirkle against the greedy bot."""

from __future__ import annotations

import streamlit as st

from bots.baseline_greedy import GreedyBot
from qwirkle.encode import decode_board
from qwirkle.service import GameService, GameStateView
from qwirkle.tiles import deserialize_tile, tile_label

HUMAN = "you"
BOT = "greedy_bot"


def get_service() -> GameService:
    if "game_service" not in st.session_state:
        st.session_state["game_service"] = GameService()
    return st.session_state["game_service"]


def rerun() -> None:
    try:
        st.rerun()
    except AttributeError:
        st.experimental_rerun()


def start_game(service: GameService, *, bot_first: bool) -> None:
    creator, joiner = (BOT, HUMAN) if bot_first else (HUMAN, BOT)
    game_id = service.create_game(creator).game_id
    service.join_game(game_id, joiner)
    st.session_state["game_id"] = game_id
    play_bot_turns(service, game_id)
    rerun()


def play_bot_turns(service: GameService, game_id: str) -> None:
    bot = GreedyBot()
    view = service.get_game_state(game_id, BOT)
    while view.status == "active" and view.is_your_turn:
        result = service.submit_move(game_id, BOT, bot.choose_move(view))
        if not result.ok:
            st.error(f"Bot move rejected: {result.message}")
            return
        view = service.get_game_state(game_id, BOT)


def unique_options(tiles: list[str]) -> dict[str, str]:
    return {f"{tile_label(deserialize_tile(tile))} [{idx}]": tile for idx, tile in enumerate(tiles)}


def describe_candidate(candidate: dict) -> str:
    placed = ", ".join(
        f"{tile_label(deserialize_tile(entry['tile']))} at ({entry['x']}, {entry['y']})" for entry in candidate["tiles"]
    )
    return f"{placed} (+{candidate['points']})"


def submit(service: GameService, game_id: str, payload: dict) -> None:
    result = service.submit_move(game_id, HUMAN, payload)
    if not result.ok:
        st.error(result.message)
        return
    play_bot_turns(service, game_id)
    rerun()


def render_move_controls(service: GameService, view: GameStateView) -> None:
    st.subheader("Your move")
    available = view.available_moves or {"has_moves": False, "moves": []}
    if available["has_moves"]:
        options = {f"{describe_candidate(c)} [{idx}]": c for idx, c in enumerate(available["moves"])}
        selection = st.selectbox("Placements (best first)", list(options.keys()))
        if st.button("Place selected tiles"):
            candidate = options[selection]
            submit(service, view.game_id, {"move_type": "place", "tiles": candidate["tiles"]})
    else:
        st.warning("No placement is possible. Exchange tiles or pass.")

    hand_options = unique_options(view.your_hand)
    chosen = st.multiselect("Tiles to exchange", list(hand_options.keys()))
    cols = st.columns(2)
    if cols[0].button("Exchange selected tiles"):
        if not chosen:
            st.warning("Select at least one tile to exchange.")
        else:
            submit(service, view.game_id, {"move_type": "exchange", "tiles": [hand_options[key] for key in chosen]})
    if cols[1].button("Pass"):
        submit(service, view.game_id, {"move_type": "pass"})


def render_status(view: GameStateView) -> None:
    st.write(f"Status: {view.status}")
    st.write(f"Scores: {view.scores}")
    st.write(f"Tiles left in the bag: {view.remaining_tiles}")
    if view.status == "completed":
        if view.winner is None:
            st.success("The game ended in a draw.")
        elif view.winner == HUMAN:
            st.success("You won!")
        else:
            st.error("The bot won.")
        if view.end_bonus_player:
            st.write(f"End-game bonus: {view.end_bonus_player}")

    with st.expander("Move history"):
        for entry in view.move_history:
            st.write(f"{entry['player']}: {entry['move_type']} (+{entry['points']})")


def main() -> None:
    st.set_page_config(page_title="Qwirkle Sandbox", layout="wide")
    st.title("Qwirkle")

    service = get_service()

    st.sidebar.header("Game Controls")
    if st.sidebar.button("New game (you start)"):
        start_game(service, bot_first=False)
    if st.sidebar.button("New game (bot starts)"):
        start_game(service, bot_first=True)

    game_id = st.session_state.get("game_id")
    if game_id is None:
        st.info("Start a new game to begin.")
        return

    view = service.get_game_state(game_id, HUMAN)
    cols = st.columns(2)
    with cols[0]:
        st.subheader("Board")
        st.code(decode_board(view.board_tiles).render())
        st.subheader("Your hand")
        for label in view.hand_labels:
            st.write(label)
    with cols[1]:
        render_status(view)

    if view.status == "active" and view.is_your_turn:
        render_move_controls(service, view)


if __name__ == "__main__":
    main()
