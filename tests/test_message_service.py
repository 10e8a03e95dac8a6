import pytest

from conftest import BANG, CHANNEL, CLICK
from models import GameStatus
from schemas import CommandEvent, CommandKind, RejectedResult, StatusResult
from core.dispatcher import dispatch_command
from services.message_service import format_balance, render_result


@pytest.mark.parametrize("wei, expected", [
    (0, "$0"),
    (10**15, "$0.001"),
    (5 * 10**14, "$0.0005"),
    (10**18, "$1"),
    (10 * 10**18, "$10"),
    (1, "$0.000000000000000001"),
    (123 * 10**30, "$123000000000000"),
])
def test_format_balance(wei, expected):
    assert format_balance(wei) == expected


def test_format_balance_custom_symbol():
    assert format_balance(2 * 10**18, symbol="Ξ") == "Ξ2"


def test_join_message(manager):
    result = manager.enroll(CHANNEL, "alice", "0xa", 10**15)
    text = render_result(result)

    assert "<@alice> joined the game!" in text
    assert "**Players:** 1" in text
    assert "$0.001 added to the pot." in text
    assert "**Pot:** $0.001" in text


def test_start_message_lists_turn_order(manager, enroll):
    enroll("a", "b")
    text = render_result(manager.start_game(CHANNEL, "a"))

    assert "**Game Started!**" in text
    assert "1. <@a>, 2. <@b>" in text
    assert "<@a>, it's your turn!" in text


def test_click_message(started, manager, chamber):
    started("a", "b")
    chamber.queue(CLICK)
    text = render_result(manager.shoot(CHANNEL, "a"))

    assert "**CLICK!** <@a> survived!" in text
    assert "<@b>, it's your turn!" in text


def test_bang_with_winner_message(started, manager, chamber):
    started("a", "b")
    chamber.queue(BANG)
    text = render_result(manager.shoot(CHANNEL, "a"))

    assert "**BANG!** <@a>" in text
    assert "**GAME OVER!**" in text
    assert "<@b> is the last survivor" in text


def test_bang_without_winner_message(started, manager, chamber):
    started("a", "b", "c")
    chamber.queue(BANG)
    text = render_result(manager.shoot(CHANNEL, "a"))

    assert "Game continues..." in text
    assert "**Remaining Players:** 2" in text
    assert "GAME OVER" not in text


def test_pass_message(started, manager):
    started("a", "b", "c")
    text = render_result(manager.pass_turn(CHANNEL, "a"))

    assert "<@a> passed." in text
    assert "<@b>, it's your turn!" in text


def test_forced_shoot_message():
    from schemas import PassResult

    result = PassResult(identity="a", burned=1, pot_balance=2, next_player="b", forced_shoot=True)
    text = render_result(result)

    assert "Everyone chickened out!" in text
    assert "<@b> must pull the trigger!" in text


def test_status_messages():
    waiting = StatusResult(status=GameStatus.WAITING, pot_balance=10**15, player_count=2, players=["a", "b"])
    active = StatusResult(
        status=GameStatus.ACTIVE, pot_balance=0, player_count=3,
        players=["a", "b", "c"], alive_count=2, current_player="c",
    )
    finished = StatusResult(
        status=GameStatus.FINISHED, pot_balance=10**18, player_count=2,
        players=["a", "b"], winner="b", payout=10**18,
    )

    assert "**Players:** <@a>, <@b>" in render_result(waiting)
    assert "**Pot:** $0.001" in render_result(waiting)
    assert "**Alive Players:** 2/3" in render_result(active)
    assert "**Current Turn:** <@c>" in render_result(active)
    assert "**Winnings:** $1" in render_result(finished)


def test_help_and_join_info(manager):
    help_text = render_result(dispatch_command(
        manager, CommandEvent(kind=CommandKind.HELP, channel_id=CHANNEL, acting_identity="a")))
    join_text = render_result(dispatch_command(
        manager, CommandEvent(kind=CommandKind.JOIN_INFO, channel_id=CHANNEL, acting_identity="a")))

    assert "Deadman's Tip - Help" in help_text
    assert "`/shoot`" in help_text
    assert "To join the game, tip me" in join_text


@pytest.mark.parametrize("kind, reason, context, expected", [
    ("start", "no_game_in_progress", {}, "Players need to join first"),
    ("status", "no_game_in_progress", {}, "No game in progress."),
    ("shoot", "no_game_in_progress", {}, "No active game."),
    ("deposit", "wrong_game_status", {"status": "active", "expected": "waiting"}, "Game is already active. Please wait"),
    ("start", "wrong_game_status", {"status": "active", "expected": "waiting"}, "Game is already active!"),
    ("pass", "wrong_game_status", {"status": "waiting", "expected": "active"}, "No active game."),
    ("start", "not_enough_players", {"player_count": 1, "required": 2}, "Currently 1 player(s) joined."),
    ("deposit", "duplicate_enrollment", {"identity": "a"}, "<@a> You're already in the game!"),
    ("shoot", "not_your_turn", {"identity": "b", "current_player": "a"}, "It's <@a>'s turn."),
    ("shoot", "already_eliminated", {"identity": "a"}, "already eliminated"),
    ("pass", "must_shoot", {"identity": "c"}, "You cannot pass!"),
    ("deposit", "invalid_deposit_amount", {}, "positive amount"),
])
def test_rejection_messages(kind, reason, context, expected):
    result = RejectedResult(kind=kind, reason=reason, detail="x", context=context)
    assert expected in render_result(result)
