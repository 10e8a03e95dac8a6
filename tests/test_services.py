import pytest

from models import GameState, GameStatus, LastAction, Player, ShotOutcome
from core.exceptions import GameInvariantViolation, InvalidDepositAmount
from services.chamber_service import Chamber
from services.pot_service import burn_for_pass, credit_deposit, credit_grit_bonus, payout
from services.turn_service import (
    advance_turn,
    current_player,
    everyone_passed,
    is_enrolled,
    others_all_passed,
    reset_rotation,
)


def make_game(*identities, status=GameStatus.ACTIVE):
    return GameState(
        channel_id="c",
        players=[Player(identity=i, payout_address=f"0x{i}") for i in identities],
        status=status,
    )


# ============ Pot ============

def test_credit_deposit():
    assert credit_deposit(0, 10**15) == 10**15
    assert credit_deposit(5, 1) == 6


@pytest.mark.parametrize("amount", [0, -1, False, 2.0])
def test_credit_deposit_rejects_non_positive(amount):
    with pytest.raises(InvalidDepositAmount):
        credit_deposit(0, amount)


@pytest.mark.parametrize("pot, burn, expected", [
    (10, 3, (7, 3)),
    (3, 3, (0, 3)),
    (2, 3, (0, 2)),
    (0, 3, (0, 0)),
])
def test_burn_for_pass_clamps(pot, burn, expected):
    assert burn_for_pass(pot, burn) == expected


def test_burn_keeps_wei_precision():
    pot = 3 * 10**15 + 1
    assert burn_for_pass(pot, 5 * 10**14) == (25 * 10**14 + 1, 5 * 10**14)


def test_negative_pot_is_invariant_violation():
    with pytest.raises(GameInvariantViolation):
        burn_for_pass(-1, 3)
    with pytest.raises(GameInvariantViolation):
        payout(-1)


def test_grit_bonus_requires_positive_amount():
    assert credit_grit_bonus(4, 6) == 10
    with pytest.raises(ValueError):
        credit_grit_bonus(4, 0)


# ============ Turn order ============

def test_current_player_uses_alive_subsequence():
    game = make_game("a", "b", "c")
    game.players[0].alive = False
    game.current_turn_index = 3

    # alive = [b, c]; 3 % 2 == 1
    assert current_player(game).identity == "c"


def test_current_player_with_nobody_alive():
    game = make_game("a", "b")
    for p in game.players:
        p.alive = False
    with pytest.raises(GameInvariantViolation):
        current_player(game)


def test_advance_turn_wraps_around():
    game = make_game("a", "b", "c")
    game.current_turn_index = 2
    nxt = advance_turn(game)
    assert nxt.identity == "a"
    assert game.current_turn_index == 0


def test_advance_turn_after_current_player_eliminated():
    # modulus shrinks to the alive count: [a, c, d], (1 + 1) % 3 -> d
    game = make_game("a", "b", "c", "d")
    game.current_turn_index = 1
    game.players[1].alive = False

    nxt = advance_turn(game)

    assert nxt.identity == "d"
    assert game.current_turn_index == 2
    assert current_player(game).identity == "d"


def test_advance_turn_after_last_in_roster_eliminated():
    game = make_game("a", "b", "c")
    game.current_turn_index = 2
    game.players[2].alive = False

    assert advance_turn(game).identity == "b"
    assert game.current_turn_index == 1


def test_advance_turn_with_nobody_alive():
    game = make_game("a", "b")
    for p in game.players:
        p.alive = False
    with pytest.raises(GameInvariantViolation):
        advance_turn(game)


def test_others_all_passed():
    game = make_game("a", "b", "c")
    a, b, c = game.players
    assert not others_all_passed(game, c)

    a.last_action = LastAction.PASSED
    assert not others_all_passed(game, c)

    b.last_action = LastAction.PASSED
    assert others_all_passed(game, c)
    assert not others_all_passed(game, a)


def test_others_all_passed_ignores_dead_players():
    game = make_game("a", "b", "c")
    a, b, c = game.players
    a.alive = False
    b.last_action = LastAction.PASSED
    assert others_all_passed(game, c)


def test_sole_survivor_may_pass():
    game = make_game("a", "b")
    game.players[1].alive = False
    assert not others_all_passed(game, game.players[0])


def test_everyone_passed_and_reset():
    game = make_game("a", "b")
    for p in game.players:
        p.last_action = LastAction.PASSED
    assert everyone_passed(game)

    reset_rotation(game)
    assert not everyone_passed(game)
    assert all(p.last_action == LastAction.NONE for p in game.players)


def test_everyone_passed_needs_two_alive():
    game = make_game("a", "b")
    game.players[0].last_action = LastAction.PASSED
    game.players[1].alive = False
    assert not everyone_passed(game)


def test_is_enrolled_checks_identity_and_address():
    game = make_game("alice", status=GameStatus.WAITING)
    assert is_enrolled(game, "ALICE", "0xnew")
    assert is_enrolled(game, "bob", "0XALICE")
    assert not is_enrolled(game, "bob", "0xbob")


# ============ Chamber ============

def test_seeded_chamber_is_reproducible():
    a = Chamber(seed=7)
    b = Chamber(seed=7)
    assert [a.spin() for _ in range(50)] == [b.spin() for _ in range(50)]


def test_chamber_produces_both_outcomes():
    chamber = Chamber(seed=3)
    outcomes = {chamber.spin() for _ in range(200)}
    assert outcomes == {ShotOutcome.BANG, ShotOutcome.CLICK}


def test_unseeded_chamber_spins():
    assert Chamber().spin() in (ShotOutcome.BANG, ShotOutcome.CLICK)
