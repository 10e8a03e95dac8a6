"""
Message service.

Turns engine results into the chat text the bot posts back to the channel.
Presentation only: nothing here reads or mutates game state, and balances are
converted from wei with Decimal so the displayed amount is exact.
"""
from decimal import Decimal, localcontext
from typing import Callable, Dict, List

from models import GameStatus, ShotOutcome
from schemas import (
    CommandKind,
    CommandResult,
    DEPOSIT_KIND,
    EnrollmentResult,
    InfoResult,
    PassResult,
    ShootResult,
    StartResult,
    StatusResult,
)

WEI_DECIMALS = 18

STATUS_LABELS = {
    GameStatus.WAITING: "⏳ Waiting for players",
    GameStatus.ACTIVE: "🔥 Active",
    GameStatus.FINISHED: "✅ Finished",
}


def format_balance(wei: int, symbol: str = "$") -> str:
    """
    Render a wei amount the way formatEther does, without trailing zeros.

        format_balance(10**15)      -> "$0.001"
        format_balance(10**18)      -> "$1"
        format_balance(0)           -> "$0"
    """
    with localcontext() as ctx:
        ctx.prec = 80
        value = Decimal(wei).scaleb(-WEI_DECIMALS).normalize()
    return f"{symbol}{value:f}"


def mention(identity: str) -> str:
    return f"<@{identity}>"


def _join(lines: List[str]) -> str:
    return "\n".join(lines)


def _turn_prompt(identity: str) -> str:
    return f"{mention(identity)}, it's your turn! Choose `/shoot` or `/pass` 🔫"


# ============ Success renderers ============

def _render_enrollment(result: EnrollmentResult, symbol: str) -> str:
    return _join([
        f"✅ {mention(result.identity)} joined the game! "
        f"{format_balance(result.amount, symbol)} added to the pot.",
        "",
        f"**Players:** {result.player_count}",
        f"**Pot:** {format_balance(result.pot_balance, symbol)}",
        "",
        "Use `/start-game` to begin when ready!",
    ])


def _render_start(result: StartResult, symbol: str) -> str:
    order = ", ".join(f"{i}. {mention(p)}" for i, p in enumerate(result.turn_order, start=1))
    return _join([
        "🎰 **Game Started!**",
        "",
        f"**Pot:** {format_balance(result.pot_balance, symbol)}",
        f"**Players:** {result.player_count}",
        f"**Turn Order:** {order}",
        "",
        _turn_prompt(result.current_player),
    ])


def _render_shoot(result: ShootResult, symbol: str) -> str:
    if result.outcome == ShotOutcome.CLICK:
        return _join([
            f"🔫 **CLICK!** {mention(result.identity)} survived! 💪",
            "",
            f"**Grit Bonus:** +{format_balance(result.grit_bonus, symbol)} added to pot",
            f"**New Pot:** {format_balance(result.pot_balance, symbol)}",
            "",
            _turn_prompt(result.next_player),
        ])

    lines = [
        f"💥 **BANG!** {mention(result.identity)} pulled the trigger and... lost! 💀",
        "",
        f"**Remaining Players:** {result.alive_count}",
        f"**Pot:** {format_balance(result.pot_balance, symbol)}",
        "",
    ]
    if result.finished:
        lines += [
            "🏆 **GAME OVER!**",
            "",
            f"{mention(result.winner)} is the last survivor and wins the pot of "
            f"{format_balance(result.payout, symbol)}! 🎉",
            "",
            "Start a new game by having players tip the bot to join!",
        ]
    else:
        lines += ["Game continues...", "", _turn_prompt(result.next_player)]
    return _join(lines)


def _render_pass(result: PassResult, symbol: str) -> str:
    lines = [
        f"😰 {mention(result.identity)} passed. Pot burned by {format_balance(result.burned, symbol)}.",
        "",
        f"**New Pot:** {format_balance(result.pot_balance, symbol)}",
        "",
    ]
    if result.forced_shoot:
        lines += [
            f"⚠️ **Everyone chickened out!** {mention(result.next_player)} must pull the trigger! 🔫",
            "",
            "No more passing allowed - you must `/shoot`!",
        ]
    else:
        lines.append(_turn_prompt(result.next_player))
    return _join(lines)


def _render_status(result: StatusResult, symbol: str) -> str:
    lines = [
        "**🎰 Deadman's Tip Game**",
        "",
        f"**Pot:** {format_balance(result.pot_balance, symbol)}",
        f"**Status:** {STATUS_LABELS[result.status]}",
        "",
    ]
    if result.status == GameStatus.ACTIVE:
        lines += [
            f"**Alive Players:** {result.alive_count}/{result.player_count}",
            f"**Current Turn:** {mention(result.current_player)}",
        ]
    elif result.status == GameStatus.WAITING:
        lines += [
            f"**Joined Players:** {result.player_count}",
            f"**Players:** {', '.join(mention(p) for p in result.players)}",
        ]
    if result.winner:
        lines += [
            f"**🏆 Winner:** {mention(result.winner)}",
            f"**Winnings:** {format_balance(result.payout, symbol)}",
        ]
    return _join(lines)


def _render_join_info(result: InfoResult, symbol: str) -> str:
    fee = format_balance(result.entry_fee_hint, symbol)
    return _join([
        f"To join the game, tip me {fee} using the tipping feature.",
        "",
        "**How to tip:**",
        "1. Click the 💸 tip button on any of my messages",
        f"2. Enter {fee} as the amount",
        "3. Confirm the tip",
        "",
        "Once you've tipped, you'll be added to the game!",
    ])


def _render_help(result: InfoResult, symbol: str) -> str:
    fee = format_balance(result.entry_fee_hint, symbol)
    burn = format_balance(result.pass_burn_amount, symbol)
    bonus = format_balance(result.grit_bonus_amount, symbol)
    return _join([
        "**🎰 Deadman's Tip - Help**",
        "",
        "**How to Play:**",
        f"1. Tip the bot {fee} to join the game",
        "2. Use `/start-game` when 2+ players have joined",
        "3. On your turn, choose `/shoot` or `/pass`",
        "4. Last player standing wins the pot!",
        "",
        "**Commands:**",
        "• `/join-game` - Show how to join (tip the bot)",
        "• `/start-game` - Start the game with current players",
        "• `/shoot` - Pull the trigger (50/50 chance)",
        f"• `/pass` - Skip your turn (burns {burn} from pot)",
        "• `/game-status` - Check current game status",
        "",
        "**Rules:**",
        "• 💥 **Bang!** - You're eliminated, game continues",
        f"• 🔫 **Click!** - You survive, +{bonus} added to pot",
        f"• 😰 **Pass** - Burns {burn} from pot",
        "• ⚠️ If everyone else has passed this rotation, you must shoot",
        "",
        "**Good luck!** 🎲",
    ])


RENDERERS: Dict[str, Callable] = {
    DEPOSIT_KIND: _render_enrollment,
    CommandKind.START.value: _render_start,
    CommandKind.SHOOT.value: _render_shoot,
    CommandKind.PASS.value: _render_pass,
    CommandKind.STATUS.value: _render_status,
    CommandKind.JOIN_INFO.value: _render_join_info,
    CommandKind.HELP.value: _render_help,
}


# ============ Rejections ============

NO_ACTIVE_GAME = "No active game. Use `/join-game` to start!"


def _render_rejection(result: CommandResult) -> str:
    reason = result.reason
    ctx = result.context
    kind = result.kind

    if reason == "no_game_in_progress":
        if kind == CommandKind.START.value:
            return "No game in progress. Players need to join first by tipping the bot."
        if kind == CommandKind.STATUS.value:
            return "No game in progress. Start a new game by having players tip the bot to join!"
        return NO_ACTIVE_GAME
    if reason == "wrong_game_status":
        if kind == DEPOSIT_KIND:
            return f"Game is already {ctx['status']}. Please wait for the next round."
        if kind == CommandKind.START.value:
            return f"Game is already {ctx['status']}!"
        return NO_ACTIVE_GAME
    if reason == "not_enough_players":
        return _join([
            f"Need at least {ctx['required']} players to start. "
            f"Currently {ctx['player_count']} player(s) joined.",
            "",
            "Tip the bot to join!",
        ])
    if reason == "duplicate_enrollment":
        return f"{mention(ctx['identity'])} You're already in the game! Use `/start-game` when ready."
    if reason == "not_your_turn":
        return f"Not your turn! It's {mention(ctx['current_player'])}'s turn."
    if reason == "already_eliminated":
        return "You are already eliminated!"
    if reason == "must_shoot":
        return "⚠️ You cannot pass! Everyone else passed, so you must `/shoot`! 🔫"
    if reason == "invalid_deposit_amount":
        return "Tips must be a positive amount to join the game."
    return result.detail or "Request rejected."


def render_result(result: CommandResult, symbol: str = "$") -> str:
    if not result.success:
        return _render_rejection(result)
    return RENDERERS[result.kind](result, symbol)
