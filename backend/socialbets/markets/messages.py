"""Outbound chat message texts."""

from socialbets.markets.models import Bet

WELCOME_MESSAGE = """Welcome to Social Prediction Markets!

Agree on a bet in this chat and I will pick it up:
- Propose a bet with an amount and a condition, and have the other side accept it.
- Once I post the proposal, both of you confirm it.
- When the outcome is known, ask me to resolve the bet and I will request payment from the loser."""

ORACLE_UNAVAILABLE_MESSAGE = (
    "Failed to process the conversation (bet oracle unavailable). Please try again shortly."
)

PROCESSING_ERROR_MESSAGE = "Sorry, I encountered an error processing your command."


def format_proposal(bet_id: str, bet: Bet) -> str:
    return (
        f"New bet proposed ({bet_id})\n"
        f"Amount: {bet.amount} USDC\n"
        f"Condition: {bet.condition}\n"
        f"Maker: {bet.maker}\n"
        f"Taker: {bet.taker}\n\n"
        "Both sides, please confirm to place this bet."
    )


def format_confirmation(bet_id: str, bet: Bet) -> str:
    return (
        f"Bet confirmed ({bet_id})\n"
        f"{bet.maker} vs {bet.taker} for {bet.amount} USDC\n"
        f"Condition: {bet.condition}\n\n"
        "Ask me to resolve it once the outcome is known."
    )


def format_missing_pending(bet_id: str) -> str:
    return f"There is no pending bet with id {bet_id} to confirm."


def format_missing_confirmed(bet_id: str) -> str:
    return f"There is no confirmed bet with id {bet_id} to resolve."


def format_unresolved(bet_id: str, details: str) -> str:
    text = f"Bet {bet_id} has not resolved yet."
    if details:
        text += f"\n{details}"
    return text


def format_winner(bet_id: str, winner: str, details: str) -> str:
    text = f"Bet {bet_id} resolved. Winner: {winner}"
    if details:
        text += f"\n{details}"
    return text


def format_payment_unavailable(bet_id: str, winner: str) -> str:
    return (
        f"Bet {bet_id} has a winner ({winner}), but I could not build the payment "
        "request. The bet stays open; check the participants' wallet addresses "
        "and ask me to resolve it again."
    )
