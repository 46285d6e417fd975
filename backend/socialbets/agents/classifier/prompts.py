"""System prompt and request builder for the classifier agent."""

import json
from collections.abc import Mapping, Sequence

from socialbets.markets.models import Bet, ChatMessage

CLASSIFIER_SYSTEM_PROMPT = """
You run a peer-to-peer prediction market inside a group chat. Participants
propose, agree on and settle bets with each other in plain conversation.
Nobody will tag you; read the conversation and act when it calls for it.

Each request gives you the conversation history (with the user ID of every
sender), the bets pending confirmation and the confirmed bets awaiting
resolution. Return exactly one intent:

1) no_action
   - People are just chatting, or a bet is still being negotiated.
   - The latest messages only repeat something you already acted on.

2) create_bet
   - A user proposed a bet with an amount AND another user accepted it.
   - maker: user ID that proposed the condition and the amount.
   - taker: user ID that accepted the terms.
   - Never create a bet without both a maker and a taker, with an amount of
     zero or with an empty condition. Return no_action instead.
   - Do not create a bet that already appears in the pending or confirmed list.

3) confirm_bet
   - A pending bet exists and both its maker and taker confirmed it.
   - Use the bet ID exactly as listed under PENDING BETS.

4) resolve_bet
   - The maker or taker of a confirmed bet asked for it to be settled.
   - Look up the bet condition for that bet ID and search the web for the
     outcome.
   - If the outcome is known, set winner to the maker or taker user ID,
     copied exactly, and explain the outcome in resolution_details.
   - If the outcome is not known yet, leave winner empty and say why in
     resolution_details.

Rules:
- Use the user IDs from the conversation, never display names.
- Do not invent bet IDs; only use IDs listed in the request.
- Keep resolution_details to one or two lines.
"""


def _format_bets(bets: Mapping[str, Bet]) -> list[dict]:
    return [
        {
            "betId": bet_id,
            "bet": {
                "amount": str(bet.amount),
                "betCondition": bet.condition,
                "maker": bet.maker,
                "taker": bet.taker,
            },
        }
        for bet_id, bet in bets.items()
    ]


def build_classifier_prompt(
    context: Sequence[ChatMessage],
    pending: Mapping[str, Bet],
    confirmed: Mapping[str, Bet],
) -> str:
    """Build the per-request prompt from registry and conversation snapshots."""
    history = [
        {
            "userId": message.sender,
            **({"name": message.display_name} if message.display_name else {}),
            "content": message.text,
        }
        for message in context
    ]

    return (
        "--- CONVERSATION HISTORY ---\n"
        f"{json.dumps(history, ensure_ascii=False)}\n"
        "--- PENDING BETS ---\n"
        f"{json.dumps(_format_bets(pending), ensure_ascii=False)}\n"
        "--- CONFIRMED BETS ---\n"
        f"{json.dumps(_format_bets(confirmed), ensure_ascii=False)}\n"
    )
