"""Dealer drawing policy."""

from blackjack.dealing import RandomSource, draw_one
from blackjack.hand import Hand

DEALER_STANDS_ON = 17


def dealer_should_hit(hand: Hand) -> bool:
    """Dealer hits below 17 and stands on every 17, soft ones included."""
    return hand.value < DEALER_STANDS_ON


def dealer_action(dealer_hand: Hand, rng: RandomSource) -> Hand:
    """
    Play out the dealer's hand.

    Returns a new hand; the one passed in is left untouched. Every draw adds
    at least one point, so the loop ends within 17 draws.
    """
    hand = dealer_hand.copy()
    while dealer_should_hit(hand):
        hand.add_card(draw_one(rng))
    return hand
