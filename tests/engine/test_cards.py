"""Tests for ranks and hand scoring."""

import pytest
from hypothesis import given, strategies as st

from blackjack.cards import RANKS, Rank, hand_to_string
from blackjack.hand import Hand, score

ranks = st.sampled_from(list(Rank))
NON_ACES = [r for r in Rank if r != Rank.ACE]


class TestRank:
    """Tests for the Rank enum."""

    def test_thirteen_ranks(self):
        assert len(RANKS) == 13
        assert RANKS[-1] == Rank.ACE

    def test_blackjack_values(self):
        assert Rank.TWO.blackjack_value == 2
        assert Rank.TEN.blackjack_value == 10
        assert Rank.JACK.blackjack_value == 10
        assert Rank.QUEEN.blackjack_value == 10
        assert Rank.KING.blackjack_value == 10
        assert Rank.ACE.blackjack_value == 11

    def test_ace_sorts_last(self):
        assert sorted([Rank.ACE, Rank.KING, Rank.TWO]) == [Rank.TWO, Rank.KING, Rank.ACE]

    def test_str(self):
        assert str(Rank.SEVEN) == "7"
        assert str(Rank.TEN) == "10"
        assert str(Rank.QUEEN) == "Q"
        assert str(Rank.ACE) == "A"

    def test_from_string(self):
        assert Rank.from_string("A") == Rank.ACE
        assert Rank.from_string("10") == Rank.TEN
        assert Rank.from_string("t") == Rank.TEN
        assert Rank.from_string(" k ") == Rank.KING

    def test_from_string_invalid(self):
        with pytest.raises(ValueError):
            Rank.from_string("1")

    def test_hand_to_string_keeps_deal_order(self):
        assert hand_to_string([Rank.TEN, Rank.THREE, Rank.ACE]) == "10 3 A"
        assert hand_to_string([]) == ""


class TestScore:
    """Tests for the scoring function."""

    def test_empty_hand(self):
        assert score([]) == 0

    @pytest.mark.parametrize(
        "cards, expected",
        [
            ([Rank.ACE], 11),
            ([Rank.ACE, Rank.ACE, Rank.ACE], 13),
            ([Rank.ACE, Rank.KING], 21),
            ([Rank.ACE, Rank.EIGHT, Rank.FOUR], 13),
            ([Rank.ACE, Rank.SIX], 17),
            ([Rank.ACE, Rank.ACE], 12),
            ([Rank.TEN, Rank.SIX, Rank.KING], 26),
        ],
    )
    def test_known_hands(self, cards, expected):
        assert score(cards) == expected

    def test_ace_valued_against_other_cards(self):
        # Dealt first, the ace is still valued after the eight and four
        assert score([Rank.ACE, Rank.EIGHT, Rank.FOUR]) == score([Rank.EIGHT, Rank.FOUR, Rank.ACE])

    @given(st.lists(ranks, min_size=1, max_size=8), st.randoms())
    def test_order_does_not_matter(self, cards, random):
        shuffled = list(cards)
        random.shuffle(shuffled)
        assert score(shuffled) == score(cards)

    @given(st.lists(st.sampled_from(NON_ACES), max_size=8))
    def test_no_aces_is_plain_sum(self, cards):
        assert score(cards) == sum(10 if c.value > 10 else c.value for c in cards)


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self):
        hand = Hand()
        assert len(hand) == 0
        assert hand.value == 0
        assert not hand.is_blackjack
        assert not hand.is_busted

    def test_blackjack(self):
        hand = Hand([Rank.ACE, Rank.KING])
        assert hand.is_blackjack
        assert hand.can_double

    def test_not_blackjack_three_cards(self):
        hand = Hand([Rank.SEVEN, Rank.SEVEN, Rank.SEVEN])
        assert hand.value == 21
        assert not hand.is_blackjack
        assert not hand.can_double

    def test_bust(self):
        hand = Hand([Rank.TEN, Rank.SIX])
        assert not hand.is_busted
        hand.add_card(Rank.KING)
        assert hand.is_busted

    def test_copy_is_independent(self):
        hand = Hand([Rank.TEN])
        clone = hand.copy()
        clone.add_card(Rank.TWO)
        assert hand.cards == [Rank.TEN]

    def test_str(self):
        assert str(Hand([Rank.TEN, Rank.ACE])) == "10 A"
