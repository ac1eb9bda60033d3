"""
Plain-Language Risk Explanations.

Turns a RiskProfile into short beginner-friendly answers:
- What's the most I can earn?
- What's the most I can lose?
- When do I start making money?

No LLM calls - deterministic templates with inserted numbers.
"""

from dataclasses import dataclass

from data.schemas import RiskProfile


@dataclass(frozen=True)
class RiskExplanation:
    """Answers shown on the risk card."""
    strategy_name: str
    max_profit: str
    max_loss: str
    breakeven: str
    summary: str

    def as_markdown(self) -> str:
        return "\n\n".join([
            f"### {self.strategy_name}",
            f"**What's the most I can earn?** {self.max_profit}",
            f"**What's the most I can lose?** {self.max_loss}",
            f"**When do I start making money?** {self.breakeven}",
            self.summary,
        ])


def _money(value: float) -> str:
    return f"${value:,.2f}"


def explain_max_profit(profile: RiskProfile) -> str:
    if profile.max_profit is None:
        return (
            "Your profit potential is unlimited! The further the stock moves "
            "in your favor, the more money you make."
        )
    if profile.max_profit <= 0:
        return "This strategy has no profit potential at these levels. Check your strikes."
    return (
        f"The most you can earn is {_money(profile.max_profit)}. This happens if "
        "the stock price moves exactly where you predicted."
    )


def explain_max_loss(profile: RiskProfile) -> str:
    if profile.max_loss is None:
        return (
            "Warning: Your risk is unlimited! If the stock moves against you, you "
            "could lose significantly more than your initial investment."
        )
    if profile.max_loss <= 0:
        return "This strategy cannot lose money at expiration at these prices."
    return (
        f"The most you can lose is {_money(profile.max_loss)}. This is your "
        "'defined risk' - you cannot lose more than this amount."
    )


def explain_breakevens(profile: RiskProfile, spot: float) -> str:
    breakevens = sorted(profile.breakevens)
    if not breakevens:
        return (
            "Based on current numbers, this trade is not profitable at any price. "
            "Adjust your strikes or entry price."
        )
    if len(breakevens) == 1:
        be = breakevens[0]
        direction = "above" if be > spot else "below"
        return f"You start making a profit when the stock price moves {direction} {_money(be)}."
    if len(breakevens) == 2:
        return (
            f"The trade changes from profit to loss at {_money(breakevens[0])} and "
            f"{_money(breakevens[1])}. Check which side of that range you need "
            "the stock to finish on."
        )
    prices = ", ".join(_money(be) for be in breakevens)
    return f"Profit and loss alternate at these prices: {prices}."


def explain_risk(
    profile: RiskProfile,
    spot: float,
    strategy_name: str = "Custom Strategy",
) -> RiskExplanation:
    """
    Build the plain-language risk card for a strategy.

    Args:
        profile: Risk profile at expiration
        spot: Current underlying price
        strategy_name: Display name

    Returns:
        RiskExplanation
    """
    if profile.max_loss is None:
        summary = "Tip: Unlimited risk strategies need close monitoring and a clear exit plan."
    elif profile.max_profit is None:
        summary = "Tip: Your risk is capped while your upside is open-ended."
    else:
        summary = "Tip: Both risk and reward are defined - size the trade by the max loss."

    return RiskExplanation(
        strategy_name=strategy_name,
        max_profit=explain_max_profit(profile),
        max_loss=explain_max_loss(profile),
        breakeven=explain_breakevens(profile, spot),
        summary=summary,
    )
