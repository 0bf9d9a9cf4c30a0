"""Headless driver for the gemmatch engine.

Plays the suggested move every turn and prints level results, which makes it
a quick way to watch the cascade, reshuffle and shop loop end to end.
"""
import argparse
import logging

from gemmatch.components.level_state import LevelOutcome
from gemmatch.events.bus import EVENT_LEVEL_ENDED
from gemmatch.session import GameSession, SwapStatus
from gemmatch.systems.shop_system import PurchaseResult

logger = logging.getLogger(__name__)


def autoplay(session: GameSession, levels: int) -> None:
    finished = []
    session.event_bus.subscribe(EVENT_LEVEL_ENDED, lambda sender, **payload: finished.append(payload))
    while len(finished) < levels:
        hint = session.get_hint()
        if hint is None:
            logger.warning("No move available; restarting level %d", session.level_state.level)
            session.start_level(session.level_state.level)
            continue
        outcome = session.propose_swap(*hint)
        if outcome.status is not SwapStatus.RESOLVED:
            continue
        if outcome.level_outcome is LevelOutcome.NONE:
            continue
        result = finished[-1]
        print(
            f"level {result['level']}: {result['outcome'].value} "
            f"{result['score']}/{result['target']} (+{result['currency_awarded']} currency)"
        )
        for offer in session.get_shop_offer():
            if session.purchase_charm(offer.offer_id) is PurchaseResult.SUCCESS:
                print(f"  bought {offer.name}: {offer.description}")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--levels", type=int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    autoplay(GameSession(seed=args.seed), args.levels)


if __name__ == "__main__":
    main()
