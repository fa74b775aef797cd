"""
Smoke tests for the headless driver
"""

from model import Model
from run_simulation import main, play_turn
from units import Souls


class TestHeadlessDriver:
    """The greedy policy keeps the game moving"""

    def test_first_turn_consumes_welcome_and_ticks(self):
        model = Model()

        assert play_turn(model, clicks=3) is True
        assert model.month == 1
        assert not model.world.has_pending_events

    def test_short_run_grows_the_business(self, capsys):
        model = main(num_ticks=36, clicks_per_tick=5, report_every=12)

        assert model.month > 0
        assert model.souls >= Souls.ZERO
        owned = sum(item.quantity for item in model.world.items.values())
        assert owned > 1
        assert "DEATH INC. SIMULATION" in capsys.readouterr().out
