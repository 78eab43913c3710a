"""Tests for the shared progress-plan schemas."""

import pytest

from quranpath.tracker.plans import CyclicPlan, ProgressRecord


class TestProgressInterface:
    """Subclasses must define how progress is counted."""

    def test_record_without_counts_cannot_be_created(self):
        class Uncounted(ProgressRecord):
            pass

        with pytest.raises(TypeError):
            Uncounted(title="Nothing counted")

    def test_cyclic_plan_requires_clear_progress(self):
        class NoReset(CyclicPlan):
            @property
            def units_done(self) -> int:
                return 0

            @property
            def units_total(self) -> int:
                return 1

        with pytest.raises(TypeError):
            NoReset(title="Never resets", duration=3)

    def test_complete_subclass(self):
        class Counter(CyclicPlan):
            done: int = 0

            @property
            def units_done(self) -> int:
                return self.done

            @property
            def units_total(self) -> int:
                return self.duration

            def clear_progress(self) -> None:
                self.done = 0

        plan = Counter(title="Counter", duration=4, done=2)

        assert plan.progress_percent == 50
        assert not plan.is_complete
        plan.clear_progress()
        assert plan.units_done == 0
