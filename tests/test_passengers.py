"""Tests for passengers and the priority intake queue."""

import pytest

from core.constants import Priority
from core.exceptions import PassengerNotFoundError
from core.passengers import Passenger, PassengerQueue


def make(passenger_id: str, name: str, priority: Priority = Priority.NORMAL) -> Passenger:
    return Passenger(passenger_id=passenger_id, name=name, priority=priority)


@pytest.fixture
def queue() -> PassengerQueue:
    return PassengerQueue()


# =============================================================================
# Insertion
# =============================================================================

class TestEnqueue:
    """Test two-class priority insertion."""

    def test_normal_goes_to_tail(self, queue):
        assert queue.enqueue(make("P1", "A")) == 0
        assert queue.enqueue(make("P2", "B")) == 1
        assert [p.name for p in queue] == ["A", "B"]

    def test_priority_jumps_ahead_of_normal(self, queue):
        """Queue [A(normal)], add B(normal), add C(sick) gives [C, A, B]."""
        queue.enqueue(make("P1", "A"))
        queue.enqueue(make("P2", "B"))
        index = queue.enqueue(make("P3", "C", Priority.SICK))

        assert index == 0
        assert [p.name for p in queue] == ["C", "A", "B"]

    def test_sick_normal_aged(self, queue):
        """A(sick), B(normal), C(aged) gives [A, C, B]."""
        queue.enqueue(make("P1", "A", Priority.SICK))
        queue.enqueue(make("P2", "B"))
        queue.enqueue(make("P3", "C", Priority.AGED))
        assert [p.name for p in queue] == ["A", "C", "B"]

    def test_priority_keeps_arrival_order(self, queue):
        """Priority passengers stay FIFO among themselves."""
        queue.enqueue(make("P1", "N1"))
        queue.enqueue(make("P2", "S1", Priority.SICK))
        queue.enqueue(make("P3", "A1", Priority.AGED))
        queue.enqueue(make("P4", "W1", Priority.WHEELCHAIR))

        assert [p.name for p in queue] == ["S1", "A1", "W1", "N1"]

    def test_priority_without_normals_goes_to_tail(self, queue):
        queue.enqueue(make("P1", "S1", Priority.SICK))
        assert queue.enqueue(make("P2", "A1", Priority.AGED)) == 1

    def test_partition_holds_for_mixed_sequence(self, queue):
        """Every priority passenger precedes every normal passenger."""
        priorities = [
            Priority.NORMAL, Priority.SICK, Priority.NORMAL, Priority.AGED,
            Priority.NORMAL, Priority.WHEELCHAIR, Priority.SICK, Priority.NORMAL,
        ]
        for i, priority in enumerate(priorities):
            queue.enqueue(make(f"P{i}", f"N{i}", priority))

        flags = [p.is_priority for p in queue]
        first_normal = flags.index(False)
        assert all(flags[:first_normal])
        assert not any(flags[first_normal:])

        normals = [p.passenger_id for p in queue if not p.is_priority]
        assert normals == ["P0", "P2", "P4", "P7"]

    def test_insertion_index_matches_enqueue(self, queue):
        queue.enqueue(make("P1", "A"))
        sick = make("P2", "B", Priority.SICK)
        expected = queue.insertion_index(sick)
        assert queue.enqueue(sick) == expected


# =============================================================================
# Removal
# =============================================================================

class TestRemoval:
    """Test dequeue and bulk removal."""

    @pytest.fixture
    def filled(self, queue) -> PassengerQueue:
        queue.enqueue(make("P1", "Ali"))
        queue.enqueue(make("P2", "Sara"))
        queue.enqueue(make("P3", "Ali"))
        return queue

    def test_dequeue_head(self, filled):
        index, passenger = filled.dequeue()
        assert index == 0
        assert passenger.passenger_id == "P1"
        assert len(filled) == 2

    def test_dequeue_by_id(self, filled):
        index, passenger = filled.dequeue("P2")
        assert index == 1
        assert passenger.name == "Sara"

    def test_dequeue_empty_raises(self, queue):
        with pytest.raises(PassengerNotFoundError):
            queue.dequeue()

    def test_dequeue_unknown_raises(self, filled):
        with pytest.raises(PassengerNotFoundError):
            filled.dequeue("P99")

    def test_remove_by_ids_only_removes_listed(self, filled):
        removed = filled.remove_by_ids(["P1"])
        assert [(i, p.passenger_id) for i, p in removed] == [(0, "P1")]
        assert [p.passenger_id for p in filled] == ["P2", "P3"]

    def test_remove_by_names_removes_all_duplicates(self, filled):
        """Name matching removes every entry sharing the name."""
        removed = filled.remove_by_names(["Ali"])
        assert [p.passenger_id for _, p in removed] == ["P1", "P3"]
        assert [p.passenger_id for p in filled] == ["P2"]

    def test_remove_by_names_ignores_blank(self, filled):
        assert filled.remove_by_names([""]) == []
        assert len(filled) == 3

    def test_restore_puts_entries_back_in_place(self, filled):
        before = filled.to_list()
        removed = filled.remove_by_names(["Ali"])
        filled.restore(removed)
        assert filled.to_list() == before

    def test_insert_at_clamps(self, queue):
        queue.insert_at(10, make("P1", "A"))
        queue.insert_at(-3, make("P2", "B"))
        assert [p.passenger_id for p in queue] == ["P2", "P1"]

    def test_position_of(self, filled):
        assert filled.position_of("P3") == 2
        with pytest.raises(PassengerNotFoundError):
            filled.position_of("P9")

    def test_peek_and_find(self, filled):
        assert filled.peek().passenger_id == "P1"
        assert filled.find("P2").name == "Sara"
        assert filled.find("P9") is None
        assert PassengerQueue().peek() is None
