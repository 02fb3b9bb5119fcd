"""End-to-end runs of the airport simulation."""

import math
import random

import pytest

from airportqueue import (
    AirportSimulation,
    FareClass,
    PassengerRecord,
    SimulationConfig,
    ValidationError,
    simulate,
)
from airportqueue.core.scheduler import STOPPED
from airportqueue.errors import InvariantViolation

E = FareClass.ECONOMY
B = FareClass.BUSINESS


def _random_records(seed: int, count: int) -> list[PassengerRecord]:
    rng = random.Random(seed)
    records = []
    for _ in range(count):
        fare_class = B if rng.random() < 0.3 else E
        records.append(PassengerRecord(fare_class, round(rng.uniform(0, 60), 3), round(rng.uniform(0.5, 8), 3)))
    return records


class _ServedLog:
    """Wraps an airport's completion callback to record every service."""

    def __init__(self, sim: AirportSimulation):
        self.entries = []
        airport = sim.airport
        original = airport.on_passenger_served

        def record(passenger, completion_time):
            self.entries.append((passenger, completion_time.to_seconds()))
            original(passenger, completion_time)

        for server in airport.servers:
            server._listener = _Forwarder(record)


class _Forwarder:
    def __init__(self, fn):
        self._fn = fn

    def on_passenger_served(self, passenger, completion_time):
        self._fn(passenger, completion_time)


class TestScenarioA:
    """One economy server, two economy passengers; the second must wait."""

    def test_wait_and_service_times(self):
        sim = AirportSimulation()
        sim.initialize(1, 0, [(E, 0.0, 5.0), (E, 1.0, 2.0)])
        log = _ServedLog(sim)

        report = sim.run()

        first, second = [p for p, _ in log.entries]
        assert (first.dispatch_time.to_seconds(), first.completion_time.to_seconds()) == (0.0, 5.0)
        assert first.total_wait_time == 0.0
        assert second.enqueue_time.to_seconds() == 1.0
        assert (second.dispatch_time.to_seconds(), second.completion_time.to_seconds()) == (5.0, 7.0)
        assert second.total_wait_time == 4.0

        assert report.served[E] == 2
        assert report.average_wait[E] == 2.0
        assert report.average_service_time == 3.5
        assert report.max_queue_length[E] == 1
        assert report.last_completion_time_s == 7.0
        assert report.servers[0].idle_time_s == 0.0
        assert math.isnan(report.average_wait[B])

    def test_queue_length_samples(self):
        sim = AirportSimulation()
        sim.initialize(1, 0, [(E, 0.0, 5.0), (E, 1.0, 2.0)])
        sim.run()

        samples = sim.airport.stats.queue_length_samples[E]
        # Ticks at 1..6; the run ends at t=7 when the last departure fires.
        assert samples.times() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        assert samples.raw_values() == [1, 1, 1, 1, 0, 0]


class TestScenarioB:
    @pytest.mark.parametrize("economy,business", [(0, 0), (1, 0), (3, 2)])
    def test_no_passengers_terminates_immediately(self, economy, business):
        sim = AirportSimulation()
        sim.initialize(economy, business, [])

        report = sim.run()

        assert sim.summary.stop_reason == STOPPED
        assert sim.summary.events_processed == 0
        assert report.served_total == 0
        assert math.isnan(report.average_service_time)
        assert math.isnan(report.overall_average_wait)
        for fare_class in FareClass:
            assert math.isnan(report.average_wait[fare_class])
            assert math.isnan(report.average_queue_length[fare_class])
        assert all(s.idle_time_s == 0.0 for s in report.servers)


class TestScenarioC:
    def test_two_servers_serve_simultaneous_arrivals(self):
        sim = AirportSimulation()
        sim.initialize(2, 0, [(E, 0.0, 3.0), (E, 0.0, 3.0)])
        log = _ServedLog(sim)

        report = sim.run()

        passengers = [p for p, _ in log.entries]
        assert [t for _, t in log.entries] == [3.0, 3.0]
        assert all(p.total_wait_time == 0.0 for p in passengers)
        assert all(p.dispatch_time.to_seconds() == 0.0 for p in passengers)
        assert [s.passengers_served for s in report.servers] == [1, 1]
        assert [s.idle_time_s for s in report.servers] == [0.0, 0.0]


class TestDispatchPolicy:
    def test_idle_business_server_never_serves_economy(self):
        sim = AirportSimulation()
        sim.initialize(1, 1, [(E, 0.0, 4.0), (E, 1.0, 4.0), (B, 2.0, 1.0)])
        log = _ServedLog(sim)

        report = sim.run()

        waits = {p.passenger_id: p.total_wait_time for p, _ in log.entries}
        assert waits == {0: 0.0, 1: 3.0, 2: 0.0}
        assert report.servers[1].fare_class is B
        assert report.servers[1].passengers_served == 1
        # Business server idles 0..2 and 3..8.
        assert report.servers[1].idle_time_s == 7.0

    def test_unused_server_idles_for_whole_run(self):
        sim = AirportSimulation()
        sim.initialize(1, 1, [(E, 10.0, 1.0)])

        report = sim.run()

        business = sim.airport.servers[1]
        assert business.passengers_served == 0
        assert report.end_time_s == 11.0
        assert business.total_idle_time == 11.0
        assert report.servers[1].idle_time_s == business.total_idle_time
        assert sim.airport.servers[0].total_idle_time == report.servers[0].idle_time_s == 10.0

    def test_business_arrival_dispatched_while_economy_servers_busy(self):
        sim = AirportSimulation()
        sim.initialize(1, 1, [(E, 0.0, 10.0), (B, 1.0, 1.0), (E, 1.0, 1.0)])
        log = _ServedLog(sim)

        sim.run()

        business = next(p for p, _ in log.entries if p.fare_class is B)
        assert business.total_wait_time == 0.0
        assert business.completion_time.to_seconds() == 2.0

    def test_servers_only_serve_their_class(self):
        sim = AirportSimulation()
        sim.initialize(3, 2, _random_records(seed=7, count=200))
        served_by = {}
        for server in sim.airport.servers:
            original = server.handle_event

            def spy(event, server=server, original=original):
                served_by[event.context["passenger"].passenger_id] = server.fare_class
                return original(event)

            server.handle_event = spy
        log = _ServedLog(sim)

        sim.run()

        assert len(served_by) == 200
        for passenger, _ in log.entries:
            assert served_by[passenger.passenger_id] is passenger.fare_class


class TestConservation:
    def test_every_accepted_passenger_is_served_once(self):
        records = _random_records(seed=42, count=300)
        sim = AirportSimulation()
        sim.initialize(2, 1, records)
        reports = []
        sim.airport.add_report_listener(reports.append)

        report = sim.run()

        assert len(reports) == 1
        assert report.served[E] + report.served[B] == len(records)
        assert report.served_total == sim.airport.total_accepted
        assert sim.airport.active_passenger_count == 0
        assert sum(s.passengers_served for s in report.servers) == len(records)

    def test_waits_are_non_negative_and_fifo_within_class(self):
        sim = AirportSimulation()
        sim.initialize(1, 1, _random_records(seed=3, count=120))
        log = _ServedLog(sim)

        sim.run()

        for fare_class in FareClass:
            served = [p for p, _ in log.entries if p.fare_class is fare_class]
            assert all(p.total_wait_time >= 0 for p in served)
            dispatch_order = sorted(served, key=lambda p: (p.dispatch_time, p.passenger_id))
            arrivals = [p.arrival_time for p in dispatch_order]
            assert arrivals == sorted(arrivals)


class TestDeterminism:
    def test_replay_gives_identical_reports(self):
        records = _random_records(seed=11, count=250)
        first = simulate(2, 2, records)
        second = simulate(2, 2, records)
        assert first.to_dict() == second.to_dict()

    def test_start_offset_shifts_times_only(self):
        records = _random_records(seed=5, count=50)
        base = simulate(2, 1, records)
        shifted = simulate(2, 1, records, SimulationConfig(start_time_s=100.0))
        assert shifted.average_wait == base.average_wait
        assert shifted.served == base.served
        assert shifted.last_completion_time_s == pytest.approx(base.last_completion_time_s + 100.0)


class TestContract:
    def test_invalid_record_fails_at_initialize(self):
        sim = AirportSimulation()
        with pytest.raises(ValidationError):
            sim.initialize(1, 0, [(E, 0.0, -1.0)])

    def test_integer_class_codes_accepted(self):
        report = simulate(1, 1, [(0, 0.0, 1.0), (1, 0.0, 2.0)])
        assert report.served == {E: 1, B: 1}

    def test_unknown_class_code_rejected(self):
        with pytest.raises(ValidationError):
            simulate(1, 1, [(7, 0.0, 1.0)])

    def test_run_requires_initialize(self):
        with pytest.raises(InvariantViolation):
            AirportSimulation().run()

    def test_run_only_once(self):
        sim = AirportSimulation()
        sim.initialize(1, 0, [(E, 0.0, 1.0)])
        sim.run()
        with pytest.raises(InvariantViolation):
            sim.run()

    def test_independent_simulations_do_not_share_state(self):
        a = AirportSimulation()
        b = AirportSimulation()
        a.initialize(1, 0, [(E, 0.0, 1.0)])
        b.initialize(1, 0, [(E, 0.0, 2.0), (E, 0.0, 2.0)])
        assert a.run().served_total == 1
        assert b.run().served_total == 2
