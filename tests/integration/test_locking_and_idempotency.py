from __future__ import annotations

import pytest

from datepoll.events import service


@pytest.mark.integration
def test_same_voter_may_vote_under_many_dates_and_resubmit(gateway, sample_dates):
    event = service.create_event(gateway, "Lunch", sample_dates)
    service.submit_votes(gateway, event.id, "Alice", [sample_dates[0]])
    updated = service.submit_votes(gateway, event.id, "Alice", [sample_dates[0], sample_dates[1]])
    assert updated.to_dict()["votes"] == [
        {"date": sample_dates[0], "people": ["Alice", "Alice"]},
        {"date": sample_dates[1], "people": ["Alice"]},
    ]


@pytest.mark.integration
def test_votes_on_one_event_do_not_leak_into_another(gateway, sample_dates):
    lunch = service.create_event(gateway, "Lunch", sample_dates)
    dinner = service.create_event(gateway, "Dinner", sample_dates)
    service.submit_votes(gateway, lunch.id, "Alice", [sample_dates[0]])
    assert service.get_event(gateway, dinner.id).votes == []
    assert all(event.votes is None for event in service.list_events(gateway))
