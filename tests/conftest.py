import pytest

from tests.fakes import (
    OTHER_TOKEN,
    OTHER_USER_ID,
    OWNER_ID,
    OWNER_TOKEN,
    TRIP_ID,
    FakeIdentityProvider,
    FakeTripStore,
)
from trip_planner.schemas.trip_schema import Identity


@pytest.fixture
def trip_body():
    return {
        "tripId": TRIP_ID,
        "destination": "Paris",
        "startDate": "2024-06-01",
        "endDate": "2024-06-03",
        "travelers": 2,
        "budget": 50000,
        "preferences": ["Food & Drinks"],
    }


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider(
        {
            OWNER_TOKEN: Identity(id=OWNER_ID, email="owner@example.com"),
            OTHER_TOKEN: Identity(id=OTHER_USER_ID),
        }
    )


@pytest.fixture
def trip_store():
    return FakeTripStore({TRIP_ID: OWNER_ID})
