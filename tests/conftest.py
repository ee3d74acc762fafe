"""Shared fixtures for infohash tests."""

from __future__ import annotations

import pytest

from infohash import Infohash
from tests.support.records import SampleRecord, SmallRecord


@pytest.fixture
def sample_record() -> SampleRecord:
    return SampleRecord(
        field1="test1",
        field2=["test2", "test3"],
        field3=123,
        field4="test4",
        field5=123.456,
    )


@pytest.fixture
def small_record() -> SmallRecord:
    return SmallRecord(
        field1="test1",
        field2=["test2", "test3"],
        field3=123,
        field4="test4",
        field5=123.456,
    )


@pytest.fixture
def sample_hasher() -> Infohash:
    return Infohash.for_dataclass(SampleRecord)


@pytest.fixture
def small_hasher() -> Infohash:
    return Infohash.for_dataclass(SmallRecord)
