"""Tests for expanding recipient groups through the user directory."""

from __future__ import annotations

import logging

import pytest

from app.application.use_cases.circulars import LookupPolicy, RecipientResolver
from app.config import get_settings
from app.domain.entities import RecipientGroup, UserRole
from app.domain.exceptions import NoRecipients, TransientDependencyError


@pytest.fixture()
def directory(fake_directory):
    fake_directory.add(UserRole.STUDENT, 10, 11, 12)
    fake_directory.add(UserRole.PROFESSOR, 20, 21)
    fake_directory.add(UserRole.MANAGEMENT, 30)
    fake_directory.add(UserRole.ALUMNI, 40)
    return fake_directory


def _resolver(directory, delays=None, **policy) -> RecipientResolver:
    recorded = delays if delays is not None else []
    return RecipientResolver(directory, LookupPolicy(**policy), sleep=recorded.append)


def test_groups_are_unioned_and_deduplicated(directory) -> None:
    directory.add(UserRole.PROFESSOR, 12)

    recipients = _resolver(directory).resolve(
        {RecipientGroup.STUDENTS, RecipientGroup.PROFESSORS}, sender_id=30
    )

    assert recipients == frozenset({10, 11, 12, 20, 21})


def test_all_means_students_and_professors(directory) -> None:
    recipients = _resolver(directory).resolve({RecipientGroup.ALL}, sender_id=30)

    assert recipients == frozenset({10, 11, 12, 20, 21})
    assert "role:MANAGEMENT" not in directory.calls
    assert "role:ALUMNI" not in directory.calls


def test_all_ignores_other_tags(directory) -> None:
    recipients = _resolver(directory).resolve(
        {RecipientGroup.ALL, RecipientGroup.MANAGEMENT}, sender_id=30
    )

    assert recipients == frozenset({10, 11, 12, 20, 21})


def test_sender_is_excluded(directory) -> None:
    recipients = _resolver(directory).resolve({RecipientGroup.PROFESSORS}, sender_id=20)

    assert recipients == frozenset({21})


def test_sender_only_recipient_raises_no_recipients(directory) -> None:
    with pytest.raises(NoRecipients):
        _resolver(directory).resolve({RecipientGroup.MANAGEMENT}, sender_id=30)


def test_empty_group_raises_no_recipients(fake_directory) -> None:
    with pytest.raises(NoRecipients) as exc_info:
        _resolver(fake_directory).resolve({RecipientGroup.STUDENTS}, sender_id=1)

    assert exc_info.value.groups == ("STUDENTS",)


def test_transient_failures_are_retried_with_backoff(directory, caplog) -> None:
    directory.failures = 2
    delays: list[float] = []
    resolver = _resolver(
        directory, delays, max_attempts=3, backoff_seconds=0.1, backoff_multiplier=2.0
    )

    with caplog.at_level(logging.WARNING):
        recipients = resolver.resolve({RecipientGroup.STUDENTS}, sender_id=30)

    assert recipients == frozenset({10, 11, 12})
    assert delays == pytest.approx([0.1, 0.2])
    assert sum("retrying" in record.getMessage() for record in caplog.records) == 2


def test_exhausted_retries_raise_transient_dependency_error(directory, caplog) -> None:
    directory.failures = 5
    delays: list[float] = []
    resolver = _resolver(directory, delays, max_attempts=3, backoff_seconds=0.05)

    with caplog.at_level(logging.WARNING), pytest.raises(TransientDependencyError) as exc_info:
        resolver.resolve({RecipientGroup.STUDENTS}, sender_id=30)

    assert exc_info.value.attempts == 3
    assert len(delays) == 2
    assert any(record.levelno == logging.ERROR for record in caplog.records)


def test_resolution_is_all_or_nothing(directory) -> None:
    # Every PROFESSOR lookup fails; the students already found must not leak out.
    resolver = _resolver(directory, max_attempts=2)
    original = directory.lookup_users_by_role

    def flaky(role):
        if role is UserRole.PROFESSOR:
            directory.failures = 1
        return original(role)

    directory.lookup_users_by_role = flaky

    with pytest.raises(TransientDependencyError):
        resolver.resolve({RecipientGroup.STUDENTS, RecipientGroup.PROFESSORS}, sender_id=30)


def test_slow_lookup_times_out_and_is_retried(directory) -> None:
    directory.slow_calls = 1
    directory.delay = 0.5
    delays: list[float] = []
    resolver = _resolver(directory, delays, max_attempts=2, timeout_seconds=0.05)

    recipients = resolver.resolve({RecipientGroup.PROFESSORS}, sender_id=30)

    assert recipients == frozenset({20, 21})
    assert len(delays) == 1


def test_lookup_that_always_times_out_fails(directory) -> None:
    directory.slow_calls = 2
    directory.delay = 0.3
    resolver = _resolver(directory, max_attempts=2, timeout_seconds=0.05)

    with pytest.raises(TransientDependencyError):
        resolver.resolve({RecipientGroup.STUDENTS}, sender_id=30)


def test_lookup_user_name_uses_retry_policy(directory) -> None:
    directory.names[30] = "Dean Adams"
    directory.failures = 1

    assert _resolver(directory, max_attempts=2).lookup_user_name(30) == "Dean Adams"


def test_policy_from_settings() -> None:
    settings = get_settings()
    policy = LookupPolicy.from_settings(settings)

    assert policy.max_attempts == settings.directory_lookup_max_attempts
    assert policy.backoff_seconds == 0
    assert policy.timeout_seconds == settings.directory_lookup_timeout_seconds


def test_backoff_grows_exponentially() -> None:
    policy = LookupPolicy(backoff_seconds=0.5, backoff_multiplier=3.0)

    assert [policy.backoff_for(attempt) for attempt in (1, 2, 3)] == pytest.approx(
        [0.5, 1.5, 4.5]
    )
