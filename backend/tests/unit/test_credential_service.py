"""Unit tests for the CredentialIssuer."""

import re

import pytest

from learnpass.application.services import CredentialIssuer, generate_verification_code
from learnpass.domain.entities import CredentialStatus
from learnpass.domain.exceptions import StorageFault

ISSUE_ARGS = dict(
    user_id="u1",
    user_name="Ada Lovelace",
    course_id="course-1",
    course_name="Intro to Analytics",
    score=85,
    external_id="user_123",
)


@pytest.mark.asyncio
async def test_issue_then_already_issued_with_same_id(issuer: CredentialIssuer, credential_repo):
    first = await issuer.issue(**ISSUE_ARGS)
    second = await issuer.issue(**ISSUE_ARGS)

    assert first.status == CredentialStatus.ISSUED
    assert second.status == CredentialStatus.ALREADY_ISSUED
    assert second.credential_id == first.credential_id
    assert len(credential_repo.rows) == 1


@pytest.mark.asyncio
async def test_below_passing_is_not_eligible(issuer, credential_repo, completion_repo):
    outcome = await issuer.issue(**{**ISSUE_ARGS, "score": 69})
    assert outcome.status == CredentialStatus.NOT_ELIGIBLE
    assert outcome.generated is False
    assert credential_repo.rows == []
    assert completion_repo.rows == {}


@pytest.mark.asyncio
async def test_snapshot_and_default_template(issuer, credential_repo, template_repo):
    outcome = await issuer.issue(**ISSUE_ARGS)

    credential = credential_repo.rows[0]
    assert credential.id == outcome.credential_id
    assert credential.external_user_id == "user_123"
    assert credential.completion_data["user_name"] == "Ada Lovelace"
    assert credential.completion_data["course_name"] == "Intro to Analytics"
    assert credential.completion_data["score"] == 85
    assert credential.completion_data["passing_score"] == 70
    assert re.match(r"^CERT-\d+-[0-9A-Z]{6}$", credential.verification_code)

    assert len(template_repo.templates) == 1
    assert template_repo.templates[0].is_default
    assert credential.template_id == template_repo.templates[0].id


@pytest.mark.asyncio
async def test_existing_default_template_is_reused(issuer, template_repo):
    await issuer.issue(**ISSUE_ARGS)
    await issuer.issue(**{**ISSUE_ARGS, "course_id": "course-2"})
    assert len(template_repo.templates) == 1


@pytest.mark.asyncio
async def test_concurrent_insert_conflict_reports_winner(issuer, credential_repo):
    winner = await issuer.issue(**ISSUE_ARGS)
    # Next lookup misses the winner's row, so the insert hits the uniqueness guard.
    credential_repo.stale_reads = 1

    loser = await issuer.issue(**ISSUE_ARGS)

    assert loser.status == CredentialStatus.ALREADY_ISSUED
    assert loser.credential_id == winner.credential_id
    assert len(credential_repo.rows) == 1


@pytest.mark.asyncio
async def test_completion_tracking_failure_is_degraded(issuer, completion_repo):
    completion_repo.fail = True
    outcome = await issuer.issue(**ISSUE_ARGS)
    assert outcome.status == CredentialStatus.ISSUED
    assert outcome.degraded == ("completion_tracking",)


@pytest.mark.asyncio
async def test_completion_tracking_is_recorded(issuer, completion_repo):
    await issuer.issue(**ISSUE_ARGS)
    record = completion_repo.rows[("user_123", "course-1")]
    assert record.course_complete is True
    assert record.assessment_pass is True
    assert record.assessment_score == 85


@pytest.mark.asyncio
async def test_insert_failure_is_fatal(issuer, credential_repo):
    credential_repo.fail_on_create = True
    with pytest.raises(StorageFault) as exc_info:
        await issuer.issue(**ISSUE_ARGS)
    assert exc_info.value.subsystem == "credential"


def test_verification_code_format():
    code = generate_verification_code(now_ms=1700000000000)
    assert code.startswith("CERT-1700000000000-")
    assert re.match(r"^[0-9A-Z]{6}$", code.rsplit("-", 1)[1])
