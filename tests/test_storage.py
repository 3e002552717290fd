"""Storage contract, run against the in-memory and the SQLite-backed store."""

from datetime import UTC, datetime, timedelta

import pytest

from resume_tailor.storage.records import (
    FollowUpCreate,
    JobApplicationCreate,
    JobPostingCreate,
    ResumeSessionCreate,
    StoredResumeCreate,
    TailoredResumeCreate,
    UserCreate,
)


def _stored(storage, name="Base", user_id="u1", is_default=False):
    return storage.create_stored_resume(
        StoredResumeCreate(
            user_id=user_id, name=name, original_filename=f"{name}.pdf", content="resume text", is_default=is_default
        )
    )


def _tailored(storage, user_id="u1", company="Globex"):
    return storage.save_tailored_resume(
        TailoredResumeCreate(
            user_id=user_id,
            session_id="s1",
            job_title="Engineer",
            company=company,
            tailored_content={"summary": "x"},
            filename="Jane_Resume_Globex",
        )
    )


def _application(storage, user_id="u1", status="applied", applied_date=None):
    resume = _tailored(storage, user_id)
    return storage.create_job_application(
        JobApplicationCreate(
            user_id=user_id,
            tailored_resume_id=resume.id,
            job_title="Engineer",
            company="Globex",
            application_status=status,
            applied_date=applied_date,
        )
    )


def test_create_assigns_id_and_timestamps(storage):
    session = storage.create_resume_session(ResumeSessionCreate(user_id="u1"))

    assert session.id
    assert session.status == "draft"
    assert session.created_at.tzinfo is not None
    assert storage.get_resume_session(session.id) == session


def test_get_unknown_returns_none(storage):
    assert storage.get_resume_session("missing") is None
    assert storage.get_user("missing") is None
    assert storage.get_follow_up("missing") is None


def test_update_merges_fields_and_refreshes_updated_at(storage):
    session = storage.create_resume_session(ResumeSessionCreate(user_id="u1"))

    updated = storage.update_resume_session(session.id, {"status": "analyzing", "job_url": "https://x.test/job"})

    assert updated.status == "analyzing"
    assert updated.job_url == "https://x.test/job"
    assert updated.user_id == "u1"
    assert updated.updated_at >= session.updated_at
    assert storage.get_resume_session(session.id).status == "analyzing"


def test_update_ignores_identity_fields(storage):
    session = storage.create_resume_session(ResumeSessionCreate())

    updated = storage.update_resume_session(session.id, {"id": "other", "created_at": datetime(2000, 1, 1, tzinfo=UTC)})

    assert updated.id == session.id
    assert updated.created_at == session.created_at


def test_update_unknown_returns_none_without_side_effects(storage):
    session = storage.create_resume_session(ResumeSessionCreate())

    assert storage.update_resume_session("missing", {"status": "error"}) is None
    assert storage.get_resume_sessions() == [session]


def test_second_delete_returns_false(storage):
    session = storage.create_resume_session(ResumeSessionCreate())

    assert storage.delete_resume_session(session.id) is True
    assert storage.delete_resume_session(session.id) is False


def test_sessions_filtered_by_user(storage):
    mine = storage.create_resume_session(ResumeSessionCreate(user_id="u1"))
    storage.create_resume_session(ResumeSessionCreate(user_id="u2"))

    assert [s.id for s in storage.get_resume_sessions("u1")] == [mine.id]
    assert len(storage.get_resume_sessions()) == 2


def test_users_by_username(storage):
    user = storage.create_user(UserCreate(username="alice", password="hash"))

    assert storage.get_user_by_username("alice") == user
    assert storage.get_user_by_username("bob") is None
    assert storage.list_users() == [user]


def test_job_posting_lookup_by_url(storage):
    posting = storage.create_job_posting(JobPostingCreate(url="https://jobs.test/1", title="DBA", keywords=["SQL"]))

    assert storage.get_job_posting("https://jobs.test/1") == posting
    assert storage.get_job_posting_by_id(posting.id) == posting
    assert storage.get_job_posting("https://jobs.test/2") is None


def test_job_posting_url_is_unique(storage):
    storage.create_job_posting(JobPostingCreate(url="https://jobs.test/1"))

    with pytest.raises(ValueError):
        storage.create_job_posting(JobPostingCreate(url="https://jobs.test/1"))


def test_creating_default_resume_clears_previous_default(storage):
    first = _stored(storage, "First", is_default=True)
    second = _stored(storage, "Second", is_default=True)

    assert storage.get_stored_resume(first.id).is_default is False
    assert storage.get_default_resume().id == second.id


def test_set_default_leaves_exactly_one_default(storage):
    resumes = [_stored(storage, name) for name in ("A", "B", "C")]

    for resume in resumes:
        assert storage.set_default_resume(resume.id) is True
        defaults = [r.id for r in storage.get_stored_resumes() if r.is_default]
        assert defaults == [resume.id]


def test_set_default_unknown_changes_nothing(storage):
    resume = _stored(storage, is_default=True)

    assert storage.set_default_resume("missing") is False
    assert storage.get_default_resume().id == resume.id


def test_update_to_default_clears_others(storage):
    first = _stored(storage, "First", is_default=True)
    second = _stored(storage, "Second")

    storage.update_stored_resume(second.id, {"is_default": True})

    assert storage.get_stored_resume(first.id).is_default is False
    assert storage.get_stored_resume(second.id).is_default is True


def test_mark_as_applied(storage):
    resume = _tailored(storage)

    updated = storage.mark_as_applied(resume.id, "Sent via referral")

    assert updated.applied_to_job is True
    assert updated.application_date is not None
    assert updated.notes == "Sent via referral"
    assert storage.mark_as_applied("missing") is None


def test_application_defaults_applied_date(storage):
    application = _application(storage)

    assert application.applied_date is not None
    assert application.priority == "medium"


def test_applications_newest_first(storage):
    now = datetime.now(UTC)
    older = _application(storage, applied_date=now - timedelta(days=3))
    newer = _application(storage, applied_date=now)

    assert [a.id for a in storage.get_job_applications("u1")] == [newer.id, older.id]


def test_application_stats_sum_to_total(storage):
    for status in ("applied", "applied", "interview", "offer", "rejected"):
        _application(storage, status=status)
    _application(storage, user_id="u2", status="interview")

    stats = storage.get_application_stats("u1")

    assert (stats.total, stats.applied, stats.interviews, stats.offers, stats.rejected) == (5, 2, 1, 1, 1)
    assert stats.applied + stats.interviews + stats.offers + stats.rejected == stats.total
    assert storage.get_application_stats().total == 6


def test_follow_ups_ordered_by_due_date(storage):
    application = _application(storage)
    now = datetime.now(UTC)
    late = storage.create_follow_up(FollowUpCreate(job_application_id=application.id, due_at=now + timedelta(days=14), type="2w"))
    early = storage.create_follow_up(FollowUpCreate(job_application_id=application.id, due_at=now + timedelta(days=7), type="1w"))

    assert [f.id for f in storage.get_follow_ups(application.id)] == [early.id, late.id]
    assert [f.id for f in storage.get_pending_follow_ups()] == [early.id, late.id]

    storage.update_follow_up(early.id, {"status": "sent"})
    assert [f.id for f in storage.get_pending_follow_ups()] == [late.id]


def test_follow_up_stats(storage):
    application = _application(storage)
    due = datetime.now(UTC)
    for status in ("pending", "pending", "sent", "skipped"):
        storage.create_follow_up(
            FollowUpCreate(job_application_id=application.id, due_at=due, type="1w", status=status)
        )

    stats = storage.get_follow_up_stats()

    assert (stats.pending, stats.sent, stats.skipped, stats.total) == (2, 1, 1, 4)


def test_deleting_application_removes_its_follow_ups(storage):
    application = _application(storage)
    other = _application(storage)
    due = datetime.now(UTC)
    storage.create_follow_up(FollowUpCreate(job_application_id=application.id, due_at=due, type="1w"))
    kept = storage.create_follow_up(FollowUpCreate(job_application_id=other.id, due_at=due, type="1w"))

    assert storage.delete_job_application(application.id) is True

    assert [f.id for f in storage.get_follow_ups()] == [kept.id]
    assert storage.delete_job_application(application.id) is False


def test_overall_stats(storage):
    analyzed = storage.create_resume_session(ResumeSessionCreate(user_id="u1"))
    storage.update_resume_session(analyzed.id, {"job_analysis": {"title": "DBA"}})
    storage.create_resume_session(ResumeSessionCreate(user_id="u1"))
    application = _application(storage)
    storage.create_follow_up(FollowUpCreate(job_application_id=application.id, due_at=datetime.now(UTC), type="1w"))
    _application(storage, user_id="u2")

    stats = storage.get_overall_stats("u1")

    assert stats.jobs_analyzed == 1
    assert stats.resumes_generated == 1
    assert stats.applications_sent == 1
    assert stats.follow_ups_scheduled == 1
