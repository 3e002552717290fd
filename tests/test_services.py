"""Applications, follow-ups, interview prep, insights and accounts."""

from datetime import UTC, datetime, timedelta

import pytest
from conftest import CONTACT, RESUME_TEXT, TAILORED, fake_llm

from resume_tailor.agents.results import ContactInformation
from resume_tailor.agents.resume_writer import normalize_tailored_content
from resume_tailor.services import accounts, applications, insights, interview
from resume_tailor.services.common import NotFoundError, TailoringError
from resume_tailor.storage.records import FollowUpCreate, ResumeSessionCreate, StoredResumeCreate, TailoredResumeCreate


def _content(**overrides) -> dict:
    return normalize_tailored_content({**TAILORED, **overrides}, ContactInformation(**CONTACT)).model_dump()


def _saved(storage, user_id="u1", job_title="Senior Database Engineer", company="Globex", ats_score=88, **overrides):
    return storage.save_tailored_resume(
        TailoredResumeCreate(
            user_id=user_id,
            session_id="s1",
            job_title=job_title,
            company=company,
            original_job_description="Own our PostgreSQL fleet.",
            tailored_content=_content(**overrides),
            ats_score=ats_score,
            filename="Jane_Resume_Globex",
        )
    )


# Applications and follow-ups


def test_mark_applied_creates_application(storage):
    resume = _saved(storage)

    updated, application = applications.mark_applied(storage, resume.id, "u1", notes="Referral", source="LinkedIn")

    assert updated.applied_to_job is True
    assert application.tailored_resume_id == resume.id
    assert application.company == "Globex"
    assert application.application_status == "applied"
    assert application.source == "LinkedIn"
    assert application.user_id == "u1"


def test_mark_applied_hides_other_users_resumes(storage):
    resume = _saved(storage, user_id="u2")

    with pytest.raises(NotFoundError, match="Tailored resume not found"):
        applications.mark_applied(storage, resume.id, "u1")


def test_schedule_follow_ups_from_applied_date(storage):
    _, application = applications.mark_applied(storage, _saved(storage).id, "u1")

    follow_ups = applications.schedule_follow_ups(storage, application.id, user_id="u1")

    assert [f.type for f in follow_ups] == ["1w", "2w"]
    assert follow_ups[0].due_at == application.applied_date + timedelta(days=7)
    assert follow_ups[1].due_at == application.applied_date + timedelta(days=14)
    assert all(f.status == "pending" for f in follow_ups)


def test_thank_you_needs_interview_date(storage):
    _, application = applications.mark_applied(storage, _saved(storage).id, "u1")

    assert applications.schedule_follow_ups(storage, application.id, ["thank_you", "3w"], "u1") == []

    interview_date = datetime(2026, 3, 2, 15, 0, tzinfo=UTC)
    storage.update_job_application(application.id, {"interview_date": interview_date})
    [follow_up] = applications.schedule_follow_ups(storage, application.id, ["thank_you"], "u1")

    assert follow_up.due_at == interview_date + timedelta(days=1)


def test_marking_follow_up_sent_stamps_time(storage):
    _, application = applications.mark_applied(storage, _saved(storage).id, "u1")
    [follow_up] = applications.schedule_follow_ups(storage, application.id, ["1w"], "u1")

    updated = applications.update_follow_up(storage, follow_up.id, {"status": "sent"}, "u1")

    assert updated.status == "sent"
    assert updated.sent_at is not None


def test_follow_ups_are_scoped_to_the_users_applications(storage):
    _, mine = applications.mark_applied(storage, _saved(storage).id, "u1")
    _, theirs = applications.mark_applied(storage, _saved(storage, user_id="u2").id, "u2")
    applications.schedule_follow_ups(storage, mine.id, user_id="u1")
    [other] = applications.schedule_follow_ups(storage, theirs.id, ["1w"], "u2")

    assert len(applications.list_follow_ups(storage, "u1")) == 2
    assert len(applications.list_follow_ups(storage, "u1", pending_only=True)) == 2
    assert applications.follow_up_stats(storage, "u1").total == 2
    with pytest.raises(NotFoundError, match="Job application not found"):
        applications.list_follow_ups(storage, "u1", job_application_id=theirs.id)
    with pytest.raises(NotFoundError):
        applications.delete_follow_up(storage, other.id, "u1")
    with pytest.raises(NotFoundError, match="Follow-up not found"):
        applications.get_follow_up(storage, "missing", "u1")


def test_draft_follow_up_email_is_kept(storage):
    _, application = applications.mark_applied(storage, _saved(storage).id, "u1")
    [follow_up] = applications.schedule_follow_ups(storage, application.id, ["1w"], "u1")
    reply = {"subject": "Checking in on my application", "body": "Hi team, ..."}

    updated, email = applications.draft_follow_up_email(storage, follow_up.id, "u1", llm=fake_llm(reply))

    assert email.subject == "Checking in on my application"
    assert updated.email_subject == email.subject
    assert storage.get_follow_up(follow_up.id).email_body == "Hi team, ..."


def test_empty_type_list_schedules_nothing(storage):
    _, application = applications.mark_applied(storage, _saved(storage).id, "u1")

    assert applications.schedule_follow_ups(storage, application.id, [], "u1") == []
    assert storage.get_follow_ups(application.id) == []


def test_follow_up_without_application_is_not_found(memory_storage):
    orphan = memory_storage.create_follow_up(
        FollowUpCreate(job_application_id="gone", due_at=datetime.now(UTC), type="1w")
    )

    for user_id in ("u1", None):
        with pytest.raises(NotFoundError, match="Follow-up not found"):
            applications.get_follow_up(memory_storage, orphan.id, user_id)
    assert applications.list_follow_ups(memory_storage, "u1") == []


# Interview preparation


def test_job_context_from_tailored_resume(memory_storage):
    resume = _saved(memory_storage)

    context = interview.resolve_context(memory_storage, interview.InterviewRequest(mode="job", job_id=resume.id), "u1")

    assert context.mode == "job"
    assert context.company == "Globex"
    assert context.skills == ["PostgreSQL", "SQL Server", "PowerShell"]


def test_general_context_uses_top_requested_skills(memory_storage):
    _saved(memory_storage)

    context = interview.resolve_context(memory_storage, interview.InterviewRequest(), "u1")

    assert context.mode == "general"
    assert context.skills[:2] == ["PostgreSQL", "SQL Server"]


def test_skill_context_takes_one_skill(memory_storage):
    request = interview.InterviewRequest(mode="skill", skills=["Terraform", "AWS"])

    assert interview.resolve_context(memory_storage, request).skills == ["Terraform"]


def test_prepare_questions_are_remembered_on_session(memory_storage):
    session = memory_storage.create_resume_session(ResumeSessionCreate(user_id="u1"))
    reply = {"questions": [{"question": "How do you tune a slow query?", "type": "technical", "difficulty": "senior"}]}
    request = interview.InterviewRequest(mode="skill", skill="PostgreSQL", session_id=session.id)

    questions = interview.prepare_interview(memory_storage, "questions", request, "u1", llm=fake_llm(reply))

    assert questions[0].question == "How do you tune a slow query?"
    prep = memory_storage.get_resume_session(session.id).interview_prep
    assert prep["mode"] == "skill"
    assert prep["questions"][0]["difficulty"] == "senior"


def test_star_stories_fall_back_to_stored_resume(memory_storage):
    memory_storage.create_stored_resume(
        StoredResumeCreate(user_id="u1", name="Base", original_filename="base.pdf", content=RESUME_TEXT, is_default=True)
    )

    assert interview.resume_text_for(memory_storage, interview.InterviewRequest(), "u1") == RESUME_TEXT


def test_star_stories_need_some_resume(memory_storage):
    with pytest.raises(TailoringError, match="No resume content found"):
        interview.resume_text_for(memory_storage, interview.InterviewRequest(), "u1")


def test_tailored_resume_text():
    content = normalize_tailored_content(TAILORED, ContactInformation(**CONTACT))

    text = interview.tailored_resume_text(content)

    assert text.startswith("Jane Doe\nSenior Database Administrator")
    assert "Database Administrator | Acme Health | 2019 - Present" in text
    assert "Skills: PostgreSQL, SQL Server, PowerShell" in text


# Insights


def _two_jobs(storage):
    first = _saved(storage)
    second = _saved(
        storage,
        job_title="Platform Engineer",
        company="Initech",
        ats_score=70,
        skills=["PostgreSQL"],
        coverageReport={"matchedKeywords": ["PostgreSQL"], "missingKeywords": ["Kubernetes", "Terraform"]},
    )
    return first, second


def test_skills_insights(memory_storage):
    _two_jobs(memory_storage)

    report = insights.get_skills_insights(memory_storage, "u1")

    top = {c.skill: c for c in report.top_requested_skills}
    assert [c.skill for c in report.top_requested_skills[:2]] == ["PostgreSQL", "Kubernetes"]
    assert (top["PostgreSQL"].jobs_mentioned, top["PostgreSQL"].coverage_percent) == (2, 100)
    assert top["PostgreSQL"].category == "core-tech"
    assert top["Kubernetes"].coverage_percent == 0
    assert top["Kubernetes"].category == "tools"
    # One job only, so not a gap yet
    assert top["Terraform"].coverage_percent == 0
    assert [g.skill for g in report.missing_skills] == ["Kubernetes"]
    assert report.learning_roadmap[0].skill == "Kubernetes"
    assert report.stats.total_jobs_analyzed == 2
    assert report.stats.total_resumes_generated == 2
    assert report.stats.average_coverage == 60


def test_skills_insights_empty(memory_storage):
    assert insights.get_skills_insights(memory_storage, "u1") == insights.SkillsInsights()


def test_insights_cached_until_invalidated(memory_storage):
    _saved(memory_storage)
    assert insights.get_skills_insights(memory_storage, "u1").stats.total_resumes_generated == 1

    _saved(memory_storage, company="Initech")
    assert insights.get_skills_insights(memory_storage, "u1").stats.total_resumes_generated == 1

    insights.invalidate_insights("u1")
    assert insights.get_skills_insights(memory_storage, "u1").stats.total_resumes_generated == 2


def test_roadmap_falls_back_to_search_link():
    gap = insights.SkillCoverage(
        skill="Data Vault", jobs_mentioned=3, resumes_covering=0, coverage_percent=0, category="responsibilities"
    )

    [resource] = insights.learning_roadmap([gap])

    assert resource.resources[0].url == "https://www.google.com/search?q=learn+Data+Vault"


def test_resume_analytics(memory_storage):
    first, second = _two_jobs(memory_storage)
    _, application = applications.mark_applied(memory_storage, first.id, "u1")
    memory_storage.update_job_application(application.id, {"application_status": "interview"})
    memory_storage.update_tailored_resume(
        first.id, {"response_received": True, "response_date": datetime(2026, 3, 1, tzinfo=UTC)}
    )

    analytics = insights.get_tailored_resume_analytics(memory_storage, "u1")

    assert analytics.total_versions == 2
    assert analytics.applied_count == 1
    assert analytics.response_rate == 100
    assert analytics.average_ats_score == 79
    assert analytics.avg_ats_score_with_responses == 88
    assert analytics.versions_with_responses[0].company == "Globex"
    assert analytics.conversion_funnel.model_dump() == {"saved": 2, "applied": 1, "interviews": 1, "offers": 0}


# Accounts


def test_first_user_is_admin(storage):
    first = accounts.register_user(storage, " alice ", "correct horse")
    second = accounts.register_user(storage, "bob", "battery staple")

    assert first.username == "alice"
    assert first.is_admin is True
    assert second.is_admin is False
    assert first.password != "correct horse"


def test_register_rejects_bad_input(storage):
    accounts.register_user(storage, "alice", "correct horse")

    with pytest.raises(accounts.AccountError, match="Username and password are required"):
        accounts.register_user(storage, "  ", "correct horse")
    with pytest.raises(accounts.AccountError, match="at least 8 characters"):
        accounts.register_user(storage, "bob", "short")
    with pytest.raises(accounts.AccountError, match="Username already exists"):
        accounts.register_user(storage, "alice", "another password")


def test_authenticate(storage):
    user = accounts.register_user(storage, "alice", "correct horse")

    assert accounts.authenticate(storage, "alice", "correct horse").id == user.id
    assert accounts.authenticate(storage, "alice", "wrong horse") is None
    assert accounts.authenticate(storage, "nobody", "correct horse") is None


def test_non_bcrypt_hash_never_verifies():
    assert accounts.verify_password("secret", "plain-text") is False


def test_admin_cannot_lock_themselves_out(storage):
    admin = accounts.register_user(storage, "alice", "correct horse")
    other = accounts.register_user(storage, "bob", "battery staple")

    with pytest.raises(accounts.AccountError, match="remove your own admin access"):
        accounts.update_user(storage, admin.id, admin.id, is_admin=False)
    with pytest.raises(accounts.AccountError, match="delete your own account"):
        accounts.delete_user(storage, admin.id, admin.id)

    promoted = accounts.update_user(storage, other.id, admin.id, is_admin=True, password="new password")
    assert promoted.is_admin is True
    assert accounts.authenticate(storage, "bob", "new password") is not None

    accounts.delete_user(storage, other.id, admin.id)
    assert storage.get_user(other.id) is None
    with pytest.raises(NotFoundError, match="User not found"):
        accounts.delete_user(storage, other.id, admin.id)
