"""Relational storage backend on SQLAlchemy.

Each operation opens its own session and commits before returning.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from resume_tailor.db import tables
from resume_tailor.storage import records
from resume_tailor.storage.base import Storage, Updates, clean_updates, utcnow


class DatabaseStorage(Storage):
    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # Helpers

    def _create(self, table, model, data):
        with self._session_factory() as db:
            row = table(**data.model_dump(exclude_none=True))
            db.add(row)
            db.commit()
            db.refresh(row)
            return model.model_validate(row)

    def _get(self, table, model, record_id: str):
        with self._session_factory() as db:
            row = db.get(table, record_id)
            return model.model_validate(row) if row else None

    @staticmethod
    def _apply(row, model, updates: Updates):
        """Validate the merged record, then copy the changed fields onto the row."""
        changes = {k: v for k, v in clean_updates(updates).items() if k in model.model_fields}
        merged = model.model_validate({**model.model_validate(row).model_dump(), **changes, "updated_at": utcnow()})
        for key in changes:
            setattr(row, key, getattr(merged, key))
        row.updated_at = merged.updated_at
        return merged

    def _update(self, table, model, record_id: str, updates: Updates):
        with self._session_factory() as db:
            row = db.get(table, record_id)
            if row is None:
                return None
            self._apply(row, model, updates)
            db.commit()
            db.refresh(row)
            return model.model_validate(row)

    def _delete(self, table, record_id: str) -> bool:
        with self._session_factory() as db:
            row = db.get(table, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def _list(self, table, model, *criteria, order_by=None):
        with self._session_factory() as db:
            query = db.query(table).filter(*criteria)
            if order_by is not None:
                query = query.order_by(order_by)
            return [model.model_validate(row) for row in query.all()]

    # Users

    def create_user(self, data):
        return self._create(tables.User, records.User, data)

    def get_user(self, user_id):
        return self._get(tables.User, records.User, user_id)

    def get_user_by_username(self, username):
        with self._session_factory() as db:
            row = db.query(tables.User).filter(tables.User.username == username).first()
            return records.User.model_validate(row) if row else None

    def list_users(self):
        return self._list(tables.User, records.User, order_by=tables.User.created_at.asc())

    def update_user(self, user_id, updates):
        return self._update(tables.User, records.User, user_id, updates)

    def delete_user(self, user_id):
        return self._delete(tables.User, user_id)

    # Resume sessions

    def create_resume_session(self, data):
        return self._create(tables.ResumeSession, records.ResumeSession, data)

    def get_resume_session(self, session_id):
        return self._get(tables.ResumeSession, records.ResumeSession, session_id)

    def update_resume_session(self, session_id, updates):
        return self._update(tables.ResumeSession, records.ResumeSession, session_id, updates)

    def delete_resume_session(self, session_id):
        return self._delete(tables.ResumeSession, session_id)

    def get_resume_sessions(self, user_id=None):
        criteria = [tables.ResumeSession.user_id == user_id] if user_id is not None else []
        return self._list(
            tables.ResumeSession, records.ResumeSession, *criteria, order_by=tables.ResumeSession.created_at.desc()
        )

    # Job postings

    def create_job_posting(self, data):
        if self.get_job_posting(data.url) is not None:
            raise ValueError(f"Job posting already exists for {data.url}")
        return self._create(tables.JobPosting, records.JobPosting, data)

    def get_job_posting(self, url):
        with self._session_factory() as db:
            row = db.query(tables.JobPosting).filter(tables.JobPosting.url == url).first()
            return records.JobPosting.model_validate(row) if row else None

    def get_job_posting_by_id(self, posting_id):
        return self._get(tables.JobPosting, records.JobPosting, posting_id)

    def update_job_posting(self, posting_id, updates):
        return self._update(tables.JobPosting, records.JobPosting, posting_id, updates)

    def delete_job_posting(self, posting_id):
        return self._delete(tables.JobPosting, posting_id)

    # Stored resumes

    @staticmethod
    def _clear_defaults(db: Session, keep_id: str | None = None) -> None:
        query = db.query(tables.StoredResume).filter(tables.StoredResume.is_default.is_(True))
        if keep_id is not None:
            query = query.filter(tables.StoredResume.id != keep_id)
        for row in query.all():
            row.is_default = False
            row.updated_at = utcnow()

    def create_stored_resume(self, data):
        with self._session_factory() as db:
            if data.is_default:
                self._clear_defaults(db)
            row = tables.StoredResume(**data.model_dump(exclude_none=True))
            db.add(row)
            db.commit()
            db.refresh(row)
            return records.StoredResume.model_validate(row)

    def get_stored_resumes(self, user_id=None):
        criteria = [tables.StoredResume.user_id == user_id] if user_id is not None else []
        return self._list(
            tables.StoredResume, records.StoredResume, *criteria, order_by=tables.StoredResume.created_at.desc()
        )

    def get_stored_resume(self, resume_id):
        return self._get(tables.StoredResume, records.StoredResume, resume_id)

    def get_default_resume(self):
        with self._session_factory() as db:
            row = db.query(tables.StoredResume).filter(tables.StoredResume.is_default.is_(True)).first()
            return records.StoredResume.model_validate(row) if row else None

    def update_stored_resume(self, resume_id, updates):
        with self._session_factory() as db:
            row = db.get(tables.StoredResume, resume_id)
            if row is None:
                return None
            merged = self._apply(row, records.StoredResume, updates)
            if merged.is_default:
                self._clear_defaults(db, keep_id=resume_id)
            db.commit()
            db.refresh(row)
            return records.StoredResume.model_validate(row)

    def delete_stored_resume(self, resume_id):
        return self._delete(tables.StoredResume, resume_id)

    def set_default_resume(self, resume_id):
        return self.update_stored_resume(resume_id, {"is_default": True}) is not None

    # Tailored resumes

    def save_tailored_resume(self, data):
        return self._create(tables.TailoredResume, records.TailoredResume, data)

    def get_tailored_resumes(self, user_id=None):
        criteria = [tables.TailoredResume.user_id == user_id] if user_id is not None else []
        return self._list(
            tables.TailoredResume, records.TailoredResume, *criteria, order_by=tables.TailoredResume.created_at.desc()
        )

    def get_tailored_resume(self, resume_id):
        return self._get(tables.TailoredResume, records.TailoredResume, resume_id)

    def update_tailored_resume(self, resume_id, updates):
        return self._update(tables.TailoredResume, records.TailoredResume, resume_id, updates)

    def delete_tailored_resume(self, resume_id):
        return self._delete(tables.TailoredResume, resume_id)

    # Job applications

    def create_job_application(self, data):
        return self._create(tables.JobApplication, records.JobApplication, data)

    def get_job_applications(self, user_id=None):
        criteria = [tables.JobApplication.user_id == user_id] if user_id is not None else []
        return self._list(
            tables.JobApplication, records.JobApplication, *criteria, order_by=tables.JobApplication.applied_date.desc()
        )

    def get_job_application(self, application_id):
        return self._get(tables.JobApplication, records.JobApplication, application_id)

    def update_job_application(self, application_id, updates):
        return self._update(tables.JobApplication, records.JobApplication, application_id, updates)

    def delete_job_application(self, application_id):
        with self._session_factory() as db:
            row = db.get(tables.JobApplication, application_id)
            if row is None:
                return False
            db.query(tables.FollowUp).filter(tables.FollowUp.job_application_id == application_id).delete()
            db.delete(row)
            db.commit()
            return True

    def get_application_stats(self, user_id=None):
        with self._session_factory() as db:
            query = db.query(tables.JobApplication.application_status, func.count(tables.JobApplication.id))
            if user_id is not None:
                query = query.filter(tables.JobApplication.user_id == user_id)
            counts = dict(query.group_by(tables.JobApplication.application_status).all())
        return records.ApplicationStats(
            total=sum(counts.values()),
            applied=counts.get("applied", 0),
            interviews=counts.get("interview", 0),
            offers=counts.get("offer", 0),
            rejected=counts.get("rejected", 0),
        )

    # Follow-ups

    def create_follow_up(self, data):
        return self._create(tables.FollowUp, records.FollowUp, data)

    def get_follow_ups(self, job_application_id=None):
        criteria = [tables.FollowUp.job_application_id == job_application_id] if job_application_id is not None else []
        return self._list(tables.FollowUp, records.FollowUp, *criteria, order_by=tables.FollowUp.due_at.asc())

    def get_follow_up(self, follow_up_id):
        return self._get(tables.FollowUp, records.FollowUp, follow_up_id)

    def get_pending_follow_ups(self):
        return self._list(
            tables.FollowUp, records.FollowUp, tables.FollowUp.status == "pending", order_by=tables.FollowUp.due_at.asc()
        )

    def update_follow_up(self, follow_up_id, updates):
        return self._update(tables.FollowUp, records.FollowUp, follow_up_id, updates)

    def delete_follow_up(self, follow_up_id):
        return self._delete(tables.FollowUp, follow_up_id)

    def get_follow_up_stats(self):
        with self._session_factory() as db:
            counts = dict(
                db.query(tables.FollowUp.status, func.count(tables.FollowUp.id)).group_by(tables.FollowUp.status).all()
            )
        pending, sent, skipped = counts.get("pending", 0), counts.get("sent", 0), counts.get("skipped", 0)
        return records.FollowUpStats(pending=pending, sent=sent, skipped=skipped, total=pending + sent + skipped)
