"""
Resume Intake Database Models
SQLAlchemy ORM for batches and scored resumes
"""

from sqlalchemy import create_engine, Column, String, Integer, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from datetime import datetime
import logging
import os
import uuid

logger = logging.getLogger(__name__)

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class Batch(Base):
    """
    A named group of resumes for one hiring round, owned by a company
    """
    __tablename__ = 'batches'

    id = Column(String(36), primary_key=True, default=_new_id)
    company_id = Column(String(36), nullable=False, index=True)

    # Hiring role the batch is screening for, e.g. "Sales Associate"
    role = Column(String(255), nullable=False)
    created_by = Column(String(36))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    resumes = relationship(
        "Resume",
        back_populates="batch",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Batch(id={self.id}, role={self.role}, company={self.company_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "role": self.role,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


class Resume(Base):
    """
    One uploaded document with its extracted text, score and verdicts
    """
    __tablename__ = 'resumes'

    # Primary identifiers
    id = Column(String(36), primary_key=True, default=_new_id)
    batch_id = Column(String(36), ForeignKey('batches.id', ondelete='CASCADE'), nullable=False, index=True)
    company_id = Column(String(36), nullable=False, index=True)

    # Document
    filename = Column(String(255))
    raw_text = Column(Text)

    # Scorecard
    score = Column(Integer, nullable=False, index=True)
    verdict = Column(String(10), nullable=False)
    keyword_score = Column(Integer, default=0)
    experience_score = Column(Integer, default=0)
    tech_score = Column(Integer, default=0)
    quality_score = Column(Integer, default=0)

    # Auto-hire explanation
    auto_hire_verdict = Column(String(10))
    reasons = Column(JSON)

    # Metadata
    uploaded_by = Column(String(36))
    uploaded_at = Column(DateTime, default=datetime.utcnow, index=True)

    batch = relationship("Batch", back_populates="resumes")

    def __repr__(self):
        return f"<Resume(id={self.id}, filename={self.filename}, score={self.score})>"

    def to_dict(self, include_text: bool = False):
        """Convert to dictionary for JSON response"""
        out = {
            "id": self.id,
            "batch_id": self.batch_id,
            "company_id": self.company_id,
            "filename": self.filename,
            "score": self.score,
            "verdict": self.verdict,
            "breakdown": {
                "keywords": self.keyword_score,
                "experience": self.experience_score,
                "tech": self.tech_score,
                "quality": self.quality_score
            },
            "auto_hire_verdict": self.auto_hire_verdict,
            "reasons": self.reasons or [],
            "uploaded_by": self.uploaded_by,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None
        }
        if include_text:
            out["raw_text"] = self.raw_text
        return out


# Database connection setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./resume_intake.db")

# Hosted PostgreSQL URLs often start with postgres:// instead of postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Initialize database - create all tables"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database initialized")


def get_db():
    """Dependency for getting DB session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Run on import (for development)
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
