from fastapi import FastAPI, UploadFile, File, Form, Header, HTTPException, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from typing import Optional, List
import tempfile
import logging
import os
import io
import csv
from pathlib import Path
from datetime import datetime

# Our modules
from sales_fresher_scorer import Verdict, score_sales_fresher_resume
from auto_hire_rules import auto_hire_decision
from text_extraction import extract_text_from_file, is_supported, ALLOWED_EXTENSIONS
from auth import Identity, ROLES, create_access_token, get_current_identity, require_role
from database import Batch, Resume, get_db, init_db

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("intake_service")

app = FastAPI(
    title="Resume Intake",
    version="1.0",
    description="Batch resume upload, heuristic scoring and ranking for sales hiring"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    init_db()


# Service key for issuing staff tokens
API_KEY = os.getenv("RI_API_KEY", "changeme123!!")
MAX_BULK_FILES = int(os.getenv("MAX_BULK_FILES", "50"))

staff_only = require_role("admin", "recruiter")
admin_only = require_role("admin")


# ----- Request models -----
class TokenRequest(BaseModel):
    user_id: str
    company_id: str
    role: str


class BatchRequest(BaseModel):
    role: Optional[str] = None


def get_batch_or_404(db: Session, batch_id: str, identity: Identity) -> Batch:
    batch = db.query(Batch).filter(
        Batch.id == batch_id,
        Batch.company_id == identity.company_id
    ).first()
    if not batch:
        raise HTTPException(status_code=404, detail="Batch not found")
    return batch


def ranked_resumes(db: Session, batch: Batch) -> List[Resume]:
    return db.query(Resume).filter(
        Resume.batch_id == batch.id
    ).order_by(Resume.score.desc(), Resume.uploaded_at.asc()).all()


async def read_upload_text(file: UploadFile) -> str:
    """Spool an upload to a temp file and extract its text off the event loop"""
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=Path(file.filename).suffix)
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(await file.read())
        return await run_in_threadpool(extract_text_from_file, tmp_path)
    finally:
        tmp_path.unlink(missing_ok=True)


def save_resume(
    db: Session,
    batch: Batch,
    raw_text: str,
    filename: str,
    identity: Identity
) -> Resume:
    """Score the text and store it against the batch"""

    result = score_sales_fresher_resume(raw_text)
    decision = auto_hire_decision(result.score, raw_text)

    resume = Resume(
        batch_id=batch.id,
        company_id=batch.company_id,
        filename=filename,
        raw_text=raw_text,
        score=result.score,
        verdict=result.verdict.value,
        keyword_score=result.breakdown.keywords,
        experience_score=result.breakdown.experience,
        tech_score=result.breakdown.tech,
        quality_score=result.breakdown.quality,
        auto_hire_verdict=decision.verdict.value,
        reasons=list(decision.reasons),
        uploaded_by=identity.user_id
    )

    db.add(resume)
    db.commit()
    db.refresh(resume)

    logger.info(
        "Scored %s in batch %s: %s (%s)",
        filename, batch.id, result.score, result.verdict.value
    )
    return resume


@app.get("/")
def root():
    return {
        "service": "Resume Intake",
        "version": "1.0",
        "description": "Heuristic resume scoring for sales hiring batches",
        "features": [
            "Batch management",
            "PDF / DOCX / TXT upload",
            "Bulk upload (up to %d resumes)" % MAX_BULK_FILES,
            "Ranked batch results",
            "Verdict statistics",
            "Export to CSV/JSON"
        ]
    }


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0"}


@app.post("/auth/token")
def issue_token(req: TokenRequest, x_api_key: Optional[str] = Header(None)):
    """Issue a staff bearer token"""

    if x_api_key != API_KEY:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")

    if req.role not in ROLES:
        raise HTTPException(status_code=400, detail=f"role must be one of {', '.join(ROLES)}")

    token = create_access_token(req.user_id, req.company_id, req.role)
    return {"access_token": token, "token_type": "bearer"}


@app.post("/batch")
def create_batch(
    req: BatchRequest,
    identity: Identity = Depends(staff_only),
    db: Session = Depends(get_db)
):
    if not req.role or not req.role.strip():
        raise HTTPException(status_code=400, detail="role is required")

    batch = Batch(
        company_id=identity.company_id,
        role=req.role.strip(),
        created_by=identity.user_id
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)

    logger.info("Created batch %s (%s) for company %s", batch.id, batch.role, batch.company_id)
    return batch.to_dict()


@app.get("/batch")
def list_batches(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    batches = db.query(Batch).filter(
        Batch.company_id == identity.company_id
    ).order_by(Batch.created_at.desc()).all()
    return [batch.to_dict() for batch in batches]


@app.get("/batch/{batch_id}/results")
def get_batch_results(
    batch_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Resumes in the batch, best score first"""

    batch = get_batch_or_404(db, batch_id, identity)
    resumes = ranked_resumes(db, batch)

    return {
        "batch": batch.to_dict(),
        "total": len(resumes),
        "ranked_resumes": [
            {"rank": i + 1, **resume.to_dict()} for i, resume in enumerate(resumes)
        ]
    }


@app.delete("/batch/{batch_id}")
def delete_batch(
    batch_id: str,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db)
):
    batch = get_batch_or_404(db, batch_id, identity)
    deleted = len(batch.resumes)
    db.delete(batch)
    db.commit()

    logger.info("Deleted batch %s with %d resumes", batch_id, deleted)
    return {"deleted": batch_id, "resumes_deleted": deleted}


@app.get("/batch/{batch_id}/export")
def export_batch(
    batch_id: str,
    format: str = Query("csv", pattern="^(csv|json)$"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Export ranked batch results to CSV or JSON"""

    batch = get_batch_or_404(db, batch_id, identity)
    resumes = ranked_resumes(db, batch)

    if format == "csv":
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([
            "Rank", "Filename", "Score", "Verdict", "Keywords", "Experience",
            "Tech", "Quality", "Auto-Hire Verdict", "Reasons", "Uploaded At"
        ])

        for rank, resume in enumerate(resumes, start=1):
            writer.writerow([
                rank,
                resume.filename,
                resume.score,
                resume.verdict,
                resume.keyword_score,
                resume.experience_score,
                resume.tech_score,
                resume.quality_score,
                resume.auto_hire_verdict,
                "; ".join(resume.reasons or []),
                resume.uploaded_at.isoformat() if resume.uploaded_at else ""
            ])

        output.seek(0)
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=batch_{batch.id}_{datetime.utcnow().strftime('%Y%m%d')}.csv"}
        )

    else:
        return {
            "exported_at": datetime.utcnow().isoformat(),
            "batch": batch.to_dict(),
            "total_resumes": len(resumes),
            "resumes": [resume.to_dict() for resume in resumes]
        }


@app.post("/resume/upload")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    batch_id: Optional[str] = Form(None),
    identity: Identity = Depends(staff_only),
    db: Session = Depends(get_db)
):
    """Upload a single resume into a batch and score it"""

    if resume is None or not resume.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not batch_id:
        raise HTTPException(status_code=400, detail="batch_id is required")
    if not is_supported(resume.filename):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type; expected one of {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    batch = get_batch_or_404(db, batch_id, identity)

    try:
        raw_text = await read_upload_text(resume)
        saved = await run_in_threadpool(save_resume, db, batch, raw_text, resume.filename, identity)
        return JSONResponse({"success": True, "resume": saved.to_dict()})

    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception:
        db.rollback()
        logger.exception("Upload failed for %s", resume.filename)
        raise HTTPException(status_code=500, detail="Upload failed")


@app.post("/resume/upload_bulk")
async def upload_bulk(
    files: Optional[List[UploadFile]] = File(None),
    batch_id: Optional[str] = Form(None),
    identity: Identity = Depends(staff_only),
    db: Session = Depends(get_db)
):
    """Upload up to MAX_BULK_FILES resumes into a batch"""

    if not files:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not batch_id:
        raise HTTPException(status_code=400, detail="batch_id is required")
    if len(files) > MAX_BULK_FILES:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_BULK_FILES} files per upload")

    batch = get_batch_or_404(db, batch_id, identity)

    results = []
    errors = []

    for file in files:
        if not is_supported(file.filename):
            errors.append({
                "filename": file.filename,
                "error": "Unsupported file type",
                "status": "failed"
            })
            continue

        try:
            raw_text = await read_upload_text(file)
            saved = await run_in_threadpool(save_resume, db, batch, raw_text, file.filename, identity)

            results.append({
                "filename": file.filename,
                "resume_id": saved.id,
                "score": saved.score,
                "verdict": saved.verdict,
                "auto_hire_verdict": saved.auto_hire_verdict,
                "status": "success"
            })

        except Exception as e:
            db.rollback()
            logger.warning("Bulk upload failed for %s: %s", file.filename, e)
            errors.append({
                "filename": file.filename,
                "error": str(e),
                "status": "failed"
            })

    return JSONResponse({
        "batch_id": batch.id,
        "total_files": len(files),
        "successful": len(results),
        "failed": len(errors),
        "results": results,
        "errors": errors
    })


@app.get("/resume/{resume_id}")
def get_resume(
    resume_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    resume = db.query(Resume).filter(
        Resume.id == resume_id,
        Resume.company_id == identity.company_id
    ).first()

    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")

    return resume.to_dict(include_text=True)


@app.get("/api/stats")
def get_stats(
    batch_id: Optional[str] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Resume totals per verdict for the company, or for one batch"""

    query = db.query(Resume.verdict, func.count(Resume.id)).filter(
        Resume.company_id == identity.company_id
    )
    if batch_id:
        batch = get_batch_or_404(db, batch_id, identity)
        query = query.filter(Resume.batch_id == batch.id)

    by_verdict = {v.value: 0 for v in Verdict}
    for verdict, count in query.group_by(Resume.verdict).all():
        by_verdict[verdict] = count

    return {
        "batch_id": batch_id,
        "total": sum(by_verdict.values()),
        "by_verdict": by_verdict,
        "shortlisted": by_verdict[Verdict.HIRE.value],
        "pending": by_verdict[Verdict.MAYBE.value],
        "rejected": by_verdict[Verdict.REJECT.value]
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
