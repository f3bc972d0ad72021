"""Medical records API endpoints: exams, diagnostics, files and search."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zoocare.core.config import settings
from zoocare.core.database import get_db
from zoocare.models.models import (
    DIAGNOSTIC_ID_PREFIX,
    EXAM_ID_PREFIX,
    FILE_ID_PREFIX,
    Animal,
    DiagnosticResult,
    MedicalAuditLog,
    MedicalExam,
    MedicalFile,
    make_tracking_id,
    utcnow,
)
from zoocare.schemas.schemas import (
    AnimalMedicalFiles,
    AnimalMedicalOverview,
    DiagnosticImportRequest,
    DiagnosticImportResponse,
    DiagnosticResultResponse,
    DiagnosticResultUpdate,
    DiagnosticResultUpdated,
    MedicalExamCreate,
    MedicalExamCreated,
    MedicalExamResponse,
    MedicalExamUpdate,
    MedicalExamUpdated,
    MedicalFileResponse,
    MedicalFilesUploaded,
    MedicalFileWithLinks,
    MedicalSummaryResponse,
    RecentMedicalActivity,
)
from zoocare.services.file_storage import (
    ALLOWED_MIME_TYPES,
    MedicalFileStorage,
    get_file_storage,
)
from zoocare.services.medical_records import (
    count_activity_by_type,
    get_animal_summary,
    get_overall_summary,
    list_recent_activity,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["medical"])


def _get_animal_or_404(db: Session, animal_id: int) -> Animal:
    animal = db.query(Animal).filter(Animal.animal_id == animal_id).first()
    if not animal:
        raise HTTPException(status_code=404, detail=f"Animal with ID {animal_id} not found.")
    return animal


def _active_files(db: Session, *criteria) -> list[MedicalFile]:
    return (
        db.query(MedicalFile)
        .filter(MedicalFile.is_active.is_(True), *criteria)
        .order_by(MedicalFile.uploaded_at.desc())
        .all()
    )


# ==================== Overview ====================

@router.get("/animals/{animal_id}/medical", response_model=AnimalMedicalOverview)
def get_animal_medical(animal_id: int, db: Session = Depends(get_db)):
    """All exams, diagnostic results and active files for one animal."""
    try:
        exams = (
            db.query(MedicalExam)
            .filter(MedicalExam.animal_id == animal_id)
            .order_by(MedicalExam.exam_date.desc())
            .all()
        )
        diagnostics = (
            db.query(DiagnosticResult)
            .filter(DiagnosticResult.animal_id == animal_id)
            .order_by(DiagnosticResult.test_date.desc())
            .all()
        )
        files = _active_files(db, MedicalFile.animal_id == animal_id)
        summary = get_animal_summary(db, animal_id)
    except SQLAlchemyError:
        logger.exception("Database error fetching medical records for animal %s", animal_id)
        raise HTTPException(status_code=500, detail="Database error fetching medical records")

    return {
        "animal_id": animal_id,
        "summary": summary,
        "exams": exams,
        "diagnostics": diagnostics,
        "files": files,
        "total_records": len(exams) + len(diagnostics) + len(files),
    }


@router.get("/medical/search/{record_id}")
def search_medical_record(record_id: str, db: Session = Depends(get_db)):
    """
    Look up a medical record by its tracking ID.

    The prefix selects the record type: EXAM- for examinations (returned
    with their diagnostics and files), DIAG- for diagnostic results (with
    files) and FILE- for uploaded files. Matching is case-insensitive.
    """
    record_id = record_id.upper()
    record = None
    record_type = None

    if record_id.startswith(f"{EXAM_ID_PREFIX}-"):
        exam = db.query(MedicalExam).filter(MedicalExam.unique_record_id == record_id).first()
        if exam:
            record_type = "examination"
            record = MedicalExamResponse.model_validate(exam).model_dump()
            record["animal_name"] = exam.animal.animal_name
            record["associated_diagnostics"] = [
                DiagnosticResultResponse.model_validate(d).model_dump()
                for d in sorted(exam.diagnostics, key=lambda d: d.test_date, reverse=True)
            ]
            record["attached_files"] = [
                MedicalFileResponse.model_validate(f).model_dump()
                for f in _active_files(db, MedicalFile.exam_id == exam.exam_id)
            ]
    elif record_id.startswith(f"{DIAGNOSTIC_ID_PREFIX}-"):
        result = db.query(DiagnosticResult).filter(DiagnosticResult.unique_record_id == record_id).first()
        if result:
            record_type = "diagnostic"
            record = DiagnosticResultResponse.model_validate(result).model_dump()
            record["animal_name"] = result.animal.animal_name
            record["exam_date"] = result.exam.exam_date if result.exam else None
            record["veterinarian"] = result.exam.veterinarian if result.exam else None
            record["attached_files"] = [
                MedicalFileResponse.model_validate(f).model_dump()
                for f in _active_files(db, MedicalFile.result_id == result.result_id)
            ]
    elif record_id.startswith(f"{FILE_ID_PREFIX}-"):
        medical_file = (
            db.query(MedicalFile)
            .filter(MedicalFile.unique_file_id == record_id, MedicalFile.is_active.is_(True))
            .first()
        )
        if medical_file:
            record_type = "file"
            record = _file_with_links(medical_file).model_dump()
            record["animal_name"] = medical_file.animal.animal_name

    if record is None:
        raise HTTPException(status_code=404, detail={
            "message": f"No medical record found with ID: {record_id}",
            "searched_id": record_id,
        })

    return {
        "record_id": record_id,
        "record_type": record_type,
        "found": True,
        "record": record,
    }


# ==================== Examinations ====================

@router.post("/animals/{animal_id}/medical/exam", response_model=MedicalExamCreated, status_code=201)
def create_medical_exam(animal_id: int, exam: MedicalExamCreate, db: Session = Depends(get_db)):
    """Record a medical examination and assign its EXAM- tracking ID."""
    _get_animal_or_404(db, animal_id)

    db_exam = MedicalExam(animal_id=animal_id, **exam.model_dump())
    db.add(db_exam)
    db.flush()
    db_exam.unique_record_id = make_tracking_id(EXAM_ID_PREFIX, db_exam.exam_id)
    db.commit()
    db.refresh(db_exam)

    logger.info("Recorded exam %s for animal %s", db_exam.unique_record_id, animal_id)
    return {
        "message": "Medical examination recorded successfully",
        "exam": db_exam,
        "exam_id": db_exam.exam_id,
        "unique_record_id": db_exam.unique_record_id,
    }


@router.put("/medical/exam/{exam_id}", response_model=MedicalExamUpdated)
def update_medical_exam(exam_id: int, exam_update: MedicalExamUpdate, db: Session = Depends(get_db)):
    """Update an examination. Fields left out or null keep their value."""
    exam = db.query(MedicalExam).filter(MedicalExam.exam_id == exam_id).first()
    if not exam:
        raise HTTPException(status_code=404, detail="Medical examination not found")

    for field, value in exam_update.model_dump(exclude_none=True).items():
        setattr(exam, field, value)
    exam.updated_at = utcnow()

    db.commit()
    db.refresh(exam)
    return {"message": "Medical examination updated successfully", "exam": exam}


# ==================== Diagnostic Results ====================

@router.post(
    "/animals/{animal_id}/medical/diagnostics",
    response_model=DiagnosticImportResponse,
    status_code=201,
)
def import_diagnostic_results(
    animal_id: int,
    payload: DiagnosticImportRequest,
    db: Session = Depends(get_db),
):
    """Import a batch of diagnostic results. Either all are stored or none."""
    if not payload.results:
        raise HTTPException(status_code=400, detail="Diagnostic results array is required")

    _get_animal_or_404(db, animal_id)

    exam_ids = {r.exam_id for r in payload.results if r.exam_id is not None}
    if exam_ids:
        known = {
            row.exam_id
            for row in db.query(MedicalExam.exam_id).filter(MedicalExam.exam_id.in_(exam_ids)).all()
        }
        if exam_ids - known:
            raise HTTPException(status_code=400, detail=f"Unknown exam ID(s): {sorted(exam_ids - known)}")

    created = []
    for result in payload.results:
        data = result.model_dump()
        data["test_date"] = data["test_date"] or utcnow().date()
        db_result = DiagnosticResult(animal_id=animal_id, imported_by=payload.imported_by, **data)
        db.add(db_result)
        created.append(db_result)

    try:
        db.flush()
        for db_result in created:
            db_result.unique_record_id = make_tracking_id(DIAGNOSTIC_ID_PREFIX, db_result.result_id)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error importing diagnostic results for animal %s", animal_id)
        raise HTTPException(status_code=500, detail="Database error importing diagnostic results")

    for db_result in created:
        db.refresh(db_result)

    return {
        "message": f"{len(created)} diagnostic result(s) imported successfully",
        "imported_count": len(created),
        "records": created,
    }


@router.put("/medical/diagnostic/{result_id}", response_model=DiagnosticResultUpdated)
def update_diagnostic_result(
    result_id: int,
    result_update: DiagnosticResultUpdate,
    db: Session = Depends(get_db),
):
    """Update a diagnostic result. Fields left out or null keep their value."""
    result = db.query(DiagnosticResult).filter(DiagnosticResult.result_id == result_id).first()
    if not result:
        raise HTTPException(status_code=404, detail="Diagnostic result not found")

    for field, value in result_update.model_dump(exclude_none=True).items():
        setattr(result, field, value)
    result.updated_at = utcnow()

    db.commit()
    db.refresh(result)
    return {"message": "Diagnostic result updated successfully", "result": result}


# ==================== Files ====================

@router.post("/animals/{animal_id}/medical/files", response_model=MedicalFilesUploaded, status_code=201)
def upload_medical_files(
    animal_id: int,
    files: Optional[list[UploadFile]] = File(None),
    exam_id: Optional[int] = Form(None),
    result_id: Optional[int] = Form(None),
    file_category: str = Form("Other"),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    uploaded_by: str = Form("System"),
    access_level: str = Form("Restricted"),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: MedicalFileStorage = Depends(get_file_storage),
):
    """
    Upload up to MAX_UPLOAD_FILES medical files for an animal.

    Every file is checked for type and size before anything is written.
    If the metadata rows cannot be stored, the saved blobs are removed.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files: at most {settings.MAX_UPLOAD_FILES} per upload",
        )

    _get_animal_or_404(db, animal_id)

    payloads = []
    for upload in files:
        if upload.content_type not in ALLOWED_MIME_TYPES:
            raise HTTPException(
                status_code=400,
                detail="File type not allowed. Supported: images, PDF, text, Word documents",
            )
        data = upload.file.read()
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File '{upload.filename}' exceeds the {settings.MAX_UPLOAD_BYTES} byte limit",
            )
        payloads.append((upload, data))

    stored = []
    created = []
    try:
        for upload, data in payloads:
            blob = storage.save(upload.filename, data)
            stored.append(blob)
            db_file = MedicalFile(
                animal_id=animal_id,
                exam_id=exam_id,
                result_id=result_id,
                original_filename=upload.filename,
                storage_filename=blob.storage_filename,
                file_path=blob.file_path,
                mime_type=upload.content_type,
                file_size_bytes=blob.size_bytes,
                file_category=file_category,
                description=description,
                tags=tags,
                uploaded_by=uploaded_by,
                access_level=access_level,
                notes=notes,
            )
            db.add(db_file)
            created.append(db_file)

        db.flush()
        for db_file in created:
            db_file.unique_file_id = make_tracking_id(FILE_ID_PREFIX, db_file.file_id)
        db.commit()
    except (SQLAlchemyError, OSError):
        db.rollback()
        logger.exception("Error saving medical files for animal %s", animal_id)
        for blob in stored:
            try:
                storage.delete(blob.storage_filename)
            except OSError:
                logger.exception("Error cleaning up file %s", blob.storage_filename)
        raise HTTPException(status_code=500, detail="Error saving medical files")

    for db_file in created:
        db.refresh(db_file)

    return {
        "message": f"{len(created)} medical file(s) uploaded successfully",
        "uploaded_count": len(created),
        "files": created,
    }


def _file_with_links(medical_file: MedicalFile) -> MedicalFileWithLinks:
    """File metadata plus tracking IDs of the exam and diagnostic it is attached to."""
    linked = MedicalFileWithLinks.model_validate(medical_file)
    if medical_file.exam:
        linked.exam_record_id = medical_file.exam.unique_record_id
        linked.exam_date = medical_file.exam.exam_date
        linked.veterinarian = medical_file.exam.veterinarian
    if medical_file.result:
        linked.diagnostic_record_id = medical_file.result.unique_record_id
        linked.test_name = medical_file.result.test_name
        linked.test_date = medical_file.result.test_date
    return linked


@router.get("/animals/{animal_id}/medical/files", response_model=AnimalMedicalFiles)
def list_animal_medical_files(animal_id: int, db: Session = Depends(get_db)):
    """Active medical files for an animal, newest first."""
    try:
        files = _active_files(db, MedicalFile.animal_id == animal_id)
        linked = [_file_with_links(f) for f in files]
    except SQLAlchemyError:
        logger.exception("Database error fetching medical files for animal %s", animal_id)
        raise HTTPException(status_code=500, detail="Database error fetching medical files")

    return AnimalMedicalFiles(animal_id=animal_id, total_files=len(linked), files=linked)


@router.get("/medical/files/{file_id}/download")
def download_medical_file(
    file_id: int,
    request: Request,
    db: Session = Depends(get_db),
    storage: MedicalFileStorage = Depends(get_file_storage),
):
    """Stream a medical file as an attachment and record the download."""
    medical_file = (
        db.query(MedicalFile)
        .filter(MedicalFile.file_id == file_id, MedicalFile.is_active.is_(True))
        .first()
    )
    if not medical_file:
        raise HTTPException(status_code=404, detail="Medical file not found")

    if not storage.exists(medical_file.storage_filename):
        raise HTTPException(status_code=404, detail="File not found on disk")

    db.add(MedicalAuditLog(
        record_type="File",
        record_id=file_id,
        unique_record_id=medical_file.unique_file_id,
        action_type="Downloaded",
        changed_by="System",
        ip_address=request.client.host if request.client else "Unknown",
    ))
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to log access to medical file %s", file_id, exc_info=True)

    return FileResponse(
        storage.path_for(medical_file.storage_filename),
        media_type=medical_file.mime_type or "application/octet-stream",
        filename=medical_file.original_filename,
    )


# ==================== Search and Reporting ====================

@router.get("/medical/recent", response_model=RecentMedicalActivity)
def recent_medical_activity(
    days: int = Query(30, ge=1, le=3650),
    limit: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Recent medical activity across all animals."""
    try:
        records = list_recent_activity(db, days=days, limit=limit)
    except SQLAlchemyError:
        logger.exception("Database error fetching recent medical activity")
        raise HTTPException(status_code=500, detail="Database error fetching recent activity")

    return RecentMedicalActivity(period_days=days, total_records=len(records), records=records)


@router.get("/medical/summary", response_model=MedicalSummaryResponse)
def medical_summary(db: Session = Depends(get_db)):
    """Facility-wide medical summary with last-7-days activity by type."""
    try:
        overall = get_overall_summary(db)
        recent = count_activity_by_type(list_recent_activity(db, days=7))
    except SQLAlchemyError:
        logger.exception("Database error generating medical summary")
        raise HTTPException(status_code=500, detail="Database error generating summary")

    return MedicalSummaryResponse(
        overall_summary=overall,
        recent_activity_by_type=recent,
        generated_at=utcnow(),
    )
