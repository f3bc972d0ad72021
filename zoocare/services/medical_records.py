"""Aggregate queries over medical exams, diagnostic results and files."""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from zoocare.models.models import (
    Animal,
    DiagnosticResult,
    MedicalExam,
    MedicalFile,
    utcnow,
)

RECORD_TYPE_EXAM = "Exam"
RECORD_TYPE_DIAGNOSTIC = "Diagnostic"
RECORD_TYPE_FILE = "File"


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _counts_by_animal(db: Session, id_column, animal_column, *criteria) -> dict[int, int]:
    rows = (
        db.query(animal_column, func.count(id_column))
        .filter(*criteria)
        .group_by(animal_column)
        .all()
    )
    return {animal_id: count for animal_id, count in rows}


def get_animal_summary(db: Session, animal_id: int) -> Optional[dict]:
    """Record counts and latest dates for one animal, or None without records."""
    total_exams, last_exam_date = (
        db.query(func.count(MedicalExam.exam_id), func.max(MedicalExam.exam_date))
        .filter(MedicalExam.animal_id == animal_id)
        .one()
    )
    total_results, last_test_date = (
        db.query(func.count(DiagnosticResult.result_id), func.max(DiagnosticResult.test_date))
        .filter(DiagnosticResult.animal_id == animal_id)
        .one()
    )
    total_files = (
        db.query(func.count(MedicalFile.file_id))
        .filter(MedicalFile.animal_id == animal_id, MedicalFile.is_active.is_(True))
        .scalar()
    )

    if not (total_exams or total_results or total_files):
        return None

    return {
        "animal_id": animal_id,
        "total_exams": total_exams,
        "total_diagnostic_results": total_results,
        "total_files": total_files,
        "last_exam_date": last_exam_date,
        "last_test_date": last_test_date,
    }


def get_overall_summary(db: Session) -> dict:
    """Facility-wide medical record totals."""
    exams = _counts_by_animal(db, MedicalExam.exam_id, MedicalExam.animal_id)
    results = _counts_by_animal(db, DiagnosticResult.result_id, DiagnosticResult.animal_id)
    files = _counts_by_animal(
        db, MedicalFile.file_id, MedicalFile.animal_id, MedicalFile.is_active.is_(True)
    )

    animals_with_records = set(exams) | set(results) | set(files)
    total_exams = sum(exams.values())

    return {
        "total_animals_with_records": len(animals_with_records),
        "animals_with_exams": len(exams),
        "total_examinations": total_exams,
        "total_diagnostic_results": sum(results.values()),
        "total_files": sum(files.values()),
        "avg_exams_per_animal": (
            total_exams / len(animals_with_records) if animals_with_records else None
        ),
        "most_recent_exam": db.query(func.max(MedicalExam.exam_date)).scalar(),
        "most_recent_test": db.query(func.max(DiagnosticResult.test_date)).scalar(),
    }


def list_recent_activity(db: Session, days: int, limit: Optional[int] = None) -> list[dict]:
    """Exams, diagnostics and files dated within the last `days` days, newest first."""
    since = utcnow() - timedelta(days=days)

    exams = (
        db.query(MedicalExam, Animal.animal_name)
        .join(Animal, Animal.animal_id == MedicalExam.animal_id)
        .filter(MedicalExam.exam_date >= since.date())
        .order_by(MedicalExam.exam_date.desc())
        .limit(limit)
        .all()
    )
    results = (
        db.query(DiagnosticResult, Animal.animal_name)
        .join(Animal, Animal.animal_id == DiagnosticResult.animal_id)
        .filter(DiagnosticResult.test_date >= since.date())
        .order_by(DiagnosticResult.test_date.desc())
        .limit(limit)
        .all()
    )
    files = (
        db.query(MedicalFile, Animal.animal_name)
        .join(Animal, Animal.animal_id == MedicalFile.animal_id)
        .filter(MedicalFile.is_active.is_(True), MedicalFile.uploaded_at >= since)
        .order_by(MedicalFile.uploaded_at.desc())
        .limit(limit)
        .all()
    )

    activity = []
    for exam, animal_name in exams:
        activity.append({
            "record_type": RECORD_TYPE_EXAM,
            "record_id": exam.exam_id,
            "unique_record_id": exam.unique_record_id,
            "animal_id": exam.animal_id,
            "animal_name": animal_name,
            "activity_date": _as_datetime(exam.exam_date),
            "description": exam.exam_type,
        })
    for result, animal_name in results:
        activity.append({
            "record_type": RECORD_TYPE_DIAGNOSTIC,
            "record_id": result.result_id,
            "unique_record_id": result.unique_record_id,
            "animal_id": result.animal_id,
            "animal_name": animal_name,
            "activity_date": _as_datetime(result.test_date),
            "description": result.test_name,
        })
    for medical_file, animal_name in files:
        activity.append({
            "record_type": RECORD_TYPE_FILE,
            "record_id": medical_file.file_id,
            "unique_record_id": medical_file.unique_file_id,
            "animal_id": medical_file.animal_id,
            "animal_name": animal_name,
            "activity_date": medical_file.uploaded_at,
            "description": medical_file.original_filename,
        })

    activity.sort(key=lambda a: a["activity_date"], reverse=True)
    if limit is not None:
        activity = activity[:limit]
    return activity


def count_activity_by_type(activity: list[dict]) -> list[dict]:
    counts: dict[str, int] = {}
    for item in activity:
        counts[item["record_type"]] = counts.get(item["record_type"], 0) + 1
    return [{"record_type": t, "count": c} for t, c in counts.items()]
