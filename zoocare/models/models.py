from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from zoocare.core.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored by every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_tracking_id(prefix: str, pk: int) -> str:
    """Build a medical tracking ID such as EXAM-000042."""
    return f"{prefix}-{pk:06d}"


EXAM_ID_PREFIX = "EXAM"
DIAGNOSTIC_ID_PREFIX = "DIAG"
FILE_ID_PREFIX = "FILE"


class Species(Base):
    __tablename__ = "species"

    species_id = Column(Integer, primary_key=True, index=True)
    species_name = Column(String(100), nullable=False, unique=True)
    base_notes = Column(Text, nullable=True)

    animals = relationship("Animal", back_populates="species")


class FeedItem(Base):
    __tablename__ = "feed_items"

    feed_id = Column(Integer, primary_key=True, index=True)
    feed_name = Column(String(100), nullable=False, unique=True, index=True)
    manufacturer = Column(String(100), nullable=True)
    cost_per_kg = Column(Float, nullable=False)
    calories_per_kg = Column(Float, nullable=True)
    protein_percentage = Column(Float, nullable=True)
    fat_percentage = Column(Float, nullable=True)
    fiber_percentage = Column(Float, nullable=True)
    calcium_mg_per_kg = Column(Float, nullable=True)

    diet_components = relationship("DietComponent", back_populates="feed")


class Diet(Base):
    __tablename__ = "diets"

    diet_id = Column(Integer, primary_key=True, index=True)
    diet_name = Column(String(100), nullable=False, unique=True)
    total_ration_size_kg = Column(Float, nullable=True)
    ration_size_kg = Column(Float, nullable=True)
    feeding_frequency = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    components = relationship("DietComponent", back_populates="diet", cascade="all, delete-orphan")
    animals = relationship("Animal", back_populates="current_diet")


class DietComponent(Base):
    __tablename__ = "diet_components"

    component_id = Column(Integer, primary_key=True, index=True)
    diet_id = Column(Integer, ForeignKey("diets.diet_id"), nullable=False, index=True)
    feed_id = Column(Integer, ForeignKey("feed_items.feed_id"), nullable=False, index=True)
    percentage_in_diet = Column(Float, nullable=False)

    diet = relationship("Diet", back_populates="components")
    feed = relationship("FeedItem", back_populates="diet_components")


class Animal(Base):
    __tablename__ = "animals"

    animal_id = Column(Integer, primary_key=True, index=True)
    animal_name = Column(String(100), nullable=False, index=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(String(20), nullable=False)
    weight_kg = Column(Float, nullable=False)
    species_id = Column(Integer, ForeignKey("species.species_id"), nullable=False)
    current_diet_id = Column(Integer, ForeignKey("diets.diet_id"), nullable=True)

    species = relationship("Species", back_populates="animals")
    current_diet = relationship("Diet", back_populates="animals")


class Location(Base):
    __tablename__ = "locations"

    location_id = Column(Integer, primary_key=True, index=True)
    animal_id = Column(Integer, ForeignKey("animals.animal_id"), nullable=False, index=True)
    location_timestamp = Column(DateTime, nullable=False, default=utcnow)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    speed = Column(Float, nullable=True)
    location_status = Column(String(50), nullable=True)


class MedicalExam(Base):
    __tablename__ = "medical_exams"

    exam_id = Column(Integer, primary_key=True, index=True)
    unique_record_id = Column(String(20), unique=True, index=True, nullable=True)
    animal_id = Column(Integer, ForeignKey("animals.animal_id"), nullable=False, index=True)
    exam_date = Column(Date, nullable=False)
    veterinarian = Column(String(100), nullable=True)
    exam_type = Column(String(50), default="Routine")
    weight_kg = Column(Float, nullable=True)
    temperature_c = Column(Float, nullable=True)
    heart_rate_bpm = Column(Integer, nullable=True)
    respiratory_rate_rpm = Column(Integer, nullable=True)
    blood_pressure = Column(String(20), nullable=True)
    body_condition_score = Column(Float, nullable=True)
    exam_notes = Column(Text, nullable=True)
    diagnosis = Column(Text, nullable=True)
    treatment_plan = Column(Text, nullable=True)
    medications_prescribed = Column(Text, nullable=True)
    follow_up_required = Column(Boolean, default=False)
    follow_up_date = Column(Date, nullable=True)
    exam_status = Column(String(20), default="Completed")
    created_by = Column(String(100), default="System")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    animal = relationship("Animal")
    diagnostics = relationship("DiagnosticResult", back_populates="exam")
    files = relationship("MedicalFile", back_populates="exam")


class DiagnosticResult(Base):
    __tablename__ = "diagnostic_results"

    result_id = Column(Integer, primary_key=True, index=True)
    unique_record_id = Column(String(20), unique=True, index=True, nullable=True)
    exam_id = Column(Integer, ForeignKey("medical_exams.exam_id"), nullable=True)
    animal_id = Column(Integer, ForeignKey("animals.animal_id"), nullable=False, index=True)
    test_name = Column(String(100), nullable=False)
    test_category = Column(String(50), default="Other")
    test_date = Column(Date, nullable=False)
    lab_name = Column(String(100), nullable=True)
    test_method = Column(String(100), nullable=True)
    result_value = Column(String(255), nullable=False)
    units = Column(String(50), nullable=True)
    reference_range = Column(String(100), nullable=True)
    abnormal_flag = Column(String(20), default="Normal")
    notes = Column(Text, nullable=True)
    interpretation = Column(Text, nullable=True)
    clinical_significance = Column(Text, nullable=True)
    result_status = Column(String(20), default="Final")
    imported_by = Column(String(100), default="System")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    animal = relationship("Animal")
    exam = relationship("MedicalExam", back_populates="diagnostics")
    files = relationship("MedicalFile", back_populates="result")


class MedicalFile(Base):
    __tablename__ = "medical_files"

    file_id = Column(Integer, primary_key=True, index=True)
    unique_file_id = Column(String(20), unique=True, index=True, nullable=True)
    animal_id = Column(Integer, ForeignKey("animals.animal_id"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("medical_exams.exam_id"), nullable=True)
    result_id = Column(Integer, ForeignKey("diagnostic_results.result_id"), nullable=True)
    original_filename = Column(String(255), nullable=False)
    storage_filename = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    mime_type = Column(String(100), nullable=True)
    file_size_bytes = Column(Integer, nullable=False, default=0)
    file_category = Column(String(50), default="Other")
    description = Column(Text, nullable=True)
    tags = Column(String(255), nullable=True)
    uploaded_by = Column(String(100), default="System")
    access_level = Column(String(20), default="Restricted")
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    uploaded_at = Column(DateTime, default=utcnow)

    animal = relationship("Animal")
    exam = relationship("MedicalExam", back_populates="files")
    result = relationship("DiagnosticResult", back_populates="files")


class MedicalAuditLog(Base):
    __tablename__ = "medical_audit_log"

    audit_id = Column(Integer, primary_key=True, index=True)
    record_type = Column(String(20), nullable=False)
    record_id = Column(Integer, nullable=False)
    unique_record_id = Column(String(20), nullable=True)
    action_type = Column(String(20), nullable=False)
    changed_by = Column(String(100), default="System")
    ip_address = Column(String(45), nullable=True)
    changed_at = Column(DateTime, default=utcnow)
