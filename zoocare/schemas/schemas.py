"""Pydantic schemas for request/response validation."""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field


# Species schemas
class SpeciesCreate(BaseModel):
    species_name: str = Field(..., max_length=100)
    base_notes: Optional[str] = None


class SpeciesResponse(BaseModel):
    species_id: int
    species_name: str

    class Config:
        from_attributes = True


class SpeciesCreated(BaseModel):
    message: str
    insertId: int
    species_name: str


# Feed item schemas
class FeedItemCreate(BaseModel):
    feed_name: str = Field(..., min_length=1, max_length=100)
    manufacturer: Optional[str] = Field(None, max_length=100)
    cost_per_kg: float = Field(..., ge=0, le=9999.99, description="Cost per kg, two decimal places")
    calories_per_kg: Optional[float] = Field(None, ge=0)
    protein_percentage: Optional[float] = Field(None, ge=0, le=100)
    fat_percentage: Optional[float] = Field(None, ge=0, le=100)
    fiber_percentage: Optional[float] = Field(None, ge=0, le=100)
    calcium_mg_per_kg: Optional[float] = Field(None, ge=0)


class FeedItemSummary(BaseModel):
    feed_id: int
    feed_name: str

    class Config:
        from_attributes = True


class FeedDietUsage(BaseModel):
    diet_name: str
    percentage: float


class FeedItemDetail(BaseModel):
    feed_id: int
    feed_name: str
    manufacturer: Optional[str]
    cost_per_kg: float
    calories_per_kg: Optional[float]
    protein_percentage: Optional[float]
    fat_percentage: Optional[float]
    fiber_percentage: Optional[float]
    calcium_mg_per_kg: Optional[float]
    diets: list[FeedDietUsage] = []


class FeedItemCreated(BaseModel):
    message: str
    insertId: int
    feed_name: str


# Diet schemas
class DietComponentCreate(BaseModel):
    feed_id: int
    percentage_in_diet: float = Field(..., ge=0, le=100, description="Share of daily mass (0-100)")


class DietCreate(BaseModel):
    diet_name: str = Field(..., min_length=1, max_length=100)
    total_ration_size_kg: Optional[float] = Field(None, ge=0, description="Total kg per day, if known")
    ration_size_kg: float = Field(..., ge=0, description="kg per feeding")
    feeding_frequency: int = Field(..., ge=0, le=48, description="Feedings per day")
    notes: Optional[str] = None
    components: list[DietComponentCreate] = []


class DietSummary(BaseModel):
    diet_id: int
    diet_name: str

    class Config:
        from_attributes = True


class DietCreated(BaseModel):
    insertId: int
    diet_name: str
    message: str


# Animal schemas
class AnimalCreate(BaseModel):
    animal_name: str = Field(..., min_length=1, max_length=100)
    birth_date: Optional[date] = None
    gender: str = Field(..., min_length=1, max_length=20)
    weight_kg: float = Field(..., gt=0)
    species_id: int
    current_diet_id: Optional[int] = None


class AnimalUpdate(AnimalCreate):
    pass


class AnimalSummary(BaseModel):
    animal_id: int
    animal_name: str

    class Config:
        from_attributes = True


class AnimalResponse(BaseModel):
    animal_id: int
    animal_name: str
    birth_date: Optional[date]
    gender: str
    weight_kg: float
    species_id: int
    current_diet_id: Optional[int]

    class Config:
        from_attributes = True


class AnimalCreated(BaseModel):
    message: str
    animal_id: int
    animal_name: str


class AnimalUpdated(BaseModel):
    message: str
    animal_id: int


# Report schemas
class FeedComponentCost(BaseModel):
    feed_id: int
    feed_name: Optional[str]
    percentage_in_diet: float
    kg_per_day: float
    cost_per_day: float


class AnimalFeedCost(BaseModel):
    animal_id: int
    animal_name: str
    diet_id: int
    diet_name: Optional[str]
    daily_kg: float
    daily_kg_basis: str  # "total_ration_size_kg" or "ration_size_kg*feeding_frequency"
    feed_components: list[FeedComponentCost]
    total_cost_per_day: float


class FeedCostTotal(BaseModel):
    feed_id: int
    feed_name: Optional[str]
    kg_per_day: float
    cost_per_day: float


class DailyFeedCostReport(BaseModel):
    perAnimal: list[AnimalFeedCost]
    perFeed: list[FeedCostTotal]
    totalCostPerDay: float


class DietHealthOverview(BaseModel):
    totalAnimals: int
    averageHealthScore: float
    totalDiets: int


class DietHealthResult(BaseModel):
    diet_id: int
    diet_name: str
    animal_count: int
    health_score: float
    alert_count: int
    alert_level: str
    weight_gain: str  # e.g. "1.2 kg/week"
    feed_efficiency: str


class DietHealthReport(BaseModel):
    overview: DietHealthOverview
    diets: list[DietHealthResult]


# Location schemas
class LiveLocation(BaseModel):
    location_id: int
    animal_id: int
    animal_name: str
    location_timestamp: datetime
    latitude: float
    longitude: float
    speed: Optional[float]
    location_status: Optional[str]


# Medical exam schemas
class MedicalExamCreate(BaseModel):
    exam_date: date
    veterinarian: Optional[str] = Field(None, max_length=100)
    exam_type: str = Field("Routine", max_length=50)
    weight_kg: Optional[float] = Field(None, gt=0)
    temperature_c: Optional[float] = None
    heart_rate_bpm: Optional[int] = Field(None, ge=0)
    respiratory_rate_rpm: Optional[int] = Field(None, ge=0)
    blood_pressure: Optional[str] = Field(None, max_length=20)
    body_condition_score: Optional[float] = Field(None, ge=0)
    exam_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    medications_prescribed: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None
    created_by: str = Field("System", max_length=100)


class MedicalExamUpdate(BaseModel):
    exam_date: Optional[date] = None
    veterinarian: Optional[str] = Field(None, max_length=100)
    exam_type: Optional[str] = Field(None, max_length=50)
    weight_kg: Optional[float] = Field(None, gt=0)
    temperature_c: Optional[float] = None
    heart_rate_bpm: Optional[int] = Field(None, ge=0)
    respiratory_rate_rpm: Optional[int] = Field(None, ge=0)
    blood_pressure: Optional[str] = Field(None, max_length=20)
    body_condition_score: Optional[float] = Field(None, ge=0)
    exam_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    medications_prescribed: Optional[str] = None
    follow_up_required: Optional[bool] = None
    follow_up_date: Optional[date] = None
    exam_status: Optional[str] = Field(None, max_length=20)


class MedicalExamResponse(BaseModel):
    exam_id: int
    unique_record_id: Optional[str]
    animal_id: int
    exam_date: date
    veterinarian: Optional[str]
    exam_type: Optional[str]
    weight_kg: Optional[float]
    temperature_c: Optional[float]
    heart_rate_bpm: Optional[int]
    respiratory_rate_rpm: Optional[int]
    blood_pressure: Optional[str]
    body_condition_score: Optional[float]
    exam_notes: Optional[str]
    diagnosis: Optional[str]
    treatment_plan: Optional[str]
    medications_prescribed: Optional[str]
    follow_up_required: Optional[bool]
    follow_up_date: Optional[date]
    exam_status: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class MedicalExamCreated(BaseModel):
    message: str
    exam: MedicalExamResponse
    exam_id: int
    unique_record_id: str


class MedicalExamUpdated(BaseModel):
    message: str
    exam: MedicalExamResponse


# Diagnostic result schemas
class DiagnosticResultCreate(BaseModel):
    exam_id: Optional[int] = None
    test_name: str = Field(..., min_length=1, max_length=100)
    test_category: str = Field("Other", max_length=50)
    test_date: Optional[date] = None  # Defaults to today
    lab_name: Optional[str] = Field(None, max_length=100)
    test_method: Optional[str] = Field(None, max_length=100)
    result_value: str = Field(..., min_length=1, max_length=255)
    units: Optional[str] = Field(None, max_length=50)
    reference_range: Optional[str] = Field(None, max_length=100)
    abnormal_flag: str = Field("Normal", max_length=20)
    notes: Optional[str] = None
    interpretation: Optional[str] = None
    clinical_significance: Optional[str] = None
    result_status: str = Field("Final", max_length=20)


class DiagnosticImportRequest(BaseModel):
    results: list[DiagnosticResultCreate] = []
    imported_by: str = Field("System", max_length=100)


class DiagnosticResultUpdate(BaseModel):
    test_name: Optional[str] = Field(None, min_length=1, max_length=100)
    test_category: Optional[str] = Field(None, max_length=50)
    test_date: Optional[date] = None
    lab_name: Optional[str] = Field(None, max_length=100)
    test_method: Optional[str] = Field(None, max_length=100)
    result_value: Optional[str] = Field(None, min_length=1, max_length=255)
    units: Optional[str] = Field(None, max_length=50)
    reference_range: Optional[str] = Field(None, max_length=100)
    abnormal_flag: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    interpretation: Optional[str] = None
    clinical_significance: Optional[str] = None
    result_status: Optional[str] = Field(None, max_length=20)


class DiagnosticResultResponse(BaseModel):
    result_id: int
    unique_record_id: Optional[str]
    exam_id: Optional[int]
    animal_id: int
    test_name: str
    test_category: Optional[str]
    test_date: date
    lab_name: Optional[str]
    test_method: Optional[str]
    result_value: str
    units: Optional[str]
    reference_range: Optional[str]
    abnormal_flag: Optional[str]
    notes: Optional[str]
    interpretation: Optional[str]
    clinical_significance: Optional[str]
    result_status: Optional[str]
    imported_by: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class DiagnosticImportResponse(BaseModel):
    message: str
    imported_count: int
    records: list[DiagnosticResultResponse]


class DiagnosticResultUpdated(BaseModel):
    message: str
    result: DiagnosticResultResponse


# Medical file schemas
class MedicalFileResponse(BaseModel):
    file_id: int
    unique_file_id: Optional[str]
    animal_id: int
    exam_id: Optional[int]
    result_id: Optional[int]
    original_filename: str
    mime_type: Optional[str]
    file_category: Optional[str]
    description: Optional[str]
    tags: Optional[str]
    file_size_bytes: int
    uploaded_at: Optional[datetime]
    uploaded_by: Optional[str]
    access_level: Optional[str]

    class Config:
        from_attributes = True


class MedicalFileWithLinks(MedicalFileResponse):
    exam_record_id: Optional[str] = None
    exam_date: Optional[date] = None
    veterinarian: Optional[str] = None
    diagnostic_record_id: Optional[str] = None
    test_name: Optional[str] = None
    test_date: Optional[date] = None


class MedicalFilesUploaded(BaseModel):
    message: str
    uploaded_count: int
    files: list[MedicalFileResponse]


class AnimalMedicalFiles(BaseModel):
    animal_id: int
    total_files: int
    files: list[MedicalFileWithLinks]


class AnimalMedicalSummary(BaseModel):
    animal_id: int
    total_exams: int
    total_diagnostic_results: int
    total_files: int
    last_exam_date: Optional[date]
    last_test_date: Optional[date]


class AnimalMedicalOverview(BaseModel):
    animal_id: int
    summary: Optional[AnimalMedicalSummary]
    exams: list[MedicalExamResponse]
    diagnostics: list[DiagnosticResultResponse]
    files: list[MedicalFileResponse]
    total_records: int


class MedicalActivity(BaseModel):
    record_type: str  # "Exam", "Diagnostic" or "File"
    record_id: int
    unique_record_id: Optional[str]
    animal_id: int
    animal_name: Optional[str]
    activity_date: datetime
    description: Optional[str]


class RecentMedicalActivity(BaseModel):
    period_days: int
    total_records: int
    records: list[MedicalActivity]


class MedicalOverallSummary(BaseModel):
    total_animals_with_records: int
    animals_with_exams: int
    total_examinations: int
    total_diagnostic_results: int
    total_files: int
    avg_exams_per_animal: Optional[float]
    most_recent_exam: Optional[date]
    most_recent_test: Optional[date]


class ActivityCount(BaseModel):
    record_type: str
    count: int


class MedicalSummaryResponse(BaseModel):
    overall_summary: MedicalOverallSummary
    recent_activity_by_type: list[ActivityCount]
    generated_at: datetime
