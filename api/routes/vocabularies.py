"""
Admin vocabulary API routes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from api.dependencies import get_import_service, get_vocabulary_service
from api.models.schemas import (
    ImportResponseSchema, MessageSchema, TranslateRequestSchema,
    TranslateResponseSchema, VocabularyCreateSchema, VocabularyListSchema,
    VocabularyResponseSchema, VocabularyUpdateSchema
)
from services.vocabulary_import_service import ImportSummary, VocabularyImportService
from services.vocabulary_service import VocabularyService
from utils.error_handling import VocabdeskError
from logger_config import logger

router = APIRouter()


def import_message(summary: ImportSummary) -> str:
    """Human readable outcome of an import."""
    if summary.failed > 0 and summary.success == 0:
        return "Import failed - all rows failed"
    if summary.failed > 0:
        return (
            f"Import completed with {summary.success} succeeded, "
            f"{summary.failed} failed"
        )
    if summary.success > 0:
        return f"Imported {summary.success} vocabularies"
    return "Import completed"


@router.post(
    "/import",
    response_model=ImportResponseSchema,
    response_model_exclude_none=True
)
def import_vocabularies(
    file: UploadFile = File(..., description="CSV or Excel file with columns word, translation, topicId"),
    service: VocabularyImportService = Depends(get_import_service)
) -> dict:
    """
    Bulk import vocabularies from a spreadsheet.

    Args:
        file: Uploaded .csv, .xlsx or .xls file
        service: Import service

    Returns:
        Summary message and per-row results
    """
    try:
        content = file.file.read()
        logger.info(f"Importing vocabularies from '{file.filename}' ({len(content)} bytes)")
        summary = service.import_file(content, file.filename or "")
        return {"message": import_message(summary), "results": summary}
    except VocabdeskError:
        raise
    except Exception as e:
        logger.error(f"Import endpoint error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/translate", response_model=TranslateResponseSchema)
def translate_vocabularies(
    request: TranslateRequestSchema,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Fill missing definition translations of the given vocabularies."""
    return {"updated": service.retranslate(request.vocabulary_ids)}


@router.post("", response_model=VocabularyResponseSchema, status_code=201)
def create_vocabulary(
    payload: VocabularyCreateSchema,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Create a vocabulary with its meanings."""
    vocabulary = service.create(payload.model_dump())
    return {"message": "Vocabulary created", "vocabulary": vocabulary}


@router.get("", response_model=VocabularyListSchema)
def list_vocabularies(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Word contains"),
    status: Optional[bool] = Query(None, description="Active flag"),
    is_deleted: Optional[bool] = Query(None, description="Soft-delete flag"),
    topic_id: Optional[str] = Query(None, description="Topic filter"),
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """List vocabularies, newest first."""
    return service.list(
        page=page,
        limit=limit,
        search=search,
        status=status,
        is_deleted=is_deleted,
        topic_id=topic_id
    )


@router.get("/{vocabulary_id}", response_model=VocabularyResponseSchema)
def get_vocabulary(
    vocabulary_id: str,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Get a vocabulary by ID."""
    return {"vocabulary": service.get(vocabulary_id)}


@router.patch("/{vocabulary_id}", response_model=VocabularyResponseSchema)
def update_vocabulary(
    vocabulary_id: str,
    payload: VocabularyUpdateSchema,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Update a vocabulary."""
    vocabulary = service.update(vocabulary_id, payload.model_dump(exclude_unset=True))
    return {"message": "Vocabulary updated", "vocabulary": vocabulary}


@router.delete("/{vocabulary_id}", response_model=MessageSchema)
def delete_vocabulary(
    vocabulary_id: str,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Soft-delete a vocabulary."""
    service.delete(vocabulary_id)
    return {"message": "Vocabulary deleted"}


@router.delete("/{vocabulary_id}/force", response_model=MessageSchema)
def force_delete_vocabulary(
    vocabulary_id: str,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Permanently delete a soft-deleted vocabulary."""
    service.force_delete(vocabulary_id)
    return {"message": "Vocabulary permanently deleted"}


@router.put("/{vocabulary_id}/restore", response_model=MessageSchema)
def restore_vocabulary(
    vocabulary_id: str,
    service: VocabularyService = Depends(get_vocabulary_service)
) -> dict:
    """Restore a soft-deleted vocabulary."""
    service.restore(vocabulary_id)
    return {"message": "Vocabulary restored"}
