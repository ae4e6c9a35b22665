import re
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.core.config import settings
from app.core.errors import StoreError, UploadError
from app.schemas.quiz.quiz_base import ImageUploaded
from app.services.images import ext_for_upload
from app.services.quiz_store import QuizStore, final_image_path, get_quiz_store, question_image_path

upload_router = APIRouter(prefix="/uploads", tags=["Uploads"])

QUESTION_SLOT_RE = re.compile(r"^question-([A-Za-z0-9_-]{1,64})$")


@upload_router.put("/{draft_id}/{slot}", response_model=ImageUploaded)
def upload_image(
    draft_id: uuid.UUID,
    slot: str,
    file: UploadFile = File(...),
    store: QuizStore = Depends(get_quiz_store),
):
    content_type = (file.content_type or "").lower()
    ext = ext_for_upload(content_type, file.filename)

    if slot == "final":
        path = final_image_path(str(draft_id), ext)
    else:
        match = QUESTION_SLOT_RE.match(slot)
        if not match:
            raise HTTPException(status_code=400, detail="Unknown image slot")
        path = question_image_path(str(draft_id), match.group(1), ext)

    max_bytes = settings.MAX_UPLOAD_IMAGE_BYTES
    data = file.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image must be under {max_bytes // (1024 * 1024)}MB")

    try:
        url = store.upload_image(path, data, content_type, filename=file.filename)
    except UploadError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StoreError as e:
        raise HTTPException(status_code=500, detail="Upload failed") from e

    return ImageUploaded(url=url)
