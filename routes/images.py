from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from schemas.image import ImageUploadResponse
from utils.context import BoardContext, get_context
from utils.session import get_session_id
from utils.storage import ALLOWED_EXTENSIONS, file_extension

router = APIRouter()


@router.post("/images", response_model=ImageUploadResponse)
def upload_image(
    image: UploadFile = File(...),
    context: BoardContext = Depends(get_context),
    session_id: str = Depends(get_session_id),
):
    """
    Upload an image for a note that is about to be posted

    The returned URL goes into the note's image_url. Upload first and create
    the note only once this succeeded.
    """
    if file_extension(image.filename) not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only PNG, JPEG or GIF images are allowed")

    max_bytes = context.images.max_bytes
    data = image.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Image is larger than {max_bytes} bytes")
    if not data:
        raise HTTPException(status_code=400, detail="Image file is empty")

    url = context.images.upload(session_id, image.filename, data)
    return ImageUploadResponse(url=url)
