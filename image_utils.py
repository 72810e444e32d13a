import io

from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError


def read_image(file: UploadFile) -> tuple:
    """Read an uploaded file and make sure Pillow can decode it.

    Returns (data, filename, mime_type).
    """
    image_data = file.file.read()
    if not image_data:
        raise HTTPException(status_code=400, detail="Image file is empty")

    try:
        with Image.open(io.BytesIO(image_data)) as image:
            image.verify()
            image_format = image.format
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise HTTPException(status_code=400, detail="Invalid image file")

    mime_type = Image.MIME.get(image_format, file.content_type or "application/octet-stream")
    return image_data, file.filename or "image", mime_type
