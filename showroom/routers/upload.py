import os

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import FileResponse, RedirectResponse

from showroom.services.image_storage import ImageStorage, get_image_storage, guess_content_type
from showroom.utils.exceptions import NotFoundError

router = APIRouter(tags=["Uploads"], prefix="/uploads")


@router.get("/{file_name}")
def serve_file(file_name: str, storage: ImageStorage = Depends(get_image_storage)) -> Response:
    # only bare names, never a path out of the upload folder
    if os.path.basename(file_name) != file_name or file_name.startswith("."):
        raise NotFoundError("File not found")

    if storage.filesystem in ("s3", "azure"):
        # redirect to a short-lived signed url
        return RedirectResponse(storage.presigned_url(file_name), status_code=status.HTTP_302_FOUND)

    local_path = storage.local_path(file_name)
    if not os.path.isfile(local_path):
        raise NotFoundError("File not found")
    return FileResponse(local_path, media_type=guess_content_type(file_name))
