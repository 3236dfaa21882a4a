#app\services\storage.py
import base64, logging, requests, uuid
from app.core.config import settings
from app.core.errors import StorageError

logger = logging.getLogger(__name__)

def upload_image(data: bytes, content_type: str, path: str) -> str:
    """Uploads to Supabase Storage via REST; returns public URL (bucket must be public).

    Without Supabase credentials the image is kept inline as a data URL.
    """
    if not (settings.supabase_url and settings.supabase_service_role):
        b64 = base64.b64encode(data).decode('utf-8')
        return f"data:{content_type};base64,{b64}"
    url = f"{settings.supabase_url}/storage/v1/object/{settings.supabase_bucket}/{path}"
    try:
        r = requests.post(url, headers={
            "Authorization": f"Bearer {settings.supabase_service_role}",
            "Content-Type": content_type,
            "x-upsert": "true",
        }, data=data, timeout=30)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Image upload to {path} failed: {e}", exc_info=True)
        raise StorageError("Could not upload the image") from e
    # public URL pattern:
    return f"{settings.supabase_url}/storage/v1/object/public/{settings.supabase_bucket}/{path}"

def make_object_key(prefix: str, filename: str) -> str:
    ext = (filename.rsplit(".",1)[-1] if "." in filename else "jpg").lower()
    return f"{prefix}/{uuid.uuid4().hex}.{ext}"
