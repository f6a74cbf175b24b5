import requests

from medicamp.constant_file import (CD_KEY, CLIPDROP_API_URL, IMGBB_API_KEY,
                                    IMGBB_API_URL, UPSTREAM_TIMEOUT)
from medicamp.upstream import UpstreamError, call_upstream


def get_image_buffer(prompt: str, category: str) -> bytes:
    """Render the prompt with ClipDrop text-to-image and return the JPEG bytes."""
    final_prompt = f"imagine a {category} : {prompt}"
    r = requests.post(
        CLIPDROP_API_URL,
        headers={"x-api-key": CD_KEY},
        files={"prompt": (None, final_prompt)},
        timeout=UPSTREAM_TIMEOUT,
    )
    if r.status_code >= 400:
        raise UpstreamError("image generator", r.text, r.status_code)
    return r.content


def upload_image(buffer: bytes, prompt: str) -> dict:
    """Host the image on imgBB."""
    r = requests.post(
        IMGBB_API_URL,
        params={"key": IMGBB_API_KEY},
        files={"image": (f"{prompt}.jpg", buffer, "image/jpeg")},
        timeout=UPSTREAM_TIMEOUT,
    )
    if r.status_code >= 400:
        raise UpstreamError("image host", r.text, r.status_code)
    return r.json()


async def generate_image_url(prompt: str, category: str) -> str:
    buffer = await call_upstream("image generator", get_image_buffer, prompt, category)
    hosted = await call_upstream("image host", upload_image, buffer, prompt)
    data = hosted.get("data") or {}
    url = data.get("display_url") or data.get("url")
    if not url:
        raise UpstreamError("image host", "response carried no image url")
    return url
