import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Optional, Union

from scad_backend.app.schemas.llm import ImageAttachment


DEFAULT_MIME_TYPE = "application/octet-stream"


async def encode_image(source: Union[bytes, str, Path], mime_type: Optional[str] = None) -> ImageAttachment:
    """Read an image into memory and return it as a base64 attachment.

    ``source`` is either the raw image bytes or a path to the image file. The
    MIME type falls back to a guess from the file name.
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        path = Path(source)
        data = await asyncio.to_thread(path.read_bytes)
        if not mime_type:
            mime_type = mimetypes.guess_type(path.name)[0]

    if not data:
        raise ValueError("Image is empty")

    return ImageAttachment(
        data=base64.b64encode(data).decode("ascii"),
        mime_type=mime_type or DEFAULT_MIME_TYPE,
    )
