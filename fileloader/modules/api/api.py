import json
import re
from pathlib import Path
from fastapi import FastAPI, Query, HTTPException, APIRouter
from fastapi.responses import PlainTextResponse, JSONResponse, Response
import fastapi_swagger_dark as fsd

from fileloader import __version__
from fileloader.modules.errors import (
    DecodeError,
    FileNotInArchiveError,
    InvalidReferenceError,
    TransportError,
)
from fileloader.modules.finders.filters import FileFilter
from fileloader.modules.finders.references import resolve_reference
from fileloader.modules.keepers.archive_cache import ArchiveCache
from fileloader.modules.keepers.loader import FileLoader, guess_mime_type
from fileloader.modules.finders.tar_parser import FileRecord, bytes_to_text

app = FastAPI(
    title="FileLoader API",
    docs_url=None,
    description="""
**FileLoader API**
* Serve files out of remote tar archives
* Each archive is downloaded once and kept in memory
    """,
    version=__version__,
    )

# Create a router for the dark docs
router = APIRouter()

# Install dark theme on the router
fsd.install(router)

# Include the router in the app
app.include_router(router)

# One cache for every request served by this process
archives = ArchiveCache()


def _http_error(e: Exception) -> HTTPException:
    """Map fileloader errors onto HTTP status codes."""
    if isinstance(e, FileNotInArchiveError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidReferenceError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, DecodeError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


async def _open(url: str) -> FileLoader:
    try:
        return await archives.open(url)
    except (TransportError, DecodeError) as e:
        raise _http_error(e)


async def _require(url: str, name: str) -> FileRecord:
    loader = await _open(url)
    try:
        return loader.require(name)
    except FileNotInArchiveError as e:
        raise _http_error(e)


def _file_response(record: FileRecord) -> Response:
    filename = Path(record.name).name
    return Response(
        content=record.content,
        media_type=guess_mime_type(record.name),
        headers={
            "Content-Length": str(record.size),
            "Content-Disposition": f'inline; filename="{filename}"',
        },
    )


@app.get("/files")
async def list_files(
    url: str = Query(..., description="Archive URL"),
    pattern: str = Query(default=None, description="Regular expression on file names"),
):
    """
    ## /files

    List the files of an archive.

    - Returns name, size and mtime (Unix seconds) per file, in archive order.

    - Example: `/files?url=https://example.com/bundle.tar&pattern=\\.js$`
    """
    file_filter = None
    if pattern:
        try:
            file_filter = FileFilter.by_pattern(pattern)
        except re.error as e:
            raise HTTPException(status_code=400, detail=f"Invalid pattern: {e}")

    loader = await _open(url)
    records = loader.get_files(file_filter)
    return JSONResponse(content=[r.to_dict() for r in records], status_code=200)


@app.get("/file")
async def get_file(
    url: str = Query(..., description="Archive URL"),
    name: str = Query(..., description="Path of the file inside the archive"),
):
    """
    ## /file

    Return the raw bytes of one file.
    """
    return _file_response(await _require(url, name))


@app.get("/text", response_class=PlainTextResponse)
async def get_text(
    url: str = Query(..., description="Archive URL"),
    name: str = Query(..., description="Path of the file inside the archive"),
):
    """
    ## /text

    Return one file as text (one character per byte).
    """
    record = await _require(url, name)
    return bytes_to_text(record.content)


@app.get("/json")
async def get_json(
    url: str = Query(..., description="Archive URL"),
    name: str = Query(..., description="Path of the file inside the archive"),
):
    """
    ## /json

    Return one file parsed as JSON.
    """
    record = await _require(url, name)
    try:
        content = json.loads(bytes_to_text(record.content))
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=422, detail=f"{record.name} is not valid JSON: {e}")
    return JSONResponse(content=content, status_code=200)


@app.get("/resolve")
async def resolve(ref: str = Query(..., description="data:FileLoader.js,<archive url>,<path>")):
    """
    ## /resolve

    Return the file named by an archive reference.

    - Example: `/resolve?ref=data:FileLoader.js,https://example.com/bundle.tar,img/logo.png`
    """
    try:
        record = await resolve_reference(ref, archives)
    except (TransportError, DecodeError, FileNotInArchiveError, InvalidReferenceError) as e:
        raise _http_error(e)
    return _file_response(record)
