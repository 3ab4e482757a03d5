#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import logging, tempfile, os, sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent.parent))
from shared.errors import SearchValueError
from shared.serializer import OutputMode
from shared.size_guard import InputSizeGuard
from shared.step import DEFAULT_SESSION_SEARCH_PATH, LocalFileContext, StepParameters, describe, execute

app = FastAPI(title="JSON-Lite search values")
logger = logging.getLogger(__name__)

request_counter = Counter("search_value_requests_total", "Total search value requests")
failure_counter = Counter("search_value_failures_total", "Search value requests that failed")
process_duration = Histogram("search_value_process_seconds", "Time spent deriving search values")
size_guard = InputSizeGuard(threshold_mb=float(os.environ.get("STREAMING_THRESHOLD_MB", "8")))

@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}

@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

@app.get("/describe", tags=["step"])
def step_description():
    return describe()

@app.post("/search-values", tags=["step"])
async def search_values(file: UploadFile = File(...), session_search_path: str = Form(DEFAULT_SESSION_SEARCH_PATH)):
    request_counter.inc()
    chunk_size = 8*1024*1024  # 8 MB
    with tempfile.TemporaryDirectory() as workdir:
        input_path = Path(workdir) / "input.json"
        output_path = Path(workdir) / "search_values.out"
        with open(input_path, "wb") as tmp:
            while True:
                chunk = await file.read(chunk_size)
                if not chunk:
                    break
                tmp.write(chunk)
        try:
            with process_duration.time():
                result = execute(
                    LocalFileContext(),
                    StepParameters.from_mapping({
                        "inputDataFile": input_path,
                        "outputSearchValuesFile": output_path,
                        "sessionSearchPath": session_search_path,
                    }),
                    guard=size_guard,
                )
        except SearchValueError as e:
            failure_counter.inc()
            logger.error("search values for %s failed: %s", file.filename, e)
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            failure_counter.inc()
            logger.exception("search values for %s failed", file.filename)
            raise HTTPException(status_code=500, detail=str(e))
        body = output_path.read_text(encoding="utf-8")

    if result.output_mode is OutputMode.JSON:
        return Response(content=body, media_type="application/json")
    return PlainTextResponse(body)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
